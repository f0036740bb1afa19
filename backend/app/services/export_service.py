from __future__ import annotations

import json
from pathlib import Path
from typing import List

from app.models.contact import Contact


class ExportService:
    """
    Exporta la lista de contactos a un archivo final (JSON).
    """

    def export_contacts_json(self, contacts: List[Contact], output_path: Path) -> Path:
        """
        Escribe los contactos, en orden, como un array JSON legible.
        """
        # Nos aseguramos de que el directorio existe
        output_path.parent.mkdir(parents=True, exist_ok=True)

        payload = [c.model_dump(exclude={"errors"}) for c in contacts]

        # Escribimos primero a un temporal para no dejar un archivo a medias
        tmp_path = output_path.with_name(output_path.name + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp_path.replace(output_path)

        return output_path
