"""Registro global de exportaciones, uno por usuario.

Igual que `contact_store`, exponemos una única instancia para toda la app.
La fábrica decide cómo se construye el job de cada usuario: cuántos pasos
simula, cuánto espera entre pasos y dónde escribe el archivo final.
"""

from pathlib import Path

from app.core.config import get_settings
from app.services.archive_job import ArchiveJob
from app.services.archive_registry import ArchiveRegistry
from app.services.contact_store import contact_service
from app.services.export_service import ExportService

export_service = ExportService()


def build_archive_job(user_id: str) -> ArchiveJob:
    """Crea un job nuevo (en IDLE) para el usuario indicado."""
    settings = get_settings()
    output_path: Path = settings.archive_dir / f"{user_id}.json"

    def export() -> Path:
        return export_service.export_contacts_json(contact_service.list_all(), output_path)

    return ArchiveJob(
        export=export,
        steps=settings.archive_steps,
        step_interval=settings.archive_step_interval,
        name=user_id,
    )


# Instancia global única para toda la app (MVP en memoria)
archive_registry = ArchiveRegistry(job_factory=build_archive_job)
