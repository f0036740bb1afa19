"""Foto fija (snapshot) del estado de una exportación.

Los routers y las plantillas nunca leen el job directamente: reciben una
copia inmutable tomada bajo el lock del job, así que status, progreso y
resultado siempre son coherentes entre sí.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.core.enums import ArchiveStatus


class ArchiveSnapshot(BaseModel):
    """Estado observable de un job de exportación en un instante dado."""

    status: ArchiveStatus = ArchiveStatus.IDLE
    progress: float = 0.0  # 0.0 - 1.0
    result: Optional[Path] = None  # Sólo presente en DONE
    error_message: Optional[str] = None  # Sólo presente en FAILED

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def result_available(self) -> bool:
        return self.status == ArchiveStatus.DONE and self.result is not None

    @property
    def percent(self) -> int:
        """Progreso como porcentaje entero, útil para la barra de progreso."""
        return int(round(self.progress * 100))
