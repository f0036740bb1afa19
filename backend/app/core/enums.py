"""Enumeraciones compartidas que describen estados del archivo de contactos."""

from enum import Enum


class ArchiveStatus(str, Enum):
    """Estados posibles de la exportación de contactos de un usuario."""

    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"
