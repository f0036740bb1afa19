"""Registro de jobs de exportación, uno por usuario.

Los jobs se crean la primera vez que un usuario los pide y viven mientras
el proceso esté en marcha (no hay expiración).
"""

from __future__ import annotations

import threading
from typing import Callable, Dict

from app.services.archive_job import ArchiveJob

JobFactory = Callable[[str], ArchiveJob]


class ArchiveRegistry:
    """Tabla usuario -> ArchiveJob protegida por su propio lock."""

    def __init__(self, job_factory: JobFactory) -> None:
        self.job_factory = job_factory
        self._jobs: Dict[str, ArchiveJob] = {}
        self._lock = threading.Lock()

    def get_or_create(self, user_id: str) -> ArchiveJob:
        """Devuelve el job del usuario, creándolo en IDLE si no existe."""
        with self._lock:
            job = self._jobs.get(user_id)
            if job is None:
                job = self.job_factory(user_id)
                self._jobs[user_id] = job
            return job

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
