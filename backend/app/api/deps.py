"""Dependencias compartidas por los routers.

El middleware de `app.main` garantiza que cada petición trae un `user_id`
en `request.state`; aquí lo convertimos en el job de exportación del
usuario para que los endpoints no tengan que saber nada del registro.
"""

from fastapi import Depends, Request

from app.services.archive_job import ArchiveJob
from app.services.archive_store import archive_registry


def get_user_id(request: Request) -> str:
    return request.state.user_id


def get_archive_job(user_id: str = Depends(get_user_id)) -> ArchiveJob:
    return archive_registry.get_or_create(user_id)
