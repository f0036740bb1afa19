"""Interfaz HTML (htmx) para la exportación de contactos.

Los tres verbos sobre `/contacts/archive` devuelven el mismo fragmento
`archive_ui.html`, pintado a partir de una snapshot del job del usuario.
Mientras el job está en marcha, el propio fragmento vuelve a pedir
`GET /contacts/archive` cada medio segundo.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from app.api.deps import get_archive_job
from app.api.v1.archive import archive_file_response
from app.services.archive_job import ArchiveJob
from app.web.templating import templates

router = APIRouter(prefix="/contacts/archive", tags=["hypermedia"])


def render_archive_ui(request: Request, job: ArchiveJob) -> HTMLResponse:
    return templates.TemplateResponse(
        request, "archive_ui.html", {"archive": job.snapshot()}
    )


@router.post("", response_class=HTMLResponse)
async def start_archive(request: Request, job: ArchiveJob = Depends(get_archive_job)):
    job.start()
    return render_archive_ui(request, job)


@router.get("", response_class=HTMLResponse)
async def get_archive(request: Request, job: ArchiveJob = Depends(get_archive_job)):
    return render_archive_ui(request, job)


@router.delete("", response_class=HTMLResponse)
async def reset_archive(request: Request, job: ArchiveJob = Depends(get_archive_job)):
    job.reset()
    return render_archive_ui(request, job)


@router.get("/file")
async def download_archive(job: ArchiveJob = Depends(get_archive_job)):
    return archive_file_response(job)
