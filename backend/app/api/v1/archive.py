from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from app.api.deps import get_archive_job
from app.models.archive import ArchiveSnapshot
from app.services.archive_job import ArchiveJob

router = APIRouter(prefix="/archive", tags=["archive"])

ARCHIVE_FILENAME = "contacts.json"


def snapshot_payload(snapshot: ArchiveSnapshot) -> dict:
    """Forma JSON del estado de la exportación (sin exponer rutas internas)."""
    return {
        "status": snapshot.status,
        "progress": snapshot.progress,
        "result_available": snapshot.result_available,
        "error_message": snapshot.error_message,
    }


def archive_file_response(job: ArchiveJob) -> FileResponse:
    """Sirve el archivo exportado, o 400/404 si todavía no existe."""
    output_path = job.result()
    if output_path is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Archive is not ready.",
        )

    if not output_path.exists():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Archive file not found on disk.",
        )

    return FileResponse(
        path=output_path,
        media_type="application/json",
        filename=ARCHIVE_FILENAME,
    )


@router.get("", summary="Get archive status")
async def get_archive(job: ArchiveJob = Depends(get_archive_job)) -> dict:
    return snapshot_payload(job.snapshot())


@router.post(
    "",
    summary="Start exporting the contact archive",
    status_code=status.HTTP_202_ACCEPTED,
)
async def start_archive(job: ArchiveJob = Depends(get_archive_job)) -> dict:
    started = job.start()
    return {"started": started, **snapshot_payload(job.snapshot())}


@router.delete("", summary="Reset the archive")
async def reset_archive(job: ArchiveJob = Depends(get_archive_job)) -> dict:
    job.reset()
    return snapshot_payload(job.snapshot())


@router.get("/file", summary="Download the exported archive")
async def download_archive(job: ArchiveJob = Depends(get_archive_job)):
    return archive_file_response(job)
