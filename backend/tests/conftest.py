from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models.contact import Contact
from app.services.archive_job import ArchiveJob
from app.services.archive_store import archive_registry, export_service
from app.services.contact_store import contact_service

SAMPLE_CONTACTS = [
    Contact(
        id=i,
        first=f"First{i}",
        last=f"Last{i}",
        email=f"user{i}@example.com",
        phone=f"555-01{i:02d}",
    )
    for i in range(1, 13)
]


@pytest.fixture
def contacts():
    contact_service.replace_all(SAMPLE_CONTACTS)
    yield contact_service
    contact_service.replace_all([])


@pytest.fixture
def fast_archives(tmp_path):
    """Registro limpio cuyos jobs terminan en milisegundos y escriben en tmp."""
    original_factory = archive_registry.job_factory

    def factory(user_id: str) -> ArchiveJob:
        output_path: Path = tmp_path / f"{user_id}.json"
        return ArchiveJob(
            export=lambda: export_service.export_contacts_json(
                contact_service.list_all(), output_path
            ),
            steps=4,
            step_interval=0.0,
            name=user_id,
        )

    archive_registry.job_factory = factory
    archive_registry._jobs.clear()
    yield archive_registry

    for job in list(archive_registry._jobs.values()):
        job.reset()
    archive_registry._jobs.clear()
    archive_registry.job_factory = original_factory


@pytest.fixture
def client():
    return TestClient(app)
