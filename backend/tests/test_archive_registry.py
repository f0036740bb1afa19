import threading
from pathlib import Path

from app.core.enums import ArchiveStatus
from app.services.archive_job import ArchiveJob
from app.services.archive_registry import ArchiveRegistry


def make_registry(created: list | None = None) -> ArchiveRegistry:
    def factory(user_id: str) -> ArchiveJob:
        if created is not None:
            created.append(user_id)
        return ArchiveJob(
            export=lambda: Path(f"{user_id}.json"),
            steps=2,
            step_interval=0.0,
            name=user_id,
        )

    return ArchiveRegistry(job_factory=factory)


def test_get_or_create_is_idempotent():
    registry = make_registry()

    first = registry.get_or_create("alice")
    second = registry.get_or_create("alice")

    assert first is second
    assert len(registry) == 1


def test_users_get_independent_jobs():
    registry = make_registry()
    alice = registry.get_or_create("alice")
    bob = registry.get_or_create("bob")

    assert alice is not bob

    alice.start()
    alice.wait(timeout=5)

    assert alice.snapshot().status == ArchiveStatus.DONE
    assert alice.result() == Path("alice.json")
    assert bob.snapshot().status == ArchiveStatus.IDLE
    assert bob.snapshot().progress == 0.0


def test_concurrent_lookups_share_one_job():
    created = []
    registry = make_registry(created)
    barrier = threading.Barrier(20)
    jobs = []

    def lookup():
        barrier.wait()
        jobs.append(registry.get_or_create("shared"))

    threads = [threading.Thread(target=lookup) for _ in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(jobs) == 20
    assert all(job is jobs[0] for job in jobs)
    assert created == ["shared"]


def test_mutation_through_one_handle_is_visible_through_another():
    registry = make_registry()
    handle_a = registry.get_or_create("carol")
    handle_b = registry.get_or_create("carol")

    handle_a.start()
    handle_a.wait(timeout=5)

    assert handle_b.snapshot().status == ArchiveStatus.DONE
    handle_b.reset()
    assert handle_a.snapshot().status == ArchiveStatus.IDLE
