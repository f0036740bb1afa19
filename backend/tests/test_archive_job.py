import threading
import time
from pathlib import Path

import pytest

from app.core.enums import ArchiveStatus
from app.services.archive_job import ArchiveJob

RESULT = Path("archives/user.json")


def make_job(**kwargs) -> ArchiveJob:
    kwargs.setdefault("export", lambda: RESULT)
    kwargs.setdefault("steps", 5)
    kwargs.setdefault("step_interval", 0.0)
    return ArchiveJob(**kwargs)


def gated_export(gate: threading.Event, calls: list):
    """Export que se queda bloqueado hasta que el test abre la puerta."""

    def export() -> Path:
        calls.append(1)
        gate.wait(5)
        return RESULT

    return export


def test_new_job_is_idle():
    snapshot = make_job().snapshot()

    assert snapshot.status == ArchiveStatus.IDLE
    assert snapshot.progress == 0.0
    assert snapshot.result is None
    assert snapshot.result_available is False


def test_start_runs_to_completion():
    job = make_job()

    assert job.start() is True
    assert job.wait(timeout=5)

    snapshot = job.snapshot()
    assert snapshot.status == ArchiveStatus.DONE
    assert snapshot.progress == 1.0
    assert snapshot.result == RESULT
    assert snapshot.result_available is True
    assert job.result() == RESULT


def test_result_absent_until_done():
    gate, calls = threading.Event(), []
    job = make_job(export=gated_export(gate, calls))

    job.start()
    assert job.snapshot().status == ArchiveStatus.RUNNING
    assert job.result() is None

    gate.set()
    assert job.wait(timeout=5)
    assert job.result() == RESULT


def test_start_is_noop_unless_idle():
    gate, calls = threading.Event(), []
    job = make_job(export=gated_export(gate, calls))

    assert job.start() is True
    assert job.start() is False

    gate.set()
    job.wait(timeout=5)
    assert job.start() is False
    assert job.snapshot().status == ArchiveStatus.DONE
    assert len(calls) == 1


def test_concurrent_starts_schedule_single_worker():
    gate, calls = threading.Event(), []
    job = make_job(export=gated_export(gate, calls))
    barrier = threading.Barrier(10)
    results = []

    def starter():
        barrier.wait()
        results.append(job.start())

    threads = [threading.Thread(target=starter) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1

    gate.set()
    assert job.wait(timeout=5)
    assert len(calls) == 1
    assert job.snapshot().status == ArchiveStatus.DONE


def test_progress_is_monotonic_and_bounded():
    job = make_job(steps=20, step_interval=0.005)
    job.start()

    seen = []
    deadline = time.monotonic() + 5
    while time.monotonic() < deadline:
        snapshot = job.snapshot()
        seen.append(snapshot.progress)
        if snapshot.status != ArchiveStatus.RUNNING:
            break
        time.sleep(0.001)

    assert snapshot.status == ArchiveStatus.DONE
    assert all(0.0 <= p <= 1.0 for p in seen)
    assert seen == sorted(seen)


def test_snapshots_are_consistent_while_running():
    job = make_job(steps=50, step_interval=0.001)
    job.start()

    snapshots = []
    while True:
        snapshot = job.snapshot()
        snapshots.append(snapshot)
        if snapshot.status != ArchiveStatus.RUNNING:
            break

    for snapshot in snapshots:
        if snapshot.status == ArchiveStatus.DONE:
            assert snapshot.result == RESULT
            assert snapshot.progress == 1.0
        else:
            assert snapshot.result is None


def test_reset_cancels_running_worker():
    calls = []
    job = make_job(steps=1000, step_interval=0.01, export=lambda: calls.append(1) or RESULT)

    job.start()
    job.reset()

    # the cancelled worker wakes up immediately instead of finishing 1000 steps
    assert job.wait(timeout=1)
    assert calls == []
    snapshot = job.snapshot()
    assert snapshot.status == ArchiveStatus.IDLE
    assert snapshot.progress == 0.0
    assert snapshot.result is None


def test_reset_discards_late_result():
    gate, calls = threading.Event(), []
    job = make_job(export=gated_export(gate, calls))

    job.start()
    while not calls:
        time.sleep(0.001)
    job.reset()
    gate.set()
    assert job.wait(timeout=5)

    snapshot = job.snapshot()
    assert snapshot.status == ArchiveStatus.IDLE
    assert snapshot.result is None
    assert job.result() is None


def test_stale_worker_cannot_overwrite_new_run():
    gate = threading.Event()
    calls = []

    def export() -> Path:
        calls.append(1)
        if len(calls) == 1:
            gate.wait(5)
            return Path("stale.json")
        return RESULT

    job = make_job(export=export)
    job.start()
    while not calls:
        time.sleep(0.001)
    first_worker = job._worker

    job.reset()
    assert job.start() is True
    assert job.wait(timeout=5)

    gate.set()
    first_worker.join(5)

    assert job.snapshot().status == ArchiveStatus.DONE
    assert job.result() == RESULT


def test_reset_after_done_clears_state():
    job = make_job()
    job.start()
    job.wait(timeout=5)

    job.reset()

    snapshot = job.snapshot()
    assert snapshot.status == ArchiveStatus.IDLE
    assert snapshot.progress == 0.0
    assert snapshot.result is None


def test_job_can_run_again_after_reset():
    calls = []
    job = make_job(export=lambda: calls.append(1) or RESULT)

    job.start()
    job.wait(timeout=5)
    job.reset()
    assert job.start() is True
    job.wait(timeout=5)

    assert job.snapshot().status == ArchiveStatus.DONE
    assert len(calls) == 2


def test_export_failure_marks_job_failed():
    def export() -> Path:
        raise OSError("disk full")

    job = make_job(export=export)
    job.start()
    job.wait(timeout=5)

    snapshot = job.snapshot()
    assert snapshot.status == ArchiveStatus.FAILED
    assert snapshot.error_message == "disk full"
    assert snapshot.result is None
    assert job.result() is None

    # sólo reset() sale de FAILED
    assert job.start() is False
    job.reset()
    assert job.snapshot().status == ArchiveStatus.IDLE
    assert job.snapshot().error_message is None


def test_wait_without_worker_returns_immediately():
    assert make_job().wait(timeout=0) is True


@pytest.mark.parametrize("kwargs", [{"steps": 0}, {"step_interval": -1}])
def test_invalid_parameters_are_rejected(kwargs):
    with pytest.raises(ValueError):
        make_job(**kwargs)
