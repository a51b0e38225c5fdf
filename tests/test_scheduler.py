"""
Scheduler wiring tests.
"""
import logging
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from snipbin import main, scheduler
from snipbin.config import settings
from snipbin.database import PasteRepository
from snipbin.sweeper import ExpirationSweeper


@pytest.fixture
def tmp_sweeper(monkeypatch, storage_root):
    storage_root.mkdir(parents=True, exist_ok=True)
    sweeper = ExpirationSweeper(storage_root)
    monkeypatch.setattr(scheduler, "sweeper", sweeper)
    return sweeper


def test_sweep_task_runs_one_pass(tmp_sweeper, storage_root, backdate):
    shard = storage_root / "07"
    shard.mkdir()
    path = shard / "0700000000000000_1h.txt"
    path.write_bytes(b"t\nb")
    backdate(path, 2)

    report = scheduler.sweep_expired_task()

    assert report.deleted == 1
    assert tmp_sweeper.offset == 16
    assert not path.exists()


def test_sweep_task_logs_unlistable_shards(tmp_sweeper, storage_root, caplog):
    (storage_root / "03").write_text("")

    with caplog.at_level(logging.INFO, logger="snipbin.scheduler"):
        scheduler.sweep_expired_task()

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "Could not list shard 03" in errors[0].getMessage()
    assert "0 deleted" in caplog.text


def test_app_lifecycle_starts_and_stops_scheduler(monkeypatch, tmp_sweeper, storage_root):
    monkeypatch.setattr(main, "db", PasteRepository(storage_root))

    with TestClient(main.app):
        running = scheduler.get_scheduler()
        assert running is not None
        job = running.get_job(scheduler.SWEEP_JOB_ID)
        assert job.max_instances == 1
        assert job.coalesce is True
        assert job.trigger.interval == timedelta(minutes=settings.SWEEP_INTERVAL_MINUTES)

    assert scheduler.get_scheduler() is None
