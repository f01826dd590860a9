import asyncio
import shutil

import pytest
from sqlalchemy.exc import SQLAlchemyError

from conftest import make_submission
from runboard.core import database as database_module
from runboard.core.errors import NotFound, SchedulerStateError, StorageError
from runboard.services import BackupScheduler, BackupState


def _names(store):
    return sorted(record.name for record in store.list_ranked())


def test_snapshot_then_restore_round_trip(services):
    store, backups = services.store, services.backups
    store.insert(make_submission("A"))
    backups.snapshot()
    store.insert(make_submission("B"))

    backups.restore()

    assert _names(store) == ["A"]
    store.insert(make_submission("C"))
    assert _names(store) == ["A", "C"]


def test_snapshot_overwrites_previous_copy(services):
    store, backups = services.store, services.backups
    store.insert(make_submission("A"))
    backups.snapshot()
    store.insert(make_submission("B"))
    backups.snapshot()
    store.clear("game_progress")

    backups.restore()

    assert _names(store) == ["A", "B"]


def test_restore_without_snapshot_is_not_found(services):
    services.store.insert(make_submission("A"))

    with pytest.raises(NotFound):
        services.backups.restore()
    assert _names(services.store) == ["A"]


def test_failed_copy_reopens_original_database(services, monkeypatch):
    store, backups = services.store, services.backups
    store.insert(make_submission("A"))
    backups.snapshot()
    store.insert(make_submission("B"))

    def failing_copy(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(database_module.shutil, "copyfile", failing_copy)

    with pytest.raises(StorageError):
        backups.restore()

    monkeypatch.setattr(database_module.shutil, "copyfile", shutil.copyfile)
    assert _names(store) == ["A", "B"]


def test_reopen_failure_after_copy_keeps_restored_file(services, monkeypatch):
    store, backups = services.store, services.backups
    store.insert(make_submission("A"))
    backups.snapshot()
    store.insert(make_submission("B"))

    def failing_open(self):
        raise SQLAlchemyError("cannot open")

    monkeypatch.setattr(database_module.Database, "_open", failing_open)

    with pytest.raises(StorageError):
        backups.restore()

    live_path = services.database.path
    assert live_path.read_bytes() == backups.backup_path.read_bytes()


def test_start_takes_immediate_snapshot_and_stop_cancels(services):
    backups = services.backups

    async def scenario():
        assert backups.state is BackupState.STOPPED
        await backups.start()
        assert backups.state is BackupState.RUNNING
        assert backups.backup_path.is_file()
        assert backups.status()["lastBackupAt"] is not None

        with pytest.raises(SchedulerStateError):
            await backups.start()

        await backups.stop()
        assert backups.state is BackupState.STOPPED
        with pytest.raises(SchedulerStateError):
            await backups.stop()

    asyncio.run(scenario())


def test_failed_start_snapshot_leaves_scheduler_stopped(services, tmp_path):
    target_dir = tmp_path / "occupied"
    target_dir.mkdir()
    backups = BackupScheduler(services.database, target_dir, interval_seconds=300)

    async def scenario():
        with pytest.raises(StorageError):
            await backups.start()
        assert backups.state is BackupState.STOPPED
        assert backups.status()["lastError"]

    asyncio.run(scenario())


def test_recurring_snapshots_stop_after_stop(services):
    backups = BackupScheduler(
        services.database, services.backups.backup_path, interval_seconds=0.05
    )

    async def scenario():
        await backups.start()
        backups.backup_path.unlink()
        await asyncio.sleep(0.3)
        assert backups.backup_path.is_file()

        await backups.stop()
        backups.backup_path.unlink()
        await asyncio.sleep(0.3)
        assert not backups.backup_path.exists()

    asyncio.run(scenario())


def test_scheduled_failure_keeps_schedule_running(services, tmp_path):
    good_path = services.backups.backup_path
    bad_path = tmp_path / "not-a-file"
    bad_path.mkdir()
    backups = BackupScheduler(services.database, good_path, interval_seconds=0.05)

    async def scenario():
        await backups.start()
        backups.backup_path = bad_path
        await asyncio.sleep(0.3)
        assert backups.state is BackupState.RUNNING
        assert backups.last_error

        backups.backup_path = good_path
        good_path.unlink()
        await asyncio.sleep(0.3)
        assert good_path.is_file()
        assert backups.last_error is None
        await backups.stop()

    asyncio.run(scenario())
