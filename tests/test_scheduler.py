import asyncio
import logging
import signal
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from apps.indexer import context as context_module
from apps.indexer import scheduler as scheduler_module
from apps.indexer.context import ServiceContext
from apps.indexer.coordinator import RunCoordinator
from apps.indexer.scheduler import JOB_ID, IndexingScheduler, in_run_window
from tests.helpers import FakeSubmitter, read_lines


def make_scheduler(settings, submitter) -> IndexingScheduler:
    coordinator = RunCoordinator(
        submitter,
        urls_file=settings.URLS_FILE,
        indexed_file=settings.INDEXED_FILE,
        start_from_url=settings.START_FROM_URL,
    )
    return IndexingScheduler(ServiceContext(settings=settings, coordinator=coordinator))


@pytest.mark.parametrize(
    "hour, minute, expected",
    [
        (9, 0, True),
        (9, 5, True),
        (9, 15, True),
        (9, 16, False),
        (9, 20, False),
        (8, 5, False),
        (10, 0, False),
    ],
)
def test_in_run_window(hour: int, minute: int, expected: bool) -> None:
    now = datetime(2024, 5, 1, hour, minute)
    assert in_run_window(now, start_hour=9, window_minutes=15) is expected


async def test_tick_outside_window_leaves_queue_untouched(make_settings, queue_files) -> None:
    urls_file, indexed_file = queue_files(["a", "b"])
    submitter = FakeSubmitter()
    scheduler = make_scheduler(make_settings(START_HOUR=9), submitter)

    report = await scheduler.tick(now=datetime(2024, 5, 1, 9, 20))

    assert report is None
    assert submitter.calls == []
    assert read_lines(urls_file) == ["a", "b"]
    assert read_lines(indexed_file) == []


async def test_tick_inside_window_runs(make_settings, queue_files) -> None:
    urls_file, indexed_file = queue_files(["a", "b"])
    submitter = FakeSubmitter()
    scheduler = make_scheduler(make_settings(START_HOUR=9), submitter)

    report = await scheduler.tick(now=datetime(2024, 5, 1, 9, 5))

    assert report is not None
    assert report.confirmed == ["a", "b"]
    assert submitter.calls == ["a", "b"]


async def test_failed_run_is_logged_and_swallowed(make_settings, caplog) -> None:
    # No queue files on disk
    scheduler = make_scheduler(make_settings(START_HOUR=9), FakeSubmitter())

    report = await scheduler.tick(now=datetime(2024, 5, 1, 9, 0))

    assert report is None
    failures = [r for r in caplog.records if r.getMessage() == "Indexing run failed"]
    assert len(failures) == 1
    assert failures[0].exc_info is not None


async def test_build_scheduler_registers_single_instance_interval_job(make_settings) -> None:
    scheduler = make_scheduler(make_settings(TICK_INTERVAL_SECONDS=300), FakeSubmitter())

    aps = scheduler.build_scheduler()
    job = aps.get_job(JOB_ID)

    assert job is not None
    assert job.trigger.interval == timedelta(seconds=300)
    assert job.max_instances == 1
    assert job.coalesce is True


async def test_run_once_runs_ungated(make_settings, queue_files, monkeypatch) -> None:
    urls_file, _ = queue_files(["a"])
    submitter = FakeSubmitter()
    closed_hour = (datetime.now().hour + 12) % 24
    scheduler = make_scheduler(make_settings(RUN_ONCE=True, START_HOUR=closed_hour), submitter)
    monkeypatch.setattr(scheduler, "setup_signal_handlers", lambda: None)

    await scheduler.start()

    assert submitter.calls == ["a"]
    assert scheduler.context.scheduler is None


def test_shutdown_without_scheduler_flushes_logs(make_settings, monkeypatch, caplog) -> None:
    caplog.set_level(logging.INFO)
    flushed = []
    monkeypatch.setattr(scheduler_module, "shutdown_logging", lambda: flushed.append(True))
    scheduler = make_scheduler(make_settings(), FakeSubmitter())

    scheduler.shutdown()

    assert flushed == [True]
    assert any(r.getMessage() == "Service stopped." for r in caplog.records)


def test_context_from_settings_wires_coordinator(make_settings, monkeypatch, tmp_path: Path) -> None:
    credentials = object()
    service = object()
    monkeypatch.setattr(context_module, "load_credentials", lambda path, scopes: credentials)
    monkeypatch.setattr(context_module, "build_indexing_service", lambda creds: service)
    settings = make_settings(START_FROM_URL=3, NOTIFICATION_TYPE="URL_DELETED")

    ctx = ServiceContext.from_settings(settings)

    assert ctx.coordinator.urls_file == settings.URLS_FILE
    assert ctx.coordinator.indexed_file == settings.INDEXED_FILE
    assert ctx.coordinator.start_from_url == 3
    assert ctx.coordinator.submitter.service is service
    assert ctx.coordinator.submitter.notification_type == "URL_DELETED"
    assert ctx.scheduler is None


async def test_signal_handlers_wake_shutdown_on_the_loop(make_settings, monkeypatch) -> None:
    scheduler = make_scheduler(make_settings(), FakeSubmitter())
    loop = asyncio.get_running_loop()
    registered = {}

    def fake_add_signal_handler(signum, callback, *args) -> None:
        registered[signum] = (callback, args)

    monkeypatch.setattr(loop, "add_signal_handler", fake_add_signal_handler)

    scheduler.setup_signal_handlers()

    assert set(registered) == {signal.SIGINT, signal.SIGTERM}
    callback, args = registered[signal.SIGTERM]
    callback(*args)
    assert scheduler.shutdown_event.is_set()
