"""
Shared fixtures for the FidruaWatch test suite.
"""

import time
from pathlib import Path
from typing import Callable, List

import pytest

from fidruawatch.utils.config import AppConfig
from fidruawatch.watchdog.events import WatchdogEvent, EventType
from fidruawatch.watchdog.monitor import UploadMonitor
from fidruawatch.watchdog.notify import BATCH_STARTED, BATCH_COMPLETED
from fidruawatch.watchdog.watcher import ChangeSource


# -----------------------------------------------------------------------------
# Test doubles
# -----------------------------------------------------------------------------

class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeSource(ChangeSource):
    """Synthetic change source: tests push events through ``emit``."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.callback = None
        self.watched = []
        self.released = []

    def watch(self, directory, recursive, callback):
        if self.fail:
            raise OSError("watch registration refused")
        self.callback = callback
        handle = object()
        self.watched.append((Path(directory), recursive, handle))
        return handle

    def unwatch(self, handle):
        self.released.append(handle)

    def emit(self, event_type: EventType, *paths: str, is_directory: bool = False):
        assert self.callback is not None, "source is not watching"
        self.callback(WatchdogEvent(event_type=event_type, paths=list(paths),
                                    is_directory=is_directory))

    def created(self, *paths: str):
        self.emit(EventType.CREATED, *paths)


class Recorder:
    """Collects outbound notifications per event name."""

    def __init__(self, monitor: UploadMonitor):
        self.started: List[str] = []
        self.completed: List[str] = []
        monitor.register_callback(BATCH_STARTED, self.started.append)
        monitor.register_callback(BATCH_COMPLETED, self.completed.append)


def wait_for_condition(condition_fn: Callable[[], bool], timeout: float = 5.0,
                       interval: float = 0.05) -> bool:
    start_time = time.time()
    while time.time() - start_time < timeout:
        if condition_fn():
            return True
        time.sleep(interval)
    return False


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def watch_dir(tmp_path: Path) -> Path:
    folder = tmp_path / "watch"
    folder.mkdir()
    return folder


@pytest.fixture
def config(watch_dir: Path) -> AppConfig:
    return AppConfig(watch_folder=str(watch_dir), file_types=[".mp4"], save_history=False)


@pytest.fixture
def monitor(config, source, clock, tmp_path):
    """Monitor on a synthetic source with a checker that never wakes on its own."""
    m = UploadMonitor(
        config=config,
        source=source,
        clock=clock,
        config_path=tmp_path / "config.json",
        history_path=tmp_path / "history.json",
        poll_interval=3600,
    )
    yield m
    m.stop()


@pytest.fixture
def recorder(monitor):
    return Recorder(monitor)
