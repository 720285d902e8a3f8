"""
End-to-end test against a real watchdog observer.
"""

import pytest

from fidruawatch.batches.models import BatchStatus
from fidruawatch.utils.config import AppConfig
from fidruawatch.watchdog.monitor import UploadMonitor
from fidruawatch.watchdog.watcher import ObserverChangeSource

from conftest import Recorder, wait_for_condition

pytestmark = pytest.mark.integration


@pytest.fixture(params=[False, True], ids=["native", "polling"])
def live_monitor(request, watch_dir, tmp_path):
    watch_dir = watch_dir.resolve()
    config = AppConfig(watch_folder=str(watch_dir), file_types=[".mp4"], save_history=False)
    monitor = UploadMonitor(
        config=config,
        source=ObserverChangeSource(use_polling=request.param, poll_interval=0.1),
        config_path=tmp_path / "config.json",
        history_path=tmp_path / "history.json",
        timeout=0.5,
        poll_interval=0.1,
    )
    yield monitor
    monitor.stop()


def test_files_grouped_and_completed(live_monitor, watch_dir):
    watch_dir = watch_dir.resolve()
    recorder = Recorder(live_monitor)
    assert live_monitor.start() is True

    upload = watch_dir / "session"
    upload.mkdir()
    (upload / "a.mp4").write_bytes(b"\x00" * 64)
    (upload / "b.mp4").write_bytes(b"\x00" * 64)
    (upload / "notes.txt").write_text("skip me")

    assert wait_for_condition(lambda: recorder.completed == [str(upload)], timeout=10.0)

    batches = live_monitor.get_state().batches
    assert len(batches) == 1
    assert batches[0].status is BatchStatus.COMPLETED
    assert sorted(batches[0].files) == ["a.mp4", "b.mp4"]
    assert recorder.started == [str(upload)]


def test_nothing_recorded_after_stop(live_monitor, watch_dir):
    assert live_monitor.start() is True
    assert live_monitor.stop() is True

    (watch_dir / "late.mp4").write_bytes(b"\x00")
    assert not wait_for_condition(lambda: live_monitor.get_state().batches, timeout=0.5)
