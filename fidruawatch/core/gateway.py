# fidruawatch/core/gateway.py

"""
Lock-guarded state shared by the watcher callback, the completion
checker and the command handlers
"""
import threading
import time
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from ..batches.models import Batch, BatchStatus, HistorySnapshot, MonitorState
from ..batches.registry import FolderTrackerRegistry
from ..batches.store import BatchStore
from ..utils.config import AppConfig


class StateGateway:
    """
    The single synchronization point for monitoring state.

    Configuration, the tracker registry, the batch store, the run flag
    and the watch handle are one unit behind one lock. Use the gateway as a context
    manager to hold the lock:

        with gateway as state:
            state.registry.record(folder, name, state.clock())

    Never do disk or notification I/O inside the ``with`` block.
    """

    def __init__(self, config: Optional[AppConfig] = None,
                 batches: Optional[Iterable[Batch]] = None,
                 clock: Callable[[], float] = time.monotonic):
        self._lock = threading.Lock()
        self.clock = clock
        self.config = config or AppConfig()

        self.store = BatchStore(batches)
        self.registry = FolderTrackerRegistry(self.store)

        self.is_running = False
        self.session_id = 0
        self.started_at: Optional[datetime] = None
        self.dir_count = 0
        self.watch_handle: Any = None
        self.history_version = 0

    def __enter__(self) -> "StateGateway":
        self._lock.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._lock.release()

    def begin_session(self, watch_handle: Any, now: Optional[datetime] = None) -> int:
        """Mark a session as running (lock held). Returns the new session id."""
        self.session_id += 1
        self.watch_handle = watch_handle
        self.is_running = True
        self.started_at = now or datetime.now()
        self.dir_count = 1
        return self.session_id

    def end_session(self) -> Any:
        """
        Mark the session as stopped and drop live trackers (lock held).

        Batches still uploading stay in the store as they are.

        Returns:
            The watch handle, for the caller to release
        """
        handle = self.watch_handle
        self.watch_handle = None
        self.is_running = False
        self.started_at = None
        self.dir_count = 0
        self.registry.clear()
        return handle

    def is_current(self, session_id: int) -> bool:
        return self.is_running and self.session_id == session_id

    def snapshot(self) -> MonitorState:
        """Aggregate state (lock held)"""
        return MonitorState(
            is_running=self.is_running,
            batches=self.store.snapshot(),
            unsigned_count=self.store.count(BatchStatus.COMPLETED),
            uploading_count=self.store.count(BatchStatus.UPLOADING),
            dir_count=self.dir_count,
            start_time=self.started_at.strftime("%H:%M:%S") if self.started_at else "",
        )

    def history(self) -> HistorySnapshot:
        """
        Copy of the store for persistence after the lock is released (lock held)

        Versions increase with every call, so a writer can tell which of two
        snapshots reflects the later state.
        """
        self.history_version += 1
        return HistorySnapshot(self.history_version, self.store.snapshot())
