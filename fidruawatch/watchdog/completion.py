# fidruawatch/watchdog/completion.py

"""
Background promotion of idle folders into completed batches
"""
import logging
import threading
import time
from typing import Callable, List, Optional

from ..batches.models import HistorySnapshot
from ..core.gateway import StateGateway
from .notify import Notifier, BATCH_COMPLETED

logger = logging.getLogger(__name__)

UPLOAD_COMPLETE_TIMEOUT = 30.0  # seconds without a qualifying event
POLL_INTERVAL = 1.0


class CompletionChecker:
    """
    Polls the tracker registry once per ``poll_interval`` and completes
    every folder idle for at least ``timeout`` seconds.

    Bound to one monitoring session: the loop ends on the first tick
    after that session stops (or is replaced by a new one). The lock is
    released before persisting history and before each notification.
    """

    def __init__(self, gateway: StateGateway,
                 notifier: Notifier,
                 session_id: int,
                 persist: Optional[Callable[[HistorySnapshot], object]] = None,
                 timeout: float = UPLOAD_COMPLETE_TIMEOUT,
                 poll_interval: float = POLL_INTERVAL,
                 sleep: Callable[[float], None] = time.sleep):
        self.gateway = gateway
        self.notifier = notifier
        self.session_id = session_id
        self.persist = persist
        self.timeout = timeout
        self.poll_interval = poll_interval
        self._sleep = sleep
        self.thread: Optional[threading.Thread] = None

    def start(self) -> threading.Thread:
        self.thread = threading.Thread(
            target=self.run,
            name=f"completion-checker-{self.session_id}",
            daemon=True,
        )
        self.thread.start()
        return self.thread

    def is_active(self) -> bool:
        with self.gateway as state:
            return state.is_current(self.session_id)

    def run(self):
        logger.debug(f"Completion checker started for session {self.session_id}")

        while True:
            self._sleep(self.poll_interval)
            if not self.is_active():
                break
            self.tick()

        logger.debug(f"Completion checker for session {self.session_id} exited")

    def tick(self, now: Optional[float] = None) -> List[str]:
        """
        One completion pass

        Args:
            now: Monotonic time to judge idleness against (defaults to the
                gateway clock)

        Returns:
            Folders whose batches were completed in this pass
        """
        with self.gateway as state:
            if not state.is_current(self.session_id):
                return []
            current = state.clock() if now is None else now
            stale = state.registry.stale_folders(current, self.timeout)

        completed = []
        for folder in stale:
            history = None
            with self.gateway as state:
                if not state.is_current(self.session_id):
                    break
                tracker = state.registry.get(folder)
                current = state.clock() if now is None else now
                # an event may have landed while the lock was released
                if tracker is None or tracker.idle_for(current) < self.timeout:
                    continue
                batch = state.registry.finalize(folder)
                if (batch is not None and self.persist is not None
                        and state.config.save_history):
                    history = state.history()

            if batch is None:
                continue

            if history is not None:
                self.persist(history)

            self.notifier.emit(BATCH_COMPLETED, folder)
            completed.append(folder)

        return completed
