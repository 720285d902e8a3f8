# fidruawatch/watchdog/monitor.py

"""
Monitoring session control and batch commands for FidruaWatch
"""
import logging
import threading
import time
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from ..batches.models import Batch, HistorySnapshot, MonitorState
from ..core.gateway import StateGateway
from ..utils.config import AppConfig, save_config
from ..utils.history import save_history
from .completion import CompletionChecker, UPLOAD_COMPLETE_TIMEOUT, POLL_INTERVAL
from .events import WatchdogEvent
from .notify import Notifier, BATCH_STARTED
from .patterns import UploadEventFilter
from .watcher import ChangeSource, ObserverChangeSource

logger = logging.getLogger(__name__)


class UploadMonitor:
    """
    Groups files arriving in the same folder into upload batches.

    Owns the StateGateway, the change source handle and the completion
    checker of the running session. Every command returns a plain
    success value; nothing raises for expected conditions.
    """

    def __init__(self, config: Optional[AppConfig] = None,
                 batches: Optional[Iterable[Batch]] = None,
                 source: Optional[ChangeSource] = None,
                 config_path: Union[str, Path, None] = None,
                 history_path: Union[str, Path, None] = None,
                 clock: Callable[[], float] = time.monotonic,
                 timeout: float = UPLOAD_COMPLETE_TIMEOUT,
                 poll_interval: float = POLL_INTERVAL):
        """
        Initialize upload monitor

        Args:
            config: Application settings (defaults if None)
            batches: Batches restored from history, newest first
            source: Change notification source (watchdog observer if None)
            config_path: Where set_config persists settings
            history_path: Where batch history is persisted
            clock: Monotonic clock used for inactivity
            timeout: Seconds of inactivity before a batch completes
            poll_interval: Completion checker period in seconds
        """
        self.gateway = StateGateway(config=config, batches=batches, clock=clock)
        self.source = source or ObserverChangeSource()
        self.notifier = Notifier()
        self.config_path = config_path
        self.history_path = history_path
        self.timeout = timeout
        self.poll_interval = poll_interval

        self._checker: Optional[CompletionChecker] = None

        # Serializes history writes; never taken while holding the gateway lock
        self._persist_lock = threading.Lock()
        self._persisted_version = 0

    # -- configuration -------------------------------------------------

    def get_config(self) -> AppConfig:
        with self.gateway as state:
            return state.config.copy()

    def set_config(self, config: AppConfig):
        """Replace settings; a running session keeps the ones it started with"""
        with self.gateway as state:
            state.config = config.copy()
        save_config(config, self.config_path)

    def register_callback(self, event_name: str, callback: Callable[[str], object]) -> bool:
        return self.notifier.register_callback(event_name, callback)

    # -- session control -----------------------------------------------

    def start(self) -> bool:
        """
        Start monitoring the configured watch folder

        Returns:
            False if already running, no folder is configured, the folder
            does not exist, or the watch could not be registered
        """
        with self.gateway as state:
            if state.is_running:
                logger.warning("Monitoring is already running")
                return False

            config = state.config.copy()
            if not config.watch_folder:
                logger.error("No watch folder configured")
                return False

            folder = Path(config.watch_folder)
            if not folder.is_dir():
                logger.error(f"Watch folder does not exist: {folder}")
                return False

            session_id = state.session_id + 1
            event_filter = UploadEventFilter.from_config(config)
            callback = partial(self._on_change, session_id, event_filter)

            try:
                handle = self.source.watch(folder, config.watch_subdirs, callback)
            except Exception as e:
                logger.error(f"Failed to watch {folder}: {e}")
                return False

            state.begin_session(handle)

            checker = CompletionChecker(
                gateway=self.gateway,
                notifier=self.notifier,
                session_id=session_id,
                persist=self._persist,
                timeout=self.timeout,
                poll_interval=self.poll_interval,
            )
            self._checker = checker

        checker.start()
        logger.info(f"Monitoring started: {folder} (subdirectories: {config.watch_subdirs})")
        return True

    def stop(self) -> bool:
        """
        Stop monitoring

        Live trackers are dropped; their batches stay in the store with
        status Uploading and whatever files they had accumulated.

        Returns:
            False if monitoring was not running
        """
        with self.gateway as state:
            if not state.is_running:
                return False
            dropped = len(state.registry)
            handle = state.end_session()
            self._checker = None

        try:
            self.source.unwatch(handle)
        except Exception as e:
            logger.error(f"Error releasing watch: {e}")

        if dropped:
            logger.info(f"Monitoring stopped with {dropped} batches still uploading")
        else:
            logger.info("Monitoring stopped")
        return True

    def check_completions(self, now: Optional[float] = None) -> List[str]:
        """Run one completion pass right away instead of waiting for the next tick"""
        with self.gateway:
            checker = self._checker
        if checker is None:
            return []
        return checker.tick(now)

    @property
    def is_running(self) -> bool:
        with self.gateway as state:
            return state.is_running

    # -- event path ----------------------------------------------------

    def _on_change(self, session_id: int, event_filter: UploadEventFilter,
                   event: WatchdogEvent):
        """Watcher callback: record accepted files, then announce new batches"""
        accepted = event_filter.accept(event)
        if not accepted:
            return

        for folder, file_name in accepted:
            with self.gateway as state:
                if not state.is_current(session_id):
                    return
                _, is_first = state.registry.record(folder, file_name, state.clock())

            if is_first:
                self.notifier.emit(BATCH_STARTED, folder)

    # -- batch commands ------------------------------------------------

    def sign_batch(self, batch_id: str) -> bool:
        """
        Sign one completed batch

        Returns:
            False if the batch is unknown or not in Completed status
        """
        with self.gateway as state:
            signed = state.store.sign(batch_id, datetime.now())
            history = self._history_if_enabled(state) if signed else None

        if history is not None:
            self._persist(history)
        if signed:
            logger.info(f"Batch {batch_id} signed")
        return signed

    def sign_all_batches(self) -> int:
        """Sign every completed batch with one shared timestamp"""
        with self.gateway as state:
            count = state.store.sign_all(datetime.now())
            history = self._history_if_enabled(state)

        if history is not None:
            self._persist(history)
        logger.info(f"Signed {count} batches")
        return count

    def clear_batches(self) -> int:
        """Remove signed batches"""
        with self.gateway as state:
            removed = state.store.clear_signed()
            history = self._history_if_enabled(state)

        if history is not None:
            self._persist(history)
        logger.info(f"Cleared {removed} signed batches")
        return removed

    def clear_all_batches(self) -> int:
        """Remove every batch regardless of status"""
        with self.gateway as state:
            removed = state.store.clear()
            history = self._history_if_enabled(state)

        if history is not None:
            self._persist(history)
        logger.info(f"Cleared all {removed} batches")
        return removed

    def get_state(self) -> MonitorState:
        with self.gateway as state:
            return state.snapshot()

    # -- persistence ---------------------------------------------------

    @staticmethod
    def _history_if_enabled(state: StateGateway) -> Optional[HistorySnapshot]:
        if not state.config.save_history:
            return None
        return state.history()

    def _persist(self, snapshot: HistorySnapshot) -> bool:
        """
        Write a history snapshot unless a later one is already on disk

        Snapshots are taken under the gateway lock but written after it is
        released, so writers from the checker thread and from commands can
        arrive out of order.
        """
        with self._persist_lock:
            if snapshot.version <= self._persisted_version:
                logger.debug(f"Skipping history snapshot {snapshot.version}, "
                             f"{self._persisted_version} already written")
                return True
            saved = save_history(snapshot.batches, self.history_path)
            if saved:
                self._persisted_version = snapshot.version
            return saved

    def save_history(self) -> bool:
        """Persist the current batch list if history is enabled"""
        with self.gateway as state:
            history = self._history_if_enabled(state)
        if history is None:
            return False
        return self._persist(history)
