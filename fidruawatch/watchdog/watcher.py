# fidruawatch/watchdog/watcher.py

"""
Sources of filesystem change notifications
"""
import logging
from pathlib import Path
from typing import Any, Callable, Optional

from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from .events import WatchdogEvent
from .handlers import UploadEventHandler

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[WatchdogEvent], Any]


class ChangeSource:
    """
    Capability to deliver change notifications for a directory.

    ``watch`` registers ``callback`` for ``directory`` and returns an
    opaque handle, raising on failure. ``unwatch`` releases a handle.
    Callbacks may arrive on any thread but never from inside ``watch``
    itself, since the caller holds the state lock while registering.
    """

    def watch(self, directory: Path, recursive: bool, callback: ChangeCallback) -> Any:
        raise NotImplementedError

    def unwatch(self, handle: Any):
        raise NotImplementedError


class ObserverChangeSource(ChangeSource):
    """
    watchdog-backed change source, one observer per watch

    Args:
        use_polling: Use stat polling instead of native OS events
        poll_interval: Polling interval in seconds
        join_timeout: How long ``unwatch`` waits for the observer thread
    """

    def __init__(self, use_polling: bool = False,
                 poll_interval: float = 1.0,
                 join_timeout: Optional[float] = 5.0):
        self.use_polling = use_polling
        self.poll_interval = poll_interval
        self.join_timeout = join_timeout

    def _create_observer(self):
        if self.use_polling:
            logger.debug(f"Using polling observer (interval: {self.poll_interval}s)")
            return PollingObserver(timeout=self.poll_interval)
        return Observer()

    def watch(self, directory: Path, recursive: bool, callback: ChangeCallback) -> Any:
        observer = self._create_observer()
        observer.schedule(UploadEventHandler(callback), str(directory), recursive=recursive)
        observer.start()
        logger.info(f"Watching directory: {directory} (recursive: {recursive})")
        return observer

    def unwatch(self, handle: Any):
        if handle is None:
            return
        handle.stop()
        handle.join(timeout=self.join_timeout)
        logger.debug("Observer stopped")
