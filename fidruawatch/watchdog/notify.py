# fidruawatch/watchdog/notify.py

"""
Outbound batch lifecycle notifications
"""
import logging
from typing import Callable, Dict, List

from ..utils.logger import log_exception

logger = logging.getLogger(__name__)

BATCH_STARTED = "batch-started"
BATCH_COMPLETED = "batch-completed"


class Notifier:
    """
    Named-event listener registry.

    Listeners receive the folder path and run on the emitting thread, so
    callers emit only after releasing the state lock.
    """

    def __init__(self):
        self.callbacks: Dict[str, List[Callable[[str], object]]] = {
            BATCH_STARTED: [],
            BATCH_COMPLETED: [],
        }

    def register_callback(self, event_name: str, callback: Callable[[str], object]) -> bool:
        """
        Register a listener for ``batch-started`` or ``batch-completed``

        Returns:
            False if the event name is unknown
        """
        if event_name not in self.callbacks:
            logger.warning(f"Unknown event type for callback: {event_name}")
            return False
        self.callbacks[event_name].append(callback)
        logger.debug(f"Registered callback for {event_name}")
        return True

    def emit(self, event_name: str, folder: str):
        for callback in list(self.callbacks.get(event_name, [])):
            try:
                callback(folder)
            except Exception as e:
                log_exception(logger, e, f"Error in callback for {event_name}",
                              extra={"folder": folder, "event": event_name})
