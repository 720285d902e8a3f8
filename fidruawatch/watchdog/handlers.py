# fidruawatch/watchdog/handlers.py

"""
Adapter from watchdog observer callbacks to raw change notifications
"""
import os
import logging
from typing import Callable, Dict, Any, Optional
from datetime import datetime

from watchdog.events import (
    FileSystemEvent,
    FileSystemEventHandler,
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MOVED,
    EVENT_TYPE_CLOSED,
)

from .events import WatchdogEvent, EventType

logger = logging.getLogger(__name__)

_EVENT_TYPES = {
    EVENT_TYPE_CREATED: EventType.CREATED,
    EVENT_TYPE_MODIFIED: EventType.MODIFIED,
    EVENT_TYPE_DELETED: EventType.DELETED,
    EVENT_TYPE_MOVED: EventType.MOVED,
    EVENT_TYPE_CLOSED: EventType.CLOSED,
}


def convert_event(event: FileSystemEvent) -> WatchdogEvent:
    """Convert a watchdog event to our internal format"""
    event_type = _EVENT_TYPES.get(event.event_type, EventType.OTHER)

    paths = [os.fsdecode(event.src_path)]
    dest_path = getattr(event, 'dest_path', None)
    if dest_path:
        paths.append(os.fsdecode(dest_path))

    return WatchdogEvent(
        event_type=event_type,
        paths=paths,
        is_directory=event.is_directory,
    )


class UploadEventHandler(FileSystemEventHandler):
    """
    Forwards every watchdog event to a single callback.

    Runs on the observer thread. The callback must not block for long;
    any exception it raises is logged and dropped so the observer keeps
    delivering.
    """

    def __init__(self, callback: Callable[[WatchdogEvent], Any]):
        self.callback = callback

        self.stats = {
            'events_received': 0,
            'errors': 0,
            'last_event': None,
        }

    def on_any_event(self, event: FileSystemEvent):
        self.stats['events_received'] += 1
        self.stats['last_event'] = datetime.now()

        try:
            self.callback(convert_event(event))
        except Exception as e:
            self.stats['errors'] += 1
            logger.error(f"Error handling event {event}: {e}", exc_info=True)

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.copy()
