#fidruawatch/watchdog/__init__.py

"""
FidruaWatch Watchdog Module
Upload batch detection - File System Monitoring
"""
from .monitor import UploadMonitor
from .events import WatchdogEvent, EventType
from .patterns import UploadEventFilter
from .handlers import UploadEventHandler, convert_event
from .watcher import ChangeSource, ObserverChangeSource
from .completion import CompletionChecker, UPLOAD_COMPLETE_TIMEOUT
from .notify import Notifier, BATCH_STARTED, BATCH_COMPLETED

__all__ = [
    'UploadMonitor',
    'WatchdogEvent',
    'EventType',
    'UploadEventFilter',
    'UploadEventHandler',
    'convert_event',
    'ChangeSource',
    'ObserverChangeSource',
    'CompletionChecker',
    'UPLOAD_COMPLETE_TIMEOUT',
    'Notifier',
    'BATCH_STARTED',
    'BATCH_COMPLETED',
]
