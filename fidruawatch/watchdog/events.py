from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import List


class EventType(Enum):
    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
    MOVED = "moved"
    CLOSED = "closed"
    OTHER = "other"


@dataclass
class WatchdogEvent:
    """A raw filesystem change, independent of the watch library"""
    event_type: EventType
    paths: List[str] = field(default_factory=list)
    is_directory: bool = False
    timestamp: datetime = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()
        self.paths = [str(p) for p in self.paths]

    def __str__(self):
        return f"{self.event_type.value}: {', '.join(self.paths)}"
