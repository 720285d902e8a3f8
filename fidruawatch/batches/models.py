# fidruawatch/batches/models.py

"""
Batch records and folder session state
"""
from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Any

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class BatchStatus(Enum):
    """Batch lifecycle states (monotonic, Signed is terminal)"""
    UPLOADING = "Uploading"
    COMPLETED = "Completed"
    SIGNED = "Signed"


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.strptime(value, TIMESTAMP_FORMAT)


@dataclass
class Batch:
    """
    One upload session for one folder.

    ``files`` keeps first-seen order and holds no duplicates. Status only
    moves forward: Uploading -> Completed -> Signed.
    """
    id: str
    folder: str
    files: List[str] = field(default_factory=list)
    status: BatchStatus = BatchStatus.UPLOADING
    started_at: datetime = None
    completed_at: Optional[datetime] = None
    signed_at: Optional[datetime] = None

    def __post_init__(self):
        if self.started_at is None:
            self.started_at = datetime.now()

    @property
    def file_count(self) -> int:
        return len(self.files)

    def sync_files(self, files: List[str]):
        """Mirror the tracker's working set while the batch is still uploading"""
        if self.status is not BatchStatus.UPLOADING:
            return
        self.files = list(files)

    def complete(self, files: List[str], when: Optional[datetime] = None) -> bool:
        """
        Freeze the file set and move Uploading -> Completed

        Returns:
            False if the batch was not uploading
        """
        if self.status is not BatchStatus.UPLOADING:
            return False
        self.files = list(files)
        self.status = BatchStatus.COMPLETED
        self.completed_at = when or datetime.now()
        return True

    def sign(self, when: Optional[datetime] = None) -> bool:
        """
        Move Completed -> Signed

        Returns:
            False (and no change) unless the batch is currently completed
        """
        if self.status is not BatchStatus.COMPLETED:
            return False
        self.status = BatchStatus.SIGNED
        self.signed_at = when or datetime.now()
        return True

    def copy(self) -> "Batch":
        return Batch(
            id=self.id,
            folder=self.folder,
            files=list(self.files),
            status=self.status,
            started_at=self.started_at,
            completed_at=self.completed_at,
            signed_at=self.signed_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'folder': self.folder,
            'files': list(self.files),
            'status': self.status.value,
            'started_at': format_timestamp(self.started_at),
            'completed_at': format_timestamp(self.completed_at),
            'signed_at': format_timestamp(self.signed_at),
            'file_count': self.file_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Batch":
        """Rebuild a batch from its history record (raises on malformed data)"""
        files = []
        for name in data.get('files') or []:
            if name not in files:
                files.append(str(name))

        return cls(
            id=str(data['id']),
            folder=str(data['folder']),
            files=files,
            status=BatchStatus(data['status']),
            started_at=parse_timestamp(data.get('started_at')),
            completed_at=parse_timestamp(data.get('completed_at')),
            signed_at=parse_timestamp(data.get('signed_at')),
        )

    def __str__(self):
        return f"{self.status.value}: {self.folder} ({self.file_count} files)"


@dataclass
class FolderTracker:
    """Live activity for a folder that is currently receiving files"""
    folder: str
    batch_id: str
    last_activity: float
    files: List[str] = field(default_factory=list)
    notified_start: bool = False

    def add_file(self, file_name: str) -> bool:
        if file_name in self.files:
            return False
        self.files.append(file_name)
        return True

    def idle_for(self, now: float) -> float:
        return now - self.last_activity


@dataclass
class MonitorState:
    """Point-in-time snapshot returned to callers outside the lock"""
    is_running: bool
    batches: List[Batch]
    unsigned_count: int
    uploading_count: int
    dir_count: int
    start_time: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_running': self.is_running,
            'batches': [batch.to_dict() for batch in self.batches],
            'unsigned_count': self.unsigned_count,
            'uploading_count': self.uploading_count,
            'dir_count': self.dir_count,
            'start_time': self.start_time,
        }


@dataclass
class HistorySnapshot:
    """Batch list copied under the lock, numbered in the order it was taken"""
    version: int
    batches: List[Batch]
