"""
FidruaWatch Batches
Upload batch records, the bounded batch store and folder trackers
"""
from .models import Batch, BatchStatus, FolderTracker, HistorySnapshot, MonitorState
from .store import BatchStore, MAX_BATCHES
from .registry import FolderTrackerRegistry

__all__ = [
    'Batch',
    'BatchStatus',
    'FolderTracker',
    'MonitorState',
    'HistorySnapshot',
    'BatchStore',
    'MAX_BATCHES',
    'FolderTrackerRegistry',
]
