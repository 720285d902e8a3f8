# fidruawatch/batches/registry.py

"""
Per-folder tracker registry
"""
import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from .models import Batch, FolderTracker
from .store import BatchStore

logger = logging.getLogger(__name__)


class FolderTrackerRegistry:
    """
    At most one live FolderTracker per folder path.

    A tracker is paired 1:1 with the Batch it builds; the batch itself
    belongs to the BatchStore and outlives the tracker. All methods expect
    the caller to hold the StateGateway lock.
    """

    def __init__(self, store: BatchStore):
        self.store = store
        self.trackers: Dict[str, FolderTracker] = {}

    def __len__(self) -> int:
        return len(self.trackers)

    def __contains__(self, folder: str) -> bool:
        return folder in self.trackers

    def get(self, folder: str) -> Optional[FolderTracker]:
        return self.trackers.get(folder)

    def record(self, folder: str, file_name: str, now: float) -> Tuple[str, bool]:
        """
        Record a qualifying event for ``folder``

        Args:
            folder: Parent directory of the file
            file_name: Base name of the file
            now: Monotonic timestamp of the event

        Returns:
            (batch_id, is_first_event_for_batch)
        """
        tracker = self.trackers.get(folder)

        if tracker is None:
            batch = Batch(id=str(uuid.uuid4()), folder=folder, files=[file_name])
            tracker = FolderTracker(
                folder=folder,
                batch_id=batch.id,
                last_activity=now,
                files=[file_name],
                notified_start=True,
            )
            self.trackers[folder] = tracker
            self.store.insert(batch)
            is_first = True
            logger.info(f"Batch started for {folder}",
                        extra={"folder": folder, "batch_id": batch.id})
        else:
            if tracker.add_file(file_name):
                logger.debug(f"Added {file_name} to batch for {folder}")
            tracker.last_activity = now
            is_first = not tracker.notified_start
            if is_first:
                tracker.notified_start = True

        batch = self.store.get(tracker.batch_id)
        if batch is not None:
            batch.sync_files(tracker.files)

        return tracker.batch_id, is_first

    def stale_folders(self, now: float, timeout: float) -> List[str]:
        return [
            folder for folder, tracker in self.trackers.items()
            if tracker.idle_for(now) >= timeout
        ]

    def finalize(self, folder: str, when: Optional[datetime] = None) -> Optional[Batch]:
        """
        Drop the tracker for ``folder`` and complete its batch

        Returns:
            The completed batch, or None if there was no tracker or its
            batch has already been evicted from the store
        """
        tracker = self.trackers.pop(folder, None)
        if tracker is None:
            return None

        batch = self.store.get(tracker.batch_id)
        if batch is None:
            logger.warning(f"Batch {tracker.batch_id} for {folder} no longer stored")
            return None

        if not batch.complete(tracker.files, when):
            return None

        logger.info(f"Batch completed for {folder} ({batch.file_count} files)",
                    extra={"folder": folder, "batch_id": batch.id, "file_count": batch.file_count})
        return batch

    def clear(self) -> int:
        count = len(self.trackers)
        self.trackers.clear()
        return count
