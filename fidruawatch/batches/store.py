# fidruawatch/batches/store.py

"""
Bounded, newest-first collection of batch records
"""
import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .models import Batch, BatchStatus

logger = logging.getLogger(__name__)

MAX_BATCHES = 100


class BatchStore:
    """
    Ordered batch container.

    Insertion is always at the front and overflow always drops from the
    tail. An id index is kept alongside the list so sign/clear lookups do
    not scan. Not thread-safe on its own: callers go through StateGateway.
    """

    def __init__(self, batches: Optional[Iterable[Batch]] = None,
                 max_batches: int = MAX_BATCHES):
        self.max_batches = max_batches
        self._batches: List[Batch] = []
        self._index: Dict[str, Batch] = {}

        for batch in batches or []:
            if batch.id in self._index:
                logger.warning(f"Skipping duplicate batch id {batch.id}")
                continue
            self._batches.append(batch)
            self._index[batch.id] = batch
        self._truncate()

    def __len__(self) -> int:
        return len(self._batches)

    def __iter__(self) -> Iterator[Batch]:
        return iter(self._batches)

    def __contains__(self, batch_id: str) -> bool:
        return batch_id in self._index

    def get(self, batch_id: str) -> Optional[Batch]:
        return self._index.get(batch_id)

    def insert(self, batch: Batch) -> List[Batch]:
        """
        Insert a batch at the front

        Args:
            batch: Newly started batch

        Returns:
            Batches evicted from the tail (oldest first-inserted last)
        """
        if batch.id in self._index:
            raise ValueError(f"Batch {batch.id} already stored")

        self._batches.insert(0, batch)
        self._index[batch.id] = batch
        return self._truncate()

    def _truncate(self) -> List[Batch]:
        evicted = self._batches[self.max_batches:]
        if not evicted:
            return []

        del self._batches[self.max_batches:]
        for batch in evicted:
            del self._index[batch.id]

        logger.debug(f"Evicted {len(evicted)} batches over the {self.max_batches} limit")
        return evicted

    def sign(self, batch_id: str, when=None) -> bool:
        batch = self._index.get(batch_id)
        if batch is None:
            return False
        return batch.sign(when)

    def sign_all(self, when=None) -> int:
        return sum(1 for batch in self._batches if batch.sign(when))

    def remove_where(self, predicate) -> int:
        kept = [batch for batch in self._batches if not predicate(batch)]
        removed = len(self._batches) - len(kept)
        if removed:
            self._batches = kept
            self._index = {batch.id: batch for batch in kept}
        return removed

    def clear_signed(self) -> int:
        return self.remove_where(lambda batch: batch.status is BatchStatus.SIGNED)

    def clear(self) -> int:
        removed = len(self._batches)
        self._batches = []
        self._index = {}
        return removed

    def count(self, status: BatchStatus) -> int:
        return sum(1 for batch in self._batches if batch.status is status)

    def snapshot(self) -> List[Batch]:
        """Detached copies, safe to hand out after the lock is released"""
        return [batch.copy() for batch in self._batches]
