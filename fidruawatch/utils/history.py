# fidruawatch/utils/history.py

"""
Batch history persistence
"""
import json
import logging
import os
from pathlib import Path
from typing import Iterable, List, Union

from ..batches.models import Batch
from ..batches.store import MAX_BATCHES
from .config import get_history_path

logger = logging.getLogger(__name__)


def load_history(path: Union[str, Path] = None) -> List[Batch]:
    """
    Load saved batches, newest first

    Returns an empty list if the file is missing or unreadable. Records
    that cannot be parsed are skipped one by one.
    """
    history_path = Path(path) if path else get_history_path()
    if not history_path.exists():
        return []

    try:
        with open(history_path, 'r', encoding='utf-8') as f:
            records = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read history from {history_path}: {e}")
        return []

    if not isinstance(records, list):
        logger.warning(f"Ignoring history at {history_path}: not a list")
        return []

    batches = []
    for record in records:
        try:
            batches.append(Batch.from_dict(record))
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Skipping malformed history record: {e}")

    if len(batches) > MAX_BATCHES:
        batches = batches[:MAX_BATCHES]

    logger.info(f"Loaded {len(batches)} batches from {history_path}")
    return batches


def save_history(batches: Iterable[Batch], path: Union[str, Path] = None) -> bool:
    """
    Write the full batch list. Failures are logged, never raised.

    The list goes to a sibling temp file first and replaces the history
    file in one step, so readers never see a half-written file.
    """
    history_path = Path(path) if path else get_history_path()
    tmp_path = history_path.with_name(history_path.name + ".tmp")
    try:
        history_path.parent.mkdir(parents=True, exist_ok=True)
        data = [batch.to_dict() for batch in batches]
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, history_path)
        logger.debug(f"Saved {len(data)} batches to {history_path}")
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Failed to save history to {history_path}: {e}")
        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError as cleanup_error:
            logger.debug(f"Could not remove {tmp_path}: {cleanup_error}")
        return False
