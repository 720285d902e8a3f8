# fidruawatch/watchdog/patterns.py

"""
Classification of raw filesystem changes into upload events
"""
import os
import ntpath
import logging
from typing import List, Optional, Tuple

from ..utils.config import AppConfig, normalize_extensions
from .events import WatchdogEvent, EventType

logger = logging.getLogger(__name__)

ACCEPTED_EVENT_TYPES = {EventType.CREATED, EventType.MODIFIED}

TEMP_FILE_PATTERNS = [
    ".tmp", ".temp", ".part", ".partial", ".crdownload", "~$", ".swp", ".lock",
]


def split_path(path: str) -> Tuple[str, str]:
    """Split into (folder, file name) accepting either separator"""
    if '\\' in path and '/' not in path:
        return ntpath.split(path)
    return os.path.split(path)


class UploadEventFilter:
    """
    Decides which raw changes count as upload activity.

    Per path, every rule must pass:
      1. the change is a creation or modification
      2. the path is not a directory
      3. the extension is allow-listed (empty allow-list accepts all)
      4. no ignored folder appears as ``/name/`` or ``\\name\\`` in the path
      5. (optional) the name carries no temp-file marker

    Rule 4 is a plain substring test on the path string. An entry such as
    ``a/b`` therefore also matches ``/x/a/b/clip.mp4``, and the watched
    root itself is subject to it.

    Pure classification: rejects are skipped quietly, nothing raises.
    """

    def __init__(self, file_types: Optional[List[str]] = None,
                 ignore_folders: Optional[List[str]] = None,
                 skip_temp_files: bool = False):
        self.file_types = set(normalize_extensions(file_types or []))
        self.ignore_folders = list(ignore_folders or [])
        self.skip_temp_files = skip_temp_files

        self._ignore_markers = []
        for folder in self.ignore_folders:
            self._ignore_markers.append(f"/{folder}/")
            self._ignore_markers.append(f"\\{folder}\\")

    @classmethod
    def from_config(cls, config: AppConfig) -> "UploadEventFilter":
        return cls(
            file_types=config.file_types,
            ignore_folders=config.ignore_folders,
            skip_temp_files=config.skip_temp_files,
        )

    def accept(self, event: WatchdogEvent) -> List[Tuple[str, str]]:
        """
        Classify a raw change

        Args:
            event: Raw filesystem change

        Returns:
            Accepted (folder, file_name) pairs, possibly empty
        """
        if event.event_type not in ACCEPTED_EVENT_TYPES:
            return []
        if event.is_directory:
            return []

        accepted = []
        for path in event.paths:
            pair = self.classify_path(path)
            if pair is not None:
                accepted.append(pair)
        return accepted

    def classify_path(self, path: str) -> Optional[Tuple[str, str]]:
        if not path:
            return None

        try:
            if os.path.isdir(path):
                return None
        except (OSError, ValueError):
            return None

        folder, file_name = split_path(path)
        if not folder or not file_name:
            logger.debug(f"Skipping path without parent or name: {path}")
            return None

        ext = os.path.splitext(file_name)[1].lower()
        if not ext:
            return None

        if self.file_types and ext not in self.file_types:
            return None

        if self.is_ignored(path):
            logger.debug(f"Skipping path in ignored folder: {path}")
            return None

        if self.skip_temp_files and self.is_temp_file(file_name):
            logger.debug(f"Skipping temporary file: {path}")
            return None

        return folder, file_name

    def is_ignored(self, path: str) -> bool:
        return any(marker in path for marker in self._ignore_markers)

    @staticmethod
    def is_temp_file(file_name: str) -> bool:
        name = file_name.lower()
        return any(pattern in name for pattern in TEMP_FILE_PATTERNS)
