# fidruawatch/utils/config.py

"""
Configuration management for FidruaWatch
"""
import os
import sys
import json
import yaml
from pathlib import Path
from typing import Dict, Any, List, Union
from dataclasses import dataclass, field, asdict, fields
import logging

logger = logging.getLogger(__name__)

APP_DIR_NAME = "fidruawatch"
CONFIG_FILE_NAME = "config.json"
HISTORY_FILE_NAME = "history.json"


DEFAULT_VIDEO_TYPES = [
    ".mp4", ".avi", ".mkv", ".mov", ".wmv", ".flv",
    ".webm", ".m4v", ".mpeg", ".mpg", ".3gp", ".ts",
]

DEFAULT_IGNORE_FOLDERS = [
    "node_modules", ".git", "__pycache__", ".idea", "vendor", "target",
]


def normalize_extensions(extensions: List[str]) -> List[str]:
    """Lower-case, add the leading dot, drop blanks and duplicates"""
    normalized = []
    for ext in extensions or []:
        ext = str(ext).strip().lower()
        if not ext:
            continue
        if not ext.startswith('.'):
            ext = '.' + ext
        if ext not in normalized:
            normalized.append(ext)
    return normalized


def _require_list(name: str, value: Any):
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{name} must be a list, got {type(value).__name__}")


@dataclass
class AppConfig:
    """Settings consumed by the monitoring core"""
    watch_folder: str = ""
    file_types: list = field(default_factory=lambda: list(DEFAULT_VIDEO_TYPES))
    watch_subdirs: bool = True
    sound_enabled: bool = True  # read by the desktop shell only
    ignore_folders: list = field(default_factory=lambda: list(DEFAULT_IGNORE_FOLDERS))
    save_history: bool = True

    # Reject partial downloads and editor swap files
    skip_temp_files: bool = False

    def __post_init__(self):
        self.watch_folder = "" if self.watch_folder is None else str(self.watch_folder)

        # None means "not set"; only an explicit empty list accepts every file type
        if self.file_types is None:
            self.file_types = list(DEFAULT_VIDEO_TYPES)
        if self.ignore_folders is None:
            self.ignore_folders = list(DEFAULT_IGNORE_FOLDERS)
        _require_list("file_types", self.file_types)
        _require_list("ignore_folders", self.ignore_folders)

        self.file_types = normalize_extensions(self.file_types)
        self.ignore_folders = [str(f) for f in self.ignore_folders if str(f).strip()]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), default_flow_style=False)

    def copy(self) -> "AppConfig":
        return AppConfig.from_dict(self.to_dict())

    def save(self, path: Union[str, Path]):
        """Save config to file (raises on I/O errors)"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        if path.suffix.lower() in ['.yaml', '.yml']:
            with open(path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False)
        else:  # default to JSON
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Build a config from a mapping, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in (data or {}).items():
            if key in known:
                values[key] = value
            else:
                logger.debug(f"Ignoring unknown config key: {key}")
        return cls(**values)


def get_config_dir() -> Path:
    """Per-user configuration directory"""
    override = os.environ.get('FIDRUAWATCH_HOME')
    if override:
        return Path(override)

    if sys.platform == "win32":
        appdata = Path(os.environ.get('APPDATA', Path.home()))
        return appdata / APP_DIR_NAME
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME
    else:  # linux
        xdg = os.environ.get('XDG_CONFIG_HOME')
        base = Path(xdg) if xdg else Path.home() / ".config"
        return base / APP_DIR_NAME


def get_default_config_path() -> Path:
    return get_config_dir() / CONFIG_FILE_NAME


def get_history_path() -> Path:
    return get_config_dir() / HISTORY_FILE_NAME


def load_config(path: Union[str, Path] = None) -> AppConfig:
    """
    Load configuration from file, falling back to defaults

    Never raises: a missing, unreadable or malformed file yields the
    default configuration.
    """
    config_path = Path(path) if path else get_default_config_path()

    if not config_path.exists():
        logger.info(f"No configuration at {config_path}, using defaults")
        return AppConfig()

    try:
        logger.info(f"Loading configuration from {config_path}")

        if config_path.suffix.lower() in ['.yaml', '.yml']:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        else:  # JSON
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError("configuration root must be a mapping")

        return AppConfig.from_dict(data)

    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        logger.warning(f"Error loading configuration from {config_path}: {e}")
        return AppConfig()


def save_config(config: AppConfig, path: Union[str, Path] = None) -> bool:
    """Save configuration to file. Failures are logged, not raised."""
    config_path = Path(path) if path else get_default_config_path()
    try:
        config.save(config_path)
        return True
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to save configuration to {config_path}: {e}")
        return False
