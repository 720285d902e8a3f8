# fidruawatch/utils/__init__.py

"""
FidruaWatch Utilities
Configuration, history persistence and logging
"""
from .config import AppConfig, load_config, save_config, get_config_dir
from .history import load_history, save_history
from .logger import setup_logging, log_exception

__all__ = [
    'AppConfig', 'load_config', 'save_config', 'get_config_dir',
    'load_history', 'save_history',
    'setup_logging', 'log_exception',
]
