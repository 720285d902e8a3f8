# fidruawatch/cli.py

"""
Command line entry point for FidruaWatch
"""
import time
import argparse
import logging

from .utils.config import load_config, get_default_config_path, get_history_path
from .utils.history import load_history
from .utils.logger import setup_logging
from .watchdog.monitor import UploadMonitor
from .watchdog.notify import BATCH_STARTED, BATCH_COMPLETED

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Group files arriving in watched folders into upload batches")
    parser.add_argument("--folder", help="Folder to watch (overrides the saved setting)")
    parser.add_argument("--config", help="Configuration file (.json or .yaml)")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file")
    parser.add_argument("--log-format", default="text", choices=["text", "color", "json"])
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file, args.log_format)

    config_path = args.config or get_default_config_path()
    config = load_config(config_path)
    if args.folder:
        config.watch_folder = args.folder

    batches = load_history() if config.save_history else []

    monitor = UploadMonitor(
        config=config,
        batches=batches,
        config_path=config_path,
        history_path=get_history_path(),
    )
    monitor.register_callback(BATCH_STARTED, lambda folder: logger.info(f"Upload started: {folder}"))
    monitor.register_callback(BATCH_COMPLETED, lambda folder: logger.info(f"Upload completed: {folder}"))

    print("=" * 60)
    print("FidruaWatch - Upload Batch Monitor")
    print("=" * 60)

    if not monitor.start():
        logger.error(f"Could not start monitoring {config.watch_folder or '(no folder configured)'}")
        return 1

    print(f"Watching: {config.watch_folder}")
    print(f"File types: {', '.join(config.file_types) or 'all'}")
    print("\nFidruaWatch is running. Press Ctrl+C to stop.")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nShutting down...")
    finally:
        monitor.stop()
        monitor.save_history()

    state = monitor.get_state()
    logger.info(f"{len(state.batches)} batches recorded, {state.unsigned_count} awaiting signature")
    return 0
