import logging
import sys
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

def setup_logging(log_path: Path, debug: bool = False) -> logging.Logger:
    """
    Setup logging configuration for VBT.

    Appends to log_path (never truncated, so results of earlier runs are kept).
    If the log file cannot be opened, records go to stderr at WARNING level
    instead and the run carries on.

    Args:
        log_path: Path to the log file; parent directories are created
        debug: If True, enable DEBUG level logging (includes ffmpeg command lines)
    """
    level = logging.DEBUG if debug else logging.INFO
    log_file = Path(log_path)

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    except OSError as e:
        handler = logging.StreamHandler(sys.stderr)
        level = logging.WARNING
        logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler], force=True)
        logger = logging.getLogger(__name__)
        logger.warning(f"Log file unavailable ({log_file}): {e}. Logging to stderr.")
        return logger

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[handler],
        force=True  # Override any existing configuration
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized: {log_file} (debug={'ON' if debug else 'OFF'})")

    return logger
