# src/config/logging_config.py

"""Per-run logging configuration for trendbuy.

Every launch (TUI or headless) writes to its own ``logs/run_<stamp>.log``
file.  The ``trendbuy`` logger is the parent of every module logger
(``trendbuy.cache``, ``trendbuy.matcher`` ...), so a single pair of
handlers captures the whole pipeline: DEBUG and up goes to the file,
WARNING and up goes to stderr.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER_NAME = "trendbuy"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    logs_dir: Path | None = None,
    console_level: int = logging.WARNING,
) -> Path:
    """Attach the file and console handlers to the ``trendbuy`` logger.

    Args:
        logs_dir: Directory for the run log.  Defaults to
            ``Settings.LOGS_DIR``.
        console_level: Minimum level echoed to stderr.  The headless
            CLI lowers this to INFO with ``--verbose``.

    Returns:
        The path of the log file for this run.  Calling the function
        again while handlers are attached returns a fresh path but adds
        no handlers.
    """
    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = target_dir / f"run_{stamp}.log"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Run log opened at %s", log_file)
    return log_file
