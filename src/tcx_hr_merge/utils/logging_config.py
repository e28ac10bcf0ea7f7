"""Logging configuration for the TCX heart-rate merger.

Configures stderr and optional file logging. The merged document is written
to stdout, so all log output goes to stderr or rotating log files.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# 10 MB per file, keep 5 backups
_MAX_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
_LOG_FILE_NAME = "tcx_hr_merge.log"


def setup_logging(
    level: str = "WARNING",
    log_dir: Path | None = None,
) -> None:
    """Configure logging for a merge run.

    Always adds a stderr handler. Adds a rotating file handler when
    `log_dir` is given.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Directory for log files. The directory is created if needed.
    """
    root_logger = logging.getLogger("tcx_hr_merge")
    root_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    # Avoid duplicate handlers on repeated calls
    root_logger.handlers.clear()

    formatter = logging.Formatter(_LOG_FORMAT)

    # stderr handler (always)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_dir / _LOG_FILE_NAME,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)
