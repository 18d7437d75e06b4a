"""Logging setup shared by the CLI and uvicorn worker processes.

Application events go through structlog and are rendered by stdlib logging;
HTTP access lines from uvicorn are additionally written to a daily rotated
file in the configured log directory.
"""

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

import structlog

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
ACCESS_LOGGER = "uvicorn.access"
ACCESS_LOG_NAME = "access.log"


def configure_logging(log_dir: Optional[Path] = None, verbose: bool = False) -> None:
    """Configure stdlib logging, structlog, and the rotating access log.

    Safe to call more than once per process; the access handler is only
    attached once.

    Args:
        log_dir: Directory for access.log (None = no access log file)
        verbose: Enable DEBUG level
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    if log_dir is not None:
        attach_access_log(Path(log_dir))


def attach_access_log(log_dir: Path) -> Path:
    """Attach a midnight-rotated access.log handler to uvicorn's access logger."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / ACCESS_LOG_NAME

    access_logger = logging.getLogger(ACCESS_LOGGER)
    for handler in access_logger.handlers:
        if isinstance(handler, TimedRotatingFileHandler) and handler.baseFilename == os.path.abspath(log_path):
            return log_path

    handler = TimedRotatingFileHandler(log_path, when="midnight", encoding="utf-8")
    handler.suffix = "%Y%m%d"
    handler.setFormatter(logging.Formatter('%(asctime)s %(message)s'))
    access_logger.addHandler(handler)
    access_logger.setLevel(logging.INFO)
    return log_path
