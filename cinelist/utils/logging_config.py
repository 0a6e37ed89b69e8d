"""
Logging setup shared by the API server and the maintenance scripts.

Everything logs through the root logger; modules only call
``logging.getLogger(__name__)``.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Per-request chatter from the HTTP client and the SQL echo
QUIET_LOGGERS = ('urllib3', 'sqlalchemy.engine')


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: str = "logs",
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3
) -> None:
    """
    Replace the root logger's handlers with a stdout handler and, when
    ``log_file`` is given, a size-rotated file under ``log_dir``.

    Unknown level names fall back to INFO.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    log_path = None
    if log_file:
        log_path = Path(log_dir) / log_file
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if log_path is not None:
        root_logger.info(f"Logging to file: {log_path}")


def configure_api_logging(level: str = "INFO"):
    """API server: console plus logs/api.log."""
    setup_logging(level=level, log_file="api.log")


def configure_script_logging(debug: bool = False):
    """Scripts: console only."""
    setup_logging(level="DEBUG" if debug else "INFO")
