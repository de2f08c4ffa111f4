"""
Logging configuration for the certificate registry.

``setup_logging`` installs one console handler and, when a log file is
configured, a size-rotated file handler on the root logger.  Handlers
installed here are tagged so repeated calls (tests, a second
``create_app``) do not stack duplicates, while handlers added by other
tools such as pytest are left alone.

python-multipart logs every parsed form part at DEBUG, which would
flood the log on each certificate upload; it is capped at INFO.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3

_NOISY_LOGGERS = ("multipart", "python_multipart")

_HANDLER_TAG = "_certificate_registry_handler"


def resolve_level(level: str) -> int:
    """Map a level name such as ``"debug"`` to its number; unknown names give INFO."""
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def _tagged(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG, True)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger once per process.

    Parameters
    ----------
    level : str
        Logging level name, case insensitive.
    logfile : Optional[str]
        Path of a log file; parent folders are created.  Rotated at
        ``LOG_FILE_MAX_BYTES`` keeping ``LOG_FILE_BACKUPS`` old files.
    """
    root = logging.getLogger()
    numeric_level = resolve_level(level)
    root.setLevel(numeric_level)

    if any(getattr(handler, _HANDLER_TAG, False) for handler in root.handlers):
        return

    root.addHandler(_tagged(logging.StreamHandler()))

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(
            _tagged(
                RotatingFileHandler(
                    log_path,
                    maxBytes=LOG_FILE_MAX_BYTES,
                    backupCount=LOG_FILE_BACKUPS,
                    encoding="utf-8",
                )
            )
        )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.INFO))
