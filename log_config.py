"""
Logging setup shared by the API and the scripts.

- console: INFO
- file: INFO, rotated daily under <base>/logs

Usage:
    from log_config import setup_logging
    setup_logging("api")
"""

import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

from config import Settings


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7

# Set on handlers installed here so a second call only replaces its own.
HANDLER_MARK = "_ledger_handler"

NOISY_LOGGERS = [
    "pymongo",
    "urllib3",
    "httpx",
    "uvicorn.access",
]


def setup_logging(
    process_name: str,
    console_level: int = logging.INFO,
    file_level: int = logging.INFO,
    settings: Optional[Settings] = None,
) -> logging.Logger:
    """Configure the root logger for ``process_name`` and return it.

    Calling it twice replaces its own handlers instead of stacking them;
    handlers installed by others are left alone.
    """
    settings = settings or Settings.load()
    os.makedirs(settings.logs_dir, exist_ok=True)
    log_file = os.path.join(settings.logs_dir, f"{process_name}.log")

    root_logger = logging.getLogger()
    root_logger.setLevel(min(console_level, file_level))
    for handler in list(root_logger.handlers):
        if getattr(handler, HANDLER_MARK, False):
            root_logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    setattr(console_handler, HANDLER_MARK, True)
    root_logger.addHandler(console_handler)

    file_handler = TimedRotatingFileHandler(
        log_file,
        when="midnight",
        interval=1,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    file_handler.suffix = "%Y-%m-%d"
    setattr(file_handler, HANDLER_MARK, True)
    root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
