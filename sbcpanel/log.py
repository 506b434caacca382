"""Application-wide logger writing to the console and a rotating file."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "main"
DEFAULT_LOG_PATH = "../logs/sbc.log"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3
TRACE = 5

_FORMAT = "[%(asctime)s.%(msecs)03d] [%(levelname)s] [%(filename)s:%(lineno)d] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.addLevelName(TRACE, "TRACE")


def init_logging(log_path=DEFAULT_LOG_PATH):
    """Configure the shared logger with a console and a rotating file handler.

    Calling it again replaces the handlers set up by an earlier call. A failure
    to open the log file is reported on stderr and leaves the logger unchanged.
    """
    logger = get_logger()
    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)
    try:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
        )
    except OSError as exc:
        print(f"Log initialization failed: {exc}", file=sys.stderr)
        return

    console_handler = logging.StreamHandler(sys.stdout)
    for handler in (console_handler, file_handler):
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(formatter)

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(console_handler)
    logger.addHandler(file_handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False


def get_logger() -> logging.Logger:
    """Return the shared application logger."""
    return logging.getLogger(LOGGER_NAME)