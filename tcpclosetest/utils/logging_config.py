import logging
import logging.handlers
import sys
import time
from pathlib import Path
from datetime import datetime
from typing import Optional

from tcpclosetest.config import (
    PROGRAM_NAME, LOG_LEVEL, LOG_FORMAT, WARNING_FORMAT, FILE_LOG_FORMAT,
    TIMESTAMP_FORMAT, LOG_MAX_SIZE, LOG_BACKUP_COUNT
)

# Marks the handlers installed here so a second setup can replace them
_HANDLER_MARK = "_tcpclosetest_handler"


class UTCFormatter(logging.Formatter):
    """Formatter that renders asctime in UTC, e.g. 2016-05-04T17:02:11Z."""
    converter = time.gmtime

    def __init__(self, fmt: Optional[str] = None, datefmt: str = TIMESTAMP_FORMAT):
        super().__init__(fmt=fmt, datefmt=datefmt)


class MaxLevelFilter(logging.Filter):
    """Let through only records below the given level."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def _mark(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_MARK, True)
    return handler


def setup_logging(program_name: str = PROGRAM_NAME, log_dir: Optional[str] = None,
                  level: str = LOG_LEVEL) -> None:
    """Set up logging configuration for a run.

    Step messages go to stdout behind a UTC timestamp. Warnings and errors
    go to stderr prefixed with the program name, the way warn(3) reports
    them.

    Args:
        program_name: Name shown in front of warnings
        log_dir: Directory for an additional rotating debug log, or None
        level: Console level for step messages
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Drop handlers from an earlier setup
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root_logger.removeHandler(handler)
            handler.close()

    # Create formatters
    console_formatter = UTCFormatter(LOG_FORMAT)
    warning_formatter = logging.Formatter(
        WARNING_FORMAT.format(program=program_name.replace("%", "%%"))
    )

    # Step messages (below WARNING) on stdout
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.addFilter(MaxLevelFilter(logging.WARNING))
    stdout_handler.setFormatter(console_formatter)
    root_logger.addHandler(_mark(stdout_handler))

    # Warnings and errors on stderr
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(warning_formatter)
    root_logger.addHandler(_mark(stderr_handler))

    log_file = None
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"{program_name}_{timestamp}.log"

        # File handler (for all levels)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_MAX_SIZE,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(UTCFormatter(FILE_LOG_FORMAT))
        root_logger.addHandler(_mark(file_handler))

    # Set up specific loggers
    loggers = {
        'tcpclosetest.network': logging.DEBUG,
        'tcpclosetest.main': logging.DEBUG,
    }

    for logger_name, logger_level in loggers.items():
        logging.getLogger(logger_name).setLevel(logger_level)

    if log_file is not None:
        logging.debug(f"Log file: {log_file}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    Args:
        name: Name of the logger

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
