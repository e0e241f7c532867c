from dataclasses import dataclass
from typing import Optional

# Network settings
DEFAULT_HOST = "0.0.0.0"  # Wildcard address for the listening socket
DEFAULT_PORT = 20316
LISTEN_BACKLOG = 128

# Timing
SERVER_DWELL_SECONDS = 5.0  # Pause before and after closing the accepted connection
WRITE_INTERVAL_SECONDS = 0.5

# Client writes
WRITE_COUNT = 20
WRITE_SIZE = 512  # bytes, zero-filled

PROGRAM_NAME = "tcpclosetest"

# Logging
LOG_DIR = None  # Set to a directory path to also log to a rotating file
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s: %(message)s"
WARNING_FORMAT = "{program}: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
LOG_MAX_SIZE = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5


@dataclass(frozen=True)
class CloseTestConfig:
    """Settings for a single server or client run."""
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    backlog: int = LISTEN_BACKLOG
    dwell: float = SERVER_DWELL_SECONDS
    write_count: int = WRITE_COUNT
    write_size: int = WRITE_SIZE
    write_interval: float = WRITE_INTERVAL_SECONDS
    program_name: str = PROGRAM_NAME
    log_dir: Optional[str] = LOG_DIR
