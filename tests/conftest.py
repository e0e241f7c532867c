import logging
import os
import threading
import pytest
from pathlib import Path
from typing import Callable, Dict, Generator, List, Tuple

from tcpclosetest.config import CloseTestConfig
from tcpclosetest.network.server import CloseTestServer, ServerState
from tcpclosetest.utils.logging_config import _HANDLER_MARK

@pytest.fixture(autouse=True)
def reset_logging(caplog) -> Generator[None, None, None]:
    """Capture step messages and drop handlers installed by setup_logging afterwards."""
    caplog.set_level(logging.INFO)
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root_logger.removeHandler(handler)
            handler.close()

@pytest.fixture
def fast_config() -> CloseTestConfig:
    """Loopback config with short timings and an ephemeral port."""
    return CloseTestConfig(
        host="127.0.0.1",
        port=0,
        dwell=0.3,
        write_interval=0.05,
    )

@pytest.fixture
def open_fds() -> Callable[[], int]:
    """Return a function counting this process's open descriptors."""
    fd_dir = Path("/proc/self/fd")
    if not fd_dir.is_dir():
        pytest.skip("descriptor counting needs /proc/self/fd")
    return lambda: len(os.listdir(fd_dir))

@pytest.fixture
def start_server() -> Generator[Callable[[CloseTestServer], Tuple[threading.Thread, Dict[str, int]]], None, None]:
    """Run a server in a background thread and wait until it is listening."""
    threads: List[threading.Thread] = []

    def _start(server: CloseTestServer) -> Tuple[threading.Thread, Dict[str, int]]:
        outcome: Dict[str, int] = {}

        def target():
            outcome["code"] = server.run()

        thread = threading.Thread(target=target, daemon=True)
        thread.start()
        threads.append(thread)
        assert server.wait_for_state(ServerState.LISTENING, timeout=5)
        return thread, outcome

    yield _start

    for thread in threads:
        thread.join(timeout=10)
