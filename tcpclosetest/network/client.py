import socket
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from tcpclosetest.config import CloseTestConfig
from .signals import install_sigpipe_handler, restore_sigpipe_handler
from .sockets import (
    AddressParseError,
    SignalSetupError,
    SocketSetupError,
    describe_error,
    make_tcp_socket,
    parse_ipv4,
)
from .state import StateTracker


class ClientState(Enum):
    """Steps of the client sequence."""
    CREATED = "created"
    ADDRESS_PARSED = "address_parsed"
    SIGNAL_HANDLER_INSTALLED = "signal_handler_installed"
    CONNECTED = "connected"
    WRITING = "writing"
    STOPPED = "stopped"
    TORN_DOWN = "torn_down"


@dataclass
class WriteResult:
    """Outcome of one write attempt."""
    index: int
    nwritten: int
    error: Optional[OSError] = None

    def is_complete(self, size: int) -> bool:
        """Check whether the whole buffer went out."""
        return self.error is None and self.nwritten == size


class CloseTestClient(StateTracker):
    """Connect to a server and keep writing until a write comes up short.

    Write errors are what this client is here to observe: they end the
    write loop and get reported, but the run still counts as a success.
    """

    def __init__(self, address: str, config: Optional[CloseTestConfig] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize the client for the given IPv4 literal."""
        super().__init__(ClientState.CREATED)
        self.address = address
        self.config = config or CloseTestConfig()
        self.sleep = sleep
        self.payload = bytes(self.config.write_size)
        self.sock: Optional[socket.socket] = None
        self.results: List[WriteResult] = []

    @property
    def bytes_written(self) -> int:
        """Total bytes accepted by the kernel across all writes."""
        return sum(r.nwritten for r in self.results if r.nwritten > 0)

    def run(self) -> int:
        """Run the client sequence. Returns 0 on success, -1 on failure."""
        try:
            host = parse_ipv4(self.address)
        except AddressParseError as e:
            self.logger.warning(str(e))
            return -1
        self._set_state(ClientState.ADDRESS_PARSED)

        try:
            previous_handler = install_sigpipe_handler()
        except SignalSetupError as e:
            self.logger.warning(str(e))
            return -1
        self._set_state(ClientState.SIGNAL_HANDLER_INSTALLED)

        try:
            return self._connect_and_write(host)
        finally:
            restore_sigpipe_handler(previous_handler)

    def _connect_and_write(self, host: str) -> int:
        port = self.config.port
        self.logger.info(f"connecting to {self.address} port {port}")

        try:
            self.sock = make_tcp_socket()
        except SocketSetupError:
            return -1

        try:
            self.sock.connect((host, port))
        except OSError as e:
            self.logger.warning(f"connect: {describe_error(e)}")
            self.sock.close()
            return -1

        self.logger.info("connected")
        self._set_state(ClientState.CONNECTED)

        self._write_loop()

        self.logger.info("teardown")
        self.sock.close()
        self._set_state(ClientState.TORN_DOWN)
        return 0

    def _write_loop(self) -> None:
        self._set_state(ClientState.WRITING)
        size = len(self.payload)

        for index in range(self.config.write_count):
            self.logger.info(f"write ({index})")
            result = self._write_once(index)
            self.results.append(result)

            if not result.is_complete(size):
                if result.error is not None:
                    self.logger.info(
                        f"write returned {result.nwritten} "
                        f"(error {result.error.errno}: {describe_error(result.error)})"
                    )
                else:
                    self.logger.info(f"write returned {result.nwritten}")
                break

            self.sleep(self.config.write_interval)

        self._set_state(ClientState.STOPPED)

    def _write_once(self, index: int) -> WriteResult:
        # A single send(), not sendall(): short writes must stay visible
        try:
            nwritten = self.sock.send(self.payload)
        except OSError as e:
            return WriteResult(index=index, nwritten=-1, error=e)
        return WriteResult(index=index, nwritten=nwritten)
