import socket
import time
from enum import Enum
from typing import Callable, Optional, Tuple

from tcpclosetest.config import CloseTestConfig
from .sockets import SocketSetupError, describe_error, make_tcp_socket
from .state import StateTracker


class ServerState(Enum):
    """Steps of the server sequence."""
    CREATED = "created"
    BOUND = "bound"
    LISTENING = "listening"
    ACCEPTED = "accepted"
    CLIENT_CLOSED = "client_closed"
    TORN_DOWN = "torn_down"


class CloseTestServer(StateTracker):
    """Accept one connection, close it after a pause, then shut down.

    The accepted connection is never read from. Closing it with unread data
    pending is what makes the peer's later writes fail.
    """

    def __init__(self, config: Optional[CloseTestConfig] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize the server."""
        super().__init__(ServerState.CREATED)
        self.config = config or CloseTestConfig()
        self.sleep = sleep
        self.listener: Optional[socket.socket] = None
        self.connection: Optional[socket.socket] = None
        self.peer_address: Optional[Tuple[str, int]] = None
        self._port: Optional[int] = None

    @property
    def port(self) -> int:
        """Port actually bound, which differs from the configured one for port 0."""
        return self._port if self._port is not None else self.config.port

    def run(self) -> int:
        """Run the server sequence. Returns 0 on success, -1 on failure."""
        self.logger.info(f"starting as server on port {self.config.port}")

        try:
            self.listener = make_tcp_socket()
        except SocketSetupError:
            return -1

        try:
            self.listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self.listener.bind((self.config.host, self.config.port))
        except OSError as e:
            self.logger.warning(f"bind: {describe_error(e)}")
            self.listener.close()
            return -1
        self._port = self.listener.getsockname()[1]
        self._set_state(ServerState.BOUND)

        try:
            self.listener.listen(self.config.backlog)
        except OSError as e:
            self.logger.warning(f"listen: {describe_error(e)}")
            self.listener.close()
            return -1
        self._set_state(ServerState.LISTENING)

        try:
            self.connection, self.peer_address = self.listener.accept()
        except OSError as e:
            self.logger.warning(f"accept: {describe_error(e)}")
            self.listener.close()
            return -1

        self.logger.info("accepted connection")
        self.logger.debug(f"Peer {self.peer_address} on fd={self.connection.fileno()}")
        self._set_state(ServerState.ACCEPTED)
        self.sleep(self.config.dwell)

        self.logger.info("closing client connection")
        self.connection.close()
        self._set_state(ServerState.CLIENT_CLOSED)
        self.sleep(self.config.dwell)

        self.logger.info("teardown")
        self.listener.close()
        self._set_state(ServerState.TORN_DOWN)
        return 0
