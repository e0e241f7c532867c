import logging
import socket

logger = logging.getLogger(__name__)


def describe_error(error: OSError) -> str:
    """Return the system description of an OSError, e.g. 'Broken pipe'."""
    return error.strerror or str(error)


def make_tcp_socket() -> socket.socket:
    """Create an IPv4 stream socket for the "tcp" protocol.

    Raises:
        SocketSetupError: If the protocol cannot be resolved or the socket
            cannot be created
    """
    try:
        proto = socket.getprotobyname("tcp")
    except OSError as e:
        logger.warning('protocol not found: "tcp"')
        raise SocketSetupError('protocol not found: "tcp"') from e

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM, proto)
    except OSError as e:
        logger.warning(f"socket: {describe_error(e)}")
        raise SocketSetupError(f"socket: {describe_error(e)}") from e

    logger.debug(f"Created TCP socket fd={sock.fileno()} proto={proto}")
    return sock


def parse_ipv4(ip: str) -> str:
    """Parse a dotted-quad IPv4 literal.

    Returns the normalized address. Raises AddressParseError when the text
    is not a valid IPv4 address; nothing is resolved through DNS.
    """
    try:
        packed = socket.inet_pton(socket.AF_INET, ip)
    except (OSError, ValueError) as e:
        raise AddressParseError(f"failed to parse IP address: {ip}") from e
    return socket.inet_ntop(socket.AF_INET, packed)


class CloseTestError(Exception):
    """Base class for tcpclosetest errors."""
    pass

class SocketSetupError(CloseTestError):
    """Raised when a TCP socket cannot be created."""
    pass

class AddressParseError(CloseTestError):
    """Raised when an IPv4 address literal is invalid."""
    pass

class SignalSetupError(CloseTestError):
    """Raised when the SIGPIPE handler cannot be installed."""
    pass
