import errno
import socket
import pytest
from unittest.mock import patch

from tcpclosetest.network import sockets
from tcpclosetest.network.sockets import (
    AddressParseError,
    CloseTestError,
    SocketSetupError,
    describe_error,
    make_tcp_socket,
    parse_ipv4,
)

def test_make_tcp_socket():
    """Test that a plain IPv4 stream socket is created."""
    sock = make_tcp_socket()
    try:
        assert sock.family == socket.AF_INET
        assert sock.type == socket.SOCK_STREAM
        assert sock.proto == socket.getprotobyname("tcp")
        assert sock.fileno() >= 0
    finally:
        sock.close()

def test_make_tcp_socket_unknown_protocol(caplog):
    """Test protocol lookup failure."""
    with patch.object(sockets.socket, "getprotobyname", side_effect=OSError("protocol not found")):
        with pytest.raises(SocketSetupError):
            make_tcp_socket()

    assert 'protocol not found: "tcp"' in caplog.messages

def test_make_tcp_socket_creation_failure(caplog):
    """Test socket() failure is reported with the system error."""
    error = OSError(errno.EMFILE, "Too many open files")
    with patch.object(sockets.socket, "socket", side_effect=error):
        with pytest.raises(SocketSetupError) as exc_info:
            make_tcp_socket()

    assert isinstance(exc_info.value, CloseTestError)
    assert exc_info.value.__cause__ is error
    assert "socket: Too many open files" in caplog.messages

@pytest.mark.parametrize("text", ["127.0.0.1", "0.0.0.0", "10.88.88.2", "255.255.255.255"])
def test_parse_ipv4_valid(text: str):
    """Test well-formed dotted quads."""
    assert parse_ipv4(text) == text

@pytest.mark.parametrize("text", [
    "not-an-ip",
    "999.1.1.1",
    "1.2.3",
    "",
    "::1",
    "localhost",
    "127.0.0.1\0",
])
def test_parse_ipv4_invalid(text: str):
    """Test malformed addresses are rejected without name resolution."""
    with pytest.raises(AddressParseError) as exc_info:
        parse_ipv4(text)
    assert "failed to parse IP address" in str(exc_info.value)

def test_describe_error():
    """Test error descriptions."""
    assert describe_error(BrokenPipeError(errno.EPIPE, "Broken pipe")) == "Broken pipe"
    assert describe_error(OSError("no errno here")) == "no errno here"
