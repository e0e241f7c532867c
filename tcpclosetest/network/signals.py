import os
import signal
from typing import Any, Callable, Optional, Union

from .sockets import SignalSetupError

STDOUT_FILENO = 1
SIGPIPE_NOTICE = b"got SIGPIPE\n"

Handler = Union[Callable[[int, Any], None], int, None]


def on_sigpipe(signum: int, frame: Any) -> None:
    """Report SIGPIPE delivery.

    Runs at an arbitrary point of the write loop, so it writes a fixed
    literal straight to the stdout descriptor: no logging, no buffered
    streams, no shared state.
    """
    os.write(STDOUT_FILENO, SIGPIPE_NOTICE)


def install_sigpipe_handler(handler: Callable[[int, Any], None] = on_sigpipe) -> Handler:
    """Install a SIGPIPE handler and return the one it replaced.

    Must be called from the main thread.

    Raises:
        SignalSetupError: If the platform has no SIGPIPE or the handler
            cannot be installed
    """
    sigpipe = getattr(signal, "SIGPIPE", None)
    if sigpipe is None:
        raise SignalSetupError("sigaction: SIGPIPE is not available on this platform")
    try:
        return signal.signal(sigpipe, handler)
    except (OSError, ValueError) as e:
        raise SignalSetupError(f"sigaction: {e}") from e


def restore_sigpipe_handler(previous: Optional[Handler]) -> None:
    """Put back a handler returned by install_sigpipe_handler."""
    if previous is None:
        # Previous handler was not installed from Python
        return
    signal.signal(signal.SIGPIPE, previous)
