import sys
import logging
from typing import List, Optional

from tcpclosetest.config import CloseTestConfig, PROGRAM_NAME, LOG_DIR, LOG_LEVEL
from tcpclosetest.network.client import CloseTestClient
from tcpclosetest.network.server import CloseTestServer
from tcpclosetest.utils.logging_config import setup_logging

USAGE = 'usage: {program} "server" | IP_ADDRESS'

logger = logging.getLogger(__name__)


def usage(program: str) -> None:
    """Print usage on stdout and exit with status 2."""
    print(USAGE.format(program=program))
    sys.exit(2)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for tcpclosetest.

    Runs the server sequence for the literal argument "server"; any other
    single argument is handed to the client as the address to connect to.
    """
    if argv is None:
        argv = sys.argv
    program = argv[0] if argv else PROGRAM_NAME

    if len(argv) != 2:
        usage(program)

    config = CloseTestConfig(program_name=program)
    setup_logging(config.program_name, LOG_DIR, LOG_LEVEL)

    if argv[1] == "server":
        logger.debug("Running in server mode")
        return CloseTestServer(config).run()

    logger.debug(f"Running in client mode against {argv[1]!r}")
    return CloseTestClient(argv[1], config).run()


if __name__ == "__main__":
    sys.exit(main())
