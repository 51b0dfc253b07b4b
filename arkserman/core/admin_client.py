"""Administrative (RCON) command client for a running game server."""

import logging
import sys
from typing import Iterable, Optional, TextIO, Tuple

from rcon.source import Client

from ..utils.constants import DEFAULT_RCON_TIMEOUT

logger = logging.getLogger(__name__)


def parse_host_port(address: str) -> Tuple[str, int]:
    """Split a ``host:port`` address.

    An empty host means localhost, as in ``:27020``. The RCON client
    connects over IPv4, so IPv6 literals are not supported.

    Args:
        address: Address string

    Returns:
        Tuple of (host, port)

    Raises:
        ValueError: If the port is missing or not a number
    """
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid host:port address: {address!r}")
    host = host or "localhost"
    return host, int(port)


class AdminCommandClient:
    """Runs operator commands over a single RCON connection."""

    def __init__(
        self,
        address: str,
        password: str,
        timeout: Optional[float] = DEFAULT_RCON_TIMEOUT,
        client_factory=Client,
    ):
        """Initialize the client.

        Args:
            address: RCON host:port
            password: RCON (admin) password
            timeout: Socket timeout in seconds
            client_factory: RCON client class, replaced in tests
        """
        self.host, self.port = parse_host_port(address)
        self.password = password
        self.timeout = timeout
        self.client_factory = client_factory

    def run(self, commands: Iterable[str], out: TextIO = None) -> None:
        """Execute commands in order, printing each command and its response.

        The first failing command aborts the sequence; the error propagates.

        Args:
            commands: Commands to run
            out: Stream to print to, stdout by default
        """
        if out is None:
            out = sys.stdout
        logger.debug(f"Connecting to {self.host}:{self.port}")
        with self.client_factory(self.host, self.port, timeout=self.timeout, passwd=self.password) as client:
            for command in commands:
                print(f"Running: {command}", file=out)
                response = client.run(command)
                print(f"  Got: {response}", file=out)
