"""
WHOIS Connection

Plain-text TCP transport for the WHOIS protocol (RFC 3912).

The request is the query followed by CRLF. The response is unframed
text that ends when the server closes the connection.
"""

import logging
import socket
import time
from typing import Optional

from whois_client.exceptions import (
    WhoisConnectionError,
    WhoisEmptyResponseError,
    WhoisTimeoutError,
)

logger = logging.getLogger("whois.connection")

WHOIS_PORT = 43
DEFAULT_TIMEOUT = 30.0
BUFFER_SIZE = 4096
ENCODING = "utf-8"


class WhoisConnection:
    """
    Single-use connection to a WHOIS server.

    The timeout bounds the whole exchange, from connect until the server
    closes the connection. The socket is closed before any error is raised.

    Example:
        with WhoisConnection("whois.jprs.jp") as conn:
            conn.send_query("google.jp")
            text = conn.receive()
    """

    def __init__(self, host: str, port: int = WHOIS_PORT, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize connection.

        Args:
            host: WHOIS server hostname
            port: WHOIS server port (default: 43)
            timeout: Seconds allowed for the whole query
        """
        self.host = host
        self.port = port
        self.timeout = float(timeout)
        self._socket: Optional[socket.socket] = None
        self._deadline: Optional[float] = None
        self._domain: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        """Check if the socket is open."""
        return self._socket is not None

    def _remaining(self) -> float:
        """Seconds left before the deadline."""
        if self._deadline is None:
            return self.timeout
        return self._deadline - time.monotonic()

    def _timed_out(self) -> WhoisTimeoutError:
        self.close()
        logger.warning("WHOIS server %s timed out after %.1fs", self.host, self.timeout)
        return WhoisTimeoutError(
            f"WHOIS server {self.host} timed out after {self.timeout:g} seconds"
            f" querying {self._domain}",
            server=self.host,
            domain=self._domain,
        )

    def _failed(self, error: OSError) -> WhoisConnectionError:
        self.close()
        logger.warning("WHOIS server %s error for %s: %s", self.host, self._domain, error)
        return WhoisConnectionError(
            f"WHOIS server {self.host} error querying {self._domain}: {error}",
            server=self.host,
            domain=self._domain,
        )

    def connect(self, domain: Optional[str] = None) -> None:
        """
        Open the TCP connection and start the timeout clock.

        Resolved addresses are tried in order, all sharing one deadline.
        Name resolution itself cannot be interrupted; the deadline is
        checked once it returns.

        Args:
            domain: Domain being queried, used in error messages

        Raises:
            WhoisConnectionError: If the connection fails
            WhoisTimeoutError: If connecting takes longer than the timeout
        """
        if self._socket is not None:
            raise WhoisConnectionError(
                f"Connection already open to {self.host}", server=self.host, domain=domain
            )

        self._domain = domain
        self._deadline = time.monotonic() + self.timeout

        try:
            addresses = socket.getaddrinfo(self.host, self.port, 0, socket.SOCK_STREAM)
        except OSError as e:
            raise self._failed(e) from e

        error: Optional[OSError] = None
        for family, sock_type, proto, _, address in addresses:
            remaining = self._remaining()
            if remaining <= 0:
                raise self._timed_out() from error

            sock = socket.socket(family, sock_type, proto)
            try:
                sock.settimeout(remaining)
                sock.connect(address)
            except OSError as e:
                sock.close()
                logger.debug("Connect to %s at %s failed: %s", self.host, address, e)
                error = e
                continue

            self._socket = sock
            break

        if self._socket is None:
            if error is None:
                error = OSError(f"No addresses found for {self.host}")
            if isinstance(error, socket.timeout):
                raise self._timed_out() from error
            raise self._failed(error) from error

        logger.debug("Connected to WHOIS server %s:%d", self.host, self.port)

    def send_query(self, domain: str) -> None:
        """
        Send the query line.

        Args:
            domain: Domain name to look up

        Raises:
            WhoisConnectionError: If not connected or the write fails
            WhoisTimeoutError: If the deadline has passed
        """
        if self._socket is None:
            raise WhoisConnectionError(
                f"Not connected to {self.host}", server=self.host, domain=domain
            )

        self._domain = domain
        remaining = self._remaining()
        if remaining <= 0:
            raise self._timed_out()

        try:
            self._socket.settimeout(remaining)
            self._socket.sendall(f"{domain}\r\n".encode(ENCODING))
        except socket.timeout as e:
            raise self._timed_out() from e
        except OSError as e:
            raise self._failed(e) from e

    def receive(self) -> str:
        """
        Read until the server closes the connection.

        Returns:
            Response text

        Raises:
            WhoisConnectionError: If not connected or the read fails
            WhoisTimeoutError: If the server does not close in time
            WhoisEmptyResponseError: If the response is blank
        """
        if self._socket is None:
            raise WhoisConnectionError(
                f"Not connected to {self.host}", server=self.host, domain=self._domain
            )

        chunks = []
        while True:
            remaining = self._remaining()
            if remaining <= 0:
                raise self._timed_out()

            try:
                self._socket.settimeout(remaining)
                data = self._socket.recv(BUFFER_SIZE)
            except socket.timeout as e:
                raise self._timed_out() from e
            except OSError as e:
                raise self._failed(e) from e

            if not data:
                break
            chunks.append(data)

        self.close()

        text = b"".join(chunks).decode(ENCODING, errors="replace")
        logger.debug("Received %d bytes from %s", len(text), self.host)

        if not text.strip():
            raise WhoisEmptyResponseError(
                f"WHOIS server {self.host} returned no data for {self._domain}",
                server=self.host,
                domain=self._domain,
            )

        return text

    def close(self) -> None:
        """Close the socket if open."""
        if self._socket is not None:
            try:
                self._socket.close()
            except OSError as e:
                logger.debug("Error closing socket to %s: %s", self.host, e)
            self._socket = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False


def whois_query(
    domain: str,
    server: str,
    timeout: float = DEFAULT_TIMEOUT,
    port: int = WHOIS_PORT,
) -> str:
    """
    Query a WHOIS server and return the raw response text.

    One round trip, no retries. The socket is closed on every path.

    Args:
        domain: Domain name to look up
        server: WHOIS server hostname
        timeout: Seconds allowed until the server closes the connection
        port: Server port (default: 43)

    Returns:
        Full response text

    Raises:
        WhoisConnectionError: Connection refused, reset or unresolvable host
        WhoisTimeoutError: No close within the timeout
        WhoisEmptyResponseError: Blank response
    """
    with WhoisConnection(server, port=port, timeout=timeout) as conn:
        conn.connect(domain)
        logger.debug("Querying %s for %s", server, domain)
        conn.send_query(domain)
        return conn.receive()
