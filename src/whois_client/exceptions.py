"""
WHOIS Client Exceptions

Error types raised by the transport layer and the lookup facade.
The parser never raises; unmatched fields are reported as absent.
"""

from typing import Optional


class WhoisError(Exception):
    """Base exception for WHOIS errors."""

    def __init__(self, message: str, server: Optional[str] = None, domain: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.server = server
        self.domain = domain

    def __str__(self) -> str:
        return self.message


class WhoisConnectionError(WhoisError):
    """Connection refused, reset or name resolution failure."""


class WhoisTimeoutError(WhoisError):
    """Server did not close the connection within the timeout."""


class WhoisEmptyResponseError(WhoisError):
    """Server closed the connection without sending any text."""


class WhoisServerNotFound(WhoisError):
    """No WHOIS server is known for the domain's TLD."""
