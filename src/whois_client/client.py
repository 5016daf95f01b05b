"""
WHOIS Client

High-level client: resolve the server for a domain, query it and
parse the response into a DomainRecord.
"""

import logging
from typing import Mapping, Optional

from whois_client.config import WhoisConfig
from whois_client.connection import DEFAULT_TIMEOUT, WHOIS_PORT, whois_query
from whois_client.exceptions import WhoisServerNotFound
from whois_client.models import DomainRecord, ServerDirectory, tld_of
from whois_client.parser import WhoisParser

logger = logging.getLogger("whois.client")


class WhoisClient:
    """
    WHOIS lookup client.

    The TLD -> server directory is supplied by the caller. Each query is
    one round trip with no retries; pacing between queries is up to the
    caller.

    Example:
        client = WhoisClient(servers={"jp": "whois.jprs.jp", "de": "whois.denic.de"})

        record = client.lookup("google.jp")
        print(record.registrar, record.expiration_date)

        raw = client.query("google.de")
    """

    def __init__(
        self,
        servers: Optional[Mapping[str, str]] = None,
        port: int = WHOIS_PORT,
        timeout: float = DEFAULT_TIMEOUT,
        parser: Optional[WhoisParser] = None,
    ):
        """
        Initialize WHOIS client.

        Args:
            servers: TLD -> WHOIS server hostname mapping
            port: WHOIS server port (default: 43)
            timeout: Seconds allowed per query
            parser: Parser for lookup() results (default: standard strategies)
        """
        self.directory = servers if isinstance(servers, ServerDirectory) else ServerDirectory(servers)
        self.port = port
        self.timeout = timeout
        self.parser = parser or WhoisParser()

    @classmethod
    def from_config(cls, config: WhoisConfig, parser: Optional[WhoisParser] = None) -> "WhoisClient":
        """Create a client from loaded configuration."""
        return cls(
            servers=config.servers,
            port=config.server.port,
            timeout=config.server.timeout,
            parser=parser,
        )

    def server_for(self, domain: str) -> str:
        """
        Get the WHOIS server for a domain.

        Raises:
            WhoisServerNotFound: If the TLD is not in the directory
        """
        server = self.directory.server_for(domain)
        if not server:
            raise WhoisServerNotFound(
                f"No WHOIS server found for .{tld_of(domain)}", domain=domain
            )
        return server

    def query(self, domain: str, server: Optional[str] = None) -> str:
        """
        Fetch the raw WHOIS response for a domain.

        Args:
            domain: Domain name
            server: WHOIS server (default: looked up by TLD)

        Returns:
            Response text

        Raises:
            WhoisServerNotFound: If no server is given or known
            WhoisConnectionError: Connection failure
            WhoisTimeoutError: Server did not close in time
            WhoisEmptyResponseError: Blank response
        """
        server = server or self.server_for(domain)
        logger.info("Querying %s via %s", domain, server)
        return whois_query(domain, server, timeout=self.timeout, port=self.port)

    def lookup(self, domain: str, server: Optional[str] = None) -> DomainRecord:
        """
        Query and parse WHOIS data for a domain.

        Transport errors propagate as raised by query(). Fields the
        registry does not publish are None in the returned record.

        Args:
            domain: Domain name
            server: WHOIS server (default: looked up by TLD)

        Returns:
            Parsed DomainRecord
        """
        text = self.query(domain, server)
        record = self.parser.parse(text, fallback_domain=domain)
        logger.debug("Parsed %s: %s", domain, ", ".join(record.fields_found))
        return record
