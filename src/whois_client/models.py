"""
WHOIS Client Models

Data classes for parsed WHOIS records and the TLD server directory.
"""

from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple


# =============================================================================
# Parsed Record
# =============================================================================

@dataclass(frozen=True)
class DomainRecord:
    """Structured registration data extracted from one WHOIS response.

    A field is None when no extraction rule matched it. Multi-valued
    fields are tuples so the record cannot be mutated after parsing.
    """
    domain_name: Optional[str] = None
    registrar: Optional[str] = None
    creation_date: Optional[str] = None
    expiration_date: Optional[str] = None
    nameservers: Optional[Tuple[str, ...]] = None
    registrant: Optional[str] = None
    status: Optional[Tuple[str, ...]] = None
    dnssec: Optional[str] = None
    last_modified: Optional[str] = None

    @property
    def fields_found(self) -> List[str]:
        """Names of the fields that were populated."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]

    def to_dict(self) -> Dict[str, Any]:
        """Return the record as a plain dict (tuples become lists)."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = list(value)
            result[f.name] = value
        return result


# =============================================================================
# Server Directory
# =============================================================================

def tld_of(domain: str) -> str:
    """Return the lowercase last label of a domain name."""
    return domain.strip().rstrip(".").rsplit(".", 1)[-1].lower()


class ServerDirectory(Mapping[str, str]):
    """
    Read-only TLD -> WHOIS server hostname mapping.

    The contents are supplied by the caller; keys are normalized to
    lowercase labels without a leading dot.

    Example:
        directory = ServerDirectory({"jp": "whois.jprs.jp", ".DE": "whois.denic.de"})
        directory.server_for("google.de")  # "whois.denic.de"
    """

    def __init__(self, servers: Optional[Mapping[str, str]] = None):
        entries = {}
        for tld, host in (servers or {}).items():
            entries[str(tld).strip().lstrip(".").lower()] = str(host).strip()
        self._servers = MappingProxyType(entries)

    def __getitem__(self, tld: str) -> str:
        return self._servers[tld.strip().lstrip(".").lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._servers)

    def __len__(self) -> int:
        return len(self._servers)

    def __repr__(self) -> str:
        return f"ServerDirectory({len(self._servers)} TLDs)"

    def server_for(self, domain: str) -> Optional[str]:
        """Return the server for the domain's TLD, or None if unknown."""
        return self._servers.get(tld_of(domain))
