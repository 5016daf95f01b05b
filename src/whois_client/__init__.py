"""
WHOIS Client Toolkit

Fetches and parses free-text WHOIS responses from ccTLD and gTLD registries.
"""

from whois_client.client import WhoisClient
from whois_client.config import WhoisConfig
from whois_client.connection import WhoisConnection, whois_query
from whois_client.dates import normalize_date
from whois_client.exceptions import (
    WhoisConnectionError,
    WhoisEmptyResponseError,
    WhoisError,
    WhoisServerNotFound,
    WhoisTimeoutError,
)
from whois_client.models import DomainRecord, ServerDirectory
from whois_client.parser import WhoisParser, parse_whois
from whois_client.strategies import DEFAULT_STRATEGIES, Rule, Strategy

__version__ = "1.0.0"

__all__ = [
    "WhoisClient",
    "WhoisConfig",
    "WhoisConnection",
    "whois_query",
    "normalize_date",
    "WhoisError",
    "WhoisConnectionError",
    "WhoisTimeoutError",
    "WhoisEmptyResponseError",
    "WhoisServerNotFound",
    "DomainRecord",
    "ServerDirectory",
    "WhoisParser",
    "parse_whois",
    "DEFAULT_STRATEGIES",
    "Rule",
    "Strategy",
]
