"""
WHOIS Response Parser

Runs the per-field extraction strategies over one raw response and
builds a DomainRecord. Fields degrade independently: a field with no
matching rule is None, and parsing itself never raises.
"""

import logging
from datetime import datetime
from typing import Callable, Mapping, Optional, Union

from whois_client.connection import ENCODING
from whois_client.dates import normalize_date
from whois_client.models import DomainRecord
from whois_client.strategies import DATE_FIELDS, DEFAULT_STRATEGIES, Strategy

logger = logging.getLogger("whois.parser")

MULTI_VALUE_FIELDS = ("nameservers", "status")


def _normalize_text(text: Union[str, bytes, None]) -> str:
    if not text:
        return ""
    if isinstance(text, bytes):
        text = text.decode(ENCODING, errors="replace")
    return text.replace("\r\n", "\n").replace("\r", "\n")


class WhoisParser:
    """
    Parses WHOIS response text into DomainRecord objects.

    Example:
        parser = WhoisParser()
        record = parser.parse(raw_text, fallback_domain="google.jp")
        print(record.nameservers)

    Custom rules are supplied per field:

        strategies = {
            "registrar": REGISTRAR_STRATEGY.with_rule(
                Rule("sponsor", search(r"Sponsor:\\s*(.+)"), first_group)
            ),
        }
        parser = WhoisParser(strategies=strategies)
    """

    def __init__(
        self,
        strategies: Optional[Mapping[str, Strategy]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize parser.

        Args:
            strategies: Per-field strategy overrides, keyed by DomainRecord field name
            clock: Returns the reference time for recurring dates (default: current UTC time)

        Raises:
            ValueError: If a strategy names an unknown field
        """
        merged = dict(DEFAULT_STRATEGIES)
        for name, strategy in (strategies or {}).items():
            if name not in DEFAULT_STRATEGIES:
                raise ValueError(f"Unknown record field for strategy: {name}")
            merged[name] = strategy
        self._strategies = merged
        self._clock = clock

    def _extract(self, name: str, text: str, domain: Optional[str], now: Optional[datetime]):
        """Evaluate one field's strategy; errors leave the field absent."""
        try:
            family, value = self._strategies[name].evaluate_with_family(text)
            if value is None:
                logger.debug("No rule matched %s for %s", name, domain or "response")
                return None

            if name in DATE_FIELDS:
                value = normalize_date(value, now)
            elif name in MULTI_VALUE_FIELDS:
                value = (value,) if isinstance(value, str) else tuple(value)
        except Exception as e:
            logger.warning("Extraction of %s failed for %s: %s", name, domain or "response", e)
            return None

        logger.debug("Matched %s for %s using %s rule", name, domain or "response", family)
        return value

    def parse(
        self,
        text: Union[str, bytes, None],
        fallback_domain: Optional[str] = None,
    ) -> DomainRecord:
        """
        Parse a raw WHOIS response.

        Args:
            text: Response text; bytes are decoded as UTF-8 with replacement
            fallback_domain: Queried domain, used when no domain field is found

        Returns:
            DomainRecord with unmatched fields set to None
        """
        text = _normalize_text(text)
        now = self._clock() if self._clock else None

        values = {}
        for name in self._strategies:
            value = self._extract(name, text, fallback_domain, now)
            if value is not None:
                values[name] = value

        if "domain_name" not in values and fallback_domain:
            values["domain_name"] = fallback_domain

        return DomainRecord(**values)


_default_parser = WhoisParser()


def parse_whois(text: Union[str, bytes, None], fallback_domain: Optional[str] = None) -> DomainRecord:
    """Parse a raw WHOIS response with the default strategies."""
    return _default_parser.parse(text, fallback_domain)
