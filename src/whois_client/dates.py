"""
Date normalization for WHOIS responses.

Registries publish dates in many grammars. Known shapes are rewritten
to ``YYYY-MM-DDT00:00:00Z``; anything else is returned as received.
"""

import re
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Optional

MONTHS = MappingProxyType({
    "january": "01",
    "february": "02",
    "march": "03",
    "april": "04",
    "may": "05",
    "june": "06",
    "july": "07",
    "august": "08",
    "september": "09",
    "october": "10",
    "november": "11",
    "december": "12",
})

# "30th April 2003" (.gg, .je)
RE_ORDINAL_DATE = re.compile(r"(\d+)(?:st|nd|rd|th)\s+(\w+)\s+(\d{4})", re.IGNORECASE | re.ASCII)
# "30th April each year"
RE_RECURRING_DATE = re.compile(r"(\d+)(?:st|nd|rd|th)\s+(\w+)\s+each year", re.IGNORECASE | re.ASCII)
# "2005/05/30" (.jp)
RE_SLASHED_DATE = re.compile(r"(\d{4})/(\d{2})/(\d{2})", re.ASCII)
# "2007. 03. 02." (.kr)
RE_DOTTED_DATE = re.compile(r"(\d{4})\.\s*(\d{2})\.\s*(\d{2})\.?", re.ASCII)


def _timestamp(year, month: str, day: str) -> str:
    return f"{year}-{month}-{day.zfill(2)}T00:00:00Z"


def normalize_date(raw: Optional[str], now: Optional[datetime] = None) -> Optional[str]:
    """
    Convert registry date text to an ISO 8601 timestamp.

    Recurring dates ("30th April each year") carry no year; they are
    resolved to the calendar year after ``now``.

    Args:
        raw: Date text as found in the response
        now: Reference time for recurring dates (default: current UTC time)

    Returns:
        Canonical timestamp, or the input unchanged if the shape is unknown
    """
    if raw is None:
        return None

    text = raw.strip()

    match = RE_ORDINAL_DATE.search(text)
    if match:
        day, month, year = match.groups()
        number = MONTHS.get(month.lower())
        if number:
            return _timestamp(year, number, day)

    match = RE_RECURRING_DATE.search(text)
    if match:
        day, month = match.groups()
        number = MONTHS.get(month.lower())
        if number:
            if now is None:
                now = datetime.now(timezone.utc)
            return _timestamp(now.year + 1, number, day)

    match = RE_SLASHED_DATE.fullmatch(text)
    if match:
        return _timestamp(*match.groups())

    match = RE_DOTTED_DATE.fullmatch(text)
    if match:
        return _timestamp(*match.groups())

    return raw
