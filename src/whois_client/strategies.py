"""
Field Extraction Strategies

Each record field has an ordered table of rules. A rule pairs a matcher
(text -> match object or list) with an extractor (match -> value). Rules
are tried in order and the first one producing a non-empty value wins;
later rules are never consulted.

Registry conventions are added by appending rows with Strategy.with_rule(),
not by changing the evaluation loop.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, List, Optional, Sequence, Tuple

Matcher = Callable[[str], Any]
Extractor = Callable[[Any], Any]


@dataclass(frozen=True)
class Rule:
    """One heuristic for one field."""
    family: str  # registry convention served, e.g. ".gg/.je block"
    match: Matcher
    extract: Extractor


@dataclass(frozen=True)
class Strategy:
    """Ordered rules for one record field."""
    field: str
    rules: Tuple[Rule, ...]

    @property
    def families(self) -> List[str]:
        return [rule.family for rule in self.rules]

    def evaluate(self, text: str) -> Any:
        """Return the first non-empty extracted value, or None."""
        return self.evaluate_with_family(text)[1]

    def evaluate_with_family(self, text: str) -> Tuple[Optional[str], Any]:
        """Return (family, value) of the winning rule, or (None, None)."""
        for rule in self.rules:
            found = rule.match(text)
            if not found:
                continue
            value = rule.extract(found)
            if value:
                return rule.family, value
        return None, None

    def with_rule(self, rule: Rule, before: Optional[str] = None) -> "Strategy":
        """
        Return a copy with a rule added.

        Args:
            rule: Rule to add
            before: Family name to insert in front of (default: append)

        Raises:
            KeyError: If ``before`` names no rule in this strategy
        """
        rules = list(self.rules)
        if before is None:
            rules.append(rule)
        else:
            families = self.families
            if before not in families:
                raise KeyError(f"No rule family {before!r} in {self.field} strategy")
            rules.insert(families.index(before), rule)
        return Strategy(self.field, tuple(rules))


# =============================================================================
# Matchers and Extractors
# =============================================================================

def search(pattern: str, flags: int = re.IGNORECASE) -> Matcher:
    """Matcher returning the first match of pattern."""
    regex = re.compile(pattern, flags)
    return regex.search


def search_all(pattern: str, flags: int = re.IGNORECASE) -> Matcher:
    """Matcher returning every match of pattern, in order."""
    regex = re.compile(pattern, flags)
    return lambda text: list(regex.finditer(text))


def first_group(match: re.Match) -> Optional[str]:
    """Group 1, trimmed; None when blank."""
    return match.group(1).strip() or None


def first_token(value: str) -> Optional[str]:
    """First whitespace-delimited token; drops trailing IP annotations."""
    parts = value.split()
    return parts[0] if parts else None


def block_lines(match: re.Match) -> List[str]:
    """Trimmed, non-empty lines of a captured block."""
    return [line.strip() for line in match.group(1).split("\n") if line.strip()]


def block_hosts(match: re.Match) -> List[str]:
    """First token of each block line, skipping WHOIS footer lines."""
    return [
        first_token(line)
        for line in block_lines(match)
        if not line.startswith("WHOIS")
    ]


def colon_hosts(matches: Sequence[re.Match]) -> List[str]:
    """Hostnames from ``label: host [ip]`` lines, one trailing dot removed."""
    hosts = []
    for match in matches:
        host = first_token(match.group(1))
        if host:
            hosts.append(host[:-1] if host.endswith(".") else host)
    return hosts


def bracket_hosts(matches: Sequence[re.Match]) -> List[str]:
    """Hostnames from ``[label] host`` lines."""
    hosts = []
    for match in matches:
        host = first_token(match.group(1))
        if host:
            hosts.append(host)
    return hosts


def _colon_pattern(label: str) -> str:
    # Dotted filler allowed, e.g. "domain...............: test.ax"
    return rf"{re.escape(label)}[.\s]*:\s*(.+)"


def _bracket_pattern(label: str) -> str:
    return rf"\[{re.escape(label)}\]\s+(.+)"


def find_values(text: str, label: str) -> List[str]:
    """
    Collect every ``label: value`` line, case-insensitive, in order.

    Args:
        text: Response text
        label: Field label

    Returns:
        Trimmed values; empty list if none
    """
    regex = re.compile(rf"{re.escape(label)}:[^\S\n]*(\S.*)", re.IGNORECASE)
    return [m.group(1).strip() for m in regex.finditer(text)]


def label_strategy(field: str, labels: Sequence[str]) -> Strategy:
    """
    Single-value strategy over label synonyms.

    Each synonym is tried in colon form, then bracket form, before moving
    to the next synonym.
    """
    rules = []
    for label in labels:
        rules.append(Rule(f"{label}:", search(_colon_pattern(label)), first_group))
        rules.append(Rule(f"[{label}]", search(_bracket_pattern(label)), first_group))
    return Strategy(field, tuple(rules))


def value_rules(labels: Sequence[str]) -> List[Rule]:
    """Multi-value colon rules; the first label with any value wins."""
    return [
        Rule(f"{label}:", lambda text, label=label: find_values(text, label), list)
        for label in labels
    ]


def _host_colon_rule(label: str) -> Rule:
    return Rule(f"{label}:", search_all(rf"{re.escape(label)}\s*:\s*(.+)"), colon_hosts)


def _date_rule(family: str, pattern: str, flags: int = re.IGNORECASE) -> Rule:
    return Rule(family, search(pattern, flags), first_group)


# =============================================================================
# Default Tables
# =============================================================================

NAMESERVER_SYNONYMS = ("nserver", "Nserver", "Name Server", "nameservers", "nameserver", "Host Name")
STATUS_SYNONYMS = ("Domain Status", "Status", "state")

DOMAIN_NAME_STRATEGY = label_strategy("domain_name", ("Domain", "Domain Name"))
REGISTRAR_STRATEGY = label_strategy("registrar", ("Registrar",))
REGISTRANT_STRATEGY = label_strategy(
    "registrant", ("Registrant", "registrant name", "org", "Organization")
)
DNSSEC_STRATEGY = label_strategy("dnssec", ("DNSSEC", "Signed"))
LAST_MODIFIED_STRATEGY = label_strategy(
    "last_modified", ("Last Modified", "Last Update", "Changed")
)

# Block formats come first: footer boilerplate can contain colon-form noise.
NAMESERVER_STRATEGY = Strategy("nameservers", (
    Rule(
        ".gg/.je block",
        search(r"Name servers:\s*(.*?)(?=\n\n|WHOIS lookup)", re.IGNORECASE | re.DOTALL),
        block_hosts,
    ),
    Rule(
        ".it block",
        search(r"Nameservers\s*\n(.*?)(?=\n\n|\n(?-i:[A-Z]))", re.IGNORECASE | re.DOTALL),
        block_hosts,
    ),
    *[_host_colon_rule(label) for label in NAMESERVER_SYNONYMS],
    Rule(".jp bracket", search_all(r"\[Name Server\]\s+(.+)"), bracket_hosts),
))

STATUS_STRATEGY = Strategy("status", (
    Rule(
        ".gg/.je block",
        search(r"Domain Status:\s*(.*?)(?=\n\n|Registrant:)", re.IGNORECASE | re.DOTALL),
        block_lines,
    ),
    *value_rules(STATUS_SYNONYMS),
))

CREATION_DATE_STRATEGY = Strategy("creation_date", (
    _date_rule(".gg/.je", r"Registered on (\d+(?:st|nd|rd|th) \w+ \d{4})"),
    _date_rule(".ru/.de/.it", r"created:\s*(.+)"),
    _date_rule("gTLD", r"Creation Date:\s*(.+)"),
    _date_rule("Created On", r"Created On:\s*(.+)"),
    _date_rule(".kr", r"Registered Date\s*:\s*(.+)"),
    _date_rule(".jp", r"\[登録年月日\]\s+(.+)", 0),
    _date_rule(".cn", r"Registration Time:\s*(.+)"),
    _date_rule("Registration Date", r"Registration Date:\s*(.+)"),
))

EXPIRATION_DATE_STRATEGY = Strategy("expiration_date", (
    _date_rule(".gg/.je", r"Registry fee due on (\d+(?:st|nd|rd|th) \w+ each year)"),
    _date_rule(".ru", r"paid-till:\s*(.+)"),
    _date_rule(".it", r"Expire Date:\s*(.+)"),
    _date_rule("gTLD", r"Registry Expiry Date:\s*(.+)"),
    _date_rule(".kr", r"Expiration Date\s*:\s*(.+)"),
    _date_rule("renewal date", r"renewal date:\s*(.+)"),
    _date_rule("Expires On", r"Expires On:\s*(.+)"),
    _date_rule(".jp", r"\[有効期限\]\s+(.+)", 0),
    _date_rule(".cn", r"Expiration Time:\s*(.+)"),
))

DEFAULT_STRATEGIES = MappingProxyType({
    strategy.field: strategy
    for strategy in (
        DOMAIN_NAME_STRATEGY,
        REGISTRAR_STRATEGY,
        CREATION_DATE_STRATEGY,
        EXPIRATION_DATE_STRATEGY,
        NAMESERVER_STRATEGY,
        REGISTRANT_STRATEGY,
        STATUS_STRATEGY,
        DNSSEC_STRATEGY,
        LAST_MODIFIED_STRATEGY,
    )
})

DATE_FIELDS = ("creation_date", "expiration_date")
