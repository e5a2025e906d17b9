"""
Role Parser Module - Split taxonomy role titles into seniority level and base role.

This module classifies role titles such as "Senior Data Analyst" into a
normalized (level, base) pair using an ordered list of textual rules:

1. Prefix rules: one per level token, tested in LEVEL_PREFIXES order
2. Chief rule: sits at the "Chief" position but keeps the token in the base
3. Introducer rule: "Head of" / "Assistant Director of" / "Director of"
4. Base tier: anything else is level "" with the full title as base

Rules are evaluated in sequence and the first match wins. Parenthetical
specializations such as "(Operations)" are never stripped.
"""

import logging
import re
import unicodedata
from typing import List, Optional, Tuple

from core.constants import BASE_LEVEL, LEVEL_PREFIXES, LEVELS, MANAGEMENT_SUFFIX_PATTERN
from core.models import ParsedRole


_MANAGEMENT_SUFFIX_RE = re.compile(MANAGEMENT_SUFFIX_PATTERN, re.IGNORECASE)

_CANONICAL_TOKENS = {token.lower(): token for token in LEVEL_PREFIXES}


# ============================================================================
# Matcher Rules
# ============================================================================

class RoleRule:
    """Base class for role title rules."""

    def match(self, role: str) -> Optional[ParsedRole]:
        """Return a ParsedRole if this rule applies, otherwise None."""
        raise NotImplementedError


class PrefixRule(RoleRule):
    """Strip a leading level token: "Senior Data Analyst" -> ("Senior", "Data Analyst")."""

    def __init__(self, token: str):
        self.token = token
        self.pattern = re.compile(rf"^{re.escape(token)}\b\s*", re.IGNORECASE)

    def match(self, role: str) -> Optional[ParsedRole]:
        m = self.pattern.match(role)
        if not m:
            return None
        return ParsedRole(level=self.token, base=role[m.end():].strip())

    def __repr__(self) -> str:
        return f"PrefixRule({self.token!r})"


class ChiefRule(RoleRule):
    """Chief roles keep "Chief" in the base so they form their own bucket.

    "Chief Technology Officer" -> ("Chief", "Chief Technology Officer").
    Re-parsing the base gives the same result.
    """

    pattern = re.compile(r"^Chief\b\s*(.*)$", re.IGNORECASE)

    def match(self, role: str) -> Optional[ParsedRole]:
        m = self.pattern.match(role)
        if not m:
            return None
        rest = m.group(1).strip()
        base = f"Chief {rest}" if rest else "Chief"
        return ParsedRole(level="Chief", base=base)

    def __repr__(self) -> str:
        return "ChiefRule()"


class IntroducerRule(RoleRule):
    """Second pass for "Head of X", "Assistant Director of X", "Director of X"."""

    pattern = re.compile(r"^(Head of|Assistant Director of|Director of)\s+(.+)$", re.IGNORECASE)

    def match(self, role: str) -> Optional[ParsedRole]:
        m = self.pattern.match(role)
        if not m:
            return None
        level = _CANONICAL_TOKENS[m.group(1).lower()]
        return ParsedRole(level=level, base=m.group(2).strip())

    def __repr__(self) -> str:
        return "IntroducerRule()"


def build_role_rules() -> List[RoleRule]:
    """Build the ordered rule list.

    The Chief rule takes the place of the plain "Chief" prefix rule so the
    token is never stripped from Chief titles.
    """
    rules: List[RoleRule] = []
    for token in LEVEL_PREFIXES:
        if token == "Chief":
            rules.append(ChiefRule())
        else:
            rules.append(PrefixRule(token))
    rules.append(IntroducerRule())
    return rules


ROLE_RULES = build_role_rules()


# ============================================================================
# Parsing and Ranking
# ============================================================================

def normalize_title(role_raw: str) -> str:
    """Trim and drop a trailing "- Management" suffix."""
    role = (role_raw or "").strip()
    return _MANAGEMENT_SUFFIX_RE.sub("", role).strip()


def parse_role(role_raw: str, rules: Optional[List[RoleRule]] = None) -> ParsedRole:
    """Split a role title into (level, base).

    Never raises; titles that match no rule are base tier.

    Args:
        role_raw: Role title from the taxonomy
        rules: Rule list, defaults to ROLE_RULES

    Returns:
        ParsedRole

    Example:
        >>> parse_role("Assistant Director of Platforms")
        ParsedRole(level='Assistant Director of', base='Platforms')
    """
    if rules is None:
        rules = ROLE_RULES

    role = normalize_title(role_raw)

    for rule in rules:
        parsed = rule.match(role)
        if parsed is not None:
            return parsed

    return ParsedRole(level=BASE_LEVEL, base=role)


def level_rank(level: str) -> int:
    """Position of a level in LEVELS. Unknown levels rank as the base tier."""
    try:
        return LEVELS.index(level)
    except ValueError:
        logging.debug(f"Unknown level '{level}', ranking as base tier")
        return LEVELS.index(BASE_LEVEL)


def lexical_key(text: str) -> Tuple[str, str, str]:
    """Accent- and case-insensitive ordering with an exact tie-break.

    "Économiste" sorts between "Analyst" and "Zoo Keeper".
    """
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold(), text.casefold(), text


def role_sort_key(role: str) -> Tuple[int, Tuple[str, str, str]]:
    """Sort key for roles inside a bucket: level rank, then title."""
    return level_rank(parse_role(role).level), lexical_key(role)
