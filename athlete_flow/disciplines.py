"""
athlete_flow.disciplines — Category Field Exploder.

The discipline field of an athlete row arrives in one of three surface
forms, parsed with strict precedence:

    quoted_list      "['Freestyle', 'Relay']"  → ["Freestyle", "Relay"]
    separator_split  "Trampoline, Vault"       → ["Trampoline", "Vault"]
    passthrough      "Judo"                    → ["Judo"]

Only a field wrapped in [...] is read as a quoted list, so apostrophes in
"Women's Rugby / Men's Rugby" fall through to the separator rule. Quoted
items are never re-split by the separator rule, so an item such as
'Cycling Road/Track' stays whole.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from athlete_flow.constants import CATEGORY_SEPARATORS, UNKNOWN
from athlete_flow.records import to_text

QUOTED_LIST = "quoted_list"
SEPARATOR_SPLIT = "separator_split"
PASSTHROUGH = "passthrough"

_BRACKET_LIST_RE = re.compile(r"^\[.*\]$", re.DOTALL)
_QUOTED_ITEM_RE = re.compile(r"'([^']+)'")
_SEPARATOR_RE = re.compile("[" + re.escape(CATEGORY_SEPARATORS) + "]")


@dataclass(frozen=True, slots=True)
class ParsedCategory:
    """Tagged parse result. ``items`` always holds at least one label."""

    kind: str
    items: tuple[str, ...]


def _quoted_items(raw: str) -> list[str]:
    # Apostrophes outside a bracketed list are text, not quotes.
    if not _BRACKET_LIST_RE.match(raw):
        return []
    items = [m.group(1).strip() for m in _QUOTED_ITEM_RE.finditer(raw)]
    return [item for item in items if item]


def parse_category_field(raw: str) -> ParsedCategory:
    """Parse a cleaned, non-empty category field into its atomic labels."""
    quoted = _quoted_items(raw)
    if quoted:
        return ParsedCategory(QUOTED_LIST, tuple(quoted))

    if _SEPARATOR_RE.search(raw):
        pieces = [p.strip() for p in _SEPARATOR_RE.split(raw)]
        pieces = [p for p in pieces if p]
        if pieces:
            return ParsedCategory(SEPARATOR_SPLIT, tuple(pieces))

    return ParsedCategory(PASSTHROUGH, (raw,))


def explode_categories(raw: str) -> list[str]:
    """Atomic category labels for one cleaned field, in surface order."""
    return list(parse_category_field(raw).items)


def display_category(value) -> str:
    """Composite, comma-joined discipline label for a single-row display."""
    text = to_text(value)
    if not text:
        return UNKNOWN

    quoted = _quoted_items(text)
    if quoted:
        return ", ".join(quoted)

    stripped = re.sub(r"^\[|\]$", "", text).replace('"', "").strip()
    return stripped or UNKNOWN
