"""
athlete_flow.constants — Single source of truth for flow-graph constants.

Fallback labels, tier prefixes and default cutoffs are defined here only;
the pipeline, the views and the tests all read them from this module.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Raw record field names — athlete CSV columns
# ---------------------------------------------------------------------------

COUNTRY_FIELD: str = "country"
CATEGORY_FIELD: str = "disciplines"
SUBGROUP_FIELD: str = "gender"
NAME_FIELD: str = "name"
HEIGHT_FIELD: str = "height"
WEIGHT_FIELD: str = "weight"

# ---------------------------------------------------------------------------
# Fallback labels — substituted for blank or missing values
# ---------------------------------------------------------------------------

UNKNOWN_COUNTRY: str = "Unknown Country"
UNKNOWN_DISCIPLINE: str = "Unknown Discipline"
UNKNOWN: str = "Unknown"
"""Subgroup fallback, and the generic fallback used by the sibling views."""

# ---------------------------------------------------------------------------
# Tiers — prefix discriminators, canonical column order
# ---------------------------------------------------------------------------

COUNTRY_PREFIX: str = "C: "
DISCIPLINE_PREFIX: str = "D: "
GENDER_PREFIX: str = "G: "

TIER_PREFIXES: tuple[str, ...] = (COUNTRY_PREFIX, DISCIPLINE_PREFIX, GENDER_PREFIX)
"""Tier order of the node sequence: country, discipline, gender."""

TIER_NAMES: dict[str, str] = {
    COUNTRY_PREFIX: "Country",
    DISCIPLINE_PREFIX: "Discipline",
    GENDER_PREFIX: "Gender",
}

EDGE_KEY_SEPARATOR: str = "\x00"
"""Joins source and target labels into an edge merge key.
Sanitization strips NUL, so it never occurs inside a label."""

# ---------------------------------------------------------------------------
# Category field parsing
# ---------------------------------------------------------------------------

CATEGORY_SEPARATORS: str = ",;|/"

# ---------------------------------------------------------------------------
# Top-N defaults
# ---------------------------------------------------------------------------

DEFAULT_TOP_COUNTRIES: int = 12
DEFAULT_TOP_DISCIPLINES: int = 12
DEFAULT_TOP_BAR_COUNTRIES: int = 15
