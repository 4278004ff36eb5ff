"""
athlete_flow.records — Row Sanitizer.

Normalizes one loosely-typed raw record into a CleanedRecord. A raw record
is either a mapping (e.g. a csv.DictReader row) or an object exposing the
fields as attributes. Missing fields and None read as blank.

Design contract:
    - sanitize_record() never raises for bad input. Fallback labels absorb
      every blank or missing value.
    - Every CleanedRecord field is a non-empty, trimmed string.
    - NUL characters never survive sanitization.
    - Pure: no I/O, no state.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from athlete_flow.constants import (
    CATEGORY_FIELD,
    COUNTRY_FIELD,
    SUBGROUP_FIELD,
    UNKNOWN,
    UNKNOWN_COUNTRY,
    UNKNOWN_DISCIPLINE,
)


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CleanedRecord:
    """One sanitized record. All fields non-empty."""

    country: str
    category_raw: str
    subgroup: str


@dataclass(frozen=True, slots=True)
class ExplodedRecord:
    """One CleanedRecord per atomic category label."""

    country: str
    category: str
    subgroup: str


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------


def read_field(raw: Any, field: str) -> Any:
    """Return the raw value of *field*, or None if the record lacks it."""
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return raw.get(field)
    return getattr(raw, field, None)


def to_text(value: Any) -> str:
    """Coerce to a trimmed string. None reads as blank."""
    if value is None:
        return ""
    return str(value).replace("\x00", "").strip()


def clean(value: Any, fallback: str) -> str:
    """Coerce and trim *value*; substitute *fallback* when blank."""
    text = to_text(value)
    return text if text else fallback


# ---------------------------------------------------------------------------
# Sanitizer
# ---------------------------------------------------------------------------


def sanitize_record(
    raw: Any,
    country_field: str = COUNTRY_FIELD,
    category_field: str = CATEGORY_FIELD,
    subgroup_field: str = SUBGROUP_FIELD,
) -> CleanedRecord:
    """Normalize one raw record into a CleanedRecord."""
    return CleanedRecord(
        country=clean(read_field(raw, country_field), UNKNOWN_COUNTRY),
        category_raw=clean(read_field(raw, category_field), UNKNOWN_DISCIPLINE),
        subgroup=clean(read_field(raw, subgroup_field), UNKNOWN),
    )


def sanitize_records(records: Any) -> list[CleanedRecord]:
    """Sanitize every record in order. Input is not mutated."""
    return [sanitize_record(r) for r in records]
