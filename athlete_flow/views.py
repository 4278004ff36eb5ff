"""
athlete_flow.views — Sibling chart data: country bars and height/weight points.

These views share the dashboard's focus but, unlike the flow graph, never
substitute fallback labels for blank countries in the bar ranking, and
drop records whose numbers do not parse instead of repairing them.

Country bars:
    Blank countries are dropped. Top-N countries by record count,
    descending, ties in first-seen order. ``selected`` marks the focus.

Scatter points:
    height/weight coerced to finite floats, else null. Null or
    non-positive measurements drop the record. Focus does not filter:
    ``emphasis`` is None when unfocused, else whether the point belongs
    to the focus country.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional

from athlete_flow.constants import (
    CATEGORY_FIELD,
    COUNTRY_FIELD,
    HEIGHT_FIELD,
    NAME_FIELD,
    SUBGROUP_FIELD,
    UNKNOWN,
    WEIGHT_FIELD,
)
from athlete_flow.disciplines import display_category
from athlete_flow.ranking import rank_counts, validate_top_n
from athlete_flow.records import clean, read_field, to_text


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CountryBar:
    country: str
    count: int
    selected: bool


@dataclass(frozen=True, slots=True)
class ScatterPoint:
    height: float
    weight: float
    gender: str
    name: str
    country: str
    discipline: str
    emphasis: Optional[bool]


# ---------------------------------------------------------------------------
# Numeric coercion
# ---------------------------------------------------------------------------


def to_number(value: Any) -> Optional[float]:
    """Finite float, or None. Blank strings read as None, not 0."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


# ---------------------------------------------------------------------------
# Country bars
# ---------------------------------------------------------------------------


def country_bars(
    records: Iterable[Any],
    top_n: int,
    selected_country: Optional[str] = None,
) -> list[CountryBar]:
    """Top-N countries by record count, blank countries excluded."""
    validate_top_n(top_n, "top_n")
    countries = [to_text(read_field(r, COUNTRY_FIELD)) for r in records]
    ranked = rank_counts((c for c in countries if c), lambda c: c)
    return [
        CountryBar(country=c, count=n, selected=(c == selected_country))
        for c, n in ranked[:top_n]
    ]


# ---------------------------------------------------------------------------
# Height / weight scatter
# ---------------------------------------------------------------------------


def scatter_points(
    records: Iterable[Any],
    selected_country: Optional[str] = None,
) -> list[ScatterPoint]:
    """Plottable points, in input order."""
    points: list[ScatterPoint] = []
    for r in records:
        h = to_number(read_field(r, HEIGHT_FIELD))
        w = to_number(read_field(r, WEIGHT_FIELD))
        if h is None or w is None:
            continue
        if h <= 0 or w <= 0:
            continue

        country = clean(read_field(r, COUNTRY_FIELD), UNKNOWN)
        points.append(ScatterPoint(
            height=h,
            weight=w,
            gender=clean(read_field(r, SUBGROUP_FIELD), UNKNOWN),
            name=clean(read_field(r, NAME_FIELD), UNKNOWN),
            country=country,
            discipline=display_category(read_field(r, CATEGORY_FIELD)),
            emphasis=None if selected_country is None else country == selected_country,
        ))
    return points


def legend_groups(points: Iterable[ScatterPoint]) -> list[str]:
    """Sorted distinct genders, the scatter's color domain."""
    return sorted({p.gender for p in points})
