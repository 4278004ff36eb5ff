"""
athlete_flow.dashboard — Top-level coordinator for the athlete dashboard.

Owns the record sequence, the pipeline options and the one
FocusCoordinator that every view reads. Recomputation is pull-based:
snapshot() rebuilds every view from scratch whenever the records, the
options or the focus changed since the last call, and otherwise returns
the last snapshot unchanged.

Design contract:
    - Records are replaced wholesale, never edited in place.
    - Views never own a copy of the focus. They receive it per run.
    - A DashboardSnapshot is immutable and complete. There is no
      partially recomputed state.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional

from athlete_flow import config
from athlete_flow.constants import CATEGORY_FIELD, COUNTRY_FIELD
from athlete_flow.focus import FocusCoordinator
from athlete_flow.hashing import compute_graph_hash
from athlete_flow.options import FlowOptions
from athlete_flow.ranking import validate_top_n
from athlete_flow.records import read_field
from athlete_flow.sankey import FlowGraph
from athlete_flow.views import CountryBar, ScatterPoint, country_bars, scatter_points

logger = logging.getLogger("athlete_flow.dashboard")


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DatasetSummary:
    """Headline counts: records, distinct countries, distinct disciplines."""

    records: int
    countries: int
    disciplines: int


@dataclass(frozen=True, slots=True)
class DashboardSnapshot:
    focus: Optional[str]
    options: FlowOptions
    bars: tuple[CountryBar, ...]
    points: tuple[ScatterPoint, ...]
    flow: FlowGraph
    flow_hash: str


def summarize(records: Iterable[Any]) -> DatasetSummary:
    """Count records and distinct non-empty country / discipline fields.

    Values are counted as they arrive, untrimmed: " USA" and "USA" are two
    countries here even though the flow graph merges them.
    """
    n = 0
    countries: set[str] = set()
    disciplines: set[str] = set()
    for r in records:
        n += 1
        country = read_field(r, COUNTRY_FIELD)
        if country is not None and str(country):
            countries.add(str(country))
        discipline = read_field(r, CATEGORY_FIELD)
        if discipline is not None and str(discipline):
            disciplines.add(str(discipline))
    return DatasetSummary(records=n, countries=len(countries), disciplines=len(disciplines))


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


class Dashboard:
    """Recomputes the bar, scatter and flow views on input change.

    Usage::

        dash = Dashboard(rows)
        dash.focus.select("USA")
        snap = dash.snapshot()      # flow graph restricted to USA
        dash.focus.select("USA")    # toggled off
        snap = dash.snapshot()      # back to the top-N graph
    """

    def __init__(
        self,
        records: Iterable[Any] = (),
        options: Optional[FlowOptions] = None,
        bar_top_n: Optional[int] = None,
        focus: Optional[FocusCoordinator] = None,
    ) -> None:
        self._records: tuple[Any, ...] = tuple(records)
        self._generation: int = 0
        self._options: FlowOptions = options if options is not None else FlowOptions()
        self._bar_top_n: int = validate_top_n(
            config.TOP_BAR_COUNTRIES if bar_top_n is None else bar_top_n, "bar_top_n"
        )
        # The coordinator is the only holder of the focus from here on.
        seed = self._options.selected_country
        if focus is None:
            focus = FocusCoordinator(seed)
        elif seed is not None:
            if focus.current is None:
                focus.select(seed)
            elif focus.current != seed:
                raise ValueError(
                    f"selected_country {seed!r} conflicts with the coordinator's "
                    f"focus {focus.current!r}."
                )
        self.focus: FocusCoordinator = focus
        self._options = self._options.with_focus(None)
        self._last_key: Optional[tuple[Any, ...]] = None
        self._last: Optional[DashboardSnapshot] = None

    # --- inputs -----------------------------------------------------------

    @property
    def records(self) -> tuple[Any, ...]:
        return self._records

    def set_records(self, records: Iterable[Any]) -> None:
        self._records = tuple(records)
        self._generation += 1

    @property
    def options(self) -> FlowOptions:
        return self._options

    def set_options(
        self,
        top_countries: Optional[int] = None,
        top_disciplines: Optional[int] = None,
    ) -> FlowOptions:
        """Replace the top-N values. Omitted values are kept."""
        self._options = FlowOptions(
            top_countries=(
                self._options.top_countries if top_countries is None else top_countries
            ),
            top_disciplines=(
                self._options.top_disciplines if top_disciplines is None else top_disciplines
            ),
        )
        return self._options

    @property
    def bar_top_n(self) -> int:
        return self._bar_top_n

    def set_bar_top_n(self, top_n: int) -> None:
        self._bar_top_n = validate_top_n(top_n, "bar_top_n")

    # --- outputs ----------------------------------------------------------

    def summary(self) -> DatasetSummary:
        return summarize(self._records)

    def snapshot(self) -> DashboardSnapshot:
        """Current state of every view, recomputed only if inputs changed."""
        focus = self.focus.current
        options = self._options.with_focus(focus)
        key = (self._generation, options, self._bar_top_n)
        if self._last is not None and key == self._last_key:
            return self._last

        flow = options.build(self._records)
        snapshot = DashboardSnapshot(
            focus=focus,
            options=options,
            bars=tuple(country_bars(self._records, self._bar_top_n, focus)),
            points=tuple(scatter_points(self._records, focus)),
            flow=flow,
            flow_hash=compute_graph_hash(flow),
        )

        logger.info(json.dumps({
            "event": "dashboard_recomputed",
            "generation": self._generation,
            "focus": focus,
            "top_countries": options.top_countries,
            "top_disciplines": options.top_disciplines,
            "bars": len(snapshot.bars),
            "points": len(snapshot.points),
            "flow_nodes": len(flow.nodes),
            "flow_edges": len(flow.edges),
            "flow_hash": snapshot.flow_hash,
        }))

        self._last_key = key
        self._last = snapshot
        return snapshot
