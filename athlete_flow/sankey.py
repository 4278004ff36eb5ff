"""
athlete_flow.sankey — Country → Discipline → Gender flow graph.

Pure-computation module. Zero I/O. Zero global state. Zero randomness.

Pipeline, run to completion on every call:

    sanitize → focus filter → top-N countries (unfocused only)
             → explode disciplines → top-N disciplines
             → aggregate edges → order nodes → resolve indices

Design contract:
    - Discipline ranking only ever sees rows that survived the country stage.
    - At most one edge per (source, target); weight = contributing rows.
    - Nodes are harvested from edges, so no orphan node can exist.
    - Node order: country tier, discipline tier, gender tier, each sorted.
    - An unresolvable edge endpoint is a pipeline bug and raises
      GraphInvariantError. A graph is either complete or not returned.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from athlete_flow.constants import (
    COUNTRY_PREFIX,
    DISCIPLINE_PREFIX,
    EDGE_KEY_SEPARATOR,
    GENDER_PREFIX,
    TIER_NAMES,
    TIER_PREFIXES,
)
from athlete_flow.disciplines import explode_categories
from athlete_flow.ranking import top_n_keys, validate_top_n
from athlete_flow.records import CleanedRecord, ExplodedRecord, sanitize_records

logger = logging.getLogger("athlete_flow.sankey")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class GraphInvariantError(RuntimeError):
    """Raised when the pipeline breaks one of its own guarantees."""


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FlowEdge:
    """Weighted edge between two tier-prefixed labels."""

    source: str
    target: str
    weight: int


@dataclass(frozen=True, slots=True)
class IndexedEdge:
    """Edge with endpoints resolved to node positions."""

    source: int
    target: int
    weight: int


@dataclass(frozen=True, slots=True)
class FlowGraph:
    """Immutable graph snapshot handed to the rendering collaborator."""

    nodes: tuple[str, ...]
    edges: tuple[IndexedEdge, ...]

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def to_payload(self) -> dict[str, Any]:
        """Plain-dict form: nodes with tier metadata, index-based edges."""
        return {
            "nodes": [
                {"label": label, "name": display_name(label), "tier": tier_of(label)}
                for label in self.nodes
            ],
            "edges": [
                {"sourceIndex": e.source, "targetIndex": e.target, "weight": e.weight}
                for e in self.edges
            ],
        }


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


def country_label(value: str) -> str:
    return COUNTRY_PREFIX + value


def discipline_label(value: str) -> str:
    return DISCIPLINE_PREFIX + value


def gender_label(value: str) -> str:
    return GENDER_PREFIX + value


def _prefix_of(label: str) -> str:
    for prefix in TIER_PREFIXES:
        if label.startswith(prefix):
            return prefix
    raise GraphInvariantError(f"Label has no tier prefix: {label!r}")


def tier_of(label: str) -> str:
    """Tier name of a label: "Country", "Discipline" or "Gender"."""
    return TIER_NAMES[_prefix_of(label)]


def display_name(label: str) -> str:
    """Label without its tier prefix."""
    return label[len(_prefix_of(label)):]


# ---------------------------------------------------------------------------
# Filtering stages
# ---------------------------------------------------------------------------


def normalize_focus(selected_country: str | None) -> str | None:
    """Blank focus values read as unset. Every holder of a focus uses this rule."""
    if selected_country is None:
        return None
    selected_country = str(selected_country).strip()
    return selected_country or None


def filter_countries(
    rows: list[CleanedRecord],
    top_countries: int,
    selected_country: str | None,
) -> list[CleanedRecord]:
    """Focus restriction, or top-N country cutoff when no focus is set."""
    if selected_country is not None:
        return [r for r in rows if r.country == selected_country]

    keep = top_n_keys(rows, lambda r: r.country, top_countries)
    return [r for r in rows if r.country in keep]


def explode_rows(rows: Iterable[CleanedRecord]) -> list[ExplodedRecord]:
    """One ExplodedRecord per atomic discipline label, in input order."""
    exploded: list[ExplodedRecord] = []
    for r in rows:
        for discipline in explode_categories(r.category_raw):
            exploded.append(ExplodedRecord(r.country, discipline, r.subgroup))
    return exploded


def filter_disciplines(
    rows: list[ExplodedRecord],
    top_disciplines: int,
) -> list[ExplodedRecord]:
    keep = top_n_keys(rows, lambda r: r.category, top_disciplines)
    return [r for r in rows if r.category in keep]


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def aggregate_edges(rows: Iterable[ExplodedRecord]) -> list[FlowEdge]:
    """Two unit-weight edges per row, merged per (source, target).

    Edges keep the order in which their pair first occurred.
    """
    merged: dict[str, list[Any]] = {}

    def add(source: str, target: str) -> None:
        key = source + EDGE_KEY_SEPARATOR + target
        entry = merged.get(key)
        if entry is None:
            merged[key] = [source, target, 1]
        else:
            entry[2] += 1

    for r in rows:
        c = country_label(r.country)
        d = discipline_label(r.category)
        g = gender_label(r.subgroup)
        add(c, d)
        add(d, g)

    return [FlowEdge(source, target, weight) for source, target, weight in merged.values()]


# ---------------------------------------------------------------------------
# Node ordering & index resolution
# ---------------------------------------------------------------------------


def order_nodes(edges: Iterable[FlowEdge]) -> list[str]:
    """Distinct endpoint labels, tier by tier, alphabetical within a tier."""
    buckets: dict[str, set[str]] = {prefix: set() for prefix in TIER_PREFIXES}
    for e in edges:
        for label in (e.source, e.target):
            buckets[_prefix_of(label)].add(label)

    ordered: list[str] = []
    for prefix in TIER_PREFIXES:
        ordered.extend(sorted(buckets[prefix]))
    return ordered


def resolve_indices(nodes: list[str], edges: Iterable[FlowEdge]) -> list[IndexedEdge]:
    """Rewrite edge endpoints as positions in *nodes*."""
    index = {label: i for i, label in enumerate(nodes)}
    if len(index) != len(nodes):
        raise GraphInvariantError("Node sequence contains duplicate labels.")

    resolved: list[IndexedEdge] = []
    for e in edges:
        source = index.get(e.source)
        target = index.get(e.target)
        if source is None or target is None:
            logger.error(json.dumps({
                "event": "index_resolution_failed",
                "source": e.source,
                "target": e.target,
            }))
            raise GraphInvariantError(
                f"Edge endpoint missing from node sequence: {e.source!r} -> {e.target!r}"
            )
        resolved.append(IndexedEdge(source, target, e.weight))
    return resolved


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_flow_graph(
    records: Iterable[Any],
    top_countries: int,
    top_disciplines: int,
    selected_country: str | None = None,
) -> FlowGraph:
    """Build the three-tier flow graph from raw athlete records.

    Args:
        records: Raw rows (mappings or attribute objects).
        top_countries: Countries kept when no focus is set. Ignored under focus.
        top_disciplines: Disciplines kept after the country stage.
        selected_country: Focus value, matched exactly against sanitized
            country names. None or blank means unfocused.

    Returns:
        A complete FlowGraph. Empty when nothing survives filtering.

    Raises:
        ValueError: If a top-N value is not a non-negative integer.
        GraphInvariantError: If index resolution fails (pipeline bug).
    """
    validate_top_n(top_countries, "top_countries")
    validate_top_n(top_disciplines, "top_disciplines")
    focus = normalize_focus(selected_country)

    cleaned = sanitize_records(records)
    by_country = filter_countries(cleaned, top_countries, focus)
    exploded = explode_rows(by_country)
    final_rows = filter_disciplines(exploded, top_disciplines)

    named_edges = aggregate_edges(final_rows)
    nodes = order_nodes(named_edges)
    edges = resolve_indices(nodes, named_edges)

    logger.debug(json.dumps({
        "event": "flow_graph_built",
        "records": len(cleaned),
        "country_rows": len(by_country),
        "exploded_rows": len(exploded),
        "final_rows": len(final_rows),
        "nodes": len(nodes),
        "edges": len(edges),
        "focus": focus,
    }))

    return FlowGraph(nodes=tuple(nodes), edges=tuple(edges))
