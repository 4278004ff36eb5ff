"""
tests/test_sankey.py — Country → Discipline → Gender flow graph.

Tests the pure computation module (athlete_flow.sankey) directly:
stage functions, the end-to-end build, and the graph invariants
(valid indices, no orphans, unique pairs, stable ordering, focus rules).

Requires: pytest
"""

from __future__ import annotations

import pytest

from athlete_flow.focus import FocusCoordinator
from athlete_flow.options import FlowOptions
from athlete_flow.records import CleanedRecord, ExplodedRecord
from athlete_flow.sankey import (
    FlowEdge,
    FlowGraph,
    GraphInvariantError,
    IndexedEdge,
    aggregate_edges,
    build_flow_graph,
    display_name,
    explode_rows,
    filter_countries,
    normalize_focus,
    order_nodes,
    resolve_indices,
    tier_of,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def row(country, disciplines, gender, **extra) -> dict:
    return {"country": country, "disciplines": disciplines, "gender": gender, **extra}


EXAMPLE_ROWS = [
    row("USA", "Swimming", "Male"),
    row("USA", "Swimming", "Female"),
    row("USA", "Athletics", "Male"),
]


@pytest.fixture
def athletes() -> list[dict]:
    """Small multi-country dataset with list-encoded disciplines."""
    return [
        row("USA", "['Swimming']", "Male"),
        row("USA", "['Swimming', 'Athletics']", "Female"),
        row("USA", "Athletics", "Male"),
        row("USA", "Basketball", "Female"),
        row("FRA", "Judo", "Male"),
        row("FRA", "Judo", "Female"),
        row("FRA", "Fencing", "Female"),
        row("CHN", "Diving", "Female"),
        row("CHN", "Table Tennis", "Male"),
        row("JPN", "Judo", "Male"),
        row("", "Rowing", ""),
    ]


def named_edges(graph: FlowGraph) -> dict[tuple[str, str], int]:
    return {(graph.nodes[e.source], graph.nodes[e.target]): e.weight for e in graph.edges}


def assert_graph_invariants(graph: FlowGraph) -> None:
    k = len(graph.nodes)
    assert len(set(graph.nodes)) == k
    referenced = set()
    pairs = set()
    for e in graph.edges:
        assert 0 <= e.source < k
        assert 0 <= e.target < k
        assert e.weight >= 1
        assert (e.source, e.target) not in pairs
        pairs.add((e.source, e.target))
        referenced.update((e.source, e.target))
    assert referenced == set(range(k))


# ---------------------------------------------------------------------------
# Worked example
# ---------------------------------------------------------------------------

class TestWorkedExample:
    def test_nodes_tier_alphabetical(self):
        graph = build_flow_graph(EXAMPLE_ROWS, top_countries=1, top_disciplines=2)
        assert graph.nodes == (
            "C: USA",
            "D: Athletics",
            "D: Swimming",
            "G: Female",
            "G: Male",
        )

    def test_edges_and_weights(self):
        graph = build_flow_graph(EXAMPLE_ROWS, top_countries=1, top_disciplines=2)
        assert named_edges(graph) == {
            ("C: USA", "D: Swimming"): 2,
            ("C: USA", "D: Athletics"): 1,
            ("D: Swimming", "G: Male"): 1,
            ("D: Swimming", "G: Female"): 1,
            ("D: Athletics", "G: Male"): 1,
        }

    def test_edges_in_first_occurrence_order(self):
        graph = build_flow_graph(EXAMPLE_ROWS, top_countries=1, top_disciplines=2)
        assert graph.edges == (
            IndexedEdge(0, 2, 2),
            IndexedEdge(2, 4, 1),
            IndexedEdge(2, 3, 1),
            IndexedEdge(0, 1, 1),
            IndexedEdge(1, 4, 1),
        )

    def test_payload_shape(self):
        graph = build_flow_graph(EXAMPLE_ROWS, top_countries=1, top_disciplines=2)
        payload = graph.to_payload()
        assert payload["nodes"][0] == {"label": "C: USA", "name": "USA", "tier": "Country"}
        assert payload["edges"][0] == {"sourceIndex": 0, "targetIndex": 2, "weight": 2}
        assert len(payload["nodes"]) == 5
        assert len(payload["edges"]) == 5


# ---------------------------------------------------------------------------
# Graph invariants
# ---------------------------------------------------------------------------

class TestInvariants:
    @pytest.mark.parametrize("top_countries", [0, 1, 2, 3, 10])
    @pytest.mark.parametrize("top_disciplines", [0, 1, 3, 10])
    def test_indices_valid_no_orphans(self, athletes, top_countries, top_disciplines):
        graph = build_flow_graph(athletes, top_countries, top_disciplines)
        assert_graph_invariants(graph)

    def test_zero_countries_is_empty(self, athletes):
        graph = build_flow_graph(athletes, top_countries=0, top_disciplines=12)
        assert graph.nodes == ()
        assert graph.edges == ()
        assert graph.is_empty

    def test_zero_disciplines_is_empty(self, athletes):
        graph = build_flow_graph(athletes, top_countries=12, top_disciplines=0)
        assert graph.is_empty

    def test_empty_input(self):
        assert build_flow_graph([], 12, 12) == FlowGraph(nodes=(), edges=())

    def test_doubled_input_doubles_weights(self, athletes):
        once = build_flow_graph(athletes, 3, 5)
        twice = build_flow_graph(athletes + athletes, 3, 5)
        assert twice.nodes == once.nodes
        single = named_edges(once)
        double = named_edges(twice)
        assert set(double) == set(single)
        for pair, weight in single.items():
            assert double[pair] == 2 * weight

    def test_country_retention_is_monotonic(self, athletes):
        def countries(n):
            graph = build_flow_graph(athletes, n, 100)
            return {label for label in graph.nodes if tier_of(label) == "Country"}

        previous: set[str] = set()
        for n in range(0, 7):
            current = countries(n)
            assert previous <= current
            assert len(current) == min(n, 5)
            previous = current

    def test_tie_break_first_seen(self):
        rows = [
            row("BRA", "Surfing", "Male"),
            row("ARG", "Hockey", "Male"),
            row("ARG", "Hockey", "Female"),
            row("BRA", "Surfing", "Female"),
        ]
        graph = build_flow_graph(rows, top_countries=1, top_disciplines=5)
        assert graph.nodes[0] == "C: BRA"

    def test_rebuild_is_identical(self, athletes):
        assert build_flow_graph(athletes, 3, 4) == build_flow_graph(athletes, 3, 4)

    def test_input_not_mutated(self, athletes):
        before = [dict(r) for r in athletes]
        build_flow_graph(athletes, 2, 2, "USA")
        assert athletes == before

    def test_accepts_generator(self):
        graph = build_flow_graph((r for r in EXAMPLE_ROWS), 1, 2)
        assert len(graph.nodes) == 5


# ---------------------------------------------------------------------------
# Filtering order
# ---------------------------------------------------------------------------

class TestFilteringOrder:
    def test_discipline_ranking_scoped_to_country_stage(self):
        rows = [
            row("AAA", "Judo", "Male"),
            row("AAA", "Rowing", "Male"),
            row("AAA", "Boxing", "Male"),
            row("AAA", "Golf", "Male"),
            row("BBB", "Sailing", "Male"),
            row("BBB", "Sailing", "Male"),
            row("BBB", "Sailing", "Male"),
        ]
        graph = build_flow_graph(rows, top_countries=1, top_disciplines=1)
        assert graph.nodes == ("C: AAA", "D: Judo", "G: Male")

    def test_exploded_labels_counted_after_explosion(self):
        rows = [
            row("USA", "['Swimming', 'Relay']", "Male"),
            row("USA", "Relay", "Female"),
            row("USA", "Archery", "Female"),
        ]
        graph = build_flow_graph(rows, top_countries=1, top_disciplines=1)
        assert "D: Relay" in graph.nodes
        assert "D: Swimming" not in graph.nodes

    def test_blank_country_becomes_unknown_node(self, athletes):
        graph = build_flow_graph(athletes, top_countries=10, top_disciplines=20)
        assert "C: Unknown Country" in graph.nodes
        assert "G: Unknown" in graph.nodes

    def test_missing_discipline_becomes_unknown_discipline(self):
        graph = build_flow_graph([{"country": "USA", "gender": "Male"}], 1, 1)
        assert graph.nodes == ("C: USA", "D: Unknown Discipline", "G: Male")

    def test_tiers_never_collide(self):
        graph = build_flow_graph([row("Judo", "Judo", "Judo")], 1, 1)
        assert graph.nodes == ("C: Judo", "D: Judo", "G: Judo")
        assert_graph_invariants(graph)

    def test_invalid_top_n_rejected(self, athletes):
        with pytest.raises(ValueError):
            build_flow_graph(athletes, -1, 12)
        with pytest.raises(ValueError):
            build_flow_graph(athletes, 12, 2.5)


# ---------------------------------------------------------------------------
# Focus
# ---------------------------------------------------------------------------

class TestFocus:
    @pytest.mark.parametrize("top_countries", [0, 1, 12])
    def test_single_country_tier(self, athletes, top_countries):
        graph = build_flow_graph(athletes, top_countries, 12, selected_country="FRA")
        countries = [n for n in graph.nodes if tier_of(n) == "Country"]
        assert countries == ["C: FRA"]

    def test_focus_outside_top_n(self, athletes):
        graph = build_flow_graph(athletes, 1, 12, selected_country="JPN")
        assert named_edges(graph) == {
            ("C: JPN", "D: Judo"): 1,
            ("D: Judo", "G: Male"): 1,
        }

    def test_discipline_cutoff_still_applies(self, athletes):
        graph = build_flow_graph(athletes, 12, 1, selected_country="FRA")
        assert graph.nodes == ("C: FRA", "D: Judo", "G: Female", "G: Male")

    def test_focus_is_case_sensitive(self, athletes):
        assert build_flow_graph(athletes, 12, 12, selected_country="fra").is_empty

    def test_unknown_focus_is_empty(self, athletes):
        assert build_flow_graph(athletes, 12, 12, selected_country="ZZZ").is_empty

    def test_focus_on_fallback_country(self, athletes):
        graph = build_flow_graph(athletes, 12, 12, selected_country="Unknown Country")
        assert graph.nodes == ("C: Unknown Country", "D: Rowing", "G: Unknown")

    def test_blank_focus_is_unset(self, athletes):
        assert build_flow_graph(athletes, 2, 3, "  ") == build_flow_graph(athletes, 2, 3)

    def test_normalize_focus(self):
        assert normalize_focus(None) is None
        assert normalize_focus("") is None
        assert normalize_focus(" USA ") == "USA"

    @pytest.mark.parametrize("raw", [None, "", "   ", " FRA ", "FRA", 7])
    def test_focus_rule_shared_by_every_holder(self, raw):
        expected = normalize_focus(raw)
        assert FocusCoordinator(raw).current == expected
        assert FlowOptions(selected_country=raw).selected_country == expected


# ---------------------------------------------------------------------------
# Stage functions
# ---------------------------------------------------------------------------

class TestStages:
    def test_filter_countries_top_n(self):
        rows = [CleanedRecord("A", "x", "g"), CleanedRecord("B", "x", "g"),
                CleanedRecord("A", "y", "g")]
        assert filter_countries(rows, 1, None) == [rows[0], rows[2]]

    def test_explode_rows(self):
        rows = [CleanedRecord("A", "x, y", "g")]
        assert explode_rows(rows) == [
            ExplodedRecord("A", "x", "g"),
            ExplodedRecord("A", "y", "g"),
        ]

    def test_aggregate_merges_duplicates(self):
        rows = [ExplodedRecord("A", "x", "g")] * 3
        assert aggregate_edges(rows) == [
            FlowEdge("C: A", "D: x", 3),
            FlowEdge("D: x", "G: g", 3),
        ]

    def test_aggregate_keys_do_not_collide(self):
        rows = [
            ExplodedRecord("A|||D: b", "c", "g"),
            ExplodedRecord("A", "b|||D: c", "g"),
        ]
        edges = aggregate_edges(rows)
        assert len(edges) == 4
        assert all(e.weight == 1 for e in edges)

    def test_order_nodes(self):
        edges = [
            FlowEdge("D: z", "G: b", 1),
            FlowEdge("C: y", "D: z", 1),
            FlowEdge("C: x", "D: a", 1),
            FlowEdge("D: a", "G: a", 1),
        ]
        assert order_nodes(edges) == ["C: x", "C: y", "D: a", "D: z", "G: a", "G: b"]

    def test_resolve_indices(self):
        nodes = ["C: x", "D: a"]
        assert resolve_indices(nodes, [FlowEdge("C: x", "D: a", 4)]) == [IndexedEdge(0, 1, 4)]

    def test_unresolvable_endpoint_is_fatal(self):
        with pytest.raises(GraphInvariantError):
            resolve_indices(["C: x"], [FlowEdge("C: x", "D: a", 1)])

    def test_duplicate_nodes_are_fatal(self):
        with pytest.raises(GraphInvariantError):
            resolve_indices(["C: x", "C: x"], [])

    def test_unprefixed_label_is_fatal(self):
        with pytest.raises(GraphInvariantError):
            tier_of("USA")

    def test_invariant_error_is_runtime_error(self):
        assert issubclass(GraphInvariantError, RuntimeError)

    def test_label_helpers(self):
        assert tier_of("D: Judo") == "Discipline"
        assert tier_of("G: Male") == "Gender"
        assert display_name("C: Unknown Country") == "Unknown Country"
