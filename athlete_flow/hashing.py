"""
athlete_flow.hashing — Deterministic fingerprint of a flow graph.

The hash input is human-readable text, one field per line, newline
terminated, UTF-8 encoded:

    nodes=<k>
    node.<i>=<label>
    edge=<source>><target>:<weight>

Identical graphs hash identically; any change to a label, its position,
an edge, its order or its weight changes the hash.
"""

from __future__ import annotations

import hashlib

from athlete_flow.sankey import FlowGraph


def graph_hash_input(graph: FlowGraph) -> str:
    """Canonical text that compute_graph_hash() digests."""
    parts = [f"nodes={len(graph.nodes)}"]
    for i, label in enumerate(graph.nodes):
        parts.append(f"node.{i}={label}")
    for e in graph.edges:
        parts.append(f"edge={e.source}>{e.target}:{e.weight}")
    return "\n".join(parts) + "\n"


def compute_graph_hash(graph: FlowGraph) -> str:
    """SHA-256 hex digest (64 characters) of a FlowGraph."""
    return hashlib.sha256(graph_hash_input(graph).encode("utf-8")).hexdigest()
