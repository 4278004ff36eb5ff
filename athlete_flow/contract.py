"""
athlete_flow.contract — Pydantic models of the FlowGraph payload.

Validates the plain-dict form produced by FlowGraph.to_payload() before it
reaches a rendering collaborator:

    {
      "nodes": [{"label": str, "name": str, "tier": str}],
      "edges": [{"sourceIndex": int, "targetIndex": int, "weight": int}]
    }

Invariants enforced on the whole payload:
    - node labels are unique
    - every edge index is a valid node position
    - every node is referenced by at least one edge
    - (sourceIndex, targetIndex) pairs are unique
"""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field, model_validator

from athlete_flow.sankey import FlowGraph


class FlowNodeOut(BaseModel):
    model_config = {"extra": "forbid"}

    label: str = Field(..., min_length=1)
    name: str
    tier: Literal["Country", "Discipline", "Gender"]


class FlowEdgeOut(BaseModel):
    model_config = {"extra": "forbid", "populate_by_name": True}

    source_index: int = Field(..., alias="sourceIndex", ge=0)
    target_index: int = Field(..., alias="targetIndex", ge=0)
    weight: int = Field(..., ge=1)


class FlowGraphOut(BaseModel):
    """Validated flow graph payload."""

    model_config = {"extra": "forbid"}

    nodes: List[FlowNodeOut]
    edges: List[FlowEdgeOut]

    @model_validator(mode="after")
    def _check_graph_invariants(self) -> FlowGraphOut:
        labels = [n.label for n in self.nodes]
        if len(set(labels)) != len(labels):
            raise ValueError("Duplicate node labels in flow graph payload.")

        k = len(self.nodes)
        referenced: set[int] = set()
        pairs: set[tuple[int, int]] = set()
        for e in self.edges:
            if e.source_index >= k or e.target_index >= k:
                raise ValueError(
                    f"Edge index out of range: {e.source_index} -> {e.target_index} "
                    f"(nodes={k})."
                )
            pair = (e.source_index, e.target_index)
            if pair in pairs:
                raise ValueError(f"Duplicate edge pair: {pair}.")
            pairs.add(pair)
            referenced.update(pair)

        orphans = sorted(set(range(k)) - referenced)
        if orphans:
            raise ValueError(f"Orphan nodes in flow graph payload: {orphans}.")
        return self


def validate_flow_graph(graph: FlowGraph) -> FlowGraphOut:
    """Validate a FlowGraph's payload. Raises pydantic.ValidationError."""
    return FlowGraphOut.model_validate(graph.to_payload())
