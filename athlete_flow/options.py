"""
athlete_flow.options — Configuration surface of the flow pipeline.

    {
      "topCountries": int >= 0,          # default FLOW_TOP_COUNTRIES (12)
      "topDisciplines": int >= 0,        # default FLOW_TOP_DISCIPLINES (12)
      "selectedCountry": str | null      # focus value, blank → null
    }

Snake-case field names are accepted too. Unknown keys are ignored.
Negative or non-integer counts are rejected with a ValidationError.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from athlete_flow import config
from athlete_flow.sankey import FlowGraph, build_flow_graph, normalize_focus


class FlowOptions(BaseModel):
    """Immutable, hashable pipeline options."""

    model_config = {"extra": "ignore", "populate_by_name": True, "frozen": True}

    top_countries: int = Field(
        default_factory=lambda: config.TOP_COUNTRIES,
        alias="topCountries",
        ge=0,
        description="Countries kept by the top-N cutoff when no focus is set.",
    )
    top_disciplines: int = Field(
        default_factory=lambda: config.TOP_DISCIPLINES,
        alias="topDisciplines",
        ge=0,
        description="Disciplines kept after the country stage.",
    )
    selected_country: Optional[str] = Field(
        default=None,
        alias="selectedCountry",
        description="Focus country. Bypasses the country cutoff when set.",
    )

    @field_validator("top_countries", "top_disciplines", mode="before")
    @classmethod
    def _reject_bool(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("top-N values must be integers, not booleans.")
        return v

    @field_validator("selected_country", mode="before")
    @classmethod
    def _normalize_focus(cls, v: Any) -> Optional[str]:
        return normalize_focus(v)

    def with_focus(self, selected_country: Optional[str]) -> FlowOptions:
        """Copy of these options with a different focus value."""
        return FlowOptions(
            top_countries=self.top_countries,
            top_disciplines=self.top_disciplines,
            selected_country=selected_country,
        )

    def build(self, records) -> FlowGraph:
        """Run the flow pipeline over *records* with these options."""
        return build_flow_graph(
            records,
            top_countries=self.top_countries,
            top_disciplines=self.top_disciplines,
            selected_country=self.selected_country,
        )
