"""
athlete_flow.focus — FocusCoordinator, the single owner of FocusSelection.

One coordinator is shared by every view. Views read ``current`` at the
start of a recomputation and never mutate it.

Toggle semantics:
    select("USA")  → focus "USA"
    select("USA")  → focus cleared
    select("FRA")  → focus "FRA" (replaces, never merges)
    select(None)   → focus cleared
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from athlete_flow.sankey import normalize_focus

logger = logging.getLogger("athlete_flow.focus")


class FocusCoordinator:
    """Holds the optional focus country. Replaced wholesale on every change."""

    def __init__(self, initial: Optional[str] = None) -> None:
        self._current: Optional[str] = self._normalize(initial)

    @staticmethod
    def _normalize(value: Optional[str]) -> Optional[str]:
        return normalize_focus(value)

    @property
    def current(self) -> Optional[str]:
        return self._current

    @property
    def is_active(self) -> bool:
        return self._current is not None

    def select(self, country: Optional[str]) -> Optional[str]:
        """Toggle *country*: set it, or clear it if it is already active.

        Returns the focus value after the toggle.
        """
        value = self._normalize(country)
        new = None if value == self._current else value
        self._set(new)
        return new

    def clear(self) -> None:
        self._set(None)

    def _set(self, new: Optional[str]) -> None:
        previous = self._current
        self._current = new
        if previous != new:
            logger.info(json.dumps({
                "event": "focus_changed",
                "previous": previous,
                "current": new,
            }))

    def __repr__(self) -> str:
        return f"FocusCoordinator(current={self._current!r})"
