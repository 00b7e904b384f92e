# =============================================================================
# contacts_core/sync/change_detector.py
# Cheap "does the UI need a redraw?" Check
# =============================================================================
"""
ChangeDetector - approximates dataset equality in O(1).

Only lengths and the head element are compared. Repeated navigation with no
changes and a new record prepended by a newest-first query are both caught;
an edit to a non-head record with the length unchanged is not. That gap is
known and accepted, the next full reload shows the edit.
"""

from __future__ import annotations
from typing import Any, Optional, Sequence, Tuple


class ChangeDetector:
    """
    Decide whether a freshly fetched dataset differs from the one on screen.

    Args:
        fields: Attribute names compared on the first element of each set
    """

    def __init__(self, fields: Tuple[str, ...]):
        self.fields = fields

    def needs_update(
        self,
        old: Optional[Sequence[Any]],
        new: Optional[Sequence[Any]],
    ) -> bool:
        if not old:
            return True

        if not new:
            return len(old) > 0

        if len(old) != len(new):
            return True

        old_first, new_first = old[0], new[0]
        for name in self.fields:
            if getattr(old_first, name, None) != getattr(new_first, name, None):
                return True

        return False

    def __repr__(self) -> str:
        return f"ChangeDetector(fields={self.fields!r})"


RESULTS_DETECTOR = ChangeDetector(("id", "updated_at", "created_at"))
CONTACTS_DETECTOR = ChangeDetector(("id", "organization_name", "email"))
HISTORY_DETECTOR = ChangeDetector(("task_name", "latest_date", "total_results"))


def needs_update(old: Optional[Sequence[Any]], new: Optional[Sequence[Any]]) -> bool:
    """Flat-results check (id, updated_at, created_at on the head record)."""
    return RESULTS_DETECTOR.needs_update(old, new)
