# =============================================================================
# contacts_core/sync/sorting.py
# Date Ordering for the Contacts View
# =============================================================================

from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional, Sequence

from contacts_core.logging import get_logger
from contacts_core.models import Record

logger = get_logger(__name__)


class SortDirection(Enum):
    """Display order for the contacts table."""
    DESCENDING = "desc"     # newest first
    ASCENDING = "asc"       # oldest first

    def flipped(self) -> SortDirection:
        if self is SortDirection.DESCENDING:
            return SortDirection.ASCENDING
        return SortDirection.DESCENDING

    @property
    def arrow(self) -> str:
        return "↓" if self is SortDirection.DESCENDING else "↑"


def sort_by_date(
    records: Sequence[Record],
    direction: SortDirection = SortDirection.DESCENDING,
) -> List[Record]:
    """
    Stable sort on parsing time, then creation time.

    Undated records all sort as one shared "now", captured once per call,
    so they keep their relative order in either direction.

    Returns:
        A new list; the input is not modified
    """
    now = datetime.now(timezone.utc)
    return sorted(
        records,
        key=lambda r: r.dated_or(now),
        reverse=direction is SortDirection.DESCENDING,
    )


class SortController:
    """
    Holds the contacts sort direction and the last list shown.

    A direction toggle re-sorts the retained list and hands it to the bound
    render callback; nothing is fetched.

    Usage:
        sorter = SortController()
        sorter.bind(lambda items: renderer.render(DataKind.CONTACTS, items))
        shown = sorter.apply(fresh_contacts)
        sorter.toggle()
    """

    def __init__(self, direction: SortDirection = SortDirection.DESCENDING):
        self.direction = direction
        self.last_rendered: List[Record] = []
        self._render: Optional[Callable[[List[Record]], None]] = None

    def bind(self, render: Callable[[List[Record]], None]) -> None:
        self._render = render

    def apply(self, records: Sequence[Record]) -> List[Record]:
        """Sort by the current direction and remember the result."""
        self.last_rendered = sort_by_date(records, self.direction)
        return self.last_rendered

    def toggle(self) -> List[Record]:
        """Flip the direction and redraw the retained list."""
        self.direction = self.direction.flipped()
        logger.info(f"Date sort toggled to: {self.direction.value}")
        return self.rerender()

    def rerender(self) -> List[Record]:
        """Re-sort the retained list with the current direction and draw it."""
        self.last_rendered = sort_by_date(self.last_rendered, self.direction)
        if self._render is not None:
            self._render(self.last_rendered)
        return self.last_rendered
