# =============================================================================
# contacts_core/sync/render.py
# Data Kinds and the Presentation Boundary
# =============================================================================

from __future__ import annotations
from enum import Enum
from typing import Any, Protocol, Sequence


class DataKind(Enum):
    """The finite set of datasets the dashboard syncs."""
    RESULTS = "results"
    HISTORY = "history"
    CONTACTS = "contacts"


class PlaceholderKind(Enum):
    """Neutral states drawn instead of a table."""
    LOADING = "loading"
    EMPTY = "empty"
    ERROR = "error"


class RenderBoundary(Protocol):
    """Where synced datasets end up. Implemented by the Streamlit renderer."""

    def render(self, kind: DataKind, items: Sequence[Any]) -> None: ...

    def placeholder(self, kind: DataKind, placeholder: PlaceholderKind, message: str) -> None: ...
