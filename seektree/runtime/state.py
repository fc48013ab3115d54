"""Mutable UI state owned by the consumer thread."""

from __future__ import annotations

from dataclasses import dataclass

from ..session import SearchHandle
from ..viewport import Viewport

MODE_QUERY = "query"
MODE_BROWSE = "browse"


@dataclass
class AppState:
    viewport: Viewport
    query: str = ""
    cursor: int = 0
    mode: str = MODE_QUERY
    search_id: int = 0
    search_handle: SearchHandle | None = None
    active_query: str = ""
    file_count: int = 0
    dropped_results: int = 0
    status_message: str = ""
    status_is_error: bool = False
    status_message_until: float = 0.0
    dirty: bool = True
