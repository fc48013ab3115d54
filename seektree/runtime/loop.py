"""Single-consumer event loop.

Blocks on the shared queue, dispatches every event in arrival order, and
renders once the queue is empty so bursts of results share one redraw.
"""

from __future__ import annotations

from collections.abc import Callable
from queue import Empty, Queue


def run_event_loop(
    events: Queue,
    dispatch: Callable[[object], bool],
    render: Callable[[], None],
) -> None:
    """Run until ``dispatch`` returns ``True`` for some event."""
    while True:
        event = events.get()
        while True:
            if dispatch(event):
                return
            try:
                event = events.get_nowait()
            except Empty:
                break
        render()
