"""Public runtime orchestration entry points.

This package groups the interactive browser bootstrap (``run_browser``), the
non-interactive dump mode, and the lower-level event loop used by tests.
"""

from __future__ import annotations


def run_browser(*args, **kwargs):
    """Lazily import browser entrypoint so tests can import the package without a tty."""
    from .app import run_browser as _run_browser

    return _run_browser(*args, **kwargs)


def run_dump(*args, **kwargs):
    """Lazily import dump-mode entrypoint."""
    from .dump import run_dump as _run_dump

    return _run_dump(*args, **kwargs)


def run_event_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_event_loop as _run_event_loop

    return _run_event_loop(*args, **kwargs)


__all__ = [
    "run_browser",
    "run_dump",
    "run_event_loop",
]
