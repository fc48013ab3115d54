"""Key dispatch for query-editing and browse modes."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .state import MODE_BROWSE, MODE_QUERY, AppState


@dataclass(frozen=True)
class KeyActions:
    """Side-effecting operations the key handler delegates to the app."""

    submit_search: Callable[[], None]
    download_selection: Callable[[], None]


def _edit_query(key: str, state: AppState) -> bool:
    """Apply one editing key to the query line; return whether it was consumed."""
    if key == "BACKSPACE":
        if state.cursor > 0:
            state.query = state.query[: state.cursor - 1] + state.query[state.cursor :]
            state.cursor -= 1
        return True
    if key == "LEFT":
        state.cursor = max(0, state.cursor - 1)
        return True
    if key == "RIGHT":
        state.cursor = min(len(state.query), state.cursor + 1)
        return True
    if key == "CTRL_U":
        state.query = ""
        state.cursor = 0
        return True
    if len(key) == 1 and key.isprintable():
        state.query = state.query[: state.cursor] + key + state.query[state.cursor :]
        state.cursor += 1
        return True
    return False


def _navigate(key: str, state: AppState) -> bool:
    viewport = state.viewport
    if key == "UP":
        viewport.select_up()
    elif key == "DOWN":
        viewport.select_down()
    elif key == "PAGE_UP":
        for _ in range(viewport.height):
            if not viewport.select_up():
                break
    elif key == "PAGE_DOWN":
        for _ in range(viewport.height):
            if not viewport.select_down():
                break
    elif key in {"MOUSE_WHEEL_UP", "CTRL_Y"}:
        viewport.scroll_up()
    elif key in {"MOUSE_WHEEL_DOWN", "CTRL_E"}:
        viewport.scroll_down()
    else:
        return False
    return True


def handle_key(key: str, state: AppState, actions: KeyActions) -> bool:
    """Handle one key; return ``True`` when the app should quit."""
    if key == "CTRL_C":
        return True
    if key == "TAB":
        state.mode = MODE_BROWSE if state.mode == MODE_QUERY else MODE_QUERY
        state.dirty = True
        return False
    if _navigate(key, state):
        state.dirty = True
        return False

    if state.mode == MODE_QUERY:
        if key == "ENTER":
            actions.submit_search()
        elif _edit_query(key, state):
            state.dirty = True
        return False

    if key == "q":
        return True
    if key == "/":
        state.mode = MODE_QUERY
        state.dirty = True
    elif key == "j":
        state.dirty = state.viewport.select_down() or state.dirty
    elif key == "k":
        state.dirty = state.viewport.select_up() or state.dirty
    elif key == "ENTER":
        actions.download_selection()
    return False
