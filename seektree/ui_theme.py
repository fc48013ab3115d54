"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the query row, result rows, and status row.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reverse: str
    reset: str
    query_prompt: str
    query_text: str
    query_placeholder: str
    owner: str
    directory: str
    file: str
    status: str
    status_error: str


DEFAULT_THEME = UITheme(
    name="default",
    reverse="\033[7m",
    reset="\033[0m",
    query_prompt="\033[1;38;5;81m",
    query_text="\033[38;5;252m",
    query_placeholder="\033[2;38;5;250m",
    owner="\033[1;38;5;229m",
    directory="\033[1;34m",
    file="\033[38;5;252m",
    status="\033[2;38;5;250m",
    status_error="\033[38;5;203m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reverse="\033[7m",
    reset="\033[0m",
    query_prompt="\033[1;38;5;45m",
    query_text="\033[38;5;153m",
    query_placeholder="\033[2;38;5;110m",
    owner="\033[1;38;5;39m",
    directory="\033[1;38;5;45m",
    file="\033[38;5;117m",
    status="\033[2;38;5;110m",
    status_error="\033[38;5;215m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reverse="\033[7m",
    reset="\033[0m",
    query_prompt="",
    query_text="",
    query_placeholder="",
    owner="",
    directory="",
    file="",
    status="",
    status_error="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
