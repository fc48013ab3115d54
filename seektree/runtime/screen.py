"""Frame composition: query row, viewport rows, and status row."""

from __future__ import annotations

from ..ansi import fit_to_width
from ..result_tree.rendering import STYLE_DIRECTORY, STYLE_FILE, STYLE_OWNER, Line
from ..session import TransferProgress
from ..ui_theme import UITheme
from .state import MODE_QUERY, AppState

QUERY_PROMPT = "search> "
QUERY_PLACEHOLDER = "type a query, Enter to search"
RESERVED_ROWS = 2


def viewport_height(terminal_rows: int) -> int:
    """Rows left for results after the query and status rows."""
    return max(1, terminal_rows - RESERVED_ROWS)


def format_bytes(count: int) -> str:
    value = float(count)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            return f"{int(value)} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{count} B"


def transfer_summary(transfers: list[TransferProgress]) -> str:
    """Summarize downloads as ``n files bytes/total``; empty when idle."""
    if not transfers:
        return ""
    done = sum(item.bytes_transferred for item in transfers)
    total = sum(item.total_bytes for item in transfers)
    return f"{len(transfers)} dl {format_bytes(done)}/{format_bytes(total)}"


def selected_with_ansi(text: str) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text

    # Keep reverse video active even when the text contains internal resets.
    return "\033[7m" + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


def _styled_line(line: Line, theme: UITheme) -> str:
    color = {
        STYLE_OWNER: theme.owner,
        STYLE_DIRECTORY: theme.directory,
        STYLE_FILE: theme.file,
    }.get(line.style, "")
    if not color:
        return line.text
    return f"{color}{line.text}{theme.reset}"


def _query_row(state: AppState, width: int, theme: UITheme) -> str:
    prompt = f"{theme.query_prompt}{QUERY_PROMPT}{theme.reset}"
    if state.mode != MODE_QUERY:
        body = f"{theme.query_text}{state.query}{theme.reset}"
    elif not state.query:
        body = f"{theme.reverse} {theme.reset}{theme.query_placeholder}{QUERY_PLACEHOLDER}{theme.reset}"
    else:
        before = state.query[: state.cursor]
        at = state.query[state.cursor : state.cursor + 1] or " "
        after = state.query[state.cursor + 1 :]
        body = f"{theme.query_text}{before}{theme.reverse}{at}{theme.reset}{theme.query_text}{after}{theme.reset}"
    return fit_to_width(prompt + body, width)


def status_text(state: AppState) -> str:
    if state.status_message:
        return state.status_message
    peers = len(state.viewport.results)
    if not state.active_query:
        return "no search yet"
    text = f"{state.active_query!r}: {peers} peers, {state.file_count} files"
    if state.dropped_results:
        text += f", {state.dropped_results} dropped"
    return text


def build_frame(
    state: AppState,
    width: int,
    height: int,
    theme: UITheme,
    transfers: list[TransferProgress] | None = None,
) -> str:
    """Compose a full-screen frame as one escape-sequence string."""
    width = max(1, width)
    out: list[str] = ["\033[H", _query_row(state, width, theme)]

    rows = state.viewport.render()
    for row_index in range(viewport_height(height)):
        out.append(f"\033[{row_index + 2};1H")
        if row_index >= len(rows):
            out.append(" " * width)
            continue
        line, selected = rows[row_index]
        text = fit_to_width(_styled_line(line, theme), width)
        if selected:
            out.append(selected_with_ansi(text))
        else:
            out.append(text)

    summary = transfer_summary(transfers or [])
    left = status_text(state)
    gap = max(1, width - len(left) - len(summary) - 1)
    status_color = theme.status_error if state.status_is_error else theme.status
    status = fit_to_width(f"{status_color}{left}{' ' * gap}{summary}{theme.reset}", width)
    out.append(f"\033[{max(2, height)};1H{status}")
    return "".join(out)
