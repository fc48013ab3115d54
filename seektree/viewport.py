"""Windowed line buffer over a ``ResultSet``.

The viewport caches rendered lines for a contiguous run of result trees,
``results[file_offset : file_offset + shown_count]``, and only ever adds or
drops whole trees at either end. Scrolling and selection therefore cost at
most one tree's flattening instead of a full rebuild.
"""

from __future__ import annotations

from .result_tree import Line, ResultTree, TreeIterator, file_paths_under, flatten_tree
from .results import ResultSet


class Viewport:
    """Scrollable, selectable window of pre-rendered result lines.

    ``line_offset`` indexes the first visible buffered line and ``selected``
    is relative to it. The buffer always starts with the owner line of
    ``results[file_offset]`` and ends with a separator line.
    """

    def __init__(self, results: ResultSet | None = None, height: int = 1) -> None:
        self.results = results if results is not None else ResultSet()
        self.height = max(1, int(height))
        self.lines: list[Line] = []
        self.file_offset = 0
        self.shown_count = 0
        self.line_offset = 0
        self.selected = 0
        self._tree_line_counts: list[int] = []
        self._iterator = TreeIterator()

    # -- buffer edits -----------------------------------------------------

    def _flatten(self, index: int) -> list[Line]:
        return flatten_tree(self.results[index], self._iterator)

    def _has_more_below(self) -> bool:
        return self.file_offset + self.shown_count < len(self.results)

    def _visible_count(self) -> int:
        return max(0, min(self.height, len(self.lines) - self.line_offset))

    def _append_tree(self) -> None:
        new_lines = self._flatten(self.file_offset + self.shown_count)
        self.lines.extend(new_lines)
        self._tree_line_counts.append(len(new_lines))
        self.shown_count += 1

    def _prepend_tree(self) -> None:
        self.file_offset -= 1
        new_lines = self._flatten(self.file_offset)
        self.lines[0:0] = new_lines
        self._tree_line_counts.insert(0, len(new_lines))
        self.shown_count += 1
        self.line_offset += len(new_lines)

    def _fill(self) -> None:
        while len(self.lines) - self.line_offset < self.height and self._has_more_below():
            self._append_tree()

    def _trim_top(self) -> None:
        while self.shown_count > 1 and self.line_offset >= self._tree_line_counts[0]:
            count = self._tree_line_counts.pop(0)
            del self.lines[:count]
            self.line_offset -= count
            self.file_offset += 1
            self.shown_count -= 1

    def _trim_bottom(self) -> None:
        while (
            self.shown_count > 1
            and len(self.lines) - self._tree_line_counts[-1] >= self.line_offset + self.height
        ):
            count = self._tree_line_counts.pop()
            del self.lines[-count:]
            self.shown_count -= 1

    def _rebuild(self) -> None:
        """Re-flatten the window from ``file_offset``, keeping ``line_offset`` when possible."""
        self.lines = []
        self._tree_line_counts = []
        self.shown_count = 0
        if self.file_offset < len(self.results):
            self._append_tree()
        self._fill()
        self.line_offset = max(0, min(self.line_offset, len(self.lines) - self.height))
        self._trim_top()

    # -- scrolling --------------------------------------------------------

    def _scroll_down_once(self) -> bool:
        if self.line_offset + self.height >= len(self.lines) and not self._has_more_below():
            return False
        self.line_offset += 1
        self._fill()
        self._trim_top()
        return True

    def _scroll_up_once(self) -> bool:
        if self.line_offset == 0:
            if self.file_offset == 0:
                return False
            self._prepend_tree()
        self.line_offset -= 1
        self._trim_bottom()
        return True

    def scroll_down(self) -> bool:
        """Move the window down one line; ``False`` at the absolute bottom."""
        moved = self._scroll_down_once()
        if moved:
            self._settle_selection(1)
        return moved

    def scroll_up(self) -> bool:
        """Move the window up one line; ``False`` at the absolute top."""
        moved = self._scroll_up_once()
        if moved:
            self._settle_selection(-1)
        return moved

    # -- selection --------------------------------------------------------

    def _absolute_selected(self) -> int:
        return self.line_offset + self.selected

    def _settle_selection(self, direction: int = 1) -> None:
        """Clamp ``selected`` into the window and step off separator lines."""
        for _ in range(3):
            visible = self._visible_count()
            if visible == 0:
                self.selected = 0
                return
            self.selected = max(0, min(self.selected, visible - 1))
            if not self.lines[self._absolute_selected()].is_separator:
                return
            for candidate in (self.selected + direction, self.selected - direction):
                if 0 <= candidate < visible and not self.lines[self.line_offset + candidate].is_separator:
                    self.selected = candidate
                    return
            # Single-row window resting on a separator.
            if direction > 0:
                moved = self._scroll_down_once() or self._scroll_up_once()
            else:
                moved = self._scroll_up_once() or self._scroll_down_once()
            if not moved:
                return

    def _selectable_below(self) -> bool:
        start = self._absolute_selected() + 1
        # Separators never touch, so the next selectable line is at most two rows away.
        if any(not line.is_separator for line in self.lines[start : start + 2]):
            return True
        return self._has_more_below()

    def _selectable_above(self) -> bool:
        end = self._absolute_selected()
        if any(not line.is_separator for line in self.lines[max(0, end - 2) : end]):
            return True
        return self.file_offset > 0

    def select_down(self) -> bool:
        """Move the selection down, skipping separators and scrolling at the edge."""
        if not self.lines or not self._selectable_below():
            return False
        while True:
            if self.selected + 1 < self._visible_count():
                self.selected += 1
            elif not self._scroll_down_once():
                break
            if not self.lines[self._absolute_selected()].is_separator:
                return True
        self._settle_selection(-1)
        return False

    def select_up(self) -> bool:
        """Move the selection up, skipping separators and scrolling at the edge."""
        if not self.lines or not self._selectable_above():
            return False
        while True:
            if self.selected > 0:
                self.selected -= 1
            elif not self._scroll_up_once():
                break
            if not self.lines[self._absolute_selected()].is_separator:
                return True
        self._settle_selection(1)
        return False

    def _locate_selection(self) -> tuple[ResultTree, int] | None:
        """Map the selected row to ``(tree, pre-order node index)``.

        Walks the buffer from its first line, counting separators to find the
        owning tree and rows since the last separator for the node index.
        """
        absolute = self._absolute_selected()
        if absolute >= len(self.lines) or self.lines[absolute].is_separator:
            return None
        tree_index = self.file_offset
        node_index = 0
        for line in self.lines[:absolute]:
            if line.is_separator:
                tree_index += 1
                node_index = 0
            else:
                node_index += 1
        return self.results[tree_index], node_index

    def current_selection(self) -> tuple[str, str] | None:
        """Return ``(owner, remote_path)`` for the selected row.

        The owner row maps to an empty path. Returns ``None`` when nothing is
        shown.
        """
        located = self._locate_selection()
        if located is None:
            return None
        tree, node_index = located
        if not self._iterator.seek(tree.root, node_index):
            return None
        return tree.owner, self._iterator.path()

    def selected_files(self) -> tuple[str, list[str]] | None:
        """Return ``(owner, file_paths)`` for every file under the selected row."""
        located = self._locate_selection()
        if located is None:
            return None
        tree, node_index = located
        return tree.owner, file_paths_under(tree.root, node_index, self._iterator)

    # -- event entry points -----------------------------------------------

    def on_result_arrived(self, tree: ResultTree) -> int:
        """Insert ``tree`` into the result set and patch the window if it is affected.

        Returns the insertion index.
        """
        index = self.results.insert(tree)
        full = len(self.lines) - self.line_offset >= self.height
        if index <= self.file_offset:
            if full:
                # Sorted above the window: the same trees stay shown at shifted indices.
                self.file_offset += 1
            else:
                self.file_offset = index
                self.line_offset = 0
                self._rebuild()
        elif index < self.file_offset + self.shown_count:
            self._rebuild()
        elif not full and index == self.file_offset + self.shown_count:
            self._append_tree()
            self._fill()
        self._settle_selection()
        return index

    def set_height(self, height: int) -> None:
        """Resize the window, pulling in lines from either side as needed."""
        self.height = max(1, int(height))
        self._fill()
        while self._visible_count() < self.height and self._scroll_up_once():
            pass
        self._trim_bottom()
        self._settle_selection()

    def render(self) -> list[tuple[Line, bool]]:
        """Return the visible rows paired with their selection flag."""
        return [
            (self.lines[self.line_offset + row], row == self.selected)
            for row in range(self._visible_count())
        ]

    def clear(self) -> None:
        """Drop every result and all window state."""
        self.results.clear()
        self.lines = []
        self._tree_line_counts = []
        self.file_offset = 0
        self.shown_count = 0
        self.line_offset = 0
        self.selected = 0
