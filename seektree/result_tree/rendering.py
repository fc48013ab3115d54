"""Flattening of result trees into cached display lines."""

from __future__ import annotations

from dataclasses import dataclass

from .iterator import TreeIterator
from .types import ResultTree

INDENT = "  "

STYLE_OWNER = "owner"
STYLE_DIRECTORY = "directory"
STYLE_FILE = "file"
STYLE_SEPARATOR = "separator"


@dataclass(frozen=True)
class Line:
    """One pre-rendered row; ``style`` only selects colours at draw time."""

    text: str
    style: str = STYLE_FILE

    @property
    def is_separator(self) -> bool:
        return not self.text


SEPARATOR_LINE = Line("", STYLE_SEPARATOR)


def flatten_tree(tree: ResultTree, iterator: TreeIterator | None = None) -> list[Line]:
    """Return one line per node in pre-order, then a separator line.

    Text is stored untruncated; clipping to the terminal width happens when
    the frame is drawn.
    """
    walker = iterator or TreeIterator()
    walker.reset(tree.root)
    lines = [Line(tree.label, STYLE_OWNER)]
    while walker.advance():
        node = walker.current
        style = STYLE_DIRECTORY if node.is_dir else STYLE_FILE
        lines.append(Line(f"{INDENT * walker.depth}{node.name}", style))
    lines.append(SEPARATOR_LINE)
    return lines
