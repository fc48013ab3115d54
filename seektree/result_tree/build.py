"""Compacted directory-tree construction from a peer's flat file list."""

from __future__ import annotations

from collections.abc import Sequence

from ..errors import EmptyResultError
from .paths import SEPARATOR, split_path
from .types import Node, ResultTree


def finalize_directories(loc: list[Node], from_depth: int) -> None:
    """Close every open directory from ``from_depth`` down and compact chains.

    Walks top-down: a directory whose only child is a directory absorbs that
    child (names concatenated, grandchildren adopted) and then stands in for
    it at the next depth, so a whole single-child chain collapses into the
    topmost node. ``loc`` is truncated to ``from_depth`` afterwards.
    """
    for depth in range(from_depth, len(loc) - 1):
        current = loc[depth]
        if len(current.children) != 1 or not current.children[0].is_dir:
            continue
        child = current.children[0]
        current.name += child.name
        current.children = child.children
        loc[depth + 1] = current
    del loc[from_depth:]


def build_result_tree(
    paths: Sequence[str],
    owner: str,
    speed_kbps: int = 0,
    separator: str = SEPARATOR,
) -> ResultTree:
    """Build a compacted tree for one peer's search response.

    ``paths`` must keep files sharing a directory prefix contiguous; the
    remote side groups results by folder, so no sorting happens here.
    ``loc`` holds the currently open directory chain with the root at index 0.
    Raises ``EmptyResultError`` for an empty list and ``MalformedPathError``
    when any path cannot be split.
    """
    if not paths:
        raise EmptyResultError(f"{owner} returned no files")

    root = Node.directory(owner)
    loc: list[Node] = [root]
    for path in paths:
        segments = split_path(path, separator)
        directories = segments[:-1]

        depth = 1
        while (
            depth < len(loc)
            and depth <= len(directories)
            and loc[depth].name.startswith(directories[depth - 1])
        ):
            depth += 1
        if depth < len(loc):
            finalize_directories(loc, depth)

        for segment in directories[depth - 1 :]:
            directory = Node.directory(segment)
            loc[-1].children.append(directory)
            loc.append(directory)
        loc[-1].children.append(Node(segments[-1]))

    finalize_directories(loc, 1)
    return ResultTree(owner=owner, speed_kbps=int(speed_kbps), root=root)
