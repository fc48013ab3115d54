"""Non-recursive pre-order traversal over result trees.

``TreeIterator`` keeps its frame stack between traversals; callers own one
instance and ``reset`` it per use instead of allocating a fresh walker.
"""

from __future__ import annotations

from .types import Node


class TreeIterator:
    """Depth-tracking pre-order cursor backed by an explicit frame stack.

    After ``reset(root)`` the cursor sits on ``root`` at depth 0. Each
    ``advance`` moves to the next node in stored child order and returns
    ``False`` once the traversal climbs back past the root.
    """

    def __init__(self, root: Node | None = None) -> None:
        self._parents: list[Node] = []
        self._indices: list[int] = []
        self.current: Node | None = None
        self.depth = 0
        if root is not None:
            self.reset(root)

    def reset(self, root: Node) -> None:
        self._parents.clear()
        self._indices.clear()
        self.current = root
        self.depth = 0

    def advance(self) -> bool:
        node = self.current
        if node is None:
            return False
        if node.is_dir and node.children:
            self._parents.append(node)
            self._indices.append(0)
            self.current = node.children[0]
            self.depth = len(self._parents)
            return True

        while self._parents:
            next_index = self._indices[-1] + 1
            siblings = self._parents[-1].children
            if next_index < len(siblings):
                self._indices[-1] = next_index
                self.current = siblings[next_index]
                self.depth = len(self._parents)
                return True
            self._parents.pop()
            self._indices.pop()

        self.current = None
        self.depth = 0
        return False

    def ancestors(self) -> list[Node]:
        """Return the open directories above the cursor, root first."""
        return list(self._parents)

    def path(self) -> str:
        """Concatenate names from below the root down to the cursor."""
        if self.current is None or not self._parents:
            return ""
        return "".join(parent.name for parent in self._parents[1:]) + self.current.name

    def seek(self, root: Node, index: int) -> bool:
        """Reset onto ``root`` and advance ``index`` times (0 is the root)."""
        self.reset(root)
        for _ in range(index):
            if not self.advance():
                return False
        return True


def count_nodes(root: Node, iterator: TreeIterator | None = None) -> int:
    """Count every node below ``root`` (the root itself excluded)."""
    walker = iterator or TreeIterator()
    walker.reset(root)
    total = 0
    while walker.advance():
        total += 1
    return total


def count_files(root: Node, iterator: TreeIterator | None = None) -> int:
    """Count file nodes below ``root``."""
    walker = iterator or TreeIterator()
    walker.reset(root)
    total = 0
    while walker.advance():
        if not walker.current.is_dir:
            total += 1
    return total


def file_paths_under(root: Node, index: int, iterator: TreeIterator | None = None) -> list[str]:
    """Return full remote paths of every file in the subtree at pre-order ``index``.

    A file index yields just that file. An out-of-range index yields ``[]``.
    """
    walker = iterator or TreeIterator()
    if not walker.seek(root, index):
        return []
    target = walker.current
    prefix = walker.path()
    if not target.is_dir:
        return [prefix]

    base_depth = walker.depth
    paths: list[str] = []
    # Names accumulated along the walk below ``target``; ``chain[d]`` is the
    # directory open at depth ``base_depth + d``.
    chain: list[str] = [prefix]
    while walker.advance() and walker.depth > base_depth:
        relative_depth = walker.depth - base_depth
        del chain[relative_depth:]
        node = walker.current
        if node.is_dir:
            chain.append(node.name)
        else:
            paths.append("".join(chain) + node.name)
    return paths
