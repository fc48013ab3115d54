"""Result-tree model: path splitting, compaction, traversal, and flattening.

Defines ``Node``/``ResultTree`` and the helpers that turn a peer's flat file
list into indented display lines.
"""

from __future__ import annotations

from .build import build_result_tree, finalize_directories
from .iterator import TreeIterator, count_files, count_nodes, file_paths_under
from .paths import SEPARATOR, split_path
from .rendering import SEPARATOR_LINE, Line, flatten_tree
from .types import DIRECTORY, FILE, Node, ResultTree

__all__ = [
    "DIRECTORY",
    "FILE",
    "Node",
    "ResultTree",
    "SEPARATOR",
    "split_path",
    "build_result_tree",
    "finalize_directories",
    "TreeIterator",
    "count_nodes",
    "count_files",
    "file_paths_under",
    "Line",
    "SEPARATOR_LINE",
    "flatten_tree",
]
