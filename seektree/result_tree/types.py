"""Node and result-tree datatypes shared by builder, iterator, and renderer."""

from __future__ import annotations

from dataclasses import dataclass, field

FILE = "file"
DIRECTORY = "directory"


@dataclass(eq=False)
class Node:
    """One remote file-system entry.

    ``name`` keeps the trailing separator for directories, so concatenating
    the names along a root-to-leaf chain reproduces the remote path. After
    compaction a directory name may span several path segments.
    """

    name: str
    kind: str = FILE
    children: list[Node] = field(default_factory=list)

    @property
    def is_dir(self) -> bool:
        return self.kind == DIRECTORY

    @classmethod
    def directory(cls, name: str) -> Node:
        return cls(name, DIRECTORY)


@dataclass(eq=False)
class ResultTree:
    """One peer's search response as a compacted directory tree."""

    owner: str
    speed_kbps: int
    root: Node

    @property
    def label(self) -> str:
        """Root-row text: owner plus advertised speed."""
        return f"{self.owner} [{self.speed_kbps} KB/s]"
