"""Remote path splitting.

Remote paths use a protocol-level separator that is independent of the
local platform, so nothing here consults ``os.sep``.
"""

from __future__ import annotations

from ..errors import MalformedPathError

SEPARATOR = "\\"


def next_segment_end(path: str, start: int, separator: str = SEPARATOR) -> int:
    """Return the index one past the next separator at or after ``start``.

    Returns ``len(path)`` when no separator follows.
    """
    idx = path.find(separator, start)
    if idx < 0:
        return len(path)
    return idx + len(separator)


def split_path(path: str, separator: str = SEPARATOR) -> list[str]:
    r"""Split ``path`` into segments, keeping each directory's trailing separator.

    ``a\b\c.flac`` becomes ``["a\", "b\", "c.flac"]``; the last
    segment is always the file name. Raises ``MalformedPathError`` for an
    empty path or one that ends with the separator.
    """
    if not path:
        raise MalformedPathError(path, "empty path")
    if path.endswith(separator):
        raise MalformedPathError(path, "no file name after last separator")

    segments: list[str] = []
    start = 0
    while start < len(path):
        end = next_segment_end(path, start, separator)
        segments.append(path[start:end])
        start = end
    return segments
