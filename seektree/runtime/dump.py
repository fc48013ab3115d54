"""Non-interactive search: collect results for a while and print every tree."""

from __future__ import annotations

import time
from queue import Empty, Queue
from typing import TextIO

from loguru import logger

from ..errors import EmptyResultError, MalformedPathError
from ..result_tree import TreeIterator, build_result_tree, flatten_tree
from ..results import ResultSet
from ..session import SearchResult, SearchService

SEARCH_ID = 1


def collect_results(
    service: SearchService,
    query: str,
    wait_seconds: float,
    clock=time.monotonic,
) -> ResultSet:
    """Run one search for ``wait_seconds`` and return the trees that built cleanly."""
    results: Queue[SearchResult] = Queue()
    handle = service.search(query, SEARCH_ID, results.put)
    deadline = clock() + max(0.0, wait_seconds)
    trees = ResultSet()
    try:
        while True:
            remaining = deadline - clock()
            if remaining <= 0:
                break
            try:
                result = results.get(timeout=remaining)
            except Empty:
                break
            try:
                trees.insert(build_result_tree(result.paths, result.owner, result.speed_kbps))
            except EmptyResultError:
                logger.debug("skipping empty result from {}", result.owner)
            except MalformedPathError as exc:
                logger.warning("dropping result from {}: {}", result.owner, exc)
    finally:
        handle.cancel()
    return trees


def write_results(trees: ResultSet, out: TextIO) -> None:
    """Print every tree's flattened lines, separators included."""
    iterator = TreeIterator()
    for tree in trees:
        for line in flatten_tree(tree, iterator):
            out.write(line.text + "\n")


def run_dump(service: SearchService, query: str, wait_seconds: float, out: TextIO) -> int:
    """Search once, print the collected trees, and return how many were printed."""
    trees = collect_results(service, query, wait_seconds)
    write_results(trees, out)
    logger.info("dumped {} result trees for {!r}", len(trees), query)
    return len(trees)
