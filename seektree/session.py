"""Search-session contract and the recorded-response replay backend.

The network layer is an external collaborator; the consumer loop only sees
``SearchService``. Results carry the generation id of the search that
produced them so stale deliveries can be dropped after a newer search.
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from loguru import logger
from platformdirs import user_cache_dir

from .errors import TransferError

APP_NAME = "seektree"
DEFAULT_RECORDING_PATH = Path(user_cache_dir(APP_NAME, appauthor=False)) / "responses.json"


@dataclass(frozen=True)
class SearchResult:
    """One peer's response to search ``search_id``."""

    search_id: int
    owner: str
    speed_kbps: int
    paths: tuple[str, ...]


@dataclass(frozen=True)
class TransferProgress:
    """Byte counters for one download."""

    owner: str
    remote_path: str
    bytes_transferred: int
    total_bytes: int


class SearchHandle:
    """Cancellation handle for one in-flight search."""

    def __init__(self, search_id: int) -> None:
        self.search_id = search_id
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()


class SearchService(Protocol):
    """Operations the browser needs from a file-sharing network client."""

    def connect(self, username: str, password: str) -> None: ...

    def search(
        self,
        query: str,
        search_id: int,
        on_result: Callable[[SearchResult], None],
    ) -> SearchHandle: ...

    def download(self, owner: str, remote_path: str) -> TransferProgress: ...

    def transfers(self) -> list[TransferProgress]: ...


@dataclass(frozen=True)
class RecordedFile:
    filename: str
    size: int = 0


@dataclass(frozen=True)
class RecordedResponse:
    """One stored search response: owner, advertised speed, and files."""

    username: str
    upload_speed: int
    files: tuple[RecordedFile, ...]


def _coerce_file(raw: object) -> RecordedFile | None:
    if isinstance(raw, str):
        return RecordedFile(raw)
    if not isinstance(raw, dict):
        return None
    filename = raw.get("filename")
    if not isinstance(filename, str):
        return None
    size = raw.get("size", 0)
    if isinstance(size, bool) or not isinstance(size, int):
        size = 0
    return RecordedFile(filename, max(0, size))


def parse_recording(data: object) -> list[RecordedResponse]:
    """Validate decoded recording JSON, dropping malformed entries.

    Accepts ``{"responses": [...]}`` or a bare list. Each response needs a
    string ``username``; ``files`` entries may be plain path strings or
    ``{"filename": ..., "size": ...}`` objects.
    """
    raw_responses = data.get("responses") if isinstance(data, dict) else data
    if not isinstance(raw_responses, list):
        return []

    responses: list[RecordedResponse] = []
    for raw in raw_responses:
        if not isinstance(raw, dict) or not isinstance(raw.get("username"), str):
            continue
        speed = raw.get("upload_speed", 0)
        if isinstance(speed, bool) or not isinstance(speed, int):
            speed = 0
        raw_files = raw.get("files")
        files = tuple(
            recorded
            for recorded in (_coerce_file(item) for item in (raw_files if isinstance(raw_files, list) else []))
            if recorded is not None
        )
        responses.append(RecordedResponse(raw["username"], speed, files))
    return responses


def load_recording(path: Path) -> list[RecordedResponse]:
    """Read a recording file; ``OSError``/``ValueError`` propagate to the caller."""
    return parse_recording(json.loads(path.read_text(encoding="utf-8")))


def matches_query(filename: str, query: str) -> bool:
    """Return whether every whitespace-separated query term occurs in ``filename``."""
    terms = query.casefold().split()
    if not terms:
        return False
    folded = filename.casefold()
    return all(term in folded for term in terms)


class ReplaySession:
    """``SearchService`` that streams stored responses instead of using the network.

    Each search runs on its own daemon thread and delivers every stored
    response with at least one matching file, optionally spaced by
    ``delay_seconds``, until its handle is cancelled.
    """

    def __init__(self, responses: list[RecordedResponse], delay_seconds: float = 0.0) -> None:
        self._responses = list(responses)
        self._delay_seconds = max(0.0, delay_seconds)
        self._sizes = {
            (response.username, recorded.filename): recorded.size
            for response in self._responses
            for recorded in response.files
        }
        self._lock = threading.Lock()
        self._transfers: list[TransferProgress] = []
        self.username: str | None = None

    def connect(self, username: str, password: str) -> None:
        self.username = username
        logger.info("replay session ready for {} ({} stored responses)", username, len(self._responses))

    def search(
        self,
        query: str,
        search_id: int,
        on_result: Callable[[SearchResult], None],
    ) -> SearchHandle:
        handle = SearchHandle(search_id)
        worker = threading.Thread(
            target=self._stream_results,
            args=(query, handle, on_result),
            name=f"seektree-replay-search-{search_id}",
            daemon=True,
        )
        worker.start()
        return handle

    def _stream_results(
        self,
        query: str,
        handle: SearchHandle,
        on_result: Callable[[SearchResult], None],
    ) -> None:
        for response in self._responses:
            if handle.cancelled:
                logger.debug("search {} cancelled", handle.search_id)
                return
            paths = tuple(recorded.filename for recorded in response.files if matches_query(recorded.filename, query))
            if not paths:
                continue
            on_result(SearchResult(handle.search_id, response.username, response.upload_speed, paths))
            if self._delay_seconds:
                time.sleep(self._delay_seconds)

    def download(self, owner: str, remote_path: str) -> TransferProgress:
        size = self._sizes.get((owner, remote_path))
        if size is None:
            raise TransferError(f"{owner} does not share {remote_path}")
        progress = TransferProgress(owner, remote_path, size, size)
        with self._lock:
            self._transfers.append(progress)
        return progress

    def transfers(self) -> list[TransferProgress]:
        with self._lock:
            return list(self._transfers)
