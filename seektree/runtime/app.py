"""Runtime composition layer for the search browser.

Wires the search service, producer threads, key handling, and rendering
around one ``AppState`` that only the consumer thread touches.
"""

from __future__ import annotations

import os
import shutil
import sys
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from queue import Queue

from loguru import logger

from ..errors import EmptyResultError, MalformedPathError, TransferError
from ..result_tree import build_result_tree, count_files
from ..session import SearchResult, SearchService
from ..ui_theme import UITheme
from ..viewport import Viewport
from .config import Credentials, save_last_query
from .events import (
    KeyEvent,
    ResultEvent,
    StatusTicker,
    TickEvent,
    TransferFailedEvent,
    TransferStartedEvent,
)
from .input import KeyReader
from .keys import KeyActions, handle_key
from .loop import run_event_loop
from .screen import build_frame, viewport_height
from .state import MODE_BROWSE, AppState
from .terminal import TerminalController

STATUS_MESSAGE_SECONDS = 4.0
DOWNLOAD_WORKERS = 4


class SearchBrowser:
    """Consumer-side event handlers plus the producer callbacks that feed them."""

    def __init__(
        self,
        service: SearchService,
        state: AppState,
        events: Queue,
        theme: UITheme,
        write: Callable[[str], None],
        terminal_size: Callable[[], os.terminal_size] = lambda: shutil.get_terminal_size((80, 24)),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.service = service
        self.state = state
        self.events = events
        self.theme = theme
        self._write = write
        self._terminal_size = terminal_size
        self._clock = clock
        self._last_size: tuple[int, int] | None = None
        self._downloads = ThreadPoolExecutor(max_workers=DOWNLOAD_WORKERS, thread_name_prefix="seektree-download")
        self.key_actions = KeyActions(
            submit_search=self.submit_search,
            download_selection=self.download_selection,
        )

    # -- producer side (any thread) ---------------------------------------

    def on_search_result(self, result: SearchResult) -> None:
        self.events.put(ResultEvent(result))

    def _download_worker(self, owner: str, remote_path: str) -> None:
        try:
            progress = self.service.download(owner, remote_path)
        except TransferError as exc:
            self.events.put(TransferFailedEvent(owner, remote_path, str(exc)))
            return
        self.events.put(TransferStartedEvent(progress))

    # -- consumer side ----------------------------------------------------

    def set_status(self, message: str, *, error: bool = False) -> None:
        self.state.status_message = message
        self.state.status_is_error = error
        self.state.status_message_until = self._clock() + STATUS_MESSAGE_SECONDS
        self.state.dirty = True

    def submit_search(self) -> None:
        """Cancel the running search, clear results, and start a new generation."""
        state = self.state
        query = state.query.strip()
        if not query:
            self.set_status("query is empty", error=True)
            return
        if state.search_handle is not None:
            state.search_handle.cancel()
        state.search_id += 1
        state.viewport.clear()
        state.file_count = 0
        state.dropped_results = 0
        state.active_query = query
        state.mode = MODE_BROWSE
        state.status_message = ""
        state.dirty = True
        logger.info("search {} submitted: {!r}", state.search_id, query)
        state.search_handle = self.service.search(query, state.search_id, self.on_search_result)
        save_last_query(query)

    def handle_result(self, result: SearchResult) -> None:
        state = self.state
        if result.search_id != state.search_id:
            logger.debug("dropping stale result from {} (search {})", result.owner, result.search_id)
            return
        try:
            tree = build_result_tree(result.paths, result.owner, result.speed_kbps)
        except EmptyResultError:
            logger.debug("skipping empty result from {}", result.owner)
            return
        except MalformedPathError as exc:
            state.dropped_results += 1
            logger.warning("dropping result from {}: {}", result.owner, exc)
            return
        state.viewport.on_result_arrived(tree)
        state.file_count += count_files(tree.root)
        state.dirty = True

    def download_selection(self) -> None:
        """Queue downloads for the selected file, or every file under a directory."""
        selection = self.state.viewport.selected_files()
        if selection is None or not selection[1]:
            self.set_status("nothing selected", error=True)
            return
        owner, paths = selection
        for remote_path in paths:
            logger.info("queueing download {} from {}", remote_path, owner)
            self._downloads.submit(self._download_worker, owner, remote_path)
        self.set_status(f"queued {len(paths)} download(s) from {owner}")

    def handle_tick(self, now: float) -> None:
        state = self.state
        if state.status_message and now >= state.status_message_until:
            state.status_message = ""
            state.status_is_error = False
            state.dirty = True
        size = self._terminal_size()
        if (size.columns, size.lines) != self._last_size:
            state.dirty = True

    def dispatch(self, event: object) -> bool:
        """Apply one event; return ``True`` to stop the loop."""
        if isinstance(event, KeyEvent):
            return handle_key(event.key, self.state, self.key_actions)
        if isinstance(event, ResultEvent):
            self.handle_result(event.result)
        elif isinstance(event, TickEvent):
            self.handle_tick(event.now)
        elif isinstance(event, TransferStartedEvent):
            self.state.dirty = True
        elif isinstance(event, TransferFailedEvent):
            logger.warning("download of {} from {} failed: {}", event.remote_path, event.owner, event.message)
            self.set_status(f"download failed: {event.message}", error=True)
        return False

    def render(self) -> None:
        if not self.state.dirty:
            return
        size = self._terminal_size()
        self._last_size = (size.columns, size.lines)
        self.state.viewport.set_height(viewport_height(size.lines))
        frame = build_frame(self.state, size.columns, size.lines, self.theme, self.service.transfers())
        self._write(frame)
        self.state.dirty = False

    def shutdown(self) -> None:
        if self.state.search_handle is not None:
            self.state.search_handle.cancel()
        self._downloads.shutdown(wait=False, cancel_futures=True)


def run_browser(
    service: SearchService,
    credentials: Credentials,
    theme: UITheme,
    initial_query: str = "",
    submit_initial: bool = True,
) -> None:
    """Connect, take over the terminal, and run the consumer loop until quit."""
    service.connect(credentials.username, credentials.password)

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    events: Queue = Queue()
    rows = shutil.get_terminal_size((80, 24)).lines
    state = AppState(
        viewport=Viewport(height=viewport_height(rows)),
        query=initial_query,
        cursor=len(initial_query),
    )
    browser = SearchBrowser(service, state, events, theme, terminal.write)
    reader = KeyReader(stdin_fd, lambda key: events.put(KeyEvent(key)))
    ticker = StatusTicker(events.put)

    with terminal.raw_mode():
        reader.start()
        ticker.start()
        try:
            if submit_initial and initial_query.strip():
                browser.submit_search()
            browser.render()
            run_event_loop(events, browser.dispatch, browser.render)
        finally:
            reader.stop()
            ticker.stop()
            browser.shutdown()
    logger.info("browser closed")
