"""Consumer-side behavior of the search browser.

Covers search generations (stale results dropped), per-peer error isolation,
download queueing through worker threads, status expiry, and rendering.
"""

from __future__ import annotations

import os
import unittest
from queue import Queue
from unittest import mock

from seektree.errors import TransferError
from seektree.runtime.app import SearchBrowser
from seektree.runtime.events import (
    KeyEvent,
    ResultEvent,
    TickEvent,
    TransferFailedEvent,
    TransferStartedEvent,
)
from seektree.runtime.state import MODE_BROWSE, MODE_QUERY, AppState
from seektree.session import SearchHandle, SearchResult, TransferProgress
from seektree.ui_theme import PLAIN_THEME
from seektree.viewport import Viewport


class _FakeService:
    def __init__(self) -> None:
        self.searches: list[tuple[str, int]] = []
        self.handles: list[SearchHandle] = []
        self.downloads: list[tuple[str, str]] = []
        self.missing: set[str] = set()

    def connect(self, username: str, password: str) -> None:
        pass

    def search(self, query, search_id, on_result) -> SearchHandle:
        self.searches.append((query, search_id))
        handle = SearchHandle(search_id)
        self.handles.append(handle)
        return handle

    def download(self, owner: str, remote_path: str) -> TransferProgress:
        if remote_path in self.missing:
            raise TransferError(f"{owner} does not share {remote_path}")
        self.downloads.append((owner, remote_path))
        return TransferProgress(owner, remote_path, 5, 5)

    def transfers(self) -> list[TransferProgress]:
        return [TransferProgress(owner, path, 5, 5) for owner, path in self.downloads]


class SearchBrowserTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch("seektree.runtime.app.save_last_query")
        self.saved_queries = patcher.start()
        self.addCleanup(patcher.stop)

        self.service = _FakeService()
        self.events: Queue = Queue()
        self.frames: list[str] = []
        self.now = 100.0
        self.size = os.terminal_size((40, 8))
        self.state = AppState(viewport=Viewport(height=6), query="flac", cursor=4)
        self.browser = SearchBrowser(
            self.service,
            self.state,
            self.events,
            PLAIN_THEME,
            self.frames.append,
            terminal_size=lambda: self.size,
            clock=lambda: self.now,
        )
        self.addCleanup(self.browser.shutdown)

    def _result(self, owner: str, speed: int, *paths: str, search_id: int | None = None) -> SearchResult:
        sid = self.state.search_id if search_id is None else search_id
        return SearchResult(sid, owner, speed, paths)

    def test_submit_search_starts_new_generation(self) -> None:
        self.browser.submit_search()

        self.assertEqual(self.service.searches, [("flac", 1)])
        self.assertEqual(self.state.mode, MODE_BROWSE)
        self.assertEqual(self.state.active_query, "flac")
        self.saved_queries.assert_called_once_with("flac")

    def test_resubmit_cancels_previous_search_and_clears_results(self) -> None:
        self.browser.submit_search()
        self.browser.dispatch(ResultEvent(self._result("al", 10, "a.flac")))
        self.assertEqual(len(self.state.viewport.results), 1)

        self.state.query = "ogg"
        self.browser.submit_search()

        self.assertTrue(self.service.handles[0].cancelled)
        self.assertFalse(self.service.handles[1].cancelled)
        self.assertEqual(self.state.search_id, 2)
        self.assertEqual(len(self.state.viewport.results), 0)
        self.assertEqual(self.state.file_count, 0)

    def test_blank_query_is_not_submitted(self) -> None:
        self.state.query = "   "
        self.browser.submit_search()

        self.assertEqual(self.service.searches, [])
        self.assertEqual(self.state.mode, MODE_QUERY)
        self.assertTrue(self.state.status_is_error)

    def test_stale_results_are_dropped(self) -> None:
        self.browser.submit_search()
        self.state.query = "ogg"
        self.browser.submit_search()

        self.browser.dispatch(ResultEvent(self._result("old", 99, "x.flac", search_id=1)))
        self.browser.dispatch(ResultEvent(self._result("new", 10, "y.ogg")))

        self.assertEqual([tree.owner for tree in self.state.viewport.results], ["new"])

    def test_results_are_sorted_by_speed_and_counted(self) -> None:
        self.browser.submit_search()
        self.browser.dispatch(ResultEvent(self._result("slow", 10, "a.flac")))
        self.browser.dispatch(ResultEvent(self._result("fast", 500, "d\\b.flac", "d\\c.flac")))

        self.assertEqual([tree.owner for tree in self.state.viewport.results], ["fast", "slow"])
        self.assertEqual(self.state.file_count, 3)

    def test_malformed_result_is_dropped_without_affecting_others(self) -> None:
        self.browser.submit_search()
        self.browser.dispatch(ResultEvent(self._result("bad", 50, "ok.flac", "broken\\")))
        self.browser.dispatch(ResultEvent(self._result("empty", 40)))
        self.browser.dispatch(ResultEvent(self._result("good", 30, "x.flac")))

        self.assertEqual([tree.owner for tree in self.state.viewport.results], ["good"])
        self.assertEqual(self.state.dropped_results, 1)

    def test_download_selection_queues_every_file_under_directory(self) -> None:
        self.browser.submit_search()
        self.browser.dispatch(ResultEvent(self._result("al", 10, "d\\a.flac", "d\\b.flac")))

        self.browser.download_selection()
        started = {self.events.get(timeout=2.0), self.events.get(timeout=2.0)}

        self.assertEqual(
            started,
            {
                TransferStartedEvent(TransferProgress("al", "d\\a.flac", 5, 5)),
                TransferStartedEvent(TransferProgress("al", "d\\b.flac", 5, 5)),
            },
        )
        self.assertEqual(self.state.status_message, "queued 2 download(s) from al")

    def test_failed_download_reports_on_status_line(self) -> None:
        self.service.missing.add("a.flac")
        self.browser.submit_search()
        self.browser.dispatch(ResultEvent(self._result("al", 10, "a.flac")))
        self.state.viewport.select_down()

        self.browser.download_selection()
        event = self.events.get(timeout=2.0)
        self.assertIsInstance(event, TransferFailedEvent)

        results_before = list(self.state.viewport.results)
        self.browser.dispatch(event)
        self.assertTrue(self.state.status_is_error)
        self.assertIn("does not share a.flac", self.state.status_message)
        self.assertEqual(list(self.state.viewport.results), results_before)

    def test_download_with_empty_viewport_reports_nothing_selected(self) -> None:
        self.browser.download_selection()

        self.assertEqual(self.state.status_message, "nothing selected")
        self.assertTrue(self.events.empty())

    def test_status_message_expires_on_tick(self) -> None:
        self.browser.set_status("queued")
        self.browser.dispatch(TickEvent(self.now + 1.0))
        self.assertEqual(self.state.status_message, "queued")

        self.browser.dispatch(TickEvent(self.now + 10.0))
        self.assertEqual(self.state.status_message, "")

    def test_render_only_when_dirty_and_follows_terminal_size(self) -> None:
        self.browser.render()
        self.assertEqual(len(self.frames), 1)
        self.assertEqual(self.state.viewport.height, 6)

        self.browser.render()
        self.assertEqual(len(self.frames), 1)

        self.size = os.terminal_size((40, 5))
        self.browser.dispatch(TickEvent(self.now))
        self.browser.render()
        self.assertEqual(len(self.frames), 2)
        self.assertEqual(self.state.viewport.height, 3)

    def test_key_events_route_through_key_handler(self) -> None:
        self.assertFalse(self.browser.dispatch(KeyEvent("ENTER")))
        self.assertEqual(self.service.searches, [("flac", 1)])
        self.assertTrue(self.browser.dispatch(KeyEvent("q")))


if __name__ == "__main__":
    unittest.main()
