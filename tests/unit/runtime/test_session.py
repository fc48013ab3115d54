"""Replay search-service tests: recording parsing, query matching, streaming."""

from __future__ import annotations

import json
import tempfile
import threading
import unittest
from pathlib import Path

from seektree.errors import TransferError
from seektree.session import (
    RecordedFile,
    RecordedResponse,
    ReplaySession,
    SearchResult,
    load_recording,
    matches_query,
    parse_recording,
)


class RecordingParseTests(unittest.TestCase):
    def test_accepts_wrapped_and_bare_lists(self) -> None:
        entry = {"username": "al", "upload_speed": 120, "files": ["a\\b.flac"]}

        wrapped = parse_recording({"responses": [entry]})
        bare = parse_recording([entry])

        expected = [RecordedResponse("al", 120, (RecordedFile("a\\b.flac"),))]
        self.assertEqual(wrapped, expected)
        self.assertEqual(bare, expected)

    def test_sanitizes_malformed_entries(self) -> None:
        parsed = parse_recording(
            [
                {"username": "al", "upload_speed": True, "files": [{"filename": "x.flac", "size": -4}, 7]},
                {"upload_speed": 10, "files": ["orphan.flac"]},
                "junk",
                {"username": "bea", "files": "not-a-list"},
            ]
        )

        self.assertEqual(
            parsed,
            [
                RecordedResponse("al", 0, (RecordedFile("x.flac", 0),)),
                RecordedResponse("bea", 0, ()),
            ],
        )

    def test_non_list_recording_is_empty(self) -> None:
        self.assertEqual(parse_recording({"responses": "nope"}), [])
        self.assertEqual(parse_recording(42), [])

    def test_load_recording_reads_json_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "responses.json"
            path.write_text(json.dumps([{"username": "al", "files": [{"filename": "a.flac", "size": 9}]}]))

            self.assertEqual(load_recording(path), [RecordedResponse("al", 0, (RecordedFile("a.flac", 9),))])

    def test_load_recording_propagates_bad_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "responses.json"
            path.write_text("{broken")

            with self.assertRaises(ValueError):
                load_recording(path)


class MatchQueryTests(unittest.TestCase):
    def test_every_term_must_match_case_insensitively(self) -> None:
        self.assertTrue(matches_query("Music\\Live\\One.FLAC", "one flac"))
        self.assertFalse(matches_query("Music\\Live\\One.FLAC", "one ogg"))

    def test_blank_query_matches_nothing(self) -> None:
        self.assertFalse(matches_query("a.flac", "   "))


class ReplaySessionTests(unittest.TestCase):
    def _session(self) -> ReplaySession:
        return ReplaySession(
            [
                RecordedResponse("al", 100, (RecordedFile("a\\one.flac", 30), RecordedFile("a\\two.ogg", 20))),
                RecordedResponse("bea", 50, (RecordedFile("b\\one.flac", 40),)),
            ]
        )

    def test_search_streams_matching_paths_with_search_id(self) -> None:
        session = self._session()
        received: list[SearchResult] = []
        finished = threading.Event()

        def on_result(result: SearchResult) -> None:
            received.append(result)
            if len(received) == 2:
                finished.set()

        session.search("one", 7, on_result)

        self.assertTrue(finished.wait(1.0))
        self.assertEqual(
            received,
            [
                SearchResult(7, "al", 100, ("a\\one.flac",)),
                SearchResult(7, "bea", 50, ("b\\one.flac",)),
            ],
        )

    def test_cancelled_search_stops_streaming(self) -> None:
        session = ReplaySession(
            [RecordedResponse(f"peer{index}", index, (RecordedFile("x.flac"),)) for index in range(50)],
            delay_seconds=0.01,
        )
        received: list[SearchResult] = []
        first = threading.Event()

        def on_result(result: SearchResult) -> None:
            received.append(result)
            first.set()

        handle = session.search("flac", 1, on_result)
        self.assertTrue(first.wait(1.0))
        handle.cancel()
        count = len(received)
        threading.Event().wait(0.1)

        self.assertTrue(handle.cancelled)
        self.assertLessEqual(len(received), count + 1)
        self.assertLess(len(received), 50)

    def test_download_reports_recorded_size(self) -> None:
        session = self._session()
        progress = session.download("bea", "b\\one.flac")

        self.assertEqual((progress.bytes_transferred, progress.total_bytes), (40, 40))
        self.assertEqual(session.transfers(), [progress])

    def test_download_of_unknown_file_raises(self) -> None:
        session = self._session()

        with self.assertRaises(TransferError):
            session.download("bea", "a\\one.flac")
        self.assertEqual(session.transfers(), [])


if __name__ == "__main__":
    unittest.main()
