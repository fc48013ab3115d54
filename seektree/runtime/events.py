"""Immutable event values exchanged between producer threads and the consumer.

Producers (key reader, search callbacks, status ticker, download workers)
only ``put`` these on the shared queue; the consumer loop is the sole
mutator of UI state.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..session import SearchResult, TransferProgress


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class ResultEvent:
    result: SearchResult


@dataclass(frozen=True)
class TickEvent:
    now: float


@dataclass(frozen=True)
class TransferStartedEvent:
    progress: TransferProgress


@dataclass(frozen=True)
class TransferFailedEvent:
    owner: str
    remote_path: str
    message: str


class StatusTicker:
    """Producer thread emitting a ``TickEvent`` every ``interval_seconds``."""

    def __init__(
        self,
        emit: Callable[[TickEvent], None],
        interval_seconds: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._emit = emit
        self._interval_seconds = interval_seconds
        self._clock = clock
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="seektree-status-ticker", daemon=True)

    def _run(self) -> None:
        while not self._stop.wait(self._interval_seconds):
            self._emit(TickEvent(self._clock()))

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
