"""Low-level terminal input decoding and the key-reader producer thread.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing and SGR mouse-wheel events.
"""

from __future__ import annotations

import os
import select
import threading
from collections.abc import Callable

ESC_SEQUENCE_TIMEOUT_MS = 25
POLL_TIMEOUT_MS = 100

_CONTROL_KEYS = {
    b"\x03": "CTRL_C",
    b"\x05": "CTRL_E",
    b"\x19": "CTRL_Y",
    b"\x15": "CTRL_U",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER",
    b"\n": "ENTER",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_utf8_tail(fd: int, lead: bytes) -> str:
    """Complete a multi-byte UTF-8 character started by ``lead``."""
    first = lead[0]
    if first >= 0xF0:
        needed = 3
    elif first >= 0xE0:
        needed = 2
    elif first >= 0xC0:
        needed = 1
    else:
        needed = 0
    data = lead
    for _ in range(needed):
        more = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if more is None:
            break
        data += more
    return data.decode("utf-8", errors="replace")


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token; ``""`` when ``timeout_ms`` elapses without input."""
    if timeout_ms is not None:
        ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return ""

    ch = os.read(fd, 1)
    if not ch:
        return ""

    if ch in _CONTROL_KEYS:
        return _CONTROL_KEYS[ch]
    if ch != b"\x1b":
        return _read_utf8_tail(fd, ch)

    # Escape / arrow key sequences.
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None or seq != b"[":
        return "ESC"
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"A":
        return "UP"
    if seq == b"B":
        return "DOWN"
    if seq == b"C":
        return "RIGHT"
    if seq == b"D":
        return "LEFT"
    if seq in {b"5", b"6"}:
        tail = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if tail != b"~":
            return "ESC"
        return "PAGE_UP" if seq == b"5" else "PAGE_DOWN"
    if seq == b"<":
        # SGR mouse: ESC [ < btn ; col ; row (M/m)
        payload = []
        while True:
            part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
            if part is None:
                return "ESC"
            if part in {b"M", b"m"}:
                break
            payload.append(part)
            if len(payload) > 64:
                return "ESC"
        try:
            btn = int(b"".join(payload).decode("ascii").split(";")[0])
        except ValueError:
            return "ESC"
        if btn & 0b0100_0000:
            return "MOUSE_WHEEL_UP" if (btn & 0b11) == 0 else "MOUSE_WHEEL_DOWN"
        return "MOUSE"
    return "ESC"


class KeyReader:
    """Producer thread that forwards decoded keys to ``emit`` until stopped."""

    def __init__(
        self,
        fd: int,
        emit: Callable[[str], None],
        read: Callable[..., str] = read_key,
    ) -> None:
        self._fd = fd
        self._emit = emit
        self._read = read
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="seektree-key-reader", daemon=True)

    def _run(self) -> None:
        while not self._stop.is_set():
            key = self._read(self._fd, timeout_ms=POLL_TIMEOUT_MS)
            if key:
                self._emit(key)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
