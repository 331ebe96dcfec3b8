"""Simulated serial port (COM1)."""

from __future__ import annotations

from collections import deque

__all__ = ["Uart"]

UART_BASE = 0x3F8


def _as_char(c: str | bytes | int) -> str:
    if isinstance(c, int):
        if not 0 <= c <= 0xFF:
            raise ValueError(f"0x{c:x} is not a byte")
        return chr(c)
    if isinstance(c, (bytes, bytearray)):
        c = bytes(c).decode("latin-1")
    if len(c) != 1:
        raise ValueError("exactly one character expected")
    return c


class Uart:
    """A serial line with a receive queue and a transmit record."""

    def __init__(self) -> None:
        self._rx: deque[str] = deque()
        self._tx: list[str] = []

    def feed(self, data: str | bytes) -> None:
        """Queue characters as if they arrived on the line."""
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("latin-1")
        self._rx.extend(data)

    def get_char(self) -> str:
        """Take the next received character; raises EOFError when none is pending."""
        if not self._rx:
            raise EOFError("no input pending on the serial line")
        return self._rx.popleft()

    def put_char(self, c: str | bytes | int) -> None:
        """Transmit one character unchanged."""
        self._tx.append(_as_char(c))

    def put_chars(self, text: str | bytes) -> None:
        """Transmit a string up to its terminator, sending CR before each LF."""
        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode("latin-1")
        for c in text.split("\0", 1)[0]:
            if c == "\n":
                self.put_char("\r")
            self.put_char(c)

    def output(self) -> str:
        """Everything transmitted so far."""
        return "".join(self._tx)