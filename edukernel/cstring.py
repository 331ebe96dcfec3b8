"""NUL-terminated string helpers."""

from __future__ import annotations

__all__ = ["strcmp", "strncpy", "str_length"]


def _terminated(text: str | bytes) -> str:
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("latin-1")
    return text.split("\0", 1)[0]


def strcmp(str1: str | bytes, str2: str | bytes) -> int:
    """Compare two strings up to their terminator; return -1, 0 or 1."""
    a = _terminated(str1)
    b = _terminated(str2)
    return (a > b) - (a < b)


def strncpy(src: str | bytes, n: int) -> str:
    """Return the part of ``src`` that a bounded copy of ``n`` characters takes.

    A non-empty source always yields at least one character, even for ``n == 0``.
    """
    if n < 0:
        raise ValueError("count must not be negative")
    text = _terminated(src)
    return text[: max(n, 1)]


def str_length(text: str | bytes) -> int:
    """Return the number of characters before the terminator."""
    return len(_terminated(text))