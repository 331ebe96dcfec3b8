"""printf-style formatting with the semantics of a small 32-bit kernel libc."""

from __future__ import annotations

import enum
import operator
from collections.abc import Callable, Iterable, Iterator
from typing import Any

__all__ = ["vsprintf", "sprintf"]

_LOWER_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_UPPER_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_MASK32 = 0xFFFFFFFF
_POINTER_WIDTH = 8  # two hex digits per byte of a 32-bit pointer


class _Flag(enum.IntFlag):
    NONE = 0
    ZEROPAD = 1
    SIGN = 2
    PLUS = 4
    SPACE = 8
    LEFT = 16
    SPECIAL = 32
    LARGE = 64


_FLAG_CHARS = {
    "-": _Flag.LEFT,
    "+": _Flag.PLUS,
    " ": _Flag.SPACE,
    "#": _Flag.SPECIAL,
    "0": _Flag.ZEROPAD,
}


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _signed32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def _as_int(value: Any) -> int:
    if isinstance(value, str) and len(value) == 1:
        return ord(value)
    if isinstance(value, (bytes, bytearray)) and len(value) == 1:
        return value[0]
    return operator.index(value)


def _as_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("latin-1")
    return str(value).split("\0", 1)[0]


def _number(num: int, base: int, size: int, precision: int, flags: _Flag) -> str:
    digits = _UPPER_DIGITS if flags & _Flag.LARGE else _LOWER_DIGITS
    if flags & _Flag.LEFT:
        flags &= ~_Flag.ZEROPAD
    pad = "0" if flags & _Flag.ZEROPAD else " "

    sign = ""
    if flags & _Flag.SIGN:
        if num < 0:
            sign = "-"
            num = -num
            size -= 1
        elif flags & _Flag.PLUS:
            sign = "+"
            size -= 1
        elif flags & _Flag.SPACE:
            sign = " "
            size -= 1

    prefix = ""
    if flags & _Flag.SPECIAL:
        if base == 16:
            size -= 2
            prefix = "0x"
        elif base == 8:
            size -= 1
            prefix = "0"

    magnitude = num & _MASK32
    reversed_digits = []
    if magnitude == 0:
        reversed_digits.append("0")
    while magnitude:
        magnitude, rem = divmod(magnitude, base)
        reversed_digits.append(digits[rem])
    body = "".join(reversed(reversed_digits))

    precision = max(precision, len(body))
    size -= precision

    out = []
    if not flags & (_Flag.ZEROPAD | _Flag.LEFT):
        out.append(" " * max(size, 0))
        size = 0
    out.append(sign)
    out.append(prefix)
    if not flags & _Flag.LEFT:
        out.append(pad * max(size, 0))
        size = 0
    out.append("0" * (precision - len(body)))
    out.append(body)
    out.append(" " * max(size, 0))
    return "".join(out)


def _justify(text: str, width: int, flags: _Flag) -> str:
    padding = " " * max(width - len(text), 0)
    return text + padding if flags & _Flag.LEFT else padding + text


def _ethernet_address(addr: Any, width: int, flags: _Flag) -> str:
    digits = _UPPER_DIGITS if flags & _Flag.LARGE else _LOWER_DIGITS
    octets = bytes(addr)[:6]
    text = ":".join(digits[b >> 4] + digits[b & 0x0F] for b in octets)
    return _justify(text, width, flags)


def _ip_address(addr: Any, width: int, flags: _Flag) -> str:
    text = ".".join(str(b) for b in bytes(addr)[:4])
    return _justify(text, width, flags)


class _Arguments:
    def __init__(self, args: Iterable[Any]) -> None:
        self._it: Iterator[Any] = iter(args)

    def next(self) -> Any:
        try:
            return next(self._it)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None


def vsprintf(fmt: str | bytes, args: Iterable[Any]) -> str:
    """Format ``args`` according to ``fmt`` and return the resulting text.

    ``%n`` takes a callable, which is called with the number of characters
    produced so far.
    """
    if isinstance(fmt, (bytes, bytearray)):
        fmt = bytes(fmt).decode("latin-1")
    fmt = fmt.split("\0", 1)[0]
    arguments = _Arguments(args)
    out: list[str] = []
    pos = 0
    end = len(fmt)

    def read_number() -> int:
        nonlocal pos
        value = 0
        while pos < end and _is_digit(fmt[pos]):
            value = value * 10 + ord(fmt[pos]) - ord("0")
            pos += 1
        return value

    while pos < end:
        ch = fmt[pos]
        if ch != "%":
            out.append(ch)
            pos += 1
            continue

        pos += 1
        flags = _Flag.NONE
        while pos < end and fmt[pos] in _FLAG_CHARS:
            flags |= _FLAG_CHARS[fmt[pos]]
            pos += 1

        width = -1
        if pos < end and _is_digit(fmt[pos]):
            width = read_number()
        elif pos < end and fmt[pos] == "*":
            pos += 1
            width = _as_int(arguments.next())
            if width < 0:
                width = -width
                flags |= _Flag.LEFT

        precision = -1
        if pos < end and fmt[pos] == ".":
            pos += 1
            if pos < end and _is_digit(fmt[pos]):
                precision = read_number()
            elif pos < end and fmt[pos] == "*":
                pos += 1
                precision = _as_int(arguments.next())
            precision = max(precision, 0)

        qualifier = None
        if pos < end and fmt[pos] in "hlL":
            qualifier = fmt[pos]
            pos += 1

        conv = fmt[pos] if pos < end else ""
        pos += 1
        base = 10

        if conv == "c":
            out.append(_justify(chr(_as_int(arguments.next()) & 0xFF), width, flags))
            continue
        if conv == "s":
            value = arguments.next()
            text = "<NULL>" if value is None else _as_text(value)
            if precision >= 0:
                text = text[:precision]
            out.append(_justify(text, width, flags))
            continue
        if conv == "p":
            if width == -1:
                width = _POINTER_WIDTH
                flags |= _Flag.ZEROPAD
            pointer = _signed32(_as_int(arguments.next()))
            out.append(_number(pointer, 16, width, precision, flags))
            continue
        if conv == "n":
            sink: Callable[[int], Any] = arguments.next()
            if not callable(sink):
                raise TypeError("%n requires a callable argument")
            sink(len("".join(out)))
            continue
        if conv in ("A", "a"):
            if conv == "A":
                flags |= _Flag.LARGE
            addr = arguments.next()
            if qualifier == "l":
                out.append(_ethernet_address(addr, width, flags))
            else:
                out.append(_ip_address(addr, width, flags))
            continue
        if conv == "o":
            base = 8
        elif conv in ("X", "x"):
            if conv == "X":
                flags |= _Flag.LARGE
            base = 16
        elif conv in ("d", "i"):
            flags |= _Flag.SIGN
        elif conv == "u":
            pass
        else:
            out.append("%")
            out.append(conv)
            continue

        raw = _as_int(arguments.next())
        if qualifier == "h":
            raw &= 0xFFFF
            if flags & _Flag.SIGN and raw & 0x8000:
                raw -= 0x10000
        out.append(_number(_signed32(raw), base, width, precision, flags))

    return "".join(out)


def sprintf(fmt: str | bytes, *args: Any) -> str:
    """Format the positional arguments according to ``fmt``."""
    return vsprintf(fmt, args)