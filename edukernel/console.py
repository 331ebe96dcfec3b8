"""Formatted output to both the screen and the serial line."""

from __future__ import annotations

from typing import Any

from .formatting import vsprintf
from .uart import Uart
from .vga import Screen

__all__ = ["Console"]


class Console:
    """Kernel and user print functions over a screen and a serial port."""

    def __init__(self, screen: Screen, uart: Uart) -> None:
        self.screen = screen
        self.uart = uart

    def _emit(self, color: int, fmt: str | bytes, args: tuple[Any, ...]) -> int:
        text = vsprintf(fmt, args)
        self.screen.append(text, color)
        self.uart.put_chars(text)
        return len(text)

    def printk(self, color: int, fmt: str | bytes, *args: Any) -> int:
        """Kernel print; returns the number of characters produced."""
        return self._emit(color, fmt, args)

    def printf(self, color: int, fmt: str | bytes, *args: Any) -> int:
        """User print; returns the number of characters produced."""
        return self._emit(color, fmt, args)