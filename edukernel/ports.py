"""Simulated x86 I/O port bus and the interrupt/timer controller set-up."""

from __future__ import annotations

__all__ = ["PortBus", "init8253", "init8259a"]

PIC1_COMMAND = 0x20
PIC1_DATA = 0x21
PIC2_COMMAND = 0xA0
PIC2_DATA = 0xA1

PIT_CHANNEL0 = 0x40
PIT_COMMAND = 0x43
PIT_MODE = 0x34  # channel 0, lobyte/hibyte, rate generator
PIT_DIVISOR = 11932  # about 100 Hz

FLOATING_BUS = 0xFF  # what an unwritten port reads back
AUTO_EOI = True


def _check_port(port: int) -> None:
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port 0x{port:x} is outside the 16-bit I/O space")


class PortBus:
    """An I/O space where every port latches the last byte written to it."""

    def __init__(self) -> None:
        self._latched: dict[int, int] = {}
        self._writes: list[tuple[int, int]] = []

    @property
    def writes(self) -> list[tuple[int, int]]:
        """Every ``(port, value)`` written so far, in order."""
        return list(self._writes)

    def inb(self, port: int) -> int:
        """Read a byte from ``port``."""
        _check_port(port)
        return self._latched.get(port, FLOATING_BUS)

    def outb(self, port: int, value: int) -> None:
        """Write a byte to ``port``."""
        _check_port(port)
        if not 0 <= value <= 0xFF:
            raise ValueError(f"value 0x{value:x} does not fit in a byte")
        self._latched[port] = value
        self._writes.append((port, value))


def init8253(bus: PortBus) -> None:
    """Program the timer for about 100 Hz and unmask its interrupt line."""
    bus.outb(PIT_COMMAND, PIT_MODE)
    bus.outb(PIT_CHANNEL0, PIT_DIVISOR & 0xFF)
    bus.outb(PIT_CHANNEL0, PIT_DIVISOR >> 8)
    bus.outb(PIC1_DATA, bus.inb(PIC1_DATA) & 0xFE)


def init8259a(bus: PortBus) -> None:
    """Mask everything, then initialise the master and slave interrupt controllers."""
    bus.outb(PIC1_DATA, 0xFF)
    bus.outb(PIC2_DATA, 0xFF)

    bus.outb(PIC1_COMMAND, 0x11)
    bus.outb(PIC1_DATA, 0x20)
    bus.outb(PIC1_DATA, 0x04)
    bus.outb(PIC1_DATA, 0x03 if AUTO_EOI else 0x01)

    bus.outb(PIC2_COMMAND, 0x11)
    bus.outb(PIC2_DATA, 0x28)
    bus.outb(PIC2_DATA, 0x02)
    bus.outb(PIC2_DATA, 0x01)