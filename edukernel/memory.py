"""Simulated physical memory and the boot-time memory probe."""

from __future__ import annotations

__all__ = ["MemoryFault", "PhysicalMemory", "probe_memory"]

MIN_PROBE_START = 0x100000
MIN_GRAIN_SIZE = 0x1000
_PATTERNS = (0xAA55, 0x55AA)


class MemoryFault(Exception):
    """Raised on an access outside the installed memory."""


class PhysicalMemory:
    """A little-endian, byte-addressed memory covering ``[base, base + size)``."""

    def __init__(self, base: int, size: int) -> None:
        if base < 0 or size < 0:
            raise ValueError("base and size must not be negative")
        self._base = base
        self._data = bytearray(size)

    @property
    def base(self) -> int:
        return self._base

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def end(self) -> int:
        return self._base + len(self._data)

    def _offset(self, addr: int, width: int) -> int:
        if addr < self._base or addr + width > self.end:
            raise MemoryFault(f"{width}-byte access at 0x{addr:x} is outside memory")
        return addr - self._base

    def _read(self, addr: int, width: int) -> int:
        offset = self._offset(addr, width)
        return int.from_bytes(self._data[offset : offset + width], "little")

    def _write(self, addr: int, width: int, value: int) -> None:
        if not 0 <= value < 1 << (8 * width):
            raise ValueError(f"value 0x{value:x} does not fit in {width} bytes")
        offset = self._offset(addr, width)
        self._data[offset : offset + width] = value.to_bytes(width, "little")

    def read_u16(self, addr: int) -> int:
        """Read an unsigned 16-bit value."""
        return self._read(addr, 2)

    def write_u16(self, addr: int, value: int) -> None:
        """Write an unsigned 16-bit value."""
        self._write(addr, 2, value)

    def read_u32(self, addr: int) -> int:
        """Read an unsigned 32-bit value."""
        return self._read(addr, 4)

    def write_u32(self, addr: int, value: int) -> None:
        """Write an unsigned 32-bit value."""
        self._write(addr, 4, value)


def _cell_works(memory: PhysicalMemory, addr: int) -> bool:
    try:
        saved = memory.read_u16(addr)
        for pattern in _PATTERNS:
            memory.write_u16(addr, pattern)
            if memory.read_u16(addr) != pattern:
                return False
        memory.write_u16(addr, saved)
    except MemoryFault:
        return False
    return True


def probe_memory(memory: PhysicalMemory, start: int, grain_size: int) -> tuple[int, int]:
    """Find how much working memory follows ``start``, in steps of ``grain_size``.

    Returns ``(start, size)``. The contents of every tested cell are restored.
    """
    if start < MIN_PROBE_START:
        raise ValueError(f"start 0x{start:x} is too small, should be >= 1MB")
    if grain_size < MIN_GRAIN_SIZE:
        raise ValueError(f"grain size 0x{grain_size:x} is too small, should be >= 4KB")
    addr = start
    while _cell_works(memory, addr):
        addr += grain_size
    return start, addr - start