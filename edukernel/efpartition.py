"""Equal-size (fixed) partition allocator kept inside simulated memory."""

from __future__ import annotations

from .dpartition import OutOfMemory, PartitionError
from .formatting import sprintf
from .memory import PhysicalMemory

__all__ = ["FixedPartition", "total_size"]

HEADER_SIZE = 12  # totalN, perSize, firstFree


def _align4(n: int) -> int:
    return (n + 3) & ~3


def total_size(per_size: int, n: int) -> int:
    """Bytes needed for ``n`` blocks of ``per_size`` bytes, header included."""
    if per_size < 1:
        raise ValueError("block size must be positive")
    if n < 0:
        raise ValueError("block count must not be negative")
    return _align4(per_size) * n + HEADER_SIZE


class FixedPartition:
    """``n`` blocks of one size; free blocks form a LIFO list."""

    def __init__(self, memory: PhysicalMemory, start: int, per_size: int, n: int) -> None:
        if n < 1:
            raise ValueError("a fixed partition needs at least one block")
        total_size(per_size, n)
        actual = _align4(per_size)
        self._memory = memory
        self._start = start
        first = start + HEADER_SIZE
        memory.write_u32(start, n)
        memory.write_u32(start + 4, actual)
        memory.write_u32(start + 8, first)
        blocks = [first + i * actual for i in range(n)]
        for block, nxt in zip(blocks, blocks[1:] + [0]):
            memory.write_u32(block, nxt)

    @property
    def start(self) -> int:
        return self._start

    @property
    def total_n(self) -> int:
        return self._memory.read_u32(self._start)

    @property
    def per_size(self) -> int:
        return self._memory.read_u32(self._start + 4)

    @property
    def first_free(self) -> int:
        return self._memory.read_u32(self._start + 8)

    def _block_addresses(self) -> range:
        first = self._start + HEADER_SIZE
        return range(first, first + self.per_size * self.total_n, self.per_size)

    def alloc(self) -> int:
        """Take a free block; raises :class:`OutOfMemory` when none is left."""
        addr = self.first_free
        if not addr:
            raise OutOfMemory("no free block left")
        self._memory.write_u32(self._start + 8, self._memory.read_u32(addr))
        return addr

    def free(self, start: int) -> None:
        """Return a block obtained from :meth:`alloc`."""
        if start not in self._block_addresses():
            raise PartitionError(f"0x{start:x} is not a block of this partition")
        self._memory.write_u32(start, self.first_free)
        self._memory.write_u32(self._start + 8, start)

    def walk(self) -> list[str]:
        """Describe the partition header and each block by address."""
        lines = [
            sprintf(
                "eFPartition(start=0x%x, totalN=0x%x, perSize=0x%x, firstFree=0x%x)",
                self._start,
                self.total_n,
                self.per_size,
                self.first_free,
            )
        ]
        lines.extend(
            sprintf("EEB(start=0x%x, next=0x%x)", block, self._memory.read_u32(block))
            for block in self._block_addresses()
        )
        return lines