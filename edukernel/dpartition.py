"""First-fit dynamic partition allocator kept inside simulated memory."""

from __future__ import annotations

from typing import NamedTuple

from .formatting import sprintf
from .memory import PhysicalMemory, probe_memory

__all__ = [
    "PartitionError",
    "OutOfMemory",
    "DynamicPartition",
    "Heap",
    "init_heap",
]

HEADER_SIZE = 8  # size, firstFreeStart
EMB_OVERHEAD = 4  # the size word in front of every block
EMB_MINIMUM_SIZE = 8  # size word plus the free-list link
MINIMUM_SIZE = HEADER_SIZE + EMB_MINIMUM_SIZE

PROBE_START = 0x100000
PROBE_GRAIN = 0x1000


class PartitionError(Exception):
    """Raised for an invalid partition or an invalid block release."""


class OutOfMemory(PartitionError):
    """Raised when no free block is large enough."""


class _Block(NamedTuple):
    start: int
    size: int
    next_start: int


def _align4(n: int) -> int:
    return (n + 3) & ~3


class DynamicPartition:
    """Variable-size blocks, a free list ordered by address, first-fit search."""

    def __init__(self, memory: PhysicalMemory, start: int, total_size: int) -> None:
        if total_size < MINIMUM_SIZE:
            raise PartitionError(f"partition size 0x{total_size:x} is too small")
        self._memory = memory
        self._start = start
        first = start + HEADER_SIZE
        memory.write_u32(start, total_size)
        memory.write_u32(start + 4, first)
        memory.write_u32(first, total_size - HEADER_SIZE)
        memory.write_u32(first + 4, 0)

    @property
    def memory(self) -> PhysicalMemory:
        return self._memory

    @property
    def start(self) -> int:
        return self._start

    @property
    def size(self) -> int:
        return self._memory.read_u32(self._start)

    @property
    def first_free(self) -> int:
        return self._memory.read_u32(self._start + 4)

    def _size_of(self, block: int) -> int:
        return self._memory.read_u32(block)

    def _next_of(self, block: int) -> int:
        return self._memory.read_u32(block + 4)

    def _set_size(self, block: int, size: int) -> None:
        self._memory.write_u32(block, size)

    def _set_next(self, block: int, nxt: int) -> None:
        self._memory.write_u32(block + 4, nxt)

    def _link(self, prev: int, target: int) -> None:
        if prev:
            self._set_next(prev, target)
        else:
            self._memory.write_u32(self._start + 4, target)

    def alloc(self, size: int) -> int:
        """Allocate ``size`` bytes and return the address usable by the caller."""
        if size < 0:
            raise ValueError("size must not be negative")
        actual = max(_align4(size + EMB_OVERHEAD), EMB_MINIMUM_SIZE)

        prev = 0
        block = self.first_free
        while block and self._size_of(block) < actual:
            prev, block = block, self._next_of(block)
        if not block:
            raise OutOfMemory(f"no free block of 0x{actual:x} bytes")

        nxt = self._next_of(block)
        left = self._size_of(block) - actual
        if left >= EMB_MINIMUM_SIZE:
            rear = block + actual
            self._set_size(rear, left)
            self._set_next(rear, nxt)
            nxt = rear
            self._set_size(block, actual)
        self._link(prev, nxt)
        return block + EMB_OVERHEAD

    def free(self, start: int) -> None:
        """Release a block returned by :meth:`alloc`, merging with free neighbours."""
        block = start - EMB_OVERHEAD
        if block < self._start + HEADER_SIZE:
            raise PartitionError(f"0x{start:x} is not inside the partition")
        end = block + self._size_of(block)
        if end > self._start + self.size:
            raise PartitionError(f"0x{start:x} is not inside the partition")

        prev = 0
        nxt = self.first_free
        while nxt and nxt <= block:
            if nxt == block:
                raise PartitionError(f"0x{start:x} is already free")
            prev, nxt = nxt, self._next_of(nxt)
        if prev and block < prev + self._size_of(prev):
            raise PartitionError(f"0x{start:x} is already free")

        if end == nxt:
            self._set_size(block, self._size_of(block) + self._size_of(nxt))
            self._set_next(block, self._next_of(nxt))
        else:
            self._set_next(block, nxt)

        if prev and block == prev + self._size_of(prev):
            self._set_size(prev, self._size_of(prev) + self._size_of(block))
            self._set_next(prev, self._next_of(block))
        else:
            self._link(prev, block)

    def blocks(self) -> list[_Block]:
        """Return every block, free or allocated, in address order."""
        result = []
        emb = self._start + HEADER_SIZE
        end = self._start + self.size
        while emb < end:
            size = self._size_of(emb)
            result.append(_Block(emb, size, self._next_of(emb)))
            if size == 0:
                raise PartitionError(f"corrupted block at 0x{emb:x}")
            emb += size
        return result

    def walk(self) -> list[str]:
        """Describe the partition header and each block, one line each."""
        lines = [
            sprintf(
                "dPartition(start=0x%x, size=0x%x, firstFreeStart=0x%x)",
                self._start,
                self.size,
                self.first_free,
            )
        ]
        lines.extend(
            sprintf("EMB(start=0x%x, size=0x%x, nextStart=0x%x)", *block)
            for block in self.blocks()
        )
        return lines


class Heap:
    """malloc/free over a dynamic partition."""

    def __init__(self, partition: DynamicPartition) -> None:
        self.partition = partition

    def malloc(self, size: int) -> int:
        """Allocate ``size`` bytes; raises :class:`OutOfMemory` when full."""
        return self.partition.alloc(size)

    def free(self, start: int) -> None:
        """Release memory obtained from :meth:`malloc`."""
        self.partition.free(start)


def init_heap(memory: PhysicalMemory, kernel_end: int) -> Heap:
    """Probe memory, skip what the kernel image occupies and build the heap."""
    start, size = probe_memory(memory, PROBE_START, PROBE_GRAIN)
    if start <= kernel_end:
        size -= kernel_end - start
        start = kernel_end
    return Heap(DynamicPartition(memory, start, size))