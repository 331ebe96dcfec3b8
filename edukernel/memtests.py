"""Interactive memory-manager test commands for the shell."""

from __future__ import annotations

from .console import Console
from .dpartition import DynamicPartition, Heap, OutOfMemory
from .efpartition import FixedPartition, total_size
from .memory import PhysicalMemory

__all__ = ["MemoryTests"]

MAX_MALLOC_STEP = 0x1000
SMALL_PARTITION_SIZE = 0x100
EFP_BLOCK_SIZE = 31
EFP_BLOCK_COUNT = 4
_EFP_PATTERNS = (
    ("A", 0xAAAAAAAA),
    ("B", 0xBBBBBBBB),
    ("C", 0xCCCCCCCC),
    ("D", 0xDDDDDDDD),
    ("E", 0xEEEEEEEE),
)


def _write_bytes(memory: PhysicalMemory, addr: int, data: bytes) -> None:
    for offset in range(0, len(data) - 1, 2):
        memory.write_u16(addr + offset, data[offset] | data[offset + 1] << 8)
    if len(data) % 2:
        last = addr + len(data) - 1
        word = memory.read_u16(last - 1)
        memory.write_u16(last - 1, (word & 0xFF) | data[-1] << 8)


def _read_bytes(memory: PhysicalMemory, addr: int, length: int) -> bytes:
    out = bytearray()
    for offset in range(0, length - 1, 2):
        out += memory.read_u16(addr + offset).to_bytes(2, "little")
    if length % 2:
        out.append(memory.read_u16(addr + length - 2) >> 8)
    return bytes(out)


def _try_alloc(partition: DynamicPartition, size: int) -> int | None:
    try:
        return partition.alloc(size)
    except OutOfMemory:
        return None


class MemoryTests:
    """Test commands exercising malloc, dynamic and fixed partitions."""

    def __init__(self, heap: Heap, console: Console) -> None:
        self.heap = heap
        self.console = console

    @property
    def _memory(self) -> PhysicalMemory:
        return self.heap.partition.memory

    def _filled_buffers(self, specs: list[tuple[int, str, int]], labels: list[str]) -> int:
        memory = self._memory
        buffers = [self.heap.malloc(size) for size, _, _ in specs]
        for addr, (size, fill, count) in zip(buffers, specs):
            data = fill.encode("latin-1") * count + b"\n"
            _write_bytes(memory, addr, data + b"\0" * (size - len(data)))

        self.console.printf(0x5, "We allocated 2 buffers.\n")
        for addr, (size, _, _), label in zip(buffers, specs, labels):
            self.console.printf(0x5, label, addr)
            text = _read_bytes(memory, addr, size).decode("latin-1").split("\0", 1)[0]
            self.console.printf(0x7, "%s", text)
        self.console.printf(0x7, "\n")

        for addr in buffers:
            self.heap.free(addr)
        return 0

    def malloc1(self, argv: list[str]) -> int:
        """Allocate two buffers, fill them with '*' and '#', print and free them."""
        return self._filled_buffers(
            [(19, "*", 17), (24, "#", 22)],
            [
                "BUF1(size=19, addr=0x%x) filled with 17(*): ",
                "BUF2(size=24, addr=0x%x) filled with 22(#): ",
            ],
        )

    def malloc2(self, argv: list[str]) -> int:
        """Allocate two buffers, fill them with '+' and ',', print and free them."""
        return self._filled_buffers(
            [(11, "+", 9), (21, ",", 19)],
            [
                "BUF1(size=9, addr=0x%x) filled with 9(+): ",
                "BUF2(size=19, addr=0x%x) filled with 19(,): ",
            ],
        )

    def max_malloc_size(self, argv: list[str]) -> int:
        """Find the first multiple of 0x1000 that malloc refuses; print and return it."""
        size = MAX_MALLOC_STEP
        while True:
            try:
                addr = self.heap.malloc(size)
            except OutOfMemory:
                break
            self.heap.free(addr)
            size += MAX_MALLOC_STEP
        self.console.printf(0x7, "MAX_MALLOC_SIZE: 0x%x (with step = 0x1000);\n", size)
        return size

    def _walk_dp(self, partition: DynamicPartition) -> None:
        header, *blocks = partition.walk()
        self.console.printk(0x5, "%s\n", header)
        for line in blocks:
            self.console.printk(0x3, "%s\n", line)

    def _walk_efp(self, partition: FixedPartition) -> None:
        header, *blocks = partition.walk()
        self.console.printk(0x5, "%s\n", header)
        for line in blocks:
            self.console.printk(0x7, "%s\n", line)

    def _small_partition(self) -> tuple[int, DynamicPartition] | None:
        try:
            x = self.heap.malloc(SMALL_PARTITION_SIZE)
        except OutOfMemory:
            self.console.printf(0x7, "MALLOC FAILED, CAN't TEST dPartition\n")
            return None
        self.console.printf(0x7, "We had successfully ")
        self.console.printf(0x5, "malloc()")
        self.console.printf(
            0x7, " a small memBlock (size=0x%x, addr=0x%x);\n", SMALL_PARTITION_SIZE, x
        )
        self.console.printf(0x7, "It is initialized as a very small dPartition;\n")
        partition = DynamicPartition(self._memory, x, SMALL_PARTITION_SIZE)
        self._walk_dp(partition)
        return x, partition

    def _alloc_and_release(self, partition: DynamicPartition, size: int) -> bool:
        block = _try_alloc(partition, size)
        self.console.printf(0x7, "Alloc a memBlock with size 0x%x, ", size)
        if block is None:
            self.console.printf(0x5, "failed!\n")
            return False
        self.console.printf(0x5, "success(addr=0x%x)!", block)
        partition.free(block)
        self.console.printf(0x7, "......Relaesed;\n")
        return True

    def dp1(self, argv: list[str]) -> int:
        """Allocate and release ever larger blocks, then ever smaller ones."""
        made = self._small_partition()
        if made is None:
            return 0
        x, partition = made
        size = 0x10
        while self._alloc_and_release(partition, size):
            size <<= 1
        self.console.printf(0x7, "Now, converse the sequence.\n")
        while size >= 0x10:
            self._alloc_and_release(partition, size)
            size >>= 1
        self.heap.free(x)
        return 0

    def _abc(self, banner: str, release: list[tuple[str, str]]) -> int:
        made = self._small_partition()
        if made is None:
            return 0
        x, partition = made
        self.console.printf(0x7, "%s", banner)

        blocks: dict[str, int | None] = {}
        for name, size, pattern in (
            ("A", 0x10, 0xAAAAAAAA),
            ("B", 0x20, 0xBBBBBBBB),
            ("C", 0x30, 0xCCCCCCCC),
        ):
            block = _try_alloc(partition, size)
            self.console.printf(0x7, "Alloc memBlock %s with size 0x%x: ", name, size)
            if block is None:
                self.console.printf(0x5, "failed!\n")
            else:
                self.console.printf(0x5, "success(addr=0x%x)!\n", block)
                self._memory.write_u32(block, pattern)
            blocks[name] = block
            self._walk_dp(partition)

        for name, message in release:
            self.console.printf(0x7, message)
            block = blocks[name]
            if block is not None:
                partition.free(block)
            self._walk_dp(partition)

        self.heap.free(x)
        return 0

    def dp2(self, argv: list[str]) -> int:
        """Allocate A, B, C and release them in allocation order."""
        return self._abc(
            "Now, A:B:C:- ==> -:B:C:- ==> -:C- ==> - .\n",
            [
                ("A", "Now, release A.\n"),
                ("B", "Now, release B.\n"),
                ("C", "At last, release C.\n"),
            ],
        )

    def dp3(self, argv: list[str]) -> int:
        """Allocate A, B, C and release them in reverse order."""
        return self._abc(
            "Now, A:B:C:- ==> A:B:- ==> A:- ==> - .\n",
            [
                ("C", "Now, release C.\n"),
                ("B", "Now, release B.\n"),
                ("A", "At last, release A.\n"),
            ],
        )

    def efp(self, argv: list[str]) -> int:
        """Build a fixed partition of four blocks, allocate five, free four."""
        tsize = total_size(EFP_BLOCK_SIZE, EFP_BLOCK_COUNT)
        try:
            x = self.heap.malloc(tsize)
        except OutOfMemory:
            x = 0
        self.console.printf(0x7, "X:0x%x:%d \n", x, tsize)
        if not x:
            self.console.printf(0x7, "TSK2: MALLOC FAILED, CAN't TEST eFPartition\n")
            return 0

        self.console.printf(0x7, "We had successfully ")
        self.console.printf(0x5, "malloc()")
        self.console.printf(0x7, " a small memBlock (size=0x%x, addr=0x%x);\n", tsize, x)
        self.console.printf(0x7, "It is initialized as a very small ePartition;\n")
        partition = FixedPartition(self._memory, x, EFP_BLOCK_SIZE, EFP_BLOCK_COUNT)
        self._walk_efp(partition)

        blocks: dict[str, int | None] = {}
        for name, pattern in _EFP_PATTERNS:
            try:
                block: int | None = partition.alloc()
            except OutOfMemory:
                block = None
            if block is None:
                self.console.printf(0x7, "Alloc memBlock %s, failed!\n", name)
            else:
                self._memory.write_u32(block, pattern)
                self.console.printf(
                    0x7,
                    "Alloc memBlock %s, start = 0x%x: 0x%x \n",
                    name,
                    block,
                    self._memory.read_u32(block),
                )
            blocks[name] = block
            self._walk_efp(partition)

        for name in "ABCD":
            self.console.printf(0x7, "Now, release %s.\n", name)
            block = blocks[name]
            if block is not None:
                partition.free(block)
            self._walk_efp(partition)
        return 0

    def register(self, shell) -> None:
        """Add every test command to ``shell``."""
        shell.add_command("testMalloc1", self.malloc1, None, "Malloc, write and read.")
        shell.add_command("testMalloc2", self.malloc2, None, "Malloc, write and read.")
        shell.add_command(
            "maxMallocSizeNow",
            self.max_malloc_size,
            None,
            "MAX_MALLOC_SIZE always changes. What's the value Now?",
        )
        shell.add_command(
            "testdP1",
            self.dp1,
            None,
            "Init a dPatition(size=0x100). [Alloc,Free]* with step = 0x20",
        )
        shell.add_command(
            "testdP2",
            self.dp2,
            None,
            "Init a dPatition(size=0x100). A:B:C:- ==> -:B:C:- ==> -:C:- ==> - .",
        )
        shell.add_command(
            "testdP3",
            self.dp3,
            None,
            "Init a dPatition(size=0x100). A:B:C:- ==> A:B:- ==> A:- ==> - .",
        )
        shell.add_command(
            "testeFP", self.efp, None, "Init a eFPatition. Alloc all and Free all."
        )