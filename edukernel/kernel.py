"""Boot sequence of the teaching kernel and its command-line entry point."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable

from .clock import Ticker, WallClock
from .console import Console
from .dpartition import Heap, PartitionError, init_heap
from .formatting import sprintf
from .memory import PhysicalMemory, probe_memory
from .memtests import MemoryTests
from .ports import PortBus, init8253, init8259a
from .shell import Shell
from .task import TaskManager
from .uart import Uart
from .vga import Screen

__all__ = ["Kernel", "main"]

DEFAULT_MEMORY_SIZE = 0x400000
DEFAULT_KERNEL_END = 0x200000
PROBE_START = 0x100000
PROBE_GRAIN = 0x1000
DEMO_ALLOC_SIZE = 100

WHITE = 0x7
CLOCK_COLOR = 0x7E
CLOCK_ROW = 24
CLOCK_COL = 72
INITIAL_TIME = (18, 59, 59)

_STARS = "********************************\n"
_INIT_BANNER = (
    _STARS,
    "*         INIT   INIT !        *\n",
    _STARS,
)


class Kernel:
    """Simulated machine: memory, devices, memory manager, tasks and a shell."""

    def __init__(
        self,
        memory_size: int = DEFAULT_MEMORY_SIZE,
        kernel_end: int = DEFAULT_KERNEL_END,
        user_input: str | bytes = "",
    ) -> None:
        self.memory = PhysicalMemory(0, memory_size)
        self.kernel_end = kernel_end
        self.bus = PortBus()
        self.uart = Uart()
        self.uart.feed(user_input)
        self.screen = Screen()
        self.console = Console(self.screen, self.uart)
        self.clock = WallClock()
        self.ticker = Ticker(self.clock)
        self.tasks = TaskManager(self.console)
        self.interrupts_enabled = False
        self.heap: Heap | None = None
        self.shell: Shell | None = None
        self._booted = False

    def boot(self) -> None:
        """Initialise the hardware and memory, then run the tasks until they finish."""
        if self._booted:
            raise RuntimeError("the kernel has already been booted")
        self._booted = True

        init8259a(self.bus)
        init8253(self.bus)
        self.interrupts_enabled = True
        self.screen.clear()

        self.heap = self._init_memory()
        self._partition_demo(self.heap)

        self.tasks.run(self._init_task)

    def _init_memory(self) -> Heap:
        start, size = probe_memory(self.memory, PROBE_START, PROBE_GRAIN)
        self.console.printk(0x7, "MemStart: %x  \n", start)
        self.console.printk(0x7, "MemSize:  %x  \n", size)
        self.console.printk(0x7, "_end:  %x  \n", self.kernel_end)
        return init_heap(self.memory, self.kernel_end)

    def _walk(self, heap: Heap) -> None:
        header, *blocks = heap.partition.walk()
        self.console.printk(0x5, "%s\n", header)
        for line in blocks:
            self.console.printk(0x3, "%s\n", line)

    def _partition_demo(self, heap: Heap) -> None:
        block = heap.partition.alloc(DEMO_ALLOC_SIZE)
        self._walk(heap)
        heap.partition.free(block)
        self._walk(heap)

    def _show_wall_clock(self) -> None:
        h, m, s = self.clock.get()
        self.screen.put_chars(sprintf("%02d:%02d:%02d", h, m, s), CLOCK_COLOR, CLOCK_ROW, CLOCK_COL)

    def _hello_task(self, index: int) -> Callable[[], None]:
        def body() -> None:
            self.console.printf(WHITE, "%s", _STARS)
            self.console.printf(WHITE, "*     Tsk%d: HELLO WORLD!       *\n", index)
            self.console.printf(WHITE, "%s", _STARS)

        return body

    def _init_task(self) -> None:
        self.screen.clear()
        self.clock.set(*INITIAL_TIME)
        self.clock.set_hook(self._show_wall_clock)

        for line in _INIT_BANNER:
            self.console.printf(0x07, "%s", line)

        for index in range(3):
            self.tasks.create(self._hello_task(index))

        assert self.heap is not None
        self.shell = Shell(self.console, self.uart)
        MemoryTests(self.heap, self.console).register(self.shell)
        self.tasks.create(self.shell.run)


def _int(text: str) -> int:
    return int(text, 0)


def main(argv: list[str] | None = None) -> int:
    """Boot the kernel with shell input from a file or stdin; print the serial output."""
    parser = argparse.ArgumentParser(description="Run the teaching kernel in simulation.")
    parser.add_argument("--memory-size", type=_int, default=DEFAULT_MEMORY_SIZE,
                        help="installed memory in bytes (default 0x400000)")
    parser.add_argument("--kernel-end", type=_int, default=DEFAULT_KERNEL_END,
                        help="first address after the kernel image (default 0x200000)")
    parser.add_argument("--input", default="-",
                        help="file with shell command lines, '-' for stdin")
    args = parser.parse_args(argv)

    if args.input == "-":
        text = sys.stdin.read()
    else:
        with open(args.input, encoding="latin-1") as handle:
            text = handle.read()
    text = text.replace("\r\n", "\r").replace("\n", "\r")

    kernel = Kernel(args.memory_size, args.kernel_end, text)
    try:
        kernel.boot()
    except (PartitionError, ValueError) as exc:
        sys.stdout.write(kernel.uart.output())
        print(f"boot failed: {exc}", file=sys.stderr)
        return 1
    sys.stdout.write(kernel.uart.output())
    return 0


if __name__ == "__main__":
    sys.exit(main())