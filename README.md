# edukernel

A small teaching operating system that runs entirely inside Python. It
simulates physical memory, a text-mode screen, a serial port, the timer and
interrupt-controller I/O ports, a wall clock, dynamic and fixed-size
partition allocators, a first-come-first-served task manager and a command
shell that reads from the serial port.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Booting the kernel

```
printf 'cmd\nhelp testdP1\ntestMalloc1\n' | edukernel
```

`edukernel` reads all shell input first (from standard input, or from a file
given with `--input FILE`; `--input -` means standard input), turns each line
ending into a carriage return, and feeds it to the simulated serial port.
It then boots the kernel:

1. programs the interrupt controllers and the timer through the port bus;
2. probes memory from 0x100000 in 0x1000 steps, prints `MemStart`,
   `MemSize` and `_end`, and builds the heap after the kernel image;
3. allocates and frees one block, printing the partition layout after each;
4. runs the init task, which sets the wall clock to 18:59:59, prints a
   banner, creates three greeting tasks and the shell task.

The shell (prompt `Student >:`) runs each input line until the input runs
out, and then the kernel stops. Everything written to the serial port is
printed to standard output at the end. If booting fails because the memory
layout is unusable, the output so far is printed, the error goes to standard
error and the exit status is 1.

Options:

- `--memory-size N` — installed memory in bytes (default `0x400000`).
- `--kernel-end N` — first address after the kernel image (default
  `0x200000`).
- `--input FILE` — file with shell command lines, `-` for standard input.

Numbers may be written in decimal or with a `0x` prefix.

### Shell commands

- `cmd` — list all registered commands (most recently added first).
- `help [cmd]` — print the usage line, then the list of commands or the
  description of `cmd`.
- `testMalloc1`, `testMalloc2` — allocate two buffers, fill, print and free
  them.
- `maxMallocSizeNow` — the first multiple of 0x1000 that `malloc` refuses.
- `testdP1` — in a 0x100-byte dynamic partition, allocate and release ever
  larger blocks, then ever smaller ones.
- `testdP2`, `testdP3` — allocate blocks A, B, C and release them in
  allocation order or in reverse order, showing the layout after each step.
- `testeFP` — build a fixed partition of four 31-byte blocks, allocate five
  (the fifth fails) and free four.

An unknown name prints `UNKOWN command: <name>`; a line of more than ten
words prints `cmdline is tooooo long` and keeps the first ten.

## Using the pieces

The modules can also be used on their own:

- `edukernel.formatting` — `sprintf(fmt, *args)` and `vsprintf(fmt, args)`
  with the conversions `%d %i %u %o %x %X %c %s %p %n %a %A %%`, the flags
  `- + space # 0`, width, precision, `*` and the `h`/`l` qualifiers, on
  32-bit integers. `%n` takes a callable that receives the character count.
- `edukernel.cstring` — `strcmp`, `strncpy` and `str_length`, stopping at a
  NUL character.
- `edukernel.memory` — `PhysicalMemory(base, size)` with `read_u16`,
  `write_u16`, `read_u32`, `write_u32` (accesses outside raise
  `MemoryFault`), and `probe_memory(memory, start, grain_size)`.
- `edukernel.dpartition` — `DynamicPartition`, a first-fit allocator whose
  headers and free list live in the simulated memory, with `alloc`, `free`
  (merging with free neighbours), `blocks` and `walk`; `Heap` with
  `malloc` / `free`; `init_heap(memory, kernel_end)`. Failures raise
  `OutOfMemory` or `PartitionError`.
- `edukernel.efpartition` — `FixedPartition` of equal-sized blocks with
  `alloc`, `free` and `walk`, and `total_size(per_size, n)`.
- `edukernel.ports` — `PortBus` with `inb` / `outb`, `init8253`,
  `init8259a`.
- `edukernel.uart` — `Uart` with `feed`, `get_char`, `put_char`,
  `put_chars` and `output`.
- `edukernel.vga` — `Screen`, an 80×25 grid with `put_char`, `put_chars`,
  `append`, `clear`, `scroll`, `cell` and `row_text`.
- `edukernel.clock` — `WallClock` (`set`, `get`, `tick`, `timestamp`,
  `set_hook`) and `Ticker`.
- `edukernel.console` — `Console` whose `printk` / `printf` write formatted
  text to the screen and the serial port.
- `edukernel.task` — `TaskManager` with `create`, `destroy`, `ready_tasks`
  and `run`; `PoolExhausted` when the pool is full.
- `edukernel.shell` — `Shell` (`add_command`, `find`, `execute`, `run`, …)
  and `split_words`.
- `edukernel.memtests` — `MemoryTests`, the test commands above.
- `edukernel.kernel` — `Kernel`, which wires everything together, and
  `main`.

```python
from edukernel.formatting import sprintf
from edukernel.memory import PhysicalMemory
from edukernel.dpartition import DynamicPartition

print(sprintf("%02d:%02d:%02d", 18, 59, 59))

memory = PhysicalMemory(0x100000, 0x1000)
partition = DynamicPartition(memory, 0x100000, 0x100)
block = partition.alloc(0x10)
partition.free(block)
print("\n".join(partition.walk()))
```

## What it does not do

- It does not drive real hardware; memory, screen, serial port and I/O
  ports are all Python objects.
- The shell is not interactive: `edukernel` reads all of its input before
  booting and prints the serial output only when the kernel stops.
- Tasks are not preempted. Each task runs to completion in queue order, and
  timer ticks happen only when `Ticker.tick` or `WallClock.tick` is called.
- The formatter has no floating-point conversions.