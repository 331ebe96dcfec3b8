import pytest

from edukernel.console import Console
from edukernel.dpartition import DynamicPartition, Heap, OutOfMemory, init_heap
from edukernel.memory import PhysicalMemory
from edukernel.memtests import MemoryTests
from edukernel.shell import Shell
from edukernel.uart import Uart
from edukernel.vga import Screen

BASE = 0x100000


def _make(heap_factory):
    memory = PhysicalMemory(BASE, 0x20000)
    heap = heap_factory(memory)
    uart = Uart()
    console = Console(Screen(), uart)
    return MemoryTests(heap, console), heap, uart


@pytest.fixture
def setup():
    return _make(lambda memory: init_heap(memory, BASE + 0x400))


@pytest.fixture
def tiny():
    return _make(lambda memory: Heap(DynamicPartition(memory, BASE, 0x40)))


def _text(uart):
    return uart.output().replace("\r\n", "\n")


def _lines(uart, prefix):
    return [line for line in _text(uart).split("\n") if line.startswith(prefix)]


def test_malloc1_fills_buffers(setup):
    tests, heap, uart = setup
    before = heap.partition.walk()
    assert tests.malloc1([]) == 0
    text = _text(uart)
    assert "We allocated 2 buffers." in text
    assert "filled with 17(*): " + "*" * 17 + "\n" in text
    assert "filled with 22(#): " + "#" * 22 + "\n" in text
    assert heap.partition.walk() == before


def test_malloc2_fills_buffers(setup):
    tests, heap, uart = setup
    before = heap.partition.walk()
    assert tests.malloc2([]) == 0
    text = _text(uart)
    assert "filled with 9(+): " + "+" * 9 + "\n" in text
    assert "filled with 19(,): " + "," * 19 + "\n" in text
    assert heap.partition.walk() == before


def test_max_malloc_size(setup):
    tests, heap, uart = setup
    size = tests.max_malloc_size([])
    assert size % 0x1000 == 0
    with pytest.raises(OutOfMemory):
        heap.malloc(size)
    if size > 0x1000:
        heap.free(heap.malloc(size - 0x1000))
    assert "MAX_MALLOC_SIZE: 0x%x (with step = 0x1000);" % size in _text(uart)


def test_max_malloc_size_is_stable(setup):
    tests, _, _ = setup
    first = tests.max_malloc_size([])
    second = tests.max_malloc_size([])
    assert first > 0
    assert first % 0x1000 == 0
    assert second == first


def test_dp1_grows_then_shrinks(setup):
    tests, heap, uart = setup
    before = heap.partition.walk()
    tests.dp1([])
    text = _text(uart)
    assert "Alloc a memBlock with size 0x10, success(addr=0x" in text
    assert "failed!" in text
    assert "Now, converse the sequence." in text
    assert text.index("failed!") < text.index("Now, converse the sequence.")
    assert heap.partition.walk() == before


@pytest.mark.parametrize("method", ["dp2", "dp3"])
def test_abc_release_restores_partition(setup, method):
    tests, heap, uart = setup
    before = heap.partition.walk()
    getattr(tests, method)([])
    headers = _lines(uart, "dPartition(")
    embs = _lines(uart, "EMB(")
    assert len(headers) == 7
    assert headers[-1] == headers[0]
    assert embs[-1] == embs[0]
    assert "Alloc memBlock C with size 0x30: success" in _text(uart)
    assert heap.partition.walk() == before


def test_dp3_releases_in_reverse(setup):
    tests, _, uart = setup
    tests.dp3([])
    text = _text(uart)
    assert text.index("Now, release C.") < text.index("Now, release B.")
    assert text.index("Now, release B.") < text.index("At last, release A.")


def test_dp_on_full_heap_reports_failure(tiny):
    tests, _, uart = tiny
    assert tests.dp1([]) == 0
    assert "MALLOC FAILED, CAN't TEST dPartition" in _text(uart)


def test_efp_allocates_four_of_five(setup):
    tests, _, uart = setup
    assert tests.efp([]) == 0
    text = _text(uart)
    assert ": 0xaaaaaaaa \n" in text
    assert ": 0xdddddddd \n" in text
    assert "Alloc memBlock E, failed!" in text
    assert "Alloc memBlock D, start = 0x" in text
    assert len(_lines(uart, "eFPartition(")) == 10
    assert len(_lines(uart, "EEB(")) == 40


def test_efp_on_full_heap_reports_failure(tiny):
    tests, _, uart = tiny
    tests.efp([])
    text = _text(uart)
    assert "X:0x0:" in text
    assert "TSK2: MALLOC FAILED, CAN't TEST eFPartition" in text


def test_register_adds_all_commands(setup):
    tests, _, uart = setup
    shell = Shell(tests.console, uart)
    tests.register(shell)
    names = [
        "testMalloc1",
        "testMalloc2",
        "maxMallocSizeNow",
        "testdP1",
        "testdP2",
        "testdP3",
        "testeFP",
    ]
    for name in names:
        assert shell.find(name) is not None
    assert shell.execute("testMalloc2\n") == 0
    assert "," * 19 in _text(uart)