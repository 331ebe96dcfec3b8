import pytest

from edukernel.memory import MemoryFault, PhysicalMemory, probe_memory


def test_u16_round_trip():
    mem = PhysicalMemory(0x1000, 0x100)
    mem.write_u16(0x1010, 0xBEEF)
    assert mem.read_u16(0x1010) == 0xBEEF


def test_u32_round_trip_and_little_endian_layout():
    mem = PhysicalMemory(0, 0x100)
    mem.write_u32(0x20, 0x11223344)
    assert mem.read_u32(0x20) == 0x11223344
    assert mem.read_u16(0x20) == 0x3344
    assert mem.read_u16(0x22) == 0x1122


def test_fresh_memory_reads_zero():
    mem = PhysicalMemory(0x400, 0x40)
    assert mem.read_u32(0x400) == 0


def test_access_below_base_faults():
    mem = PhysicalMemory(0x1000, 0x100)
    with pytest.raises(MemoryFault):
        mem.read_u16(0x0FFE)


def test_access_straddling_end_faults():
    mem = PhysicalMemory(0x1000, 0x100)
    with pytest.raises(MemoryFault):
        mem.read_u32(mem.end - 2)
    with pytest.raises(MemoryFault):
        mem.write_u16(mem.end, 1)


def test_value_too_large_rejected():
    mem = PhysicalMemory(0, 0x10)
    with pytest.raises(ValueError):
        mem.write_u16(0, 0x10000)
    with pytest.raises(ValueError):
        mem.write_u32(0, -1)


def test_probe_finds_end_of_memory():
    mem = PhysicalMemory(0, 0x140000)
    start, size = probe_memory(mem, 0x100000, 0x1000)
    assert start == 0x100000
    assert start + size == mem.end


def test_probe_restores_contents():
    mem = PhysicalMemory(0, 0x110000)
    mem.write_u16(0x100000, 0x1234)
    mem.write_u16(0x101000, 0x4321)
    probe_memory(mem, 0x100000, 0x1000)
    assert mem.read_u16(0x100000) == 0x1234
    assert mem.read_u16(0x101000) == 0x4321


def test_probe_beyond_memory_finds_nothing():
    mem = PhysicalMemory(0, 0x1000)
    assert probe_memory(mem, 0x100000, 0x1000) == (0x100000, 0)


def test_probe_rejects_low_start():
    mem = PhysicalMemory(0, 0x200000)
    with pytest.raises(ValueError):
        probe_memory(mem, 0xFF000, 0x1000)


def test_probe_rejects_small_grain():
    mem = PhysicalMemory(0, 0x200000)
    with pytest.raises(ValueError):
        probe_memory(mem, 0x100000, 0x800)