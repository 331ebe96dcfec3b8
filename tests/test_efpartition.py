import pytest

from edukernel.dpartition import OutOfMemory, PartitionError
from edukernel.efpartition import FixedPartition, total_size
from edukernel.memory import PhysicalMemory


@pytest.fixture
def fp():
    mem = PhysicalMemory(0, 0x1000)
    return FixedPartition(mem, 0x200, 31, 4)


def test_total_size_rounds_block_size_up():
    assert total_size(31, 4) == total_size(32, 4)
    assert total_size(29, 4) == total_size(32, 4)
    assert total_size(32, 4) - total_size(32, 3) == 32


def test_total_size_validation():
    with pytest.raises(ValueError):
        total_size(0, 4)
    with pytest.raises(ValueError):
        total_size(4, -1)


def test_init_rejects_empty_partition():
    mem = PhysicalMemory(0, 0x100)
    with pytest.raises(ValueError):
        FixedPartition(mem, 0, 16, 0)


def test_header_fields(fp):
    assert fp.total_n == 4
    assert fp.per_size % 4 == 0
    assert 31 <= fp.per_size < 35


def test_walk_header_line(fp):
    lines = fp.walk()
    assert lines[0] == "eFPartition(start=0x200, totalN=0x4, perSize=0x20, firstFree=0x20c)"
    assert len(lines) == fp.total_n + 1


def test_alloc_all_blocks_then_fail(fp):
    addrs = [fp.alloc() for _ in range(4)]
    assert len(set(addrs)) == 4
    assert addrs == sorted(addrs)
    assert all(a % 4 == 0 for a in addrs)
    assert max(addrs) + fp.per_size == fp.start + total_size(31, 4)
    with pytest.raises(OutOfMemory):
        fp.alloc()


def test_blocks_are_usable_and_separate(fp):
    a = fp.alloc()
    b = fp.alloc()
    fp._memory.write_u32(a, 0xAAAAAAAA)
    fp._memory.write_u32(b, 0xBBBBBBBB)
    assert fp._memory.read_u32(a) == 0xAAAAAAAA
    assert fp._memory.read_u32(b) == 0xBBBBBBBB
    assert abs(b - a) >= fp.per_size


def test_free_is_lifo(fp):
    a = fp.alloc()
    b = fp.alloc()
    fp.free(a)
    fp.free(b)
    assert fp.alloc() == b
    assert fp.alloc() == a


def test_free_all_allows_full_reallocation(fp):
    first = [fp.alloc() for _ in range(4)]
    for addr in first:
        fp.free(addr)
    second = [fp.alloc() for _ in range(4)]
    assert sorted(second) == sorted(first)


def test_free_foreign_address_raises(fp):
    a = fp.alloc()
    with pytest.raises(PartitionError):
        fp.free(a + 1)
    with pytest.raises(PartitionError):
        fp.free(fp.start)
    with pytest.raises(PartitionError):
        fp.free(fp.start + total_size(31, 4))


def test_walk_shows_every_block_address(fp):
    addrs = [fp.alloc() for _ in range(4)]
    for line, addr in zip(fp.walk()[1:], addrs):
        assert line.startswith(f"EEB(start=0x{addr:x},")