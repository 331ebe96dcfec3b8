import pytest

from edukernel.console import Console
from edukernel.uart import Uart
from edukernel.vga import Screen


@pytest.fixture
def console():
    return Console(Screen(), Uart())


def test_printk_goes_to_screen_and_serial(console):
    text = "START RUNNING......\n"
    n = console.printk(0x2, text)
    assert n == len(text)
    assert console.screen.row_text(0) == "START RUNNING......"
    assert console.uart.output() == "START RUNNING......\r\n"
    assert console.screen.cell(0, 0) == ("S", 0x2)


def test_printf_formats_arguments(console):
    n = console.printf(0x7, "%d-%s", 5, "ab")
    assert console.screen.row_text(0) == "5-ab"
    assert n == len(console.uart.output())


def test_output_continues_at_cursor(console):
    console.printk(0x2, "one ")
    console.printf(0x7, "two\n")
    console.printf(0x7, "three")
    assert console.screen.row_text(0) == "one two"
    assert console.screen.row_text(1) == "three"
    assert console.screen.cell(0, 4).color == 0x7
    assert console.screen.cell(0, 0).color == 0x2


def test_missing_argument_raises(console):
    with pytest.raises(TypeError):
        console.printf(0x7, "%d")