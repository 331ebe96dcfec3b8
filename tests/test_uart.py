import pytest

from edukernel.uart import Uart


def test_feed_then_get_in_order():
    uart = Uart()
    uart.feed("ab")
    uart.feed(b"c")
    assert [uart.get_char() for _ in range(3)] == ["a", "b", "c"]


def test_get_char_without_input_raises():
    uart = Uart()
    with pytest.raises(EOFError):
        uart.get_char()


def test_get_char_after_draining_raises():
    uart = Uart()
    uart.feed("x")
    assert uart.get_char() == "x"
    with pytest.raises(EOFError):
        uart.get_char()


def test_put_char_is_raw():
    uart = Uart()
    uart.put_char("\n")
    uart.put_char(ord("A"))
    assert uart.output() == "\nA"


def test_put_chars_translates_newline():
    uart = Uart()
    uart.put_chars("a\nb\n")
    assert uart.output() == "a\r\nb\r\n"


def test_put_chars_stops_at_terminator():
    uart = Uart()
    uart.put_chars("cmd\0ignored")
    assert uart.output() == "cmd"


def test_output_accumulates():
    uart = Uart()
    uart.put_chars("one")
    uart.put_chars("two")
    assert uart.output() == "onetwo"


@pytest.mark.parametrize("bad", ["", "ab", 256, -1])
def test_put_char_rejects_bad_input(bad):
    with pytest.raises(ValueError):
        Uart().put_char(bad)