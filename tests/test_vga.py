import pytest

from edukernel.vga import Screen


def test_put_char_and_cell_round_trip():
    screen = Screen()
    screen.put_char("Q", 0x4, 3, 7)
    assert screen.cell(3, 7) == ("Q", 0x4)


def test_put_char_outside_screen_raises():
    screen = Screen()
    with pytest.raises(IndexError):
        screen.put_char("x", 7, 25, 0)
    with pytest.raises(IndexError):
        screen.put_char("x", 7, 0, 80)


def test_put_chars_wraps_column():
    screen = Screen()
    assert screen.put_chars("ab", 5, 0, 79) == 2
    assert screen.cell(0, 79) == ("a", 5)
    assert screen.cell(1, 0) == ("b", 5)


def test_put_chars_wraps_last_row_to_top():
    screen = Screen()
    screen.put_chars("xyz", 7, 24, 79)
    assert screen.cell(24, 79).char == "x"
    assert screen.cell(0, 0).char == "y"
    assert screen.cell(0, 1).char == "z"


def test_put_chars_does_not_move_cursor():
    screen = Screen()
    screen.put_chars("hh:mm:ss", 0x7E, 24, 72)
    assert screen.cursor == (0, 0)
    assert screen.row_text(24).endswith("hh:mm:ss")


def test_append_handles_newline():
    screen = Screen()
    screen.append("hi\nthere", 7)
    assert screen.row_text(0) == "hi"
    assert screen.row_text(1) == "there"
    assert screen.cursor == (1, len("there"))


def test_append_wraps_long_line():
    screen = Screen()
    screen.append("x" * 85, 7)
    assert screen.row_text(0) == "x" * 80
    assert screen.row_text(1) == "x" * 5


def test_append_scrolls_text_rows():
    screen = Screen()
    for i in range(30):
        screen.append(f"L{i}\n", 7)
    assert screen.row_text(23) == ""
    assert screen.row_text(22) == "L29"
    assert screen.row_text(0) == "L7"
    assert screen.cursor == (23, 0)


def test_scroll_keeps_system_row():
    screen = Screen()
    screen.put_chars("12:00:00", 0x7E, 24, 72)
    screen.put_chars("top", 7, 0, 0)
    screen.put_chars("second", 7, 1, 0)
    screen.scroll()
    assert screen.row_text(0) == "second"
    assert screen.row_text(23) == ""
    assert screen.row_text(24).strip() == "12:00:00"


def test_clear_blanks_text_rows_and_homes_cursor():
    screen = Screen()
    screen.append("abc\ndef", 3)
    screen.put_chars("sys", 4, 24, 0)
    screen.clear()
    assert all(screen.row_text(r) == "" for r in range(24))
    assert screen.cell(0, 0) == ("\0", 0x7)
    assert screen.cursor == (0, 0)
    assert screen.row_text(24) == "sys"


def test_append_uses_color():
    screen = Screen()
    screen.append("a", 0x2)
    assert screen.cell(0, 0) == ("a", 0x2)