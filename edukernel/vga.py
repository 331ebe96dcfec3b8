"""Simulated VGA text-mode screen."""

from __future__ import annotations

from typing import NamedTuple

__all__ = ["Screen"]

COLS = 80
ROWS = 25  # the last row is reserved for the system (clock, notices)
TEXT_ROWS = 24
BLANK = "\0"
DEFAULT_COLOR = 0x07


class _Cell(NamedTuple):
    char: str
    color: int


def _as_char(c: str | bytes | int) -> str:
    if isinstance(c, int):
        return chr(c & 0xFF)
    if isinstance(c, (bytes, bytearray)):
        c = bytes(c).decode("latin-1")
    if len(c) != 1:
        raise ValueError("exactly one character expected")
    return c


class Screen:
    """An 80x25 grid of (character, colour) cells with a text cursor."""

    def __init__(self) -> None:
        self._cells = [[_Cell(BLANK, DEFAULT_COLOR)] * COLS for _ in range(ROWS)]
        self._row = 0
        self._col = 0

    @property
    def cursor(self) -> tuple[int, int]:
        """The ``(row, col)`` where the next appended character goes."""
        return self._row, self._col

    def put_char(self, c: str | bytes | int, color: int, row: int, col: int) -> None:
        """Write one cell; raises IndexError outside the screen."""
        if not (0 <= row < ROWS and 0 <= col < COLS):
            raise IndexError(f"cell ({row}, {col}) is outside the screen")
        self._cells[row][col] = _Cell(_as_char(c), color & 0xFF)

    def put_chars(self, msg: str | bytes, color: int, row: int, col: int) -> int:
        """Write a string from ``(row, col)``, wrapping past the last column and row.

        The cursor does not move. Returns the number of characters written.
        """
        if isinstance(msg, (bytes, bytearray)):
            msg = bytes(msg).decode("latin-1")
        count = 0
        for c in msg.split("\0", 1)[0]:
            count += 1
            if col == COLS:
                col = 0
                row += 1
            if row == ROWS:
                row = 0
            self.put_char(c, color, row, col)
            col += 1
        return count

    def clear(self) -> None:
        """Blank the text rows and home the cursor; the system row is kept."""
        for row in range(TEXT_ROWS):
            self._cells[row] = [_Cell(BLANK, DEFAULT_COLOR)] * COLS
        self._row = self._col = 0

    def scroll(self) -> None:
        """Move the text rows up by one and blank the last text row."""
        del self._cells[0]
        self._cells.insert(TEXT_ROWS - 1, [_Cell(BLANK, DEFAULT_COLOR)] * COLS)

    def append(self, text: str | bytes, color: int) -> None:
        """Write text at the cursor, handling newlines, wrapping and scrolling."""
        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode("latin-1")
        row, col = self._row, self._col
        for c in text.split("\0", 1)[0]:
            if c != "\n":
                self.put_char(c, color, row, col)
                col += 1
            else:
                col = 0
                row += 1
            if col >= COLS:
                col = 0
                row += 1
            if row >= TEXT_ROWS:
                self.scroll()
                row = TEXT_ROWS - 1
        self._row, self._col = row, col

    def cell(self, row: int, col: int) -> _Cell:
        """Return the ``(char, color)`` stored at a cell."""
        if not (0 <= row < ROWS and 0 <= col < COLS):
            raise IndexError(f"cell ({row}, {col}) is outside the screen")
        return self._cells[row][col]

    def row_text(self, row: int) -> str:
        """The characters of a row, blanks shown as spaces, trailing spaces removed."""
        if not 0 <= row < ROWS:
            raise IndexError(f"row {row} is outside the screen")
        return "".join(" " if c.char == BLANK else c.char for c in self._cells[row]).rstrip()