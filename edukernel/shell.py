"""A small line-oriented command shell over the serial port."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .console import Console
from .cstring import strcmp, strncpy
from .uart import Uart

__all__ = ["Command", "Shell", "split_words"]

NAME_LIMIT = 20
DESCRIPTION_LIMIT = 100
CMDLINE_LIMIT = 100
MAX_ARGS = 10
DEFAULT_PROMPT = "Student >:"
_SEPARATORS = " \n"

CommandFunc = Callable[[list[str]], "int | None"]
HelpFunc = Callable[[], object]


@dataclass
class Command:
    """A registered command."""

    name: str
    func: CommandFunc
    help_func: HelpFunc | None
    description: str


def _split(cmdline: str | bytes, limit: int) -> tuple[list[str], bool]:
    if isinstance(cmdline, (bytes, bytearray)):
        cmdline = bytes(cmdline).decode("latin-1")
    words: list[str] = []
    in_word = False
    truncated = False
    for c in cmdline.split("\0", 1)[0]:
        if len(words) >= limit:
            truncated = True
            if not (in_word and c not in _SEPARATORS):
                break
        if c in _SEPARATORS:
            in_word = False
        elif in_word:
            words[-1] += c
        else:
            words.append(c)
            in_word = True
    return words, truncated


def split_words(cmdline: str | bytes, limit: int) -> list[str]:
    """Split on spaces and newlines, keeping at most ``limit`` words.

    The last kept word is completed; anything after it is dropped.
    """
    return _split(cmdline, limit)[0]


class Shell:
    """Reads command lines from a serial port and dispatches registered commands."""

    def __init__(self, console: Console, uart: Uart, prompt: str = DEFAULT_PROMPT) -> None:
        self.console = console
        self.uart = uart
        self.prompt = prompt
        self._commands: list[Command] = []
        self.add_command("cmd", self.list_commands, None, "list all registered commands")
        self.add_command("help", self.help, self._help_usage, "help [cmd]")

    @property
    def commands(self) -> tuple[Command, ...]:
        """Registered commands, most recently added first."""
        return tuple(self._commands)

    def add_command(
        self,
        name: str,
        func: CommandFunc,
        help_func: HelpFunc | None,
        description: str,
    ) -> Command:
        """Register a command in front of the existing ones."""
        command = Command(
            strncpy(name, NAME_LIMIT),
            func,
            help_func,
            strncpy(description, DESCRIPTION_LIMIT),
        )
        self._commands.insert(0, command)
        return command

    def find(self, name: str) -> Command | None:
        """Return the first command with this name, or ``None``."""
        return next((c for c in self._commands if strcmp(name, c.name) == 0), None)

    def list_commands(self, argv: list[str]) -> int:
        """Print every registered command with its description."""
        self.console.printf(0x7, "list all registered commands:\n")
        self.console.printf(0x7, "command name: description\n")
        for command in self._commands:
            self.console.printf(0x7, "% 12s: %s\n", command.name, command.description)
        return 0

    def _help_usage(self) -> None:
        self.console.printf(0x7, "USAGE: help [cmd]\n\n")

    def help(self, argv: list[str]) -> int:
        """Show the usage of one command, or list them all."""
        self._help_usage()
        if len(argv) == 1:
            return self.list_commands(argv)
        if len(argv) > 2:
            return 1
        command = self.find(argv[1])
        if command is not None:
            if command.help_func is not None:
                command.help_func()
            else:
                self.console.printf(0x7, "%s\n", command.description)
        return 0

    def read_command_line(self, limit: int = CMDLINE_LIMIT) -> str:
        """Read and echo characters until CR, which becomes a trailing newline."""
        chars: list[str] = []
        while len(chars) < limit:
            c = self.uart.get_char()
            if c == "\r":
                self.uart.put_char("\r")
                self.uart.put_char("\n")
                return "".join(chars) + "\n"
            self.uart.put_char(c)
            chars.append(c)
        return "".join(chars)

    def execute(self, cmdline: str | bytes) -> int | None:
        """Run one command line; return what the command returned."""
        words, truncated = _split(cmdline, MAX_ARGS)
        if truncated:
            self.console.printf(0x7, "cmdline is tooooo long\n")
        if not words:
            return None
        command = self.find(words[0])
        if command is None:
            self.console.printf(0x7, "UNKOWN command: %s\n", words[0])
            return None
        return command.func(words)

    def run(self) -> None:
        """Prompt, read and execute lines until the input runs out."""
        while True:
            self.console.printf(0x3, "%s", self.prompt)
            try:
                line = self.read_command_line(CMDLINE_LIMIT)
            except EOFError:
                return
            self.console.printf(0x7, "%s", line)
            self.execute(line)