"""Display surfaces and input sources for the ray marcher."""

from __future__ import annotations

import os
import select
import shutil
import sys
import termios
import tty
from collections import deque
from typing import Deque, Iterable, List, Optional, Sequence, Tuple

from .color import BACKGROUND
from .engine import Command

TermiosAttr = List[int | List[bytes | int]]

_ESCAPE_COMMANDS = {
    "\x1b[A": Command.UP,
    "\x1b[B": Command.DOWN,
    "\x1b[C": Command.RIGHT,
    "\x1b[D": Command.LEFT,
    "\x1b[5~": Command.FORWARD,  # page up
    "\x1b[6~": Command.BACK,  # page down
}

_KEY_COMMANDS = {
    "u": Command.UP,
    "d": Command.DOWN,
    "l": Command.LEFT,
    "r": Command.RIGHT,
    "f": Command.FORWARD,
    "b": Command.BACK,
    "q": Command.QUIT,
}


class _GlyphBuffer:
    """Fixed-size character grid shared by the display surfaces."""

    def __init__(self, rows: int, cols: int) -> None:
        if rows < 1 or cols < 1:
            raise ValueError("Display surface requires at least one row and column")
        self._rows = rows
        self._cols = cols
        self._cells: List[List[str]] = [[BACKGROUND] * cols for _ in range(rows)]

    def size(self) -> Tuple[int, int]:
        return self._rows, self._cols

    def write_glyph(self, row: int, col: int, char: str) -> None:
        if 0 <= row < self._rows and 0 <= col < self._cols:
            self._cells[row][col] = char

    def write_text(self, row: int, col: int, text: str) -> None:
        for offset, char in enumerate(text):
            self.write_glyph(row, col + offset, char)

    def lines(self) -> List[str]:
        return ["".join(row) for row in self._cells]

    def text(self) -> str:
        return "\n".join(self.lines())


class BufferSurface(_GlyphBuffer):
    """In-memory display surface used for snapshots and tests."""

    def __init__(self, rows: int, cols: int) -> None:
        super().__init__(rows, cols)
        self.refresh_count = 0

    def refresh(self) -> None:
        self.refresh_count += 1


class ScriptedInput:
    """Replays a fixed list of commands, then asks the loop to quit."""

    def __init__(self, commands: Iterable[Command]) -> None:
        self._pending: Deque[Command] = deque(commands)

    @classmethod
    def from_keys(cls, keys: str) -> "ScriptedInput":
        return cls(keys_to_commands(keys))

    def read_command(self) -> Command:
        if not self._pending:
            return Command.QUIT
        return self._pending.popleft()


class TerminalController(_GlyphBuffer):
    """Context manager that prepares the terminal and acts as display and input."""

    def __init__(self, *, clear: bool = True, size: Optional[Tuple[int, int]] = None) -> None:
        rows, cols = size if size is not None else self.terminal_size()
        super().__init__(rows, cols)
        self._clear = clear
        self._cursor_hidden = False
        self._stdin_fd: Optional[int] = None
        self._termios_before: Optional[TermiosAttr] = None
        self._input_enabled = False

    @staticmethod
    def terminal_size() -> Tuple[int, int]:
        size = shutil.get_terminal_size(fallback=(80, 24))
        return size.lines, size.columns

    def __enter__(self) -> "TerminalController":
        if self._clear:
            sys.stdout.write("\033[2J")
        sys.stdout.write("\033[H")
        sys.stdout.write("\033[?25l")
        sys.stdout.flush()
        self._cursor_hidden = True

        if sys.stdin.isatty():
            fd = sys.stdin.fileno()
            self._stdin_fd = fd
            try:
                self._termios_before = termios.tcgetattr(fd)
                tty.setcbreak(fd)
                self._input_enabled = True
            except termios.error:
                self._termios_before = None
                self._stdin_fd = None
                self._input_enabled = False
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def restore(self) -> None:
        if self._cursor_hidden:
            sys.stdout.write("\033[0m")
            sys.stdout.write("\033[?25h")
            sys.stdout.flush()
            self._cursor_hidden = False

        if self._input_enabled and self._stdin_fd is not None and self._termios_before is not None:
            try:
                termios.tcsetattr(self._stdin_fd, termios.TCSADRAIN, self._termios_before)
            except termios.error:
                pass
        self._input_enabled = False
        self._stdin_fd = None
        self._termios_before = None

    def refresh(self) -> None:
        sys.stdout.write("\033[H")
        sys.stdout.write(self.text())
        sys.stdout.flush()

    def read_command(self) -> Command:
        """Block until a key arrives and translate it into a :class:`Command`.

        Without an interactive stdin there is nothing to wait for, so the
        loop is told to quit.
        """

        if not self._input_enabled or self._stdin_fd is None:
            return Command.QUIT

        char = self._read_char(timeout=None)
        if char is None:
            return Command.QUIT
        if char == "\x03":
            raise KeyboardInterrupt
        if char == "\x1b":
            return self._map_escape_sequence(self._read_escape_sequence())
        if char in ("q", "Q"):
            return Command.QUIT
        return Command.NONE

    def _read_char(self, timeout: Optional[float]) -> Optional[str]:
        if self._stdin_fd is None:
            return None
        while True:
            readable, _, _ = select.select([self._stdin_fd], [], [], timeout)
            if not readable:
                return None
            data = os.read(self._stdin_fd, 1)
            if not data:
                return None
            char = data.decode("utf-8", errors="ignore")
            if char:
                return char

    def _read_escape_sequence(self) -> str:
        sequence = "\x1b"
        while True:
            char = self._read_char(timeout=0.05)
            if char is None:
                break
            sequence += char
            if char.isalpha() or char == "~":
                break
        return sequence

    @staticmethod
    def _map_escape_sequence(sequence: str) -> Command:
        if sequence in _ESCAPE_COMMANDS:
            return _ESCAPE_COMMANDS[sequence]
        # Application cursor mode sends ESC O A instead of ESC [ A.
        if sequence.startswith("\x1bO") and len(sequence) == 3:
            return _ESCAPE_COMMANDS.get("\x1b[" + sequence[-1], Command.NONE)
        if sequence.startswith("\x1b[") and sequence[-1] in "ABCD":
            return _ESCAPE_COMMANDS.get("\x1b[" + sequence[-1], Command.NONE)
        return Command.NONE


def parse_size(text: str) -> Tuple[int, int]:
    """Parse ``COLSxROWS`` into ``(rows, cols)``."""

    try:
        cols_text, rows_text = text.lower().split("x", 1)
        cols, rows = int(cols_text), int(rows_text)
    except ValueError as exc:
        raise ValueError(f"Expected size as COLSxROWS, got '{text}'") from exc
    if rows < 1 or cols < 1:
        raise ValueError(f"Size must be positive, got '{text}'")
    return rows, cols


def keys_to_commands(keys: Sequence[str]) -> List[Command]:
    return [_KEY_COMMANDS.get(key.lower(), Command.NONE) for key in keys]
