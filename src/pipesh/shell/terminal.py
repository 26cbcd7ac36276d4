"""Terminal I/O.

`Terminal` keeps track of the cursor position relative to where it started,
such that output can be redrawn without querying the terminal.
Two implementations are provided:

- `VtTerminal` reads raw key presses and moves the cursor using escape codes.
- `StreamTerminal` writes to stdout and stderr, for non-interactive use.
"""
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Deque, Optional, TextIO, Tuple
import sys

from prompt_toolkit.input import create_input
from prompt_toolkit.key_binding.key_processor import KeyPress
from prompt_toolkit.keys import Keys
from prompt_toolkit.output import create_output

from pipesh.io_util import color, has_output, terminal_size
from pipesh.shell.grammar.literals import LINEBREAK


class Colors:
    prompt = 'magenta'
    good_output = 'green'
    error_output = 'red'
    command = 'yellow'
    argument = 'white'
    code = 'cyan'
    pipe = 'green'


@dataclass
class Key:
    """A key press.

    Names: enter, backspace, delete, left, right, up, down, home, end, tab,
    char, paste, interrupt, eof and other.
    """
    name: str
    char: str = ''
    modified: bool = False


class Terminal:
    def __init__(self):
        self.row = 0
        self.column = 0
        self._lock = RLock()

    @property
    def cursor(self) -> Tuple[int, int]:
        return self.row, self.column

    @property
    def width(self) -> int:
        return terminal_size().columns

    def read_key(self) -> Key:
        raise NotImplementedError()

    @contextmanager
    def raw(self):
        yield

    def write(self, text: str, color_name: Optional[str] = None):
        text = text.replace('\r\n', LINEBREAK)
        with self._lock:
            for i, line in enumerate(text.split(LINEBREAK)):
                if i:
                    self.newline()
                if line:
                    self._write(self.colorize(line, color_name))
                    self.column += len(line)

    def write_error(self, text: str):
        self.write(text, Colors.error_output)

    def writeline(self, text: str, color_name: Optional[str] = None):
        self.write(text, color_name)
        self.newline()

    def newline(self):
        with self._lock:
            self._write('\r\n')
            self.row += 1
            self.column = 0

    def move_to(self, row: int, column: int):
        with self._lock:
            self._move(row - self.row, column - self.column)
            self.row = row
            self.column = column

    def colorize(self, text: str, color_name: Optional[str]) -> str:
        return color(text, color_name)

    def hide_cursor(self):
        pass

    def show_cursor(self):
        pass

    def clear_line(self):
        """Erase the rest of the current line.
        """
        pass

    def clear_below(self):
        """Erase everything after the cursor.
        """
        pass

    def flush(self):
        pass

    def _write(self, data: str):
        raise NotImplementedError()

    def _move(self, rows: int, columns: int):
        pass


class StreamTerminal(Terminal):
    """Write to stdout and stderr.
    The streams are looked up on each write, such that they can be redirected.
    """

    def read_key(self) -> Key:
        # keys cannot be read from a stream
        raise EOFError()

    def _write(self, data: str):
        self.stream.write(data)

    @property
    def stream(self) -> TextIO:
        return sys.stdout

    def newline(self):
        with self._lock:
            self._write(LINEBREAK)
            self.row += 1
            self.column = 0

    def write_error(self, text: str):
        with self._lock:
            self.flush()
            text = self.colorize(text, Colors.error_output) if sys.stderr.isatty() else text
            sys.stderr.write(text)
            sys.stderr.flush()

    def colorize(self, text: str, color_name: Optional[str]) -> str:
        if not self.stream.isatty():
            return text
        return super().colorize(text, color_name)

    def flush(self):
        self.stream.flush()


class VtTerminal(Terminal):
    """An interactive VT100 terminal.
    """

    names = {Keys.ControlM: 'enter',
             Keys.ControlH: 'backspace',
             Keys.Delete: 'delete',
             Keys.Left: 'left',
             Keys.Right: 'right',
             Keys.Up: 'up',
             Keys.Down: 'down',
             Keys.Home: 'home',
             Keys.End: 'end',
             Keys.ControlA: 'home',
             Keys.ControlE: 'end',
             Keys.ControlI: 'tab',
             Keys.ControlC: 'interrupt',
             Keys.ControlD: 'eof'}

    # seconds to wait for the remainder of an escape sequence
    escape_timeout = 0.05

    def __init__(self, input=None, output=None):
        super().__init__()
        self.input = input if input is not None else create_input()
        self.output = output if output is not None else create_output()
        self.pending: Deque[KeyPress] = deque()

    @property
    def width(self) -> int:
        return self.output.get_size().columns

    @contextmanager
    def raw(self):
        """Read raw keys, with pasted text received as a single key.
        """
        with self.input.raw_mode():
            self.output.enable_bracketed_paste()
            self.flush()
            try:
                yield
            finally:
                self.output.disable_bracketed_paste()
                self.flush()

    def read_key(self) -> Key:
        while not self.pending:
            has_output(self.input)
            self.pending.extend(self.input.read_keys())

            if not self.pending and not has_output(self.input, self.escape_timeout):
                # a lone escape is kept by the parser until it is flushed
                self.pending.extend(self.input.flush_keys())

        press = self.pending.popleft()

        # alt-enter is received as escape followed by enter
        if press.key == Keys.Escape and self.pending \
                and self.pending[0].key in (Keys.ControlM, Keys.ControlJ):
            self.pending.popleft()
            return Key('enter', modified=True)

        return self.translate(press)

    def translate(self, press: KeyPress) -> Key:
        if press.key == Keys.ControlJ:
            return Key('enter', modified=True)

        if press.key == Keys.BracketedPaste:
            return Key('paste', press.data)

        if press.key in self.names:
            return Key(self.names[press.key])

        if not isinstance(press.key, Keys) and press.key.isprintable():
            return Key('char', press.key)

        return Key('other', press.data)

    def hide_cursor(self):
        self.output.hide_cursor()

    def show_cursor(self):
        self.output.show_cursor()

    def clear_line(self):
        self.output.erase_end_of_line()

    def clear_below(self):
        self.output.erase_down()

    def flush(self):
        self.output.flush()

    def _write(self, data: str):
        self.output.write_raw(data)

    def _move(self, rows: int, columns: int):
        if rows < 0:
            self.output.cursor_up(-rows)
        elif rows > 0:
            self.output.cursor_down(rows)

        if columns < 0:
            self.output.cursor_backward(-columns)
        elif columns > 0:
            self.output.cursor_forward(columns)
