"""A line editor with live syntax highlighting.

The whole buffer is split, classified and redrawn after every key press,
such that the highlighting always matches the structure of the line.

.. code-block:: sh

    pipesh ~> echo hello |> (lambda s:
                                 s.upper())

Lines of a multi-line buffer are aligned with the column where reading started.
"""
from dataclasses import dataclass
from typing import List
import logging

from pipesh.shell.ast import Code
from pipesh.shell.completion import Completer, complete_buffer
from pipesh.shell.grammar.classifier import parse
from pipesh.shell.grammar.literals import CODE_SPACES, LINEBREAK, SPACE
from pipesh.shell.render import segments, text
from pipesh.shell.terminal import Key, Terminal

# the number of columns that are kept free at the end of each line
MARGIN = 2


@dataclass
class EditorState:
    buffer: str = ''
    cursor: int = 0

    # 0 is the newest history entry, -1 means that no entry is shown
    history_index: int = -1

    @property
    def line_start(self) -> int:
        return self.buffer.rfind(LINEBREAK, 0, self.cursor) + 1

    @property
    def line_end(self) -> int:
        end = self.buffer.find(LINEBREAK, self.cursor)
        return len(self.buffer) if end == -1 else end

    @property
    def row(self) -> int:
        return self.buffer.count(LINEBREAK, 0, self.cursor)

    @property
    def column(self) -> int:
        return self.cursor - self.line_start

    def insert(self, text: str):
        self.buffer = self.buffer[:self.cursor] + text + self.buffer[self.cursor:]
        self.cursor += len(text)

    def delete(self, start: int, end: int):
        self.buffer = self.buffer[:start] + self.buffer[end:]
        self.cursor = start

    def replace(self, buffer: str):
        self.buffer = buffer
        self.cursor = len(buffer)


class LineEditor:
    def __init__(self, terminal: Terminal, completer: Completer, code_spaces=CODE_SPACES):
        self.terminal = terminal
        self.completer = completer
        self.code_spaces = code_spaces
        self.origin = terminal.cursor

    def read(self, history: List[str] = None) -> str:
        """Read a single line of input.

        Raises KeyboardInterrupt on ctrl-c and EOFError on ctrl-d.
        """
        if history is None:
            history = []

        state = EditorState()
        self.origin = self.terminal.cursor

        try:
            with self.terminal.raw():
                self.render(state)
                while not self.handle(state, self.terminal.read_key(), history):
                    self.render(state)

        finally:
            state.cursor = len(state.buffer)
            self.move_to_cursor(state)
            self.terminal.newline()
            self.terminal.flush()

        logging.debug(f'Read: {state.buffer!r}')
        return state.buffer

    def handle(self, state: EditorState, key: Key, history: List[str]) -> bool:
        """Apply a key press to `state`.
        Return True if the line is complete.
        """
        if key.name == 'enter':
            if not key.modified:
                return True

            state.insert(LINEBREAK)

        elif key.name == 'backspace':
            if state.cursor > state.line_start:
                state.delete(state.cursor - 1, state.cursor)

        elif key.name == 'delete':
            if state.cursor < state.line_end:
                state.delete(state.cursor, state.cursor + 1)

        elif key.name == 'left':
            if state.cursor > state.line_start:
                state.cursor -= 1

        elif key.name == 'right':
            if state.cursor < state.line_end:
                state.cursor += 1

        elif key.name == 'home':
            state.cursor = state.line_start

        elif key.name == 'end':
            state.cursor = state.line_end

        elif key.name == 'up':
            if state.history_index + 1 < len(history):
                state.history_index += 1
                state.replace(history[-1 - state.history_index])

        elif key.name == 'down':
            if state.history_index > 0:
                state.history_index -= 1
                state.replace(history[-1 - state.history_index])

            elif state.history_index == 0:
                state.history_index = -1
                state.replace('')

        elif key.name == 'tab':
            if state.buffer:
                self.tab(state)

        elif key.name == 'char':
            if self.fits(state, key.char):
                state.insert(key.char)

        elif key.name == 'paste':
            state.insert(key.char.replace('\r\n', LINEBREAK).replace('\r', LINEBREAK))

        elif key.name == 'interrupt':
            raise KeyboardInterrupt()

        elif key.name == 'eof':
            if not state.buffer:
                raise EOFError()

        return False

    def tab(self, state: EditorState):
        if self.in_multiline_code(state):
            spaces = SPACE * self.code_spaces
            if self.fits(state, spaces):
                state.insert(spaces)
            return

        buffer, cursor = complete_buffer(state.buffer, state.cursor, self.completer)
        added = len(buffer) - len(state.buffer)
        if added and not self.fits(state, SPACE * added):
            return

        state.buffer = buffer
        state.cursor = cursor

    def in_multiline_code(self, state: EditorState) -> bool:
        stages = parse(state.buffer[:state.cursor])
        return bool(stages) and isinstance(stages[-1], Code) and stages[-1].is_multiline

    def fits(self, state: EditorState, text: str) -> bool:
        """Return True if `text` can be inserted without overflowing the current line.
        """
        length = state.line_end - state.line_start + len(text)
        return self.origin[1] + length < self.terminal.width - MARGIN

    ############################################################################
    # Output
    ############################################################################

    def render(self, state: EditorState):
        terminal = self.terminal
        terminal.hide_cursor()
        terminal.move_to(*self.origin)

        items = segments(parse(state.buffer))
        rendered = text(items)
        if rendered != state.buffer:
            if state.buffer.startswith(rendered):
                items.append((state.buffer[len(rendered):], None))
            else:
                items = [(state.buffer, None)]

        for part, color_name in items:
            for i, line in enumerate(part.split(LINEBREAK)):
                if i:
                    self.next_line()
                terminal.write(line, color_name)

        terminal.clear_below()
        self.move_to_cursor(state)
        terminal.show_cursor()
        terminal.flush()

    def next_line(self):
        self.terminal.clear_line()
        self.terminal.newline()
        self.terminal.move_to(self.terminal.row, self.origin[1])

    def move_to_cursor(self, state: EditorState):
        row, column = self.origin
        self.terminal.move_to(row + state.row, column + state.column)
