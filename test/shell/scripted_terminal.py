from collections import deque
from typing import List

from pipesh.shell.terminal import Key, Terminal

ENTER = Key('enter')
NEWLINE = Key('enter', modified=True)
TAB = Key('tab')
BACKSPACE = Key('backspace')
DELETE = Key('delete')
LEFT = Key('left')
RIGHT = Key('right')
UP = Key('up')
DOWN = Key('down')
HOME = Key('home')
END = Key('end')


def typed(text: str) -> List[Key]:
    return [Key('char', c) for c in text]


class ScriptedTerminal(Terminal):
    """Replay a list of keys and record everything that is written.
    """

    def __init__(self, keys=(), width=80):
        super().__init__()
        self.keys = deque(keys)
        self.written: List[str] = []
        self.columns = width

    @property
    def width(self) -> int:
        return self.columns

    @property
    def text(self) -> str:
        return ''.join(self.written)

    def read_key(self) -> Key:
        return self.keys.popleft()

    def colorize(self, text, color_name):
        return text

    def _write(self, data: str):
        self.written.append(data)
