from dataclasses import dataclass, field
from threading import Lock
from typing import Callable, List, Optional

from pipesh.shell.grammar.literals import LINEBREAK

Echo = Callable[[str], None]


class Sink:
    """A write-only text channel.

    Everything written is accumulated. If `echo` is given, each write is also
    forwarded to it, e.g. to show the output of the last stage on the terminal.
    """

    def __init__(self, echo: Optional[Echo] = None):
        self.echo = echo
        self.chunks: List[str] = []
        self._lock = Lock()

    def write(self, text: str):
        if text is None:
            return

        with self._lock:
            self.chunks.append(text)
            if self.echo is not None:
                self.echo(text)

    def writeline(self, text: str):
        if not text.endswith(LINEBREAK):
            text += LINEBREAK
        self.write(text)

    @property
    def written(self) -> bool:
        return any(self.chunks)

    @property
    def text(self) -> str:
        return ''.join(self.chunks).rstrip('\r\n')

    @property
    def echoed(self) -> bool:
        return self.echo is not None


@dataclass
class Outcome:
    text: str = ''
    ok = True

    # True if the text has already been shown to the user
    shown: bool = field(default=False, compare=False)


@dataclass
class Ok(Outcome):
    pass


@dataclass
class Error(Outcome):
    ok = False


def outcome(out: Sink, err: Sink) -> Outcome:
    """Combine the output of a stage into a single outcome.
    """
    if err.written:
        return Error(err.text, shown=err.echoed)

    return Ok(out.text, shown=out.echoed)
