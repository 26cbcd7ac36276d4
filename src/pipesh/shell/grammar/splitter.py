"""Split a raw line into lexical parts.

Parts are separated by unescaped spaces. Quoted text and bracketed code are
kept together, including the wrapping characters. E.g.

.. code-block:: sh

    echo "a b" |> (lambda s: s.upper())

is split into `echo`, `"a b"`, `|>` and `(lambda s: s.upper())`.

The splitter never fails: unterminated quotes or brackets are returned as
typed, such that a partially written line can always be rendered.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from pipesh.shell.grammar.literals import ESCAPE, LINEBREAK, LPAREN, QUOTE, RPAREN, SPACE

# placeholder for a single unwrapped space
BLANK = ''


@dataclass
class Scan:
    parts: List[str] = field(default_factory=list)
    current: str = ''
    wrap: Optional[str] = None
    depth: int = 0

    # the previous character, used to detect escapes
    last: str = SPACE

    def emit(self, part: str):
        self.parts.append(part)
        self.current = ''
        self.wrap = None
        self.depth = 0

    def flush(self):
        if self.current:
            self.emit(self.current)

    def finish(self) -> List[str]:
        if self.wrap is not None:
            # keep the opening character to stay faithful to the user input
            self.parts.append(self.wrap + self.current)
        elif self.current:
            self.parts.append(self.current)

        return self.parts


def scan_chars(raw: str) -> Scan:
    scan = Scan()

    for c in raw:
        escaped = scan.last == ESCAPE

        if scan.wrap is None:
            if c == LPAREN and not scan.current:
                scan.wrap = LPAREN
                scan.depth = 1
                continue

            if c == QUOTE and not scan.current:
                scan.wrap = QUOTE
                continue

            if c == SPACE and not escaped:
                scan.flush()
                scan.parts.append(BLANK)
                continue

            if c == LINEBREAK:
                scan.flush()
                scan.parts.append(LINEBREAK)
                continue

        elif scan.wrap == LPAREN:
            if c == LPAREN:
                scan.depth += 1
                scan.current += c
                continue

            if c == RPAREN and not escaped:
                if scan.depth == 1:
                    scan.emit(f'({scan.current})')
                    continue

                scan.depth -= 1
                scan.current += c
                continue

        elif c == QUOTE and not escaped:
            scan.emit(f'"{scan.current}"')
            continue

        scan.current += c
        scan.last = c

    return scan


def split(raw: str) -> List[str]:
    return join_blanks(scan_chars(raw).finish())


def is_complete(raw: str) -> bool:
    """Return False if `raw` ends inside quotes or brackets.
    """
    return scan_chars(raw).wrap is None


def join_blanks(raw: List[str]) -> List[str]:
    """Merge runs of blanks into whitespace parts.

    A single blank between two parts is the separator itself and is dropped,
    as is a single blank at the end of the line.
    """
    parts = []
    i = 0
    while i < len(raw):
        if raw[i] != BLANK:
            parts.append(raw[i])
            i += 1
            continue

        j = i
        while j < len(raw) and raw[j] == BLANK:
            j += 1

        length = j - i
        before = raw[i - 1] if i > 0 else None
        after = raw[j] if j < len(raw) else None

        if length == 1 and (after is None or (is_separated(before) and is_separated(after))):
            pass
        else:
            parts.append(SPACE * length)

        i = j

    return parts


def join_parts(parts: List[str]) -> str:
    """Reverse the effect of `split`.
    """
    text = ''
    prev = None
    for part in parts:
        if prev is not None and is_separated(prev) and is_separated(part):
            text += SPACE

        text += part
        prev = part

    return text


def is_whitespace(part: str) -> bool:
    return part != '' and part.strip(SPACE) == ''


def is_linebreak(part: str) -> bool:
    return part == LINEBREAK


def is_separated(part: Optional[str]) -> bool:
    """Return True for a part that requires a space to separate it from a neighbouring part.
    """
    return bool(part) and not is_whitespace(part) and not is_linebreak(part)


def unquote(part: str) -> str:
    """Remove the wrapping quotes and escape characters of a part.
    E.g. `"a b"` and `a\\ b` both become `a b`.
    """
    if len(part) >= 2 and part.startswith(QUOTE) and part.endswith(QUOTE):
        part = part[1:-1]

    return part.replace(ESCAPE + SPACE, SPACE).replace(ESCAPE + QUOTE, QUOTE)
