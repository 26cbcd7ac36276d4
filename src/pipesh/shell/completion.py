"""Tab completion of command names and paths.
"""
from typing import Iterable, List, Tuple
import logging

from pipesh.shell.grammar.literals import ESCAPE, LINEBREAK, LPAREN, QUOTE, SPACE
from pipesh.shell.grammar.splitter import split, unquote
from pipesh.shell.session import Session

SEP = '/'


class Completer:
    def __init__(self, session: Session, names: Iterable[str] = ()):
        self.session = session
        self.names = names

    def candidates(self, prefix: str) -> List[str]:
        """Return the builtin names and filesystem entries that start with `prefix`.
        Matching is case-insensitive. Directories end with a slash.
        """
        results = []
        if SEP not in prefix:
            results += [name for name in self.names if matches(name, prefix)]

        name = prefix.rsplit(SEP, 1)[-1]
        head = prefix[:len(prefix) - len(name)]
        directory = self.session.resolve(head or '.')

        try:
            entries = sorted(directory.iterdir()) if directory.is_dir() else []
        except OSError as e:
            logging.debug(f'Cannot list {directory}: {e}')
            entries = []

        for entry in entries:
            if entry.name.startswith('.') and not name.startswith('.'):
                continue

            if matches(entry.name, name):
                suffix = SEP if entry.is_dir() else ''
                results.append(head + entry.name + suffix)

        logging.debug(f'Completions of {prefix}: {results}')
        return results


def matches(candidate: str, prefix: str) -> bool:
    return candidate.lower().startswith(prefix.lower())


def common_prefix(items: List[str]) -> str:
    """Return the longest prefix that all items share.
    """
    if not items:
        return ''

    shortest = min(len(item) for item in items)
    for i in range(shortest):
        c = items[0][i]
        if any(item[i] != c for item in items[1:]):
            return items[0][:i]

    return items[0][:shortest]


def complete(text: str, candidates: List[str]) -> str:
    if not candidates:
        return text

    if len(candidates) == 1:
        return candidates[0]

    prefix = common_prefix(candidates)
    if len(prefix) < len(text):
        return text

    return prefix


def current_part(text: str) -> str:
    """Return the lexical part that ends at the end of `text`.
    """
    if not text or text.endswith(LINEBREAK):
        return ''

    if text.endswith(SPACE) and not text.endswith(ESCAPE + SPACE):
        return ''

    parts = split(text)
    return parts[-1] if parts else ''


def complete_buffer(buffer: str, cursor: int, completer: Completer) -> Tuple[str, int]:
    """Complete the part in front of the cursor.
    Return the new buffer and cursor.
    """
    before = buffer[:cursor]
    prefix = current_part(before)
    if prefix.startswith(LPAREN):
        return buffer, cursor

    text = unquote(prefix)
    if prefix.startswith(QUOTE) and not prefix.endswith(QUOTE):
        text = prefix[1:]

    completed = complete(text, completer.candidates(text))
    if completed == text:
        return buffer, cursor

    if prefix.startswith(QUOTE):
        part = QUOTE + completed
    else:
        part = completed.replace(SPACE, ESCAPE + SPACE)

    start = cursor - len(prefix)
    return buffer[:start] + part + buffer[cursor:], start + len(part)
