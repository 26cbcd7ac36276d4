"""Group lexical parts into pipeline stages.

E.g. the parts of

.. code-block:: sh

    echo hello world |> (lambda s: s.upper()) >> out.txt

are classified as `[Command, Pipe, Code, Redirect]`.
"""
from typing import List

from pipesh.shell.ast import Code, Command, Linebreak, Pipe, Redirect, Stage, Whitespace
from pipesh.shell.grammar.literals import LPAREN, PIPE, RPAREN, markers, redirects
from pipesh.shell.grammar.splitter import is_linebreak, is_whitespace, split


def classify(parts: List[str]) -> List[Stage]:
    stages = []
    i = 0
    while i < len(parts):
        part = parts[i]
        is_last = i == len(parts) - 1

        if is_linebreak(part):
            stages.append(Linebreak())
            i += 1

        elif is_whitespace(part):
            stages.append(Whitespace(len(part)))
            i += 1

        elif part == PIPE:
            stages.append(Pipe())
            i += 1

        elif part in redirects:
            stage = find_redirect(parts, i)
            stages.append(stage)
            i += len(stage.parts())

        elif part.startswith(LPAREN) and (is_last or part.endswith(RPAREN)):
            stages.append(Code(part))
            i += 1

        else:
            args = find_args(parts, i + 1)
            stages.append(Command(part, args))
            i += 1 + len(args)

    return stages


def find_redirect(parts: List[str], start: int) -> Redirect:
    """Return the redirect that starts at `start`.
    Spaces between the marker and the path are kept in `gap`.
    """
    marker = parts[start]
    i = start + 1
    gap = 0
    if i < len(parts) and is_whitespace(parts[i]):
        gap = len(parts[i])
        i += 1

    path = parts[i] if i < len(parts) else ''
    return Redirect(path, append=redirects[marker], gap=gap)


def find_args(parts: List[str], start: int) -> List[str]:
    """Return the parts from `start` up to the next pipe or redirect.
    """
    args = []
    for part in parts[start:]:
        if part in markers:
            break

        args.append(part)

    return args


def parse(line: str) -> List[Stage]:
    return classify(split(line))


def flatten(stages: List[Stage]) -> List[str]:
    """Convert stages back into parts.
    """
    return [part for stage in stages for part in stage.parts()]
