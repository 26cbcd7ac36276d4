"""Syntax highlighting of a classified line.
"""
from typing import List, Optional, Tuple

from pipesh.shell.ast import Code, Command, Pipe, Redirect, Stage
from pipesh.shell.grammar.literals import SPACE
from pipesh.shell.grammar.splitter import is_separated, is_whitespace
from pipesh.shell.terminal import Colors

Segment = Tuple[str, Optional[str]]


def segments(stages: List[Stage]) -> List[Segment]:
    """Return (text, color) pairs that together form the line.
    The separating spaces are inserted the same way as `join_parts` does.
    """
    result = []
    prev = None
    for stage in stages:
        for i, part in enumerate(stage.parts()):
            if prev is not None and is_separated(prev) and is_separated(part):
                result.append((SPACE, None))

            result.append((part, part_color(stage, i, part)))
            prev = part

    return result


def part_color(stage: Stage, index: int, part: str) -> Optional[str]:
    if isinstance(stage, Command):
        if index == 0:
            return Colors.command
        if is_whitespace(part):
            return None
        return Colors.argument

    if isinstance(stage, Code):
        return Colors.code

    if isinstance(stage, Pipe):
        return Colors.pipe

    if isinstance(stage, Redirect):
        if index == 0:
            return Colors.pipe
        if is_whitespace(part):
            return None
        return Colors.argument

    return None


def text(items: List[Segment]) -> str:
    return ''.join(part for part, _ in items)
