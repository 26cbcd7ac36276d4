"""
Stage
-----

.. code-block:: bash

    # Classes
    Stage
    ├── Command     # echo a b
    ├── Code        # (lambda s: s.upper())
    ├── Pipe        # |>
    ├── Redirect    # >> out.txt
    ├── Whitespace
    └── Linebreak

Each stage receives the output of the previous stage as `payload` and writes
its own output to the sinks `out` and `err`.
"""
from dataclasses import dataclass, field
from typing import List
import logging

from pipesh.shell.errors import ShellSyntaxError
from pipesh.shell.grammar.literals import LINEBREAK, LPAREN, PIPE, REDIRECT, REDIRECT_APPEND, RPAREN, SPACE
from pipesh.shell.grammar.splitter import is_linebreak, is_whitespace, unquote
from pipesh.shell.sink import Sink


class Stage:
    is_presentational = False

    def parts(self) -> List[str]:
        raise NotImplementedError()

    def run(self, payload: str, out: Sink, err: Sink, pipeline):
        """Forward the payload by default.
        """
        out.write(payload)


@dataclass
class Command(Stage):
    """A builtin or an external program.
    """
    name: str
    args: List[str] = field(default_factory=list)

    def parts(self):
        return [self.name] + self.args

    @property
    def arguments(self) -> List[str]:
        """The unquoted arguments.
        Runs of spaces are kept as space tokens, except for the space that follows the name.
        """
        args = [arg if is_whitespace(arg) else unquote(arg)
                for arg in self.args if not is_linebreak(arg)]
        if args and is_whitespace(args[0]):
            args[0] = args[0][1:]
        return args

    def run(self, payload: str, out: Sink, err: Sink, pipeline):
        name = unquote(self.name)
        args = self.arguments
        if payload:
            args.append(payload)

        if name in pipeline.builtins:
            logging.debug(f'Builtin: {name} {args}')
            pipeline.builtins.invoke(name, args, out, err)
            return

        logging.debug(f'Launch: {name} {args}')
        pipeline.launcher.launch(name, args, out, err,
                                 cwd=pipeline.session.cwd)


@dataclass
class Code(Stage):
    """A block of code, wrapped in brackets.
    """
    source: str

    def parts(self):
        return [self.source]

    @property
    def body(self) -> str:
        """The source without the outer brackets.
        """
        body = self.source
        if body.startswith(LPAREN):
            body = body[1:]
        if len(self.source) > 1 and self.source.endswith(RPAREN):
            body = body[:-1]
        return body

    @property
    def is_multiline(self) -> bool:
        return LINEBREAK in self.source

    def run(self, payload: str, out: Sink, err: Sink, pipeline):
        evaluator = pipeline.evaluator

        if payload:
            piped = payload.splitlines() if LINEBREAK in payload else payload
            value, errors = evaluator.evaluate_expression(self.body, piped)
        else:
            value, errors = evaluator.evaluate_statement(self.body)

        for line in errors:
            err.writeline(line)

        if value:
            out.write(value)


@dataclass
class Pipe(Stage):
    def parts(self):
        return [PIPE]


@dataclass
class Redirect(Stage):
    """Write the payload to a file.
    """
    path: str = ''
    append: bool = False
    # spaces between the marker and the path
    gap: int = 0

    @property
    def marker(self) -> str:
        return REDIRECT_APPEND if self.append else REDIRECT

    def parts(self):
        parts = [self.marker]
        if self.gap:
            parts.append(SPACE * self.gap)
        if self.path:
            parts.append(self.path)
        return parts

    def run(self, payload: str, out: Sink, err: Sink, pipeline):
        if not self.path.strip():
            raise ShellSyntaxError(f'Expected a file path after {self.marker}')

        path = pipeline.session.resolve(unquote(self.path))
        mode = 'a' if self.append else 'w'

        logging.info(f'Write to {path} ({mode})')
        try:
            with open(path, mode) as f:
                f.write(payload)
        except OSError as e:
            err.writeline(f'Error writing to {self.path}: {e.strerror}')


@dataclass
class Whitespace(Stage):
    length: int = 1
    is_presentational = True

    def parts(self):
        return [SPACE * self.length]


@dataclass
class Linebreak(Stage):
    is_presentational = True

    def parts(self):
        return [LINEBREAK]
