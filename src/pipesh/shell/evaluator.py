"""Evaluate embedded code blocks.

Code blocks are Python source wrapped in brackets. Without piped input the
source is run as a statement:

.. code-block:: sh

    (x = 10)
    (x * 2)

With piped input the source must evaluate to a callable, which is applied
to the payload. Multi-line payloads are passed as a list of lines:

.. code-block:: sh

    echo hello |> (lambda s: s.upper())
    ls |> (len)
    echo 1 + 2 |> (*)
"""
from contextlib import redirect_stdout
from io import StringIO
from typing import Any, Dict, List, Optional, Tuple, Union
import logging
import traceback

from pipesh.shell.grammar.literals import EVAL_PAYLOAD, LINEBREAK

Piped = Union[str, List[str]]
Result = Tuple[Optional[str], List[str]]


class Evaluator:
    """Interface for code-evaluation services.
    Both methods return a value (or None) and a list of error lines.
    """

    def evaluate_statement(self, source: str) -> Result:
        raise NotImplementedError()

    def evaluate_expression(self, source: str, piped: Piped) -> Result:
        raise NotImplementedError()


class PythonEvaluator(Evaluator):
    def __init__(self, namespace: Dict[str, Any] = None):
        if namespace is None:
            namespace = {'__name__': '__pipesh__'}

        self.namespace = namespace

    def evaluate_statement(self, source: str) -> Result:
        source = source.strip()
        logging.debug(f'Evaluate statement: {source}')

        try:
            code = compile(source, '<pipesh>', 'eval')
            mode = 'eval'
        except SyntaxError:
            mode = 'exec'

        if mode == 'eval':
            return self._run(lambda: eval(code, self.namespace))

        return self._run(lambda: exec(source, self.namespace))

    def evaluate_expression(self, source: str, piped: Piped) -> Result:
        if source.strip() == EVAL_PAYLOAD:
            if isinstance(piped, list):
                piped = LINEBREAK.join(piped)
            return self.evaluate_statement(piped)

        logging.debug(f'Evaluate expression: {source}')
        return self._run(lambda: self._apply(source, piped))

    def _apply(self, source: str, piped: Piped):
        func = eval(source.strip(), self.namespace)
        if not callable(func):
            raise TypeError(
                f'Expected a function to receive the piped input, but got: {type(func).__name__}')

        return func(piped)

    def _run(self, func) -> Result:
        """Run `func` while capturing stdout.
        """
        out = StringIO()
        try:
            with redirect_stdout(out):
                value = func()
        except (Exception, SystemExit) as e:
            # exit() inside a code block ends the block, not the shell
            logging.debug(f'Evaluation failed: {e}')
            return None, [line.rstrip(LINEBREAK) for line in traceback.format_exception_only(type(e), e)]

        printed = out.getvalue()
        value = format_value(value)
        if printed:
            value = printed + value

        return value or None, []


def format_value(value: Any) -> str:
    if value is None:
        return ''

    if isinstance(value, str):
        return value

    if isinstance(value, (list, tuple, set)) and all(isinstance(v, str) for v in value):
        return LINEBREAK.join(value)

    return str(value)
