"""Run a line as a sequence of stages.

The output of each stage is passed as payload to the next stage.
The first stage that produces an error stops the pipeline.

.. code-block:: sh

    echo hello world |> (lambda s: s.upper()) >> result.txt
"""
from typing import List
import logging

from pipesh.shell.ast import Code, Command, Stage
from pipesh.shell.builtins import Builtins
from pipesh.shell.errors import ShellError
from pipesh.shell.evaluator import Evaluator
from pipesh.shell.grammar.classifier import parse
from pipesh.shell.grammar.literals import LINEBREAK
from pipesh.shell.launcher import ProcessLauncher
from pipesh.shell.session import Session
from pipesh.shell.sink import Ok, Outcome, Sink, outcome
from pipesh.shell.terminal import Colors, Terminal


class PipelineExecutor:
    def __init__(self, session: Session, builtins: Builtins, launcher: ProcessLauncher,
                 evaluator: Evaluator, terminal: Terminal):
        self.session = session
        self.builtins = builtins
        self.launcher = launcher
        self.evaluator = evaluator
        self.terminal = terminal

    def execute(self, line: str) -> Outcome:
        stages = [stage for stage in parse(line) if not stage.is_presentational]
        if not stages:
            return Ok()

        return self.run(stages)

    def run(self, stages: List[Stage]) -> Outcome:
        result = Ok()
        for i, stage in enumerate(stages):
            is_last = i == len(stages) - 1
            result = self.run_stage(stage, result.text, echo=is_last)
            if not result.ok:
                logging.debug(f'Stage failed: {stage}')
                break

        self.show(result)
        return result

    def run_stage(self, stage: Stage, payload: str, echo=False) -> Outcome:
        """Run a single stage and collect its output.
        If `echo` is True then the output of commands and code is shown while it is produced.
        """
        if echo and isinstance(stage, (Command, Code)):
            out = Sink(self.echo_output)
            err = Sink(self.echo_error)
        else:
            out = Sink()
            err = Sink()

        logging.debug(f'Run: {stage}')
        try:
            stage.run(payload, out, err, self)
        except ShellError as e:
            err.writeline(str(e))
        except OSError as e:
            err.writeline(e.strerror or str(e))

        return outcome(out, err)

    def echo_output(self, text: str):
        self.terminal.write(text, Colors.good_output)
        self.terminal.flush()

    def echo_error(self, text: str):
        self.terminal.write_error(text)
        self.terminal.flush()

    def show(self, result: Outcome):
        """Print an outcome that has not been shown yet.
        """
        if result.text and not result.shown:
            if result.ok:
                self.terminal.write(result.text, Colors.good_output)
            else:
                self.terminal.write_error(result.text + LINEBREAK)

        if self.terminal.column != 0:
            self.terminal.newline()

        self.terminal.flush()
