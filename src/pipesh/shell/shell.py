from argparse import ArgumentParser
from pathlib import Path
from typing import List, Tuple
import logging
import sys

from pipesh import io_util
from pipesh.io_util import ArgparseWrapper, bold, has_argument, log, read_file
from pipesh.shell.builtins import Builtins
from pipesh.shell.completion import Completer
from pipesh.shell.editor import LineEditor
from pipesh.shell.errors import ShellError
from pipesh.shell.evaluator import Evaluator, PythonEvaluator
from pipesh.shell.grammar.literals import CODE_SPACES, LINEBREAK
from pipesh.shell.grammar.splitter import is_complete
from pipesh.shell.launcher import ProcessLauncher
from pipesh.shell.pipeline import PipelineExecutor
from pipesh.shell.session import Session
from pipesh.shell.sink import Outcome
from pipesh.shell.terminal import Colors, StreamTerminal, Terminal, VtTerminal

default_prompt_name = 'pipesh'
code_spaces = CODE_SPACES

description = 'If no positional arguments are given then an interactive shell is started.'
epilog = f"""
--------------------------------------------------------------------------------
{bold('Pipelines')}
Pass the output of a command to the next stage with `|>`.
Write the output to a file with `>>` (overwrite) or `>` (append).
E.g.
    pipesh 'ls |> (len)'
    pipesh 'echo hello |> (lambda s: s.upper()) >> out.txt'

{bold('Code')}
Python code is wrapped in brackets.
Without input it is evaluated as a statement:
    (x = 10)
    (x * 2)

With input it should be a function, which is applied to the input.
Multi-line input is passed as a list of lines.
Use `(*)` to evaluate the input itself:
    echo 1 + 2 |> (*)
"""


class Shell:
    """An interactive shell that runs pipelines of commands and code.

    Each line is run by a PipelineExecutor, after which it is added to the history.
    """

    intro = 'Press ctrl-d to exit, ctrl-c to cancel, ? for help.'

    def __init__(self, session: Session = None, terminal: Terminal = None,
                 evaluator: Evaluator = None, launcher: ProcessLauncher = None):
        self.session = session if session is not None else Session()
        self.terminal = terminal if terminal is not None else StreamTerminal()
        self.evaluator = evaluator if evaluator is not None else PythonEvaluator()
        self.launcher = launcher if launcher is not None else ProcessLauncher()
        self.builtins = Builtins(self.session)

        self.pipeline = PipelineExecutor(self.session, self.builtins, self.launcher,
                                         self.evaluator, self.terminal)

        completer = Completer(self.session, self.builtins.names())
        self.editor = LineEditor(self.terminal, completer, code_spaces)

    @property
    def prompt(self) -> str:
        return f'{default_prompt_name} {display_path(self.session.cwd)}> '

    @property
    def history(self) -> List[str]:
        return self.session.history

    def onecmd(self, line: str) -> Outcome:
        """Run a single line.
        The line is added to the history, regardless of the outcome.
        """
        try:
            return self.pipeline.execute(line)
        finally:
            self.session.history.append(line)

    def readline(self) -> str:
        self.terminal.write(self.prompt, Colors.prompt)
        self.terminal.flush()
        return self.editor.read(self.session.history)

    def cmdloop(self):
        if self.intro:
            self.terminal.writeline(self.intro)

        while True:
            try:
                line = self.readline()
            except KeyboardInterrupt:
                logging.debug('Cancelled line')
                continue
            except EOFError:
                logging.debug('Aborting: received EOF')
                break

            if is_exit(line):
                break

            self.onecmd(line)


def is_exit(line: str) -> bool:
    return line.strip() == 'exit'


def display_path(path: Path) -> str:
    home = Path.home()
    if path == home:
        return '~'

    if home in path.parents:
        return '~/' + str(path.relative_to(home))

    return str(path)


def logical_lines(text: str) -> List[str]:
    """Split text into lines.
    Lines that end inside quotes or brackets are joined with the next line.
    """
    lines = []
    current = None
    for line in text.splitlines():
        current = line if current is None else current + LINEBREAK + line
        if is_complete(current):
            lines.append(current)
            current = None

    if current is not None:
        lines.append(current)

    return lines


def run_command(command: str, shell: Shell = None) -> List[Outcome]:
    """Run a newline-separated string of commands.
    Stop at the first `exit`.
    """
    if shell is None:
        shell = Shell()

    outcomes = []
    for line in logical_lines(command):
        if not line.strip():
            continue

        if is_exit(line):
            break

        outcomes.append(shell.onecmd(line))

    return outcomes


def run_commands_from_file(filename: str, shell: Shell) -> List[Outcome]:
    try:
        command = read_file(filename)
    except OSError as e:
        raise ShellError(f'Cannot read {filename}: {e.strerror}') from e

    return run_command(command, shell)


def run_interactively(shell: Shell):
    while True:
        try:
            shell.cmdloop()
            break
        except KeyboardInterrupt:
            shell.terminal.newline()
            shell.terminal.writeline('KeyboardInterrupt')
            shell.intro = ''


def run(shell: Shell, commands: str, filename: str = None, repl=True) -> List[Outcome]:
    outcomes = []
    if commands or filename is not None:
        # compile mode
        if filename is not None:
            outcomes += run_commands_from_file(filename, shell)

        if commands:
            outcomes += run_command(commands, shell)

    elif repl:
        run_interactively(shell)

    return outcomes


def add_cli_args(parser: ArgumentParser):
    if not has_argument(parser, 'cmd'):
        parser.add_argument('cmd', nargs='*',
                            help='A command to run, e.g. `ls |> (len)`')
    if not has_argument(parser, 'file'):
        parser.add_argument('-f', '--file',
                            help='Read and run FILE as a list of commands')


def set_cli_args():
    with ArgparseWrapper(description=description, epilog=epilog) as parser:
        add_cli_args(parser)


def read_stdin() -> str:
    if sys.stdin.isatty():
        return ''

    try:
        return sys.stdin.read()

    except KeyboardInterrupt as e:
        print()
        logging.debug(e)
        sys.exit(130)


def setup(shell: Shell = None) -> Tuple[Shell, str, str]:
    """Setup an instance of Shell with any given cli options.
    """
    set_cli_args()
    logging.info(f'args: {io_util.parse_args}')

    args = ' '.join(io_util.parse_args.cmd)
    commands = LINEBREAK.join(text for text in (args, read_stdin()) if text)
    filename = io_util.parse_args.file

    if shell is None:
        interactive = not commands and filename is None and sys.stdin.isatty()
        shell = Shell(terminal=VtTerminal() if interactive else None)

    return shell, commands, filename


def main(shell: Shell = None, repl=True) -> Shell:
    shell, commands, filename = setup(shell)

    try:
        outcomes = run(shell, commands, filename, repl)
    except ShellError as e:
        log(e, prefix='')
        sys.exit(1)

    if outcomes and not outcomes[-1].ok:
        sys.exit(1)

    return shell


if __name__ == '__main__':
    main()
