"""Utils
- colored printing
- command line options that are shared by all entry points
- capturing output in tests
"""
from argparse import ArgumentParser, RawTextHelpFormatter
from contextlib import redirect_stdout
from io import StringIO
from pathlib import Path
from termcolor import colored
from typing import Callable, List, Optional
import argparse
import logging
import os
import re
import select
import sys


# toggled by --no-color
colored_output = True

parse_args: Optional[argparse.Namespace] = None
parser: Optional[ArgumentParser] = None

default_log_level = logging.WARNING


def color(text: str, name: str = None, attrs: List[str] = None) -> str:
    if not colored_output or (name is None and not attrs):
        return text

    return colored(text, name, attrs=attrs)


def bold(text: str) -> str:
    return color(text, attrs=['bold'])


def warn(text: str) -> str:
    return color(text, 'yellow')


def log(*args, file=None, prefix=None, **kwds):
    """Print a diagnostic message to stderr.
    """
    if file is None:
        file = sys.stderr
    if prefix is None:
        prefix = warn('pipesh:')

    if prefix:
        args = (prefix,) + args

    print(*args, file=file, **kwds)


def verbosity() -> int:
    """Return the number of -v flags.
    """
    if parse_args is not None and 'verbose' in parse_args:
        return parse_args.verbose

    flags = [arg for arg in sys.argv[1:] if re.fullmatch('-v+', arg)]
    return sum(len(flag) - 1 for flag in flags)


def set_verbosity(level: int = None):
    if level is None:
        level = verbosity()

    logging.getLogger().setLevel(max(default_log_level - level * 10, logging.DEBUG))


def add_default_args(parser: ArgumentParser):
    parser.add_argument('-v', '--verbose', default=0, action='count',
                        help='Show more log messages. Repeat for more detail, e.g. -vv')
    parser.add_argument('--no-color', action='store_true',
                        help='Disable colored output')

    if python_is_run_in_test_mode():
        # accept the arguments of the test runner
        parser.add_argument('*', nargs='*')


def python_is_run_in_test_mode() -> bool:
    return 'pytest' in sys.modules


class ArgparseWrapper:
    """Collect command line options from multiple places, then parse them once.

    Usage:

    .. code-block:: python

        with ArgparseWrapper(description='...') as parser:
            parser.add_argument('--flag')

        io_util.parse_args.flag
    """

    def __init__(self, *args,
                 conflict_handler='resolve',
                 formatter_class=RawTextHelpFormatter, **kwds):
        global parser
        if parser is None:
            parser = ArgumentParser(*args,
                                    conflict_handler=conflict_handler,
                                    formatter_class=formatter_class, **kwds)
            add_default_args(parser)

        self.parser = parser

    def __enter__(self) -> ArgumentParser:
        return self.parser

    def __exit__(self, exc_type, exc, traceback):
        if exc is not None:
            # let any error during setup propagate
            return False

        global parse_args, colored_output
        logging.debug(f'sys.argv: {sys.argv}')
        parse_args = self.parser.parse_args()

        if parse_args.no_color:
            colored_output = False

        set_verbosity()


def has_argument(parser: ArgumentParser, arg='arg_name') -> bool:
    return find_argument(parser, arg) is not None


def find_argument(parser: ArgumentParser, arg='arg_name'):
    for action in parser._actions:
        if action.dest == arg:
            return action

    return None


def has_output(stream=sys.stdin, timeout=None) -> bool:
    """Wait until `stream` can be read from.
    Block indefinitely if `timeout` is None.
    The stream can be any object with a `fileno` method.
    """
    rlist, _, _ = select.select([stream], [], [], timeout)
    return rlist != []


def read_file(filename: str) -> str:
    return Path(filename).read_text()


def terminal_size(default=os.terminal_size((80, 24))) -> os.terminal_size:
    try:
        return os.get_terminal_size()
    except OSError:
        return default


def catch_output(arg: str, func: Callable, **func_kwds) -> str:
    """Run func while temporarily redirecting stdout.
    Then return the result from stdout.
    """
    out = StringIO()
    with redirect_stdout(out):
        func(arg, **func_kwds)
        result = out.getvalue()

    return result.rstrip('\n')


set_verbosity()
