from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List
import shutil

from pipesh.io_util import bold
from pipesh.shell.errors import ShellError
from pipesh.shell.grammar.literals import LINEBREAK
from pipesh.shell.grammar.splitter import is_whitespace, join_parts
from pipesh.shell.session import Session
from pipesh.shell.sink import Sink

# escape sequence that clears the screen and moves the cursor home
CLEAR_SCREEN = '\x1b[2J\x1b[H'

Function = Callable[[List[str], Sink, Sink], None]


@dataclass
class Builtin:
    name: str
    func: Function
    help: str
    # receive runs of spaces as arguments
    spacing: bool = False


class Builtins:
    """An ordered registry of builtin commands.

    Each command receives a list of arguments and two sinks, one for normal
    output and one for errors. User errors are raised as a ShellError.
    """

    def __init__(self, session: Session):
        self.session = session
        self.registry: Dict[str, Builtin] = {}

        for name, method in [('clear', self.do_clear),
                             ('echo', self.do_echo),
                             ('dir', self.do_dir),
                             ('ls', self.do_dir),
                             ('cd', self.do_cd),
                             ('pwd', self.do_pwd),
                             ('mkdir', self.do_mkdir),
                             ('rmdir', self.do_rmdir),
                             ('cat', self.do_cat),
                             ('cp', self.do_cp),
                             ('mv', self.do_mv),
                             ('rm', self.do_rm),
                             ('del', self.do_rm),
                             ('?', self.do_help),
                             ('help', self.do_help),
                             ('exit', self.do_exit)]:
            self.add(name, method, spacing=name == 'echo')

    def add(self, name: str, func: Function, help: str = None, spacing=False):
        if help is None:
            help = ' '.join((func.__doc__ or '').split())

        self.registry[name] = Builtin(name, func, help, spacing)

    def __contains__(self, name: str) -> bool:
        return name in self.registry

    def __iter__(self):
        return iter(self.registry)

    def names(self) -> List[str]:
        return list(self.registry)

    def invoke(self, name: str, args: List[str], out: Sink, err: Sink):
        if name not in self.registry:
            raise ShellError(f'Unknown builtin: {name}')

        builtin = self.registry[name]
        if not builtin.spacing:
            args = [arg for arg in args if not is_whitespace(arg)]

        builtin.func(args, out, err)

    def path(self, arg: str) -> Path:
        return self.session.resolve(arg)

    ############################################################################
    # Commands: do_*
    ############################################################################

    def do_clear(self, args, out: Sink, err: Sink):
        """Clear the terminal.
        """
        out.write(CLEAR_SCREEN)

    def do_echo(self, args, out: Sink, err: Sink):
        """Write all arguments to the output, keeping the spaces between them.
        """
        out.write(join_parts(args))

    def do_dir(self, args, out: Sink, err: Sink):
        """List the files and directories in the current directory.
        Usage: `ls [path] [pattern]`
        """
        path = self.path(args[0]) if args else self.session.cwd
        pattern = args[1] if len(args) > 1 else '*'

        if path.is_file():
            out.write(path.name)
            return

        if not path.is_dir():
            # interpret the final part of the path as a pattern
            if pattern == '*':
                pattern = path.name
            path = path.parent

        if not path.is_dir():
            raise ShellError('directory not found')

        entries = sorted(path.glob(pattern))
        dirs = [p.name + '/' for p in entries if p.is_dir()]
        files = [p.name for p in entries if not p.is_dir()]
        out.write(LINEBREAK.join(dirs + files))

    def do_cd(self, args, out: Sink, err: Sink):
        """Change the current directory to the directory given as the first argument.
        """
        if not args:
            raise ShellError('no path specified')

        path = self.path(args[0])
        if not path.is_dir():
            raise ShellError('directory not found')

        self.session.cd(path)

    def do_pwd(self, args, out: Sink, err: Sink):
        """Show the current directory.
        """
        out.write(str(self.session.cwd))

    def do_mkdir(self, args, out: Sink, err: Sink):
        """Create a new directory.
        """
        if not args:
            raise ShellError('no directory name specified')

        path = self.path(args[0])
        if path.exists():
            raise ShellError('directory already exists')

        path.mkdir(parents=True)
        out.write('directory created')

    def do_rmdir(self, args, out: Sink, err: Sink):
        """Remove an empty directory.
        """
        if not args:
            raise ShellError('no directory name specified')

        path = self.path(args[0])
        if not path.is_dir():
            raise ShellError('directory does not exist')

        if any(p.is_file() for p in path.rglob('*')):
            raise ShellError('directory was not empty')

        shutil.rmtree(path)
        out.write('directory deleted')

    def do_cat(self, args, out: Sink, err: Sink):
        """Write the contents of a file to the output.
        """
        if not args:
            raise ShellError('no file specified')

        path = self.path(args[0])
        if not path.is_file():
            raise ShellError('file not found')

        out.write(path.read_text())

    def do_cp(self, args, out: Sink, err: Sink):
        """Copy the source file to the destination directory or file path.
        """
        source, dest = self._source_and_destination(args)
        shutil.copy(source, dest)
        out.write('file copied')

    def do_mv(self, args, out: Sink, err: Sink):
        """Move the source file to the destination directory or file path.
        """
        source, dest = self._source_and_destination(args)
        shutil.move(str(source), str(dest))
        out.write('file moved')

    def do_rm(self, args, out: Sink, err: Sink):
        """Delete a file or an empty directory.
        """
        if not args:
            raise ShellError('no target specified')

        path = self.path(args[0])
        if path.is_file():
            path.unlink()
            out.write('file deleted')

        elif path.is_dir():
            if any(path.iterdir()):
                raise ShellError('directory is not empty')

            path.rmdir()
            out.write('directory deleted')

        else:
            raise ShellError('file or directory does not exist')

    def do_help(self, args, out: Sink, err: Sink):
        """List the builtin commands, or show the help of specific commands.
        Usage: `help [command..]`
        """
        if not args:
            lines = ['', 'The following builtin commands are supported:', '']
            lines += [f'\t{name}' for name in self.registry]
            lines += ['', 'For further info on a command, use ' +
                      bold('help [command..]') + ', e.g. `help echo`', '']
            out.write(LINEBREAK.join(lines))
            return

        lines = [f'{name}: {self.registry[name].help}'
                 for name in args if name in self.registry]
        out.write(LINEBREAK.join(lines))

    def do_exit(self, args, out: Sink, err: Sink):
        """Exit the shell.
        """
        # the shell loop handles `exit` before it reaches the pipeline
        raise ShellError('exit can only be used as a standalone command')

    def _source_and_destination(self, args):
        if len(args) != 2:
            raise ShellError(
                'wrong number of arguments: please specify source and dest')

        source = self.path(args[0])
        if not source.is_file():
            raise ShellError('source file path does not exist or is invalid')

        dest = self.path(args[1])
        if dest.is_dir():
            dest = dest / source.name
        elif not dest.parent.is_dir():
            raise ShellError(
                'destination directory or file path does not exist or is invalid')

        if dest.exists():
            raise ShellError('destination file already exists')

        return source, dest
