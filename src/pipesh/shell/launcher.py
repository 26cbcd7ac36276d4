from pathlib import Path
from threading import Thread
from typing import IO, List, Union
import logging
import subprocess

from pipesh.shell.errors import LaunchError
from pipesh.shell.sink import Sink


class ProcessLauncher:
    """Run external programs.

    The output of the child process is forwarded line by line to the given
    sinks, while the caller waits for the process to exit.
    """

    def launch(self, executable: str, args: List[str], out: Sink, err: Sink,
               cwd: Union[str, Path] = None):
        try:
            process = subprocess.Popen([executable] + args,
                                       cwd=cwd,
                                       stdout=subprocess.PIPE,
                                       stderr=subprocess.PIPE,
                                       text=True)
        except (FileNotFoundError, PermissionError, NotADirectoryError) as e:
            raise LaunchError(f'{executable}: {e.strerror}') from e
        except OSError as e:
            raise LaunchError(f'{executable}: {e}') from e

        logging.debug(f'Started process {process.pid}: {executable}')

        readers = [Thread(target=forward, args=(process.stdout, out), daemon=True),
                   Thread(target=forward, args=(process.stderr, err), daemon=True)]
        for reader in readers:
            reader.start()

        returncode = process.wait()
        for reader in readers:
            reader.join()

        logging.debug(f'Process {process.pid} exited with {returncode}')
        return returncode


def forward(stream: IO[str], sink: Sink):
    with stream:
        for line in stream:
            sink.write(line)
