"""
A shell that pipes the output of commands into embedded Python code.
"""

# explicit API exposure
# "noqa" suppresses linting errors (flake8)
from pipesh.shell.errors import LaunchError, ShellError, ShellSyntaxError # noqa
from pipesh.shell.pipeline import PipelineExecutor # noqa
from pipesh.shell.shell import Shell, run_command # noqa
