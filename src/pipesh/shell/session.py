from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union


@dataclass
class Session:
    """The state of a single shell session.

    The working directory is kept here rather than in the process, such that
    builtins and completions can be used without side-effects.
    """
    cwd: Path = field(default_factory=Path.cwd)
    history: List[str] = field(default_factory=list)

    def resolve(self, path: Union[str, Path]) -> Path:
        """Interpret `path` relative to the current directory.
        """
        path = Path(path).expanduser()
        if path.is_absolute():
            return path

        return self.cwd / path

    def cd(self, path: Union[str, Path]):
        self.cwd = self.resolve(path).resolve()
