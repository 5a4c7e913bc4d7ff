"""Input file descriptor produced by the size planner."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class InputFile:
    """One input file and its size, read once before streaming."""

    path: Path
    size: int

    def __str__(self) -> str:
        return str(self.path)
