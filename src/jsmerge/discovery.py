"""Input discovery (directories, glob patterns) and size formatting."""

from __future__ import annotations

import glob
from pathlib import Path
from typing import Iterable, List

SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]
GLOB_CHARS = "*?["


def _has_magic(pattern: str) -> bool:
    return any(c in pattern for c in GLOB_CHARS)


def json_files_in_directory(
    directory: str | Path, pattern: str = "*.json"
) -> List[str]:
    """Return files in ``directory`` matching ``pattern``, sorted.

    Raises:
        NotADirectoryError: If ``directory`` is not a directory
    """
    root = Path(directory)
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")
    return sorted(str(p) for p in root.glob(pattern) if p.is_file())


def expand_patterns(patterns: Iterable[str]) -> List[str]:
    """Expand glob patterns in order; plain paths pass through untouched.

    Each pattern's matches are sorted. A pattern that matches nothing
    contributes nothing, while a plain path is kept even if missing so
    that planning reports it.
    """
    files: List[str] = []
    for pattern in patterns:
        if _has_magic(pattern):
            matches = glob.glob(pattern, recursive=True)
            files.extend(sorted(m for m in matches if Path(m).is_file()))
        else:
            files.append(pattern)
    return files


def format_bytes(num_bytes: int) -> str:
    """Human-readable size with base-1024 units.

    Examples:
        0 -> "0 Bytes"
        1536 -> "1.5 KB"
        1048576 -> "1 MB"
    """
    if num_bytes <= 0:
        return "0 Bytes"

    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(SIZE_UNITS) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {SIZE_UNITS[i]}"


__all__ = ["expand_patterns", "format_bytes", "json_files_in_directory"]
