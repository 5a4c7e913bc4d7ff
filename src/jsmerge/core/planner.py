"""Size planning: total input size and adaptive read chunk size."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..errors import InputFileError, NoInputFilesError
from ..models import InputFile

logger = logging.getLogger(__name__)

MIN_CHUNK_SIZE = 64 * 1024
MAX_CHUNK_SIZE = 1024 * 1024
# One chunk per this many bytes of total input, before clamping
CHUNK_SCALE = 1024


def plan_inputs(
    paths: Sequence[str | os.PathLike[str] | InputFile],
) -> List[InputFile]:
    """Stat every input once, preserving caller order.

    Args:
        paths: Ordered input file paths. InputFile entries are already
            planned and are kept as they are.

    Returns:
        One InputFile per path

    Raises:
        NoInputFilesError: If paths is empty
        InputFileError: If any path is missing, not a regular file, or
            not readable. Raised before anything is written.
    """
    if not paths:
        raise NoInputFilesError()

    planned: List[InputFile] = []
    for raw in paths:
        if isinstance(raw, InputFile):
            planned.append(raw)
            continue

        path = Path(raw)
        try:
            st = path.stat()
        except OSError as e:
            raise InputFileError(str(path), e.strerror or str(e)) from e

        if not stat.S_ISREG(st.st_mode):
            raise InputFileError(str(path), "not a regular file")
        if not os.access(path, os.R_OK):
            raise InputFileError(str(path), "permission denied")

        planned.append(InputFile(path=path, size=st.st_size))

    logger.debug(
        "Planned %d input files, %d bytes", len(planned), total_size(planned)
    )
    return planned


def total_size(files: Iterable[InputFile]) -> int:
    """Sum of the pre-computed sizes."""
    return sum(f.size for f in files)


def optimal_chunk_size(total_bytes: int, override: Optional[int] = None) -> int:
    """Pick a read chunk size for a merge of ``total_bytes``.

    Larger merges read larger chunks (fewer reads, more memory per chunk).
    The result, including any explicit override, always lies within
    [MIN_CHUNK_SIZE, MAX_CHUNK_SIZE]. Only throughput depends on it.
    """
    wanted = override if override is not None else total_bytes // CHUNK_SCALE
    return max(MIN_CHUNK_SIZE, min(wanted, MAX_CHUNK_SIZE))


__all__ = [
    "MAX_CHUNK_SIZE",
    "MIN_CHUNK_SIZE",
    "optimal_chunk_size",
    "plan_inputs",
    "total_size",
]
