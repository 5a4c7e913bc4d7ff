"""Summary returned by a completed merge."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class MergeResult(BaseModel):
    """Outcome of a merge that reached its closing bracket."""

    output_path: Path
    files_merged: int
    records_emitted: int
    total_bytes: int
    processed_bytes: int
    elapsed_seconds: float
    chunk_size: int
