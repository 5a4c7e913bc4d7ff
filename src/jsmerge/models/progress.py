"""Progress snapshot handed to progress reporters."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProgressSample(BaseModel):
    """Point-in-time view of a running merge.

    Samples are values: reporters may keep them, but a newer sample always
    supersedes an older one.
    """

    model_config = ConfigDict(frozen=True)

    percent_complete: float = Field(ge=0, le=100)
    processed_bytes: int = Field(ge=0)
    bytes_per_second: float = Field(ge=0)
    total_bytes: int = Field(default=0, ge=0)
    elapsed_seconds: float = Field(default=0.0, ge=0)
    pending_bytes: int = Field(default=0, ge=0)
    """Size of the unresolved fragment carried to the next chunk."""

    @property
    def megabytes_per_second(self) -> float:
        return self.bytes_per_second / 1024 / 1024
