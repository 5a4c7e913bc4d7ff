"""Merge settings resolved from overrides, environment and defaults."""

from __future__ import annotations

import os
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

BoundaryMode = Literal["depth", "line"]

# Environment variable -> settings field
ENV_VARS: Dict[str, str] = {
    "JSMERGE_BOUNDARY": "boundary",
    "JSMERGE_CHUNK_SIZE": "chunk_size",
    "JSMERGE_OUTPUT_BUFFER": "output_buffer_size",
    "JSMERGE_PROGRESS_INTERVAL": "progress_interval",
}


class MergeSettings(BaseModel):
    """Tunables for one merge run.

    None of these affect record boundaries or framing except ``boundary``,
    which selects how records are recognised in the input text.
    """

    model_config = ConfigDict(frozen=True)

    boundary: BoundaryMode = "depth"
    chunk_size: Optional[int] = Field(default=None, gt=0)
    output_buffer_size: int = Field(default=16 * 1024 * 1024, gt=0)
    progress_interval: float = Field(default=0.1, ge=0)

    @field_validator("boundary", mode="before")
    @classmethod
    def normalize_boundary(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


def load_settings(**overrides: Any) -> MergeSettings:
    """Resolve settings for a merge.

    Resolution order (highest first):
    1. Keyword overrides whose value is not None (CLI flags)
    2. ``JSMERGE_*`` environment variables
    3. Model defaults

    Reads the environment fresh on every call.

    Raises:
        pydantic.ValidationError: If a value cannot be coerced
    """
    values: Dict[str, Any] = {}
    for env_name, field_name in ENV_VARS.items():
        raw = os.environ.get(env_name)
        if raw is not None and raw.strip():
            values[field_name] = raw.strip()

    values.update({k: v for k, v in overrides.items() if v is not None})
    return MergeSettings.model_validate(values)


__all__ = ["BoundaryMode", "ENV_VARS", "MergeSettings", "load_settings"]
