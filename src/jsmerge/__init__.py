"""jsmerge: stream many NDJSON files into one JSON array."""

import logging

from .core import MergeSession, merge
from .errors import (
    InputFileError,
    MalformedRecordError,
    MergeCancelled,
    MergeError,
    NoInputFilesError,
)
from .models import InputFile, MergeResult, ProgressSample
from .settings import MergeSettings, load_settings

__all__ = [
    "__version__",
    "InputFile",
    "InputFileError",
    "MalformedRecordError",
    "MergeCancelled",
    "MergeError",
    "MergeResult",
    "MergeSession",
    "MergeSettings",
    "NoInputFilesError",
    "ProgressSample",
    "load_settings",
    "merge",
]

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
