"""Data models shared by the merge engine, driver and CLI."""

from .inputs import InputFile
from .progress import ProgressSample
from .result import MergeResult

__all__ = ["InputFile", "MergeResult", "ProgressSample"]
