"""Streaming merge core: planner, boundary detection, engine, driver."""

from .driver import merge, merge_files
from .engine import MergeSession
from .planner import optimal_chunk_size, plan_inputs, total_size
from .sink import DebugTap, FileSink

__all__ = [
    "DebugTap",
    "FileSink",
    "MergeSession",
    "merge",
    "merge_files",
    "optimal_chunk_size",
    "plan_inputs",
    "total_size",
]
