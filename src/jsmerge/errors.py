"""Exceptions raised by jsmerge."""

from __future__ import annotations


class MergeError(Exception):
    """Base class for merge failures."""


class NoInputFilesError(MergeError, OSError):
    """Raised when a merge is requested without any input files."""

    def __init__(self, message: str = "No input files provided") -> None:
        super().__init__(message)


class InputFileError(MergeError, OSError):
    """An input file could not be sized or opened during planning."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read input file '{path}': {reason}")


class MalformedRecordError(MergeError, ValueError):
    """Input text does not resolve into a complete JSON value."""

    def __init__(self, reason: str, fragment: str = "") -> None:
        self.reason = reason
        self.fragment = fragment
        excerpt = fragment if len(fragment) <= 60 else f"{fragment[:57]}..."
        message = f"Malformed record: {reason}"
        if excerpt:
            message += f" ({excerpt!r})"
        super().__init__(message)


class MergeCancelled(MergeError):
    """The merge was cancelled between two chunks."""


__all__ = [
    "InputFileError",
    "MalformedRecordError",
    "MergeCancelled",
    "MergeError",
    "NoInputFilesError",
]
