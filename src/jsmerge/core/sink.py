"""Output sinks the merge engine writes framed text to."""

from __future__ import annotations

import os
from collections import deque
from pathlib import Path
from typing import Deque, List

from .engine import Sink


class FileSink:
    """Append-only UTF-8 text file, closed exactly once.

    Writes block until the buffer drains, so a slow disk pauses reading.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        buffer_size: int = 16 * 1024 * 1024,
    ):
        self.path = Path(path)
        self._file = open(
            self.path, "w", encoding="utf-8", newline="", buffering=buffer_size
        )
        self.bytes_written = 0

    @property
    def closed(self) -> bool:
        return self._file.closed

    def write(self, text: str) -> int:
        self._file.write(text)
        self.bytes_written += len(text.encode("utf-8"))
        return len(text)

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()


class DebugTap:
    """Sink wrapper that remembers the head and tail of the output.

    Keeps the first and last ``keep`` lines and counts all of them without
    holding the rest in memory.
    """

    def __init__(self, inner: Sink, keep: int = 5):
        self.inner = inner
        self.keep = keep
        self.first_lines: List[str] = []
        self._last: Deque[str] = deque(maxlen=keep)
        self._partial = ""
        self.line_count = 0

    @property
    def last_lines(self) -> List[str]:
        tail = list(self._last)
        if self._partial:
            tail = (tail + [self._partial])[-self.keep :]
        return tail

    def write(self, text: str) -> object:
        result = self.inner.write(text)
        lines = (self._partial + text).split("\n")
        self._partial = lines.pop()
        for line in lines:
            if len(self.first_lines) < self.keep:
                self.first_lines.append(line)
            self._last.append(line)
            self.line_count += 1
        return result

    def close(self) -> None:
        if self._partial:
            if len(self.first_lines) < self.keep:
                self.first_lines.append(self._partial)
            self._last.append(self._partial)
            self.line_count += 1
            self._partial = ""
        self.inner.close()


__all__ = ["DebugTap", "FileSink"]
