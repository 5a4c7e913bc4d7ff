"""Record extraction engine: re-frames streamed records as one JSON array."""

from __future__ import annotations

import codecs
import logging
import string
import time
from typing import Callable, Optional, Protocol

from ..errors import MalformedRecordError
from ..models import ProgressSample
from .boundaries import make_splitter

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressSample], None]

ARRAY_OPEN = "[\n"
ARRAY_CLOSE = "]"
SEPARATOR = ",\n"

# Last character of a complete JSON value / first character of one
VALUE_END = frozenset('}]"' + string.digits + "el")
VALUE_START = frozenset('{["-' + string.digits + "tfn")


class Sink(Protocol):
    def write(self, text: str) -> object: ...

    def close(self) -> None: ...


def _noop(sample: ProgressSample) -> None:
    pass


class MergeSession:
    """State of one merge: framing, carried fragment and counters.

    Feed raw chunks with :meth:`consume` in input order, then call
    :meth:`finalize`. Calling :meth:`abort` first (or any failure inside
    the session) guarantees the closing bracket is never written, so an
    interrupted merge is recognisable from the output alone.

    The session writes to ``sink`` but never closes it.
    """

    def __init__(
        self,
        sink: Sink,
        total_bytes: int,
        on_progress: Optional[ProgressCallback] = None,
        boundary: str = "depth",
        clock: Callable[[], float] = time.monotonic,
    ):
        self._sink = sink
        self._total_bytes = total_bytes
        self._on_progress = on_progress or _noop
        self._splitter = make_splitter(boundary)
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._clock = clock
        self._start_time = clock()

        self._processed_bytes = 0
        self._records_emitted = 0
        self._last_char = ""
        self._array_opened = False
        self._aborted = False
        self._closed = False

    @property
    def total_bytes(self) -> int:
        return self._total_bytes

    @property
    def processed_bytes(self) -> int:
        return self._processed_bytes

    @property
    def records_emitted(self) -> int:
        return self._records_emitted

    @property
    def array_opened(self) -> bool:
        return self._array_opened

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def closed(self) -> bool:
        """True once the closing bracket has been written."""
        return self._closed

    @property
    def pending(self) -> str:
        """Unresolved input text carried into the next chunk."""
        return self._splitter.pending

    @property
    def elapsed(self) -> float:
        return self._clock() - self._start_time

    def consume(self, chunk: bytes) -> ProgressSample:
        """Process one chunk of raw input and report progress.

        Raises:
            MalformedRecordError: Invalid UTF-8 or a structurally broken
                record. The session is aborted first.
            RuntimeError: The session is already finished or aborted.
        """
        if self._closed or self._aborted:
            raise RuntimeError("Merge session is no longer accepting input")

        try:
            text = self._decoder.decode(chunk)
            if chunk:
                self._open_array()
            for record in self._splitter.feed(text):
                self._emit(record)
        except UnicodeDecodeError as e:
            self.abort()
            raise MalformedRecordError(f"invalid UTF-8 ({e.reason})") from e
        except BaseException:
            self.abort()
            raise

        self._processed_bytes += len(chunk)
        return self.report_progress()

    def end_file(self) -> None:
        """Mark the end of one input file.

        The file's last line ends here even without a trailing newline, so
        a bare scalar or an unterminated line never runs into the next
        file's first record. A record still open inside brackets or a
        string carries over.

        Raises:
            MalformedRecordError: The file ends inside a UTF-8 sequence, or
                (line boundaries) its unterminated last line is not a
                complete JSON value. The session is aborted first.
            RuntimeError: The session is already finished or aborted.
        """
        if self._closed or self._aborted:
            raise RuntimeError("Merge session is no longer accepting input")

        try:
            text = self._decoder.decode(b"", final=True)
            for record in self._splitter.feed(text):
                self._emit(record)
            for record in self._splitter.end_file():
                self._emit(record)
        except UnicodeDecodeError as e:
            self.abort()
            raise MalformedRecordError(f"truncated UTF-8 ({e.reason})") from e
        except BaseException:
            self.abort()
            raise

    def report_progress(self) -> ProgressSample:
        """Build a progress sample and hand it to the callback."""
        elapsed = self.elapsed
        if self._total_bytes > 0:
            percent = min(100.0, self._processed_bytes * 100 / self._total_bytes)
        else:
            percent = 100.0
        sample = ProgressSample(
            percent_complete=percent,
            processed_bytes=self._processed_bytes,
            bytes_per_second=self._processed_bytes / elapsed if elapsed > 0 else 0.0,
            total_bytes=self._total_bytes,
            elapsed_seconds=max(elapsed, 0.0),
            pending_bytes=len(self._splitter.pending),
        )
        self._on_progress(sample)
        return sample

    def finalize(self) -> None:
        """Resolve the last fragment and close the array.

        Does nothing when the session was aborted. When no input byte was
        ever seen the output is still a (empty) valid array.

        Raises:
            MalformedRecordError: The final fragment is not a complete
                JSON value. The session is aborted first.
        """
        if self._closed or self._aborted:
            return

        try:
            text = self._decoder.decode(b"", final=True)
        except UnicodeDecodeError as e:
            self.abort()
            raise MalformedRecordError(f"truncated UTF-8 ({e.reason})") from e

        try:
            self._open_array()
            for record in self._splitter.feed(text):
                self._emit(record)
            for record in self._splitter.flush():
                self._emit(record)
            self._sink.write(ARRAY_CLOSE)
        except BaseException:
            self.abort()
            raise
        self._closed = True
        logger.debug(
            "Closed array after %d records (%d bytes)",
            self._records_emitted,
            self._processed_bytes,
        )

    def abort(self) -> None:
        """Withhold the closing bracket for good. No-op once closed."""
        if self._closed or self._aborted:
            return
        self._aborted = True
        logger.warning(
            "Merge aborted after %d records; output left unterminated",
            self._records_emitted,
        )

    def _open_array(self) -> None:
        if not self._array_opened:
            self._sink.write(ARRAY_OPEN)
            self._array_opened = True

    def _emit(self, record: str) -> None:
        if (
            self._records_emitted
            and self._last_char in VALUE_END
            and record[0] in VALUE_START
        ):
            text = SEPARATOR + record + "\n"
        else:
            text = record + "\n"
        # Separator, record and newline go out in a single write
        self._sink.write(text)
        self._records_emitted += 1
        self._last_char = record[-1]


__all__ = ["MergeSession", "ProgressCallback", "Sink"]
