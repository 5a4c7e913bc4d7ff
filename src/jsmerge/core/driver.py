"""Sequential file driver and the top-level merge operation."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence

from ..errors import MergeCancelled
from ..models import InputFile, MergeResult
from ..settings import MergeSettings, load_settings
from .engine import MergeSession, ProgressCallback, Sink
from .planner import optimal_chunk_size, plan_inputs, total_size
from .sink import FileSink

logger = logging.getLogger(__name__)

SinkFactory = Callable[[Path, MergeSettings], Sink]


class CancelToken(Protocol):
    """Anything with ``is_set()``, e.g. ``threading.Event``."""

    def is_set(self) -> bool: ...


def _file_sink(path: Path, settings: MergeSettings) -> Sink:
    return FileSink(path, buffer_size=settings.output_buffer_size)


def merge_files(
    files: Sequence[InputFile],
    session: MergeSession,
    chunk_size: int,
    cancel: Optional[CancelToken] = None,
) -> None:
    """Feed ``files`` through ``session`` in order, then finalize it.

    The session is not finalized between files. Each file's end still
    ends its last line, but a record left open inside brackets or a string
    carries into the next file. Any failure, including cancellation and
    KeyboardInterrupt, aborts the session before it propagates.

    Raises:
        OSError: An input could not be opened or read
        MalformedRecordError: Input did not resolve into JSON values
        MergeCancelled: ``cancel`` was set between two chunks
    """
    try:
        for index, input_file in enumerate(files, start=1):
            logger.debug(
                "Reading %s (%d/%d, %d bytes)",
                input_file.path,
                index,
                len(files),
                input_file.size,
            )
            with open(input_file.path, "rb") as f:
                while True:
                    if cancel is not None and cancel.is_set():
                        raise MergeCancelled(
                            f"Merge cancelled while reading {input_file.path}"
                        )
                    chunk = f.read(chunk_size)
                    if not chunk:
                        break
                    session.consume(chunk)
            session.end_file()
            session.report_progress()

        if cancel is not None and cancel.is_set():
            raise MergeCancelled("Merge cancelled before finalizing")
        session.finalize()
    except BaseException:
        session.abort()
        raise


def merge(
    input_paths: Sequence[str | os.PathLike[str] | InputFile],
    output_path: str | os.PathLike[str],
    progress_callback: Optional[ProgressCallback] = None,
    *,
    settings: Optional[MergeSettings] = None,
    cancel: Optional[CancelToken] = None,
    sink_factory: Optional[SinkFactory] = None,
) -> MergeResult:
    """Merge NDJSON files into a single JSON array file.

    Inputs are sized before the output is created, so a missing input
    leaves no output behind. Once streaming starts, a failure leaves the
    output without its closing bracket: every record in it is complete,
    and appending ``]`` yields a valid array of what was merged so far.

    Args:
        input_paths: Input files, merged in this order. Entries that are
            already InputFile (from plan_inputs) are not stat-ed again.
        output_path: Destination file (created or truncated)
        progress_callback: Receives a ProgressSample after every chunk and
            after every file
        settings: Merge settings (default: resolved from environment)
        cancel: Checked between chunks; when set the merge is aborted
        sink_factory: Builds the output sink (default: FileSink)

    Returns:
        MergeResult describing the completed merge

    Raises:
        NoInputFilesError: input_paths is empty
        InputFileError: An input is missing or unreadable (before output)
        OSError: Output cannot be created or written, or a read fails
        MalformedRecordError: A record or the final fragment is incomplete
        MergeCancelled: ``cancel`` was set
    """
    settings = settings or load_settings()
    files = plan_inputs(input_paths)
    total_bytes = total_size(files)
    chunk_size = optimal_chunk_size(total_bytes, settings.chunk_size)
    logger.debug(
        "Merging %d files (%d bytes) with %d-byte chunks, %s boundaries",
        len(files),
        total_bytes,
        chunk_size,
        settings.boundary,
    )

    output = Path(output_path)
    sink = (sink_factory or _file_sink)(output, settings)
    try:
        session = MergeSession(
            sink,
            total_bytes,
            on_progress=progress_callback,
            boundary=settings.boundary,
        )
        merge_files(files, session, chunk_size, cancel=cancel)
    finally:
        sink.close()

    return MergeResult(
        output_path=output,
        files_merged=len(files),
        records_emitted=session.records_emitted,
        total_bytes=total_bytes,
        processed_bytes=session.processed_bytes,
        elapsed_seconds=session.elapsed,
        chunk_size=chunk_size,
    )


__all__ = ["CancelToken", "SinkFactory", "merge", "merge_files"]
