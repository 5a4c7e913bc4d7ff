"""Record boundary detection over a stream of decoded text.

Two policies split incoming text into records:

- ``LineSplitter``: one record per non-empty physical line. Bare ``[``
  and ``]`` lines between records are skipped so that already-wrapped
  arrays merge cleanly. Records that span lines are passed through line
  by line.
- ``DepthSplitter``: tracks bracket/brace depth, strings and escapes over
  the character stream, so pretty-printed multi-line records come out as
  one record.

``feed`` yields records as soon as they complete; both policies keep only
the unresolved tail of the input between calls. ``end_file`` marks the end
of one input file, which ends its last line even without a newline, and
``flush`` resolves the end of all input.
"""

from __future__ import annotations

import json
from typing import Iterator, List, Optional

from ..errors import MalformedRecordError

WHITESPACE = " \t\r\n\f\v\ufeff"
SKIPPED_LINES = ("[", "]")
CLOSERS = {"{": "}", "[": "]"}
# Characters that end a bare top-level scalar (numbers, true, false, null)
SCALAR_END = frozenset(WHITESPACE + ',[]{}"')


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _check_scalar(token: str) -> str:
    try:
        json.loads(token, parse_constant=_reject_constant)
    except ValueError:
        raise MalformedRecordError("not a JSON value", token) from None
    return token


def _net_depth(line: str) -> int:
    """Opened minus closed brackets on one line, ignoring string contents."""
    depth = 0
    in_string = False
    escape = False
    for ch in line:
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch in CLOSERS:
            depth += 1
        elif ch in "}]":
            depth -= 1
    return depth


class LineSplitter:
    """Newline-based record boundaries.

    The lines of a record spanning several lines are passed through one by
    one. Their bracket depth is followed so that such a record's own ``[``
    and ``]`` lines are not mistaken for wrapper lines, and so that an
    unterminated last line is only checked when it has to stand alone.
    """

    def __init__(self) -> None:
        self._pending = ""
        self._depth = 0

    @property
    def pending(self) -> str:
        return self._pending

    def feed(self, text: str) -> Iterator[str]:
        lines = (self._pending + text).split("\n")
        self._pending = lines.pop()
        for line in lines:
            record = self._take(line)
            if record:
                yield record

    def end_file(self) -> Iterator[str]:
        """End of an input file terminates its last line."""
        tail = self._pending
        self._pending = ""
        record = self._take(tail, final=True)
        if record:
            yield record

    def flush(self) -> List[str]:
        """Resolve the unterminated last line as a final record."""
        records = list(self.end_file())
        if self._depth:
            raise MalformedRecordError(
                f"unterminated record, {self._depth} bracket(s) open"
            )
        return records

    def _take(self, line: str, final: bool = False) -> Optional[str]:
        record = line.strip(WHITESPACE)
        if not record:
            return None
        if not self._depth:
            if record in SKIPPED_LINES:
                return None
            if final:
                # A trailing or leading comma is framing left over from a
                # wrapped array
                try:
                    json.loads(record.strip(",").strip(WHITESPACE))
                except ValueError:
                    raise MalformedRecordError(
                        "incomplete final record", record
                    ) from None
        self._depth = max(0, self._depth + _net_depth(record))
        return record


class DepthSplitter:
    """Depth-tracking record boundaries.

    At record level whitespace and commas separate records. A ``[`` that
    is the only significant character on its line opens a wrapping array,
    and its elements become records; a ``]`` at record level closes it.
    Any other ``[`` starts an array record.
    """

    def __init__(self) -> None:
        self._buf = ""
        self._pos = 0
        self._start: Optional[int] = None
        self._stack: List[str] = []
        self._in_string = False
        self._escape = False
        self._scalar = False
        self._wrapped = False

    @property
    def pending(self) -> str:
        return self._buf

    def feed(self, text: str) -> Iterator[str]:
        buf = self._buf + text
        i = self._pos
        n = len(buf)

        while i < n:
            ch = buf[i]

            if self._start is None:
                if ch in WHITESPACE or ch == ",":
                    i += 1
                    continue
                if ch == "]":
                    self._wrapped = False
                    i += 1
                    continue
                if ch == "[" and not self._wrapped:
                    bare = self._bare_on_line(buf, i + 1)
                    if bare is None:
                        break
                    if bare:
                        self._wrapped = True
                        i += 1
                        continue
                if ch == "}":
                    raise MalformedRecordError("unexpected '}'", buf[i : i + 40])

                self._start = i
                if ch in CLOSERS:
                    self._stack.append(CLOSERS[ch])
                elif ch == '"':
                    self._in_string = True
                else:
                    self._scalar = True
                i += 1
                continue

            if self._in_string:
                if self._escape:
                    self._escape = False
                elif ch == "\\":
                    self._escape = True
                elif ch == '"':
                    self._in_string = False
                    if not self._stack:
                        yield buf[self._start : i + 1]
                        self._start = None
                i += 1
                continue

            if self._scalar:
                if ch in SCALAR_END:
                    # The terminating character is re-read at record level
                    yield _check_scalar(buf[self._start : i])
                    self._start = None
                    self._scalar = False
                    continue
                i += 1
                continue

            if ch == '"':
                self._in_string = True
            elif ch in CLOSERS:
                self._stack.append(CLOSERS[ch])
            elif ch in "}]":
                expected = self._stack.pop()
                if ch != expected:
                    raise MalformedRecordError(
                        f"expected '{expected}' but found '{ch}'",
                        buf[self._start : i + 1],
                    )
                if not self._stack:
                    yield buf[self._start : i + 1]
                    self._start = None
            i += 1

        keep = self._start if self._start is not None else i
        self._buf = buf[keep:]
        self._pos = i - keep
        if self._start is not None:
            self._start = 0

    def end_file(self) -> Iterator[str]:
        """End of an input file terminates a bare scalar or a pending ``[`` line.

        Objects, arrays and strings delimit themselves and may carry on
        into the next file.
        """
        if self._start is None or self._scalar:
            yield from self.feed("\n")

    def flush(self) -> List[str]:
        """Resolve whatever is left at end of input.

        End of input terminates a trailing scalar or a bare ``[`` line the
        same way a newline would. Anything still open after that is an
        incomplete record.
        """
        records = list(self.feed("\n"))
        if self._start is not None:
            fragment = self._buf.strip(WHITESPACE)
            if self._in_string:
                reason = "unterminated string"
            else:
                reason = f"unterminated record, {len(self._stack)} bracket(s) open"
            raise MalformedRecordError(reason, fragment)
        self._buf = ""
        self._pos = 0
        return records

    @staticmethod
    def _bare_on_line(buf: str, j: int) -> Optional[bool]:
        """Whether only whitespace follows ``buf[j-1]`` up to the newline.

        Returns None when the line is not complete yet.
        """
        n = len(buf)
        while j < n:
            ch = buf[j]
            if ch == "\n":
                return True
            if ch not in WHITESPACE:
                return False
            j += 1
        return None


def make_splitter(mode: str):
    """Return a fresh splitter for boundary ``mode`` ("depth" or "line")."""
    if mode == "depth":
        return DepthSplitter()
    if mode == "line":
        return LineSplitter()
    raise ValueError(f"Unknown boundary mode: {mode}")


__all__ = ["DepthSplitter", "LineSplitter", "make_splitter"]
