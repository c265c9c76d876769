"""
Decoder for the engine's line-delimited JSON progress stream.
"""

from __future__ import annotations

__all__ = ["ProgressSink", "StdoutSink", "decode_stream"]

import sys
from typing import IO, Iterable, Iterator, Protocol

import urllib3.exceptions
from pydantic import ValidationError

from imagebuilder.core.exceptions import (
    DeadlineExceededError,
    EngineReportedError,
    StreamDecodeError,
    StreamReadError,
)

from ._models import ErrorLine, StreamLine

READ_ERRORS = (OSError, urllib3.exceptions.HTTPError)
TIMEOUT_ERRORS = (urllib3.exceptions.ReadTimeoutError, TimeoutError)


class ProgressSink(Protocol):
    def write(self, text: str) -> None: ...


class StdoutSink:
    """Writes progress text to the process standard output."""

    def __init__(self, out: IO[str] | None = None):
        self.out = out

    def write(self, text: str) -> None:
        out = self.out or sys.stdout
        out.write(text)
        out.flush()


class _LineReader:
    """Splits raw chunks into lines and remembers the last one read."""

    last_line: str | None
    fault: BaseException | None

    def __init__(self, chunks: Iterable[bytes | str]):
        self.chunks = chunks
        self.last_line = None
        self.fault = None

    def __iter__(self) -> Iterator[str]:
        buffer = b""
        try:
            for chunk in self.chunks:
                if isinstance(chunk, str):
                    chunk = chunk.encode("utf-8")
                buffer += chunk
                while b"\n" in buffer:
                    raw, buffer = buffer.split(b"\n", 1)
                    yield self._read(raw)
        except READ_ERRORS as e:
            self.fault = e
            return
        if buffer:
            yield self._read(buffer)

    def _read(self, raw: bytes) -> str:
        self.last_line = raw.rstrip(b"\r").decode("utf-8", errors="replace")
        return self.last_line


def decode_stream(stream: Iterable[bytes | str], sink: ProgressSink) -> None:
    """Forward progress text to the sink and surface the terminal error.

    Every line is decoded as a progress event and its text, if any,
    written to the sink. Once the stream is exhausted the last line read is decoded
    again as an error event; a non-empty ``error`` fails the call. An
    empty stream succeeds without that check.

    Args:
        stream: Raw chunks returned by the engine.
        sink: Receives the progress text, in order.

    Raises:
        StreamDecodeError: A line is not a valid progress event.
        EngineReportedError: The last line carries an error.
        DeadlineExceededError: The stream stalled past the read timeout.
        StreamReadError: Reading the underlying stream failed.
    """
    reader = _LineReader(stream)
    for line in reader:
        try:
            event = StreamLine.from_json(line)
        except ValidationError as e:
            raise StreamDecodeError(
                f"error unmarshalling container engine stream line {line}",
                line=line,
            ) from e
        text = event.text()
        if text:
            sink.write(text)

    if reader.last_line is not None:
        try:
            error_line = ErrorLine.from_json(reader.last_line)
        except ValidationError as e:
            raise StreamDecodeError(
                "error unmarshalling container engine stream line "
                f"{reader.last_line}",
                line=reader.last_line,
            ) from e
        if error_line.error:
            raise EngineReportedError(
                error_line.error,
                detail=error_line.detail(),
            )

    if isinstance(reader.fault, TIMEOUT_ERRORS):
        raise DeadlineExceededError(
            f"timed out reading container engine stream ({reader.fault})"
        ) from reader.fault
    if reader.fault is not None:
        raise StreamReadError(
            f"error reading container engine stream ({reader.fault})"
        ) from reader.fault
