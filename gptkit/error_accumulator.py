"""Collecting error bytes seen while reading a stream."""

from __future__ import annotations

import io
from typing import Any


class ErrorAccumulatorWriteError(Exception):
    """Writing to the accumulator's buffer failed."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"error accumulator write error, {cause}")
        self.cause = cause


class ErrorAccumulator:
    """Appends error data to a buffer and hands it back whole."""

    def __init__(self, buffer: Any = None) -> None:
        self.buffer = buffer if buffer is not None else io.BytesIO()

    def write(self, data: bytes) -> None:
        """Append data; raise ErrorAccumulatorWriteError if the buffer refuses it."""
        try:
            self.buffer.write(data)
        except Exception as exc:
            raise ErrorAccumulatorWriteError(exc) from exc

    def contents(self) -> bytes:
        """Everything written so far."""
        return bytes(self.buffer.getvalue())