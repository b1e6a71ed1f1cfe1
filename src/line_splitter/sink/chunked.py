"""Buffered, rotating writer for one output class."""

import logging
from pathlib import Path
from typing import TextIO

from line_splitter.config import DEFAULT_BUFFER_CAPACITY, DEFAULT_PART_CAPACITY
from line_splitter.errors import ConfigurationError, OutputIOError, SinkStateError
from line_splitter.sink.naming import part_file_name

logger = logging.getLogger(__name__)

# 1MB buffer for efficient I/O.
WRITE_BUFFER_SIZE = 1024 * 1024

LINE_TERMINATOR = "\n"


class ChunkedSink:
    """
    Owns one output class for one input file.

    Lines are kept in an in-memory buffer and written out every
    ``buffer_capacity`` lines. Once a part file holds ``part_capacity`` lines
    it is closed and the next append opens the following part. With
    ``part_capacity=None`` a single unnumbered file is written.

    The first part file is created (truncated) by the constructor, so a class
    that receives no lines still leaves an empty file behind.

    At all times ``lines_appended == lines_written + buffered_lines``.
    """

    def __init__(
        self,
        directory: Path,
        base_name: str,
        label: str | None,
        *,
        buffer_capacity: int = DEFAULT_BUFFER_CAPACITY,
        part_capacity: int | None = DEFAULT_PART_CAPACITY,
    ):
        if buffer_capacity < 1:
            raise ConfigurationError(f"buffer_capacity must be >= 1, got {buffer_capacity}")
        if part_capacity is not None and part_capacity < 1:
            raise ConfigurationError(f"part_capacity must be >= 1, got {part_capacity}")

        self._directory = directory
        self._base_name = base_name
        self._label = label
        self._buffer_capacity = buffer_capacity
        self._part_capacity = part_capacity

        self._buffer: list[str] = []
        self._handle: TextIO | None = None
        self._finished = False
        self._failed = False

        self.part_number = 1
        self.part_lines = 0
        self.lines_appended = 0
        self.lines_written = 0
        self.parts: list[Path] = []

        self._open_part()

    @property
    def chunked(self) -> bool:
        return self._part_capacity is not None

    @property
    def buffered_lines(self) -> int:
        return len(self._buffer)

    @property
    def current_path(self) -> Path:
        number = self.part_number if self.chunked else None
        return self._directory / part_file_name(self._base_name, self._label, number)

    def append(self, line: str) -> None:
        """Queue one line for the current part, flushing and rotating as needed."""
        if self._finished or self._failed:
            raise SinkStateError(
                f"cannot append to a {'failed' if self._failed else 'finished'} sink",
                self.current_path,
            )

        if self._handle is None:
            # Previous part was closed by a rotation.
            self._open_part()

        self._buffer.append(line + LINE_TERMINATOR)
        self.lines_appended += 1
        self.part_lines += 1

        if len(self._buffer) >= self._buffer_capacity:
            self._flush()

        if self._part_capacity is not None and self.part_lines >= self._part_capacity:
            self._rotate()

    def finish(self) -> None:
        """Write out the buffer and close the current part. Safe to call twice."""
        if self._finished:
            return
        if self._failed:
            raise SinkStateError("cannot finish a failed sink", self.current_path)
        self._flush()
        self._close_part()
        self._finished = True

    def abort(self) -> None:
        """
        Best-effort teardown after an error elsewhere.

        Buffered lines are still written unless this sink is the one that
        failed; the handle is always closed.
        """
        if self._finished:
            return
        try:
            if not self._failed:
                self._flush()
        finally:
            self._finished = True
            handle, self._handle = self._handle, None
            if handle is not None:
                try:
                    handle.close()
                except OSError as exc:
                    if not self._failed:
                        raise OutputIOError(
                            f"cannot close {self.current_path}: {exc}", self.current_path
                        ) from exc

    def _open_part(self) -> None:
        path = self.current_path
        try:
            self._handle = open(  # noqa: SIM115
                path,
                "w",
                encoding="utf-8",
                newline="",
                buffering=WRITE_BUFFER_SIZE,
            )
        except OSError as exc:
            self._failed = True
            raise OutputIOError(f"cannot open {path}: {exc}", path) from exc
        self.parts.append(path)
        logger.debug("Opened %s", path)

    def _flush(self) -> None:
        if not self._buffer:
            return
        if self._handle is None:
            self._open_part()
        try:
            self._handle.write("".join(self._buffer))
        except OSError as exc:
            self._failed = True
            path = self.current_path
            raise OutputIOError(f"write failed for {path}: {exc}", path) from exc
        self.lines_written += len(self._buffer)
        self._buffer.clear()

    def _close_part(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.close()
        except OSError as exc:
            self._failed = True
            path = self.current_path
            raise OutputIOError(f"cannot close {path}: {exc}", path) from exc

    def _rotate(self) -> None:
        self._flush()
        self._close_part()
        logger.debug("Closed %s after %d lines", self.current_path, self.part_lines)
        self.part_number += 1
        self.part_lines = 0
