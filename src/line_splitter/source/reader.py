"""Streaming line reader for input files."""

from collections.abc import Iterator
from pathlib import Path

from line_splitter.errors import InputIOError

# 1MB buffer for efficient I/O.
READ_BUFFER_SIZE = 1024 * 1024


def iter_lines(input_path: str | Path, *, errors: str = "replace") -> Iterator[str]:
    """
    Yield the lines of a text file in order, without their terminators.

    The file is decoded as UTF-8 (a leading byte order mark is skipped) and
    split on \\n, \\r\\n and \\r. Nothing is read until the first line is
    requested, and the generator cannot be restarted once exhausted.

    Raises:
        InputIOError: The file cannot be opened, a read fails, or (with
            errors="strict") the content is not valid UTF-8.
    """
    try:
        handle = open(  # noqa: SIM115
            input_path,
            encoding="utf-8-sig",
            errors=errors,
            buffering=READ_BUFFER_SIZE,
        )
    except OSError as exc:
        raise InputIOError(f"cannot open {input_path}: {exc}", input_path) from exc

    with handle:
        try:
            for line in handle:
                # Universal newlines leave a single "\n" at most.
                yield line[:-1] if line.endswith("\n") else line
        except OSError as exc:
            raise InputIOError(f"read failed in {input_path}: {exc}", input_path) from exc
        except UnicodeDecodeError as exc:
            raise InputIOError(f"invalid UTF-8 in {input_path}: {exc}", input_path) from exc
