"""Exception types raised by the splitter."""

from pathlib import Path


class SplitterError(RuntimeError):
    """Base class for all splitter failures, optionally tied to a file."""

    def __init__(self, message: str, path: str | Path | None = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None

    def __reduce__(self):
        # Keep the path when errors cross a process pool boundary.
        return (self.__class__, (str(self), self.path))


class ConfigurationError(SplitterError):
    """Invalid pattern, policy or run settings. Raised before any output is written."""


class InputIOError(SplitterError):
    """An input file could not be opened, read or decoded."""


class OutputIOError(SplitterError):
    """A part file could not be opened, written or closed."""


class SinkStateError(SplitterError):
    """A sink was used after it was finished or after it failed."""


class PipelineStateError(SplitterError):
    """A pipeline was run outside of its IDLE state."""
