"""Run configuration and defaults."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from line_splitter.errors import ConfigurationError

# Lines accumulated in memory before a sink writes them out.
DEFAULT_BUFFER_CAPACITY = 1_000_000

# Lines per part file before rotating to the next one.
DEFAULT_PART_CAPACITY = 10_000_000

# Lines between progress callbacks.
DEFAULT_PROGRESS_INTERVAL = 500_000

INPUT_GLOB = "*.txt"

ENCODING_ERROR_MODES = ("replace", "strict")


class Policy(StrEnum):
    SPLIT = "split"
    FILTER = "filter"


class Polarity(StrEnum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


@dataclass(frozen=True, slots=True)
class SinkSettings:
    """Per-file settings handed to each pipeline."""

    buffer_capacity: int = DEFAULT_BUFFER_CAPACITY
    part_capacity: int | None = DEFAULT_PART_CAPACITY
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    encoding_errors: str = "replace"

    @property
    def chunked(self) -> bool:
        return self.part_capacity is not None

    def validate(self) -> None:
        if self.buffer_capacity < 1:
            raise ConfigurationError(
                f"buffer capacity must be >= 1, got {self.buffer_capacity}"
            )
        if self.part_capacity is not None and self.part_capacity < 1:
            raise ConfigurationError(f"lines per file must be >= 1, got {self.part_capacity}")
        if self.progress_interval < 1:
            raise ConfigurationError(
                f"progress interval must be >= 1, got {self.progress_interval}"
            )
        if self.encoding_errors not in ENCODING_ERROR_MODES:
            raise ConfigurationError(
                f"encoding errors must be one of {', '.join(ENCODING_ERROR_MODES)}, "
                f"got {self.encoding_errors!r}"
            )


@dataclass(frozen=True, slots=True)
class SplitConfig:
    """Everything a run needs, as parsed from the command line."""

    input_dir: Path
    pattern: str
    output_dir: Path
    policy: Policy = Policy.SPLIT
    polarity: Polarity | None = None
    settings: SinkSettings = SinkSettings()
    workers: int = 1
    fail_fast: bool = False

    def validate(self) -> None:
        """Check folders and settings. Touches nothing on disk."""
        self.settings.validate()

        if self.workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {self.workers}")

        if self.policy is Policy.FILTER and self.polarity is None:
            raise ConfigurationError("filter mode requires a polarity (include or exclude)")

        if not self.input_dir.is_dir():
            raise ConfigurationError(f"Folder not found: {self.input_dir}", self.input_dir)

        # Filter output is written as *.txt into the output root, next to any inputs there.
        if self.policy is Policy.FILTER and self.output_dir.resolve() == self.input_dir.resolve():
            raise ConfigurationError(
                "output folder must differ from the input folder in filter mode",
                self.output_dir,
            )
