"""Counters and state shared by pipeline callers."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TypeAlias

from line_splitter.classify.types import OutputClass


class PipelineState(Enum):
    IDLE = "idle"
    READING = "reading"
    DRAINING = "draining"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FileResult:
    """Statistics from processing one input file."""

    input_path: Path
    lines_read: int = 0
    lines_dropped: int = 0
    class_counts: dict[OutputClass, int] = field(default_factory=dict)
    parts: dict[OutputClass, list[Path]] = field(default_factory=dict)
    elapsed: float = 0.0
    cancelled: bool = False

    @property
    def lines_routed(self) -> int:
        return sum(self.class_counts.values())

    @property
    def lines_per_second(self) -> float:
        if self.elapsed <= 0:
            return 0.0
        return self.lines_read / self.elapsed

    def count(self, output_class: OutputClass) -> int:
        return self.class_counts.get(output_class, 0)


ProgressCallback: TypeAlias = Callable[[FileResult], None]
