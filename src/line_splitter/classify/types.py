"""Shared type definitions for classification."""

from collections.abc import Callable
from enum import Enum
from typing import TypeAlias

Predicate: TypeAlias = Callable[[str], object]


class OutputClass(Enum):
    """Logical destination of a classified line."""

    MATCH = "matches"
    NON_MATCH = "nonmatches"
    SELECTED = "selected"

    @property
    def file_label(self) -> str | None:
        """Label embedded in part file names; filter output carries none."""
        if self is OutputClass.SELECTED:
            return None
        return self.value
