"""Pattern compilation."""

import re

from line_splitter.classify.types import Predicate
from line_splitter.errors import ConfigurationError


def compile_predicate(pattern: str) -> Predicate:
    """
    Compile a regular expression into a line predicate.

    The predicate matches anywhere in the line (search semantics). Compiled
    patterns are never mutated, so one predicate serves every line of a run.
    """
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise ConfigurationError(f"Invalid regex pattern - {exc}") from exc
    return compiled.search
