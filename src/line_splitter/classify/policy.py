"""Classification policies mapping a line to its output class."""

from dataclasses import dataclass
from typing import TypeAlias

from line_splitter.classify.types import OutputClass, Predicate
from line_splitter.config import Policy, Polarity
from line_splitter.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class BinarySplitClassifier:
    """Every line goes to MATCH or NON_MATCH; nothing is dropped."""

    predicate: Predicate

    @property
    def classes(self) -> tuple[OutputClass, ...]:
        return (OutputClass.MATCH, OutputClass.NON_MATCH)

    def classify(self, line: str) -> OutputClass:
        if self.predicate(line):
            return OutputClass.MATCH
        return OutputClass.NON_MATCH


@dataclass(frozen=True, slots=True)
class FilterClassifier:
    """Keep lines whose match result agrees with the polarity, drop the rest."""

    predicate: Predicate
    polarity: Polarity

    @property
    def classes(self) -> tuple[OutputClass, ...]:
        return (OutputClass.SELECTED,)

    def classify(self, line: str) -> OutputClass | None:
        matched = bool(self.predicate(line))
        if matched == (self.polarity is Polarity.INCLUDE):
            return OutputClass.SELECTED
        return None


Classifier: TypeAlias = BinarySplitClassifier | FilterClassifier


def build_classifier(
    policy: Policy | str,
    predicate: Predicate,
    polarity: Polarity | str | None = None,
) -> Classifier:
    """Select a classification policy by name."""
    try:
        policy = Policy(policy)
    except ValueError as exc:
        raise ConfigurationError(f"unknown classification policy {policy!r}") from exc

    if policy is Policy.SPLIT:
        return BinarySplitClassifier(predicate)

    if polarity is None:
        raise ConfigurationError("filter mode requires a polarity (include or exclude)")
    try:
        polarity = Polarity(polarity)
    except ValueError as exc:
        raise ConfigurationError(f"unknown polarity {polarity!r}") from exc
    return FilterClassifier(predicate, polarity)
