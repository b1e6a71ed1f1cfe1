from line_splitter.classify.policy import (
    BinarySplitClassifier,
    Classifier,
    FilterClassifier,
    build_classifier,
)
from line_splitter.classify.predicate import compile_predicate
from line_splitter.classify.types import OutputClass, Predicate

__all__ = [
    "BinarySplitClassifier",
    "Classifier",
    "FilterClassifier",
    "OutputClass",
    "Predicate",
    "build_classifier",
    "compile_predicate",
]
