"""Tests for output naming and layout."""

import tempfile
from pathlib import Path

import pytest

from line_splitter.classify import OutputClass
from line_splitter.errors import ConfigurationError
from line_splitter.sink import OutputLayout, part_file_name


def test_part_file_name_variants() -> None:
    assert part_file_name("words", "matches", 1) == "words_matches_part0001.txt"
    assert part_file_name("words", "nonmatches", 12) == "words_nonmatches_part0012.txt"
    assert part_file_name("words", "matches", None) == "words_matches.txt"
    assert part_file_name("words", None, 3) == "words_part0003.txt"
    assert part_file_name("words", None, None) == "words.txt"


def test_layout_directories() -> None:
    layout = OutputLayout(Path("/out"))

    assert layout.directory_for(OutputClass.MATCH) == Path("/out/matches")
    assert layout.directory_for(OutputClass.NON_MATCH) == Path("/out/non-matches")
    assert layout.directory_for(OutputClass.SELECTED) == Path("/out")


def test_prepare_creates_directories() -> None:
    with tempfile.TemporaryDirectory() as tmp_dir:
        layout = OutputLayout(Path(tmp_dir) / "out")
        created = layout.prepare((OutputClass.MATCH, OutputClass.NON_MATCH))

        assert all(directory.is_dir() for directory in created)
        # Idempotent.
        layout.prepare((OutputClass.MATCH, OutputClass.NON_MATCH))


def test_prepare_over_a_file_is_configuration_error() -> None:
    with tempfile.TemporaryDirectory() as tmp_dir:
        blocker = Path(tmp_dir) / "out"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(ConfigurationError) as excinfo:
            OutputLayout(blocker).prepare((OutputClass.SELECTED,))
        assert excinfo.value.path == blocker
