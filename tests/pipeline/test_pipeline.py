"""Tests for the per-file pipeline."""

import tempfile
import threading
from pathlib import Path

import pytest

from line_splitter.classify import (
    BinarySplitClassifier,
    FilterClassifier,
    OutputClass,
    compile_predicate,
)
from line_splitter.config import Polarity, SinkSettings
from line_splitter.errors import InputIOError, OutputIOError, PipelineStateError
from line_splitter.pipeline import Pipeline, PipelineState, process_file
from line_splitter.sink import OutputLayout

FRUIT = ["apple", "banana", "cherry", "date"]


def read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


def write_input(folder: Path, name: str, lines: list[str]) -> Path:
    path = folder / name
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    return path


def prepared_layout(root: Path, classifier) -> OutputLayout:
    layout = OutputLayout(root)
    layout.prepare(classifier.classes)
    return layout


class TestScenarios:
    """End-to-end behavior of one file through the pipeline."""

    def test_binary_split_unchunked(self) -> None:
        """Lines containing "a" go to matches, the rest to non-matches."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            input_path = write_input(root, "fruit.txt", FRUIT)
            classifier = BinarySplitClassifier(compile_predicate("a"))
            layout = prepared_layout(root / "out", classifier)

            result = process_file(
                input_path, classifier, layout, SinkSettings(part_capacity=None)
            )

            assert read_lines(root / "out/matches/fruit_matches.txt") == ["apple", "banana", "date"]
            assert read_lines(root / "out/non-matches/fruit_nonmatches.txt") == ["cherry"]
            assert result.lines_read == 4
            assert result.count(OutputClass.MATCH) == 3
            assert result.count(OutputClass.NON_MATCH) == 1
            assert result.lines_dropped == 0

    def test_filter_exclude(self) -> None:
        """Only the line without "a" survives an exclude filter."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            input_path = write_input(root, "fruit.txt", FRUIT)
            classifier = FilterClassifier(compile_predicate("a"), Polarity.EXCLUDE)
            layout = prepared_layout(root / "out", classifier)

            result = process_file(
                input_path, classifier, layout, SinkSettings(part_capacity=None)
            )

            assert sorted(p.name for p in (root / "out").iterdir()) == ["fruit.txt"]
            assert read_lines(root / "out/fruit.txt") == ["cherry"]
            assert result.count(OutputClass.SELECTED) == 1
            assert result.lines_dropped == 3

    def test_all_matching_lines_rotate(self) -> None:
        """25 matching lines with 10 per part give 10/10/5 and one empty non-match part."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            lines = [f"match {i}" for i in range(25)]
            input_path = write_input(root, "all.txt", lines)
            classifier = BinarySplitClassifier(compile_predicate("match"))
            layout = prepared_layout(root / "out", classifier)

            result = process_file(
                input_path, classifier, layout, SinkSettings(buffer_capacity=3, part_capacity=10)
            )

            match_parts = result.parts[OutputClass.MATCH]
            assert [p.name for p in match_parts] == [
                "all_matches_part0001.txt",
                "all_matches_part0002.txt",
                "all_matches_part0003.txt",
            ]
            assert [len(read_lines(p)) for p in match_parts] == [10, 10, 5]
            assert [line for p in match_parts for line in read_lines(p)] == lines

            non_match_parts = result.parts[OutputClass.NON_MATCH]
            assert [p.name for p in non_match_parts] == ["all_nonmatches_part0001.txt"]
            assert non_match_parts[0].read_bytes() == b""

    def test_empty_input(self) -> None:
        """An empty file leaves one empty output per class and no error."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            input_path = write_input(root, "empty.txt", [])
            classifier = BinarySplitClassifier(compile_predicate("x"))
            layout = prepared_layout(root / "out", classifier)

            result = process_file(input_path, classifier, layout)

            assert result.lines_read == 0
            for parts in result.parts.values():
                assert len(parts) == 1
                assert parts[0].read_bytes() == b""


class TestProperties:
    """Order, completeness and repeatability."""

    def test_partition_is_complete_and_ordered(self) -> None:
        lines = [f"{i}:{'even' if i % 2 == 0 else 'odd'}" for i in range(103)]
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            input_path = write_input(root, "nums.txt", lines)
            classifier = BinarySplitClassifier(compile_predicate("even$"))
            layout = prepared_layout(root / "out", classifier)

            result = process_file(
                input_path, classifier, layout, SinkSettings(buffer_capacity=7, part_capacity=20)
            )

            matches = [line for p in result.parts[OutputClass.MATCH] for line in read_lines(p)]
            non_matches = [
                line for p in result.parts[OutputClass.NON_MATCH] for line in read_lines(p)
            ]
            assert matches == [line for line in lines if line.endswith("even")]
            assert non_matches == [line for line in lines if line.endswith("odd")]
            assert result.lines_routed == len(lines)

    def test_rerun_is_byte_identical(self) -> None:
        lines = [f"row {i}" for i in range(31)]
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            input_path = write_input(root, "rows.txt", lines)
            classifier = BinarySplitClassifier(compile_predicate("[13579]$"))
            layout = prepared_layout(root / "out", classifier)
            settings = SinkSettings(buffer_capacity=4, part_capacity=6)

            first = process_file(input_path, classifier, layout, settings)
            snapshot = {p: p.read_bytes() for parts in first.parts.values() for p in parts}
            second = process_file(input_path, classifier, layout, settings)

            assert second.parts == first.parts
            assert {p: p.read_bytes() for p in snapshot} == snapshot

    def test_part_numbering_restarts_per_input_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            classifier = FilterClassifier(compile_predicate("."), Polarity.INCLUDE)
            layout = prepared_layout(root / "out", classifier)
            settings = SinkSettings(part_capacity=2)

            first_input = write_input(root, "a.txt", ["1", "2", "3"])
            first = process_file(first_input, classifier, layout, settings)
            second = process_file(write_input(root, "b.txt", ["4"]), classifier, layout, settings)

            assert [p.name for p in first.parts[OutputClass.SELECTED]] == [
                "a_part0001.txt",
                "a_part0002.txt",
            ]
            assert [p.name for p in second.parts[OutputClass.SELECTED]] == ["b_part0001.txt"]


class TestPipelineLifecycle:
    """State machine, progress, cancellation and failures."""

    def test_states_and_single_use(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            classifier = BinarySplitClassifier(compile_predicate("a"))
            layout = prepared_layout(root / "out", classifier)
            pipeline = Pipeline(write_input(root, "fruit.txt", FRUIT), classifier, layout)

            assert pipeline.state is PipelineState.IDLE
            pipeline.run()
            assert pipeline.state is PipelineState.DONE

            with pytest.raises(PipelineStateError):
                pipeline.run()

    def test_progress_callback(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            classifier = BinarySplitClassifier(compile_predicate("a"))
            layout = prepared_layout(root / "out", classifier)
            input_path = write_input(root, "many.txt", ["a"] * 10)
            seen: list[int] = []

            process_file(
                input_path,
                classifier,
                layout,
                SinkSettings(progress_interval=4),
                progress=lambda result: seen.append(result.lines_read),
            )

            assert seen == [4, 8, 10]

    def test_cancel_keeps_lines_already_read(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            classifier = BinarySplitClassifier(compile_predicate("."))
            layout = prepared_layout(root / "out", classifier)
            input_path = write_input(root, "big.txt", [str(i) for i in range(100)])
            cancel = threading.Event()

            def stop_at_five(result) -> None:
                if result.lines_read == 5:
                    cancel.set()

            result = process_file(
                input_path,
                classifier,
                layout,
                SinkSettings(buffer_capacity=1000, progress_interval=1),
                progress=stop_at_five,
                cancel=cancel,
            )

            assert result.cancelled
            assert result.lines_read == 5
            assert read_lines(result.parts[OutputClass.MATCH][0]) == ["0", "1", "2", "3", "4"]

    def test_missing_input_is_input_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            classifier = BinarySplitClassifier(compile_predicate("a"))
            layout = prepared_layout(root / "out", classifier)
            pipeline = Pipeline(root / "missing.txt", classifier, layout)

            with pytest.raises(InputIOError):
                pipeline.run()
            assert pipeline.state is PipelineState.FAILED

    def test_read_error_flushes_buffered_output(self) -> None:
        """Lines read before a decode failure still reach their part files."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            input_path = root / "broken.txt"
            input_path.write_bytes(b"apple\ncherry\n" + b"x" * 20000 + b"\xff\n")
            classifier = BinarySplitClassifier(compile_predicate("a"))
            layout = prepared_layout(root / "out", classifier)

            with pytest.raises(InputIOError):
                process_file(
                    input_path,
                    classifier,
                    layout,
                    SinkSettings(buffer_capacity=1000, encoding_errors="strict"),
                )

            # The invalid byte sits past the first decoded chunk.
            assert read_lines(root / "out/matches/broken_matches_part0001.txt") == ["apple"]
            assert read_lines(root / "out/non-matches/broken_nonmatches_part0001.txt") == ["cherry"]

    def test_missing_output_folder_is_output_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            classifier = BinarySplitClassifier(compile_predicate("a"))
            layout = OutputLayout(root / "never-created")

            with pytest.raises(OutputIOError):
                process_file(write_input(root, "fruit.txt", FRUIT), classifier, layout)
