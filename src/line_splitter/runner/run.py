import logging
import os
import sys
import threading
import time
from concurrent.futures import Future, ProcessPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from tqdm import tqdm

from line_splitter.classify.policy import Classifier, build_classifier
from line_splitter.classify.predicate import compile_predicate
from line_splitter.classify.types import OutputClass
from line_splitter.config import INPUT_GLOB, SinkSettings, SplitConfig
from line_splitter.errors import ConfigurationError, SplitterError
from line_splitter.pipeline import FileResult, process_file
from line_splitter.runner.execution import (
    LS_EXECUTOR_ENV,
    ExecutorClass,
    describe_executor,
    get_executor_class,
)
from line_splitter.sink.naming import OutputLayout

logger = logging.getLogger(__name__)

DISPLAY_NAME_WIDTH = 40


@dataclass
class RunSummary:
    """Outcome of a whole run, in input discovery order."""

    results: list[FileResult] = field(default_factory=list)
    failures: list[tuple[Path, str]] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def lines_read(self) -> int:
        return sum(result.lines_read for result in self.results)


def discover_inputs(input_dir: str | Path, pattern: str = INPUT_GLOB) -> list[Path]:
    """List matching files directly inside ``input_dir``, sorted by name."""
    folder = Path(input_dir)
    if not folder.is_dir():
        raise ConfigurationError(f"Folder not found: {folder}", folder)

    files = sorted(path for path in folder.glob(pattern) if path.is_file())
    if not files:
        raise ConfigurationError(f"No {pattern} files found in {folder}", folder)
    return files


def display_name(name: str, width: int = DISPLAY_NAME_WIDTH) -> str:
    """Shorten long file names from the left so the informative tail stays visible."""
    if len(name) <= width:
        return name
    return "..." + name[-(width - 3) :]


def describe_counts(result: FileResult) -> str:
    if OutputClass.SELECTED in result.class_counts:
        return (
            f"{result.count(OutputClass.SELECTED):,} selected, "
            f"{result.lines_dropped:,} dropped"
        )
    return (
        f"{result.count(OutputClass.MATCH):,} matches, "
        f"{result.count(OutputClass.NON_MATCH):,} non-matches"
    )


def _process_task(
    input_path: Path,
    classifier: Classifier,
    layout: OutputLayout,
    settings: SinkSettings,
    cancel: threading.Event | None = None,
) -> FileResult:
    """Executor entry point; module level so process pools can pickle it."""
    return process_file(input_path, classifier, layout, settings, cancel=cancel)


def _log_result(result: FileResult, settings: SinkSettings) -> None:
    logger.info(
        "Complete: %s lines | %s (%.0f lines/sec)",
        f"{result.lines_read:,}",
        describe_counts(result),
        result.lines_per_second,
    )
    if settings.chunked and any(len(parts) > 1 for parts in result.parts.values()):
        created = ", ".join(
            f"{len(parts)} {output_class.value} part(s)"
            for output_class, parts in result.parts.items()
        )
        logger.info("Files created: %s", created)


def run(config: SplitConfig, cancel: threading.Event | None = None) -> RunSummary:
    """
    Classify every input file of ``config`` into chunked outputs.

    The pattern and settings are checked before any output folder is
    created. A file that fails with an I/O error is logged and skipped
    unless ``config.fail_fast`` is set, in which case the error is raised.
    """
    total_start = time.perf_counter()

    predicate = compile_predicate(config.pattern)
    classifier = build_classifier(config.policy, predicate, config.polarity)
    config.validate()
    inputs = discover_inputs(config.input_dir)

    layout = OutputLayout(config.output_dir)
    directories = layout.prepare(classifier.classes)

    executor_class = get_executor_class(config.workers, len(inputs))
    executor_name = describe_executor(executor_class)
    settings = config.settings
    executor_override = os.environ.get(LS_EXECUTOR_ENV, "")
    override_info = f", {LS_EXECUTOR_ENV}={executor_override}" if executor_override else ""

    logger.info(
        "Found %d %s file(s) to process (policy=%s%s, workers=%d, executor=%s%s)",
        len(inputs),
        INPUT_GLOB,
        config.policy.value,
        f"/{config.polarity.value}" if config.polarity is not None else "",
        config.workers,
        executor_name,
        override_info,
    )
    for directory in directories:
        logger.info("Output folder: %s", directory)
    if settings.chunked:
        logger.info("Chunking: Enabled (%s lines per file)", f"{settings.part_capacity:,}")
    else:
        logger.info("Chunking: Disabled (single output files)")

    summary = RunSummary()
    if executor_class is None:
        _run_serial(inputs, classifier, layout, settings, config.fail_fast, cancel, summary)
    else:
        _run_concurrent(
            inputs, classifier, layout, settings, config, executor_class, cancel, summary
        )

    summary.elapsed = time.perf_counter() - total_start
    logger.info(
        "All files processed: %d ok, %d failed, %s lines in %.2fs",
        len(summary.results),
        len(summary.failures),
        f"{summary.lines_read:,}",
        summary.elapsed,
    )
    return summary


def _run_serial(
    inputs: list[Path],
    classifier: Classifier,
    layout: OutputLayout,
    settings: SinkSettings,
    fail_fast: bool,
    cancel: threading.Event | None,
    summary: RunSummary,
) -> None:
    show_progress = sys.stderr.isatty()

    for index, input_path in enumerate(inputs, start=1):
        if cancel is not None and cancel.is_set():
            logger.warning("Cancelled before %s", input_path.name)
            break

        name = display_name(input_path.name)
        logger.info("Processing %d/%d: %s", index, len(inputs), name)

        with tqdm(
            desc=name,
            unit=" lines",
            unit_scale=True,
            leave=False,
            disable=not show_progress,
        ) as bar:

            def report(result: FileResult) -> None:
                bar.update(result.lines_read - bar.n)
                bar.set_postfix_str(describe_counts(result), refresh=False)

            try:
                result = process_file(
                    input_path, classifier, layout, settings, progress=report, cancel=cancel
                )
            except SplitterError as exc:
                logger.error("Failed %s: %s", input_path.name, exc)
                summary.failures.append((input_path, str(exc)))
                if fail_fast:
                    raise
                continue

        summary.results.append(result)
        _log_result(result, settings)


def _run_concurrent(
    inputs: list[Path],
    classifier: Classifier,
    layout: OutputLayout,
    settings: SinkSettings,
    config: SplitConfig,
    executor_class: ExecutorClass,
    cancel: threading.Event | None,
    summary: RunSummary,
) -> None:
    # Events cannot be pickled into worker processes.
    task_cancel = None if executor_class is ProcessPoolExecutor else cancel
    results: dict[Path, FileResult] = {}

    with executor_class(max_workers=config.workers) as executor:
        futures: dict[Future, Path] = {
            executor.submit(_process_task, path, classifier, layout, settings, task_cancel): path
            for path in inputs
        }
        with tqdm(
            total=len(futures),
            desc="Files",
            unit="file",
            disable=not sys.stderr.isatty(),
        ) as bar:
            for future, input_path in futures.items():
                try:
                    results[input_path] = future.result()
                except SplitterError as exc:
                    logger.error("Failed %s: %s", input_path.name, exc)
                    summary.failures.append((input_path, str(exc)))
                    if config.fail_fast:
                        for pending, pending_path in futures.items():
                            if pending.cancel() or pending_path in results:
                                continue
                            if pending.done() and pending.exception() is None:
                                results[pending_path] = pending.result()
                        _record_results(inputs, results, settings, summary)
                        raise
                finally:
                    bar.update(1)

    _record_results(inputs, results, settings, summary)


def _record_results(
    inputs: list[Path],
    results: dict[Path, FileResult],
    settings: SinkSettings,
    summary: RunSummary,
) -> None:
    """Log finished files and add them to ``summary`` in discovery order."""
    for input_path in inputs:
        result = results.get(input_path)
        if result is not None:
            logger.info("Processed %s", display_name(input_path.name))
            summary.results.append(result)
            _log_result(result, settings)


def main_run(config: SplitConfig) -> int:
    """Run and translate the summary into a process exit status."""
    summary = run(config)
    if not summary.ok:
        for input_path, reason in summary.failures:
            logger.error("Skipped %s: %s", input_path, reason)
        return 1
    return 0
