"""Classify-and-chunk pipeline for a single input file."""

import logging
import threading
import time
from pathlib import Path

from line_splitter.classify.policy import Classifier
from line_splitter.classify.types import OutputClass
from line_splitter.config import SinkSettings
from line_splitter.errors import PipelineStateError, SplitterError
from line_splitter.pipeline.types import FileResult, PipelineState, ProgressCallback
from line_splitter.sink.chunked import ChunkedSink
from line_splitter.sink.naming import OutputLayout
from line_splitter.source.reader import iter_lines

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Drive one input file through a classifier into per-class sinks.

    A pipeline runs once: IDLE -> READING -> DRAINING -> DONE, or FAILED if
    anything raises. Sinks are created fresh for each pipeline, so part
    numbering restarts at 1 for every input file.
    """

    def __init__(
        self,
        input_path: str | Path,
        classifier: Classifier,
        layout: OutputLayout,
        settings: SinkSettings | None = None,
    ):
        self.input_path = Path(input_path)
        self.classifier = classifier
        self.layout = layout
        self.settings = settings or SinkSettings()
        self.state = PipelineState.IDLE
        self.sinks: dict[OutputClass, ChunkedSink] = {}

    @property
    def base_name(self) -> str:
        return self.input_path.stem

    def run(
        self,
        progress: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> FileResult:
        """
        Process the whole input file and return its counters.

        ``progress`` is called with the running result every
        ``settings.progress_interval`` lines and once at the end. When
        ``cancel`` is set, reading stops after the current line and every
        sink is still finished, so nothing already read is lost.
        """
        if self.state is not PipelineState.IDLE:
            raise PipelineStateError(
                f"pipeline for {self.input_path.name} already {self.state.value}",
                self.input_path,
            )

        result = FileResult(input_path=self.input_path)
        start = time.perf_counter()

        try:
            self._open_sinks()
            result.class_counts = {output_class: 0 for output_class in self.sinks}
            self.state = PipelineState.READING
            self._route_lines(result, progress, cancel)

            self.state = PipelineState.DRAINING
            for sink in self.sinks.values():
                sink.finish()
        except BaseException:
            self.state = PipelineState.FAILED
            self._abort_sinks()
            raise
        finally:
            result.elapsed = time.perf_counter() - start
            result.parts = {
                output_class: list(sink.parts) for output_class, sink in self.sinks.items()
            }

        self.state = PipelineState.DONE
        if progress is not None:
            progress(result)
        return result

    def _open_sinks(self) -> None:
        for output_class in self.classifier.classes:
            self.sinks[output_class] = ChunkedSink(
                self.layout.directory_for(output_class),
                self.base_name,
                output_class.file_label,
                buffer_capacity=self.settings.buffer_capacity,
                part_capacity=self.settings.part_capacity,
            )

    def _route_lines(
        self,
        result: FileResult,
        progress: ProgressCallback | None,
        cancel: threading.Event | None,
    ) -> None:
        classify = self.classifier.classify
        sinks = self.sinks
        counts = result.class_counts
        interval = self.settings.progress_interval

        for line in iter_lines(self.input_path, errors=self.settings.encoding_errors):
            result.lines_read += 1

            output_class = classify(line)
            if output_class is None:
                result.lines_dropped += 1
            else:
                sinks[output_class].append(line)
                counts[output_class] += 1

            if progress is not None and result.lines_read % interval == 0:
                progress(result)

            if cancel is not None and cancel.is_set():
                result.cancelled = True
                logger.warning(
                    "Cancelled %s after %d lines; keeping output written so far",
                    self.input_path.name,
                    result.lines_read,
                )
                break

    def _abort_sinks(self) -> None:
        for output_class, sink in self.sinks.items():
            try:
                sink.abort()
            except SplitterError as exc:
                logger.warning(
                    "Could not flush %s output for %s: %s",
                    output_class.value,
                    self.input_path.name,
                    exc,
                )


def process_file(
    input_path: str | Path,
    classifier: Classifier,
    layout: OutputLayout,
    settings: SinkSettings | None = None,
    progress: ProgressCallback | None = None,
    cancel: threading.Event | None = None,
) -> FileResult:
    """Run a fresh pipeline over one input file."""
    pipeline = Pipeline(input_path, classifier, layout, settings)
    return pipeline.run(progress=progress, cancel=cancel)
