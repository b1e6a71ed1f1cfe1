from line_splitter.pipeline.pipeline import Pipeline, process_file
from line_splitter.pipeline.types import FileResult, PipelineState, ProgressCallback

__all__ = ["FileResult", "Pipeline", "PipelineState", "ProgressCallback", "process_file"]
