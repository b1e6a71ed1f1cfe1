"""Line Splitter - classify lines of large text files into size-capped part files."""

from line_splitter.pipeline import process_file
from line_splitter.runner.run import main_run, run

__all__ = ["main_run", "process_file", "run"]
