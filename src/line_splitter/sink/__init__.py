from line_splitter.sink.chunked import ChunkedSink
from line_splitter.sink.naming import OutputLayout, part_file_name

__all__ = ["ChunkedSink", "OutputLayout", "part_file_name"]
