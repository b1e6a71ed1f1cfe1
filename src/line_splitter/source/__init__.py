from line_splitter.source.reader import iter_lines

__all__ = ["iter_lines"]
