from line_splitter.runner.run import RunSummary, discover_inputs, main_run, run

__all__ = ["RunSummary", "discover_inputs", "main_run", "run"]
