"""Choosing how input files are spread over workers."""

import os
import sys
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from typing import TypeAlias

ExecutorClass: TypeAlias = type[ThreadPoolExecutor] | type[ProcessPoolExecutor] | None

# Forces the file executor: "threads", "processes" or "serial".
LS_EXECUTOR_ENV = "LS_EXECUTOR"


def is_gil_enabled() -> bool:
    """True unless running on a free-threaded interpreter with the GIL off."""
    try:
        return sys._is_gil_enabled()
    except AttributeError:
        return True


def get_executor_class(workers: int = 1, file_count: int = 1) -> ExecutorClass:
    """
    Pick the executor for a run over ``file_count`` inputs with ``workers`` slots.

    None means the files are processed one after another in the calling
    thread, which is also the only mode that draws a line-level progress bar.
    That is always the case when there is nothing to parallelize (one worker
    or one file). Otherwise LS_EXECUTOR wins when set to a known value, and
    failing that, threads are used on a free-threaded build and processes
    everywhere else, since classifying lines is CPU-bound regex work.
    """
    if workers <= 1 or file_count <= 1:
        return None

    forced = os.environ.get(LS_EXECUTOR_ENV, "").lower()
    if forced == "serial":
        return None
    if forced == "threads":
        return ThreadPoolExecutor
    if forced == "processes":
        return ProcessPoolExecutor

    return ProcessPoolExecutor if is_gil_enabled() else ThreadPoolExecutor


def describe_executor(executor_class: ExecutorClass) -> str:
    """Name an executor class the way LS_EXECUTOR spells it."""
    if executor_class is None:
        return "serial"
    if executor_class is ThreadPoolExecutor:
        return "threads"
    return "processes"
