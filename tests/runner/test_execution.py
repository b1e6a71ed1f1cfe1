"""Tests for execution-policy helpers."""

from line_splitter.runner import execution


def test_executor_override_modes(monkeypatch) -> None:
    monkeypatch.setenv(execution.LS_EXECUTOR_ENV, "serial")
    assert execution.describe_executor(execution.get_executor_class(4, 10)) == "serial"

    monkeypatch.setenv(execution.LS_EXECUTOR_ENV, "threads")
    assert execution.describe_executor(execution.get_executor_class(4, 10)) == "threads"

    monkeypatch.setenv(execution.LS_EXECUTOR_ENV, "processes")
    assert execution.describe_executor(execution.get_executor_class(4, 10)) == "processes"


def test_executor_auto_policy(monkeypatch) -> None:
    monkeypatch.delenv(execution.LS_EXECUTOR_ENV, raising=False)

    monkeypatch.setattr(execution, "is_gil_enabled", lambda: True)
    assert execution.describe_executor(execution.get_executor_class(4, 10)) == "processes"

    monkeypatch.setattr(execution, "is_gil_enabled", lambda: False)
    assert execution.describe_executor(execution.get_executor_class(4, 10)) == "threads"


def test_single_worker_or_file_is_serial(monkeypatch) -> None:
    monkeypatch.setenv(execution.LS_EXECUTOR_ENV, "threads")

    assert execution.get_executor_class(1, 10) is None
    assert execution.get_executor_class(8, 1) is None


def test_unknown_override_falls_back_to_auto(monkeypatch) -> None:
    monkeypatch.setenv(execution.LS_EXECUTOR_ENV, "gpu")
    monkeypatch.setattr(execution, "is_gil_enabled", lambda: True)

    assert execution.get_executor_class(2, 2) is execution.ProcessPoolExecutor
