from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from clonedb.pipeline.errors import DiagnosticOutputError, coerce_spawn_error
from clonedb.pipeline.types import ExecutionResult, StepFailure, StepSuccess


class FakeExecutor:
    """Resolve commands from a table instead of spawning processes."""

    def __init__(self, log: list[tuple[str, Any]], failing: Sequence[str] = ()) -> None:
        self.log = log
        self.failing = set(failing)

    def run_step(
        self, command: str, skip_warnings: Sequence[str] | None = None
    ) -> ExecutionResult:
        self.log.append(("exec", command))
        if command in self.failing:
            return StepFailure(coerce_spawn_error(command, f"boom: {command}", returncode=1))
        if command.startswith("warn:"):
            return StepFailure(DiagnosticOutputError(message=command[5:], command=command))
        return StepSuccess(f"out:{command}")


class _Indicator:
    def __init__(self, log: list[tuple[str, Any]], message: str) -> None:
        self.log = log
        self.message = message

    def succeed(self, text: str) -> None:
        self.log.append(("succeed", text))

    def fail(self) -> None:
        self.log.append(("fail", self.message))


class RecordingProgress:
    def __init__(self, log: list[tuple[str, Any]]) -> None:
        self.log = log
        self.errors: list[Any] = []
        self.summaries: list[str] = []

    def start(self, message: str) -> _Indicator:
        self.log.append(("start", message))
        return _Indicator(self.log, message)

    def error(self, reason: Any) -> None:
        self.log.append(("error", reason))
        self.errors.append(reason)

    def summary(self, text: str) -> None:
        self.log.append(("summary", text))
        self.summaries.append(text)


@pytest.fixture()
def observations() -> list[tuple[str, Any]]:
    return []


@pytest.fixture()
def progress(observations) -> RecordingProgress:
    return RecordingProgress(observations)


@pytest.fixture()
def make_executor(observations):
    def _make(failing: Sequence[str] = ()) -> FakeExecutor:
        return FakeExecutor(observations, failing=failing)

    return _make
