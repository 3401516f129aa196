"""Shared definitions for pipeline steps and their outcomes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, Union

from .errors import ConfigurationError, StepExecutionError


@dataclass(slots=True, frozen=True)
class Step:
    """One shell command of a clone plan."""

    message: str
    command: str
    skip_warnings: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, entry: Mapping[str, Any]) -> Step:
        """Build a step from a configuration entry.

        Accepts both ``skipWarnings`` (the configuration file spelling) and
        ``skip_warnings``.
        """

        try:
            message = entry["message"]
            command = entry["command"]
        except KeyError as exc:
            raise ConfigurationError(
                f"Step is missing required key {exc.args[0]!r}",
                context={"entry": dict(entry)},
            ) from exc
        skip = entry.get("skipWarnings", entry.get("skip_warnings")) or ()
        if isinstance(skip, str):
            skip = (skip,)
        return cls(message=str(message), command=str(command), skip_warnings=tuple(skip))


Plan = tuple[Step, ...]


def plan_from_entries(steps: Iterable[Step | Mapping[str, Any]]) -> Plan:
    """Return an ordered, immutable plan from steps or raw mappings."""

    plan: list[Step] = []
    for entry in steps:
        plan.append(entry if isinstance(entry, Step) else Step.from_mapping(entry))
    return tuple(plan)


@dataclass(slots=True, frozen=True)
class StepSuccess:
    stdout: str
    success: Literal[True] = field(default=True, init=False)

    @property
    def failure_reason(self) -> None:
        return None


@dataclass(slots=True, frozen=True)
class StepFailure:
    reason: StepExecutionError
    stdout: str = ""
    success: Literal[False] = field(default=False, init=False)

    @property
    def failure_reason(self) -> StepExecutionError:
        return self.reason


ExecutionResult = Union[StepSuccess, StepFailure]


@dataclass(slots=True, frozen=True)
class Elapsed:
    """Elapsed wall time between a timer start and end."""

    milliseconds: float

    @property
    def seconds(self) -> float:
        return self.milliseconds / 1000.0


@dataclass(slots=True, frozen=True)
class StepOutcome:
    index: int
    step: Step
    result: ExecutionResult
    elapsed: Elapsed | None = None

    @property
    def success(self) -> bool:
        return self.result.success


@dataclass(slots=True)
class RunReport:
    """Ordered outcomes of one plan invocation."""

    outcomes: list[StepOutcome] = field(default_factory=list)
    total: Elapsed | None = None

    @property
    def failures(self) -> Sequence[StepOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]

    @property
    def succeeded(self) -> bool:
        return not self.failures


__all__ = [
    "Step",
    "Plan",
    "plan_from_entries",
    "StepSuccess",
    "StepFailure",
    "ExecutionResult",
    "Elapsed",
    "StepOutcome",
    "RunReport",
]
