"""Unified error types for the clonedb pipeline.

Step failures never propagate out of the runner: they are carried as the
``reason`` of a :class:`~clonedb.pipeline.types.StepFailure`.  The classes
below give those reasons a stable shape (message, command and a serialisable
context payload) so that the console, the JSONL event log and tests can all
render them the same way.  Configuration problems are raised normally and
handled by the CLI.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "CloneError",
    "StepExecutionError",
    "ProcessSpawnError",
    "DiagnosticOutputError",
    "UnknownTimerError",
    "ConfigurationError",
    "coerce_spawn_error",
]


@dataclass(slots=True, eq=False)
class CloneError(RuntimeError):
    """Base class for clonedb failures.

    Attributes
    ----------
    message:
        Human readable description of the failure.
    command:
        Shell command the failure relates to (``None`` outside step execution).
    context:
        JSON serialisable dictionary with granular diagnostics such as the
        exit code or the captured stderr.
    cause:
        Underlying exception (kept for debugging, not included in ``__str__``).
    """

    message: str
    command: str | None = None
    context: MutableMapping[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message


class StepExecutionError(CloneError):
    """A step ran but its outcome must be reported as a failure."""


class ProcessSpawnError(StepExecutionError):
    """The shell could not be started or the process exited non-zero."""

    @property
    def returncode(self) -> int | None:
        return self.context.get("returncode")


class DiagnosticOutputError(StepExecutionError):
    """The process exited cleanly but left unfiltered output on stderr."""

    @property
    def stderr(self) -> str:
        return str(self.context.get("stderr", ""))


class UnknownTimerError(CloneError, KeyError):
    """``end`` was called for a timer name that was never started."""


class ConfigurationError(CloneError):
    """Raised when the configuration file or a configuration entry is unusable."""


def coerce_spawn_error(
    command: str,
    message: str,
    *,
    returncode: int | None = None,
    stderr: str = "",
    cause: Exception | None = None,
) -> ProcessSpawnError:
    """Create :class:`ProcessSpawnError` with a rich context payload."""

    payload: MutableMapping[str, Any] = {"returncode": returncode}
    if stderr:
        payload["stderr"] = stderr
    if cause:
        payload.setdefault("cause", repr(cause))
    return ProcessSpawnError(message=message, command=command, context=payload, cause=cause)
