"""Command execution pipeline: run a plan of shell steps in order."""

from .errors import (
    CloneError,
    ConfigurationError,
    DiagnosticOutputError,
    ProcessSpawnError,
    StepExecutionError,
    UnknownTimerError,
)
from .executor import ShellExecutor, StepRunner
from .filtering import filter_warnings
from .progress import ConsoleProgress, ProgressReporter
from .runner import PipelineRunner, run_plan
from .timers import DEFAULT_TIMER, GLOBAL_TIMER, TimerRegistry
from .types import (
    Elapsed,
    ExecutionResult,
    Plan,
    RunReport,
    Step,
    StepFailure,
    StepOutcome,
    StepSuccess,
    plan_from_entries,
)

__all__ = [
    "CloneError",
    "ConfigurationError",
    "ConsoleProgress",
    "DEFAULT_TIMER",
    "DiagnosticOutputError",
    "Elapsed",
    "ExecutionResult",
    "GLOBAL_TIMER",
    "PipelineRunner",
    "Plan",
    "ProcessSpawnError",
    "ProgressReporter",
    "RunReport",
    "ShellExecutor",
    "Step",
    "StepExecutionError",
    "StepFailure",
    "StepOutcome",
    "StepRunner",
    "StepSuccess",
    "TimerRegistry",
    "UnknownTimerError",
    "plan_from_entries",
    "filter_warnings",
    "run_plan",
]
