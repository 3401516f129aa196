"""
clonedb: clone databases by running pre-configured shell command plans.
"""

__version__ = "1.0.0"

from .pipeline import (
    PipelineRunner,
    ShellExecutor,
    Step,
    TimerRegistry,
    plan_from_entries,
    filter_warnings,
    run_plan,
)

__all__ = [
    "PipelineRunner",
    "ShellExecutor",
    "Step",
    "TimerRegistry",
    "__version__",
    "plan_from_entries",
    "filter_warnings",
    "run_plan",
]
