"""Sequential plan execution with per-step progress and timing."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field

from .executor import ShellExecutor, StepRunner
from .logging_utils import RunLogger, RunStats, format_duration
from .progress import ConsoleProgress, ProgressReporter
from .timers import DEFAULT_TIMER, GLOBAL_TIMER, TimerRegistry
from .types import RunReport, Step, StepOutcome

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PipelineRunner:
    """Run every step of a plan in order.

    A failed step is reported and the loop moves on; the run always ends with
    a total-duration summary.  Nothing raised by the executor is expected
    here, step failures arrive as :class:`~clonedb.pipeline.types.StepFailure`.
    """

    executor: StepRunner = field(default_factory=ShellExecutor)
    progress: ProgressReporter = field(default_factory=ConsoleProgress)
    timers: TimerRegistry = field(default_factory=TimerRegistry)
    corelog: RunLogger | None = None
    stats: RunStats | None = None

    def run(self, plan: Iterable[Step]) -> RunReport:
        report = RunReport()
        self.timers.start(GLOBAL_TIMER)
        for index, step in enumerate(plan):
            report.outcomes.append(self._run_step(index, step))

        report.total = self.timers.end(GLOBAL_TIMER)
        if self.stats is not None:
            self.stats.total_ms = report.total.milliseconds
        total_txt = format_duration(report.total.milliseconds)
        self.progress.summary(f"Done! Total duration: {total_txt}")
        if self.corelog is not None:
            extra = {"stats": asdict(self.stats)} if self.stats is not None else {}
            self.corelog.event(
                "run",
                "stop",
                elapsed_ms=report.total.milliseconds,
                failures=len(report.failures),
                **extra,
            )
            if report.failures:
                self.corelog.warn(
                    "%d of %d steps failed in %s",
                    len(report.failures),
                    len(report.outcomes),
                    total_txt,
                )
        return report

    def _run_step(self, index: int, step: Step) -> StepOutcome:
        self.timers.start(DEFAULT_TIMER)
        indicator = self.progress.start(step.message)
        if self.corelog is not None:
            self.corelog.event(step.message, "start", index=index, command=step.command)

        result = self.executor.run_step(step.command, step.skip_warnings)
        elapsed = self.timers.end(DEFAULT_TIMER)

        if result.success:
            indicator.succeed(f"{step.message} {format_duration(elapsed.milliseconds)}")
            if self.stats is not None:
                self.stats.mark(step.message, elapsed.milliseconds)
            if self.corelog is not None:
                self.corelog.event(step.message, "stop", elapsed_ms=elapsed.milliseconds)
                self.corelog.info(
                    "[%s] ok in %s", step.message, format_duration(elapsed.milliseconds)
                )
            return StepOutcome(index=index, step=step, result=result, elapsed=elapsed)

        # Failed steps keep their timing in the outcome but do not display it.
        indicator.fail()
        reason = result.failure_reason
        self.progress.error(reason)
        logger.debug("Step %d (%s) failed: %r", index, step.message, reason)
        if self.stats is not None:
            self.stats.fail(step.message, step.command, reason)
        if self.corelog is not None:
            self.corelog.event(
                step.message,
                "error",
                error=reason,
                elapsed_ms=elapsed.milliseconds,
                context=dict(reason.context),
            )
            self.corelog.warn("[%s] failed: %s", step.message, type(reason).__name__)
        return StepOutcome(index=index, step=step, result=result, elapsed=elapsed)


def run_plan(
    plan: Iterable[Step],
    *,
    executor: StepRunner | None = None,
    progress: ProgressReporter | None = None,
    corelog: RunLogger | None = None,
    stats: RunStats | None = None,
) -> RunReport:
    """Convenience helper building a :class:`PipelineRunner` with defaults."""

    runner = PipelineRunner(
        executor=executor or ShellExecutor(),
        progress=progress or ConsoleProgress(),
        corelog=corelog,
        stats=stats,
    )
    return runner.run(plan)


__all__ = ["PipelineRunner", "run_plan"]
