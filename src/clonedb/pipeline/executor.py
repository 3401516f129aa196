"""Run a single plan step as a shell process."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from .errors import DiagnosticOutputError, coerce_spawn_error
from .filtering import filter_warnings
from .types import ExecutionResult, StepFailure, StepSuccess

logger = logging.getLogger(__name__)


class StepRunner(Protocol):
    def run_step(
        self, command: str, skip_warnings: Sequence[str] | None = None
    ) -> ExecutionResult: ...


def _kill_process_group(proc: subprocess.Popen) -> None:
    """Kill the shell and every process it started in its session."""

    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        proc.kill()


@dataclass(slots=True)
class ShellExecutor:
    """Execute commands through the platform shell and classify the outcome.

    A step fails when the process cannot be started, exits non-zero, or
    leaves anything on stderr that ``skip_warnings`` does not filter out.
    The last rule applies even to a zero exit status, and whitespace counts.

    Each command runs in its own session so that a timeout kills the whole
    process group, not just the shell.
    """

    encoding: str = "utf-8"
    timeout: float | None = None

    def run_step(
        self, command: str, skip_warnings: Sequence[str] | None = None
    ) -> ExecutionResult:
        logger.debug("Executing: %s", command)
        try:
            proc = subprocess.Popen(
                command,
                shell=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding=self.encoding,
                errors="replace",
                start_new_session=os.name == "posix",
            )
        except OSError as exc:
            return StepFailure(
                coerce_spawn_error(command, f"Command failed to start: {exc}", cause=exc)
            )

        with proc:
            try:
                stdout, stderr = proc.communicate(timeout=self.timeout)
            except subprocess.TimeoutExpired as exc:
                _kill_process_group(proc)
                stdout, _ = proc.communicate()
                logger.debug("Killed process group %s for: %s", proc.pid, command)
                return StepFailure(
                    coerce_spawn_error(
                        command,
                        f"Command timed out after {exc.timeout}s: {command}",
                        cause=exc,
                    ),
                    stdout=stdout or "",
                )

        stdout = stdout or ""
        stderr = stderr or ""
        if proc.returncode != 0:
            message = f"Command failed: {command}"
            if stderr.strip():
                message = f"{message}\n{stderr.rstrip()}"
            logger.debug("Exit status %s for: %s", proc.returncode, command)
            return StepFailure(
                coerce_spawn_error(
                    command, message, returncode=proc.returncode, stderr=stderr
                ),
                stdout=stdout,
            )

        remaining = filter_warnings(stderr, skip_warnings)
        if remaining:
            return StepFailure(
                DiagnosticOutputError(
                    message=remaining.rstrip() or repr(remaining),
                    command=command,
                    context={"returncode": proc.returncode, "stderr": remaining},
                ),
                stdout=stdout,
            )
        return StepSuccess(stdout)


__all__ = ["ShellExecutor", "StepRunner"]
