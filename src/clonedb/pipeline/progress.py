"""Console progress indicators for running steps."""

from __future__ import annotations

from typing import Any, Protocol

from rich.console import Console
from rich.markup import escape
from rich.status import Status


class StepIndicator(Protocol):
    def succeed(self, text: str) -> None: ...

    def fail(self) -> None: ...


class ProgressReporter(Protocol):
    def start(self, message: str) -> StepIndicator: ...

    def error(self, reason: Any) -> None: ...

    def summary(self, text: str) -> None: ...


class _ConsoleIndicator:
    def __init__(self, console: Console, message: str, status: Status | None):
        self.console = console
        self.message = message
        self._status = status

    def _stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def succeed(self, text: str) -> None:
        self._stop()
        self.console.print(f"[green]✔[/green] {escape(text)}", soft_wrap=True)

    def fail(self) -> None:
        self._stop()
        self.console.print(f"[red]✖[/red] {escape(self.message)}", soft_wrap=True)


class ConsoleProgress:
    """Spinner per step on stdout, failure details on stderr.

    When stdout is not a terminal the spinner is skipped and only the final
    state of each step is printed.
    """

    def __init__(self, console: Console | None = None, err_console: Console | None = None):
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def start(self, message: str) -> _ConsoleIndicator:
        status: Status | None = None
        if self.console.is_terminal:
            status = self.console.status(escape(message), spinner="dots")
            status.start()
        return _ConsoleIndicator(self.console, message, status)

    def error(self, reason: Any) -> None:
        self.err_console.print(f"[red]{escape(str(reason))}[/red]", soft_wrap=True)

    def summary(self, text: str) -> None:
        self.console.print(escape(text))


__all__ = ["ConsoleProgress", "ProgressReporter", "StepIndicator"]
