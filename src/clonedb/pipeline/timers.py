"""Named stopwatches used to time individual steps and the whole run."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Final

from .errors import UnknownTimerError
from .types import Elapsed

DEFAULT_TIMER: Final[str] = "default"
GLOBAL_TIMER: Final[str] = "global"


class TimerRegistry:
    """Map of timer name to start instant.

    Starting a name again overwrites the previous instant.  ``end`` keeps the
    entry, so a timer can be read more than once after a single ``start``.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self._clock = clock
        self._starts: dict[str, float] = {}

    def start(self, name: str = DEFAULT_TIMER) -> None:
        self._starts[name] = self._clock()

    def end(self, name: str = DEFAULT_TIMER) -> Elapsed:
        try:
            started = self._starts[name]
        except KeyError:
            raise UnknownTimerError(
                f"Timer '{name}' was never started", context={"timer": name}
            ) from None
        return Elapsed(max(0.0, (self._clock() - started) * 1000.0))

    def is_running(self, name: str = DEFAULT_TIMER) -> bool:
        return name in self._starts


__all__ = ["TimerRegistry", "DEFAULT_TIMER", "GLOBAL_TIMER"]
