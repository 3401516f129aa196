"""Engine whose steps are written out literally in the configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..pipeline.errors import ConfigurationError
from ..pipeline.types import Plan, plan_from_entries


def build(config: Mapping[str, Any]) -> Plan:
    steps = config.get("steps")
    if not isinstance(steps, list):
        raise ConfigurationError(
            "The shell engine expects a 'steps' list",
            context={"steps": type(steps).__name__},
        )
    for entry in steps:
        if not isinstance(entry, Mapping):
            raise ConfigurationError(
                "Each step must be an object with 'message' and 'command'",
                context={"entry": repr(entry)},
            )
    return plan_from_entries(steps)
