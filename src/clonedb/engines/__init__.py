"""Engine registry turning a named configuration into a plan of steps."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from ..pipeline.errors import ConfigurationError
from ..pipeline.types import Plan
from . import shell

PlanBuilder = Callable[[Mapping[str, Any]], Plan]
_ENGINES: dict[str, PlanBuilder] = {}


def register_engine(name: str, builder: PlanBuilder) -> None:
    """Register a plan builder for configurations using ``engine: name``."""

    _ENGINES[name] = builder


def get_engine(name: str) -> PlanBuilder:
    try:
        return _ENGINES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown engine '{name}'",
            context={"engine": name, "available": sorted(_ENGINES)},
        ) from None


def available_engines() -> list[str]:
    return sorted(_ENGINES)


def build_plan(config: Mapping[str, Any]) -> Plan:
    """Resolve ``config['engine']`` and let it build the plan for ``config``."""

    if not isinstance(config, Mapping):
        raise ConfigurationError(
            "Configuration must be an object naming an engine",
            context={"config": type(config).__name__},
        )
    engine = config.get("engine")
    if not engine:
        raise ConfigurationError("Configuration does not name an engine")
    return get_engine(str(engine))(config)


register_engine("shell", shell.build)

__all__ = [
    "PlanBuilder",
    "available_engines",
    "build_plan",
    "get_engine",
    "register_engine",
]
