"""Configuration file handling and runtime settings for clonedb."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from .pipeline.errors import ConfigurationError

CONFIG_ENV_VAR: Final[str] = "CLONEDB_CONFIG"
CONFIG_FILE_NAME: Final[str] = ".clonedb"

SAMPLE_CONFIG: Final[dict[str, Any]] = {
    "staging-from-production": {
        "engine": "shell",
        "steps": [
            {
                "message": "Dumping production database",
                "command": "pg_dump --no-owner --format=custom --file=/tmp/clonedb.dump production",
            },
            {
                "message": "Dropping staging database",
                "command": "dropdb --if-exists staging",
                "skipWarnings": ["does not exist, skipping"],
            },
            {
                "message": "Creating staging database",
                "command": "createdb staging",
            },
            {
                "message": "Restoring dump into staging",
                "command": "pg_restore --no-owner --dbname=staging /tmp/clonedb.dump",
                "skipWarnings": ["NOTICE", "already exists"],
            },
        ],
    }
}


def default_config_path() -> Path:
    """Return ``$CLONEDB_CONFIG`` when set, ``~/.clonedb`` otherwise."""

    override = os.getenv(CONFIG_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_FILE_NAME


def load_configs(path: Path | str | None = None) -> dict[str, dict[str, Any]]:
    """Read the named configurations from ``path``."""

    config_path = Path(path) if path is not None else default_config_path()
    try:
        raw = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigurationError(
            f"Config file not found at {config_path}. Run 'clonedb --init' to create one.",
            context={"path": str(config_path)},
            cause=exc,
        ) from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Config file {config_path} is not valid JSON: {exc}",
            context={"path": str(config_path), "line": exc.lineno},
            cause=exc,
        ) from exc
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a JSON object",
            context={"path": str(config_path)},
        )
    return data


def init_config(path: Path | str | None = None) -> Path:
    """Write the sample configuration, refusing to overwrite an existing file."""

    config_path = Path(path) if path is not None else default_config_path()
    if config_path.exists():
        raise ConfigurationError("Config file already exists.", context={"path": str(config_path)})
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(SAMPLE_CONFIG, indent=2) + "\n", encoding="utf-8")
    return config_path


@dataclass(slots=True)
class CliSettings:
    """Validated runtime options for a single clonedb invocation."""

    config_path: Path
    log_file: Path | None = None
    console_level: int = logging.ERROR
    step_timeout: float | None = None
    fail_exit_code: int = 1

    def __post_init__(self) -> None:
        self.config_path = Path(self.config_path).expanduser()
        if self.log_file is not None:
            self.log_file = Path(self.log_file).expanduser()
        if self.step_timeout is not None and self.step_timeout <= 0:
            raise ValueError("step_timeout must be > 0")
        if not 0 <= self.fail_exit_code <= 255:
            raise ValueError("fail_exit_code must be between 0 and 255")

    @classmethod
    def from_options(
        cls,
        *,
        config_path: Path | None = None,
        log_file: Path | None = None,
        verbose: bool = False,
        step_timeout: float | None = None,
    ) -> CliSettings:
        return cls(
            config_path=config_path or default_config_path(),
            log_file=log_file,
            console_level=logging.INFO if verbose else logging.ERROR,
            step_timeout=step_timeout,
        )


__all__ = [
    "CONFIG_ENV_VAR",
    "CliSettings",
    "SAMPLE_CONFIG",
    "default_config_path",
    "init_config",
    "load_configs",
]
