from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


def _make_json_safe(obj: Any) -> Any:
    """Recursively convert values into JSON-serialisable types."""
    if isinstance(obj, Path):
        return obj.as_posix()
    if isinstance(obj, BaseException):
        return f"{type(obj).__name__}: {obj}"
    if isinstance(obj, dict):
        return {str(key): _make_json_safe(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [_make_json_safe(value) for value in obj]
    return obj


class JSONLWriter:
    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.write_text("", encoding="utf-8")

    def emit(self, record: dict[str, Any]) -> None:
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(_make_json_safe(record), ensure_ascii=False) + "\n")
        except OSError as exc:
            logging.getLogger(__name__).warning(
                "Could not write to log file %s: %s", self.path, exc
            )


@dataclass
class RunStats:
    run_id: str
    config_name: str = ""
    step_timings_ms: dict[str, float] = field(default_factory=dict)
    failures: list[dict[str, Any]] = field(default_factory=list)
    total_ms: float | None = None

    def mark(self, step: str, elapsed_ms: float) -> None:
        self.step_timings_ms[step] = self.step_timings_ms.get(step, 0.0) + float(elapsed_ms)

    def fail(self, step: str, command: str, error: BaseException) -> None:
        self.failures.append(
            {
                "step": step,
                "command": command,
                "error": f"{type(error).__name__}: {error}",
            }
        )


class RunLogger:
    def __init__(
        self,
        run_id: str,
        jsonl_path: Path | None = None,
        console_level: int = logging.ERROR,
    ):
        self.run_id = run_id
        self.jsonl = JSONLWriter(jsonl_path) if jsonl_path is not None else None
        self.log = logging.getLogger(f"clonedb.run.{run_id}")
        self.log.setLevel(console_level)
        if not self.log.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(console_level)
            fmt = logging.Formatter("[%(asctime)s] [%(levelname)s] %(message)s", datefmt="%H:%M")
            handler.setFormatter(fmt)
            self.log.addHandler(handler)

    def event(self, step: str, event: str, **fields: Any) -> None:
        if self.jsonl is None:
            return
        record = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime()),
            "run_id": self.run_id,
            "step": step,
            "event": event,
        }
        record.update(fields)
        self.jsonl.emit(record)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log an informational message forwarding formatting arguments."""

        self.log.info(message, *args, **kwargs)

    def warn(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log.warning(message, *args, **kwargs)


def format_duration(milliseconds: float) -> str:
    """Return a compact human readable duration such as ``850ms`` or ``2m 5.3s``."""

    safe_ms = max(0.0, float(milliseconds))
    if safe_ms < 999.5:
        return f"{int(round(safe_ms))}ms"

    seconds = safe_ms / 1000.0
    if seconds < 60:
        return f"{seconds:.1f}s"

    total_seconds = int(seconds)
    days, remainder = divmod(total_seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, secs = divmod(remainder, 60)

    parts: list[str] = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs:
        parts.append(f"{secs}s")
    return " ".join(parts)


__all__ = [
    "JSONLWriter",
    "RunStats",
    "RunLogger",
    "format_duration",
]
