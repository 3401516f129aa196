"""Regression tests for the clonedb Typer CLI."""

from __future__ import annotations

import json
import sys

import pytest
from typer.testing import CliRunner

from clonedb import cli, config


@pytest.fixture()
def config_file(tmp_path, monkeypatch):
    path = tmp_path / ".clonedb"
    monkeypatch.setenv(config.CONFIG_ENV_VAR, str(path))
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.delenv("TTY_COMPATIBLE", raising=False)
    return path


def _write(path, payload) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_config_path_prints_location(config_file):
    result = CliRunner().invoke(cli.app, ["--config-path"])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == str(config_file)


def test_init_creates_file_once(config_file):
    runner = CliRunner()

    first = runner.invoke(cli.app, ["--init"])
    second = runner.invoke(cli.app, ["--init"])

    assert first.exit_code == 0, first.output
    assert "Config file created" in first.output
    assert json.loads(config_file.read_text()) == config.SAMPLE_CONFIG
    assert second.exit_code == 1
    assert "Config file already exists." in second.output


def test_list_prints_configuration_names(config_file):
    _write(config_file, {"alpha": {"engine": "shell"}, "beta": {"engine": "shell"}})

    result = CliRunner().invoke(cli.app, ["-l"])

    assert result.exit_code == 0, result.output
    assert result.output.split() == ["alpha", "beta"]


def test_unknown_configuration_is_reported(config_file):
    _write(config_file, {"alpha": {"engine": "shell", "steps": []}})

    result = CliRunner().invoke(cli.app, ["missing"])

    assert result.exit_code == 1
    assert "Configuration not found." in result.output


@pytest.mark.parametrize("entry", ["x", 3, ["shell"]])
def test_non_object_configuration_fails_cleanly(config_file, entry):
    _write(config_file, {"alpha": entry})

    result = CliRunner().invoke(cli.app, ["alpha"])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "must be an object" in result.output
    assert "Traceback" not in result.output


def test_empty_configuration_is_found_but_lacks_an_engine(config_file):
    _write(config_file, {"alpha": {}})

    result = CliRunner().invoke(cli.app, ["alpha"])

    assert result.exit_code == 1
    assert "Configuration not found." not in result.output
    assert "does not name an engine" in result.output


def test_missing_config_file_is_reported(config_file):
    result = CliRunner().invoke(cli.app, ["alpha"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_run_delegates_to_runner(config_file, monkeypatch):
    _write(config_file, {"alpha": {"engine": "shell", "steps": []}})
    captured: dict[str, object] = {}

    def _fake_run(name, selected, settings, *, console=None):
        captured["name"] = name
        captured["selected"] = selected
        captured["settings"] = settings
        return 0

    monkeypatch.setattr(cli, "run_configuration", _fake_run)

    result = CliRunner().invoke(cli.app, ["--config", "alpha", "--timeout", "30"])

    assert result.exit_code == 0, result.output
    assert captured["name"] == "alpha"
    assert captured["selected"] == {"engine": "shell", "steps": []}
    assert captured["settings"].step_timeout == 30.0
    assert captured["settings"].config_path == config_file


def test_select_prompts_for_configuration(config_file, monkeypatch):
    _write(config_file, {"alpha": {"engine": "shell"}, "beta": {"engine": "shell"}})
    chosen: list[str] = []

    def _fake_run(name, selected, settings, *, console=None):
        chosen.append(name)
        return 0

    monkeypatch.setattr(cli, "run_configuration", _fake_run)

    result = CliRunner().invoke(cli.app, ["--select", "alpha"], input="beta\n")

    assert result.exit_code == 0, result.output
    assert chosen == ["beta"]


def test_dry_run_prints_plan_without_executing(config_file, tmp_path):
    marker = tmp_path / "marker"
    _write(
        config_file,
        {
            "alpha": {
                "engine": "shell",
                "steps": [{"message": "Touch", "command": f"touch {marker}"}],
            }
        },
    )

    result = CliRunner().invoke(cli.app, ["alpha", "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "Touch" in result.output
    assert "touch" in result.output
    assert not marker.exists()


def test_malformed_engine_is_reported(config_file):
    _write(config_file, {"alpha": {"engine": "shell", "steps": "nope"}})

    result = CliRunner().invoke(cli.app, ["alpha"])

    assert result.exit_code == 1
    assert "steps" in result.output


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
def test_run_reports_steps_and_exit_code(config_file, tmp_path):
    log_file = tmp_path / "events.jsonl"
    _write(
        config_file,
        {
            "alpha": {
                "engine": "shell",
                "steps": [
                    {"message": "Drop", "command": "true", "skipWarnings": ["NOTICE"]},
                    {
                        "message": "Create",
                        "command": "sh -c 'echo NOTICE: exists 1>&2'",
                        "skipWarnings": ["NOTICE"],
                    },
                    {"message": "Bad", "command": "sh -c 'exit 1'"},
                ],
            }
        },
    )

    result = CliRunner().invoke(cli.app, ["alpha", "--log-file", str(log_file)])

    assert result.exit_code == 1
    assert "✔ Drop" in result.output
    assert "✔ Create" in result.output
    assert "✖ Bad" in result.output
    assert "Done! Total duration:" in result.output
    events = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert events[0]["event"] == "start" and events[0]["config"] == "alpha"
    assert sum(1 for event in events if event["event"] == "error") == 1
    assert events[-1]["event"] == "stop"
    assert events[-1]["stats"]["config_name"] == "alpha"
    assert [failure["step"] for failure in events[-1]["stats"]["failures"]] == ["Bad"]
    assert sorted(events[-1]["stats"]["step_timings_ms"]) == ["Create", "Drop"]
