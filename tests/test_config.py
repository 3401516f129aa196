from __future__ import annotations

import json
import logging

import pytest

from clonedb import config
from clonedb.pipeline.errors import ConfigurationError


def test_env_var_overrides_default_path(monkeypatch, tmp_path):
    target = tmp_path / "custom.json"
    monkeypatch.setenv(config.CONFIG_ENV_VAR, str(target))

    assert config.default_config_path() == target


def test_default_path_is_in_home(monkeypatch, tmp_path):
    monkeypatch.delenv(config.CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    assert config.default_config_path() == tmp_path / ".clonedb"


def test_init_writes_sample_and_refuses_overwrite(tmp_path):
    path = tmp_path / ".clonedb"

    created = config.init_config(path)

    assert created == path
    assert json.loads(path.read_text()) == config.SAMPLE_CONFIG
    with pytest.raises(ConfigurationError, match="already exists"):
        config.init_config(path)


def test_load_round_trips_sample(tmp_path):
    path = config.init_config(tmp_path / ".clonedb")

    configs = config.load_configs(path)

    assert list(configs) == ["staging-from-production"]
    assert configs["staging-from-production"]["engine"] == "shell"


def test_missing_file_is_reported(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        config.load_configs(tmp_path / "absent")


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]"])
def test_invalid_content_is_reported(tmp_path, payload):
    path = tmp_path / ".clonedb"
    path.write_text(payload)

    with pytest.raises(ConfigurationError):
        config.load_configs(path)


def test_cli_settings_validation(tmp_path):
    settings = config.CliSettings.from_options(config_path=tmp_path / "c", verbose=True)

    assert settings.console_level == logging.INFO
    with pytest.raises(ValueError):
        config.CliSettings(config_path=tmp_path, step_timeout=0)
