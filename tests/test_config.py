from __future__ import annotations

import json
from pathlib import Path

import pytest

from seedbound.core.config import CONFIG_ENV_VAR, EngineConfig, get_default_config_path, load_config, save_config
from seedbound.core.logging_config import setup_logging_from_config


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path / "absent.json") == EngineConfig()


def test_invalid_json_yields_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{oops", encoding="utf-8")

    assert load_config(path) == EngineConfig()


def test_bad_values_are_normalized(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"log_level": "loud", "log_json": "yes", "narrative_enabled": False, "extra": 1}),
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.log_level == "INFO"
    assert config.log_json is False
    assert config.narrative_enabled is False


def test_save_then_load_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    config = EngineConfig(narrative_enabled=False, log_level="debug", log_json=True, default_seed="abc")

    save_config(config, path)
    loaded = load_config(path)

    assert loaded.log_level == "DEBUG"
    assert loaded.default_seed == "abc"
    assert loaded.log_json is True
    assert json.loads(path.read_text(encoding="utf-8"))["log_level"] == "DEBUG"


def test_env_var_overrides_default_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "custom.json"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(target))

    assert get_default_config_path() == target


def test_logging_setup_accepts_config() -> None:
    setup_logging_from_config(EngineConfig(log_level="WARNING", log_json=True))
