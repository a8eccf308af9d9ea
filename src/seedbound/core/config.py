"""Engine configuration loading and persistence."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

CONFIG_ENV_VAR = "SEEDBOUND_CONFIG"
_DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Ambient settings; none of them change how rolls are resolved."""

    narrative_enabled: bool = True
    log_level: str = _DEFAULT_LOG_LEVEL
    log_json: bool = False
    default_seed: str | None = None


def get_user_config_dir() -> Path:
    """Return the per-user configuration directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "Seedbound"
        return Path.home() / "Seedbound"
    return Path.home() / ".config" / "seedbound"


def get_default_config_path() -> Path:
    """Return the config path, honouring the SEEDBOUND_CONFIG override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return get_user_config_dir() / "config.json"


def _normalize_log_level(value: object) -> str:
    if isinstance(value, str) and value.upper() in _LOG_LEVELS:
        return value.upper()
    return _DEFAULT_LOG_LEVEL


def _normalize_bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _normalize_seed(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def config_from_mapping(raw: Dict[str, Any]) -> EngineConfig:
    return EngineConfig(
        narrative_enabled=_normalize_bool(raw.get("narrative_enabled"), True),
        log_level=_normalize_log_level(raw.get("log_level")),
        log_json=_normalize_bool(raw.get("log_json"), False),
        default_seed=_normalize_seed(raw.get("default_seed")),
    )


def load_config(path: Path | None = None) -> EngineConfig:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return EngineConfig()
    except Exception:
        return EngineConfig()
    if not isinstance(raw, dict):
        return EngineConfig()
    return config_from_mapping(raw)


def save_config(config: EngineConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "narrative_enabled": config.narrative_enabled,
        "log_level": _normalize_log_level(config.log_level),
        "log_json": config.log_json,
        "default_seed": config.default_seed,
    }
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
