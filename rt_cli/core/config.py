"""Configuration loading and persistence."""

from __future__ import annotations

import copy
import json
import os
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.9-3.10
    import tomli as tomllib  # type: ignore[no-redef]

from rt_cli.core.constants import DEFAULT_THRESHOLDS


class ConfigError(RuntimeError):
    """Raised when config file parsing or validation fails."""


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def expand_path(path_str: str) -> Path:
    """Expand user/env vars and return absolute path."""
    return Path(os.path.expandvars(path_str)).expanduser().resolve()


def default_config_path() -> Path:
    """Get default config file path."""
    raw = os.getenv("RT_CONFIG_FILE", "~/.config/rt/config.toml")
    return expand_path(raw)


def _default_config() -> Dict[str, Any]:
    return {
        "athlete": {
            "birth_date": None,
            "max_hr": None,
            "resting_hr": None,
            "history_file": None,
        },
        "classification": {
            "thresholds": {},
        },
        "defaults": {
            "output_format": "pretty",
        },
    }


def _read_config(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    text = path.read_text()
    try:
        if suffix in {".toml", ""}:
            loaded = tomllib.loads(text)
        else:
            loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain an object/table at the root")
    return loaded


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from disk, merged with defaults."""
    cfg_path = path or default_config_path()
    cfg = _default_config()

    if cfg_path.exists():
        loaded = _read_config(cfg_path)
        cfg = _deep_merge(cfg, loaded)

    return cfg


OUTPUT_FORMATS = ("pretty", "json", "plain")


def resolve_output_format(config: Dict[str, Any]) -> str:
    """Output mode used when neither --json nor --plain is given."""
    value = (config.get("defaults") or {}).get("output_format") or "pretty"
    if value not in OUTPUT_FORMATS:
        raise ConfigError(f"defaults.output_format must be one of {', '.join(OUTPUT_FORMATS)}, got {value!r}")
    return value


def resolve_thresholds(config: Dict[str, Any]) -> Dict[str, float]:
    """Default classification thresholds with validated config overrides."""
    overrides = config.get("classification", {}).get("thresholds") or {}
    if not isinstance(overrides, dict):
        raise ConfigError("classification.thresholds must be a table")

    thresholds = dict(DEFAULT_THRESHOLDS)
    for key, value in overrides.items():
        if key not in DEFAULT_THRESHOLDS:
            raise ConfigError(f"Unknown classification threshold: {key}")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"Threshold {key} must be a number, got {value!r}")
        if value < 0:
            raise ConfigError(f"Threshold {key} must not be negative")
        thresholds[key] = float(value)
    return thresholds


def _optional_number(section: Dict[str, Any], key: str) -> Optional[float]:
    value = section.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"athlete.{key} must be a number, got {value!r}")
    return float(value)


def resolve_athlete(config: Dict[str, Any]) -> Dict[str, Any]:
    """Validated athlete profile: birth_date (date), max_hr, resting_hr, history_file."""
    section = config.get("athlete") or {}
    raw_birth = section.get("birth_date")
    birth_date: Optional[date] = None
    if isinstance(raw_birth, date):
        birth_date = raw_birth
    elif raw_birth:
        try:
            birth_date = date.fromisoformat(str(raw_birth))
        except ValueError as exc:
            raise ConfigError(f"athlete.birth_date must be YYYY-MM-DD, got {raw_birth!r}") from exc

    history = section.get("history_file")
    return {
        "birth_date": birth_date,
        "max_hr": _optional_number(section, "max_hr"),
        "resting_hr": _optional_number(section, "resting_hr"),
        "history_file": expand_path(str(history)) if history else None,
    }


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(item) for item in value if item is not None) + "]"
    raise TypeError(f"Cannot write {type(value).__name__} to TOML")


def _toml_tables(data: Dict[str, Any], name: str = "") -> Iterator[Tuple[str, List[str]]]:
    """Yield (table name, key = value lines) depth-first; None values are left out."""
    assignments = [
        f"{key} = {_toml_value(value)}"
        for key, value in data.items()
        if value is not None and not isinstance(value, dict)
    ]
    yield name, assignments
    for key, value in data.items():
        if isinstance(value, dict):
            yield from _toml_tables(value, f"{name}.{key}" if name else key)


def _to_toml(config: Dict[str, Any]) -> str:
    blocks = []
    for name, assignments in _toml_tables(config):
        if not assignments:
            continue
        header = [f"[{name}]"] if name else []
        blocks.append("\n".join(header + assignments))
    return "\n\n".join(blocks) + "\n"


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> Path:
    """Write the config as TOML, or JSON when the path ends in .json. Empty tables are skipped."""
    target = path or default_config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    if target.suffix.lower() == ".json":
        target.write_text(json.dumps(config, indent=2, default=str) + "\n")
    else:
        target.write_text(_to_toml(config))
    return target
