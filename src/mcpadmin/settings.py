"""Runtime settings for the mcpadmin CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml


COLOR_MODES = ("auto", "always", "never")
DEFAULT_OVERRIDE_FILENAME = ".mcp.json"
CONFIG_FILENAME = "config.yaml"


class SettingsError(ValueError):
    """Raised when the mcpadmin config file cannot be used."""


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    registry_file: Path
    log_dir: Path
    override_filename: str = DEFAULT_OVERRIDE_FILENAME
    color: str = "auto"


def _default_home_dir() -> Path:
    override = os.environ.get("MCPADMIN_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".mcpadmin"


def _default_registry_file() -> Path:
    return Path.home() / ".claude.json"


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise SettingsError(f"invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SettingsError(f"{path} must contain a mapping")
    return data


def load_settings() -> RuntimeSettings:
    base = _default_home_dir()
    config = _read_config_file(base / CONFIG_FILENAME)

    registry_env = os.environ.get("MCPADMIN_REGISTRY")
    if registry_env:
        registry_file = Path(registry_env).expanduser()
    elif config.get("registry_file"):
        registry_file = Path(str(config["registry_file"])).expanduser()
    else:
        registry_file = _default_registry_file()

    color = str(config.get("color", "auto")).lower()
    if color not in COLOR_MODES:
        raise SettingsError(f"color must be one of {', '.join(COLOR_MODES)}; got '{color}'")
    if os.environ.get("NO_COLOR"):
        color = "never"

    return RuntimeSettings(
        home_dir=base,
        registry_file=registry_file,
        log_dir=base / "logs",
        override_filename=str(config.get("override_filename") or DEFAULT_OVERRIDE_FILENAME),
        color=color,
    )
