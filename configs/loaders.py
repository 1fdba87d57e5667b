"""YAML configuration loaders for Blinky."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from core.exceptions import ConfigError

_BASE_DIR = Path(__file__).resolve().parent


def load_yaml(path: str | Path) -> Dict[str, Any]:
    """Load a YAML file and return its content as a dictionary.

    If *path* is relative it is resolved against the configs/ directory.
    Returns an empty dict on any error so the caller can always proceed
    with safe defaults.
    """
    p = Path(path)
    if not p.is_absolute():
        p = _BASE_DIR / p
    try:
        with open(p, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def load_blinky_config() -> Dict[str, Any]:
    return load_yaml("blinky.yaml")


def get_section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return ``cfg[name]`` as a dict, ``{}`` when absent.

    Raises ConfigError when the section exists but is not a mapping.
    """
    section = cfg.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping, got {type(section).__name__}")
    return section
