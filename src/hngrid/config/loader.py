from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict


DEFAULT_CONFIG_PATH = Path("config.toml")


def config_path() -> Path:
    """``$HNGRID_CONFIG`` when set, else ``config.toml`` in the working directory."""
    override = os.getenv("HNGRID_CONFIG", "").strip()
    return Path(override) if override else DEFAULT_CONFIG_PATH


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Read the TOML settings file.

    A missing file yields ``{}``; every setting then falls back to its
    environment variable and finally to the built-in default.
    """
    target = Path(path) if path is not None else config_path()
    if not target.is_file():
        return {}

    with target.open("rb") as handle:
        return tomllib.load(handle)


def section(config: dict | None, name: str) -> Dict[str, Any]:
    """Return the ``[hngrid.<name>]`` table, or ``{}``."""
    table = (config or {}).get("hngrid", {}).get(name, {})
    return table if isinstance(table, dict) else {}


__all__ = ["load_raw_config", "config_path", "section", "DEFAULT_CONFIG_PATH"]
