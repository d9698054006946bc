"""Config file discovery and loading.

Walk-up finder locates campusctl.toml, similar to how git finds .git/.
Supports the CAMPUSCTL_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

from campusctl.config.models import CampusConfig

CONFIG_FILENAME = "campusctl.toml"
CONFIG_ENV_VAR = "CAMPUSCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for campusctl.toml.

    Returns the path to the config file, or None if not found.
    Checks CAMPUSCTL_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse a config file; malformed TOML becomes a ClickException."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> CampusConfig:
    """Load and validate config from a TOML file.

    If *path* is None, uses find_config(*cwd*) to discover the file.
    Returns the default CampusConfig if no file is found.
    """
    if path is None:
        path = find_config(cwd)

    if path is None:
        return CampusConfig()

    return CampusConfig.model_validate(read_toml(path))
