"""
Configuration loader — reads forkpatch.yml into a frozen PatchConfig.

It reads YAML, validates against the Pydantic schema, and returns
the immutable configuration every workflow is handed.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from forkpatch.core.models.patchset import PatchConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "forkpatch.yml"


class ConfigError(Exception):
    """Raised when forkpatch configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for forkpatch.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to forkpatch.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> PatchConfig:
    """Load and validate forkpatch configuration.

    Args:
        path: Explicit path to forkpatch.yml. If None, searches upward.

    Returns:
        Validated, frozen PatchConfig.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        raise ConfigError(
            f"No {CONFIG_FILE} found. "
            "Create one at the project root, or specify --config."
        )

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading patch config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "forkpatch" key or be flat
    if isinstance(data.get("forkpatch"), dict):
        data = data["forkpatch"]

    try:
        config = PatchConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid forkpatch configuration: {e}") from e

    logger.info(
        "Loaded '%s': %d patch groups, %d managed files, %d assets",
        config.name, len(config.patches), len(config.managed_files), len(config.assets),
    )
    return config


def project_root(config_path: Path) -> Path:
    """Get the project root directory from a config file path."""
    return config_path.parent.resolve()
