"""
Configuration loader — reads doc2quarto.yml into a ConversionConfig.

The file is optional.  Values given on the command line override values
from the file; anything still missing falls back to the model defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from doc2quarto.core.models.conversion import ConversionConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "doc2quarto.yml"

_PATH_KEYS = ("source", "dest")


class ConfigError(Exception):
    """Raised when conversion configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for doc2quarto.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to doc2quarto.yml, or None if not found.
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


def read_config_file(path: Path) -> dict[str, Any]:
    """Read the raw settings mapping from a config file.

    The YAML may be flat or nest its keys under ``convert:``.  Relative
    ``source`` and ``dest`` paths are resolved against the file's directory.

    Raises:
        ConfigError: If the file is missing, unreadable, or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading conversion config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    settings = data.get("convert", data)
    if not isinstance(settings, dict):
        raise ConfigError(f"Expected 'convert' to be a mapping in {path}")

    settings = dict(settings)
    base = path.parent.resolve()
    for key in _PATH_KEYS:
        value = settings.get(key)
        if value and not Path(str(value)).is_absolute():
            settings[key] = base / str(value)

    return settings


def load_config(
    path: Path | None = None,
    *,
    search: bool = True,
    **overrides: Any,
) -> ConversionConfig:
    """Build and validate the conversion settings.

    Args:
        path: Explicit path to doc2quarto.yml.
        search: When no path is given, look for doc2quarto.yml upward
            from the working directory.
        **overrides: CLI values.  ``None`` means "not given".

    Returns:
        Validated ConversionConfig.

    Raises:
        ConfigError: If the file is invalid or required values are missing.
    """
    if path is None and search:
        path = find_config_file()

    settings: dict[str, Any] = read_config_file(path) if path is not None else {}
    settings.update({k: v for k, v in overrides.items() if v is not None})

    missing = [key for key in _PATH_KEYS if not settings.get(key)]
    if missing:
        raise ConfigError(
            f"Missing required setting(s): {', '.join(missing)}. "
            f"Pass --source/--dest or add them to {CONFIG_FILE}."
        )

    try:
        config = ConversionConfig.model_validate(settings)
    except ValidationError as e:
        raise ConfigError(f"Invalid conversion configuration: {e}") from e

    logger.info("Converting %s -> %s", config.source, config.dest)
    return config
