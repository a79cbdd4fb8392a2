"""Configuration discovery and loading.

Configuration is read from the first of these found while walking up
from the start directory to the repository root:

1. ``history-py.toml``
2. ``pyproject.toml`` with a ``[tool.history-py]`` table

When neither exists the defaults are used.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from history_py.config.models import HistoryPyConfig
from history_py.exceptions import ConfigError, ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "history-py.toml"
PYPROJECT_FILE_NAME = "pyproject.toml"
PYPROJECT_TOOL_KEY = "history-py"


def load_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def extract_history_py_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.history-py]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(PYPROJECT_TOOL_KEY, {})


def find_config_file(start: Path | None = None) -> Path | None:
    """Find the configuration file that applies to ``start``.

    Args:
        start: Directory to search from (default: current directory)

    Returns:
        Path to the configuration file, or None if there is none
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate

        pyproject = directory / PYPROJECT_FILE_NAME
        if pyproject.is_file() and extract_history_py_config(load_toml(pyproject)):
            return pyproject

        # Configuration outside the repository does not apply to it
        if (directory / ".git").exists():
            break
    return None


def load_config(path: Path | None = None) -> HistoryPyConfig:
    """Load configuration for the project at ``path``.

    Args:
        path: Directory to search from, or a configuration file

    Returns:
        Validated configuration; defaults when no file is found

    Raises:
        ConfigError: If the configuration file cannot be read
        ConfigValidationError: If configuration values are invalid
    """
    if path is not None and path.is_file():
        config_path: Path | None = path
    else:
        config_path = find_config_file(path)

    if config_path is None:
        logger.debug("No configuration file found, using defaults")
        return HistoryPyConfig()

    data = load_toml(config_path)
    if config_path.name == PYPROJECT_FILE_NAME:
        data = extract_history_py_config(data)

    logger.debug("Loading configuration from %s", config_path)
    try:
        return HistoryPyConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {config_path}:\n{e}") from e
