"""Configuration management for history-py."""

from __future__ import annotations

from history_py.config.loader import load_config
from history_py.config.models import ChangelogConfig, HistoryPyConfig

__all__ = [
    "ChangelogConfig",
    "HistoryPyConfig",
    "load_config",
]
