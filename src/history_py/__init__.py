"""history-py: version history files from git history and release tags."""

from __future__ import annotations

__version__ = "0.1.0"
