"""Exception hierarchy for history-py.

All errors raised by the library derive from HistoryPyError so the
command line layer can report them uniformly. Third-party errors are
wrapped with ``raise ... from e`` to keep the original traceback.
"""

from __future__ import annotations


class HistoryPyError(Exception):
    """Base class for all history-py errors."""


# Configuration


class ConfigError(HistoryPyError):
    """Configuration could not be read."""


class ConfigNotFoundError(ConfigError):
    """No configuration file was found."""


class ConfigValidationError(ConfigError):
    """Configuration values are invalid."""


# Versions


class VersionError(HistoryPyError):
    """Base class for version related errors."""


class InvalidVersionError(VersionError):
    """A version string could not be parsed."""

    def __init__(self, text: str, reason: str | None = None) -> None:
        self.text = text
        message = f"Invalid version string: {text!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


# History files


class HistoryFileError(HistoryPyError):
    """A history file does not follow the expected layout."""


# Repository access


class GitError(HistoryPyError):
    """The git repository could not be opened or read."""


# Component catalog


class CatalogError(HistoryPyError):
    """The component catalog could not be loaded."""


class ComponentNotFoundError(CatalogError):
    """A component id is not present in the catalog."""

    def __init__(self, component_id: str) -> None:
        self.component_id = component_id
        super().__init__(f"Component not found in catalog: {component_id}")
