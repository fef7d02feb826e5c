"""Exceptions raised by the configurator core.

Every exception derives from :class:`ConfiguratorError` so that the
interactive menu can report any of them and keep the session running.
Each one also derives from the closest builtin so callers that only
know about ``ValueError`` or ``FileNotFoundError`` still catch it.
"""

from __future__ import annotations


class ConfiguratorError(Exception):
    """Base class for recoverable configurator failures."""


class InvalidSelection(ConfiguratorError, ValueError):
    """A menu index or discount value is outside the accepted range."""


class PreconditionUnmet(ConfiguratorError):
    """The operation needs state that has not been set up yet."""


class ConfigFileNotFound(ConfiguratorError, FileNotFoundError):
    """The configuration file to load does not exist."""


class ConfigFileUnreadable(ConfiguratorError, OSError):
    """The configuration file exists but could not be read."""


class ConfigFileUnwritable(ConfiguratorError, OSError):
    """The configuration file or its directory could not be written."""


class UnserializableValue(ConfiguratorError, ValueError):
    """A configuration value cannot be stored in the flat file format."""


class MalformedRecord(ConfiguratorError, ValueError):
    """A saved configuration file has unexpected content.

    Attributes:
        line_number: 1-based line of the offending content, or ``None``
            when the problem is not tied to a single line.
    """

    def __init__(self, message: str, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class CatalogMismatch(ConfiguratorError, LookupError):
    """A saved vehicle does not exist in the current catalog."""
