"""Exception hierarchy shared by every dbveil layer."""

from __future__ import annotations


class DbveilError(Exception):
    """Base class for errors raised by dbveil itself (never by the wrapped driver)."""


class ConfigError(DbveilError):
    """Problems with the protection policy document."""


class ConfigNotFoundError(ConfigError):
    """The policy document is missing or is not valid JSON."""


class ConfigFormatError(ConfigError):
    """The policy document parsed but does not follow the policy schema."""


class ParameterError(DbveilError):
    """Misuse of a statement's parameter cache."""


class InvalidArgument(ParameterError, ValueError):
    """A parameter cache was created with an impossible slot count."""


class IndexOutOfRange(ParameterError, IndexError):
    """An ordinal outside ``[1, count]`` was used."""


class EngineError(DbveilError):
    """The protection engine failed to protect or unprotect a value."""


class UnauthorizedError(EngineError):
    """The engine's credentials do not grant access to the resolved key."""


class AdapterError(DbveilError):
    """Raised by driver adapters for loading, connection and statement failures."""
