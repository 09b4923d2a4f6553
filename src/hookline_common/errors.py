from __future__ import annotations


class HooklineError(Exception):
    """Base class for errors raised by hookline."""


class ConfigurationError(HooklineError):
    """Filter options are invalid; the filter must not run."""


class FieldPathError(HooklineError, ValueError):
    """A field reference could not be parsed or written."""
