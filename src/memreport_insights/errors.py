"""Exception types raised by the memreport parsing engine.

Only ConfigLoadError, PatternError and UnmatchedRowError ever reach callers.
Resource errors are raised by the loaders and absorbed by the resolver when
they concern an individual table pattern.
"""


class MemreportError(Exception):
    """Base class for every error raised by memreport_insights."""


class ConfigLoadError(MemreportError):
    """The base configuration for an engine version could not be loaded."""

    def __init__(self, version: str, reason: str):
        super().__init__(f"Failed to load configuration for engine version {version}: {reason}")
        self.version = version
        self.reason = reason


class ResourceNotFoundError(MemreportError):
    """A configuration resource is missing or could not be read."""


class ResourceFormatError(ResourceNotFoundError):
    """A configuration resource was served with the wrong content type."""


class PatternError(MemreportError):
    """A marker or column-extraction regex is malformed."""


class UnmatchedRowError(PatternError):
    """A non-blank table line did not match its extraction rule."""
