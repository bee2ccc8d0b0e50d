"""Exception hierarchy for resemble."""


class ResembleError(Exception):
    """Base exception for all resemble errors."""


class ConfigError(ResembleError):
    """Raised when configuration is invalid."""


class ConfigurationConflictError(ConfigError):
    """Raised when mutually exclusive options are selected in one session."""


class InvalidTransparencyError(ConfigError):
    """Raised when the result transparency is outside [0.01, 1.0]."""


class MissingToleranceValueError(ResembleError):
    """Raised when a tolerance profile lacks a required kind."""


class ComparisonCancelledError(ResembleError):
    """Raised when a comparison is cancelled before it completes."""


class ImageLoadError(ResembleError):
    """Raised when an image source cannot be decoded."""
