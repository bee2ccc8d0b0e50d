"""Pixel-level image comparison for visual regression testing."""

from resemble.comparison import ComparisonBuilder, ComparisonConfig, compare
from resemble.engine.tolerance import ToleranceProfile
from resemble.exceptions import (
    ComparisonCancelledError,
    ConfigError,
    ConfigurationConflictError,
    ImageLoadError,
    InvalidTransparencyError,
    MissingToleranceValueError,
    ResembleError,
)
from resemble.models.domain import (
    Box,
    Color,
    ComparisonResult,
    ComparisonSettings,
    DifferenceBounds,
    DimensionDifference,
)
from resemble.types import DifferenceType, ProfileKind, Tolerance

__all__ = [
    "Box",
    "Color",
    "ComparisonBuilder",
    "ComparisonCancelledError",
    "ComparisonConfig",
    "ComparisonResult",
    "ComparisonSettings",
    "ConfigError",
    "ConfigurationConflictError",
    "DifferenceBounds",
    "DifferenceType",
    "DimensionDifference",
    "ImageLoadError",
    "InvalidTransparencyError",
    "MissingToleranceValueError",
    "ProfileKind",
    "ResembleError",
    "Tolerance",
    "ToleranceProfile",
    "compare",
]
