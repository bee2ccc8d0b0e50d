"""Enums and type aliases for resemble."""

from enum import StrEnum


class Tolerance(StrEnum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    ALPHA = "alpha"
    MIN_BRIGHTNESS = "min_brightness"
    MAX_BRIGHTNESS = "max_brightness"


class DifferenceType(StrEnum):
    FLAT = "flat"
    MOVEMENT = "movement"
    FLAT_DIFFERENCE_INTENSITY = "flat_difference_intensity"
    MOVEMENT_DIFFERENCE_INTENSITY = "movement_difference_intensity"
    DIFF_ONLY = "diff_only"


class ProfileKind(StrEnum):
    STRICT = "strict"
    DEFAULT = "default"
    LESS = "less"
    ANTIALIASING = "antialiasing"
    COLORS = "colors"
    ALPHA = "alpha"
    CUSTOM = "custom"


class PixelVerdict(StrEnum):
    MATCH = "match"
    MATCH_GRAYSCALE = "match_grayscale"
    MISMATCH = "mismatch"


class ScanPhase(StrEnum):
    SCANNING = "scanning"
    HALTED = "halted"
