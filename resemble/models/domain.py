"""Inter-module data contracts for comparisons."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any, NamedTuple

from pydantic import BaseModel, ConfigDict, field_validator

from resemble.exceptions import ConfigError, InvalidTransparencyError
from resemble.types import DifferenceType

if TYPE_CHECKING:
    from PIL import Image

MIN_TRANSPARENCY = 0.01
MAX_TRANSPARENCY = 1.0


class Color(NamedTuple):
    """An RGBA colour with 8-bit channels.

    Being a tuple, it compares equal to the pixel tuples Pillow returns
    for RGBA images.
    """

    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def parse(cls, value: str | tuple[int, ...] | Color) -> Color:
        """Build a colour from ``#rrggbb``, ``#rrggbbaa`` or a 3/4-tuple."""
        if isinstance(value, str):
            text = value.strip().lstrip("#")
            if len(text) not in (6, 8):
                msg = f"Invalid colour string: {value!r}"
                raise ConfigError(msg)
            try:
                channels = [int(text[i : i + 2], 16) for i in range(0, len(text), 2)]
            except ValueError as e:
                msg = f"Invalid colour string: {value!r}"
                raise ConfigError(msg) from e
            return cls(*channels)
        channels = list(value)
        if len(channels) not in (3, 4):
            msg = f"Colour needs 3 or 4 channels, got {len(channels)}"
            raise ConfigError(msg)
        if any(not 0 <= int(c) <= 255 for c in channels):
            msg = f"Colour channels must be within 0..255: {tuple(channels)}"
            raise ConfigError(msg)
        return cls(*(int(c) for c in channels))

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"


MAGENTA = Color(255, 0, 255, 255)


def check_transparency(value: float) -> float:
    if not MIN_TRANSPARENCY <= value <= MAX_TRANSPARENCY:
        msg = f"Transparency must be within [{MIN_TRANSPARENCY}, {MAX_TRANSPARENCY}], got {value}"
        raise InvalidTransparencyError(msg)
    return value


class Box(BaseModel):
    """Axis-aligned rectangle given by its edges.

    Membership is strictly interior: a pixel lying on any edge is outside
    the box.
    """

    model_config = ConfigDict(frozen=True)

    left: int
    top: int
    right: int
    bottom: int

    @classmethod
    def from_xywh(cls, x: int, y: int, width: int, height: int) -> Box:
        return cls(left=x, top=y, right=x + width, bottom=y + height)

    def contains(self, x: int, y: int) -> bool:
        return self.left < x < self.right and self.top < y < self.bottom


class ComparisonSettings(BaseModel):
    """Region filtering and rendering options for one comparison."""

    model_config = ConfigDict(frozen=True)

    bounding_boxes: tuple[Box, ...] | None = None
    ignored_boxes: tuple[Box, ...] | None = None
    ignore_color: Color | None = None
    difference_type: DifferenceType = DifferenceType.FLAT
    transparency: float = 1.0
    difference_color: Color = MAGENTA

    @field_validator("transparency")
    @classmethod
    def _check_transparency(cls, value: float) -> float:
        return check_transparency(value)

    @field_validator("ignore_color", "difference_color", mode="before")
    @classmethod
    def _parse_color(cls, value: Any) -> Any:
        if value is None:
            return None
        return Color.parse(value)


@dataclass(frozen=True)
class DifferenceBounds:
    """Smallest rectangle holding every mismatched pixel.

    When nothing mismatched the sentinel ``top=height, left=width,
    bottom=0, right=0`` is kept; check ``is_empty`` instead of reading the
    edges as a rectangle.
    """

    top: int
    left: int
    bottom: int
    right: int

    @property
    def is_empty(self) -> bool:
        return self.bottom < self.top or self.right < self.left


@dataclass(frozen=True)
class DimensionDifference:
    """Signed size delta, actual minus baseline."""

    width: int
    height: int


@dataclass
class ComparisonResult:
    """Result of comparing an actual image against a baseline.

    ``mismatch`` is a percentage in the 0-100 range. When the scan halted
    early it only counts the pixels classified before halting.
    """

    mismatch: float
    diff_bounds: DifferenceBounds
    is_same_dimensions: bool
    dimension_difference: DimensionDifference
    analysis_time: timedelta
    mismatch_count: int = 0
    total_pixels: int = 0
    halted_early: bool = False
    diff_image: Image.Image | None = None
    image_difference: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "mismatch": self.mismatch,
            "mismatch_count": self.mismatch_count,
            "total_pixels": self.total_pixels,
            "halted_early": self.halted_early,
            "diff_bounds": {
                "top": self.diff_bounds.top,
                "left": self.diff_bounds.left,
                "bottom": self.diff_bounds.bottom,
                "right": self.diff_bounds.right,
                "empty": self.diff_bounds.is_empty,
            },
            "is_same_dimensions": self.is_same_dimensions,
            "dimension_difference": {
                "width": self.dimension_difference.width,
                "height": self.dimension_difference.height,
            },
            "analysis_time_seconds": self.analysis_time.total_seconds(),
            "image_difference": self.image_difference,
        }
