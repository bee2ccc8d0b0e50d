"""Output colours for classified pixel pairs."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType

from resemble.engine.color import Pixel, channel_distance, grayscale
from resemble.types import DifferenceType, PixelVerdict

OPAQUE = 255
INTENSITY_WEIGHT = 0.8

DifferenceFn = Callable[[Pixel, Pixel, Pixel], Pixel]


def _flat(actual: Pixel, baseline: Pixel, color: Pixel) -> Pixel:
    return (color[0], color[1], color[2], color[3])


def _movement(actual: Pixel, baseline: Pixel, color: Pixel) -> Pixel:
    r, g, b = (round((baseline[i] * color[i] // 255 + color[i]) / 2) for i in range(3))
    return (r, g, b, baseline[3])


def _flat_intensity(actual: Pixel, baseline: Pixel, color: Pixel) -> Pixel:
    return (color[0], color[1], color[2], channel_distance(actual, baseline))


def _movement_intensity(actual: Pixel, baseline: Pixel, color: Pixel) -> Pixel:
    ratio = channel_distance(actual, baseline) / 255 * INTENSITY_WEIGHT
    r, g, b = (
        round((1 - ratio) * baseline[i] * (color[i] // 255) + ratio * color[i]) for i in range(3)
    )
    return (r, g, b, baseline[3])


def _diff_only(actual: Pixel, baseline: Pixel, color: Pixel) -> Pixel:
    return (baseline[0], baseline[1], baseline[2], OPAQUE)


DIFFERENCE_RENDERERS: Mapping[DifferenceType, DifferenceFn] = MappingProxyType(
    {
        DifferenceType.FLAT: _flat,
        DifferenceType.MOVEMENT: _movement,
        DifferenceType.FLAT_DIFFERENCE_INTENSITY: _flat_intensity,
        DifferenceType.MOVEMENT_DIFFERENCE_INTENSITY: _movement_intensity,
        DifferenceType.DIFF_ONLY: _diff_only,
    }
)


def get_difference_renderer(mode: DifferenceType) -> DifferenceFn:
    return DIFFERENCE_RENDERERS[DifferenceType(mode)]


def render_difference(mode: DifferenceType, actual: Pixel, baseline: Pixel, color: Pixel) -> Pixel:
    """Colour of a mismatched pixel under the given rendering mode."""
    return get_difference_renderer(mode)(actual, baseline, color)


def render_transparent(pixel: Pixel, transparency: float) -> Pixel:
    """Copy of a matching pixel with its alpha scaled and rounded."""
    return (pixel[0], pixel[1], pixel[2], round(pixel[3] * transparency))


def render_grayscale(pixel: Pixel, transparency: float) -> Pixel:
    """Grey copy of a pixel matched by brightness; alpha is scaled and truncated."""
    gray = grayscale(pixel)
    return (gray, gray, gray, int(pixel[3] * transparency))


class DifferenceRenderer:
    """Maps a classified pixel pair to the colour written to the output raster."""

    def __init__(self, mode: DifferenceType, color: Pixel, transparency: float) -> None:
        self._difference = get_difference_renderer(mode)
        self._color = color
        self._transparency = transparency
        self._skip_matches = mode == DifferenceType.DIFF_ONLY

    def pixel_for(self, verdict: PixelVerdict, actual: Pixel, baseline: Pixel) -> Pixel | None:
        """Output colour, or None when the pre-initialised output pixel stays."""
        if verdict is PixelVerdict.MISMATCH:
            return self._difference(actual, baseline, self._color)
        if self._skip_matches:
            return None
        if verdict is PixelVerdict.MATCH_GRAYSCALE:
            return render_grayscale(baseline, self._transparency)
        return render_transparent(actual, self._transparency)
