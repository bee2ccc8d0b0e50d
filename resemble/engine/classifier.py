"""Match/mismatch decision for one pixel pair."""

from __future__ import annotations

from typing import TYPE_CHECKING

from resemble.engine.antialiasing import is_antialiased
from resemble.engine.color import brightness_byte
from resemble.engine.tolerance import is_channel_similar
from resemble.types import PixelVerdict, Tolerance

if TYPE_CHECKING:
    from resemble.engine.color import Pixel
    from resemble.engine.raster import Raster
    from resemble.engine.regions import RegionFilter
    from resemble.engine.tolerance import ToleranceProfile


class PixelClassifier:
    """Combines region filtering, tolerances and antialiasing detection.

    Every tolerance kind is resolved when the classifier is built, so a
    profile missing a kind fails before the first pixel is classified.
    """

    def __init__(
        self,
        profile: ToleranceProfile,
        regions: RegionFilter,
        actual: Raster,
        baseline: Raster,
    ) -> None:
        self._regions = regions
        self._all_comparable = regions.is_noop
        self._actual = actual
        self._baseline = baseline
        self._ignore_colors = profile.ignores_colors
        self._ignore_antialiasing = profile.ignores_antialiasing

        self._red = profile.get(Tolerance.RED)
        self._green = profile.get(Tolerance.GREEN)
        self._blue = profile.get(Tolerance.BLUE)
        self._alpha = profile.get(Tolerance.ALPHA)
        self._min_brightness = profile.get(Tolerance.MIN_BRIGHTNESS)
        self._max_brightness = profile.get(Tolerance.MAX_BRIGHTNESS)

    def is_rgba_similar(self, p1: Pixel, p2: Pixel) -> bool:
        return (
            is_channel_similar(p1[0], p2[0], self._red)
            and is_channel_similar(p1[1], p2[1], self._green)
            and is_channel_similar(p1[2], p2[2], self._blue)
            and is_channel_similar(p1[3], p2[3], self._alpha)
        )

    def is_brightness_similar(self, p1: Pixel, p2: Pixel) -> bool:
        return is_channel_similar(p1[3], p2[3], self._alpha) and is_channel_similar(
            brightness_byte(p1), brightness_byte(p2), self._min_brightness
        )

    def _is_antialiased(self, x: int, y: int) -> bool:
        actual = self._actual
        baseline = self._baseline
        return is_antialiased(
            actual.pixels, actual.width, actual.height, x, y, self._max_brightness
        ) or is_antialiased(
            baseline.pixels, baseline.width, baseline.height, x, y, self._max_brightness
        )

    def classify(self, actual: Pixel, baseline: Pixel, x: int, y: int) -> PixelVerdict:
        comparable = self._all_comparable or self._regions.is_comparable(baseline, x, y)

        if self._ignore_colors:
            if not comparable or self.is_brightness_similar(actual, baseline):
                return PixelVerdict.MATCH_GRAYSCALE
            return PixelVerdict.MISMATCH

        if not comparable or self.is_rgba_similar(actual, baseline):
            return PixelVerdict.MATCH

        if self._ignore_antialiasing and self._is_antialiased(x, y):
            if self.is_brightness_similar(actual, baseline):
                return PixelVerdict.MATCH_GRAYSCALE
            return PixelVerdict.MISMATCH

        return PixelVerdict.MISMATCH
