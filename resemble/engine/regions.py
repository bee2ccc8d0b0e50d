"""Per-pixel region filtering."""

from __future__ import annotations

from typing import TYPE_CHECKING

from resemble.engine.color import channel_distance

if TYPE_CHECKING:
    from resemble.engine.color import Pixel
    from resemble.models.domain import ComparisonSettings


class RegionFilter:
    """Decides whether a coordinate takes part in the comparison.

    An ignore colour, when set, wins over boxes: the baseline pixel is
    comparable unless it exactly matches the mask colour. Otherwise the
    pixel must sit inside a bounding box (all pixels when none are given)
    and outside every ignored box.
    """

    def __init__(self, settings: ComparisonSettings) -> None:
        self._ignore_color = settings.ignore_color
        self._bounding = settings.bounding_boxes
        self._ignored = settings.ignored_boxes or ()

    @property
    def is_noop(self) -> bool:
        """True when every pixel is comparable."""
        return self._ignore_color is None and self._bounding is None and not self._ignored

    def is_comparable(self, color: Pixel, x: int, y: int) -> bool:
        if self._ignore_color is not None:
            return channel_distance(color, self._ignore_color) != 0

        selected = True
        if self._bounding is not None:
            selected = any(box.contains(x, y) for box in self._bounding)
        if not selected:
            return False
        return not any(box.contains(x, y) for box in self._ignored)
