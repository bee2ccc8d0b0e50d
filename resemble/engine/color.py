"""Colour math shared by the classifier, detector and renderers.

Brightness is HSL lightness on a 0-1 scale and hue is in degrees (0-360),
both derived from ``colorsys``. A grey pixel has hue 0.
"""

from __future__ import annotations

import colorsys
from functools import lru_cache
from typing import Protocol

Pixel = tuple[int, int, int, int]


class PixelGrid(Protocol):
    """Indexed RGBA read/write access, as returned by ``Image.load()``."""

    def __getitem__(self, xy: tuple[int, int]) -> Pixel: ...

    def __setitem__(self, xy: tuple[int, int], value: Pixel) -> None: ...


@lru_cache(maxsize=65536)
def _hls(r: int, g: int, b: int) -> tuple[float, float]:
    h, lightness, _ = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
    return h * 360.0, lightness


def brightness(pixel: Pixel) -> float:
    return _hls(pixel[0], pixel[1], pixel[2])[1]


def brightness_byte(pixel: Pixel) -> int:
    """Lightness rescaled to 0-255 and rounded."""
    return round(brightness(pixel) * 255)


def hue(pixel: Pixel) -> float:
    return _hls(pixel[0], pixel[1], pixel[2])[0]


def channel_distance(p1: Pixel, p2: Pixel) -> int:
    """Mean absolute RGB distance, truncated to an int."""
    return (abs(p1[0] - p2[0]) + abs(p1[1] - p2[1]) + abs(p1[2] - p2[2])) // 3


def grayscale(pixel: Pixel) -> int:
    return round(pixel[0] * 0.3 + pixel[1] * 0.59 + pixel[2] * 0.11)


def is_rgb_same(p1: Pixel, p2: Pixel) -> bool:
    return p1[0] == p2[0] and p1[1] == p2[1] and p1[2] == p2[2]
