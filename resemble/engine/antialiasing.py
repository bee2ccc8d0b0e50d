"""Antialiasing detection from a pixel's 3x3 neighbourhood."""

from __future__ import annotations

from typing import TYPE_CHECKING

from resemble.engine.color import brightness, hue, is_rgb_same

if TYPE_CHECKING:
    from resemble.engine.color import Pixel, PixelGrid

HUE_DIFFERENCE = 0.3
_OFFSETS = tuple((dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if dx or dy)


def is_antialiased(
    pixels: PixelGrid,
    width: int,
    height: int,
    x: int,
    y: int,
    max_brightness: int,
) -> bool:
    """Return True when the pixel at (x, y) looks like an edge-smoothing artifact.

    ``pixels`` is a Pillow pixel access object (``Image.load()``) of an RGBA
    image. Neighbours outside the image are skipped. The scan returns early
    once more than one neighbour is high-contrast or has a different hue;
    otherwise a pixel with fewer than two identical neighbours counts as
    antialiased.
    """
    source: Pixel = pixels[x, y]
    source_brightness = brightness(source)
    source_hue = hue(source)
    contrast_limit = max_brightness / 255

    high_contrast = 0
    different_hue = 0
    equivalent = 0

    for dx, dy in _OFFSETS:
        nx = x + dx
        ny = y + dy
        if nx < 0 or ny < 0 or nx >= width or ny >= height:
            continue

        target: Pixel = pixels[nx, ny]

        if abs(source_brightness - brightness(target)) > contrast_limit:
            high_contrast += 1
        if is_rgb_same(source, target):
            equivalent += 1
        if abs(hue(target) - source_hue) > HUE_DIFFERENCE:
            different_hue += 1

        if different_hue > 1 or high_contrast > 1:
            return True

    return equivalent < 2
