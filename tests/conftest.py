"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable, Mapping

import pytest
from PIL import Image

Pixel = tuple[int, int, int, int]
ImageFactory = Callable[..., Image.Image]


@pytest.fixture()
def make_image() -> ImageFactory:
    """Build an RGBA image filled with ``fill`` and optional per-pixel overrides."""

    def _make(
        size: tuple[int, int],
        fill: Pixel = (0, 0, 0, 255),
        pixels: Mapping[tuple[int, int], Pixel] | None = None,
    ) -> Image.Image:
        img = Image.new("RGBA", size, fill)
        for xy, color in (pixels or {}).items():
            img.putpixel(xy, color)
        return img

    return _make


@pytest.fixture()
def checkerboard() -> ImageFactory:
    """Deterministic patterned image with a mix of similar and distinct colours."""

    def _make(size: tuple[int, int], shift: int = 0) -> Image.Image:
        width, height = size
        img = Image.new("RGBA", size)
        for x in range(width):
            for y in range(height):
                v = (x * 37 + y * 91 + shift) % 256
                img.putpixel((x, y), (v, (v * 3) % 256, (255 - v), 255))
        return img

    return _make
