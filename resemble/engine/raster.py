"""Read access to the RGBA pixels of a Pillow image."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PIL import Image

    from resemble.engine.color import PixelGrid


@dataclass(frozen=True)
class Raster:
    pixels: PixelGrid
    width: int
    height: int

    @classmethod
    def from_image(cls, image: Image.Image) -> Raster:
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(pixels=image.load(), width=image.width, height=image.height)

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height
