"""Pillow-backed image loading, resizing and encoding.

These are the collaborators around the comparison core: the core reads
RGBA pixels, asks a resizer for at most one resize before scanning, and
hands the finished difference raster to the encoder.
"""

from __future__ import annotations

import base64
import io
from pathlib import Path
from typing import Protocol

import structlog
from PIL import Image, UnidentifiedImageError

from resemble.exceptions import ConfigError, ImageLoadError

logger = structlog.get_logger(__name__)

ImageSource = str | Path | bytes | Image.Image

RESAMPLING_FILTERS: dict[str, Image.Resampling] = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


def load_image(source: ImageSource) -> Image.Image:
    """Load an image from a path, raw bytes, or an Image, as RGBA.

    The returned image is always a new object, so callers' images are
    never modified.
    """
    if isinstance(source, Image.Image):
        return source.convert("RGBA")
    try:
        if isinstance(source, bytes):
            img = Image.open(io.BytesIO(source))
        else:
            img = Image.open(Path(source))
        with img:
            return img.convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        label = "<bytes>" if isinstance(source, bytes) else str(source)
        msg = f"Cannot load image {label}: {e}"
        raise ImageLoadError(msg) from e


class Resizer(Protocol):
    def resize(self, image: Image.Image, width: int, height: int) -> Image.Image: ...


class PillowResizer:
    """Resizes with ``Image.resize`` and a named resampling filter."""

    def __init__(self, resample: str = "lanczos") -> None:
        try:
            self._filter = RESAMPLING_FILTERS[resample.lower()]
        except KeyError:
            choices = sorted(RESAMPLING_FILTERS)
            msg = f"Unknown resampling filter {resample!r}; expected one of {choices}"
            raise ConfigError(msg) from None
        self._name = resample.lower()

    def resize(self, image: Image.Image, width: int, height: int) -> Image.Image:
        logger.debug(
            "resizing_image",
            source=image.size,
            target=(width, height),
            resample=self._name,
        )
        return image.resize((width, height), self._filter)


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def encode_png_base64(image: Image.Image) -> str:
    """PNG-encode an image and return it as base64 text."""
    return base64.b64encode(encode_png(image)).decode("ascii")


def decode_png_base64(data: str) -> Image.Image:
    """Inverse of ``encode_png_base64``."""
    return load_image(base64.b64decode(data))
