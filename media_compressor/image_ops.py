"""Pillow-backed image resizing."""

from __future__ import annotations

import logging
from io import BytesIO

from PIL import Image

from .models import ImageFormat, Resolution

logger = logging.getLogger(__name__)

# Modes each encoder can write without conversion.
_SAVEABLE_MODES = {
    ImageFormat.PNG: {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"},
    ImageFormat.JPEG: {"L", "RGB", "CMYK"},
    ImageFormat.GIF: {"1", "L", "P", "RGB", "RGBA"},
    ImageFormat.BMP: {"1", "L", "P", "RGB"},
}


def _open_image(data: bytes) -> Image.Image:
    """Decode *data* eagerly so truncated input fails here, not on save."""
    img = Image.open(BytesIO(data))
    img.load()
    return img


def _convert_for(img: Image.Image, image_format: ImageFormat) -> Image.Image:
    if img.mode in _SAVEABLE_MODES[image_format]:
        return img
    target = "RGBA" if "RGBA" in _SAVEABLE_MODES[image_format] else "RGB"
    logger.debug("Converting %s image to %s for %s", img.mode, target, image_format.name)
    return img.convert(target)


def resize_image(data: bytes, image_format: ImageFormat, resolution: Resolution) -> bytes:
    """Resize *data* to exactly *resolution* and encode it as *image_format*.

    The aspect ratio is not preserved: the source is drawn onto a canvas of
    the requested size.  Pillow errors propagate to the caller.
    """
    original = _open_image(data)
    logger.debug(
        "Resizing %s %dx%d -> %s %s",
        original.format, original.width, original.height,
        image_format.name, resolution,
    )
    resized = original.resize(resolution.size, Image.LANCZOS)
    resized = _convert_for(resized, image_format)

    buffer = BytesIO()
    resized.save(buffer, format=image_format.pil_format)
    return buffer.getvalue()
