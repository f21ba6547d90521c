"""
Image transform — 180-degree flip with Pillow.

The source is decoded from a local scratch file, rotated by 180 degrees
(equivalent to mirroring both horizontally and vertically) and re-encoded
into another local file.  Output is always written in a fixed format and
quality; the derived blob keeps the source extension.
"""
from __future__ import annotations

import logging
import posixpath
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)

# Formats without an alpha channel; RGBA sources are flattened onto white
_OPAQUE_FORMATS = {"JPEG", "BMP"}


def derive_flipped_name(file_name: str, suffix: str = "_flipped") -> str:
    """cat.jpg -> cat_flipped.jpg, keeping any directory prefix."""
    base, ext = posixpath.splitext(file_name)
    return f"{base}{suffix}{ext}"


def open_image(src: str | Path) -> Image.Image:
    """Decode the image at *src* fully into memory.

    Raises ``UnidentifiedImageError`` / ``OSError`` from Pillow when *src*
    cannot be decoded; callers translate those to ``ImageDecodeError``.
    """
    with Image.open(src) as img:
        img.load()
        return img.copy()


def save_flipped(
    img: Image.Image,
    dst: str | Path,
    *,
    image_format: str = "JPEG",
    quality: int = 100,
) -> Path:
    """Rotate *img* by 180 degrees and encode it to *dst*."""
    dst = Path(dst)
    flipped = img.transpose(Image.Transpose.ROTATE_180)

    fmt = image_format.upper()
    if fmt in _OPAQUE_FORMATS:
        flipped = _to_rgb(flipped)

    save_kwargs: dict = {"format": fmt}
    if fmt == "JPEG":
        save_kwargs.update(quality=quality, subsampling=0)
    flipped.save(dst, **save_kwargs)
    logger.debug("Flipped image -> %s (%s)", dst, fmt)
    return dst


def flip_image(
    src: str | Path,
    dst: str | Path,
    *,
    image_format: str = "JPEG",
    quality: int = 100,
) -> Path:
    """Rotate the image at *src* by 180 degrees and save it to *dst*."""
    return save_flipped(open_image(src), dst, image_format=image_format, quality=quality)


def _to_rgb(img: Image.Image) -> Image.Image:
    if img.mode in ("RGBA", "LA", "PA"):
        if img.mode == "PA":
            img = img.convert("RGBA")
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[-1])
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img
