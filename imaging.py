"""
Image pipeline for tool listings.

- Cover images are centre-cropped to a square and scaled to 500x500.
- Screenshots are scaled down to fit 800px on the longer side.
Both produce PNG bytes with the original file stem and a .png extension.
"""

import io
import os
import math
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

COVER_SIZE = 500
SCREENSHOT_MAX_SIZE = 800
PNG_CONTENT_TYPE = "image/png"


class ImageProcessingError(ValueError):
    """Raised when uploaded bytes cannot be decoded as an image."""


@dataclass
class ProcessedImage:
    data: bytes
    filename: str
    width: int
    height: int
    content_type: str = PNG_CONTENT_TYPE


def png_filename(filename: str) -> str:
    stem = os.path.splitext(os.path.basename(filename or ""))[0]
    return f"{stem or 'image'}.png"


def _open(data: bytes, filename: str) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except Image.DecompressionBombError as exc:
        raise ImageProcessingError(f"{filename or 'upload'} is too large to process") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageProcessingError(f"{filename or 'upload'} is not a valid image") from exc
    # RGBA keeps transparency from GIF/PNG sources; PNG output supports it.
    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA")
    return img


def _to_png(img: Image.Image, filename: str) -> ProcessedImage:
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return ProcessedImage(
        data=buffer.getvalue(),
        filename=png_filename(filename),
        width=img.width,
        height=img.height,
    )


def crop_and_resize(data: bytes, filename: str, max_size: int = COVER_SIZE) -> ProcessedImage:
    """Centre-crop the largest square from the image and scale it to max_size."""
    img = _open(data, filename)
    side = min(img.width, img.height)
    left = (img.width - side) // 2
    top = (img.height - side) // 2
    square = img.crop((left, top, left + side, top + side))
    result = _to_png(square.resize((max_size, max_size), Image.LANCZOS), filename)
    logging.info(f"Cropped {filename}: {img.width}x{img.height} -> {max_size}x{max_size}")
    return result


def fit_within(width: int, height: int, max_size: int) -> tuple[int, int]:
    """Scale (width, height) down so the longer side is at most max_size."""
    if width > height:
        if width > max_size:
            height = height * max_size / width
            width = max_size
    elif height > max_size:
        width = width * max_size / height
        height = max_size
    # Half-pixel sizes round up.
    return max(1, math.floor(width + 0.5)), max(1, math.floor(height + 0.5))


def resize_image(data: bytes, filename: str, max_size: int = SCREENSHOT_MAX_SIZE) -> ProcessedImage:
    """Shrink the image to fit max_size on its longer side, keeping aspect ratio."""
    img = _open(data, filename)
    size = fit_within(img.width, img.height, max_size)
    if size != (img.width, img.height):
        img = img.resize(size, Image.LANCZOS)
    return _to_png(img, filename)
