"""Unit tests for imaging.py crop / resize pipeline"""

import io

import pytest
from PIL import Image

from imaging import (
    ImageProcessingError,
    crop_and_resize,
    fit_within,
    png_filename,
    resize_image,
)


def _image_bytes(width, height, color=(255, 0, 0), fmt="JPEG", mode="RGB"):
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


def _open(data):
    return Image.open(io.BytesIO(data))


def test_crop_and_resize_outputs_square_png():
    result = crop_and_resize(_image_bytes(1200, 700), "cover.photo.jpg")

    img = _open(result.data)
    assert img.format == "PNG"
    assert img.size == (500, 500)
    assert (result.width, result.height) == (500, 500)
    assert result.filename == "cover.photo.png"
    assert result.content_type == "image/png"


def test_crop_and_resize_takes_centre_square():
    """A green strip on the far left falls outside the centre crop"""
    source = Image.new("RGB", (1000, 600), (255, 0, 0))
    source.paste((0, 255, 0), (0, 0, 200, 600))
    buffer = io.BytesIO()
    source.save(buffer, format="PNG")

    result = crop_and_resize(buffer.getvalue(), "strip.png", max_size=100)

    img = _open(result.data).convert("RGB")
    assert img.size == (100, 100)
    assert img.getpixel((0, 50)) == (255, 0, 0)
    assert img.getpixel((99, 50)) == (255, 0, 0)


def test_crop_and_resize_keeps_transparency():
    data = _image_bytes(300, 300, color=(0, 0, 255, 0), fmt="PNG", mode="RGBA")
    result = crop_and_resize(data, "icon.png", max_size=50)
    assert _open(result.data).mode == "RGBA"


@pytest.mark.parametrize("size, expected", [
    ((1600, 900), (800, 450)),
    ((900, 1600), (450, 800)),
    ((300, 200), (300, 200)),
    ((800, 800), (800, 800)),
])
def test_resize_image_fits_longer_side(size, expected):
    result = resize_image(_image_bytes(*size), "shot.webp")
    assert _open(result.data).size == expected
    assert result.filename == "shot.png"


def test_fit_within_rounds_and_never_upscales():
    assert fit_within(1000, 333, 800) == (800, 266)
    assert fit_within(50, 40, 800) == (50, 40)


def test_invalid_image_raises():
    with pytest.raises(ImageProcessingError, match="notes.txt"):
        crop_and_resize(b"definitely not an image", "notes.txt")


@pytest.mark.parametrize("name, expected", [
    ("photo.jpeg", "photo.png"),
    ("archive.tar.gz", "archive.tar.png"),
    ("noext", "noext.png"),
    ("", "image.png"),
])
def test_png_filename(name, expected):
    assert png_filename(name) == expected


def test_fit_within_rounds_half_pixels_up():
    assert fit_within(1600, 9, 800) == (800, 5)
    assert fit_within(9, 1600, 800) == (5, 800)


def test_resize_image_rounds_half_pixels_up():
    result = resize_image(_image_bytes(1600, 9, fmt="PNG"), "banner.png")
    assert _open(result.data).size == (800, 5)
    assert (result.width, result.height) == (800, 5)


def test_oversized_image_raises(monkeypatch):
    """Pillow's decompression-bomb guard surfaces as ImageProcessingError"""
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    with pytest.raises(ImageProcessingError, match="too large"):
        crop_and_resize(_image_bytes(300, 300, fmt="PNG"), "huge.png")
