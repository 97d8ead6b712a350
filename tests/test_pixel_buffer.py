"""Tests for PixelBuffer construction and pixel access."""
import pytest
from PIL import Image

from wallpaper_watcher.domain import Color, Rect
from wallpaper_watcher.errors import InvalidDimensions, UnsupportedPixelFormat
from wallpaper_watcher.pixel_buffer import PixelBuffer

# 2x2 pixels, 24 bpp, rows padded to 8 bytes, blue-green-red order
PADDED_BGR = bytes([
    1, 2, 3, 4, 5, 6, 0, 0,
    7, 8, 9, 10, 11, 12, 0, 0,
])


def test_get_pixel_reverses_bgr_and_honours_stride():
    buf = PixelBuffer(PADDED_BGR, 2, 2, 24, stride=8)
    assert buf.get_pixel(0, 0) == Color(3, 2, 1)
    assert buf.get_pixel(1, 0) == Color(6, 5, 4)
    assert buf.get_pixel(0, 1) == Color(9, 8, 7)
    assert buf.get_pixel(1, 1) == Color(12, 11, 10)


def test_negative_stride_uses_absolute_value():
    buf = PixelBuffer(PADDED_BGR, 2, 2, 24, stride=-8)
    assert buf.stride == 8
    assert buf.get_pixel(1, 1) == Color(12, 11, 10)


def test_owns_a_copy_of_the_data():
    data = bytearray(PADDED_BGR)
    buf = PixelBuffer(data, 2, 2, 24, stride=8)
    data[0:3] = b"\xff\xff\xff"
    assert buf.get_pixel(0, 0) == Color(3, 2, 1)
    assert len(buf.pixels) == buf.stride * buf.height


def test_32_bit_pixels():
    data = bytes([10, 20, 30, 255, 40, 50, 60, 128])
    buf = PixelBuffer(data, 2, 1, 32)
    assert buf.get_pixel(1, 0) == Color(60, 50, 40)


@pytest.mark.parametrize("bpp", [1, 8, 16, 48])
def test_unsupported_depth_rejected(bpp):
    with pytest.raises(UnsupportedPixelFormat):
        PixelBuffer(b"\x00" * 64, 2, 2, bpp)


def test_short_data_rejected():
    with pytest.raises(ValueError):
        PixelBuffer(PADDED_BGR[:10], 2, 2, 24, stride=8)


def test_zero_size_rejected():
    with pytest.raises(InvalidDimensions):
        PixelBuffer(b"", 0, 2, 24)


def test_from_rgb_image():
    img = Image.new("RGB", (3, 2), (200, 100, 50))
    img.putpixel((2, 1), (1, 2, 3))
    buf = PixelBuffer.from_image(img)
    assert buf.bits_per_pixel == 24
    assert (buf.width, buf.height) == (3, 2)
    assert buf.get_pixel(0, 0) == Color(200, 100, 50)
    assert buf.get_pixel(2, 1) == Color(1, 2, 3)


def test_from_rgba_image_ignores_alpha():
    img = Image.new("RGBA", (2, 2), (9, 8, 7, 0))
    buf = PixelBuffer.from_image(img)
    assert buf.bits_per_pixel == 32
    assert buf.get_pixel(1, 1) == Color(9, 8, 7)


@pytest.mark.parametrize("mode", ["L", "P", "1", "I;16", "CMYK"])
def test_from_image_rejects_other_modes(mode):
    with pytest.raises(UnsupportedPixelFormat):
        PixelBuffer.from_image(Image.new(mode, (2, 2)))


def test_region_pixels_matches_get_pixel():
    img = Image.new("RGB", (4, 3))
    for x in range(4):
        for y in range(3):
            img.putpixel((x, y), (x * 10, y * 10, x + y))
    buf = PixelBuffer.from_image(img)
    block = buf.region_pixels(Rect(1, 1, 2, 2))
    assert block.shape == (2, 2, 3)
    for dy in range(2):
        for dx in range(2):
            assert Color(*(int(v) for v in block[dy, dx])) == buf.get_pixel(1 + dx, 1 + dy)


def test_region_pixels_empty_rect():
    buf = PixelBuffer(PADDED_BGR, 2, 2, 24, stride=8)
    assert buf.region_pixels(Rect(0, 0, 0, 2)).size == 0
