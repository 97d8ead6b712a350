"""Random-access view over decoded 24/32-bit pixel data.

The buffer owns a private copy of the bytes, laid out as rows of
blue-green-red(-alpha) pixels with a possibly padded stride, so nothing
keeps a reference to the decoder's memory once it is built.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from .domain import Color, Dimensions, Rect
from .errors import UnsupportedPixelFormat

SUPPORTED_DEPTHS = (24, 32)

# Pillow mode -> (bits per pixel, channel order to emit, blue-green-red first)
_MODE_LAYOUTS = {
    "RGB": (24, [2, 1, 0]),
    "RGBA": (32, [2, 1, 0, 3]),
    "RGBX": (32, [2, 1, 0, 3]),
}


class PixelBuffer:
    def __init__(self, data: bytes, width: int, height: int, bits_per_pixel: int, stride: int | None = None):
        if bits_per_pixel not in SUPPORTED_DEPTHS:
            raise UnsupportedPixelFormat(f"Unsupported pixel depth: {bits_per_pixel} bpp")
        self.size = Dimensions(width, height)
        self.bytes_per_pixel = bits_per_pixel // 8
        self.stride = abs(stride) if stride else width * self.bytes_per_pixel
        if self.stride < width * self.bytes_per_pixel:
            raise ValueError(f"Stride {self.stride} too small for {width} pixels at {bits_per_pixel} bpp")
        length = self.stride * height
        if len(data) < length:
            raise ValueError(f"Pixel data too short: {len(data)} bytes, expected {length}")
        self.pixels = bytes(data[:length])

    @classmethod
    def from_image(cls, image: Image.Image) -> PixelBuffer:
        """Copy a decoded Pillow image into a buffer.

        Only 24-bit ``RGB`` and 32-bit ``RGBA``/``RGBX`` images are accepted;
        callers convert other modes first.
        """
        layout = _MODE_LAYOUTS.get(image.mode)
        if layout is None:
            raise UnsupportedPixelFormat(f"Unsupported image mode: {image.mode}")
        bits_per_pixel, order = layout
        arr = np.asarray(image, dtype=np.uint8)[:, :, order]
        width, height = image.size
        return cls(np.ascontiguousarray(arr).tobytes(), width, height, bits_per_pixel)

    @property
    def width(self) -> int:
        return self.size.width

    @property
    def height(self) -> int:
        return self.size.height

    @property
    def bits_per_pixel(self) -> int:
        return self.bytes_per_pixel * 8

    def get_pixel(self, x: int, y: int) -> Color:
        i = x * self.bytes_per_pixel + y * self.stride
        p = self.pixels
        return Color(p[i + 2], p[i + 1], p[i])

    def region_pixels(self, rect: Rect) -> np.ndarray:
        """Return the pixels inside ``rect`` as an ``(h, w, 3)`` RGB array."""
        if rect.is_empty:
            return np.empty((0, 0, 3), dtype=np.uint8)
        bpp = self.bytes_per_pixel
        rows = np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.height, self.stride)
        block = rows[rect.y : rect.bottom, rect.x * bpp : rect.right * bpp]
        return block.reshape(rect.height, rect.width, bpp)[:, :, 2::-1]
