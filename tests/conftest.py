import logging

import pytest
from PIL import Image

from wallpaper_watcher.config import WallpaperConfig
from wallpaper_watcher.domain import Dimensions
from wallpaper_watcher.pixel_buffer import PixelBuffer

logging.getLogger('PIL').setLevel(logging.WARNING)


@pytest.fixture
def config():
    """Reference thresholds: max 1.2, skip 3.0, 10% crop tolerance."""
    return WallpaperConfig(max_scale_factor="1.2", skip_scale_factor="3.0", max_fraction_offscreen="0.1")


@pytest.fixture
def screen():
    return Dimensions(1920, 1080)


@pytest.fixture
def make_buffer():
    """Build a PixelBuffer from a solid image with optional painted columns.

    ``columns`` maps x -> RGB tuple painted over the full height.
    """
    def _make(width, height, fill=(0, 0, 0), columns=None, mode="RGB"):
        img = Image.new(mode, (width, height), fill if mode == "RGB" else fill + (255,))
        for x, color in (columns or {}).items():
            for y in range(height):
                img.putpixel((x, y), color if mode == "RGB" else color + (255,))
        return PixelBuffer.from_image(img)
    return _make
