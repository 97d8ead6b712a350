"""
Open candidate image files with Pillow and turn them into pixel buffers.

Placement is classified on the real image size, but colors are analysed on
a small square thumbnail: the edge strips only need a coarse sample and a
120x120 buffer keeps the histogram passes cheap regardless of source size.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from .config import WallpaperConfig
from .domain import Dimensions
from .errors import WallpaperError
from .pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

# Per-image failures a caller should treat as "try another candidate"
LOAD_ERRORS = (OSError, Image.DecompressionBombError, WallpaperError)


@dataclass(frozen=True)
class LoadedImage:
    path: Path
    size: Dimensions
    buffer: PixelBuffer


def to_buffer(image: Image.Image, thumb_size: int | None) -> PixelBuffer:
    """Convert a decoded image into a (thumbnail) pixel buffer."""
    if image.mode not in ("RGB", "RGBA", "RGBX"):
        image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
    if thumb_size:
        # Square thumbnail; strip sizes are proportional to each axis
        image = image.resize((thumb_size, thumb_size), Image.Resampling.BILINEAR)
    return PixelBuffer.from_image(image)


def load_image(file_path: str | Path, config: WallpaperConfig) -> LoadedImage:
    """Open ``file_path`` and return its size and analysis buffer.

    Raises:
        FileNotFoundError: if the path does not exist.
        PIL.UnidentifiedImageError: if the file is not an image.
        OSError: if decoding fails.
    """
    path = Path(file_path)
    with Image.open(path) as img:
        size = Dimensions(*img.size)
        buffer = to_buffer(img, config.thumb_size)
    logger.debug(f"[image_source] Opened {path.name} ({size}), buffer {buffer.size}")
    return LoadedImage(path=path, size=size, buffer=buffer)
