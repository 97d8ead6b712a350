"""Configuration for the placement/edge color engine.

Values live in a JSON settings file (``~/.wallpaper_watcher_config.json`` or
the path in ``WALLPAPER_WATCHER_CONFIG``) merged over ``DEFAULT_SETTINGS``.
Floats are parsed as ``Decimal`` so thresholds compare exactly at boundaries.
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from .constants import (
    DEFAULT_BUCKET_BITS,
    DEFAULT_EDGE_FRACTION,
    DEFAULT_MAX_FRACTION_OFFSCREEN,
    DEFAULT_MAX_SCALE_FACTOR,
    DEFAULT_SKIP_SCALE_FACTOR,
    DEFAULT_THUMB_SIZE,
    DEFAULT_TIED_COLOR_MARGIN,
    IMAGE_EXTENSIONS,
)

CONFIG_ENV_VAR = "WALLPAPER_WATCHER_CONFIG"

CONFIG_PATH = os.path.expanduser("~/.wallpaper_watcher_config.json")

DEFAULT_SETTINGS = {
    "image_paths": [],
    "extensions": IMAGE_EXTENSIONS,
    "max_scale_factor": DEFAULT_MAX_SCALE_FACTOR,
    "skip_scale_factor": DEFAULT_SKIP_SCALE_FACTOR,
    "max_fraction_offscreen": DEFAULT_MAX_FRACTION_OFFSCREEN,
    "edge_fraction": DEFAULT_EDGE_FRACTION,
    "bucket_bits": DEFAULT_BUCKET_BITS,
    "tied_color_margin": DEFAULT_TIED_COLOR_MARGIN,
    "thumb_size": DEFAULT_THUMB_SIZE,
}


def _to_decimal(name: str, value) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float, str)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"{name} must be finite, got {value!r}")
    return result


def _to_int(name: str, value) -> int:
    """Accept ints and integral numbers such as 120.0 read from JSON."""
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, (Decimal, float)) and _to_decimal(name, value) == int(value):
        return int(value)
    raise ValueError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class WallpaperConfig:
    """Thresholds consumed by the classifier, region selector and clusterer."""

    max_scale_factor: Decimal = DEFAULT_MAX_SCALE_FACTOR
    """Upper bound on acceptable upscaling"""

    skip_scale_factor: Decimal = DEFAULT_SKIP_SCALE_FACTOR
    """Upscale needed to fit beyond which the image is rejected"""

    max_fraction_offscreen: Decimal = DEFAULT_MAX_FRACTION_OFFSCREEN
    """Largest tolerated cropped fraction under Fill"""

    edge_fraction: Decimal = DEFAULT_EDGE_FRACTION
    """Portion of the matched axis sampled as edge"""

    bucket_bits: int = DEFAULT_BUCKET_BITS
    """Coarse quantization width per channel"""

    tied_color_margin: Decimal = DEFAULT_TIED_COLOR_MARGIN
    """Fraction of the top count needed to be tied for best"""

    thumb_size: Optional[int] = DEFAULT_THUMB_SIZE
    """Thumbnail side analysed for colors (None analyses the full image)"""

    def __post_init__(self):
        # Accept ints/strings/floats from callers but store exact decimals
        for name in ("max_scale_factor", "skip_scale_factor", "max_fraction_offscreen",
                     "edge_fraction", "tied_color_margin"):
            object.__setattr__(self, name, _to_decimal(name, getattr(self, name)))
        object.__setattr__(self, "bucket_bits", _to_int("bucket_bits", self.bucket_bits))
        if self.thumb_size is not None:
            object.__setattr__(self, "thumb_size", _to_int("thumb_size", self.thumb_size))
        self.validate()

    def validate(self):
        if self.max_scale_factor <= 0:
            raise ValueError(f"max_scale_factor must be > 0, got {self.max_scale_factor}")
        if self.skip_scale_factor < self.max_scale_factor:
            raise ValueError(
                f"skip_scale_factor ({self.skip_scale_factor}) must be >= max_scale_factor ({self.max_scale_factor})"
            )
        if not 0 <= self.max_fraction_offscreen <= 1:
            raise ValueError(f"max_fraction_offscreen must be in [0, 1], got {self.max_fraction_offscreen}")
        if not 0 < self.edge_fraction <= 1:
            raise ValueError(f"edge_fraction must be in (0, 1], got {self.edge_fraction}")
        if not 1 <= self.bucket_bits <= 7:
            raise ValueError(f"bucket_bits must be an integer in [1, 7], got {self.bucket_bits!r}")
        if not 0 <= self.tied_color_margin <= 1:
            raise ValueError(f"tied_color_margin must be in [0, 1], got {self.tied_color_margin}")
        if self.thumb_size is not None and self.thumb_size <= 0:
            raise ValueError(f"thumb_size must be positive or None, got {self.thumb_size}")

    @classmethod
    def from_mapping(cls, settings: dict[str, Any]) -> "WallpaperConfig":
        """Build a config from a settings dict, ignoring unrelated keys."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in settings.items() if k in names})


def config_path() -> str:
    return os.path.expanduser(os.environ.get(CONFIG_ENV_VAR) or CONFIG_PATH)


def load_settings(path: str | None = None) -> dict[str, Any]:
    """Load settings from config file merged over the defaults."""
    settings = DEFAULT_SETTINGS.copy()
    path = path or config_path()

    try:
        if os.path.exists(path):
            with open(path) as f:
                saved_settings = json.load(f, parse_float=Decimal)
            if isinstance(saved_settings, dict):
                settings.update(saved_settings)
            else:
                logging.warning(f"[config] {path} has invalid format (expected object, got {type(saved_settings).__name__})")
    except (OSError, json.JSONDecodeError) as e:
        logging.warning(f"[config] Could not load settings from {path}: {e}")

    return settings


def load_config(path: str | None = None) -> WallpaperConfig:
    return WallpaperConfig.from_mapping(load_settings(path))


def get_setting(key, default=None, path: str | None = None):
    """Utility function to get a single setting value"""
    return load_settings(path).get(key, default)
