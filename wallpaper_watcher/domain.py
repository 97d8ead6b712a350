from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import NamedTuple

from .errors import InvalidDimensions


@dataclass(frozen=True)
class Dimensions:
    """Width/height pair shared by images and screens."""

    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidDimensions(f"Dimensions must be positive, got {self.width}x{self.height}")

    @classmethod
    def parse(cls, text: str) -> "Dimensions":
        """Parse ``"1920x1080"``."""
        try:
            w, h = text.lower().split("x")
            width, height = int(w), int(h)
        except ValueError as e:
            raise InvalidDimensions(f"Expected WIDTHxHEIGHT, got {text!r}") from e
        return cls(width, height)

    def __str__(self):
        return f"{self.width}x{self.height}"


class Color(NamedTuple):
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return "#{:02X}{:02X}{:02X}".format(*self)


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


EMPTY_RECT = Rect(0, 0, 0, 0)


class PlacementMode(Enum):
    SKIP = "skip"  # rejection signal, not a real placement
    CENTER = "center"
    FIT = "fit"
    FILL = "fill"


@dataclass(frozen=True)
class EdgeMatchFlags:
    match_left_right: bool = False
    match_top_bottom: bool = False

    @property
    def any(self) -> bool:
        return self.match_left_right or self.match_top_bottom


@dataclass(frozen=True)
class PlacementDecision:
    mode: PlacementMode
    flags: EdgeMatchFlags
    width_scale: Decimal
    height_scale: Decimal
    fit_scale: Decimal
    fill_scale: Decimal
    fill_fraction_offscreen: Decimal


@dataclass
class WallpaperDecision:
    mode: PlacementMode
    color: Color | None = None
    placement: PlacementDecision | None = None
    trace: list[str] = field(default_factory=list)

    def as_tuple(self) -> tuple[PlacementMode, Color | None]:
        return self.mode, self.color
