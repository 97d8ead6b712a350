"""Classify an image/screen pair into a placement mode.

All ratios are exact decimals: the thresholds are typically round numbers
(1.2, 0.1) and a float ratio landing a hair above one would flip the mode.
"""

from decimal import Decimal

from .config import WallpaperConfig
from .domain import Dimensions, EdgeMatchFlags, PlacementDecision, PlacementMode
from .trace import TraceLog


def edge_match_flags(mode: PlacementMode, width_scale: Decimal, height_scale: Decimal) -> EdgeMatchFlags:
    """Which axes leave unfilled screen area under ``mode``."""
    if mode == PlacementMode.CENTER:
        return EdgeMatchFlags(match_left_right=True, match_top_bottom=True)
    if mode == PlacementMode.FIT:
        # The axis with the larger scale factor is the one with slack
        left_right = width_scale > height_scale
        return EdgeMatchFlags(match_left_right=left_right, match_top_bottom=not left_right)
    return EdgeMatchFlags()


def classify(
    image: Dimensions,
    screen: Dimensions,
    config: WallpaperConfig,
    trace: TraceLog | None = None,
) -> PlacementDecision:
    """Pick Skip/Center/Fit/Fill for ``image`` shown on ``screen``.

    Decision order:
      - fit scale above ``skip_scale_factor``: Skip (reject the image)
      - fit scale above ``max_scale_factor``: Center at native size
      - fill scale above ``max_scale_factor`` or too much cropped: Fit
      - otherwise: Fill
    """
    width_scale = Decimal(screen.width) / Decimal(image.width)
    height_scale = Decimal(screen.height) / Decimal(image.height)

    fit_scale = min(width_scale, height_scale)
    fill_scale = max(width_scale, height_scale)
    fill_fraction_offscreen = 1 - min(width_scale / height_scale, height_scale / width_scale)

    if trace is not None:
        trace.write(f"w={image.width} h={image.height} sw={screen.width} sh={screen.height}")
        trace.write(f"fitScaleFactor={fit_scale:.2f} fillScaleFactor={fill_scale:.2f}")
        trace.write(f"fillFractionOffscreen={fill_fraction_offscreen:.2f}")

    if fit_scale > config.skip_scale_factor:
        mode = PlacementMode.SKIP
    elif fit_scale > config.max_scale_factor:
        mode = PlacementMode.CENTER
    elif fill_scale > config.max_scale_factor or fill_fraction_offscreen > config.max_fraction_offscreen:
        mode = PlacementMode.FIT
    else:
        mode = PlacementMode.FILL

    flags = edge_match_flags(mode, width_scale, height_scale)

    if trace is not None:
        trace.write(f"style={mode.name}")
        trace.write(f"matchLeftAndRight={flags.match_left_right} matchTopAndBottom={flags.match_top_bottom}")

    return PlacementDecision(
        mode=mode,
        flags=flags,
        width_scale=width_scale,
        height_scale=height_scale,
        fit_scale=fit_scale,
        fill_scale=fill_scale,
        fill_fraction_offscreen=fill_fraction_offscreen,
    )
