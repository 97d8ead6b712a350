"""Decide placement and background color for one image.

Runs the classifier, then for Center/Fit samples the edge strips and clusters
them into a color. Fill and Skip never compute a color. Each call builds its
own trace, buffer views and histograms; nothing is shared between calls.
"""

import logging

from .clustering import ColorClusterer
from .config import WallpaperConfig
from .domain import Dimensions, PlacementMode, WallpaperDecision
from .pixel_buffer import PixelBuffer
from .placement import classify
from .regions import select_regions
from .trace import TraceLog

logger = logging.getLogger(__name__)


def decide(
    buffer: PixelBuffer,
    screen: Dimensions,
    config: WallpaperConfig | None = None,
    image_size: Dimensions | None = None,
    trace: TraceLog | None = None,
) -> WallpaperDecision:
    """Return the placement mode and optional background color.

    Args:
        buffer: Decoded pixels, possibly a thumbnail of the real image.
        screen: Target screen size.
        config: Thresholds; defaults when omitted.
        image_size: Full image size when ``buffer`` is a thumbnail.
        trace: Trace to append to (a fresh one is created otherwise).
    """
    config = config or WallpaperConfig()
    trace = trace if trace is not None else TraceLog()
    image_size = image_size or buffer.size

    placement = classify(image_size, screen, config, trace)
    decision = WallpaperDecision(mode=placement.mode, placement=placement)

    if placement.mode in (PlacementMode.SKIP, PlacementMode.FILL) or not placement.flags.any:
        decision.trace = trace.lines
        logger.debug(f"[engine] {image_size} on {screen}: {placement.mode.name}, no background color")
        return decision

    rect1, rect2 = select_regions(buffer.size, placement.flags, config.edge_fraction)
    trace.write(f"regions=({rect1.x},{rect1.y},{rect1.width},{rect1.height}) ({rect2.x},{rect2.y},{rect2.width},{rect2.height})")

    clusterer = ColorClusterer(config.bucket_bits, config.tied_color_margin)
    decision.color = clusterer.cluster_regions(buffer, (rect1, rect2), trace)
    decision.trace = trace.lines
    logger.debug(
        f"[engine] {image_size} on {screen}: {placement.mode.name}, "
        f"color={decision.color.hex if decision.color else None}"
    )
    return decision
