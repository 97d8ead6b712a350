"""Choose the edge strips of an image that get sampled for a background color."""

import math
from decimal import Decimal

from .domain import EMPTY_RECT, Dimensions, EdgeMatchFlags, Rect


def select_regions(size: Dimensions, flags: EdgeMatchFlags, edge_fraction: Decimal) -> tuple[Rect, Rect]:
    """Return the pair of strips to sample.

    Left/right strips take precedence when both flags are set (Center), since
    only one pair is ever sampled. With no flags two empty rects come back.
    """
    if flags.match_left_right:
        w = math.floor(Decimal(size.width) * edge_fraction / 2)
        return Rect(0, 0, w, size.height), Rect(size.width - w, 0, w, size.height)
    if flags.match_top_bottom:
        h = math.floor(Decimal(size.height) * edge_fraction / 2)
        return Rect(0, 0, size.width, h), Rect(0, size.height - h, size.width, h)
    return EMPTY_RECT, EMPTY_RECT
