"""Project-wide constants for wallpaper-watcher.

Centralizes the default thresholds used by the placement classifier and the
edge color clusterer so the config layer and the tests agree on them.
"""

from decimal import Decimal

# Placement Configuration
DEFAULT_MAX_SCALE_FACTOR = Decimal("1.2")
"""Largest upscale accepted before falling back to a centered image"""

DEFAULT_SKIP_SCALE_FACTOR = Decimal("3.0")
"""Upscale needed to fit beyond which the image is rejected"""

DEFAULT_MAX_FRACTION_OFFSCREEN = Decimal("0.1")
"""Largest fraction of the long axis that Fill may crop"""

# Edge Color Configuration
DEFAULT_EDGE_FRACTION = Decimal("0.4")
"""Fraction of each axis sampled as edge (split between both sides)"""

DEFAULT_BUCKET_BITS = 4
"""Bits per channel kept by the coarse histogram"""

DEFAULT_TIED_COLOR_MARGIN = Decimal("0.08")
"""Fraction of the top bucket count a bucket needs to be tied for best"""

TIE_BREAK_STEPS = 8
"""Granularity of the rounded lightness/saturation tie-break keys"""

# Thumbnail Configuration
DEFAULT_THUMB_SIZE = 120
"""Side of the square thumbnail analysed for edge colors"""

# Candidate Files
IMAGE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".tif", ".webp"]
"""Extensions considered by default when enumerating candidate directories"""
