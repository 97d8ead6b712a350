"""Two-stage histogram clustering of edge pixels into one background color.

Stage 1 buckets every sampled pixel by the top ``bits`` bits of each channel
and collects every bucket whose count is within ``tied_color_margin`` of the
most frequent one. Among those, muted and darker cells win over vivid or
bright ones, so the chosen backdrop blends in instead of standing out.

Stage 2 re-scans the pixels that fell into the winning cell and histograms
their remaining low-order bits, so the returned color is a shade that
actually occurs in the image rather than the cell's rounded-down corner.
"""

import colorsys
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

import numpy as np

from .constants import DEFAULT_BUCKET_BITS, DEFAULT_TIED_COLOR_MARGIN, TIE_BREAK_STEPS
from .domain import Color, Rect
from .pixel_buffer import PixelBuffer
from .trace import TraceLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BucketCandidate:
    """A coarse histogram cell considered for the background color."""

    bucket: int
    count: int
    color: Color
    saturation: float
    lightness: float
    muted_lightness: float

    def sort_key(self) -> tuple:
        return (
            round(self.muted_lightness * TIE_BREAK_STEPS),
            round(self.saturation * TIE_BREAK_STEPS),
            self.muted_lightness,
            -self.count,
            self.bucket,
        )


class ColorClusterer:
    def __init__(self, bits: int = DEFAULT_BUCKET_BITS, tied_color_margin: Decimal = DEFAULT_TIED_COLOR_MARGIN):
        if not 1 <= bits <= 7:
            raise ValueError(f"bits must be in [1, 7], got {bits}")
        self.bits = bits
        self.bits_mask = (1 << bits) - 1
        self.bits_removed = 8 - bits
        self.bits_removed_mask = (1 << self.bits_removed) - 1
        self.tied_color_margin = Decimal(tied_color_margin)

    @property
    def bucket_count(self) -> int:
        return 1 << (3 * self.bits)

    @property
    def subbucket_count(self) -> int:
        return 1 << (3 * self.bits_removed)

    # ---------- bucket arithmetic ----------
    def color_to_bucket(self, c: Color) -> int:
        r, g, b = c
        br = self.bits_removed
        return (r >> br) << (2 * self.bits) | (g >> br) << self.bits | (b >> br)

    def color_to_subbucket(self, c: Color) -> int:
        r, g, b = c
        br, mask = self.bits_removed, self.bits_removed_mask
        return (r & mask) << (2 * br) | (g & mask) << br | (b & mask)

    def bucket_to_color(self, bucket: int) -> Color:
        br = self.bits_removed
        return Color(
            (bucket >> (2 * self.bits)) << br,
            (bucket >> self.bits & self.bits_mask) << br,
            (bucket & self.bits_mask) << br,
        )

    def apply_subbucket(self, color: Color, subbucket: int) -> Color:
        br, mask = self.bits_removed, self.bits_removed_mask
        return Color(
            color.r + (subbucket >> (2 * br)),
            color.g + (subbucket >> br & mask),
            color.b + (subbucket & mask),
        )

    def _buckets(self, pixels: np.ndarray) -> np.ndarray:
        p = pixels.astype(np.int64) >> self.bits_removed
        return p[:, 0] << (2 * self.bits) | p[:, 1] << self.bits | p[:, 2]

    def _subbuckets(self, pixels: np.ndarray) -> np.ndarray:
        p = pixels.astype(np.int64) & self.bits_removed_mask
        br = self.bits_removed
        return p[:, 0] << (2 * br) | p[:, 1] << br | p[:, 2]

    # ---------- stages ----------
    def coarse_histogram(self, pixels: np.ndarray) -> np.ndarray:
        return np.bincount(self._buckets(pixels), minlength=self.bucket_count)

    def describe_bucket(self, bucket: int, count: int) -> BucketCandidate:
        color = self.bucket_to_color(bucket)
        _, lightness, saturation = colorsys.rgb_to_hls(color.r / 255, color.g / 255, color.b / 255)
        # Lightness-like measure that pulls saturated colors down
        muted = (2 - saturation) * lightness / 2
        return BucketCandidate(bucket, count, color, saturation, lightness, muted)

    def tied_for_best(self, histogram: np.ndarray) -> list[BucketCandidate]:
        """Buckets within the tie margin of the maximum, best first."""
        max_frequency = int(histogram.max()) if histogram.size else 0
        if max_frequency == 0:
            return []
        min_frequency_ok = int(max_frequency * self.tied_color_margin)
        # Empty cells are never candidates even when the margin floors to zero
        tied = np.flatnonzero(histogram >= max(min_frequency_ok, 1))
        candidates = [self.describe_bucket(int(b), int(histogram[b])) for b in tied]
        candidates.sort(key=BucketCandidate.sort_key)
        return candidates

    def refine(self, pixels: np.ndarray, bucket: int) -> tuple[Color, int]:
        """Most common exact shade inside coarse ``bucket``.

        Returns the color and the winning sub-bucket's count.
        """
        in_bucket = pixels[self._buckets(pixels) == bucket]
        hist = np.bincount(self._subbuckets(in_bucket), minlength=self.subbucket_count)
        # argmax returns the lowest index on equal counts
        subbucket = int(np.argmax(hist))
        return self.apply_subbucket(self.bucket_to_color(bucket), subbucket), int(hist[subbucket])

    def cluster(self, pixels: np.ndarray, trace: Optional[TraceLog] = None) -> Optional[Color]:
        """Dominant edge color of an ``(n, 3)`` RGB array, or None if empty."""
        pixels = np.asarray(pixels, dtype=np.uint8).reshape(-1, 3)
        if len(pixels) == 0:
            if trace is not None:
                trace.write("No pixels sampled, no background color")
            return None

        histogram = self.coarse_histogram(pixels)
        if trace is not None:
            trace.write("Computed histogram")

        tied = self.tied_for_best(histogram)
        if trace is not None:
            max_frequency = int(histogram.max())
            trace.write(
                f"maxFrequency={max_frequency} "
                f"minFrequencyOk={int(max_frequency * self.tied_color_margin)}"
            )
            for c in tied:
                trace.write(
                    f"{c.color.hex} s={c.saturation:.2f} v={c.lightness:.2f} l={c.muted_lightness:.2f} {c.count}"
                )

        chosen_coarse = tied[0]
        chosen, sub_count = self.refine(pixels, chosen_coarse.bucket)
        if trace is not None:
            trace.write("Computed final histogram")
            trace.write(f"chosen: {chosen.hex} (coarse {chosen_coarse.color.hex}, {sub_count} pixels)")
        return chosen

    def cluster_regions(
        self, buffer: PixelBuffer, regions: Iterable[Rect], trace: Optional[TraceLog] = None
    ) -> Optional[Color]:
        """Sample ``regions`` of ``buffer`` and cluster them into one color."""
        samples = [buffer.region_pixels(r).reshape(-1, 3) for r in regions if not r.is_empty]
        logger.debug(f"[clustering] Sampling {sum(len(s) for s in samples)} pixels from {len(samples)} regions")
        if not samples:
            return self.cluster(np.empty((0, 3), dtype=np.uint8), trace)
        return self.cluster(np.concatenate(samples), trace)
