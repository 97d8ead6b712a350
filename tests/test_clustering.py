"""Tests for the two-stage edge color histogram."""
from decimal import Decimal

import numpy as np
import pytest

from wallpaper_watcher.clustering import ColorClusterer
from wallpaper_watcher.domain import Color, Dimensions, EdgeMatchFlags
from wallpaper_watcher.regions import select_regions
from wallpaper_watcher.trace import TraceLog


def pixels(*groups):
    """Build an (n, 3) array from (color, count) pairs."""
    rows = [color for color, count in groups for _ in range(count)]
    return np.array(rows, dtype=np.uint8).reshape(-1, 3)


@pytest.fixture
def clusterer():
    return ColorClusterer()


def test_bucket_arithmetic(clusterer):
    red = Color(255, 0, 0)
    bucket = clusterer.color_to_bucket(red)
    assert bucket == 15 << 8
    assert clusterer.bucket_to_color(bucket) == Color(240, 0, 0)
    sub = clusterer.color_to_subbucket(red)
    assert clusterer.apply_subbucket(Color(240, 0, 0), sub) == red
    assert clusterer.bucket_count == 4096
    assert clusterer.subbucket_count == 4096


def test_solid_red_returns_exact_red(clusterer):
    data = pixels(((255, 0, 0), 200))
    hist = clusterer.coarse_histogram(data)
    tied = clusterer.tied_for_best(hist)
    assert len(tied) == 1
    assert tied[0].color == Color(240, 0, 0)
    color, count = clusterer.refine(data, tied[0].bucket)
    assert count == 200
    assert color == Color(255, 0, 0)
    assert clusterer.cluster(data) == Color(255, 0, 0)


def test_no_pixels_no_color(clusterer):
    assert clusterer.cluster(np.empty((0, 3), dtype=np.uint8)) is None


def test_darker_tied_bucket_beats_more_frequent_light_one(clusterer):
    data = pixels(((250, 250, 250), 100), ((0, 0, 0), 50))
    assert clusterer.cluster(data) == Color(0, 0, 0)


def test_bucket_below_margin_is_not_tied(clusterer):
    # floor(100 * 0.08) = 8 > 5
    data = pixels(((250, 250, 250), 100), ((0, 0, 0), 5))
    assert clusterer.cluster(data) == Color(250, 250, 250)


def test_less_saturated_wins_when_lightness_rounds_equal(clusterer):
    # Both round to 5 on the lightness key; grey has saturation 0
    pink, grey = (240, 208, 208), (160, 160, 160)
    tied = clusterer.tied_for_best(clusterer.coarse_histogram(pixels((pink, 100), (grey, 60))))
    keys = [t.sort_key()[0] for t in tied]
    assert keys == [5, 5]
    assert [t.color for t in tied] == [Color(*grey), Color(*pink)]
    assert clusterer.cluster(pixels((pink, 100), (grey, 60))) == Color(*grey)


def test_zero_margin_never_selects_empty_buckets():
    clusterer = ColorClusterer(tied_color_margin=0)
    tied = clusterer.tied_for_best(clusterer.coarse_histogram(pixels(((10, 20, 30), 3))))
    assert len(tied) == 1


def test_refinement_picks_most_common_sub_shade(clusterer):
    data = pixels(((40, 40, 40), 3), ((35, 36, 37), 5), ((200, 10, 10), 1))
    assert clusterer.cluster(data) == Color(35, 36, 37)


@pytest.mark.parametrize("seed", range(5))
def test_refinement_stays_in_winning_bucket(clusterer, seed):
    rng = np.random.default_rng(seed)
    data = rng.integers(0, 256, size=(500, 3), dtype=np.uint8)
    tied = clusterer.tied_for_best(clusterer.coarse_histogram(data))
    color = clusterer.cluster(data)
    assert clusterer.color_to_bucket(color) == tied[0].bucket


def test_result_independent_of_pixel_order(clusterer):
    rng = np.random.default_rng(42)
    data = rng.integers(0, 64, size=(300, 3), dtype=np.uint8)
    expected = clusterer.cluster(data)
    for _ in range(3):
        assert clusterer.cluster(rng.permutation(data)) == expected


def test_other_bucket_widths():
    clusterer = ColorClusterer(bits=3)
    assert clusterer.bucket_count == 512
    assert clusterer.subbucket_count == 1 << 15
    assert clusterer.cluster(pixels(((255, 0, 0), 10))) == Color(255, 0, 0)
    assert ColorClusterer(bits=7).cluster(pixels(((17, 99, 201), 4))) == Color(17, 99, 201)


@pytest.mark.parametrize("bits", [0, 8])
def test_invalid_bucket_width(bits):
    with pytest.raises(ValueError):
        ColorClusterer(bits=bits)


def test_cluster_regions_only_samples_edges(clusterer, make_buffer):
    edge = (30, 60, 90)
    columns = {x: edge for x in (0, 1, 8, 9)}
    buf = make_buffer(10, 10, fill=(255, 255, 0), columns=columns)
    regions = select_regions(Dimensions(10, 10), EdgeMatchFlags(match_left_right=True), Decimal("0.4"))
    trace = TraceLog()
    assert clusterer.cluster_regions(buf, regions, trace) == Color(*edge)
    assert any(m.startswith("chosen: #1E3C5A") for m in trace.messages)


def test_cluster_regions_empty(clusterer, make_buffer):
    buf = make_buffer(4, 4)
    trace = TraceLog()
    assert clusterer.cluster_regions(buf, select_regions(buf.size, EdgeMatchFlags(), 1), trace) is None
    assert trace.messages == ["No pixels sampled, no background color"]
