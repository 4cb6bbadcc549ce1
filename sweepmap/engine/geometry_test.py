"""Tests for bounding boxes and the map <-> screen transform."""

import pytest

from .errors import GeometryUndefined
from .geometry import (
    compute_bounding_box,
    compute_transform,
    map_to_screen,
    require_transform,
    screen_line_to_map,
    screen_to_map,
    segment_at,
    transform_for_map,
)
from .types import BoundingBox, MapLayer, RobotMap, ViewTransform, ZonePoint


def _layer(layer_type, points, segment_id=None):
    meta = {"segmentId": segment_id} if segment_id is not None else {}
    return MapLayer(type=layer_type, pixels=tuple(points), meta_data=meta)


# ---------------------------------------------------------------------------
# compute_bounding_box
# ---------------------------------------------------------------------------


class TestBoundingBox:
    def test_spans_all_layers(self):
        layers = [
            _layer("floor", [(10, 20), (30, 5)]),
            _layer("wall", [(-4, 50)]),
        ]
        assert compute_bounding_box(layers) == BoundingBox(
            min_x=-4, min_y=5, max_x=30, max_y=50
        )

    def test_single_point(self):
        assert compute_bounding_box([_layer("floor", [(7, 8)])]) == BoundingBox(
            7, 8, 7, 8
        )

    def test_empty_layers_ignored(self):
        layers = [_layer("floor", []), _layer("wall", [(1, 1)])]
        assert compute_bounding_box(layers) == BoundingBox(1, 1, 1, 1)

    def test_no_points(self):
        assert compute_bounding_box([]) is None
        assert compute_bounding_box([_layer("floor", [])]) is None


# ---------------------------------------------------------------------------
# compute_transform
# ---------------------------------------------------------------------------


class TestComputeTransform:
    def test_width_limited(self):
        # content 100x50 into 240x240 with padding 20: scale = 200/100 = 2
        bbox = BoundingBox(0, 0, 95, 45)
        t = compute_transform(bbox, 5, (240, 240), padding=20)
        assert t.scale == pytest.approx(2.0)
        assert t.offset_x == pytest.approx(20.0)
        # 200 - 50*2 = 100 spare vertically, split evenly
        assert t.offset_y == pytest.approx(20.0 + 50.0)

    def test_offset_accounts_for_min(self):
        bbox = BoundingBox(100, 200, 195, 295)
        t = compute_transform(bbox, 5, (240, 240), padding=20)
        assert t.scale == pytest.approx(2.0)
        assert map_to_screen((100, 200), t) == pytest.approx((20.0, 20.0))
        assert map_to_screen((200, 300), t) == pytest.approx((220.0, 220.0))

    def test_uniform_scale_fits_both_axes(self):
        bbox = BoundingBox(0, 0, 395, 95)
        t = compute_transform(bbox, 5, (300, 500), padding=20)
        assert 400 * t.scale <= 260 + 1e-9
        assert 100 * t.scale <= 460 + 1e-9

    def test_none_bbox(self):
        assert compute_transform(None, 5, (300, 300)) is None

    def test_view_smaller_than_padding(self):
        bbox = BoundingBox(0, 0, 10, 10)
        assert compute_transform(bbox, 5, (40, 300), padding=20) is None
        assert compute_transform(bbox, 5, (300, 30), padding=20) is None

    def test_require_transform_raises(self):
        with pytest.raises(GeometryUndefined):
            require_transform(None, 5, (300, 300))

    def test_require_transform_returns(self):
        t = require_transform(BoundingBox(0, 0, 0, 0), 5, (100, 100))
        assert isinstance(t, ViewTransform)

    def test_transform_for_map_empty(self):
        assert transform_for_map(RobotMap(layers=()), (300, 300)) is None


# ---------------------------------------------------------------------------
# map_to_screen / screen_to_map
# ---------------------------------------------------------------------------


class TestConversions:
    def test_map_to_screen(self):
        t = ViewTransform(scale=0.5, offset_x=10.0, offset_y=-4.0)
        assert map_to_screen((100, 40), t) == pytest.approx((60.0, 16.0))

    def test_screen_to_map_truncates(self):
        t = ViewTransform(scale=2.0, offset_x=0.0, offset_y=0.0)
        assert screen_to_map((7.9, 3.1), t) == (3, 1)

    @pytest.mark.parametrize(
        "point", [(0, 0), (123, 456), (1000, 7), (-50, 80), (333, 333)]
    )
    def test_round_trip_within_one_unit(self, point):
        bbox = BoundingBox(-100, 0, 1200, 800)
        t = compute_transform(bbox, 5, (390, 844))
        back = screen_to_map(map_to_screen(point, t), t)
        assert abs(back[0] - point[0]) <= 1
        assert abs(back[1] - point[1]) <= 1

    def test_screen_line_to_map(self):
        t = ViewTransform(scale=2.0, offset_x=10.0, offset_y=20.0)
        line = screen_line_to_map((10, 20), (30, 60), t)
        assert line == (ZonePoint(0, 0), ZonePoint(10, 20))

    def test_screen_line_without_transform(self):
        assert screen_line_to_map((0, 0), (10, 10), None) is None


# ---------------------------------------------------------------------------
# segment_at
# ---------------------------------------------------------------------------


class TestSegmentAt:
    def test_hit_inside_pixel_square(self):
        layers = [
            _layer("floor", [(0, 0)]),
            _layer("segment", [(10, 10)], segment_id=1),
            _layer("segment", [(20, 10)], segment_id=2),
        ]
        assert segment_at(layers, (12, 14), 5) == "1"
        assert segment_at(layers, (20, 10), 5) == "2"

    def test_edge_is_exclusive(self):
        layers = [_layer("segment", [(10, 10)], segment_id=1)]
        assert segment_at(layers, (15, 10), 5) is None

    def test_miss(self):
        layers = [_layer("segment", [(10, 10)], segment_id=1)]
        assert segment_at(layers, (100, 100), 5) is None

    def test_last_layer_wins(self):
        layers = [
            _layer("segment", [(0, 0)], segment_id="a"),
            _layer("segment", [(0, 0)], segment_id="b"),
        ]
        assert segment_at(layers, (1, 1), 5) == "b"
