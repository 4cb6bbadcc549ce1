"""Composite decoded map layers into a Pillow image.

Draw order is fixed and does not depend on the order layers arrive in:

  1. background fill
  2. ``floor`` layers
  3. ``segment`` layers, each tinted from ``SEGMENT_COLORS``; the selected
     segment uses ``SELECTED_SEGMENT_COLOR``
  4. ``wall`` layers
  5. overlays (the in-progress split line), in screen coordinates

Every decoded point is a filled square of side ``scale * pixel_size``
plus ``OVERDRAW`` screen units, so neighbouring cells never leave hairline
seams after rounding. Layers of other types are ignored.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
from PIL import Image, ImageDraw

from .geometry import (
    MAP_PADDING,
    ScreenPoint,
    compute_bounding_box,
    compute_transform,
)
from .types import MapLayer, RobotMap, ViewTransform

# -- Visual constants --

MAP_BG = "#f2f2f7"
FLOOR_COLOR = "#ebebeb"
WALL_COLOR = "#404040"
SELECTED_SEGMENT_COLOR = "#ffa64d"
SEGMENT_COLORS = ["#d9d9d9", "#c9dcef", "#d7ecd0", "#f1e3c4", "#e5d3ee"]
SPLIT_LINE_COLOR = "#ff3b30"
SPLIT_LINE_WIDTH = 3
SPLIT_LINE_DASH = (8, 4)

OVERDRAW = 0.5


@dataclass(frozen=True)
class SplitLine:
    """Screen-space line drawn above the map while the user cuts a room."""

    start: ScreenPoint
    end: ScreenPoint


class MapCompositor:
    """Renders map layers through a fixed ``ViewTransform``."""

    def __init__(
        self,
        pixel_size: int,
        transform: ViewTransform | None,
        size: tuple[int, int],
    ):
        self.pixel_size = pixel_size
        self.transform = transform
        self.size = size

    def render(
        self,
        layers: Sequence[MapLayer],
        selected_segment_id: str | None = None,
        overlay: SplitLine | None = None,
    ) -> Image.Image:
        img = Image.new("RGB", self.size, MAP_BG)
        if self.transform is None:
            return img
        draw = ImageDraw.Draw(img)

        for layer in layers:
            if layer.type == "floor":
                self._draw_points(draw, layer.pixels, FLOOR_COLOR)

        segment_index = 0
        for layer in layers:
            if layer.type != "segment":
                continue
            if (
                selected_segment_id is not None
                and layer.segment_id == selected_segment_id
            ):
                color = SELECTED_SEGMENT_COLOR
            else:
                color = SEGMENT_COLORS[segment_index % len(SEGMENT_COLORS)]
            segment_index += 1
            self._draw_points(draw, layer.pixels, color)

        for layer in layers:
            if layer.type == "wall":
                self._draw_points(draw, layer.pixels, WALL_COLOR)

        if overlay is not None:
            self._draw_dashed_line(draw, overlay.start, overlay.end)
        return img

    def _draw_points(self, draw, pixels, fill):
        if not pixels:
            return
        t = self.transform
        side = t.scale * self.pixel_size + OVERDRAW
        pts = np.asarray(pixels, dtype=np.float64)
        xs = pts[:, 0] * t.scale + t.offset_x
        ys = pts[:, 1] * t.scale + t.offset_y
        for x, y in zip(xs.tolist(), ys.tolist()):
            draw.rectangle([x, y, x + side, y + side], fill=fill)

    def _draw_dashed_line(self, draw, start, end):
        """Draw alternating dash/gap runs from start to end."""
        x0, y0 = start
        x1, y1 = end
        length = math.hypot(x1 - x0, y1 - y0)
        if length == 0:
            return
        ux = (x1 - x0) / length
        uy = (y1 - y0) / length
        dash, gap = SPLIT_LINE_DASH
        pos = 0.0
        while pos < length:
            stop = min(pos + dash, length)
            draw.line(
                [
                    (x0 + ux * pos, y0 + uy * pos),
                    (x0 + ux * stop, y0 + uy * stop),
                ],
                fill=SPLIT_LINE_COLOR,
                width=SPLIT_LINE_WIDTH,
            )
            pos = stop + gap


def render_map(
    robot_map: RobotMap,
    size: tuple[int, int],
    padding: float = MAP_PADDING,
    selected_segment_id: str | None = None,
    overlay: SplitLine | None = None,
) -> tuple[Image.Image, ViewTransform | None]:
    """Render a map into a view of ``size`` and return the transform used.

    The returned transform is the one to hand to ``screen_to_map`` for any
    gesture made on this image.
    """
    bbox = compute_bounding_box(robot_map.layers)
    transform = compute_transform(bbox, robot_map.pixel_size, size, padding)
    compositor = MapCompositor(robot_map.pixel_size, transform, size)
    img = compositor.render(
        robot_map.layers,
        selected_segment_id=selected_segment_id,
        overlay=overlay,
    )
    return img, transform


def segment_ids(layers: Iterable[MapLayer]) -> list[str]:
    """Segment ids present in the map, in layer order."""
    return [
        layer.segment_id
        for layer in layers
        if layer.type == "segment" and layer.segment_id is not None
    ]
