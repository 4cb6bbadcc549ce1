"""Map-space bounding box and the map <-> screen view transform.

A ``ViewTransform`` fits the map's content box into a view with a fixed
padding on every side:

  * **Uniform scale.** One scale factor for both axes,
    ``min(available_w / content_w, available_h / content_h)``, so the map
    is never distorted.
  * **Centering.** Whatever space the limiting axis leaves over on the
    other axis is split evenly on both sides.
  * **Content size** is ``max - min + pixel_size`` per axis, because every
    decoded point covers a ``pixel_size`` square starting at its
    coordinate.

``map_to_screen`` and ``screen_to_map`` are algebraic inverses of each
other over the same ``ViewTransform`` instance. Rendering and split-line
conversion must share that instance; recomputing it separately for the
inverse is how a drawn cut ends up on the wrong wall.

``compute_transform`` returns ``None`` when no transform exists (empty
map, or a view no larger than its padding). Callers treat ``None`` as
"do nothing"; ``require_transform`` is the raising variant.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from .errors import GeometryUndefined
from .types import (
    BoundingBox,
    MapLayer,
    Point,
    RobotMap,
    ViewTransform,
    ZonePoint,
)

MAP_PADDING = 20

ScreenPoint = tuple[float, float]


def compute_bounding_box(layers: Iterable[MapLayer]) -> BoundingBox | None:
    """Min/max over every point of every layer, or None if there are none."""
    arrays = [
        np.asarray(layer.pixels, dtype=np.int64)
        for layer in layers
        if layer.pixels
    ]
    if not arrays:
        return None
    pts = np.concatenate(arrays)
    lo = pts.min(axis=0)
    hi = pts.max(axis=0)
    return BoundingBox(
        min_x=int(lo[0]), min_y=int(lo[1]), max_x=int(hi[0]), max_y=int(hi[1])
    )


def compute_transform(
    bbox: BoundingBox | None,
    pixel_size: int,
    view_size: tuple[float, float],
    padding: float = MAP_PADDING,
) -> ViewTransform | None:
    if bbox is None:
        return None
    view_w, view_h = view_size
    available_w = view_w - 2 * padding
    available_h = view_h - 2 * padding
    if available_w <= 0 or available_h <= 0:
        return None

    content_w = bbox.max_x - bbox.min_x + pixel_size
    content_h = bbox.max_y - bbox.min_y + pixel_size
    if content_w <= 0 or content_h <= 0:
        return None

    scale = min(available_w / content_w, available_h / content_h)
    offset_x = (
        padding + (available_w - content_w * scale) / 2 - bbox.min_x * scale
    )
    offset_y = (
        padding + (available_h - content_h * scale) / 2 - bbox.min_y * scale
    )
    return ViewTransform(scale=scale, offset_x=offset_x, offset_y=offset_y)


def require_transform(
    bbox: BoundingBox | None,
    pixel_size: int,
    view_size: tuple[float, float],
    padding: float = MAP_PADDING,
) -> ViewTransform:
    """Like ``compute_transform`` but raises ``GeometryUndefined``."""
    transform = compute_transform(bbox, pixel_size, view_size, padding)
    if transform is None:
        raise GeometryUndefined(
            f"no view transform for bbox={bbox} view_size={view_size} "
            f"padding={padding}"
        )
    return transform


def transform_for_map(
    robot_map: RobotMap,
    view_size: tuple[float, float],
    padding: float = MAP_PADDING,
) -> ViewTransform | None:
    """Bounding box + transform in one step for a decoded map."""
    bbox = compute_bounding_box(robot_map.layers)
    return compute_transform(bbox, robot_map.pixel_size, view_size, padding)


def map_to_screen(
    point: Sequence[float], transform: ViewTransform
) -> ScreenPoint:
    x, y = point
    return (
        x * transform.scale + transform.offset_x,
        y * transform.scale + transform.offset_y,
    )


def screen_to_map(
    point: Sequence[float], transform: ViewTransform
) -> Point:
    """Inverse of ``map_to_screen``, truncated toward zero to map units."""
    sx, sy = point
    return (
        int((sx - transform.offset_x) / transform.scale),
        int((sy - transform.offset_y) / transform.scale),
    )


def screen_line_to_map(
    start: Sequence[float],
    end: Sequence[float],
    transform: ViewTransform | None,
) -> tuple[ZonePoint, ZonePoint] | None:
    """Convert a screen-space line (e.g. a drawn split cut) to map space."""
    if transform is None:
        return None
    ax, ay = screen_to_map(start, transform)
    bx, by = screen_to_map(end, transform)
    return ZonePoint(ax, ay), ZonePoint(bx, by)


def segment_at(
    layers: Iterable[MapLayer], point: Sequence[float], pixel_size: int
) -> str | None:
    """Return the id of the segment whose pixel squares cover ``point``.

    A decoded point ``(px, py)`` covers ``[px, px + pixel_size)`` on x and
    the same on y. When segments overlap, the last layer wins, matching
    draw order.
    """
    x, y = point
    hit = None
    for layer in layers:
        if layer.type != "segment" or not layer.pixels:
            continue
        pts = np.asarray(layer.pixels, dtype=np.int64)
        inside = (
            (pts[:, 0] <= x)
            & (x < pts[:, 0] + pixel_size)
            & (pts[:, 1] <= y)
            & (y < pts[:, 1] + pixel_size)
        )
        if np.any(inside):
            hit = layer.segment_id
    return hit
