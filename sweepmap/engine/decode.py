"""Decode robot map JSON into typed, immutable map layers.

The robot reports its map as a stack of layers (``floor``, ``segment``,
``wall``, ...). Each layer carries its points either as ``pixels``, a flat
``[x0, y0, x1, y1, ...]`` sequence, or as ``compressedPixels``, a flat
sequence of ``(x, y, count)`` runs where each run covers ``count``
consecutive points along +x starting at ``(x, y)``.

Decoding is purely structural. Malformed trailing data (an odd element in
``pixels``, an incomplete run in ``compressedPixels``) is dropped rather
than reported.
"""

from __future__ import annotations

from collections.abc import Sequence

from .types import DEFAULT_PIXEL_SIZE, MapLayer, Point, RobotMap


def decode_pixels(flat: Sequence[int]) -> list[Point]:
    """Pair up a flat ``[x, y, x, y, ...]`` sequence, in encoding order."""
    usable = len(flat) - len(flat) % 2
    return [(int(flat[i]), int(flat[i + 1])) for i in range(0, usable, 2)]


def decompress_pixels(runs: Sequence[int]) -> list[Point]:
    """Expand ``(x, y, count)`` runs into individual points."""
    points: list[Point] = []
    usable = len(runs) - len(runs) % 3
    for i in range(0, usable, 3):
        x, y, count = int(runs[i]), int(runs[i + 1]), int(runs[i + 2])
        points.extend((x + step, y) for step in range(count))
    return points


def decode_layer(d: dict) -> MapLayer:
    pixels = d.get("pixels") or []
    if pixels:
        points = decode_pixels(pixels)
    else:
        points = decompress_pixels(d.get("compressedPixels") or [])
    return MapLayer(
        type=d.get("type", ""),
        pixels=tuple(points),
        meta_data=dict(d.get("metaData") or {}),
    )


def decode_map(d: dict) -> RobotMap:
    """Decode a full map payload. Layer order is preserved as received."""
    return RobotMap(
        layers=tuple(decode_layer(layer) for layer in d.get("layers") or []),
        pixel_size=int(d.get("pixelSize") or DEFAULT_PIXEL_SIZE),
    )
