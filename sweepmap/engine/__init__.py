"""Map decoding, view geometry, rendering and robot-control state machines.

Nothing in this package talks HTTP directly; the API client is passed in.
"""

from .compositor import MapCompositor, SplitLine, render_map
from .decode import decode_map
from .errors import (
    GeometryUndefined,
    SweepmapError,
    TransportError,
    ValidationError,
)
from .geometry import (
    compute_bounding_box,
    compute_transform,
    map_to_screen,
    screen_to_map,
)
from .manual_control import ControlMode, ManualControlSession
from .segments import SegmentEditOrchestrator

__all__ = [
    "ControlMode",
    "GeometryUndefined",
    "ManualControlSession",
    "MapCompositor",
    "SegmentEditOrchestrator",
    "SplitLine",
    "SweepmapError",
    "TransportError",
    "ValidationError",
    "compute_bounding_box",
    "compute_transform",
    "decode_map",
    "map_to_screen",
    "render_map",
    "screen_to_map",
]
