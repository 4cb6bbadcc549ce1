"""Room (segment) editing: capability discovery, selection and edit commands.

``SegmentEditOrchestrator`` owns the state of one visit to the rooms
screen::

    UNINITIALIZED -> CAPABILITIES_LOADING -> CAPABILITIES_KNOWN
        -> SEGMENTS_LOADING -> READY <-> ACTION_IN_FLIGHT

Read failures (capabilities, material list, segment list) hide the
affected feature and never block the screen. Mutating operations
(rename, join, split, material) validate their input locally and raise
``ValidationError`` before touching the network; transport failures come
back as an ``ActionResult`` and the screen returns to ``READY``.

Only one mutating operation runs at a time. Reads are not blocked by an
action in flight, and concurrent segment loads are not deduplicated: the
last one to complete wins.

Every request remembers the visit token it was issued under. A response
that completes after ``leave()`` (or a later ``enter()``) is dropped.
"""

from __future__ import annotations

import dataclasses
import enum
import itertools
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from .capabilities import CapabilityFlags
from .errors import TransportError, ValidationError
from .geometry import ScreenPoint, screen_line_to_map
from .types import Segment, ViewTransform, ZonePoint

logger = logging.getLogger(__name__)


class ScreenState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    CAPABILITIES_LOADING = "capabilities_loading"
    CAPABILITIES_KNOWN = "capabilities_known"
    SEGMENTS_LOADING = "segments_loading"
    READY = "ready"
    ACTION_IN_FLIGHT = "action_in_flight"


@dataclass
class ActionResult:
    ok: bool
    error: str = ""


class EditSelection:
    """Up to two selected segment ids, oldest first.

    Adding a third id evicts the oldest one.
    """

    MAX_SIZE = 2

    def __init__(self):
        self._ids: list[str] = []

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(self._ids)

    def __len__(self):
        return len(self._ids)

    def __contains__(self, segment_id):
        return segment_id in self._ids

    def add(self, segment_id: str) -> None:
        if segment_id in self._ids:
            return
        self._ids.append(segment_id)
        if len(self._ids) > self.MAX_SIZE:
            self._ids.pop(0)

    def discard(self, segment_id: str) -> None:
        if segment_id in self._ids:
            self._ids.remove(segment_id)

    def toggle(self, segment_id: str) -> None:
        if segment_id in self._ids:
            self._ids.remove(segment_id)
        else:
            self.add(segment_id)

    def clear(self) -> None:
        self._ids.clear()


_visit_ids = itertools.count(1)


class SegmentEditOrchestrator:
    def __init__(self, api):
        self.api = api
        self.state = ScreenState.UNINITIALIZED
        self.flags = CapabilityFlags()
        self.supported_materials: list[str] = []
        self.segments: list[Segment] = []
        self.selection = EditSelection()
        self.material_segment: Segment | None = None
        self.loading_segments = 0
        self.last_error = ""
        self._token = 0

    # -- lifecycle --

    async def enter(self) -> None:
        """Discover capabilities, then load segments."""
        token = self._token = next(_visit_ids)
        self.state = ScreenState.CAPABILITIES_LOADING
        if not await self._load_capabilities(token):
            return
        self.state = ScreenState.CAPABILITIES_KNOWN
        await self.load_segments()
        if token == self._token:
            self.state = ScreenState.READY

    def leave(self) -> None:
        """Drop all in-memory state; late responses will be ignored."""
        self._token = next(_visit_ids)
        self.state = ScreenState.UNINITIALIZED
        self.flags = CapabilityFlags()
        self.supported_materials = []
        self.segments = []
        self.selection.clear()
        self.material_segment = None
        self.loading_segments = 0
        self.last_error = ""

    async def _load_capabilities(self, token: int) -> bool:
        """Returns False when the visit was superseded meanwhile."""
        try:
            available = await self.api.get_capabilities()
        except TransportError as exc:
            if token != self._token:
                return False
            logger.warning("Failed to load capabilities: %s", exc)
            self.flags = CapabilityFlags()
            return True
        if token != self._token:
            logger.debug("Dropping capabilities for a left screen")
            return False
        flags = CapabilityFlags.from_capabilities(available)

        materials: list[str] = []
        if flags.can_set_material:
            try:
                props = await self.api.get_segment_material_properties()
            except TransportError as exc:
                if token != self._token:
                    return False
                logger.warning("Failed to load material properties: %s", exc)
                flags = dataclasses.replace(flags, can_set_material=False)
            else:
                if token != self._token:
                    return False
                materials = props.supported_materials

        self.flags = flags
        self.supported_materials = materials
        return True

    # -- reads --

    async def load_segments(self) -> None:
        """Replace the segment list with a fresh copy from the robot."""
        token = self._token
        if self.state is ScreenState.CAPABILITIES_KNOWN:
            self.state = ScreenState.SEGMENTS_LOADING
        self.loading_segments += 1
        try:
            fetched = await self.api.get_segments()
        except TransportError as exc:
            if token == self._token:
                logger.warning("Failed to load segments: %s", exc)
            return
        finally:
            if token == self._token:
                self.loading_segments -= 1
        if token != self._token:
            logger.debug("Dropping segment list for a left screen")
            return
        self.segments = list(fetched)
        known = {s.id for s in self.segments}
        for segment_id in self.selection.ids:
            if segment_id not in known:
                self.selection.discard(segment_id)

    def segment(self, segment_id: str) -> Segment | None:
        for s in self.segments:
            if s.id == segment_id:
                return s
        return None

    # -- affordances --

    @property
    def is_busy(self) -> bool:
        return self.state is ScreenState.ACTION_IN_FLIGHT

    @property
    def can_join(self) -> bool:
        return (
            self.state is ScreenState.READY
            and self.flags.can_edit
            and len(self.segments) >= 2
            and len(self.selection) == 2
        )

    @property
    def can_split(self) -> bool:
        return self.state is ScreenState.READY and self.flags.can_edit

    # -- mutations --

    async def rename(self, segment: Segment, name: str) -> ActionResult:
        new_name = name.strip()
        if not new_name:
            raise ValidationError("Segment name must not be empty")
        self._check_capability(self.flags.can_rename, "rename")
        return await self._run_action(
            f"rename {segment.id}",
            lambda: self.api.rename_segment(segment.id, new_name),
            self.load_segments,
        )

    async def join(
        self, id_a: str | None = None, id_b: str | None = None
    ) -> ActionResult:
        """Join two segments; defaults to the current selection."""
        if id_a is None and id_b is None:
            ids: Sequence[str] = self.selection.ids
        else:
            ids = [i for i in (id_a, id_b) if i is not None]
        if len(ids) != 2 or ids[0] == ids[1]:
            raise ValidationError(
                f"Join needs exactly 2 distinct segments, got {len(set(ids))}"
            )
        self._check_capability(self.flags.can_edit, "join")
        first, second = ids

        async def after_join():
            self.selection.clear()
            await self.load_segments()

        return await self._run_action(
            f"join {first}+{second}",
            lambda: self.api.join_segments(first, second),
            after_join,
        )

    async def split(
        self, segment_id: str, point_a: ZonePoint, point_b: ZonePoint
    ) -> ActionResult:
        """Split a segment along a map-space line."""
        if not segment_id:
            raise ValidationError("Select a segment to split")
        if point_a == point_b:
            raise ValidationError("Split line needs two distinct points")
        self._check_capability(self.flags.can_edit, "split")
        return await self._run_action(
            f"split {segment_id}",
            lambda: self.api.split_segment(segment_id, point_a, point_b),
            self.load_segments,
        )

    async def split_from_screen(
        self,
        segment_id: str,
        start: ScreenPoint,
        end: ScreenPoint,
        transform: ViewTransform | None,
    ) -> ActionResult | None:
        """Split using a line drawn on screen; no-op without a transform."""
        line = screen_line_to_map(start, end, transform)
        if line is None:
            logger.info("Split ignored: map geometry is undefined")
            return None
        return await self.split(segment_id, *line)

    def open_material(self, segment: Segment) -> None:
        self._check_capability(self.flags.can_set_material, "set material")
        self.material_segment = segment

    def close_material(self) -> None:
        self.material_segment = None

    async def set_material(
        self, segment: Segment, material: str
    ) -> ActionResult:
        self._check_capability(self.flags.can_set_material, "set material")
        if (
            self.supported_materials
            and material not in self.supported_materials
        ):
            raise ValidationError(f"Unsupported material: {material}")

        async def after_set():
            self.material_segment = None

        return await self._run_action(
            f"set material {segment.id}={material}",
            lambda: self.api.set_segment_material(segment.id, material),
            after_set,
        )

    # -- helpers --

    @staticmethod
    def _check_capability(flag: bool, action: str) -> None:
        if not flag:
            raise ValidationError(f"Robot does not support {action}")

    async def _run_action(
        self,
        description: str,
        call: Callable[[], Awaitable[object]],
        on_success: Callable[[], Awaitable[None]],
    ) -> ActionResult:
        if self.state is ScreenState.ACTION_IN_FLIGHT:
            raise ValidationError("Another action is still in progress")
        if self.state is not ScreenState.READY:
            raise ValidationError("Rooms are not loaded yet")

        token = self._token
        self.state = ScreenState.ACTION_IN_FLIGHT
        self.last_error = ""
        try:
            try:
                await call()
            except TransportError as exc:
                if token == self._token:
                    self.last_error = str(exc)
                logger.warning("Failed to %s: %s", description, exc)
                return ActionResult(ok=False, error=str(exc))
            if token != self._token:
                logger.debug("Screen left before %s finished", description)
                return ActionResult(ok=True)
            logger.info("Done: %s", description)
            await on_success()
            return ActionResult(ok=True)
        finally:
            if token == self._token:
                self.state = ScreenState.READY
