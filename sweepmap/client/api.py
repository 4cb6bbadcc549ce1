"""Async HTTP client for the robot's capability-based REST API (``/api/v2``).

Every optional feature lives under ``/robot/capabilities/<Name>``: GET
reads its state, PUT sends an ``{"action": ...}`` command. Capability
names are in ``engine.capabilities``.

Usage:
    api = RobotAPIClient(load_config())
    caps = await api.get_capabilities()
    robot_map = await api.get_map()
    await api.join_segments("3", "7")

Each call opens its own ``httpx.AsyncClient`` so the client can be used
from whatever event loop calls it. No call retries; ``httpx`` failures,
HTTP error statuses and undecodable bodies raise ``TransportError``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx

from ..engine import capabilities as caps
from ..engine.decode import decode_map
from ..engine.errors import TransportError, ValidationError
from ..engine.types import (
    MaterialProperties,
    RobotAttribute,
    RobotInfo,
    RobotMap,
    Segment,
    ZonePoint,
)
from .config import RobotConfig

logger = logging.getLogger(__name__)

BASIC_ACTIONS = ("start", "stop", "pause", "home")
MOVEMENT_COMMANDS = (
    "forward",
    "backward",
    "rotate_clockwise",
    "rotate_counterclockwise",
)
FAN_SPEED_PRESETS = ("off", "min", "low", "medium", "high", "max", "turbo")
WATER_USAGE_PRESETS = ("off", "min", "low", "medium", "high", "max")


def _capability_path(name: str, suffix: str = "") -> str:
    return f"/robot/capabilities/{name}{suffix}"


class RobotAPIClient:
    def __init__(
        self,
        config: RobotConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            auth=self.config.auth,
            transport=self._transport,
        )

    async def _get(self, path: str):
        try:
            async with self._client() as client:
                r = await client.get(path)
                r.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(f"GET {path} failed: {exc}") from exc
        try:
            return r.json()
        except ValueError as exc:
            raise TransportError(f"GET {path}: invalid JSON body") from exc

    async def _put(self, path: str, payload: dict) -> None:
        logger.debug("PUT %s %s", path, payload)
        try:
            async with self._client() as client:
                r = await client.put(path, json=payload)
                r.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(f"PUT {path} failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Robot
    # ------------------------------------------------------------------

    async def get_robot_info(self) -> RobotInfo:
        return RobotInfo.from_dict(await self._get("/robot"))

    async def get_state_attributes(self) -> list[RobotAttribute]:
        data = await self._get("/robot/state/attributes")
        return [RobotAttribute.from_dict(a) for a in data]

    async def get_capabilities(self) -> set[str]:
        return set(await self._get("/robot/capabilities"))

    async def get_map(self) -> RobotMap:
        return decode_map(await self.get_raw_map())

    async def get_raw_map(self) -> dict:
        """Undecoded map payload, for snapshot export."""
        return await self._get("/robot/state/map")

    # ------------------------------------------------------------------
    # Segments
    # ------------------------------------------------------------------

    async def get_segments(self) -> list[Segment]:
        data = await self._get(_capability_path(caps.MAP_SEGMENTATION))
        return [Segment.from_dict(s) for s in data]

    async def clean_segments(
        self, segment_ids: Sequence[str], iterations: int = 1
    ) -> None:
        if not segment_ids:
            raise ValidationError("Select at least one segment to clean")
        await self._put(
            _capability_path(caps.MAP_SEGMENTATION),
            {
                "action": "start_segment_action",
                "segment_ids": list(segment_ids),
                "iterations": iterations,
            },
        )

    async def rename_segment(self, segment_id: str, name: str) -> None:
        await self._put(
            _capability_path(caps.MAP_SEGMENT_RENAME),
            {"action": "rename_segment", "segment_id": segment_id, "name": name},
        )

    async def join_segments(self, segment_a_id: str, segment_b_id: str) -> None:
        await self._put(
            _capability_path(caps.MAP_SEGMENT_EDIT),
            {
                "action": "join_segments",
                "segment_a_id": segment_a_id,
                "segment_b_id": segment_b_id,
            },
        )

    async def split_segment(
        self, segment_id: str, point_a: ZonePoint, point_b: ZonePoint
    ) -> None:
        await self._put(
            _capability_path(caps.MAP_SEGMENT_EDIT),
            {
                "action": "split_segment",
                "segment_id": segment_id,
                "pA": point_a.to_dict(),
                "pB": point_b.to_dict(),
            },
        )

    async def get_segment_material_properties(self) -> MaterialProperties:
        data = await self._get(
            _capability_path(caps.MAP_SEGMENT_MATERIAL, "/properties")
        )
        return MaterialProperties.from_dict(data)

    async def set_segment_material(self, segment_id: str, material: str) -> None:
        await self._put(
            _capability_path(caps.MAP_SEGMENT_MATERIAL),
            {
                "action": "set_material",
                "segment_id": segment_id,
                "material": material,
            },
        )

    # ------------------------------------------------------------------
    # Manual control
    # ------------------------------------------------------------------

    async def enable_high_res_manual_control(self) -> None:
        await self._put(
            _capability_path(caps.HIGH_RES_MANUAL_CONTROL), {"action": "enable"}
        )

    async def disable_high_res_manual_control(self) -> None:
        await self._put(
            _capability_path(caps.HIGH_RES_MANUAL_CONTROL), {"action": "disable"}
        )

    async def high_res_manual_control(self, velocity: int, angle: int) -> None:
        await self._put(
            _capability_path(caps.HIGH_RES_MANUAL_CONTROL),
            {
                "action": "move",
                "vector": {"velocity": int(velocity), "angle": int(angle)},
            },
        )

    async def manual_control(
        self, action: str, movement_speed: int | None = None
    ) -> None:
        """Discrete drive: a movement command, or a plain action like stop."""
        if action in MOVEMENT_COMMANDS:
            payload: dict = {"action": "move", "movementCommand": action}
        else:
            payload = {"action": action}
        if movement_speed is not None:
            payload["movementSpeed"] = movement_speed
        await self._put(_capability_path(caps.MANUAL_CONTROL), payload)

    # ------------------------------------------------------------------
    # Basic control, go-to, presets
    # ------------------------------------------------------------------

    async def basic_control(self, action: str) -> None:
        if action not in BASIC_ACTIONS:
            raise ValidationError(f"Unknown basic action: {action}")
        await self._put(
            _capability_path(caps.BASIC_CONTROL), {"action": action}
        )

    async def go_to(self, x: int, y: int) -> None:
        await self._put(
            _capability_path(caps.GO_TO_LOCATION),
            {"action": "goto", "coordinates": ZonePoint(x, y).to_dict()},
        )

    async def set_fan_speed(self, preset: str) -> None:
        if preset not in FAN_SPEED_PRESETS:
            raise ValidationError(f"Unknown fan speed preset: {preset}")
        await self._put(
            _capability_path(caps.FAN_SPEED_CONTROL, "/preset"),
            {"name": preset},
        )

    async def set_water_usage(self, preset: str) -> None:
        if preset not in WATER_USAGE_PRESETS:
            raise ValidationError(f"Unknown water usage preset: {preset}")
        await self._put(
            _capability_path(caps.WATER_USAGE_CONTROL, "/preset"),
            {"name": preset},
        )
