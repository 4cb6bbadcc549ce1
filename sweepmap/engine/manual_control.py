"""Map touch-pad drags to manual drive commands.

Two control modes exist, chosen once per session from the robot's
capabilities:

  * ``CONTINUOUS`` (``HighResolutionManualControlCapability``): the drag
    is normalised by ``MAX_OFFSET`` and mapped to a ``(velocity, angle)``
    vector. Dragging up drives forward, dragging right turns clockwise
    (negative angle).
  * ``DISCRETE`` (fallback): the dominant drag axis picks a named
    movement; horizontal drags inside ``DEADZONE`` send nothing.

Within a gesture every update sends one command, in update order. Ending
the gesture sends exactly one stop command (zero vector or ``stop``).
A failed send is reported and the gesture carries on; there are no
retries, the next update simply sends the next command.
"""

from __future__ import annotations

import enum
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass

from . import capabilities as caps
from .errors import TransportError

logger = logging.getLogger(__name__)

MAX_OFFSET = 100.0
VELOCITY_LIMIT = 300
ANGLE_LIMIT = 90
DEADZONE = 20.0
DISCRETE_MOVEMENT_SPEED = 100

FORWARD = "forward"
BACKWARD = "backward"
ROTATE_CLOCKWISE = "rotate_clockwise"
ROTATE_COUNTERCLOCKWISE = "rotate_counterclockwise"
STOP = "stop"


class ControlMode(enum.Enum):
    CONTINUOUS = "continuous"
    DISCRETE = "discrete"


@dataclass(frozen=True)
class VelocityCommand:
    velocity: int
    angle: int


@dataclass(frozen=True)
class DirectionCommand:
    action: str


ManualCommand = VelocityCommand | DirectionCommand


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


def clamp_displacement(dx, dy, max_offset=MAX_OFFSET):
    """Clamp each axis of a drag independently to [-max_offset, max_offset]."""
    return (
        _clamp(dx, -max_offset, max_offset),
        _clamp(dy, -max_offset, max_offset),
    )


def continuous_command(dx, dy, max_offset=MAX_OFFSET) -> VelocityCommand:
    normalized_x = dx / max_offset
    normalized_y = dy / max_offset
    velocity = _clamp(
        -normalized_y * VELOCITY_LIMIT, -VELOCITY_LIMIT, VELOCITY_LIMIT
    )
    angle = _clamp(-normalized_x * ANGLE_LIMIT, -ANGLE_LIMIT, ANGLE_LIMIT)
    return VelocityCommand(velocity=int(velocity), angle=int(angle))


def discrete_command(dx, dy, deadzone=DEADZONE) -> DirectionCommand | None:
    if abs(dy) > abs(dx):
        return DirectionCommand(FORWARD if dy < 0 else BACKWARD)
    if abs(dx) > deadzone:
        return DirectionCommand(
            ROTATE_COUNTERCLOCKWISE if dx < 0 else ROTATE_CLOCKWISE
        )
    return None


class ManualControlMapper:
    """Pure drag -> command mapping for one fixed ``ControlMode``."""

    def __init__(self, mode: ControlMode, max_offset: float = MAX_OFFSET):
        self.mode = mode
        self.max_offset = max_offset

    def command_for(self, dx: float, dy: float) -> ManualCommand | None:
        dx, dy = clamp_displacement(dx, dy, self.max_offset)
        if self.mode is ControlMode.CONTINUOUS:
            return continuous_command(dx, dy, self.max_offset)
        return discrete_command(dx, dy)

    def stop_command(self) -> ManualCommand:
        if self.mode is ControlMode.CONTINUOUS:
            return VelocityCommand(velocity=0, angle=0)
        return DirectionCommand(STOP)


_session_ids = itertools.count(1)


class ManualControlSession:
    """One visit to the manual-control screen.

    ``start()`` discovers the control mode and enables manual control,
    ``update()``/``end()`` follow the touch gesture, ``close()`` disables
    manual control again. Responses that complete after ``close()`` (or
    after a newer ``start()``) are dropped instead of being reported.

    ``on_error(action, exc)`` is called for every failed request of the
    live session.
    """

    def __init__(
        self,
        api,
        max_offset: float = MAX_OFFSET,
        on_error: Callable[[str, Exception], None] | None = None,
    ):
        self.api = api
        self.max_offset = max_offset
        self.on_error = on_error
        self.mapper: ManualControlMapper | None = None
        self.enabled = False
        self.gesture_active = False
        self.last_command: ManualCommand | None = None
        self._token = 0

    @property
    def mode(self) -> ControlMode | None:
        return self.mapper.mode if self.mapper else None

    async def start(self) -> ControlMode | None:
        token = self._token = next(_session_ids)
        try:
            available = await self.api.get_capabilities()
        except TransportError as exc:
            if token != self._token:
                return None
            logger.warning(
                "Capability check failed, using discrete control: %s", exc
            )
            available = set()
        if token != self._token:
            logger.debug("Dropping capabilities for superseded session")
            return None

        if caps.HIGH_RES_MANUAL_CONTROL in available:
            mode = ControlMode.CONTINUOUS
        else:
            mode = ControlMode.DISCRETE
        self.mapper = ManualControlMapper(mode, self.max_offset)

        if mode is ControlMode.CONTINUOUS:
            try:
                await self.api.enable_high_res_manual_control()
            except TransportError as exc:
                self._report(token, "enable", exc)
                return mode
            if token != self._token:
                # closed while enabling: the robot is in high-res mode now
                logger.debug("Session closed during enable, disabling again")
                await self._disable()
                return None
        self.enabled = True
        logger.info("Manual control enabled (%s)", mode.value)
        return mode

    async def update(self, dx: float, dy: float) -> ManualCommand | None:
        """Send the command for the current drag offset, if any."""
        if self.mapper is None or not self.enabled:
            return None
        self.gesture_active = True
        command = self.mapper.command_for(dx, dy)
        if command is None:
            return None
        await self._send(command)
        return command

    async def end(self) -> ManualCommand | None:
        """Finish the gesture; sends the stop command once."""
        if not self.gesture_active or self.mapper is None:
            return None
        self.gesture_active = False
        command = self.mapper.stop_command()
        await self._send(command)
        return command

    async def close(self) -> None:
        """Stop any gesture still in progress, then disable manual control."""
        if self.enabled and self.gesture_active:
            await self.end()
        token = self._token
        self._token = next(_session_ids)
        if not self.enabled:
            return
        self.enabled = False
        self.gesture_active = False
        if self.mode is ControlMode.CONTINUOUS and not await self._disable():
            return
        logger.info("Manual control disabled (session %d)", token)

    async def _disable(self) -> bool:
        try:
            await self.api.disable_high_res_manual_control()
        except TransportError as exc:
            logger.warning("Failed to disable manual control: %s", exc)
            return False
        return True

    async def _send(self, command: ManualCommand) -> None:
        token = self._token
        self.last_command = command
        logger.debug("Sending %s", command)
        try:
            if isinstance(command, VelocityCommand):
                await self.api.high_res_manual_control(
                    command.velocity, command.angle
                )
            elif command.action == STOP:
                await self.api.manual_control(STOP)
            else:
                await self.api.manual_control(
                    command.action, DISCRETE_MOVEMENT_SPEED
                )
        except TransportError as exc:
            self._report(token, "move", exc)

    def _report(self, token: int, action: str, exc: Exception) -> None:
        if token != self._token:
            logger.debug("Dropping %s failure from closed session", action)
            return
        logger.warning("Manual control %s failed: %s", action, exc)
        if self.on_error is not None:
            self.on_error(action, exc)
