"""Tests for drag -> drive command mapping and the manual-control session."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from . import capabilities as caps
from .errors import TransportError
from .manual_control import (
    ANGLE_LIMIT,
    DISCRETE_MOVEMENT_SPEED,
    VELOCITY_LIMIT,
    ControlMode,
    DirectionCommand,
    ManualControlMapper,
    ManualControlSession,
    VelocityCommand,
    clamp_displacement,
    continuous_command,
    discrete_command,
)


def _api(capabilities=()):
    api = MagicMock()
    api.get_capabilities = AsyncMock(return_value=set(capabilities))
    api.enable_high_res_manual_control = AsyncMock()
    api.disable_high_res_manual_control = AsyncMock()
    api.high_res_manual_control = AsyncMock()
    api.manual_control = AsyncMock()
    return api


# ---------------------------------------------------------------------------
# Pure mapping
# ---------------------------------------------------------------------------


class TestClampDisplacement:
    def test_axes_clamped_independently(self):
        assert clamp_displacement(250, -30) == (100, -30)
        assert clamp_displacement(-500, 500) == (-100, 100)

    def test_inside_unchanged(self):
        assert clamp_displacement(12.5, -99) == (12.5, -99)


class TestContinuousCommand:
    def test_origin_is_zero(self):
        assert continuous_command(0, 0) == VelocityCommand(0, 0)

    def test_up_is_forward(self):
        assert continuous_command(0, -100) == VelocityCommand(VELOCITY_LIMIT, 0)

    def test_down_is_backward(self):
        assert continuous_command(0, 100).velocity == -VELOCITY_LIMIT

    def test_right_is_negative_angle(self):
        assert continuous_command(100, 0) == VelocityCommand(0, -ANGLE_LIMIT)

    def test_left_is_positive_angle(self):
        assert continuous_command(-50, 0).angle == 45

    def test_truncates_toward_zero(self):
        cmd = continuous_command(-1, 1)
        assert cmd == VelocityCommand(velocity=-3, angle=0)
        assert isinstance(cmd.velocity, int)

    @pytest.mark.parametrize(
        "dx,dy", [(-100, -100), (100, 100), (37, -81), (-0.5, 99.9)]
    )
    def test_within_limits(self, dx, dy):
        cmd = continuous_command(dx, dy)
        assert -VELOCITY_LIMIT <= cmd.velocity <= VELOCITY_LIMIT
        assert -ANGLE_LIMIT <= cmd.angle <= ANGLE_LIMIT


class TestDiscreteCommand:
    def test_vertical_dominant(self):
        assert discrete_command(5, -30) == DirectionCommand("forward")
        assert discrete_command(-5, 30) == DirectionCommand("backward")

    def test_horizontal_beyond_deadzone(self):
        assert discrete_command(40, 10) == DirectionCommand("rotate_clockwise")
        assert discrete_command(-40, 10) == DirectionCommand(
            "rotate_counterclockwise"
        )

    def test_horizontal_inside_deadzone(self):
        assert discrete_command(15, 3) is None

    def test_deadzone_boundary_is_silent(self):
        assert discrete_command(20, 0) is None

    def test_tie_is_horizontal(self):
        assert discrete_command(30, 30) == DirectionCommand("rotate_clockwise")

    def test_origin(self):
        assert discrete_command(0, 0) is None


class TestMapper:
    def test_continuous_clamps_first(self):
        mapper = ManualControlMapper(ControlMode.CONTINUOUS)
        assert mapper.command_for(0, -1000) == VelocityCommand(VELOCITY_LIMIT, 0)

    def test_stop_commands(self):
        assert ManualControlMapper(
            ControlMode.CONTINUOUS
        ).stop_command() == VelocityCommand(0, 0)
        assert ManualControlMapper(
            ControlMode.DISCRETE
        ).stop_command() == DirectionCommand("stop")

    def test_custom_max_offset(self):
        mapper = ManualControlMapper(ControlMode.CONTINUOUS, max_offset=50)
        assert mapper.command_for(0, -50).velocity == VELOCITY_LIMIT


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class TestSessionStart:
    @pytest.mark.asyncio
    async def test_high_res_capability_selects_continuous(self):
        api = _api([caps.HIGH_RES_MANUAL_CONTROL, caps.MANUAL_CONTROL])
        session = ManualControlSession(api)
        assert await session.start() is ControlMode.CONTINUOUS
        assert session.enabled
        api.enable_high_res_manual_control.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_fallback_to_discrete(self):
        api = _api([caps.MANUAL_CONTROL])
        session = ManualControlSession(api)
        assert await session.start() is ControlMode.DISCRETE
        assert session.enabled
        api.enable_high_res_manual_control.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_capability_failure_uses_discrete(self):
        api = _api()
        api.get_capabilities.side_effect = TransportError("down")
        session = ManualControlSession(api)
        assert await session.start() is ControlMode.DISCRETE

    @pytest.mark.asyncio
    async def test_enable_failure_reported(self):
        api = _api([caps.HIGH_RES_MANUAL_CONTROL])
        api.enable_high_res_manual_control.side_effect = TransportError("503")
        errors = []
        session = ManualControlSession(
            api, on_error=lambda action, exc: errors.append(action)
        )
        await session.start()
        assert not session.enabled
        assert errors == ["enable"]
        assert await session.update(0, -50) is None
        api.high_res_manual_control.assert_not_awaited()


class TestSessionGesture:
    @pytest.mark.asyncio
    async def test_continuous_updates_then_single_stop(self):
        api = _api([caps.HIGH_RES_MANUAL_CONTROL])
        session = ManualControlSession(api)
        await session.start()

        await session.update(0, -50)
        await session.update(50, 0)
        await session.end()
        await session.end()

        calls = [c.args for c in api.high_res_manual_control.await_args_list]
        assert calls == [(150, 0), (0, -45), (0, 0)]

    @pytest.mark.asyncio
    async def test_discrete_updates_and_stop(self):
        api = _api([caps.MANUAL_CONTROL])
        session = ManualControlSession(api)
        await session.start()

        await session.update(0, -40)
        await session.update(5, 0)  # inside deadzone, nothing sent
        await session.update(60, 10)
        await session.end()

        calls = [c.args for c in api.manual_control.await_args_list]
        assert calls == [
            ("forward", DISCRETE_MOVEMENT_SPEED),
            ("rotate_clockwise", DISCRETE_MOVEMENT_SPEED),
            ("stop",),
        ]

    @pytest.mark.asyncio
    async def test_end_without_gesture_sends_nothing(self):
        api = _api([caps.MANUAL_CONTROL])
        session = ManualControlSession(api)
        await session.start()
        assert await session.end() is None
        api.manual_control.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_send_reported_and_gesture_continues(self):
        api = _api([caps.HIGH_RES_MANUAL_CONTROL])
        api.high_res_manual_control.side_effect = [
            TransportError("timeout"),
            None,
            None,
        ]
        errors = []
        session = ManualControlSession(
            api, on_error=lambda action, exc: errors.append((action, str(exc)))
        )
        await session.start()

        await session.update(0, -100)
        await session.update(0, -100)
        await session.end()

        assert errors == [("move", "timeout")]
        assert api.high_res_manual_control.await_count == 3
        assert session.last_command == VelocityCommand(0, 0)

    @pytest.mark.asyncio
    async def test_update_before_start_is_noop(self):
        api = _api()
        session = ManualControlSession(api)
        assert await session.update(0, -50) is None
        api.manual_control.assert_not_awaited()


class TestSessionClose:
    @pytest.mark.asyncio
    async def test_close_disables_high_res(self):
        api = _api([caps.HIGH_RES_MANUAL_CONTROL])
        session = ManualControlSession(api)
        await session.start()
        await session.close()
        assert not session.enabled
        api.disable_high_res_manual_control.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_discrete_sends_nothing(self):
        api = _api([caps.MANUAL_CONTROL])
        session = ManualControlSession(api)
        await session.start()
        await session.close()
        api.disable_high_res_manual_control.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_after_close_not_reported(self):
        api = _api([caps.HIGH_RES_MANUAL_CONTROL])
        errors = []
        session = ManualControlSession(
            api, on_error=lambda action, exc: errors.append(action)
        )
        await session.start()

        async def fail_after_close(velocity, angle):
            await session.close()
            raise TransportError("late")

        api.high_res_manual_control.side_effect = fail_after_close
        await session.update(0, -50)
        assert errors == []

    @pytest.mark.asyncio
    async def test_start_superseded_by_close(self):
        api = _api([caps.HIGH_RES_MANUAL_CONTROL])
        session = ManualControlSession(api)

        async def caps_then_close():
            await session.close()
            return {caps.HIGH_RES_MANUAL_CONTROL}

        api.get_capabilities.side_effect = caps_then_close
        assert await session.start() is None
        assert not session.enabled
        api.enable_high_res_manual_control.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_during_enable_disables_again(self):
        api = _api([caps.HIGH_RES_MANUAL_CONTROL])
        session = ManualControlSession(api)
        enable_gate = asyncio.Event()

        async def slow_enable():
            await enable_gate.wait()

        api.enable_high_res_manual_control.side_effect = slow_enable
        starting = asyncio.create_task(session.start())
        await asyncio.sleep(0)
        api.enable_high_res_manual_control.assert_awaited_once()

        await session.close()
        api.disable_high_res_manual_control.assert_not_awaited()
        enable_gate.set()

        assert await starting is None
        assert not session.enabled
        api.disable_high_res_manual_control.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_mid_gesture_sends_stop(self):
        api = _api([caps.MANUAL_CONTROL])
        session = ManualControlSession(api)
        await session.start()
        await session.update(0, -40)
        await session.close()

        calls = [c.args for c in api.manual_control.await_args_list]
        assert calls == [("forward", DISCRETE_MOVEMENT_SPEED), ("stop",)]
        assert not session.gesture_active
