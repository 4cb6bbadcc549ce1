"""Summarise the robot's state attribute list into status and battery."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

from .types import RobotAttribute

STATUS_ATTRIBUTE = "StatusStateAttribute"
BATTERY_ATTRIBUTE = "BatteryStateAttribute"


class StatusValue(enum.Enum):
    IDLE = "idle"
    CLEANING = "cleaning"
    PAUSED = "paused"
    RETURNING = "returning"
    DOCKED = "docked"
    ERROR = "error"
    CHARGING = "charging"
    DISCHARGING = "discharging"
    CHARGED = "charged"
    NONE = "none"

    @classmethod
    def parse(cls, value: str | None) -> StatusValue:
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


@dataclass
class RobotStatus:
    status: StatusValue = StatusValue.NONE
    battery_level: int | None = None
    battery_flag: StatusValue = StatusValue.NONE


def status_from_attributes(attributes: Iterable[RobotAttribute]) -> RobotStatus:
    result = RobotStatus()
    for attr in attributes:
        if attr.cls == STATUS_ATTRIBUTE:
            result.status = StatusValue.parse(attr.value)
        elif attr.cls == BATTERY_ATTRIBUTE:
            result.battery_level = attr.level
            result.battery_flag = StatusValue.parse(attr.flag)
    return result
