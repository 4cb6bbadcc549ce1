"""Capability names the client branches on, and the flags derived from them.

The robot reports its optional features as a list of capability class
names. The client only trusts that list; it never guesses from the robot
model. Flags are derived once per screen visit and fixed afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

MAP_SEGMENTATION = "MapSegmentationCapability"
MAP_SEGMENT_RENAME = "MapSegmentRenameCapability"
MAP_SEGMENT_EDIT = "MapSegmentEditCapability"
MAP_SEGMENT_MATERIAL = "MapSegmentMaterialControlCapability"
MANUAL_CONTROL = "ManualControlCapability"
HIGH_RES_MANUAL_CONTROL = "HighResolutionManualControlCapability"
BASIC_CONTROL = "BasicControlCapability"
GO_TO_LOCATION = "GoToLocationCapability"
FAN_SPEED_CONTROL = "FanSpeedControlCapability"
WATER_USAGE_CONTROL = "WaterUsageControlCapability"


@dataclass(frozen=True)
class CapabilityFlags:
    can_rename: bool = False
    can_edit: bool = False
    can_set_material: bool = False
    can_clean_segments: bool = False

    @staticmethod
    def from_capabilities(capabilities: Iterable[str]) -> CapabilityFlags:
        caps = set(capabilities)
        return CapabilityFlags(
            can_rename=MAP_SEGMENT_RENAME in caps,
            can_edit=MAP_SEGMENT_EDIT in caps,
            can_set_material=MAP_SEGMENT_MATERIAL in caps,
            can_clean_segments=MAP_SEGMENTATION in caps,
        )
