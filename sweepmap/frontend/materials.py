"""Display labels for floor materials and cleaning presets.

Pure data module, no UI dependencies. Unknown identifiers fall back to
the raw string the robot sent.
"""

from __future__ import annotations

MATERIAL_LABELS: dict[str, str] = {
    "generic": "Generic",
    "tile": "Tile",
    "wood": "Wood",
    "wood_horizontal": "Wood (horizontal)",
    "wood_vertical": "Wood (vertical)",
}

FAN_SPEED_LABELS: dict[str, str] = {
    "off": "Off",
    "min": "Min",
    "low": "Low",
    "medium": "Medium",
    "high": "High",
    "max": "Max",
    "turbo": "Turbo",
}

WATER_USAGE_LABELS: dict[str, str] = {
    "off": "Off",
    "min": "Min",
    "low": "Low",
    "medium": "Medium",
    "high": "High",
    "max": "Max",
}


def material_label(material: str) -> str:
    return MATERIAL_LABELS.get(material, material)


def material_choices(supported: list[str]) -> list[tuple[str, str]]:
    """(identifier, label) pairs in the order the robot listed them."""
    return [(m, material_label(m)) for m in supported]
