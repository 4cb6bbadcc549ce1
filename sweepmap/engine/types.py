"""Data types matching the robot's REST JSON payloads."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_PIXEL_SIZE = 5

Point = tuple[int, int]


@dataclass(frozen=True)
class ZonePoint:
    x: int
    y: int

    @staticmethod
    def from_dict(d: dict) -> ZonePoint:
        return ZonePoint(x=int(d["x"]), y=int(d["y"]))

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class MapLayer:
    type: str
    pixels: tuple[Point, ...]
    meta_data: dict = field(default_factory=dict, compare=False)

    @property
    def segment_id(self) -> str | None:
        sid = self.meta_data.get("segmentId")
        return None if sid is None else str(sid)


@dataclass(frozen=True)
class RobotMap:
    layers: tuple[MapLayer, ...]
    pixel_size: int = DEFAULT_PIXEL_SIZE

    def layers_of_type(self, layer_type: str) -> list[MapLayer]:
        return [layer for layer in self.layers if layer.type == layer_type]


@dataclass(frozen=True)
class BoundingBox:
    min_x: int
    min_y: int
    max_x: int
    max_y: int


@dataclass(frozen=True)
class ViewTransform:
    scale: float
    offset_x: float
    offset_y: float


@dataclass(frozen=True)
class Segment:
    id: str
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or f"Room {self.id}"

    @staticmethod
    def from_dict(d: dict) -> Segment:
        name = d.get("name")
        return Segment(id=str(d["id"]), name=name if name else None)

    def to_dict(self) -> dict:
        d: dict = {"id": self.id}
        if self.name:
            d["name"] = self.name
        return d


@dataclass
class MaterialProperties:
    supported_materials: list[str] = field(default_factory=list)

    @staticmethod
    def from_dict(d: dict) -> MaterialProperties:
        return MaterialProperties(
            supported_materials=list(d.get("supportedMaterials", []))
        )


@dataclass
class RobotInfo:
    manufacturer: str | None = None
    model_name: str | None = None
    implementation: str | None = None

    @staticmethod
    def from_dict(d: dict) -> RobotInfo:
        return RobotInfo(
            manufacturer=d.get("manufacturer"),
            model_name=d.get("modelName"),
            implementation=d.get("implementation"),
        )


@dataclass
class RobotAttribute:
    cls: str
    type: str | None = None
    sub_type: str | None = None
    value: str | None = None
    level: int | None = None
    flag: str | None = None

    @staticmethod
    def from_dict(d: dict) -> RobotAttribute:
        return RobotAttribute(
            cls=d["__class"],
            type=d.get("type"),
            sub_type=d.get("subType"),
            value=d.get("value"),
            level=d.get("level"),
            flag=d.get("flag"),
        )
