"""Map snapshots: a rendered PNG that carries the robot's raw map payload.

The payload rides in a tEXt chunk keyed ``sweepmap_map``, so a snapshot can
be viewed as an ordinary image and also rendered again from scratch with
``sweepmap-render --from-file``. A plain ``.json`` dump of the payload (as
returned by ``GET /api/v2/robot/state/map``) is accepted on read too.

Whatever the container, the payload is checked before it is decoded: it
must be an object with a ``layers`` list of layer objects. Anything else is
rejected with ValueError naming the offending file.
"""

import json
from dataclasses import dataclass
from pathlib import Path

from PIL import Image
from PIL.PngImagePlugin import PngInfo

from ..engine.decode import decode_map
from ..engine.types import RobotMap

METADATA_KEY = "sweepmap_map"


@dataclass(frozen=True)
class MapSnapshot:
    raw: dict
    robot_map: RobotMap


def check_payload(payload, source: str) -> dict:
    """Return ``payload`` if it looks like a robot map, else raise ValueError."""
    if not isinstance(payload, dict):
        raise ValueError(
            f"{source}: expected a map object, got {type(payload).__name__}"
        )
    layers = payload.get("layers")
    if not isinstance(layers, list):
        raise ValueError(f"{source}: map has no 'layers' list")
    for i, layer in enumerate(layers):
        if not isinstance(layer, dict):
            raise ValueError(f"{source}: layer {i} is not an object")
    return payload


def snapshot_from_payload(payload, source: str) -> MapSnapshot:
    raw = check_payload(payload, source)
    return MapSnapshot(raw=raw, robot_map=decode_map(raw))


def save_map_png(img: Image.Image, raw_map: dict, path) -> None:
    info = PngInfo()
    info.add_text(METADATA_KEY, json.dumps(raw_map))
    img.save(path, pnginfo=info)


def _payload_from_png(path: Path):
    with Image.open(path) as img:
        chunks = getattr(img, "text", None) or {}
    if METADATA_KEY not in chunks:
        raise ValueError(f"{path}: no embedded map ('{METADATA_KEY}' chunk)")
    return json.loads(chunks[METADATA_KEY])


def _payload_from_json(path: Path):
    return json.loads(path.read_text())


_READERS = {
    ".png": _payload_from_png,
    ".json": _payload_from_json,
}


def read_snapshot(path) -> MapSnapshot:
    """Read a ``.png`` snapshot or ``.json`` payload and decode it.

    Raises ValueError for an unknown extension, malformed JSON or a payload
    that is not a robot map; OSError if the file cannot be read.
    """
    path = Path(path)
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(f"{path}: unsupported file type {path.suffix!r}")
    return snapshot_from_payload(reader(path), str(path))
