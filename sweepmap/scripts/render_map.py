"""Render a robot's map to a PNG snapshot.

Usage:
    sweepmap-render --out map.png                     # SWEEPMAP_HOST from env/.env
    sweepmap-render --host 192.168.1.20 --out map.png
    sweepmap-render --from-file saved.json --out map.png --selected 3
    sweepmap-render --from-file map.png --out again.png

The output PNG embeds the raw map payload, so it can be fed back through
``--from-file``.
"""

import argparse
import asyncio
import logging
import sys

from ..client.api import RobotAPIClient
from ..client.config import RobotConfig, load_config
from ..engine.compositor import render_map, segment_ids
from ..engine.errors import SweepmapError
from ..engine.geometry import MAP_PADDING
from ..frontend.map_io import read_snapshot, save_map_png, snapshot_from_payload
from ..logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Render a robot map to a PNG snapshot"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--host",
        default=None,
        help="robot host (default: SWEEPMAP_HOST from the environment)",
    )
    source.add_argument(
        "--from-file",
        default=None,
        help="render a saved .json map or snapshot .png instead",
    )
    parser.add_argument("--out", required=True, help="output .png path")
    parser.add_argument("--width", type=int, default=800)
    parser.add_argument("--height", type=int, default=800)
    parser.add_argument(
        "--padding",
        type=float,
        default=MAP_PADDING,
        help=f"view padding in px (default: {MAP_PADDING})",
    )
    parser.add_argument(
        "--selected", default=None, help="segment id to highlight"
    )
    parser.add_argument("--env-file", default=None)
    parser.add_argument("--debug", action="store_true")
    return parser


async def fetch_raw_map(args) -> dict:
    if args.host:
        config = RobotConfig(host=args.host)
    else:
        config = load_config(args.env_file)
    return await RobotAPIClient(config).get_raw_map()


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug)

    try:
        if args.from_file:
            snapshot = read_snapshot(args.from_file)
        else:
            raw = asyncio.run(fetch_raw_map(args))
            snapshot = snapshot_from_payload(raw, "robot map")
    except (SweepmapError, ValueError, OSError) as exc:
        logger.error("Could not load map: %s", exc)
        return 1

    raw, robot_map = snapshot.raw, snapshot.robot_map
    present = segment_ids(robot_map.layers)
    logger.debug("Segments in map: %s", ", ".join(present) or "(none)")
    if args.selected is not None and args.selected not in present:
        logger.warning("Segment %s is not in this map", args.selected)

    img, transform = render_map(
        robot_map,
        (args.width, args.height),
        padding=args.padding,
        selected_segment_id=args.selected,
    )
    if transform is None:
        logger.warning("Map is empty or the view is too small; writing blank image")
    save_map_png(img, raw, args.out)
    print(f"Wrote {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
