"""Command-line entry point: compute the visible boundary of a scene file.

Usage:
    sightline scene.json                     # origin taken from the file
    sightline scene.json --origin 1.5 -2     # override the origin
    sightline scene.json --check --rays 2000 # also verify by ray casting
    sightline scene.json -v                  # trace the sweep

Prints ``{"origin": [x, y], "boundary": [[x1, y1, x2, y2], ...]}`` to stdout.
Exit status is 1 when ``--check`` finds mismatches and 2 when the scene
violates the visibility preconditions.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .raycast import DEFAULT_RAY_COUNT, compare_with_raycast
from .scene import find_crossings, load_scene
from .types import GeometryError, Point
from .visibility import compute_visibility

log = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sightline",
        description="Compute the visibility boundary of a scene",
    )
    parser.add_argument("scene", type=Path, help="Scene JSON file")
    parser.add_argument(
        "--origin",
        type=float,
        nargs=2,
        metavar=("X", "Y"),
        help="Origin to compute visibility from (default: the scene's)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Validate the scene and compare the result with ray casting",
    )
    parser.add_argument(
        "--rays",
        type=int,
        default=DEFAULT_RAY_COUNT,
        help=f"Rays cast by --check (default: {DEFAULT_RAY_COUNT})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log the sweep step by step",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    scene = load_scene(args.scene)
    if args.origin is not None:
        origin = Point(args.origin[0], args.origin[1])
    elif scene.origin is not None:
        origin = scene.origin
    else:
        print("error: the scene has no origin; pass --origin", file=sys.stderr)
        return 2

    log.info(
        "Loaded %d segments from %s, origin %s",
        len(scene.segments),
        args.scene,
        origin,
    )

    if args.check:
        crossings = find_crossings(scene.segments)
        if crossings:
            for i, j in crossings:
                print(
                    f"error: {scene.segments[i]} crosses {scene.segments[j]}",
                    file=sys.stderr,
                )
            return 2

    try:
        boundary = compute_visibility(origin, scene.segments)
    except GeometryError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    log.info("Computed %d boundary segments", len(boundary))

    json.dump(
        {
            "origin": list(origin.to_tuple()),
            "boundary": [list(s.to_tuple()) for s in boundary],
        },
        sys.stdout,
        indent=2,
    )
    sys.stdout.write("\n")

    if args.check:
        ok, diffs = compare_with_raycast(
            origin, scene.segments, boundary, num_rays=args.rays
        )
        for diff in diffs:
            print(f"mismatch: {diff}", file=sys.stderr)
        if not ok:
            return 1
        log.info("Ray casting agrees with %d rays", args.rays)

    return 0


if __name__ == "__main__":
    sys.exit(main())
