#!/usr/bin/env python3
"""Benchmark the visibility sweep on random box scenes.

Usage (from the repository root):
    python scripts/bench_visibility.py              # default: 3 iterations, 200 scenes
    python scripts/bench_visibility.py -n 5         # 5 iterations
    python scripts/bench_visibility.py -s 50 -c 8   # 50 scenes of 8x8 cells
    python scripts/bench_visibility.py --raycast    # time the ray-cast oracle too
"""

import argparse
import statistics
import sys
import time
from pathlib import Path

# Add the repository root to path
SCRIPT_DIR = Path(__file__).resolve().parent
ROOT_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(ROOT_DIR))

from sightline.raycast import cast_rays, fan_angles  # noqa: E402
from sightline.scene import random_box_scene  # noqa: E402
from sightline.visibility import compute_visibility  # noqa: E402


def _time_runs(label, fn, iterations):
    times_ms = []
    for i in range(iterations):
        start = time.perf_counter()
        fn()
        elapsed_ms = (time.perf_counter() - start) * 1000
        times_ms.append(elapsed_ms)
        print(f"  {label} run {i + 1}: {elapsed_ms:.1f} ms")

    median = statistics.median(times_ms)
    mean = statistics.mean(times_ms)
    print()
    print(f"{label} median: {median:.1f} ms")
    print(f"{label} mean:   {mean:.1f} ms")
    if len(times_ms) > 1:
        stdev = statistics.stdev(times_ms)
        print(f"{label} stdev:  {stdev:.1f} ms")
    print()


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark the visibility sweep"
    )
    parser.add_argument(
        "-n",
        "--iterations",
        type=int,
        default=3,
        help="Number of iterations (default: 3)",
    )
    parser.add_argument(
        "-s",
        "--scenes",
        type=int,
        default=200,
        help="Number of random scenes per iteration (default: 200)",
    )
    parser.add_argument(
        "-c",
        "--cells",
        type=int,
        default=6,
        help="Grid cells per side of each scene (default: 6)",
    )
    parser.add_argument(
        "--raycast",
        action="store_true",
        help="Also time the brute-force ray caster (720 rays per scene)",
    )
    args = parser.parse_args()

    scenes = [
        random_box_scene(seed, cells=args.cells) for seed in range(args.scenes)
    ]
    num_segments = sum(len(s.segments) for s in scenes)

    print(
        f"Benchmark: {args.scenes} scenes, {args.cells}x{args.cells} cells, "
        f"{num_segments / args.scenes:.1f} segments per scene"
    )
    print(f"Iterations: {args.iterations}")
    print()

    def sweep_all():
        for scene in scenes:
            compute_visibility(scene.origin, scene.segments)

    # Warmup
    print("Warmup...", end=" ", flush=True)
    sweep_all()
    print("done")

    _time_runs("Sweep", sweep_all, args.iterations)

    if args.raycast:
        angles = fan_angles()

        def raycast_all():
            for scene in scenes:
                cast_rays(scene.origin, scene.segments, angles)

        _time_runs("Ray cast", raycast_all, args.iterations)


if __name__ == "__main__":
    main()
