"""Command line driver that runs the water tank for a number of frames."""

from __future__ import annotations

import argparse
import random
import time
from typing import Sequence

from sphwater.scene import Scene

FPS_MIN = 10.0
FPS_MAX = 250.0
TIMER_SCALE_MIN = 0.01
TIMER_SCALE_MAX = 4.0


def run(scene: Scene, frames: int, fps_max: float = 60.0, fps_limiting: bool = True) -> float:
    """Step ``scene`` ``frames`` times, optionally capped at ``fps_max``; return elapsed seconds."""
    if frames < 0:
        raise ValueError(f"frame count must not be negative, got {frames}")
    if fps_limiting and fps_max <= 0:
        raise ValueError(f"fps limit must be positive, got {fps_max}")
    start = time.monotonic()
    last = start
    for _ in range(frames):
        scene.step()
        if fps_limiting:
            remaining = last + 1.0 / fps_max - time.monotonic()
            if remaining > 0:
                time.sleep(remaining)
            last = time.monotonic()
    return time.monotonic() - start


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sphwater", description="Run the SPH water tank simulation.")
    parser.add_argument("--frames", type=int, default=200, help="number of frames to simulate")
    parser.add_argument("--fps-max", type=float, default=60.0, help="frame rate cap (10 to 250)")
    parser.add_argument("--no-fps-limit", action="store_true", help="run as fast as possible")
    parser.add_argument("--timer-scale", type=float, default=1.0, help="time step scale (0.01 to 4)")
    parser.add_argument("--rock-mass", type=float, default=None, help="mass of the rock")
    parser.add_argument("--rock", action="store_true", help="drop the rock")
    parser.add_argument("--boat", action="store_true", help="drop the boat")
    parser.add_argument("--wave", action="store_true", help="enable waves")
    parser.add_argument("--no-color", action="store_true", help="skip the density field")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.frames < 0:
        parser.error("--frames must not be negative")
    if not FPS_MIN <= args.fps_max <= FPS_MAX:
        parser.error(f"--fps-max must lie between {FPS_MIN:g} and {FPS_MAX:g}")
    if not TIMER_SCALE_MIN <= args.timer_scale <= TIMER_SCALE_MAX:
        parser.error(f"--timer-scale must lie between {TIMER_SCALE_MIN:g} and {TIMER_SCALE_MAX:g}")

    print(f"Run {parser.prog}")
    print("Initialize data of the scene ...")
    scene = Scene(rng=random.Random(args.seed))
    m = scene.parameters.m
    if args.rock_mass is not None:
        if not 0.5 * m <= args.rock_mass <= 100 * m:
            parser.error(f"--rock-mass must lie between {0.5 * m:g} and {100 * m:g}")
        scene.rock_mass = args.rock_mass
    scene.timer_scale = args.timer_scale
    scene.gui.display_rock = args.rock
    scene.gui.display_boat = args.boat
    scene.gui.display_wave = args.wave
    scene.gui.display_color = not args.no_color
    print("Initialization finished\n")

    print("Start animation loop ...")
    elapsed = run(scene, args.frames, args.fps_max, not args.no_fps_limit)
    print("\nAnimation loop stopped")

    fps = args.frames / elapsed if elapsed > 0 else 0.0
    print(f"{args.frames} frames in {elapsed:.2f} s ({fps:.1f} fps)")
    print(f"Particles: {len(scene.particles)}  simulated time: {scene.t:.2f}")
    if args.rock:
        x, y, _ = scene.rock_center()
        print(f"Rock center: ({x:.4f}, {y:.4f})")
    if args.boat:
        x, y, _ = scene.boat_center()
        print(f"Boat center: ({x:.4f}, {y:.4f})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())