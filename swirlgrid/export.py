"""Headless export of a SwirlGrid animation.

Drives a FrameDriver with fixed-size ticks and optional scripted clicks,
then writes the frames as an animated GIF, a PNG sequence or an SVG
sequence.

Usage:
    $ swirlgrid-export --frames 120 --fps 30 --click 500:500:500 -o swirl.gif
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence

from swirlgrid.core.driver import Click, DisplayParams, FrameDriver, Tick, canvas_to_page
from swirlgrid.core.geometry import Picture, Vector
from swirlgrid.core.grid import GridParams, RotationPolicy
from swirlgrid.utils.image_ops import render_frame_pil, write_gif, write_png_sequence, write_svg_sequence
from swirlgrid.utils.svg import RenderParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScriptedClick:
    at_time: float
    point: Vector  # canvas space, y up


def parse_click(text: str) -> ScriptedClick:
    parts = text.split(":")
    if len(parts) != 3:
        raise ValueError(f"expected T:X:Y, got {text!r}")
    t, x, y = (float(p) for p in parts)
    return ScriptedClick(t, Vector(x, y))


def run_script(
    frames: int,
    delta: float,
    clicks: Sequence[ScriptedClick] = (),
    grid: GridParams | None = None,
    display: DisplayParams | None = None,
) -> List[List[Picture]]:
    """Produce `frames` frames; frame 0 follows a zero tick.

    Each scripted click fires once, on the first frame whose time has reached
    its `at_time`, before that frame is generated.
    """
    driver = FrameDriver(grid, display)
    pending = sorted(clicks, key=lambda c: c.at_time)
    out: List[List[Picture]] = []
    for i in range(frames):
        driver.dispatch(Tick(0.0 if i == 0 else delta))
        while pending and pending[0].at_time <= driver.model.time:
            sc = pending.pop(0)
            px, py = canvas_to_page(sc.point, driver.model.canvas_origin, driver.grid, driver.display)
            driver.dispatch(Click(px, py))
        out.append(driver.pictures)
    if pending:
        logger.info("%d scripted click(s) never fired", len(pending))
    return out


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="swirlgrid-export", description=__doc__.splitlines()[0])
    p.add_argument("-o", "--output", required=True, help="GIF file, or directory for png/svg")
    p.add_argument("--format", choices=("gif", "png", "svg"), default="gif")
    p.add_argument("--frames", type=int, default=90)
    p.add_argument("--fps", type=int, default=30)
    p.add_argument("--delta", type=float, default=None, help="time units per frame (default 1000/fps)")
    p.add_argument("--click", action="append", default=[], metavar="T:X:Y",
                   help="canvas-space click at time T (repeatable)")
    p.add_argument("--axis-count", type=int, default=70)
    p.add_argument("--rotation", choices=[r.value for r in RotationPolicy], default=RotationPolicy.ADDITIVE.value)
    p.add_argument("--size", type=int, default=800, help="output image size in px")
    p.add_argument("--stroke", default="#000000")
    p.add_argument("--background", default="#ffffff")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        clicks = [parse_click(c) for c in args.click]
    except ValueError as e:
        parser.error(str(e))
    if args.frames < 1:
        parser.error("--frames must be >= 1")
    try:
        grid = GridParams(axis_count=args.axis_count, rotation=RotationPolicy(args.rotation))
    except ValueError as e:
        parser.error(str(e))
    render = RenderParams(stroke=args.stroke, background=args.background, display_size=args.size)
    delta = args.delta if args.delta is not None else 1000.0 / max(1, args.fps)

    frames = run_script(args.frames, delta, clicks, grid)
    logger.info("generated %d frame(s), %d cells each", len(frames), grid.axis_count ** 2)

    if args.format == "svg":
        paths = write_svg_sequence(args.output, frames, grid, render)
        logger.info("wrote %d svg file(s) to %s", len(paths), args.output)
        return 0
    images = [render_frame_pil(f, grid, render, args.size) for f in frames]
    if args.format == "png":
        paths = write_png_sequence(args.output, images)
        logger.info("wrote %d png file(s) to %s", len(paths), args.output)
    else:
        write_gif(args.output, images, args.fps)
        logger.info("wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
