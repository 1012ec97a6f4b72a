from __future__ import annotations

import os
from typing import Sequence, Tuple

import numpy as np
from PIL import Image, ImageColor, ImageDraw

from swirlgrid.core.geometry import Line, Picture, rotated_endpoints
from swirlgrid.core.grid import GridParams
from swirlgrid.utils.svg import RenderParams, frame_to_svg


def to_rgb(color: str) -> Tuple[int, int, int]:
    r, g, b = ImageColor.getrgb(color)[:3]
    return r, g, b


def render_frame_pil(
    pictures: Sequence[Picture],
    grid: GridParams | None = None,
    render: RenderParams | None = None,
    size: int | None = None,
) -> Image.Image:
    """Rasterize one frame into an RGB image of `size` x `size` pixels.

    Pillow has no draw transforms, so rotated endpoints are computed here.
    """
    grid = grid or GridParams()
    render = render or RenderParams()
    size = int(size or render.display_size)
    scale = size / grid.canvas_size
    width = max(1, int(round(render.stroke_width * scale)))
    stroke = to_rgb(render.stroke)

    img = Image.new("RGB", (max(1, size), max(1, size)), color=to_rgb(render.background))
    draw = ImageDraw.Draw(img)
    for pic in pictures:
        if not isinstance(pic.shape, Line):
            continue
        start, end = rotated_endpoints(pic.box, pic.shape.angle)
        draw.line(
            [(start.x * scale, start.y * scale), (end.x * scale, end.y * scale)],
            fill=stroke,
            width=width,
        )
    return img


def write_gif(path: str, images: Sequence[Image.Image], fps: int, loop: bool = True) -> None:
    import imageio.v3 as iio
    frames = np.stack([np.array(im.convert("RGB")) for im in images])
    dur = max(10, int(1000 / max(1, fps)))
    iio.imwrite(path, frames, extension=".gif", duration=dur, loop=0 if loop else 1)


def write_png_sequence(directory: str, images: Sequence[Image.Image]) -> list[str]:
    os.makedirs(directory, exist_ok=True)
    paths = []
    for i, im in enumerate(images):
        p = os.path.join(directory, f"frame_{i:04d}.png")
        im.save(p, format="PNG")
        paths.append(p)
    return paths


def write_svg_sequence(
    directory: str,
    frames: Sequence[Sequence[Picture]],
    grid: GridParams | None = None,
    render: RenderParams | None = None,
) -> list[str]:
    os.makedirs(directory, exist_ok=True)
    paths = []
    for i, pictures in enumerate(frames):
        p = os.path.join(directory, f"frame_{i:04d}.svg")
        with open(p, "w", encoding="utf-8") as fh:
            fh.write(frame_to_svg(pictures, grid, render))
        paths.append(p)
    return paths
