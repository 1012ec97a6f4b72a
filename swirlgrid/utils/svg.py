from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from swirlgrid.core.geometry import Line, Picture, line_endpoints
from swirlgrid.core.grid import GridParams


@dataclass
class RenderParams:
    stroke: str = "#000000"
    background: str = "#ffffff"
    stroke_width: float = 2.0
    display_size: int = 800


def _num(v: float) -> str:
    return f"{v:.3f}".rstrip("0").rstrip(".")


def line_attributes(picture: Picture) -> Optional[Dict[str, str]]:
    """SVG <line> attributes for one picture, or None for a blank cell.

    The rotation stays a transform about the box centre; endpoints are the
    unrotated horizontal diameter.
    """
    if not isinstance(picture.shape, Line):
        return None
    start, end = line_endpoints(picture.box)
    c = picture.box.center
    return {
        "x1": _num(start.x),
        "y1": _num(start.y),
        "x2": _num(end.x),
        "y2": _num(end.y),
        "transform": f"rotate({_num(picture.shape.angle)} {_num(c.x)} {_num(c.y)})",
    }


def line_values(picture: Picture) -> Optional[List[float]]:
    """Compact `[x1, y1, x2, y2, angle, cx, cy]` for one picture, None if blank."""
    if not isinstance(picture.shape, Line):
        return None
    start, end = line_endpoints(picture.box)
    c = picture.box.center
    return [round(v, 3) for v in (start.x, start.y, end.x, end.y, picture.shape.angle, c.x, c.y)]


def frame_to_svg(
    pictures: Sequence[Picture],
    grid: GridParams | None = None,
    render: RenderParams | None = None,
) -> str:
    grid = grid or GridParams()
    render = render or RenderParams()
    size = _num(grid.canvas_size)
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {size} {size}" '
        f'width="{render.display_size}" height="{render.display_size}">',
        f'<rect x="0" y="0" width="{size}" height="{size}" fill="{render.background}"/>',
        f'<g stroke="{render.stroke}" stroke-width="{_num(render.stroke_width)}">',
    ]
    for pic in pictures:
        attrs = line_attributes(pic)
        if attrs is None:
            continue
        parts.append("<line " + " ".join(f'{k}="{v}"' for k, v in attrs.items()) + "/>")
    parts.append("</g>")
    parts.append("</svg>")
    return "\n".join(parts)
