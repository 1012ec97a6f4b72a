from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

import numpy as np

from .geometry import Box, Line, Picture, Vector
from .perturbations import DECAY_HORIZON, Perturbation, time_factor


class RotationPolicy(str, Enum):
    ADDITIVE = "additive"
    MULTIPLICATIVE = "multiplicative"


@dataclass
class GridParams:
    axis_count: int = 70
    canvas_size: float = 1000.0
    angle_divisor: float = 100.0
    decay: float = DECAY_HORIZON
    rotation: RotationPolicy = RotationPolicy.ADDITIVE

    def __post_init__(self):
        if self.axis_count < 1:
            raise ValueError(f"axis_count must be >= 1, got {self.axis_count}")
        for name in ("canvas_size", "angle_divisor", "decay"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        self.rotation = RotationPolicy(self.rotation)

    @property
    def box_size(self) -> float:
        return self.canvas_size / self.axis_count


def _angles(xi, yi, angle: float, params: GridParams):
    n = params.axis_count
    if params.rotation is RotationPolicy.MULTIPLICATIVE:
        return angle * (xi - n) * (yi - n)
    return angle + 0.5 * (xi - n) + 0.4 * (yi - n)


def cell_angle(xi: int, yi: int, angle: float, params: GridParams | None = None) -> float:
    params = params or GridParams()
    return float(_angles(xi, yi, angle, params))


def generate(
    time: float,
    perturbations: Sequence[Perturbation],
    angle: float,
    params: GridParams | None = None,
) -> List[Picture]:
    """Build one frame: a rotated line in every displaced grid cell.

    Pure and deterministic. Cells are emitted with xi outer, yi inner, both
    running 1..axis_count.
    """
    params = params or GridParams()
    n = params.axis_count
    bs = params.box_size
    extent = n * bs

    xi, yi = np.mgrid[1:n + 1, 1:n + 1].astype(np.float64)
    tl_x = bs * xi
    tl_y = bs * yi
    br_x = bs * (xi + 1)
    br_y = bs * (yi + 1)

    tl_dx = np.zeros_like(tl_x)
    tl_dy = np.zeros_like(tl_y)
    br_dx = np.zeros_like(br_x)
    br_dy = np.zeros_like(br_y)
    for p in perturbations:
        tf = time_factor(p, time, params.decay)
        tl_dx += tf * ((p.at.x - tl_x) / extent)
        tl_dy += tf * ((p.at.y - tl_y) / extent)
        br_dx += tf * ((p.at.x - br_x) / extent)
        br_dy += tf * ((p.at.y - br_y) / extent)

    cols = (
        (tl_x + tl_dx * bs).ravel().tolist(),
        (tl_y + tl_dy * bs).ravel().tolist(),
        (br_x + br_dx * bs).ravel().tolist(),
        (br_y + br_dy * bs).ravel().tolist(),
        np.asarray(_angles(xi, yi, angle, params), dtype=np.float64).ravel().tolist(),
    )
    return [
        Picture(Box(Vector(x0, y0), Vector(x1, y1)), Line(a))
        for x0, y0, x1, y1, a in zip(*cols)
    ]
