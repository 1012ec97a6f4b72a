from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Vector:
    """A point or offset in logical canvas units."""
    x: float
    y: float

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar)

    def __truediv__(self, scalar: float) -> Vector:
        return Vector(self.x / scalar, self.y / scalar)


@dataclass(frozen=True)
class Box:
    """Bounding rectangle of one grid cell.

    Corners may come out inverted after displacement; they are kept as given.
    """
    top_left: Vector
    bottom_right: Vector

    @property
    def center(self) -> Vector:
        return Vector(
            (self.top_left.x + self.bottom_right.x) / 2,
            (self.top_left.y + self.bottom_right.y) / 2,
        )

    @property
    def left_mid(self) -> Vector:
        return Vector(self.top_left.x, self.center.y)

    @property
    def right_mid(self) -> Vector:
        return Vector(self.bottom_right.x, self.center.y)


@dataclass(frozen=True)
class Line:
    angle: float  # degrees


@dataclass(frozen=True)
class Blank:
    pass


Shape = Union[Line, Blank]


@dataclass(frozen=True)
class Picture:
    box: Box
    shape: Shape


def cell_box(xi: int, yi: int, axis_count: int, canvas_size: float = 1000.0) -> Box:
    box_size = canvas_size / axis_count
    return Box(
        Vector(box_size * xi, box_size * yi),
        Vector(box_size * (xi + 1), box_size * (yi + 1)),
    )


def line_endpoints(box: Box) -> Tuple[Vector, Vector]:
    return box.left_mid, box.right_mid


def rotated_endpoints(box: Box, angle: float) -> Tuple[Vector, Vector]:
    """Horizontal diameter of `box` rotated by `angle` degrees about its centre.

    Clockwise in y-down space, same as SVG rotate() and QPainter.rotate().
    """
    c = box.center
    a = math.radians(angle)
    cos_a = math.cos(a)
    sin_a = math.sin(a)

    def _rot(p: Vector) -> Vector:
        dx = p.x - c.x
        dy = p.y - c.y
        return Vector(c.x + dx * cos_a - dy * sin_a, c.y + dx * sin_a + dy * cos_a)

    start, end = line_endpoints(box)
    return _rot(start), _rot(end)
