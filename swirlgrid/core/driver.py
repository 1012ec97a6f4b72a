from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple, Union

from .geometry import Picture, Vector
from .grid import GridParams, generate
from .perturbations import Perturbation, append, prune, record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Model:
    time: float = 0.0
    angle: float = 0.0
    perturbations: Tuple[Perturbation, ...] = ()
    canvas_origin: Vector = Vector(0.0, 0.0)


@dataclass
class DisplayParams:
    display_size: float = 800.0  # device px covering the whole logical canvas


@dataclass(frozen=True)
class Tick:
    delta: float


@dataclass(frozen=True)
class Click:
    page_x: float
    page_y: float


@dataclass(frozen=True)
class MeasureSurface:
    origin: Vector


@dataclass(frozen=True)
class MeasureFailed:
    reason: str = ""


Msg = Union[Tick, Click, MeasureSurface, MeasureFailed]


def initial_model() -> Model:
    return Model()


def page_to_canvas(
    page_x: float,
    page_y: float,
    origin: Vector,
    grid: GridParams | None = None,
    display: DisplayParams | None = None,
) -> Vector:
    """Map a page-space pixel to logical canvas units, y pointing up."""
    grid = grid or GridParams()
    display = display or DisplayParams()
    c = grid.canvas_size
    d = display.display_size
    return Vector(c * (page_x - origin.x) / d, c - c * (page_y - origin.y) / d)


def canvas_to_page(
    point: Vector,
    origin: Vector,
    grid: GridParams | None = None,
    display: DisplayParams | None = None,
) -> Tuple[float, float]:
    grid = grid or GridParams()
    display = display or DisplayParams()
    c = grid.canvas_size
    d = display.display_size
    return origin.x + point.x * d / c, origin.y + (c - point.y) * d / c


def tick(model: Model, delta: float, grid: GridParams | None = None) -> Model:
    grid = grid or GridParams()
    time = model.time + delta
    return replace(
        model,
        time=time,
        angle=time / grid.angle_divisor,
        perturbations=prune(time, model.perturbations, grid.decay),
    )


def click(
    model: Model,
    page_x: float,
    page_y: float,
    grid: GridParams | None = None,
    display: DisplayParams | None = None,
) -> Model:
    at = page_to_canvas(page_x, page_y, model.canvas_origin, grid, display)
    return replace(model, perturbations=append(model.perturbations, record(model.time, at)))


def measure_surface(model: Model, origin: Vector) -> Model:
    return replace(model, canvas_origin=origin)


def update(
    model: Model,
    msg: Msg,
    grid: GridParams | None = None,
    display: DisplayParams | None = None,
) -> Model:
    if isinstance(msg, Tick):
        return tick(model, msg.delta, grid)
    if isinstance(msg, Click):
        return click(model, msg.page_x, msg.page_y, grid, display)
    if isinstance(msg, MeasureSurface):
        return measure_surface(model, msg.origin)
    if isinstance(msg, MeasureFailed):
        return model
    raise TypeError(f"unknown message: {msg!r}")


def view(model: Model, grid: GridParams | None = None) -> List[Picture]:
    return generate(model.time, model.perturbations, model.angle, grid)


def measure_once(probe: Callable[[], Vector]) -> Union[MeasureSurface, MeasureFailed]:
    """Run the one-shot surface measurement and wrap its outcome as a message.

    A failing probe degrades to `MeasureFailed`; clicks then keep using the
    previous (initially zero) origin.
    """
    try:
        origin = probe()
    except Exception as e:
        logger.warning("surface measurement failed: %s", e)
        return MeasureFailed(str(e))
    if origin is None:
        logger.warning("surface measurement returned nothing")
        return MeasureFailed("no surface")
    return MeasureSurface(origin)


class FrameDriver:
    """Long-lived owner of the model; feeds messages in and keeps the last frame."""

    def __init__(
        self,
        grid: GridParams | None = None,
        display: DisplayParams | None = None,
        model: Optional[Model] = None,
    ):
        self.grid = grid or GridParams()
        self.display = display or DisplayParams()
        self.model = model if model is not None else initial_model()
        self.pictures: List[Picture] = view(self.model, self.grid)

    def dispatch(self, msg: Msg) -> List[Picture]:
        self.model = update(self.model, msg, self.grid, self.display)
        if isinstance(msg, (Tick, Click)):
            self.pictures = view(self.model, self.grid)
        return self.pictures
