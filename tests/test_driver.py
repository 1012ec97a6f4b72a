"""Tests for the frame driver transitions."""
import logging

import pytest

from swirlgrid.core.driver import (
    Click,
    DisplayParams,
    FrameDriver,
    MeasureFailed,
    MeasureSurface,
    Model,
    Tick,
    canvas_to_page,
    initial_model,
    measure_once,
    page_to_canvas,
    tick,
    update,
    view,
)
from swirlgrid.core.geometry import Vector
from swirlgrid.core.grid import GridParams, generate
from swirlgrid.core.perturbations import Perturbation


@pytest.fixture
def driver():
    return FrameDriver(GridParams(axis_count=10))


class TestCoordinates:

    def test_page_to_canvas_flips_y(self):
        origin = Vector(0.0, 0.0)
        assert page_to_canvas(400.0, 400.0, origin) == Vector(500.0, 500.0)
        assert page_to_canvas(0.0, 0.0, origin) == Vector(0.0, 1000.0)
        assert page_to_canvas(800.0, 800.0, origin) == Vector(1000.0, 0.0)

    def test_page_to_canvas_uses_origin(self):
        assert page_to_canvas(420.0, 430.0, Vector(20.0, 30.0)) == Vector(500.0, 500.0)

    def test_display_scale(self):
        p = page_to_canvas(250.0, 0.0, Vector(0.0, 0.0), display=DisplayParams(display_size=500.0))
        assert p == Vector(500.0, 1000.0)

    def test_canvas_to_page_inverts(self):
        origin = Vector(12.0, 34.0)
        px, py = canvas_to_page(Vector(250.0, 750.0), origin)
        assert page_to_canvas(px, py, origin) == Vector(pytest.approx(250.0), pytest.approx(750.0))


class TestTransitions:

    def test_initial_model(self):
        m = initial_model()
        assert m.time == 0.0
        assert m.angle == 0.0
        assert m.perturbations == ()
        assert m.canvas_origin == Vector(0.0, 0.0)

    def test_tick_is_pure(self):
        m = initial_model()
        m2 = tick(m, 250.0)
        assert m.time == 0.0
        assert m2.time == 250.0
        assert m2.angle == 2.5

    def test_tick_accumulates(self):
        m = initial_model()
        for _ in range(4):
            m = update(m, Tick(16.0))
        assert m.time == pytest.approx(64.0)
        assert m.angle == pytest.approx(0.64)

    def test_click_records_current_time(self):
        m = update(Model(time=1234.0), Click(400.0, 400.0))
        assert m.perturbations == (Perturbation(1234.0, Vector(500.0, 500.0)),)

    def test_measure_then_click(self):
        m = update(initial_model(), MeasureSurface(Vector(20.0, 30.0)))
        m = update(m, Click(420.0, 430.0))
        assert m.perturbations[0].at == Vector(500.0, 500.0)

    def test_measure_failed_is_noop(self):
        m = Model(time=5.0, canvas_origin=Vector(3.0, 4.0))
        assert update(m, MeasureFailed("gone")) is m

    def test_unknown_message(self):
        with pytest.raises(TypeError):
            update(initial_model(), "tick")

    def test_view_uses_model_state(self):
        grid = GridParams(axis_count=4)
        m = Model(time=700.0, angle=7.0, perturbations=(Perturbation(500.0, Vector(1.0, 2.0)),))
        assert view(m, grid) == generate(700.0, m.perturbations, 7.0, grid)


class TestMeasurement:

    def test_success(self):
        assert measure_once(lambda: Vector(8.0, 9.0)) == MeasureSurface(Vector(8.0, 9.0))

    def test_failure_is_swallowed(self, caplog):
        def probe():
            raise RuntimeError("surface not ready")

        with caplog.at_level(logging.WARNING):
            msg = measure_once(probe)
        assert isinstance(msg, MeasureFailed)
        assert "surface not ready" in msg.reason
        assert "surface measurement failed" in caplog.text

    def test_missing_surface(self):
        assert isinstance(measure_once(lambda: None), MeasureFailed)

    def test_failed_measure_keeps_zero_origin(self, driver):
        driver.dispatch(measure_once(lambda: 1 / 0))
        driver.dispatch(Click(400.0, 400.0))
        assert driver.model.canvas_origin == Vector(0.0, 0.0)
        assert driver.model.perturbations[0].at == Vector(500.0, 500.0)


class TestFrameDriver:

    def test_scenario(self):
        d = FrameDriver()
        d.dispatch(Tick(1000.0))
        assert d.model.time == 1000.0
        assert d.model.angle == 10.0
        assert len(d.pictures) == 70 * 70
        assert d.pictures[0].shape.angle == pytest.approx(10.0 - 62.1)

        d.dispatch(Click(400.0, 400.0))
        assert d.model.perturbations == (Perturbation(1000.0, Vector(500.0, 500.0)),)

        d.dispatch(Tick(3000.0))
        assert d.model.time == 4000.0
        assert d.model.perturbations == ()

    def test_click_recomputes_frame(self, driver):
        before = driver.dispatch(Tick(100.0))
        after = driver.dispatch(Click(400.0, 400.0))
        assert before != after

    def test_measure_keeps_frame(self, driver):
        before = driver.dispatch(Tick(100.0))
        after = driver.dispatch(MeasureSurface(Vector(5.0, 5.0)))
        assert after is before

    def test_starts_with_a_frame(self, driver):
        assert len(driver.pictures) == 100
