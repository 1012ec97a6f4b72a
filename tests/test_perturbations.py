"""Tests for the perturbation ledger."""
import pytest

from swirlgrid.core.geometry import Vector
from swirlgrid.core.perturbations import (
    DECAY_HORIZON,
    Perturbation,
    append,
    prune,
    record,
    time_factor,
)


@pytest.fixture
def ledger():
    return tuple(Perturbation(w, Vector(w, w)) for w in (999.0, 1000.0, 1001.0, 3500.0))


class TestRecord:

    def test_record_stamps_time(self):
        p = record(1000.0, Vector(500.0, 500.0))
        assert p == Perturbation(when=1000.0, at=Vector(500.0, 500.0))

    def test_append_returns_new_ledger(self):
        first = (record(0.0, Vector(1.0, 1.0)),)
        second = append(first, record(5.0, Vector(2.0, 2.0)))
        assert len(first) == 1
        assert [p.when for p in second] == [0.0, 5.0]


class TestPrune:

    def test_boundary(self, ledger):
        kept = prune(4000.0, ledger)
        assert [p.when for p in kept] == [1001.0, 3500.0]

    def test_no_survivor_is_expired(self, ledger):
        for now in (0.0, 3999.0, 4000.0, 4001.0, 6500.0, 10000.0):
            kept = prune(now, ledger)
            assert all(p.when > now - DECAY_HORIZON for p in kept)
            live = [p for p in ledger if p.when > now - DECAY_HORIZON]
            assert list(kept) == live

    def test_empty(self):
        assert prune(100.0, ()) == ()

    def test_custom_horizon(self, ledger):
        assert [p.when for p in prune(1500.0, ledger, horizon=500.0)] == [1001.0, 3500.0]


class TestTimeFactor:

    def test_decays_from_one_to_zero(self):
        p = Perturbation(200.0, Vector(0.0, 0.0))
        assert time_factor(p, 200.0) == 1.0
        assert time_factor(p, 1700.0) == pytest.approx(0.5)
        assert time_factor(p, 3200.0) == 0.0

    def test_goes_negative_after_expiry(self):
        p = Perturbation(0.0, Vector(0.0, 0.0))
        assert time_factor(p, 4500.0) == pytest.approx(-0.5)
