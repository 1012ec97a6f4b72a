from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Tuple

from .geometry import Vector

logger = logging.getLogger(__name__)

DECAY_HORIZON = 3000.0


@dataclass(frozen=True)
class Perturbation:
    when: float
    at: Vector


def record(time: float, location: Vector) -> Perturbation:
    logger.debug("perturbation at (%.1f, %.1f), t=%.1f", location.x, location.y, time)
    return Perturbation(when=time, at=location)


def append(perturbations: Iterable[Perturbation], perturbation: Perturbation) -> Tuple[Perturbation, ...]:
    return (*perturbations, perturbation)


def prune(
    current_time: float,
    perturbations: Iterable[Perturbation],
    horizon: float = DECAY_HORIZON,
) -> Tuple[Perturbation, ...]:
    """Drop every entry with `when <= current_time - horizon`, keeping order."""
    cutoff = current_time - horizon
    perturbations = tuple(perturbations)
    kept = tuple(p for p in perturbations if p.when > cutoff)
    if len(kept) != len(perturbations):
        logger.debug("pruned %d perturbation(s) at t=%.1f", len(perturbations) - len(kept), current_time)
    return kept


def time_factor(perturbation: Perturbation, time: float, horizon: float = DECAY_HORIZON) -> float:
    # 1 at impulse, 0 at expiry, negative past it
    return (perturbation.when + horizon - time) / horizon
