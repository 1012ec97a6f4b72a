"""Core animation primitives for SwirlGrid.

Modules:
- geometry: vector, box and shape value types
- perturbations: click impulses and their decay window
- grid: per-frame line grid generation + parameters
- driver: model state and tick/click/measure transitions
"""
