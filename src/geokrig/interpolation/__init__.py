"""Interpolation engines for scattered samples."""

from __future__ import annotations

from geokrig.interpolation.base import Interpolator
from geokrig.interpolation.grid import (
    Bounds,
    GridResult,
    InterpolationAlgorithm,
    create_interpolator,
    sample_grid,
)
from geokrig.interpolation.idw import IDWInterpolator, interpolate_idw
from geokrig.interpolation.kriging import KrigingInterpolator, KrigingState

__all__ = [
    "Interpolator",
    "KrigingInterpolator",
    "KrigingState",
    "IDWInterpolator",
    "interpolate_idw",
    "InterpolationAlgorithm",
    "create_interpolator",
    "Bounds",
    "GridResult",
    "sample_grid",
]
