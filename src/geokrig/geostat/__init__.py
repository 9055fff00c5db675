"""Variogram modelling and covariance assembly."""

from __future__ import annotations

from geokrig.geostat.covariance import build_covariance_matrix, build_covariance_vectors
from geokrig.geostat.fitting import compute_empirical_variogram, fit_variogram
from geokrig.geostat.variogram import VariogramModel, VariogramParameters

__all__ = [
    "VariogramModel",
    "VariogramParameters",
    "fit_variogram",
    "compute_empirical_variogram",
    "build_covariance_matrix",
    "build_covariance_vectors",
]
