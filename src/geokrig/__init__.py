"""
geokrig - spatial interpolation of scattered geochemical samples.

This package provides tools for:
- Variogram modelling and heuristic parameter fitting
- Simple kriging with estimation variance
- Inverse-distance weighting as a baseline
- Sampling either engine on a regular grid for heat maps
"""

from __future__ import annotations

__version__ = "0.1.0"

from geokrig.config import IDWSettings, KrigingSettings
from geokrig.core.exceptions import (
    ConfigurationError,
    GeoKrigError,
    NumericInputError,
    SingularMatrixError,
    UninitializedQueryError,
)
from geokrig.core.linalg import InversionResult, invert_matrix
from geokrig.core.samples import Sample
from geokrig.geostat import (
    VariogramModel,
    VariogramParameters,
    compute_empirical_variogram,
    fit_variogram,
)
from geokrig.interpolation import (
    Bounds,
    GridResult,
    IDWInterpolator,
    InterpolationAlgorithm,
    Interpolator,
    KrigingInterpolator,
    KrigingState,
    create_interpolator,
    interpolate_idw,
    sample_grid,
)

__all__ = [
    "__version__",
    # Samples
    "Sample",
    # Settings
    "KrigingSettings",
    "IDWSettings",
    # Variograms
    "VariogramModel",
    "VariogramParameters",
    "fit_variogram",
    "compute_empirical_variogram",
    # Linear algebra
    "InversionResult",
    "invert_matrix",
    # Interpolators
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
    # Exceptions
    "GeoKrigError",
    "ConfigurationError",
    "NumericInputError",
    "SingularMatrixError",
    "UninitializedQueryError",
]
