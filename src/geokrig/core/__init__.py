"""Core data structures for geokrig."""

from __future__ import annotations

from geokrig.core.exceptions import (
    ConfigurationError,
    GeoKrigError,
    NumericInputError,
    SingularMatrixError,
    UninitializedQueryError,
)
from geokrig.core.linalg import InversionResult, invert_matrix
from geokrig.core.samples import Sample, as_samples, distance_matrix, validate_samples

__all__ = [
    # Samples
    "Sample",
    "as_samples",
    "validate_samples",
    "distance_matrix",
    # Linear algebra
    "InversionResult",
    "invert_matrix",
    # Exceptions
    "GeoKrigError",
    "ConfigurationError",
    "NumericInputError",
    "SingularMatrixError",
    "UninitializedQueryError",
]
