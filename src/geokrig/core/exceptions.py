"""Custom exceptions for geokrig package."""

from __future__ import annotations


class GeoKrigError(Exception):
    """Base exception for all geokrig errors."""

    pass


class ConfigurationError(GeoKrigError):
    """Error raised when engine parameters or sample sets are unusable."""

    pass


class NumericInputError(GeoKrigError):
    """Error raised when samples or queries contain NaN or infinite numbers."""

    def __init__(self, message: str, indices: list[int] | None = None) -> None:
        super().__init__(message)
        self.indices = indices or []


class SingularMatrixError(GeoKrigError):
    """Error raised when a matrix cannot be inverted to the requested tolerance."""

    def __init__(self, message: str, step: int | None = None) -> None:
        super().__init__(message)
        self.step = step


class UninitializedQueryError(GeoKrigError):
    """Error raised when an interpolator is queried before it is ready."""

    pass
