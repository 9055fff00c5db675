"""
Sample points and planar distance helpers.

Samples are scalar measurements located by longitude/latitude. Distances
are planar Euclidean on the ``(lon, lat)`` pair; no geodesic correction
is applied, so results are only meaningful over small extents.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import cdist

from geokrig.core.exceptions import NumericInputError


@dataclass(frozen=True)
class Sample:
    """
    A single scattered measurement.

    Parameters
    ----------
    lat : float
        Latitude of the measurement.
    lon : float
        Longitude of the measurement.
    value : float
        Measured scalar (e.g. a concentration in ppm).

    Examples
    --------
    >>> s = Sample(lat=45.2, lon=5.7, value=12.0)
    >>> s.coords
    (5.7, 45.2)
    """

    lat: float
    lon: float
    value: float

    @property
    def coords(self) -> tuple[float, float]:
        """Return the ``(lon, lat)`` pair used for distance computations."""
        return (self.lon, self.lat)

    @property
    def is_finite(self) -> bool:
        """Return True if coordinates and value are all finite."""
        return bool(np.isfinite([self.lat, self.lon, self.value]).all())

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Sample:
        """Create from a ``{"lat", "lon", "value"}`` mapping."""
        return cls(lat=float(d["lat"]), lon=float(d["lon"]), value=float(d["value"]))

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return {"lat": self.lat, "lon": self.lon, "value": self.value}


def as_samples(data: Iterable[Sample | dict[str, Any]]) -> tuple[Sample, ...]:
    """
    Normalize an iterable of samples or mappings into a tuple of Samples.

    Parameters
    ----------
    data : iterable of Sample or dict
        Already-parsed sample records.

    Returns
    -------
    tuple[Sample, ...]
        Immutable sample sequence in input order.
    """
    return tuple(s if isinstance(s, Sample) else Sample.from_dict(s) for s in data)


def validate_samples(samples: tuple[Sample, ...]) -> None:
    """
    Reject samples carrying NaN or infinite numbers.

    Raises
    ------
    NumericInputError
        If any sample is not finite. ``indices`` lists the offenders.
    """
    bad = [i for i, s in enumerate(samples) if not s.is_finite]
    if bad:
        raise NumericInputError(
            f"{len(bad)} sample(s) contain NaN or infinite values (first at index {bad[0]})",
            indices=bad,
        )


def sample_arrays(
    samples: tuple[Sample, ...],
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Split samples into a coordinate array and a value array.

    Returns
    -------
    tuple[NDArray, NDArray]
        ``(coords, values)`` with ``coords`` of shape ``(n, 2)`` holding
        ``(lon, lat)`` rows.
    """
    coords = np.array([s.coords for s in samples], dtype=np.float64).reshape(-1, 2)
    values = np.array([s.value for s in samples], dtype=np.float64)
    return coords, values


def query_coords(
    lons: NDArray | float,
    lats: NDArray | float,
) -> NDArray[np.float64]:
    """
    Stack query longitudes/latitudes into an ``(m, 2)`` coordinate array.

    Raises
    ------
    NumericInputError
        If any query coordinate is NaN or infinite.
    ValueError
        If ``lons`` and ``lats`` have different lengths.
    """
    lons = np.atleast_1d(np.asarray(lons, dtype=np.float64)).ravel()
    lats = np.atleast_1d(np.asarray(lats, dtype=np.float64)).ravel()
    if lons.shape != lats.shape:
        raise ValueError(f"lons and lats differ in length: {lons.size} != {lats.size}")
    coords = np.column_stack([lons, lats])
    if not np.isfinite(coords).all():
        raise NumericInputError("Query coordinates contain NaN or infinite values")
    return coords


def distance_matrix(
    coords1: NDArray[np.float64],
    coords2: NDArray[np.float64] | None = None,
) -> NDArray[np.float64]:
    """
    Compute planar Euclidean distances between two coordinate sets.

    Parameters
    ----------
    coords1 : NDArray
        ``(n, 2)`` array of ``(lon, lat)`` rows.
    coords2 : NDArray | None
        ``(m, 2)`` array. If None, compute self-distances of ``coords1``.

    Returns
    -------
    NDArray
        Distance matrix of shape ``(n, m)``.
    """
    if coords2 is None:
        coords2 = coords1
    return np.asarray(cdist(coords1, coords2))
