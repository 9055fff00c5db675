"""
Inverse-distance weighting (IDW) interpolation.

A non-statistical baseline: each sample contributes with weight
``1 / d**power``. A query closer than ``min_distance`` to a sample
returns that sample's value unchanged.

Example
-------
>>> samples = (Sample(lat=0.0, lon=0.0, value=10.0), Sample(lat=0.0, lon=1.0, value=20.0))
>>> interpolate_idw(0.5, 0.0, samples)
15.0
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import numpy as np
from numpy.typing import NDArray

from geokrig.config import IDWSettings, resolve_settings
from geokrig.core.exceptions import ConfigurationError
from geokrig.core.samples import (
    Sample,
    as_samples,
    distance_matrix,
    query_coords,
    sample_arrays,
    validate_samples,
)
from geokrig.interpolation.base import Interpolator


def _idw_estimate(
    distances: NDArray[np.float64],
    values: NDArray[np.float64],
    power: float,
    min_distance: float,
) -> float:
    # d == 0 must short-circuit even when min_distance is 0
    close = np.flatnonzero((distances < min_distance) | (distances == 0))
    if close.size:
        return float(values[close[0]])

    weights = 1.0 / distances**power
    return float(np.sum(weights * values) / np.sum(weights))


def interpolate_idw(
    lon: float,
    lat: float,
    samples: Iterable[Sample],
    power: float = 2.0,
    min_distance: float = 1e-4,
) -> float:
    """
    Interpolate a value at one location by inverse-distance weighting.

    Parameters
    ----------
    lon, lat : float
        Query location.
    samples : iterable of Sample
        Non-empty sample set.
    power : float
        Distance exponent.
    min_distance : float
        Distance below which the nearest-in-order sample value is returned.

    Returns
    -------
    float
        Weighted average of sample values.

    Raises
    ------
    ConfigurationError
        If the sample set is empty.
    NumericInputError
        If a sample or the query holds NaN or infinite numbers.
    """
    samples = as_samples(samples)
    if not samples:
        raise ConfigurationError("IDW interpolation requires at least one sample")
    validate_samples(samples)
    coords, values = sample_arrays(samples)
    distances = distance_matrix(query_coords(lon, lat), coords)[0]
    return _idw_estimate(distances, values, power, min_distance)


class IDWInterpolator(Interpolator):
    """
    Inverse-distance interpolator over a fixed sample set.

    There is no precomputation; every query is weighted against the full
    sample set in ``O(n)``.

    Parameters
    ----------
    samples : iterable of Sample or dict
        Non-empty sample set.
    settings : IDWSettings | dict | None
        Engine settings. Keyword arguments override individual fields.

    Raises
    ------
    ConfigurationError
        If the sample set is empty or the settings are invalid.
    NumericInputError
        If a sample holds NaN or infinite numbers.
    """

    def __init__(
        self,
        samples: Iterable[Sample | dict[str, Any]],
        settings: IDWSettings | dict[str, Any] | None = None,
        **overrides: Any,
    ) -> None:
        self.settings = resolve_settings(IDWSettings, settings, **overrides)
        self.samples = as_samples(samples)
        if not self.samples:
            raise ConfigurationError("IDW interpolation requires at least one sample")
        validate_samples(self.samples)

        self._coords, self._values = sample_arrays(self.samples)
        self._coords.setflags(write=False)
        self._values.setflags(write=False)

    @property
    def power(self) -> float:
        return self.settings.power

    @property
    def min_distance(self) -> float:
        return self.settings.min_distance

    def interpolate(self, lon: float, lat: float) -> float:
        """Return the inverse-distance weighted value at ``(lon, lat)``."""
        distances = distance_matrix(query_coords(lon, lat), self._coords)[0]
        return _idw_estimate(distances, self._values, self.power, self.min_distance)

    def predict(self, lons: NDArray | float, lats: NDArray | float) -> NDArray[np.float64]:
        """Estimate values at many query locations."""
        distances = distance_matrix(query_coords(lons, lats), self._coords)
        return np.array(
            [_idw_estimate(row, self._values, self.power, self.min_distance) for row in distances],
            dtype=np.float64,
        )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"IDWInterpolator(n_samples={len(self.samples)}, power={self.power}, "
            f"min_distance={self.min_distance})"
        )
