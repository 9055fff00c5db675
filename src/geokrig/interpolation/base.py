"""Common contract for scattered-sample interpolators."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import NDArray

from geokrig.core.samples import Sample, query_coords


class Interpolator(ABC):
    """
    Estimate a scalar field at arbitrary ``(lon, lat)`` locations.

    Grid samplers only rely on :meth:`interpolate` (and the vectorised
    :meth:`predict`), so engines can be swapped without branching.
    """

    samples: tuple[Sample, ...]

    @abstractmethod
    def interpolate(self, lon: float, lat: float) -> float:
        """Return the estimated value at a single query location."""

    def predict(self, lons: NDArray | float, lats: NDArray | float) -> NDArray[np.float64]:
        """
        Estimate values at many query locations.

        Parameters
        ----------
        lons, lats : NDArray | float
            Query longitudes and latitudes of equal length.

        Returns
        -------
        NDArray
            One estimate per query, flattened.
        """
        coords = query_coords(lons, lats)
        return np.array([self.interpolate(lon, lat) for lon, lat in coords], dtype=np.float64)

    def __len__(self) -> int:
        return len(self.samples)
