"""Covariance system assembly for simple kriging."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from geokrig.core.samples import distance_matrix
from geokrig.geostat.variogram import VariogramParameters


def build_covariance_matrix(
    coords: NDArray[np.float64],
    params: VariogramParameters,
) -> NDArray[np.float64]:
    """Compute the covariance matrix between sample locations.

    ``K[i, j] = sill - gamma(distance(i, j))``; the diagonal equals the sill.

    Parameters
    ----------
    coords : NDArray
        ``(n, 2)`` array of ``(lon, lat)`` rows.
    params : VariogramParameters
        Variogram parameters.

    Returns
    -------
    NDArray
        Symmetric covariance matrix (n x n).
    """
    distances = distance_matrix(coords)
    cov = np.asarray(params.covariance(distances), dtype=np.float64)
    # cdist is symmetric up to rounding; enforce it exactly
    return (cov + cov.T) / 2.0


def build_covariance_vectors(
    coords: NDArray[np.float64],
    targets: NDArray[np.float64],
    params: VariogramParameters,
) -> NDArray[np.float64]:
    """Compute sample-to-target covariances.

    Parameters
    ----------
    coords : NDArray
        ``(n, 2)`` sample coordinates.
    targets : NDArray
        ``(m, 2)`` query coordinates.
    params : VariogramParameters
        Variogram parameters.

    Returns
    -------
    NDArray
        Covariance matrix (n x m); column ``j`` is the covariance vector
        ``k`` for query ``j``.
    """
    distances = distance_matrix(coords, targets)
    return np.asarray(params.covariance(distances), dtype=np.float64).reshape(
        len(coords), len(targets)
    )
