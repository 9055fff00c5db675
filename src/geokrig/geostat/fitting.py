"""
Variogram parameter estimation from sample data.

``fit_variogram`` is a method-of-moments heuristic rather than a
regression on binned semivariances: the sill is the sample variance with
20% headroom, the range is 30% of the largest sample separation and the
nugget is 5% of the sill. ``compute_empirical_variogram`` produces the
binned semivariances for diagnostics and reporting.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from geokrig.core.exceptions import ConfigurationError
from geokrig.core.samples import Sample, distance_matrix, sample_arrays
from geokrig.geostat.variogram import VariogramModel, VariogramParameters

logger = logging.getLogger(__name__)

SILL_HEADROOM = 1.2
RANGE_FRACTION = 0.3
NUGGET_FRACTION = 0.05


def fit_variogram(
    samples: tuple[Sample, ...],
    model: str | VariogramModel = VariogramModel.EXPONENTIAL,
    nugget: float | None = None,
    sill: float | None = None,
    range_: float | None = None,
) -> VariogramParameters:
    """
    Estimate variogram parameters not supplied by the caller.

    Parameters
    ----------
    samples : tuple[Sample, ...]
        Sample set; at least two entries. Not deduplicated.
    model : str | VariogramModel
        Variogram model for the returned parameters.
    nugget : float | None
        Nugget to keep. If None, ``sill * 0.05`` is used.
    sill : float | None
        Sill to keep. If None, ``variance(values) * 1.2`` is used.
    range_ : float | None
        Range to keep. If None, ``max(pairwise distance) * 0.3`` is used.

    Returns
    -------
    VariogramParameters
        Resolved, validated parameters.

    Raises
    ------
    ConfigurationError
        If fewer than two samples are given, all samples are coincident,
        or the resolved parameters violate ``sill > nugget``.
    """
    if len(samples) < 2:
        raise ConfigurationError(
            f"At least 2 samples are required to fit a variogram, got {len(samples)}"
        )

    coords, values = sample_arrays(samples)

    if sill is None:
        sill = float(np.var(values)) * SILL_HEADROOM

    if range_ is None:
        max_distance = float(np.max(distance_matrix(coords)))
        if max_distance <= 0:
            raise ConfigurationError("All samples are coincident; cannot estimate a range")
        range_ = max_distance * RANGE_FRACTION

    if nugget is None:
        nugget = sill * NUGGET_FRACTION

    params = VariogramParameters(model=model, nugget=nugget, sill=sill, range=range_)
    logger.debug("Fitted %r from %d samples", params, len(samples))
    return params


def compute_empirical_variogram(
    samples: tuple[Sample, ...],
    n_lags: int = 15,
    max_lag: float | None = None,
) -> tuple[NDArray, NDArray, NDArray]:
    """Compute empirical variogram from samples.

    Parameters
    ----------
    samples : tuple[Sample, ...]
        Sample set.
    n_lags : int
        Number of lag bins.
    max_lag : float | None
        Maximum lag distance. If None, uses half of the maximum distance.

    Returns
    -------
    tuple[NDArray, NDArray, NDArray]
        Lag centers, semivariance values, and pair counts.
    """
    if n_lags < 1:
        raise ConfigurationError(f"n_lags must be positive: {n_lags}")
    if len(samples) < 2:
        raise ConfigurationError(
            f"At least 2 samples are required for an empirical variogram, got {len(samples)}"
        )

    coords, values = sample_arrays(samples)
    distances = distance_matrix(coords)

    if max_lag is None:
        max_lag = float(np.max(distances)) / 2.0
    if max_lag <= 0:
        raise ConfigurationError(f"max_lag must be positive: {max_lag}")

    lag_edges = np.linspace(0, max_lag, n_lags + 1)
    lag_centers = (lag_edges[:-1] + lag_edges[1:]) / 2

    iu, ju = np.triu_indices(len(values), k=1)
    pair_distances = distances[iu, ju]
    semivariances = 0.5 * (values[iu] - values[ju]) ** 2

    bin_idx = np.searchsorted(lag_edges[1:], pair_distances)
    in_range = bin_idx < n_lags

    counts = np.bincount(bin_idx[in_range], minlength=n_lags)
    gamma = np.bincount(bin_idx[in_range], weights=semivariances[in_range], minlength=n_lags)

    valid = counts > 0
    gamma[valid] /= counts[valid]

    return lag_centers, gamma, counts
