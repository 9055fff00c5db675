"""
Simple kriging over a fixed sample set.

The engine moves through three states:

- ``UNINITIALIZED``: nothing resolved yet (only seen during construction).
- ``FITTED``: variogram parameters resolved, estimated from the samples
  when sill or range were not supplied.
- ``READY``: covariance matrix built and inverted; queries allowed.

Building and inverting the covariance matrix is the one expensive step,
``O(n^3)``. Construct with ``prepare=False`` to defer it, then call
:meth:`KrigingInterpolator.prepare` off the interactive path. Once ready,
all arrays are read-only and the instance can be queried from several
threads without locking.

Weights are ``w = M @ k`` with ``M`` the inverse covariance matrix and
``k`` the sample-to-query covariances. They are not constrained to sum
to one (no Lagrange term), so this is simple rather than ordinary kriging.

Example
-------
>>> samples = [Sample(lat=0.0, lon=0.0, value=1.0), Sample(lat=0.0, lon=1.0, value=3.0)]
>>> krig = KrigingInterpolator(samples, model="spherical")
>>> round(krig.interpolate(0.0, 0.0), 6)
1.0
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from enum import Enum
from typing import Any

import numpy as np
from numpy.typing import NDArray

from geokrig.config import KrigingSettings, resolve_settings
from geokrig.core.exceptions import ConfigurationError, UninitializedQueryError
from geokrig.core.linalg import invert_matrix
from geokrig.core.samples import (
    Sample,
    as_samples,
    query_coords,
    sample_arrays,
    validate_samples,
)
from geokrig.geostat.covariance import build_covariance_matrix, build_covariance_vectors
from geokrig.geostat.fitting import fit_variogram
from geokrig.geostat.variogram import VariogramParameters
from geokrig.interpolation.base import Interpolator

logger = logging.getLogger(__name__)


class KrigingState(Enum):
    """Lifecycle states of a kriging engine."""

    UNINITIALIZED = "uninitialized"
    FITTED = "fitted"
    READY = "ready"


class KrigingInterpolator(Interpolator):
    """
    Simple-kriging interpolator with estimation variance.

    Parameters
    ----------
    samples : iterable of Sample or dict
        Sample set. At least two samples are needed when the variogram
        is estimated; otherwise at least one.
    settings : KrigingSettings | dict | None
        Engine settings. Keyword arguments override individual fields
        (``model``, ``nugget``, ``sill``, ``range``, ``tolerance``, ``strict``).
    prepare : bool
        If True (default), build and invert the covariance matrix now.

    Raises
    ------
    ConfigurationError
        If settings are invalid, sill does not exceed nugget, range is not
        positive, or too few samples are given.
    NumericInputError
        If a sample holds NaN or infinite numbers.
    SingularMatrixError
        If ``strict`` is set and the covariance matrix is singular.
    """

    def __init__(
        self,
        samples: Iterable[Sample | dict[str, Any]],
        settings: KrigingSettings | dict[str, Any] | None = None,
        *,
        prepare: bool = True,
        **overrides: Any,
    ) -> None:
        self._state = KrigingState.UNINITIALIZED
        self.settings = resolve_settings(KrigingSettings, settings, **overrides)
        self.samples = as_samples(samples)
        validate_samples(self.samples)

        self._coords, self._values = sample_arrays(self.samples)
        self._coords.setflags(write=False)
        self._values.setflags(write=False)

        self._params = self._resolve_parameters()
        self._covariance: NDArray[np.float64] | None = None
        self._inverse: NDArray[np.float64] | None = None
        self._singular_steps: tuple[int, ...] = ()
        self._state = KrigingState.FITTED

        if prepare:
            self.prepare()

    def _resolve_parameters(self) -> VariogramParameters:
        s = self.settings
        if s.needs_fit:
            return fit_variogram(
                self.samples, model=s.model, nugget=s.nugget, sill=s.sill, range_=s.range
            )
        if not self.samples:
            # Parameters alone are valid, but an empty system has nothing to krige
            raise ConfigurationError("Kriging requires at least one sample")
        nugget = 0.0 if s.nugget is None else s.nugget
        return VariogramParameters(model=s.model, nugget=nugget, sill=s.sill, range=s.range)

    # --- Lifecycle -------------------------------------------------------

    def prepare(self) -> KrigingInterpolator:
        """
        Build the covariance matrix and invert it.

        No-op if the engine is already ready.

        Returns
        -------
        KrigingInterpolator
            ``self``, for chaining.
        """
        if self._state is KrigingState.READY:
            return self

        start = time.perf_counter()
        covariance = build_covariance_matrix(self._coords, self._params)
        result = invert_matrix(
            covariance, tol=self.settings.tolerance, strict=self.settings.strict
        )
        if not result.is_exact:
            logger.warning(
                "Covariance matrix of %d samples is singular at %d step(s); "
                "predictions are approximate",
                len(self.samples),
                len(result.singular_steps),
            )

        covariance.setflags(write=False)
        inverse = result.inverse
        inverse.setflags(write=False)

        self._covariance = covariance
        self._inverse = inverse
        self._singular_steps = result.singular_steps
        self._state = KrigingState.READY
        logger.debug(
            "Prepared kriging system for %d samples in %.3f s",
            len(self.samples),
            time.perf_counter() - start,
        )
        return self

    @property
    def state(self) -> KrigingState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_ready(self) -> bool:
        """Return True if queries are allowed."""
        return self._state is KrigingState.READY

    @property
    def parameters(self) -> VariogramParameters:
        """Resolved variogram parameters."""
        return self._params

    @property
    def singular_steps(self) -> tuple[int, ...]:
        """Elimination steps skipped while inverting the covariance matrix."""
        return self._singular_steps

    @property
    def is_exact(self) -> bool:
        """Return True if the covariance inverse was computed without skipped steps."""
        self._require_ready()
        return not self._singular_steps

    @property
    def covariance_matrix(self) -> NDArray[np.float64]:
        """Read-only sample covariance matrix K."""
        self._require_ready()
        return self._covariance  # type: ignore[return-value]

    @property
    def inverse_matrix(self) -> NDArray[np.float64]:
        """Read-only inverse covariance matrix M."""
        return self._require_ready()

    def _require_ready(self) -> NDArray[np.float64]:
        if self._state is not KrigingState.READY or self._inverse is None:
            raise UninitializedQueryError(
                f"Kriging engine is {self._state.value}; call prepare() before querying"
            )
        return self._inverse

    # --- Queries ---------------------------------------------------------

    def _weights(self, targets: NDArray[np.float64]) -> tuple[NDArray, NDArray]:
        inverse = self._require_ready()
        k = build_covariance_vectors(self._coords, targets, self._params)
        return inverse @ k, k

    def interpolate(self, lon: float, lat: float) -> float:
        """Return the kriged value at ``(lon, lat)``."""
        weights, _ = self._weights(query_coords(lon, lat))
        return float(weights[:, 0] @ self._values)

    def variance(self, lon: float, lat: float) -> float:
        """Return the kriging variance at ``(lon, lat)``, clamped at zero."""
        weights, k = self._weights(query_coords(lon, lat))
        return max(0.0, float(self._params.sill - weights[:, 0] @ k[:, 0]))

    def predict(
        self,
        lons: NDArray | float,
        lats: NDArray | float,
        return_variance: bool = False,
    ) -> NDArray[np.float64] | tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Interpolate values at many query locations.

        Parameters
        ----------
        lons, lats : NDArray | float
            Query longitudes and latitudes of equal length.
        return_variance : bool
            If True, also return kriging variance.

        Returns
        -------
        NDArray | tuple[NDArray, NDArray]
            Interpolated values, optionally with variance.
        """
        weights, k = self._weights(query_coords(lons, lats))
        values = weights.T @ self._values
        if not return_variance:
            return values
        variance = self._params.sill - np.sum(weights * k, axis=0)
        return values, np.maximum(variance, 0.0)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"KrigingInterpolator(n_samples={len(self.samples)}, state={self._state.value}, "
            f"parameters={self._params!r})"
        )
