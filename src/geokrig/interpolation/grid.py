"""
Regular-grid sampling of an interpolator.

Heat-map renderers evaluate an interpolator at the centre of every cell
of a regular ``grid_size x grid_size`` grid spanning a bounding box.
Row 0 is the northern edge so the array maps directly onto an image.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple

import numpy as np
from numpy.typing import NDArray

from geokrig.core.exceptions import ConfigurationError
from geokrig.core.samples import Sample
from geokrig.interpolation.base import Interpolator
from geokrig.interpolation.idw import IDWInterpolator
from geokrig.interpolation.kriging import KrigingInterpolator

logger = logging.getLogger(__name__)


class InterpolationAlgorithm(Enum):
    """Available interpolation engines."""

    KRIGING = "kriging"
    IDW = "idw"


class Bounds(NamedTuple):
    """Bounding box as ``(min_lon, min_lat, max_lon, max_lat)``."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @property
    def lon_span(self) -> float:
        return self.max_lon - self.min_lon

    @property
    def lat_span(self) -> float:
        return self.max_lat - self.min_lat

    def validate(self) -> None:
        """Raise ConfigurationError unless the box has positive extent."""
        if not np.isfinite(list(self)).all():
            raise ConfigurationError(f"Bounds must be finite: {tuple(self)}")
        if self.lon_span <= 0 or self.lat_span <= 0:
            raise ConfigurationError(f"Bounds must have positive extent: {tuple(self)}")

    @classmethod
    def from_samples(cls, samples: Iterable[Sample]) -> Bounds:
        """Return the bounding box enclosing all samples."""
        samples = list(samples)
        if not samples:
            raise ConfigurationError("Cannot compute bounds of an empty sample set")
        lons = [s.lon for s in samples]
        lats = [s.lat for s in samples]
        return cls(min(lons), min(lats), max(lons), max(lats))


@dataclass
class GridResult:
    """
    Values sampled on a regular grid.

    Attributes
    ----------
    lons : NDArray[np.float64]
        Cell-centre longitudes, west to east (length ``grid_size``).
    lats : NDArray[np.float64]
        Cell-centre latitudes, north to south (length ``grid_size``).
    values : NDArray[np.float64]
        Estimates of shape ``(grid_size, grid_size)`` indexed ``[row, col]``.
    variance : NDArray[np.float64] | None
        Kriging variance on the same grid, when requested.
    """

    lons: NDArray[np.float64]
    lats: NDArray[np.float64]
    values: NDArray[np.float64]
    variance: NDArray[np.float64] | None = None

    @property
    def vmin(self) -> float:
        return float(np.min(self.values))

    @property
    def vmax(self) -> float:
        return float(np.max(self.values))


def create_interpolator(
    samples: Iterable[Sample | dict[str, Any]],
    algorithm: str | InterpolationAlgorithm = InterpolationAlgorithm.KRIGING,
    **params: Any,
) -> Interpolator:
    """
    Build an interpolation engine by name.

    Parameters
    ----------
    samples : iterable of Sample or dict
        Sample set.
    algorithm : str | InterpolationAlgorithm
        ``"kriging"`` or ``"idw"``.
    **params
        Engine settings (see :class:`KrigingSettings` / :class:`IDWSettings`).

    Raises
    ------
    ConfigurationError
        If the algorithm is unknown or the engine rejects its settings.
    """
    try:
        algorithm = InterpolationAlgorithm(algorithm)
    except ValueError as exc:
        raise ConfigurationError(f"Unknown interpolation algorithm: {algorithm!r}") from exc

    if algorithm is InterpolationAlgorithm.IDW:
        return IDWInterpolator(samples, **params)
    return KrigingInterpolator(samples, **params)


def grid_axes(
    bounds: Bounds, grid_size: int
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Return cell-centre longitudes (west to east) and latitudes (north to south)."""
    centres = (np.arange(grid_size) + 0.5) / grid_size
    lons = bounds.min_lon + bounds.lon_span * centres
    lats = bounds.max_lat - bounds.lat_span * centres
    return lons, lats


def sample_grid(
    interpolator: Interpolator,
    bounds: Bounds | tuple[float, float, float, float],
    grid_size: int = 50,
    with_variance: bool = False,
) -> GridResult:
    """
    Evaluate an interpolator at every cell centre of a regular grid.

    Parameters
    ----------
    interpolator : Interpolator
        Any engine honouring the interpolator contract.
    bounds : Bounds | tuple
        ``(min_lon, min_lat, max_lon, max_lat)``.
    grid_size : int
        Number of cells along each axis.
    with_variance : bool
        Also sample kriging variance. Requires a :class:`KrigingInterpolator`.

    Returns
    -------
    GridResult
        Sampled grid.
    """
    bounds = Bounds(*bounds)
    bounds.validate()
    if grid_size < 1:
        raise ConfigurationError(f"grid_size must be positive: {grid_size}")
    if with_variance and not isinstance(interpolator, KrigingInterpolator):
        raise ConfigurationError(
            f"Variance is only available from kriging, not {type(interpolator).__name__}"
        )

    lons, lats = grid_axes(bounds, grid_size)
    lon_mesh, lat_mesh = np.meshgrid(lons, lats)

    variance = None
    if with_variance:
        flat, flat_var = interpolator.predict(lon_mesh.ravel(), lat_mesh.ravel(), True)
        variance = flat_var.reshape(grid_size, grid_size)
    else:
        flat = interpolator.predict(lon_mesh.ravel(), lat_mesh.ravel())

    logger.debug("Sampled %dx%d grid over %s", grid_size, grid_size, tuple(bounds))
    return GridResult(
        lons=lons,
        lats=lats,
        values=np.asarray(flat).reshape(grid_size, grid_size),
        variance=variance,
    )
