"""Variogram models for scattered-sample interpolation.

This module provides:
- The closed set of supported variogram models
- Validated, immutable variogram parameters
- Semivariance and covariance evaluation for scalar or array lags

Ranges follow the "practical range" convention: the exponential and
gaussian models reach about 95% of the sill at ``h == range``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np
from numpy.typing import NDArray

from geokrig.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class VariogramModel(Enum):
    """Types of variogram models.

    Unknown selectors resolve to ``EXPONENTIAL`` rather than raising.
    """

    EXPONENTIAL = "exponential"
    GAUSSIAN = "gaussian"
    SPHERICAL = "spherical"

    @classmethod
    def _missing_(cls, value: object) -> VariogramModel:
        if isinstance(value, str):
            for member in cls:
                if member.value == value.strip().lower():
                    return member
        logger.warning("Unknown variogram model %r, falling back to exponential", value)
        return cls.EXPONENTIAL


@dataclass(frozen=True)
class VariogramParameters:
    """Variogram parameters resolved for an interpolation engine.

    Parameters
    ----------
    model : str | VariogramModel
        Variogram model selector.
    nugget : float
        Nugget effect - semivariance just above zero separation.
    sill : float
        Plateau of the variogram; also the covariance at zero lag.
    range : float
        Separation beyond which samples are treated as uncorrelated.

    Raises
    ------
    ConfigurationError
        If ``nugget < 0``, ``sill <= nugget`` or ``range <= 0``.

    Examples
    --------
    >>> params = VariogramParameters("spherical", nugget=0.1, sill=1.0, range=10.0)
    >>> params.evaluate(20.0)
    1.0
    """

    model: str | VariogramModel
    nugget: float
    sill: float
    range: float

    def __post_init__(self) -> None:
        """Validate and convert the model selector."""
        object.__setattr__(self, "model", VariogramModel(self.model))
        for name in ("nugget", "sill", "range"):
            value = float(getattr(self, name))
            if not np.isfinite(value):
                raise ConfigurationError(f"{name.capitalize()} must be finite: {value}")
            object.__setattr__(self, name, value)

        if self.range <= 0:
            raise ConfigurationError(f"Range must be positive: {self.range}")
        if self.nugget < 0:
            raise ConfigurationError(f"Nugget must be non-negative: {self.nugget}")
        if self.sill <= self.nugget:
            raise ConfigurationError(
                f"Sill must exceed nugget: sill={self.sill}, nugget={self.nugget}"
            )

    @property
    def partial_sill(self) -> float:
        """Spatially correlated contribution (sill - nugget)."""
        return self.sill - self.nugget

    def evaluate(self, h: NDArray | float) -> NDArray | float:
        """Evaluate the variogram at lag distances h.

        Parameters
        ----------
        h : NDArray | float
            Non-negative lag distance(s).

        Returns
        -------
        NDArray | float
            Semivariance value(s) gamma(h); zero where ``h == 0``.
        """
        h = np.asarray(h, dtype=np.float64)
        scalar_input = h.ndim == 0
        h = np.atleast_1d(h)

        if self.model is VariogramModel.GAUSSIAN:
            gamma = self._gaussian(h)
        elif self.model is VariogramModel.SPHERICAL:
            gamma = self._spherical(h)
        else:
            gamma = self._exponential(h)

        gamma = np.where(h == 0, 0.0, gamma)

        if scalar_input:
            return float(gamma[0])
        return gamma

    def _exponential(self, h: NDArray) -> NDArray:
        """Exponential variogram model."""
        return self.nugget + self.partial_sill * (1.0 - np.exp(-3.0 * h / self.range))

    def _gaussian(self, h: NDArray) -> NDArray:
        """Gaussian variogram model."""
        return self.nugget + self.partial_sill * (1.0 - np.exp(-3.0 * (h / self.range) ** 2))

    def _spherical(self, h: NDArray) -> NDArray:
        """Spherical variogram model."""
        hr = h / self.range
        return np.where(
            h >= self.range,
            self.sill,
            self.nugget + self.partial_sill * (1.5 * hr - 0.5 * hr**3),
        )

    def covariance(self, h: NDArray | float) -> NDArray | float:
        """Compute covariance from variogram.

        C(h) = sill - gamma(h).
        """
        return self.sill - self.evaluate(h)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "model": self.model.value,
            "nugget": self.nugget,
            "sill": self.sill,
            "range": self.range,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> VariogramParameters:
        """Create from dictionary."""
        return cls(
            model=d.get("model", VariogramModel.EXPONENTIAL),
            nugget=d.get("nugget", 0.0),
            sill=d["sill"],
            range=d["range"],
        )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"VariogramParameters(model={self.model.value}, nugget={self.nugget:.4g}, "
            f"sill={self.sill:.4g}, range={self.range:.4g})"
        )
