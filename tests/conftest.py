"""Pytest configuration and fixtures for geokrig tests."""

from __future__ import annotations

import numpy as np
import pytest

from geokrig.core.samples import Sample


@pytest.fixture
def two_samples() -> tuple[Sample, ...]:
    """Two samples one unit apart along the longitude axis."""
    return (
        Sample(lat=0.0, lon=0.0, value=10.0),
        Sample(lat=0.0, lon=1.0, value=20.0),
    )


@pytest.fixture
def grid_samples() -> tuple[Sample, ...]:
    """
    Samples on a 3x3 grid (9 points).

    Layout (lon, lat):
        (0,2)---(1,2)---(2,2)
          |       |       |
        (0,1)---(1,1)---(2,1)
          |       |       |
        (0,0)---(1,0)---(2,0)

    Spacing: 1 unit in both directions; value = 2*lon + lat.
    """
    return tuple(
        Sample(lat=float(lat), lon=float(lon), value=2.0 * lon + lat)
        for lat in range(3)
        for lon in range(3)
    )


@pytest.fixture
def scattered_samples() -> tuple[Sample, ...]:
    """
    Twenty reproducible scattered samples around Grenoble.

    Values mimic a gas concentration in ppm with a smooth east-west trend.
    """
    rng = np.random.default_rng(42)
    lons = 5.70 + rng.random(20) * 0.1
    lats = 45.15 + rng.random(20) * 0.1
    values = 100.0 + 400.0 * (lons - 5.70) + rng.normal(0.0, 2.0, 20)
    return tuple(
        Sample(lat=float(lat), lon=float(lon), value=float(v))
        for lon, lat, v in zip(lons, lats, values, strict=True)
    )
