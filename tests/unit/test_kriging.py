"""
Tests for geokrig.interpolation.kriging.

Tests cover:
- Lifecycle states and deferred preparation
- Exact interpolation and zero variance at sample locations
- Variance bounds and growth away from samples
- Parameter resolution (supplied vs. fitted)
- Singular covariance handling
- Error handling
"""

import logging
import threading

import numpy as np
import pytest
from numpy.testing import assert_allclose

from geokrig.config import KrigingSettings
from geokrig.core.exceptions import (
    ConfigurationError,
    NumericInputError,
    SingularMatrixError,
    UninitializedQueryError,
)
from geokrig.core.samples import Sample
from geokrig.geostat.variogram import VariogramModel, VariogramParameters
from geokrig.interpolation.base import Interpolator
from geokrig.interpolation.kriging import KrigingInterpolator, KrigingState


# =============================================================================
# Lifecycle
# =============================================================================


class TestKrigingLifecycle:
    """Tests for the Fitted -> Ready state machine."""

    def test_ready_after_construction(self, grid_samples):
        krig = KrigingInterpolator(grid_samples)
        assert krig.state is KrigingState.READY
        assert krig.is_ready

    def test_deferred_prepare(self, grid_samples):
        krig = KrigingInterpolator(grid_samples, prepare=False)
        assert krig.state is KrigingState.FITTED
        assert not krig.is_ready
        # Parameters are available before the system is built
        assert krig.parameters.range > 0

        assert krig.prepare() is krig
        assert krig.state is KrigingState.READY

    def test_prepare_is_idempotent(self, grid_samples):
        krig = KrigingInterpolator(grid_samples)
        inverse = krig.inverse_matrix
        krig.prepare()
        assert krig.inverse_matrix is inverse

    @pytest.mark.parametrize(
        "query",
        [
            lambda k: k.interpolate(0.5, 0.5),
            lambda k: k.variance(0.5, 0.5),
            lambda k: k.predict([0.5], [0.5]),
            lambda k: k.inverse_matrix,
            lambda k: k.covariance_matrix,
            lambda k: k.is_exact,
        ],
    )
    def test_query_before_ready_raises(self, grid_samples, query):
        krig = KrigingInterpolator(grid_samples, prepare=False)
        with pytest.raises(UninitializedQueryError, match="fitted"):
            query(krig)

    def test_is_interpolator(self, grid_samples):
        assert isinstance(KrigingInterpolator(grid_samples), Interpolator)
        assert len(KrigingInterpolator(grid_samples)) == 9

    def test_matrices_read_only(self, grid_samples):
        krig = KrigingInterpolator(grid_samples)
        with pytest.raises(ValueError):
            krig.inverse_matrix[0, 0] = 1.0
        with pytest.raises(ValueError):
            krig.covariance_matrix[0, 0] = 1.0

    def test_inverse_matches_covariance(self, scattered_samples):
        krig = KrigingInterpolator(scattered_samples)
        n = len(scattered_samples)
        assert_allclose(krig.covariance_matrix @ krig.inverse_matrix, np.eye(n), atol=1e-6)

    def test_accepts_dicts(self):
        krig = KrigingInterpolator(
            [{"lat": 0, "lon": 0, "value": 1}, {"lat": 0, "lon": 1, "value": 3}]
        )
        assert krig.samples[1] == Sample(lat=0.0, lon=1.0, value=3.0)

    def test_repr(self, grid_samples):
        r = repr(KrigingInterpolator(grid_samples, prepare=False))
        assert "n_samples=9" in r
        assert "fitted" in r


# =============================================================================
# Predictions
# =============================================================================


class TestKrigingExactness:
    """Tests for the exact-interpolation property."""

    @pytest.mark.parametrize("model", ["exponential", "gaussian", "spherical"])
    def test_reproduces_samples(self, scattered_samples, model):
        krig = KrigingInterpolator(scattered_samples, model=model)
        assert krig.is_exact
        for s in scattered_samples:
            assert krig.interpolate(s.lon, s.lat) == pytest.approx(s.value, rel=1e-6)

    @pytest.mark.parametrize("model", ["exponential", "gaussian", "spherical"])
    def test_zero_variance_at_samples(self, scattered_samples, model):
        krig = KrigingInterpolator(scattered_samples, model=model)
        for s in scattered_samples:
            assert krig.variance(s.lon, s.lat) == pytest.approx(0.0, abs=1e-6)

    def test_reproduces_samples_with_supplied_parameters(self, grid_samples):
        krig = KrigingInterpolator(grid_samples, model="spherical", nugget=0.5, sill=5.0, range=3.0)
        for s in grid_samples:
            assert krig.interpolate(s.lon, s.lat) == pytest.approx(s.value, abs=1e-8)


class TestKrigingVariance:
    """Tests for kriging variance behaviour."""

    def test_non_negative(self, scattered_samples):
        krig = KrigingInterpolator(scattered_samples)
        rng = np.random.default_rng(0)
        lons = 5.6 + rng.random(200) * 0.3
        lats = 45.05 + rng.random(200) * 0.3
        _, variance = krig.predict(lons, lats, return_variance=True)
        assert np.all(variance >= 0.0)
        for lon, lat in zip(lons[:20], lats[:20], strict=True):
            assert krig.variance(lon, lat) >= 0.0

    def test_approaches_sill_far_away(self, grid_samples):
        krig = KrigingInterpolator(grid_samples)
        assert krig.variance(500.0, 500.0) == pytest.approx(krig.parameters.sill)

    def test_bounded_by_sill(self, grid_samples):
        krig = KrigingInterpolator(grid_samples)
        _, variance = krig.predict(np.linspace(-1, 3, 50), np.linspace(-1, 3, 50), True)
        assert np.all(variance <= krig.parameters.sill + 1e-9)

    def test_sparse_exceeds_dense_neighbourhood(self):
        # Dense cluster near the origin, one isolated sample far to the east
        samples = [Sample(lat=0.1 * j, lon=0.1 * i, value=float(i + j)) for i in range(4) for j in range(4)]
        samples.append(Sample(lat=0.0, lon=3.0, value=2.0))
        krig = KrigingInterpolator(samples, sill=1.0, range=1.0, nugget=0.0)
        dense = krig.variance(0.15, 0.15)
        sparse = krig.variance(2.0, 0.5)
        assert sparse > dense

    def test_grows_with_distance_from_samples(self, grid_samples):
        krig = KrigingInterpolator(grid_samples)
        distances = [0.0, 0.5, 1.0, 2.0, 4.0, 8.0]
        variances = [krig.variance(2.0 + d, 1.0) for d in distances]
        assert variances == sorted(variances)


class TestKrigingPredict:
    """Tests for vectorised prediction."""

    def test_predict_matches_scalar(self, scattered_samples):
        krig = KrigingInterpolator(scattered_samples, model="gaussian")
        lons = np.array([5.71, 5.75, 5.79])
        lats = np.array([45.16, 45.2, 45.24])
        values, variance = krig.predict(lons, lats, return_variance=True)
        for i in range(3):
            assert values[i] == pytest.approx(krig.interpolate(lons[i], lats[i]))
            assert variance[i] == pytest.approx(krig.variance(lons[i], lats[i]))

    def test_predict_values_only(self, grid_samples):
        krig = KrigingInterpolator(grid_samples)
        values = krig.predict([0.0, 1.0], [0.0, 1.0])
        assert isinstance(values, np.ndarray)
        assert_allclose(values, [0.0, 3.0], atol=1e-8)

    def test_simple_kriging_reverts_to_zero(self, grid_samples):
        # No unbiasedness constraint: far from data the estimate decays to 0
        krig = KrigingInterpolator(grid_samples)
        assert krig.interpolate(1000.0, 1000.0) == pytest.approx(0.0, abs=1e-9)

    def test_repeated_queries_identical(self, scattered_samples):
        krig = KrigingInterpolator(scattered_samples)
        first = krig.interpolate(5.74, 45.2)
        assert all(krig.interpolate(5.74, 45.2) == first for _ in range(5))

    def test_concurrent_queries(self, scattered_samples):
        krig = KrigingInterpolator(scattered_samples)
        expected = krig.predict(np.full(8, 5.74), np.linspace(45.15, 45.25, 8))
        results: list[np.ndarray] = []

        def worker() -> None:
            results.append(krig.predict(np.full(8, 5.74), np.linspace(45.15, 45.25, 8)))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        for r in results:
            np.testing.assert_array_equal(r, expected)

    def test_nan_query_raises(self, grid_samples):
        krig = KrigingInterpolator(grid_samples)
        with pytest.raises(NumericInputError):
            krig.interpolate(np.nan, 0.0)


# =============================================================================
# Parameters
# =============================================================================


class TestKrigingParameters:
    """Tests for parameter resolution and introspection."""

    def test_fitted_when_missing(self, two_samples):
        krig = KrigingInterpolator(two_samples)
        p = krig.parameters
        assert isinstance(p, VariogramParameters)
        assert p.model is VariogramModel.EXPONENTIAL
        assert p.sill == pytest.approx(30.0)
        assert p.range == pytest.approx(0.3)
        assert p.nugget == pytest.approx(1.5)

    def test_supplied_parameters_kept(self, grid_samples):
        krig = KrigingInterpolator(grid_samples, model="gaussian", sill=4.0, range=2.0)
        assert krig.parameters == VariogramParameters("gaussian", nugget=0.0, sill=4.0, range=2.0)

    def test_supplied_nugget_kept(self, grid_samples):
        krig = KrigingInterpolator(grid_samples, nugget=0.25, sill=4.0, range=2.0)
        assert krig.parameters.nugget == 0.25

    def test_settings_object(self, grid_samples):
        settings = KrigingSettings(model="spherical", sill=3.0, range=2.0)
        krig = KrigingInterpolator(grid_samples, settings, nugget=0.1)
        assert krig.parameters.model is VariogramModel.SPHERICAL
        assert krig.parameters.nugget == 0.1

    def test_unknown_model_falls_back(self, grid_samples):
        krig = KrigingInterpolator(grid_samples, model="hole-effect")
        assert krig.parameters.model is VariogramModel.EXPONENTIAL

    def test_fitter_determinism(self, scattered_samples):
        a = KrigingInterpolator(scattered_samples)
        b = KrigingInterpolator(list(scattered_samples))
        assert a.parameters.to_dict() == b.parameters.to_dict()

    def test_parameters_read_only(self, grid_samples):
        krig = KrigingInterpolator(grid_samples)
        with pytest.raises(AttributeError):
            krig.parameters = None  # type: ignore[misc]


# =============================================================================
# Errors
# =============================================================================


class TestKrigingErrors:
    """Tests for construction-time failures."""

    def test_single_sample_needs_parameters(self):
        with pytest.raises(ConfigurationError, match="At least 2 samples"):
            KrigingInterpolator([Sample(0.0, 0.0, 1.0)])

    def test_single_sample_with_parameters(self):
        krig = KrigingInterpolator([Sample(0.0, 0.0, 4.0)], sill=1.0, range=1.0)
        assert krig.interpolate(0.0, 0.0) == pytest.approx(4.0)

    def test_empty_with_parameters(self):
        with pytest.raises(ConfigurationError, match="at least one sample"):
            KrigingInterpolator([], sill=1.0, range=1.0)

    def test_non_positive_range(self, grid_samples):
        with pytest.raises(ConfigurationError):
            KrigingInterpolator(grid_samples, sill=1.0, range=0.0)

    def test_sill_not_above_nugget(self, grid_samples):
        with pytest.raises(ConfigurationError):
            KrigingInterpolator(grid_samples, sill=1.0, range=1.0, nugget=2.0)

    def test_unknown_setting(self, grid_samples):
        with pytest.raises(ConfigurationError):
            KrigingInterpolator(grid_samples, power=2.0)

    def test_nan_sample(self, grid_samples):
        samples = list(grid_samples) + [Sample(lat=np.nan, lon=0.0, value=1.0)]
        with pytest.raises(NumericInputError) as excinfo:
            KrigingInterpolator(samples)
        assert excinfo.value.indices == [9]

    def test_infinite_value(self, grid_samples):
        samples = list(grid_samples) + [Sample(lat=0.5, lon=0.5, value=np.inf)]
        with pytest.raises(NumericInputError):
            KrigingInterpolator(samples)


class TestKrigingSingular:
    """Tests for singular covariance matrices (duplicate samples)."""

    @pytest.fixture
    def duplicated(self):
        return [
            Sample(0.0, 0.0, 1.0),
            Sample(0.0, 0.0, 1.0),
            Sample(0.0, 1.0, 2.0),
        ]

    def test_degraded_is_flagged(self, duplicated, caplog):
        with caplog.at_level(logging.WARNING):
            krig = KrigingInterpolator(duplicated, sill=1.0, range=2.0, nugget=0.0)
        assert krig.is_ready
        assert not krig.is_exact
        assert len(krig.singular_steps) == 1
        assert "singular" in caplog.text.lower()
        assert np.isfinite(krig.interpolate(0.5, 0.0))

    def test_strict_fails(self, duplicated):
        with pytest.raises(SingularMatrixError):
            KrigingInterpolator(duplicated, sill=1.0, range=2.0, nugget=0.0, strict=True)
