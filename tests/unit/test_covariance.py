"""Unit tests for covariance system assembly."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from geokrig.core.samples import sample_arrays
from geokrig.geostat.covariance import build_covariance_matrix, build_covariance_vectors
from geokrig.geostat.variogram import VariogramParameters


@pytest.fixture
def params():
    return VariogramParameters("exponential", nugget=0.1, sill=2.0, range=1.5)


class TestCovarianceMatrix:
    """Tests for covariance matrix computation."""

    def test_shape_and_symmetry(self, grid_samples, params):
        """Test matrix is square and symmetric."""
        coords, _ = sample_arrays(grid_samples)
        K = build_covariance_matrix(coords, params)
        assert K.shape == (9, 9)
        np.testing.assert_array_equal(K, K.T)

    def test_diagonal_is_sill(self, grid_samples, params):
        """Test diagonal entries equal the sill."""
        coords, _ = sample_arrays(grid_samples)
        K = build_covariance_matrix(coords, params)
        assert_allclose(np.diag(K), 2.0)

    def test_entries(self, two_samples, params):
        """Test off-diagonal entries are sill - gamma(distance)."""
        coords, _ = sample_arrays(two_samples)
        K = build_covariance_matrix(coords, params)
        assert K[0, 1] == pytest.approx(2.0 - params.evaluate(1.0))

    def test_positive_semidefinite(self, scattered_samples):
        """Test eigenvalues are non-negative for a valid variogram."""
        coords, _ = sample_arrays(scattered_samples)
        p = VariogramParameters("gaussian", nugget=0.5, sill=10.0, range=0.05)
        eigvals = np.linalg.eigvalsh(build_covariance_matrix(coords, p))
        assert eigvals.min() > -1e-8


class TestCovarianceVectors:
    """Tests for sample-to-target covariances."""

    def test_shape(self, grid_samples, params):
        """Test one column per target."""
        coords, _ = sample_arrays(grid_samples)
        targets = np.array([[0.5, 0.5], [1.5, 1.5], [5.0, 5.0]])
        k = build_covariance_vectors(coords, targets, params)
        assert k.shape == (9, 3)

    def test_target_at_sample_matches_matrix_column(self, grid_samples, params):
        """Test a target on a sample reproduces that column of K."""
        coords, _ = sample_arrays(grid_samples)
        K = build_covariance_matrix(coords, params)
        k = build_covariance_vectors(coords, coords[4:5], params)
        assert_allclose(k[:, 0], K[:, 4])

    def test_far_target_near_zero(self, two_samples, params):
        """Test covariance vanishes far from all samples."""
        coords, _ = sample_arrays(two_samples)
        k = build_covariance_vectors(coords, np.array([[1000.0, 1000.0]]), params)
        assert_allclose(k, 0.0, atol=1e-12)
