"""Tests for the regularised conjugate-gradient solve (tescore._solver)."""

import numpy as np
import pytest

from tescore import TESConvergenceError
from tescore._distances import squared_distances
from tescore._kernels import gram_matrix
from tescore._solver import solve_regularized


def _gram(n=40, sigma=0.8, seed=0):
    centers = np.sort(np.random.RandomState(seed).uniform(0, 5, n))
    return gram_matrix(squared_distances(centers, centers), sigma)


class TestSolveRegularized:
    @pytest.mark.parametrize('lam', [1e-3, 1e-1, 1.0])
    def test_matches_direct_solve(self, lam):
        H = _gram()
        b = np.random.RandomState(1).randn(len(H))
        x = solve_regularized(H, lam, b, rtol=1e-10, maxiter=2000)
        expected = np.linalg.solve(H + lam * np.eye(len(H)), b)
        np.testing.assert_allclose(x, expected, rtol=1e-5, atol=1e-6)

    def test_residual_within_tolerance(self):
        H = _gram()
        lam = 0.01
        b = np.random.RandomState(2).randn(len(H))
        x = solve_regularized(H, lam, b, rtol=1e-6)
        resid = np.linalg.norm((H + lam * np.eye(len(H))) @ x - b)
        assert resid <= 1e-5 * np.linalg.norm(b)

    def test_zero_rhs_returns_zero(self):
        H = _gram(n=10)
        x = solve_regularized(H, 0.1, np.zeros(10))
        np.testing.assert_array_equal(x, 0.0)

    def test_output_shape(self):
        H = _gram(n=15)
        assert solve_regularized(H, 0.5, np.ones(15)).shape == (15,)

    def test_non_convergence_raises(self):
        H = _gram(n=60, sigma=1.0)
        b = np.random.RandomState(3).randn(60)
        with pytest.raises(TESConvergenceError):
            solve_regularized(H, 1e-3, b, rtol=1e-12, maxiter=1)
