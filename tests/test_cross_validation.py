"""
Tests for the (σ, λ) grid search (tescore.cross_validation).

A brute-force reference recomputes one grid cell with dense
``numpy.linalg.solve`` and explicit fold masks.
"""

import warnings

import numpy as np
import pytest

from tescore import (
    CVSelection,
    TESConfigurationError,
    TESGridBoundaryWarning,
    cross_validate,
    cv_score_grid,
    select_hyperparameters,
)
from tescore._distances import build_distance_matrices, sample_centers
from tescore._folds import assign_folds


SIGMAS = np.logspace(-1, 0.2, 5)
LAMBDAS = np.logspace(-3, 0, 4)
FOLD = 4


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def setup():
    rng = np.random.RandomState(0)
    exp = rng.gamma(2.0, 0.6, 36)
    ctrl = rng.gamma(3.0, 0.8, 30)
    grid = np.linspace(0.0, max(exp.max(), ctrl.max()), 50)
    center_index = sample_centers(len(exp) + len(ctrl), 1000, rng)
    dm = build_distance_matrices(exp, ctrl, center_index, grid)
    exp_folds = assign_folds(len(exp), FOLD, rng)
    ctrl_folds = assign_folds(len(ctrl), FOLD, rng)
    return dm, exp_folds, ctrl_folds


def _reference_score(dm, exp_folds, ctrl_folds, sigma, lam, k):
    H = np.sqrt(np.pi) * sigma * np.exp(-dm.centers_to_centers / (4 * sigma ** 2))
    K1 = np.exp(-dm.centers_to_exp / (2 * sigma ** 2))
    K2 = np.exp(-dm.centers_to_ctrl / (2 * sigma ** 2))
    h_train = K1[:, exp_folds != k].mean(axis=1) - K2[:, ctrl_folds != k].mean(axis=1)
    h_test = K1[:, exp_folds == k].mean(axis=1) - K2[:, ctrl_folds == k].mean(axis=1)
    theta = np.linalg.solve(H + lam * np.eye(len(H)), h_train)
    return theta @ H @ theta - 2 * theta @ h_test


# ---------------------------------------------------------------------------
# cv_score_grid
# ---------------------------------------------------------------------------

class TestScoreGrid:
    def test_shape(self, setup):
        scores = cv_score_grid(*setup, SIGMAS, LAMBDAS, FOLD)
        assert scores.shape == (len(SIGMAS), len(LAMBDAS), FOLD)
        assert np.all(np.isfinite(scores))

    @pytest.mark.parametrize('i, j, k', [(0, 0, 0), (2, 1, 3), (4, 3, 1)])
    def test_matches_reference(self, setup, i, j, k):
        dm, exp_folds, ctrl_folds = setup
        scores = cv_score_grid(dm, exp_folds, ctrl_folds, SIGMAS, LAMBDAS, FOLD, rtol=1e-10)
        expected = _reference_score(dm, exp_folds, ctrl_folds, SIGMAS[i], LAMBDAS[j], k)
        assert scores[i, j, k] == pytest.approx(expected, rel=1e-5, abs=1e-8)

    def test_parallel_matches_serial(self, setup):
        serial = cv_score_grid(*setup, SIGMAS, LAMBDAS, FOLD, n_jobs=1)
        parallel = cv_score_grid(*setup, SIGMAS, LAMBDAS, FOLD, n_jobs=2)
        np.testing.assert_array_equal(serial, parallel)

    @pytest.mark.parametrize('sigmas, lambdas', [([], LAMBDAS), (SIGMAS, [])])
    def test_empty_grid_raises(self, setup, sigmas, lambdas):
        with pytest.raises(TESConfigurationError):
            cv_score_grid(*setup, sigmas, lambdas, FOLD)

    def test_empty_fold_raises(self, setup):
        dm, exp_folds, ctrl_folds = setup
        with pytest.raises(TESConfigurationError):
            cv_score_grid(dm, exp_folds, ctrl_folds, SIGMAS, LAMBDAS, FOLD + 1)


# ---------------------------------------------------------------------------
# select_hyperparameters
# ---------------------------------------------------------------------------

class TestSelect:
    def test_picks_global_minimum_of_fold_sum(self):
        scores = np.zeros((3, 3, 2))
        scores[1, 1, 0] = -1.0
        scores[2, 0, 1] = -0.8
        scores[2, 0, 0] = -0.3
        sel = select_hyperparameters(scores, [0.1, 0.2, 0.3], [1e-3, 1e-2, 1e-1])
        assert isinstance(sel, CVSelection)
        assert (sel.sigma_index, sel.lambda_index) == (2, 0)
        assert sel.sigma == 0.3
        assert sel.lam == 1e-3
        assert sel.scores.shape == (3, 3)

    def test_ties_resolve_row_major(self):
        scores = np.zeros((3, 3, 1))
        scores[1, 2, 0] = -1.0
        scores[2, 1, 0] = -1.0
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', TESGridBoundaryWarning)
            sel = select_hyperparameters(scores, [1.0, 2.0, 3.0], [1.0, 2.0, 3.0])
        assert (sel.sigma_index, sel.lambda_index) == (1, 2)

    def test_interior_selection_does_not_warn(self):
        scores = np.zeros((3, 3, 1))
        scores[1, 1, 0] = -1.0
        with warnings.catch_warnings():
            warnings.simplefilter('error', TESGridBoundaryWarning)
            select_hyperparameters(scores, [1.0, 2.0, 3.0], [1.0, 2.0, 3.0])

    def test_edge_selection_warns(self):
        scores = np.zeros((3, 3, 1))
        scores[0, 1, 0] = -1.0
        with pytest.warns(TESGridBoundaryWarning, match='sigma'):
            select_hyperparameters(scores, [1.0, 2.0, 3.0], [1.0, 2.0, 3.0])

    def test_single_value_grid_does_not_warn(self):
        scores = np.array([[[0.0], [-1.0], [1.0]]])
        with warnings.catch_warnings():
            warnings.simplefilter('error', TESGridBoundaryWarning)
            sel = select_hyperparameters(scores, [0.5], [0.1, 0.2, 0.3])
        assert sel.sigma == 0.5

    def test_shape_mismatch(self):
        with pytest.raises(TESConfigurationError):
            select_hyperparameters(np.zeros((2, 2, 1)), [1.0], [1.0, 2.0])


class TestCrossValidate:
    def test_consistent_with_components(self, setup):
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', TESGridBoundaryWarning)
            sel = cross_validate(*setup, SIGMAS, LAMBDAS, FOLD)
            scores = cv_score_grid(*setup, SIGMAS, LAMBDAS, FOLD)
        np.testing.assert_array_equal(sel.scores, scores.sum(axis=2))
        assert sel.sigma in SIGMAS
        assert sel.lam in LAMBDAS
        assert sel.scores[sel.sigma_index, sel.lambda_index] == sel.scores.min()
