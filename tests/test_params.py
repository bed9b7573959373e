"""Tests for TESParams and cohort validation."""

import numpy as np
import pytest

from tescore import Auto, Grid, TESConfigurationError, TESParams
from tescore._validation import check_cohort, check_cohorts


class TestTESParams:
    def test_defaults(self):
        p = TESParams()
        assert p.fold == 5
        assert isinstance(p.sigma, Grid)
        assert len(p.sigma.values) == 50
        assert p.lambda_grid.shape == (50,)
        assert (p.n_points, p.max_centers) == (1000, 1000)
        assert p.random_state is None

    def test_sigma_coerced(self):
        assert isinstance(TESParams(sigma='auto').sigma, Auto)

    def test_lambda_grid_coerced(self):
        p = TESParams(lambda_grid=[0.1, 1.0])
        np.testing.assert_array_equal(p.lambda_grid, [0.1, 1.0])

    def test_numpy_integer_fold(self):
        assert TESParams(fold=np.int64(3)).fold == 3

    def test_numpy_integer_sizes(self):
        p = TESParams(n_points=np.int32(200), max_centers=np.int64(50))
        assert (p.n_points, p.max_centers) == (200, 50)
        assert type(p.n_points) is int and type(p.max_centers) is int

    @pytest.mark.parametrize('kw', [
        dict(fold=1),
        dict(fold=2.5),
        dict(fold=True),
        dict(lambda_grid=[]),
        dict(lambda_grid=[0.1, -0.1]),
        dict(sigma=[]),
        dict(n_points=1),
        dict(max_centers=0),
        dict(n_points=100.0),
        dict(n_points=True),
        dict(max_centers=10.5),
        dict(cg_rtol=0.0),
        dict(cg_maxiter=0),
    ])
    def test_invalid(self, kw):
        with pytest.raises(TESConfigurationError):
            TESParams(**kw)


class TestCheckCohort:
    def test_list_to_float_array(self):
        x = check_cohort([1, 2, 3], 'Control')
        assert x.dtype == np.float64
        assert x.shape == (3,)

    def test_column_vector_flattened(self):
        assert check_cohort(np.ones((4, 1)), 'Control').shape == (4,)

    @pytest.mark.parametrize('bad', [[], [1.0, np.inf], np.ones((2, 2)), ['a', 'b'], 3.0])
    def test_invalid(self, bad):
        with pytest.raises(TESConfigurationError):
            check_cohort(bad, 'Control')


class TestCheckCohorts:
    def test_valid(self):
        exp, ctrl = check_cohorts([0.0, 1.0, 2.0], [1.0, 3.0], fold=2)
        assert len(exp) == 3 and len(ctrl) == 2

    def test_fold_exceeds_smallest_cohort(self):
        with pytest.raises(TESConfigurationError, match='smallest cohort'):
            check_cohorts([0.0, 1.0, 2.0], [1.0, 3.0], fold=3)

    def test_negative_values_allowed_if_max_positive(self):
        exp, _ = check_cohorts([-2.0, -1.0], [0.5, 1.0], fold=2)
        assert exp.min() == -2.0
