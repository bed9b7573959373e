"""Tests for the synthetic cohort generators (tescore.datasets)."""

import numpy as np

from tescore.datasets import COHORT_DATASETS, make_rcb_cohorts, make_shifted_pair


class TestRCBCohorts:
    def test_shapes_and_range(self):
        exp, ctrl = make_rcb_cohorts(n_exp=80, n_ctrl=120, random_state=0)
        assert exp.shape == (80,)
        assert ctrl.shape == (120,)
        for arm in (exp, ctrl):
            assert arm.min() >= 0.0
            assert arm.max() <= 5.0

    def test_zero_inflated(self):
        exp, ctrl = make_rcb_cohorts(n_exp=2000, n_ctrl=2000, pcr_exp=0.4,
                                     pcr_ctrl=0.1, random_state=1)
        assert np.mean(exp == 0.0) > np.mean(ctrl == 0.0)

    def test_reproducible(self):
        a = make_rcb_cohorts(random_state=3)
        b = make_rcb_cohorts(random_state=3)
        np.testing.assert_array_equal(a[0], b[0])
        np.testing.assert_array_equal(a[1], b[1])


class TestShiftedPair:
    def test_exact_shift(self):
        exp, ctrl = make_shifted_pair(n=50, shift=1.5, random_state=0)
        np.testing.assert_allclose(ctrl - exp, 1.5)

    def test_registry(self):
        assert set(COHORT_DATASETS) == {'rcb', 'shifted'}
