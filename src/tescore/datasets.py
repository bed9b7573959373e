"""
Reproducible synthetic cohorts for examples, tests and benchmarks.

All cohorts are generated programmatically from a fixed random seed.

Datasets
--------
make_rcb_cohorts     zero-inflated residual-disease scores, two arms
make_shifted_pair    control cohort and an exact location-shifted copy
"""

import numpy as np


# ---------------------------------------------------------------------------
# Residual-disease-like cohorts
# ---------------------------------------------------------------------------

def make_rcb_cohorts(n_exp=100, n_ctrl=100, pcr_exp=0.35, pcr_ctrl=0.20,
                     effect=0.3, random_state=42):
    """
    Simulate residual cancer burden (RCB) scores for two study arms.

    A patient reaches pathological complete response (RCB = 0) with the
    arm's pCR rate; otherwise the score is Gamma(4, 0.6), clipped to
    [0, 5].  The experimental arm's non-zero scores are additionally
    shrunk by ``effect``.

    Parameters
    ----------
    n_exp, n_ctrl : int
    pcr_exp, pcr_ctrl : float in [0, 1]
    effect : float in [0, 1)
        Relative reduction of non-zero experimental scores.
    random_state : int

    Returns
    -------
    exp : ndarray (n_exp,)
    ctrl : ndarray (n_ctrl,)
    """
    rng = np.random.RandomState(random_state)

    def _arm(n, pcr, scale):
        burden = np.clip(rng.gamma(4.0, 0.6, n) * scale, 0.0, 5.0)
        return np.where(rng.uniform(size=n) < pcr, 0.0, burden)

    ctrl = _arm(n_ctrl, pcr_ctrl, 1.0)
    exp = _arm(n_exp, pcr_exp, 1.0 - effect)
    return exp, ctrl


# ---------------------------------------------------------------------------
# Location shift
# ---------------------------------------------------------------------------

def make_shifted_pair(n=100, shift=1.0, loc=5.0, scale=1.0, random_state=42):
    """
    Control ~ Normal(loc, scale); experimental = control − shift.

    A positive ``shift`` moves every experimental value down by the same
    amount, a negative one moves it up.

    Returns
    -------
    exp : ndarray (n,)
    ctrl : ndarray (n,)
    """
    rng = np.random.RandomState(random_state)
    ctrl = rng.normal(loc, scale, n)
    return ctrl - shift, ctrl


COHORT_DATASETS = {
    'rcb':     make_rcb_cohorts,
    'shifted': make_shifted_pair,
}
