"""
Public entry points.

``compute_tes`` runs the full pipeline (validation → distances → grid
cross-validation → final fit → integration) and returns the TES, or a
``TESResult`` with the selected hyperparameters and the density-difference
curve when ``diagnostics=True``.

``bootstrap_tes`` adds a percentile confidence interval by resampling both
cohorts at the hyperparameters selected on the full data.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Optional

import numpy as np
from sklearn.utils import check_random_state

from ._distances import build_distance_matrices, sample_centers
from ._warnings import TESConfigurationError, TESDegenerateFitWarning
from .estimator import LSDDEstimator, estimate_density_difference
from .integrate import treatment_efficacy_score


@dataclass(frozen=True)
class TESResult:
    """
    TES with the quantities needed to inspect or plot the fit.

    Attributes
    ----------
    tes : float
    lam : float
        Selected regularisation strength.
    sigma : float
        Selected bandwidth.
    grid : ndarray (n_points,)
    w_hat : ndarray (n_points,)
        Estimated density difference (experimental − control) on ``grid``.
    cv_scores : ndarray (n_sigma, n_lambda)
    exp_label, ctrl_label : str
        Display names; no effect on the computation.
    """

    tes: float
    lam: float
    sigma: float
    grid: np.ndarray
    w_hat: np.ndarray
    cv_scores: np.ndarray
    exp_label: str = 'Experimental'
    ctrl_label: str = 'Control'

    @property
    def parameters(self) -> dict:
        return {'Lambda': self.lam, 'Sigma': self.sigma}


def compute_tes(
    exp_samples,
    ctrl_samples,
    fold: int = 5,
    sigma=None,
    lambda_grid=None,
    diagnostics: bool = False,
    random_state=None,
    n_jobs: int = 1,
    n_points: int = 1000,
    max_centers: int = 1000,
    cg_rtol: float = 1e-6,
    cg_maxiter: Optional[int] = None,
    verbose: int = 0,
    exp_label: str = 'Experimental',
    ctrl_label: str = 'Control',
):
    """
    Treatment Efficacy Score of an experimental cohort against a control.

    Parameters
    ----------
    exp_samples, ctrl_samples : array-like
        Finite 1-D biomarker values; each cohort needs at least ``fold``
        samples and the pooled maximum must be positive.
    fold : int, default 5
    sigma : 'auto', float, sequence of float, BandwidthSpec or None
        ``None`` = 50 log-spaced values in [0.1, 10^0.2].
    lambda_grid : sequence of float or None
        ``None`` = 50 log-spaced values in [1e-3, 1].
    diagnostics : bool, default False
        Return a ``TESResult`` instead of a bare float.
    random_state : int, RandomState or None
        ``None`` draws a fresh seed, so repeated calls differ slightly.
    n_jobs : int, default 1
    n_points, max_centers, cg_rtol, cg_maxiter, verbose
        See ``LSDDEstimator``.
    exp_label, ctrl_label : str
        Carried into ``TESResult`` for plotting.

    Returns
    -------
    float or TESResult
    """
    est = LSDDEstimator(
        fold=fold,
        sigma=sigma,
        lambda_grid=lambda_grid,
        n_points=n_points,
        max_centers=max_centers,
        cg_rtol=cg_rtol,
        cg_maxiter=cg_maxiter,
        n_jobs=n_jobs,
        random_state=random_state,
        verbose=verbose,
    )._fit(exp_samples, ctrl_samples, stacklevel=3)

    if not diagnostics:
        return est.tes_

    return TESResult(
        tes=est.tes_,
        lam=est.lambda_,
        sigma=est.sigma_,
        grid=est.grid_,
        w_hat=est.w_hat_,
        cv_scores=est.cv_scores_,
        exp_label=exp_label,
        ctrl_label=ctrl_label,
    )


# ---------------------------------------------------------------------------
# Bootstrap confidence interval
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BootstrapResult:
    """
    TES with a percentile bootstrap interval.

    Attributes
    ----------
    tes : float
        TES on the full data.
    lower, upper : float
        Interval bounds at ``confidence``.
    confidence : float
    replicates : ndarray (n_boot,)
    lam, sigma : float
        Hyperparameters selected on the full data and reused by every
        replicate.
    n_degenerate : int
        Replicates with no positive mass (scored 0).
    """

    tes: float
    lower: float
    upper: float
    confidence: float
    replicates: np.ndarray
    lam: float
    sigma: float
    n_degenerate: int


def _bootstrap_replicate(exp, ctrl, center_index, grid, sigma, lam, rtol, maxiter):
    """TES of one resampled pair of cohorts; ``(tes, degenerate)``."""
    distances = build_distance_matrices(exp, ctrl, center_index, grid)
    dd = estimate_density_difference(distances, sigma, lam, rtol=rtol, maxiter=maxiter)
    if not np.any(dd.w_hat > 0.0):
        return 0.0, True
    return treatment_efficacy_score(dd.w_hat, dd.grid), False


def bootstrap_tes(
    exp_samples,
    ctrl_samples,
    n_boot: int = 200,
    confidence: float = 0.95,
    fold: int = 5,
    sigma=None,
    lambda_grid=None,
    random_state=None,
    n_jobs: int = 1,
    n_points: int = 1000,
    max_centers: int = 1000,
    cg_rtol: float = 1e-6,
    cg_maxiter: Optional[int] = None,
) -> BootstrapResult:
    """
    TES with a percentile bootstrap confidence interval.

    Hyperparameters are selected once on the full data.  Each replicate
    resamples both cohorts with replacement, draws fresh kernel centers and
    refits θ at the selected (σ, λ) on the full-data evaluation grid.

    Parameters
    ----------
    exp_samples, ctrl_samples : array-like
    n_boot : int, default 200
    confidence : float, default 0.95
        Two-sided coverage in (0, 1).
    fold, sigma, lambda_grid, n_points, max_centers, cg_rtol, cg_maxiter
        See ``compute_tes``.
    random_state : int, RandomState or None
        Single source for the full fit, the resampling and the centers.
    n_jobs : int, default 1
        Parallel replicates (-1 = all cores).

    Returns
    -------
    BootstrapResult
    """
    if n_boot < 1:
        raise TESConfigurationError(f"n_boot must be at least 1; got {n_boot}.")
    if not 0.0 < confidence < 1.0:
        raise TESConfigurationError(
            f"confidence must lie strictly between 0 and 1; got {confidence}."
        )

    rng = check_random_state(random_state)
    est = LSDDEstimator(
        fold=fold,
        sigma=sigma,
        lambda_grid=lambda_grid,
        n_points=n_points,
        max_centers=max_centers,
        cg_rtol=cg_rtol,
        cg_maxiter=cg_maxiter,
        n_jobs=n_jobs,
        random_state=rng,
    )._fit(exp_samples, ctrl_samples, stacklevel=3)

    exp = np.asarray(exp_samples, dtype=np.float64).ravel()
    ctrl = np.asarray(ctrl_samples, dtype=np.float64).ravel()
    n1, n2 = len(exp), len(ctrl)

    # All random draws happen here, serially, so results do not depend on n_jobs
    tasks = []
    for _ in range(n_boot):
        exp_b = exp[rng.randint(0, n1, size=n1)]
        ctrl_b = ctrl[rng.randint(0, n2, size=n2)]
        center_index = sample_centers(n1 + n2, max_centers, rng)
        tasks.append((
            exp_b, ctrl_b, center_index, est.grid_,
            est.sigma_, est.lambda_, cg_rtol, cg_maxiter,
        ))

    if n_jobs == 1:
        outcomes = [_bootstrap_replicate(*t) for t in tasks]
    else:
        from joblib import Parallel, delayed
        outcomes = Parallel(n_jobs=n_jobs, prefer='threads')(
            delayed(_bootstrap_replicate)(*t) for t in tasks
        )

    replicates = np.array([tes for tes, _ in outcomes], dtype=np.float64)
    n_degenerate = sum(1 for _, degenerate in outcomes if degenerate)
    if n_degenerate:
        warnings.warn(
            f"{n_degenerate} of {n_boot} bootstrap replicates had no positive "
            "density-difference mass and were scored 0.",
            TESDegenerateFitWarning,
            stacklevel=2,
        )

    alpha = 1.0 - confidence
    lower, upper = np.percentile(replicates, [50.0 * alpha, 100.0 - 50.0 * alpha])

    return BootstrapResult(
        tes=est.tes_,
        lower=float(lower),
        upper=float(upper),
        confidence=float(confidence),
        replicates=replicates,
        lam=est.lambda_,
        sigma=est.sigma_,
        n_degenerate=int(n_degenerate),
    )
