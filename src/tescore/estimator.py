"""
LSDDEstimator: least-squares density-difference estimation between an
experimental and a control cohort, and the TES derived from it.

The estimator follows the scikit-learn convention: constructor parameters
are stored unchanged and validated in ``fit``; fitted state carries a
trailing underscore.

Usage::

    from tescore import LSDDEstimator

    est = LSDDEstimator(fold=5, random_state=0).fit(exp, ctrl)
    print(est.tes_, est.sigma_, est.lambda_)
    w = est.predict(np.linspace(0, 5, 200))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from sklearn.base import BaseEstimator
from sklearn.utils import check_random_state

from ._distances import (
    DistanceMatrices,
    build_distance_matrices,
    sample_centers,
    squared_distances,
)
from ._folds import assign_folds
from ._kernels import basis_mean_difference, gaussian_basis, gram_matrix
from ._params import TESParams, _format_parameters
from ._solver import solve_regularized
from ._validation import check_cohorts
from .bandwidth import resolve_bandwidth
from .cross_validation import cross_validate
from .integrate import treatment_efficacy_score


# ---------------------------------------------------------------------------
# Final fit at fixed hyperparameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DensityDifference:
    """
    Fitted density difference ``w(x) = Σ_c θ_c ψ_c(x)``.

    Attributes
    ----------
    theta : ndarray (kernel_num,)
    centers : ndarray (kernel_num,)
    sigma : float
    lam : float
    grid : ndarray (n_points,)
    w_hat : ndarray (n_points,)
        ``w`` evaluated on ``grid``.
    """

    theta: np.ndarray
    centers: np.ndarray
    sigma: float
    lam: float
    grid: np.ndarray
    w_hat: np.ndarray

    def __call__(self, x) -> np.ndarray:
        """Evaluate the fitted difference at arbitrary points."""
        x = np.asarray(x, dtype=np.float64)
        basis = gaussian_basis(squared_distances(self.centers, x.ravel()), self.sigma)
        return (self.theta @ basis).reshape(x.shape)


def estimate_density_difference(
    distances: DistanceMatrices,
    sigma: float,
    lam: float,
    rtol: float = 1e-6,
    maxiter: Optional[int] = None,
) -> DensityDifference:
    """
    Fit θ on all samples at (sigma, lam) and evaluate it on the grid.

    Solves ``(H + λI) θ = h`` where ``h`` is the per-center difference of
    basis means between the cohorts, then ``w_hat = θᵀ ψ(grid)``.
    """
    H = gram_matrix(distances.centers_to_centers, sigma)
    h = basis_mean_difference(
        distances.centers_to_exp, distances.centers_to_ctrl, sigma
    )
    theta = solve_regularized(H, lam, h, rtol=rtol, maxiter=maxiter)
    w_hat = theta @ gaussian_basis(distances.centers_to_grid, sigma)

    return DensityDifference(
        theta=theta,
        centers=distances.centers,
        sigma=float(sigma),
        lam=float(lam),
        grid=distances.grid,
        w_hat=w_hat,
    )


# ---------------------------------------------------------------------------
# LSDDEstimator
# ---------------------------------------------------------------------------

class LSDDEstimator(BaseEstimator):
    """
    Cross-validated least-squares density-difference estimator.

    Parameters
    ----------
    fold : int, default 5
        Cross-validation folds (>= 2, <= size of each cohort).
    sigma : 'auto', float, sequence of float, BandwidthSpec or None
        Bandwidth request.  ``None`` = 50 log-spaced values in [0.1, 10^0.2];
        ``'auto'`` = Silverman's rule on the pooled sample.
    lambda_grid : sequence of float or None
        Regularisation grid.  ``None`` = 50 log-spaced values in [1e-3, 1].
    n_points : int, default 1000
        Evaluation grid size on [0, max(sample)].
    max_centers : int, default 1000
        Cap on kernel centers drawn from the pooled sample.
    cg_rtol : float, default 1e-6
    cg_maxiter : int or None
    n_jobs : int, default 1
        Parallel bandwidths during cross-validation.
    random_state : int, RandomState or None
        ``None`` gives a fresh, non-reproducible draw on every fit.
    verbose : int, default 0
        1 = print the selected hyperparameters.

    Attributes
    ----------
    sigma_ : float
        Selected bandwidth.
    lambda_ : float
        Selected regularisation strength.
    sigma_grid_ : ndarray
        Bandwidth grid actually searched (resolved from ``sigma``).
    cv_scores_ : ndarray (n_sigma, n_lambda)
        Fold-summed cross-validation scores.
    centers_ : ndarray (kernel_num,)
    theta_ : ndarray (kernel_num,)
    grid_ : ndarray (n_points,)
    w_hat_ : ndarray (n_points,)
        Estimated density difference (experimental − control) on ``grid_``.
    tes_ : float
        Treatment Efficacy Score.
    density_difference_ : DensityDifference
    """

    def __init__(
        self,
        fold=5,
        sigma=None,
        lambda_grid=None,
        n_points=1000,
        max_centers=1000,
        cg_rtol=1e-6,
        cg_maxiter=None,
        n_jobs=1,
        random_state=None,
        verbose=0,
    ):
        self.fold = fold
        self.sigma = sigma
        self.lambda_grid = lambda_grid
        self.n_points = n_points
        self.max_centers = max_centers
        self.cg_rtol = cg_rtol
        self.cg_maxiter = cg_maxiter
        self.n_jobs = n_jobs
        self.random_state = random_state
        self.verbose = verbose

    def _params(self) -> TESParams:
        return TESParams(
            fold=self.fold,
            sigma=self.sigma,
            lambda_grid=self.lambda_grid,
            n_points=self.n_points,
            max_centers=self.max_centers,
            cg_rtol=self.cg_rtol,
            cg_maxiter=self.cg_maxiter,
            n_jobs=self.n_jobs,
            random_state=self.random_state,
            verbose=self.verbose,
        )

    # ------------------------------------------------------------------
    # fit
    # ------------------------------------------------------------------

    def fit(self, exp_samples, ctrl_samples):
        """
        Select (σ, λ) by cross-validation, fit the density difference and
        compute the TES.

        Parameters
        ----------
        exp_samples : array-like (n1,)
        ctrl_samples : array-like (n2,)

        Returns
        -------
        self
        """
        return self._fit(exp_samples, ctrl_samples, stacklevel=3)

    def _fit(self, exp_samples, ctrl_samples, stacklevel):
        # stacklevel locates the caller of the public entry point in warnings
        params = self._params()
        exp, ctrl = check_cohorts(exp_samples, ctrl_samples, params.fold)
        rng = check_random_state(params.random_state)

        pooled = np.concatenate([exp, ctrl])
        sigma_grid = resolve_bandwidth(params.sigma, pooled)
        grid = np.linspace(0.0, pooled.max(), params.n_points)

        # Draw order: centers, experimental folds, control folds
        center_index = sample_centers(len(pooled), params.max_centers, rng)
        distances = build_distance_matrices(exp, ctrl, center_index, grid)
        exp_folds = assign_folds(len(exp), params.fold, rng)
        ctrl_folds = assign_folds(len(ctrl), params.fold, rng)

        selection = cross_validate(
            distances, exp_folds, ctrl_folds,
            sigma_grid, params.lambda_grid, params.fold,
            rtol=params.cg_rtol, maxiter=params.cg_maxiter, n_jobs=params.n_jobs,
            stacklevel=stacklevel + 1,
        )

        dd = estimate_density_difference(
            distances, selection.sigma, selection.lam,
            rtol=params.cg_rtol, maxiter=params.cg_maxiter,
        )

        self.sigma_ = selection.sigma
        self.lambda_ = selection.lam
        self.sigma_grid_ = sigma_grid
        self.lambda_grid_ = np.asarray(params.lambda_grid, dtype=np.float64)
        self.cv_scores_ = selection.scores
        self.centers_ = dd.centers
        self.theta_ = dd.theta
        self.grid_ = dd.grid
        self.w_hat_ = dd.w_hat
        self.density_difference_ = dd
        self.tes_ = treatment_efficacy_score(
            dd.w_hat, dd.grid, stacklevel=stacklevel + 1
        )

        if params.verbose:
            print(_format_parameters(self.lambda_, self.sigma_))

        return self

    # ------------------------------------------------------------------
    # predict
    # ------------------------------------------------------------------

    def predict(self, x):
        """
        Evaluate the fitted density difference at ``x``.

        Parameters
        ----------
        x : array-like
            Points of any shape.

        Returns
        -------
        w : ndarray, same shape as ``x``
        """
        self._check_fitted('predict')
        return self.density_difference_(x)

    def _check_fitted(self, method: str):
        if not hasattr(self, 'density_difference_'):
            raise ValueError(
                f"LSDDEstimator must be fitted before calling {method}(). "
                "Call fit(exp_samples, ctrl_samples) first."
            )
