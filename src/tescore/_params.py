"""
Parameter container for a TES computation.

``TESParams`` collects every setting of one ``compute_tes`` /
``LSDDEstimator.fit`` call and validates it up front, so configuration
errors surface before any matrix is built::

    params = TESParams(fold=5, sigma='auto', random_state=0)
    tes = compute_tes(exp, ctrl, **vars(params))
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

import numpy as np

from ._warnings import TESConfigurationError
from .bandwidth import (
    BandwidthSpec,
    as_bandwidth_spec,
    default_lambda_grid,
    _check_positive_grid,
)


@dataclass
class TESParams:
    """
    Settings for one TES computation.

    Parameters
    ----------
    fold : int, default 5
        Number of cross-validation folds.  Must be at least 2; each cohort
        must hold at least ``fold`` samples.
    sigma : 'auto', float, sequence of float or BandwidthSpec, optional
        Bandwidth request.  ``None`` uses 50 log-spaced values in
        [0.1, 10^0.2].  Coerced to a ``BandwidthSpec``.
    lambda_grid : sequence of float, optional
        Regularisation grid.  ``None`` uses 50 log-spaced values in
        [1e-3, 1].  Coerced to a float64 array.
    n_points : int, default 1000
        Size of the evaluation grid on [0, max(sample)].
    max_centers : int, default 1000
        Upper bound on the number of kernel centers.
    cg_rtol : float, default 1e-6
        Relative residual tolerance of the conjugate-gradient solve.
    cg_maxiter : int, optional
        Iteration cap of the solve.  ``None`` uses scipy's default
        (10 × number of centers).
    n_jobs : int, default 1
        Parallel bandwidths during cross-validation (-1 = all cores).
    random_state : int, RandomState or None
        Seed for center sampling and fold permutation.  ``None`` draws a
        fresh seed per call.
    verbose : int, default 0
        0 = silent, 1 = print the selected hyperparameters.
    """

    fold: int = 5
    sigma: Union[str, float, Sequence[float], BandwidthSpec, None] = None
    lambda_grid: Optional[Sequence[float]] = None
    n_points: int = 1000
    max_centers: int = 1000
    cg_rtol: float = 1e-6
    cg_maxiter: Optional[int] = None
    n_jobs: int = 1
    random_state: Union[int, np.random.RandomState, None] = None
    verbose: int = field(default=0)

    def __post_init__(self):
        if isinstance(self.fold, bool) or not isinstance(self.fold, numbers.Integral):
            raise TESConfigurationError(
                f"fold must be an integer; got {self.fold!r}."
            )
        if self.fold < 2:
            raise TESConfigurationError(
                f"fold must be at least 2 to hold out a disjoint test fold; "
                f"got {self.fold}."
            )
        self.fold = int(self.fold)

        self.sigma = as_bandwidth_spec(self.sigma)

        if self.lambda_grid is None:
            self.lambda_grid = default_lambda_grid()
        else:
            self.lambda_grid = _check_positive_grid(self.lambda_grid, 'lambda_grid')

        for name in ('n_points', 'max_centers'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise TESConfigurationError(
                    f"{name} must be an integer; got {value!r}."
                )
            setattr(self, name, int(value))

        if self.n_points < 2:
            raise TESConfigurationError(
                f"n_points must be at least 2; got {self.n_points}."
            )
        if self.max_centers < 1:
            raise TESConfigurationError(
                f"max_centers must be at least 1; got {self.max_centers}."
            )
        if not self.cg_rtol > 0.0:
            raise TESConfigurationError(
                f"cg_rtol must be strictly positive; got {self.cg_rtol}."
            )
        if self.cg_maxiter is not None and self.cg_maxiter < 1:
            raise TESConfigurationError(
                f"cg_maxiter must be a positive integer or None; got {self.cg_maxiter}."
            )


def _format_parameters(lam, sigma) -> str:
    """Line printed by ``verbose`` fits."""
    return f"Estimated parameters: lambda = {lam:.6g}; bandwidth = {sigma:.6g}"
