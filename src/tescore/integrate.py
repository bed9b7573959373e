"""
Integration of the estimated density difference into a TES.

The positive part of ``w_hat`` is accumulated over the evaluation grid and
normalised into a pseudo-CDF.  TES is the left-Riemann area under that
step function divided by the grid's upper bound, so it lies in [0, 1]:
values near 1 mean the experimental excess sits at the low end of the
observed range, values near 0 mean it sits at the high end.
"""

from __future__ import annotations

import warnings

import numpy as np

from ._warnings import TESConfigurationError, TESDegenerateFitWarning


def pseudo_cdf(w_hat) -> np.ndarray:
    """
    Normalised cumulative sum of ``max(w_hat, 0)``.

    Returns an all-zero array when there is no positive mass.
    """
    w_pos = np.clip(np.asarray(w_hat, dtype=np.float64), 0.0, None)
    cdf = np.cumsum(w_pos)
    total = cdf[-1] if cdf.size else 0.0
    if total <= 0.0:
        return np.zeros_like(cdf)
    return cdf / total


def treatment_efficacy_score(w_hat, grid, stacklevel: int = 2) -> float:
    """
    Area under the pseudo-CDF relative to the observed range.

    ``TES = Σ_{p < n-1} cdf[p] · (grid[p+1] − grid[p]) / grid[-1]``

    Parameters
    ----------
    w_hat : array-like (n_points,)
        Estimated density difference (experimental − control) on ``grid``.
    grid : array-like (n_points,)
        Increasing evaluation grid starting at 0.
    stacklevel : int, default 2
        Passed to ``warnings.warn`` for the degenerate-fit warning.

    Returns
    -------
    tes : float
        Exactly 0.0 (with ``TESDegenerateFitWarning``) when ``w_hat`` has no
        positive mass.
    """
    w_hat = np.asarray(w_hat, dtype=np.float64).ravel()
    grid = np.asarray(grid, dtype=np.float64).ravel()
    if w_hat.shape != grid.shape or grid.size < 2:
        raise TESConfigurationError(
            f"w_hat {w_hat.shape} and grid {grid.shape} must be 1-D arrays "
            "of the same length (>= 2)."
        )
    if not grid[-1] > 0.0:
        raise TESConfigurationError(
            f"The evaluation grid must end above 0; got {grid[-1]}."
        )

    if not np.any(w_hat > 0.0):
        warnings.warn(
            "Estimated density difference has no positive mass; the cohorts "
            "are indistinguishable or control dominates everywhere. "
            "Reporting TES = 0.",
            TESDegenerateFitWarning,
            stacklevel=stacklevel,
        )
        return 0.0

    cdf = pseudo_cdf(w_hat)
    return float(np.sum(cdf[:-1] * np.diff(grid)) / grid[-1])
