"""
K-fold assignment for one cohort.

Each cohort is split independently: a near-uniform block layout
(fold sizes differ by at most one) is shuffled by a random permutation.
The two cohorts' assignments are not aligned positionally.
"""

from __future__ import annotations

import numpy as np


def assign_folds(n_samples: int, fold: int, rng) -> np.ndarray:
    """
    Assign each of ``n_samples`` indices to one of ``fold`` folds.

    Parameters
    ----------
    n_samples : int
        Cohort size.  Caller guarantees ``n_samples >= fold``.
    fold : int
    rng : numpy.random.RandomState

    Returns
    -------
    fold_ids : ndarray of int (n_samples,)
        Values in ``[0, fold)``; every fold is non-empty.
    """
    blocks = (np.arange(n_samples) * fold) // n_samples
    return blocks[rng.permutation(n_samples)]


def fold_counts(fold_ids: np.ndarray, fold: int) -> np.ndarray:
    """Number of samples in each fold, shape (fold,)."""
    return np.bincount(fold_ids, minlength=fold)


def fold_indicator(fold_ids: np.ndarray, fold: int) -> np.ndarray:
    """
    One-hot fold membership, shape (n_samples, fold).

    ``K @ fold_indicator(ids, fold)`` gives per-fold row sums of ``K``.
    """
    indicator = np.zeros((len(fold_ids), fold), dtype=np.float64)
    indicator[np.arange(len(fold_ids)), fold_ids] = 1.0
    return indicator
