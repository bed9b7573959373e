"""
Squared-distance precomputation between kernel centers, samples and the
evaluation grid.

Every matrix is built once per call and only read afterwards; the
bandwidth enters later, through ``_kernels``.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.spatial.distance import cdist


def squared_distances(a, b) -> np.ndarray:
    """
    Pairwise squared Euclidean distances between two sets of scalars.

    Parameters
    ----------
    a : array-like (m,)
    b : array-like (k,)

    Returns
    -------
    d2 : ndarray (m, k)
        ``d2[i, j] = (a[i] - b[j]) ** 2``.
    """
    a = np.asarray(a, dtype=np.float64).reshape(-1, 1)
    b = np.asarray(b, dtype=np.float64).reshape(-1, 1)
    return cdist(a, b, 'sqeuclidean')


def sample_centers(n: int, max_centers: int, rng) -> np.ndarray:
    """
    Draw ``min(max_centers, n)`` pooled indices uniformly without
    replacement (head of a random permutation).
    """
    kernel_num = min(max_centers, n)
    return rng.permutation(n)[:kernel_num]


@dataclass(frozen=True)
class DistanceMatrices:
    """
    Squared distances from every kernel center to the experimental samples,
    the control samples, the other centers and the evaluation grid.

    Attributes
    ----------
    centers : ndarray (kernel_num,)
    grid : ndarray (n_points,)
    centers_to_exp : ndarray (kernel_num, n1)
    centers_to_ctrl : ndarray (kernel_num, n2)
    centers_to_centers : ndarray (kernel_num, kernel_num)
    centers_to_grid : ndarray (kernel_num, n_points)
    """

    centers: np.ndarray
    grid: np.ndarray
    centers_to_exp: np.ndarray
    centers_to_ctrl: np.ndarray
    centers_to_centers: np.ndarray
    centers_to_grid: np.ndarray

    @property
    def kernel_num(self) -> int:
        return len(self.centers)


def build_distance_matrices(exp, ctrl, center_index, grid) -> DistanceMatrices:
    """
    Build all distance matrices for one TES computation.

    Parameters
    ----------
    exp : ndarray (n1,)
    ctrl : ndarray (n2,)
    center_index : ndarray of int (kernel_num,)
        Indices into the pooled array ``[exp, ctrl]``.
    grid : ndarray (n_points,)

    Returns
    -------
    DistanceMatrices
    """
    pooled = np.concatenate([exp, ctrl])
    n1 = len(exp)

    centers = pooled[center_index]
    to_samples = squared_distances(centers, pooled)

    return DistanceMatrices(
        centers=centers,
        grid=np.asarray(grid, dtype=np.float64),
        centers_to_exp=to_samples[:, :n1],
        centers_to_ctrl=to_samples[:, n1:],
        centers_to_centers=to_samples[:, center_index],
        centers_to_grid=squared_distances(centers, grid),
    )
