"""
Gaussian kernel basis for least-squares density-difference estimation.

Basis functions are unnormalised Gaussians centred on the kernel centers::

    ψ_c(x) = exp(-(x - c)² / (2σ²))

and the Gram matrix holds their analytic L2 inner products::

    H[c, c'] = ∫ ψ_c(x) ψ_c'(x) dx = sqrt(π) σ exp(-(c - c')² / (4σ²))

Both functions take squared distances so the same precomputed matrices
serve every σ on the grid.
"""

import numpy as np


def gaussian_basis(sq_dist: np.ndarray, sigma: float) -> np.ndarray:
    """Evaluate ψ at every entry of a squared-distance matrix."""
    return np.exp(-sq_dist / (2.0 * sigma * sigma))


def gram_matrix(centers_sq_dist: np.ndarray, sigma: float) -> np.ndarray:
    """
    Gram matrix ``H`` of the Gaussian basis at bandwidth ``sigma``.

    Symmetric positive semi-definite for any set of centers.
    """
    return (np.sqrt(np.pi) * sigma) * np.exp(
        -centers_sq_dist / (4.0 * sigma * sigma)
    )


def basis_mean_difference(
    exp_sq_dist: np.ndarray,
    ctrl_sq_dist: np.ndarray,
    sigma: float,
) -> np.ndarray:
    """
    Empirical ``h``: per-center mean of ψ over the experimental samples
    minus the same mean over the control samples.
    """
    return (
        gaussian_basis(exp_sq_dist, sigma).mean(axis=1)
        - gaussian_basis(ctrl_sq_dist, sigma).mean(axis=1)
    )
