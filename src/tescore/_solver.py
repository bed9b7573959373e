"""
Regularised SPD solve ``(H + λI) x = b``.

``H`` is a Gaussian Gram matrix (PSD), so ``H + λI`` is positive definite
for any λ > 0 and Jacobi-preconditioned conjugate gradient converges in
well under ``len(b)`` iterations at the default tolerance.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from scipy.sparse import diags
from scipy.sparse.linalg import cg

from ._warnings import TESConvergenceError


def solve_regularized(
    H: np.ndarray,
    lam: float,
    b: np.ndarray,
    rtol: float = 1e-6,
    maxiter: Optional[int] = None,
) -> np.ndarray:
    """
    Solve ``(H + lam * I) x = b`` by preconditioned conjugate gradient.

    Parameters
    ----------
    H : ndarray (m, m)
        Symmetric positive semi-definite matrix.
    lam : float
        Ridge term added to the diagonal.
    b : ndarray (m,)
    rtol : float, default 1e-6
        Relative residual tolerance ``||r|| <= rtol * ||b||``.
    maxiter : int or None
        Iteration cap; ``None`` uses scipy's default of ``10 * m``.

    Returns
    -------
    x : ndarray (m,)

    Raises
    ------
    TESConvergenceError
        If the tolerance is not reached within ``maxiter`` iterations, the
        iteration breaks down, or the solution is not finite.
    """
    b = np.asarray(b, dtype=np.float64)
    if not np.any(b):
        return np.zeros_like(b)

    A = H + lam * np.eye(len(b))
    M = diags(1.0 / np.diag(A))
    x, info = cg(A, b, rtol=rtol, atol=0.0, maxiter=maxiter, M=M)

    if info > 0:
        raise TESConvergenceError(
            f"Conjugate gradient did not reach rtol={rtol:g} within {info} "
            f"iterations (lambda={lam:g}, size={len(b)})."
        )
    if info < 0:
        raise TESConvergenceError(
            f"Conjugate gradient broke down (info={info}, lambda={lam:g})."
        )
    if not np.all(np.isfinite(x)):
        raise TESConvergenceError(
            f"Conjugate gradient returned a non-finite solution (lambda={lam:g})."
        )
    return x
