"""
Input validation for cohort samples.

All functions are pure and raise ``TESConfigurationError`` on the first
problem found.
"""

from __future__ import annotations

import numpy as np

from ._warnings import TESConfigurationError


def check_cohort(samples, name: str) -> np.ndarray:
    """
    Coerce one cohort to a 1-D float64 array.

    Parameters
    ----------
    samples : array-like
        A flat sequence or a single-column array.
    name : str
        Cohort name used in error messages.

    Returns
    -------
    x : ndarray (n,)
    """
    try:
        x = np.asarray(samples, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise TESConfigurationError(
            f"{name} samples must be real numbers: {exc}"
        ) from exc

    if x.ndim == 2 and x.shape[1] == 1:
        x = x[:, 0]
    if x.ndim != 1:
        raise TESConfigurationError(
            f"{name} samples must be one-dimensional; got shape {x.shape}."
        )
    if x.size == 0:
        raise TESConfigurationError(f"{name} cohort is empty.")
    if not np.all(np.isfinite(x)):
        raise TESConfigurationError(f"{name} samples must all be finite.")
    return x


def check_cohorts(exp_samples, ctrl_samples, fold: int):
    """
    Validate both cohorts against each other and against ``fold``.

    Returns
    -------
    exp : ndarray (n1,)
    ctrl : ndarray (n2,)
    """
    exp = check_cohort(exp_samples, 'Experimental')
    ctrl = check_cohort(ctrl_samples, 'Control')

    smallest = min(len(exp), len(ctrl))
    if fold > smallest:
        raise TESConfigurationError(
            f"fold ({fold}) exceeds the size of the smallest cohort "
            f"({smallest}); every fold needs at least one sample per cohort."
        )

    upper = max(float(exp.max()), float(ctrl.max()))
    if upper <= 0.0:
        raise TESConfigurationError(
            "The evaluation grid spans [0, max(samples)]; the largest pooled "
            f"value must be strictly positive, got {upper}."
        )
    return exp, ctrl
