"""
Kernel bandwidth specification.

A bandwidth request is one of three tagged variants:

* ``Fixed(value)``   a single bandwidth; cross-validation only picks λ.
* ``Grid(values)``   an ordered grid searched jointly with λ.
* ``Auto()``         a single bandwidth from Silverman's rule of thumb
  applied to the pooled sample.

``as_bandwidth_spec`` accepts the loose forms used at the public entry
points (``'auto'``, a float, a sequence) and returns the matching variant;
``resolve_bandwidth`` turns a variant into the concrete σ grid for a given
pooled sample.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np
from scipy.stats import iqr

from ._warnings import TESConfigurationError


# ---------------------------------------------------------------------------
# Default grids
# ---------------------------------------------------------------------------

def default_sigma_grid() -> np.ndarray:
    """50 log-spaced bandwidths in [10^-1, 10^0.2]."""
    return np.logspace(-1.0, 0.2, 50)


def default_lambda_grid() -> np.ndarray:
    """50 log-spaced regularisation strengths in [10^-3, 1]."""
    return np.logspace(-3.0, 0.0, 50)


# ---------------------------------------------------------------------------
# Silverman's rule
# ---------------------------------------------------------------------------

def silverman_bandwidth(x) -> float:
    """
    Silverman's rule-of-thumb bandwidth for a 1-D Gaussian KDE.

    ``0.9 * min(sd, IQR / 1.34) * n^(-1/5)`` with the usual fallbacks when
    the spread estimate collapses to zero: the standard deviation, then
    ``|x[0]|``, then 1.

    Parameters
    ----------
    x : array-like (n,)
        Requires at least two finite values.

    Returns
    -------
    bw : float
        Strictly positive bandwidth.
    """
    x = np.asarray(x, dtype=np.float64).ravel()
    if len(x) < 2:
        raise TESConfigurationError(
            "Silverman bandwidth needs at least two data points."
        )

    sd = float(np.std(x, ddof=1))
    lo = min(sd, float(iqr(x)) / 1.34)
    if lo == 0.0:
        lo = sd or abs(float(x[0])) or 1.0

    return 0.9 * lo * len(x) ** -0.2


# ---------------------------------------------------------------------------
# Tagged variants
# ---------------------------------------------------------------------------

def _check_positive_grid(values, name: str) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64).ravel()
    if arr.size == 0:
        raise TESConfigurationError(f"{name} must contain at least one value.")
    if not np.all(np.isfinite(arr)) or np.any(arr <= 0.0):
        raise TESConfigurationError(
            f"{name} values must be finite and strictly positive; got {arr!r}."
        )
    return arr


@dataclass(frozen=True)
class Fixed:
    """A single, user-chosen bandwidth."""

    value: float

    def __post_init__(self):
        _check_positive_grid([self.value], 'Fixed bandwidth')


@dataclass(frozen=True)
class Grid:
    """An ordered grid of candidate bandwidths."""

    values: tuple

    def __post_init__(self):
        arr = _check_positive_grid(self.values, 'Bandwidth grid')
        object.__setattr__(self, 'values', tuple(float(v) for v in arr))


@dataclass(frozen=True)
class Auto:
    """Silverman's rule on the pooled sample."""


BandwidthSpec = Union[Fixed, Grid, Auto]


def as_bandwidth_spec(sigma) -> BandwidthSpec:
    """
    Coerce a loose bandwidth argument into a ``BandwidthSpec``.

    ``None`` selects the default grid; ``'auto'`` selects ``Auto()``; a
    real number becomes ``Fixed``; any other iterable becomes ``Grid``.
    """
    if isinstance(sigma, (Fixed, Grid, Auto)):
        return sigma
    if sigma is None:
        return Grid(tuple(default_sigma_grid()))
    if isinstance(sigma, str):
        if sigma.lower() == 'auto':
            return Auto()
        raise TESConfigurationError(
            f"Unknown bandwidth selector {sigma!r}; use 'auto', a positive "
            "float, or a sequence of positive floats."
        )
    if np.isscalar(sigma):
        return Fixed(float(sigma))
    return Grid(tuple(np.asarray(sigma, dtype=np.float64).ravel()))


def resolve_bandwidth(spec: BandwidthSpec, pooled: Sequence[float]) -> np.ndarray:
    """Return the concrete σ grid for ``spec`` as a float64 array."""
    if isinstance(spec, Auto):
        return np.array([silverman_bandwidth(pooled)])
    if isinstance(spec, Fixed):
        return np.array([float(spec.value)])
    if isinstance(spec, Grid):
        return np.asarray(spec.values, dtype=np.float64)
    raise TESConfigurationError(f"Unsupported bandwidth specification: {spec!r}")
