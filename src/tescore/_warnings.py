"""
tescore warning and exception hierarchy.

All tescore-specific warnings inherit from ``TESWarning`` so callers can
suppress the entire family with a single filter::

    import warnings
    from tescore import TESWarning
    warnings.filterwarnings('ignore', category=TESWarning)

Individual sub-classes can also be targeted::

    from tescore import TESGridBoundaryWarning
    warnings.filterwarnings('ignore', category=TESGridBoundaryWarning)

Errors are never caught inside the package; they reach the caller as
raised.
"""


class TESWarning(UserWarning):
    """Base class for all tescore warnings."""


class TESDegenerateFitWarning(TESWarning):
    """
    Warning emitted when the estimated density difference has no positive
    mass on the evaluation grid.  The pseudo-CDF cannot be normalised and
    the score is reported as 0.0.
    """


class TESGridBoundaryWarning(TESWarning):
    """
    Warning emitted when cross-validation selects the first or last value
    of a bandwidth or regularisation grid.  The true optimum may lie
    outside the searched range.
    """


class TESConfigurationError(ValueError):
    """
    Invalid input samples or settings: empty cohorts, non-finite values,
    empty or non-positive grids, or a fold count the cohorts cannot
    support.
    """


class TESConvergenceError(ArithmeticError):
    """The conjugate-gradient solve did not reach its tolerance."""
