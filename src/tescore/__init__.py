"""
tescore: Treatment Efficacy Score
=================================

Compares the distribution of a continuous biomarker (e.g. residual cancer
burden) between an experimental and a control cohort.  The density
*difference* is estimated directly by least-squares density-difference
(LSDD) kernel regression, with bandwidth and regularisation chosen by
k-fold cross-validation, and its positive part is integrated into a single
score in [0, 1].

Primary API
-----------
    from tescore import compute_tes, bootstrap_tes, LSDDEstimator

    tes = compute_tes(exp, ctrl, random_state=0)             # float
    res = compute_tes(exp, ctrl, diagnostics=True)           # TESResult
    ci  = bootstrap_tes(exp, ctrl, n_boot=200)               # BootstrapResult

    est = LSDDEstimator(sigma='auto', random_state=0).fit(exp, ctrl)
    est.tes_, est.sigma_, est.lambda_, est.predict(x)

Bandwidth requests
------------------
``sigma`` accepts ``'auto'`` (Silverman's rule), a float, a sequence, or
one of the tagged variants ``Fixed``, ``Grid``, ``Auto``.
"""

from ._warnings import (
    TESWarning,
    TESDegenerateFitWarning,
    TESGridBoundaryWarning,
    TESConfigurationError,
    TESConvergenceError,
)
from ._params import TESParams
from .bandwidth import (
    Auto,
    Fixed,
    Grid,
    BandwidthSpec,
    as_bandwidth_spec,
    default_lambda_grid,
    default_sigma_grid,
    silverman_bandwidth,
)
from .cross_validation import CVSelection, cross_validate, cv_score_grid, select_hyperparameters
from .estimator import DensityDifference, LSDDEstimator, estimate_density_difference
from .integrate import pseudo_cdf, treatment_efficacy_score
from .api import BootstrapResult, TESResult, bootstrap_tes, compute_tes

__version__ = '0.1.0'

__all__ = [
    # Primary API
    'compute_tes',
    'bootstrap_tes',
    'LSDDEstimator',
    'TESResult',
    'BootstrapResult',
    'TESParams',
    # Bandwidth
    'Auto',
    'Fixed',
    'Grid',
    'BandwidthSpec',
    'as_bandwidth_spec',
    'default_sigma_grid',
    'default_lambda_grid',
    'silverman_bandwidth',
    # Pipeline stages
    'CVSelection',
    'cv_score_grid',
    'select_hyperparameters',
    'cross_validate',
    'DensityDifference',
    'estimate_density_difference',
    'pseudo_cdf',
    'treatment_efficacy_score',
    # Warnings and errors
    'TESWarning',
    'TESDegenerateFitWarning',
    'TESGridBoundaryWarning',
    'TESConfigurationError',
    'TESConvergenceError',
]
