"""
Presentation helpers for TES results.

Nothing in the computation imports this module.  ``format_parameters``
needs only the standard library; ``plot_density_difference`` needs
matplotlib (optional dependency)::

    pip install "tescore[plot]"
"""

from ._params import _format_parameters


def format_parameters(lam, sigma):
    """
    One-line summary of the selected hyperparameters.

    >>> format_parameters(0.01, 0.5)
    'Estimated parameters: lambda = 0.01; bandwidth = 0.5'
    """
    return _format_parameters(lam, sigma)


def plot_density_difference(result, ax=None, color='#56B4E9', xlabel='RCB score',
                            figsize=(6, 4)):
    """
    Scatter the estimated density difference over the evaluation grid.

    Parameters
    ----------
    result  : TESResult  (``compute_tes(..., diagnostics=True)``)
    ax      : matplotlib Axes or None  new figure if None
    color   : str
    xlabel  : str
    figsize : tuple  used only when ``ax`` is None

    Returns
    -------
    matplotlib.figure.Figure
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("matplotlib is required for plotting. pip install matplotlib")

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    ax.scatter(result.grid, result.w_hat, s=6, color=color)
    ax.axhline(0.0, color='black', linewidth=0.8)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(
        f"Density difference\n({result.exp_label} - {result.ctrl_label})"
    )
    ax.set_title(f"TES = {result.tes:.3f}")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig
