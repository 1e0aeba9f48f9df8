"""
Plotting helpers for optimisation results.
"""

from typing import List, Optional, Sequence, Union

import matplotlib.pyplot as plt
import numpy as np

from .nelder_mead import NelderMeadResult


def plot_convergence(
    results: Union[NelderMeadResult, List[NelderMeadResult]],
    /,
    *,
    labels: Optional[Sequence[str]] = None,
    log_scale: bool = False,
    xlabel: str = "Iteration",
    ylabel: str = "Best objective value",
    title: str = "Nelder-Mead convergence",
    figsize: tuple = (8, 5),
    ax=None,
    show_plot: bool = False,
):
    """
    Plot the best objective value against iteration for one or more runs.

    Args:
        results: A result or list of results with a `function_values` history.
        labels: Legend labels, one per result (optional).
        log_scale: Use a logarithmic y-axis. Values are shifted by the final
            best value of each run, so the plot shows the gap to it.
        xlabel: Label for x-axis
        ylabel: Label for y-axis
        title: Title for the plot
        figsize: Figure size used when no axes are given
        ax: Existing axes to draw on (optional)
        show_plot: Whether to display the plot

    Returns:
        fig, ax: Figure and axes objects
    """
    if not isinstance(results, list):
        results = [results]
    if labels is not None and len(labels) != len(results):
        raise ValueError("labels must have one entry per result")

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    for i, result in enumerate(results):
        values = np.asarray(result.function_values, dtype=float)
        label = labels[i] if labels is not None else None
        if log_scale:
            gap = np.abs(values - values[-1])
            # The final point has zero gap and cannot be shown on a log axis.
            ax.semilogy(np.arange(values.size - 1), gap[:-1], label=label)
        else:
            ax.plot(np.arange(values.size), values, label=label)

    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    if labels is not None:
        ax.legend()

    if show_plot:
        plt.show()

    return fig, ax
