"""
Tests for the plotting helpers.
"""

import pytest
import matplotlib
import matplotlib.pyplot as plt

from dfoptim.benchmarks import sphere, extended_rosenbrock
from dfoptim.nelder_mead import nmk
from dfoptim.visualization import plot_convergence

# Use a non-interactive backend for testing
matplotlib.use('Agg')


@pytest.fixture
def results():
    """Two short runs with different histories."""
    return [
        nmk(sphere, [1.0, 1.0]),
        nmk(extended_rosenbrock, [-1.2, 1.0], control={"maxfeval": 200}),
    ]


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


class TestPlotConvergence:

    def test_single_result(self, results):
        fig, ax = plot_convergence(results[0])
        assert fig is ax.figure
        lines = ax.get_lines()
        assert len(lines) == 1
        assert len(lines[0].get_xdata()) == len(results[0].function_values)
        assert ax.get_xlabel() == "Iteration"

    def test_several_results_with_labels(self, results):
        fig, ax = plot_convergence(results, labels=["sphere", "rosenbrock"])
        assert len(ax.get_lines()) == 2
        assert ax.get_legend() is not None

    def test_log_scale(self, results):
        fig, ax = plot_convergence(results[0], log_scale=True)
        assert ax.get_yscale() == "log"

    def test_existing_axes(self, results):
        fig, ax = plt.subplots()
        out_fig, out_ax = plot_convergence(results[1], ax=ax)
        assert out_ax is ax
        assert out_fig is fig

    def test_label_count_mismatch(self, results):
        with pytest.raises(ValueError):
            plot_convergence(results, labels=["only one"])
