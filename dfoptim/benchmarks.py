"""
Standard test objectives for derivative-free optimisers.
"""

import numpy as np


def sphere(x: np.ndarray) -> float:
    """Sum of squares, minimum 0 at the origin."""
    x = np.asarray(x, dtype=float)
    return float(np.sum(x**2))


def extended_rosenbrock(x: np.ndarray) -> float:
    """
    The extended Rosenbrock function in n >= 2 dimensions.

    f(x) = sum_{i} 100 (x_i^2 - x_{i+1})^2 + (x_i - 1)^2, with minimum 0 at
    x = (1, ..., 1).
    """
    x = np.asarray(x, dtype=float)
    return float(np.sum(100 * (x[:-1] ** 2 - x[1:]) ** 2 + (x[:-1] - 1) ** 2))


# Minimiser and minimum of `nonsmooth_max`.
NONSMOOTH_MAX_ARGMIN = np.array([1.2, 2.4])
NONSMOOTH_MAX_MIN = 7.2


def nonsmooth_max(x: np.ndarray) -> float:
    """
    A piecewise quadratic, non-smooth convex function of two variables.

    f(x) = max(f1, f2, f3) with
        f1 = x1^2 + x2^2
        f2 = f1 + 10 (-4 x1 - x2 + 4)
        f3 = f1 + 10 (-x1 - 2 x2 + 6)

    The minimum is 7.2 at (1.2, 2.4), on a kink where Nelder-Mead typically
    stalls.
    """
    f1 = x[0] ** 2 + x[1] ** 2
    f2 = f1 + 10 * (-4 * x[0] - x[1] + 4)
    f3 = f1 + 10 * (-x[0] - 2 * x[1] + 6)
    return float(max(f1, f2, f3))
