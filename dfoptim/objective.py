"""
Provides the `Objective` class, a counting wrapper around a scalar function.

The optimizers never call user functions directly. Every evaluation goes
through an `Objective`, which forwards extra positional arguments, converts
the result to a float, replaces NaN by +inf and keeps track of the number of
calls made.
"""

from __future__ import annotations
from typing import Callable, Any, Tuple

import numpy as np


class Objective:
    """
    Represents a scalar objective function on R^n.
    """

    def __init__(
        self,
        mapping: Callable[..., float],
        /,
        *,
        args: Tuple[Any, ...] = (),
    ) -> None:
        """
        Initializes the Objective.

        Args:
            mapping: A function taking a 1D numpy array (and `args`) and
                returning a real number.
            args: Extra positional arguments passed to `mapping`.
        """
        if not callable(mapping):
            raise TypeError("mapping must be callable")
        self._mapping = mapping
        self._args = tuple(args)
        self._evaluations = 0

    @property
    def evaluations(self) -> int:
        """Number of times the objective has been evaluated."""
        return self._evaluations

    def __call__(self, x: np.ndarray) -> float:
        """
        Evaluates the objective at a point.

        The function receives a copy of x, so it cannot modify the caller's
        array.

        A NaN result is returned as +inf so that the point is dominated by
        every other vertex of the simplex.
        """
        self._evaluations += 1
        value = float(self._mapping(np.array(x, dtype=float), *self._args))
        if np.isnan(value):
            return np.inf
        return value

    def __neg__(self) -> Objective:
        """Returns the objective with its sign reversed."""
        mapping = self._mapping
        return Objective(lambda x, *args: -mapping(x, *args), args=self._args)

