"""
Box-constrained Nelder-Mead by parameter transformation.

Bounds are enforced by optimising over an unconstrained variable y that is
mapped monotonically onto the feasible box:

    both bounds finite   x = l + (u - l) / 2 * (1 + tanh(y))
    lower bound only     x = l + exp(y)
    upper bound only     x = u - exp(y)
    no bounds            x = y

The optimum found in y is mapped back before it is returned, so the caller
only ever sees feasible points.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Mapping, Tuple, Union

import numpy as np

from .control import NelderMeadControl
from .errors import InvalidDimensionError
from .nelder_mead import NelderMeadResult, nmk


class BoxTransform:
    """
    Monotone map between R^n and the box [lower, upper].
    """

    def __init__(self, lower: Any, upper: Any, n: int, /) -> None:
        """
        Args:
            lower: Lower bounds, a scalar or a vector of length n. Use -inf
                for unbounded coordinates.
            upper: Upper bounds, a scalar or a vector of length n. Use +inf
                for unbounded coordinates.
            n: The dimension.
        """
        lower = np.broadcast_to(np.asarray(lower, dtype=float), (n,)).copy()
        upper = np.broadcast_to(np.asarray(upper, dtype=float), (n,)).copy()
        if np.any(lower >= upper):
            raise ValueError("lower bounds must be strictly less than upper bounds")

        self._lower = lower
        self._upper = upper
        lower_finite = np.isfinite(lower)
        upper_finite = np.isfinite(upper)
        self._both = lower_finite & upper_finite
        self._lower_only = lower_finite & ~upper_finite
        self._upper_only = ~lower_finite & upper_finite

    @property
    def lower(self) -> np.ndarray:
        return self._lower

    @property
    def upper(self) -> np.ndarray:
        return self._upper

    @property
    def is_unbounded(self) -> bool:
        """True if no coordinate has a finite bound."""
        return not np.any(self._both | self._lower_only | self._upper_only)

    def contains(self, x: np.ndarray) -> bool:
        """Returns True if x lies strictly inside the box."""
        x = np.asarray(x, dtype=float)
        return bool(np.all(x > self._lower) and np.all(x < self._upper))

    def to_unconstrained(self, x: np.ndarray) -> np.ndarray:
        """Maps a point strictly inside the box to R^n."""
        x = np.asarray(x, dtype=float)
        y = x.copy()
        lo, hi = self._lower, self._upper
        c = self._both
        y[c] = np.arctanh(2 * (x[c] - lo[c]) / (hi[c] - lo[c]) - 1)
        c = self._lower_only
        y[c] = np.log(x[c] - lo[c])
        c = self._upper_only
        y[c] = np.log(hi[c] - x[c])
        return y

    def to_bounded(self, y: np.ndarray) -> np.ndarray:
        """Maps a point of R^n into the box."""
        y = np.asarray(y, dtype=float)
        x = y.copy()
        lo, hi = self._lower, self._upper
        c = self._both
        x[c] = lo[c] + (hi[c] - lo[c]) / 2 * (1 + np.tanh(y[c]))
        c = self._lower_only
        x[c] = lo[c] + np.exp(y[c])
        c = self._upper_only
        x[c] = hi[c] - np.exp(y[c])
        return x


def nmkb(
    fn: Callable[..., float],
    x0: Any,
    /,
    *,
    lower: Any = -np.inf,
    upper: Any = np.inf,
    control: Union[None, NelderMeadControl, Mapping[str, Any]] = None,
    args: Tuple[Any, ...] = (),
) -> NelderMeadResult:
    """
    Minimises (or maximises) fn subject to lower <= x <= upper.

    Args:
        fn: Objective function of a 1D numpy array.
        x0: Starting point strictly inside the box.
        lower: Lower bounds, scalar or vector.
        upper: Upper bounds, scalar or vector.
        control: Control options, as for `nmk`.
        args: Extra positional arguments passed to `fn`.

    Returns:
        NelderMeadResult: The result with `par` mapped back into the box.
    """
    x0 = np.atleast_1d(np.asarray(x0, dtype=float))
    n = x0.size
    if n < 2:
        raise InvalidDimensionError(
            "Nelder-Mead requires at least two parameters; "
            "use a univariate method for one-dimensional problems"
        )
    transform = BoxTransform(lower, upper, n)
    if transform.is_unbounded:
        return nmk(fn, x0, control=control, args=args)
    if not transform.contains(x0):
        raise ValueError("starting point must lie strictly inside the bounds")

    def transformed(y: np.ndarray, *fn_args: Any) -> float:
        return fn(transform.to_bounded(y), *fn_args)

    result = nmk(transformed, transform.to_unconstrained(x0), control=control, args=args)
    return dataclasses.replace(result, par=transform.to_bounded(result.par))
