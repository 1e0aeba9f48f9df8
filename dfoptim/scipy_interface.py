"""
Adapter exposing the Nelder-Mead optimiser as a custom method for
`scipy.optimize.minimize`:

    >>> from scipy.optimize import minimize
    >>> from dfoptim.scipy_interface import minimize_nmk
    >>> res = minimize(fun, x0, method=minimize_nmk, options={"maxfev": 2000})
"""

from __future__ import annotations

import warnings
from typing import Any, Callable, Optional, Tuple

import numpy as np
from scipy.optimize import Bounds, OptimizeResult, OptimizeWarning

from .bounds import nmkb
from .control import NelderMeadControl
from .nelder_mead import nmk

# scipy option names that differ from ours.
_OPTION_NAMES = {"maxfev": "maxfeval", "maxfeval": "maxfeval"}
_CONTROL_OPTIONS = {"tol", "regsimp", "maximize", "restarts_max", "trace"}


def _is_unset(value: Any) -> bool:
    """True for None and for the empty defaults scipy forwards, such as constraints=()."""
    return value is None or (isinstance(value, (tuple, list, dict)) and not value)


def _split_bounds(bounds: Any, n: int) -> Tuple[np.ndarray, np.ndarray]:
    """Returns (lower, upper) arrays from a Bounds instance or (min, max) pairs."""
    if isinstance(bounds, Bounds):
        lower, upper = bounds.lb, bounds.ub
    else:
        pairs = np.array(
            [(-np.inf if lo is None else lo, np.inf if hi is None else hi)
             for lo, hi in bounds],
            dtype=float,
        )
        lower, upper = pairs[:, 0], pairs[:, 1]
    lower = np.broadcast_to(np.asarray(lower, dtype=float), (n,))
    upper = np.broadcast_to(np.asarray(upper, dtype=float), (n,))
    return lower, upper


def minimize_nmk(
    fun: Callable[..., float],
    x0: Any,
    args: Tuple[Any, ...] = (),
    bounds: Any = None,
    callback: Optional[Callable] = None,
    **options: Any,
) -> OptimizeResult:
    """
    Minimises a scalar function with Nelder-Mead and oriented restarts.

    Args:
        fun: The objective, called as fun(x, *args).
        x0: Starting point with at least two components.
        args: Extra positional arguments passed to fun.
        bounds: Optional scipy.optimize.Bounds or sequence of (min, max)
            pairs, with None for no bound.
        callback: Not supported; a warning is issued if given.
        **options: tol, maxfev (or maxfeval), regsimp, restarts_max, trace,
            maximize. Other non-None options (such as jac or hess, which
            scipy forwards to every custom method) are ignored with a warning.

    Returns:
        OptimizeResult: With fields x, fun, nfev, nit, status, success,
        message and restarts.
    """
    settings = {}
    ignored = []
    for name, value in options.items():
        if name in _OPTION_NAMES:
            settings[_OPTION_NAMES[name]] = value
        elif name in _CONTROL_OPTIONS:
            settings[name] = value
        elif not _is_unset(value):
            ignored.append(name)
    if callback is not None:
        ignored.append("callback")
    if ignored:
        warnings.warn(
            "Unknown solver options: " + ", ".join(ignored),
            OptimizeWarning,
            stacklevel=2,
        )

    control = NelderMeadControl(**{k: v for k, v in settings.items() if v is not None})
    x0 = np.atleast_1d(np.asarray(x0, dtype=float))

    if bounds is None:
        result = nmk(fun, x0, control=control, args=args)
    else:
        lower, upper = _split_bounds(bounds, x0.size)
        result = nmkb(fun, x0, lower=lower, upper=upper, control=control, args=args)
    return result.to_scipy()
