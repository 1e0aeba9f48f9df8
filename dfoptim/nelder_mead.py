"""
Nelder-Mead minimisation with oriented restarts.

This module implements the variant of the Nelder-Mead simplex method given by
C. T. Kelley in "Iterative Methods for Optimization" (SIAM, 1999). On top of
the classical reflect/expand/contract/shrink moves, every accepted step is
checked against an Armijo-style sufficient-decrease condition built from the
simplex gradient. A step that does not descend fast enough is rejected and
the simplex is reoriented along the simplex gradient instead. The number of
such restarts is bounded; running out of restarts is reported as stagnation.

Example:
    >>> from dfoptim import nmk
    >>> from dfoptim.benchmarks import sphere
    >>> result = nmk(sphere, [1.0, 1.0])
    >>> result.convergence
    0
"""

from __future__ import annotations

import enum
import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

import numpy as np
from scipy.optimize import OptimizeResult

from .control import NelderMeadControl, resolve_control
from .errors import HighDimensionWarning, InvalidDimensionError
from .objective import Objective
from .simplex import (
    Simplex,
    armijo_factor,
    oriented_restart,
    simplex_gradient,
    sufficient_decrease,
)

_log = logging.getLogger(__name__)

# Reflection, expansion, contraction and shrink coefficients.
RHO = 1.0
CHI = 2.0
GAMMA = 0.5
SIGMA = 0.5

# The simplex is considered collapsed below this relative size.
SIZE_TOL = 1.0e-6

# Above this dimension the method is known to perform poorly.
MAX_RECOMMENDED_DIM = 30

MESSAGES = {
    0: "Successful convergence",
    1: "Maximum number of fevals exceeded",
    2: "Stagnation in Nelder-Mead",
}


class Move(enum.Enum):
    """The trial move selected from the reflected value."""

    REFLECT = "reflect"
    EXPAND = "expand"
    CONTRACT_OUTSIDE = "contract_outside"
    CONTRACT_INSIDE = "contract_inside"
    SHRINK = "shrink"


def choose_move(
    f_best: float, f_next_worst: float, f_worst: float, f_reflect: float
) -> Move:
    """
    Selects the Nelder-Mead move from the value at the reflected point.

    The conditions are tested in order and the first match wins:

        f_best <= f_reflect < f_next_worst   -> REFLECT
        f_reflect < f_best                   -> EXPAND
        f_next_worst <= f_reflect < f_worst  -> CONTRACT_OUTSIDE
        f_reflect >= f_worst                 -> CONTRACT_INSIDE

    SHRINK is returned when none of them holds, which can only happen if a
    NaN slips through.
    """
    if f_best <= f_reflect < f_next_worst:
        return Move.REFLECT
    if f_reflect < f_best:
        return Move.EXPAND
    if f_next_worst <= f_reflect < f_worst:
        return Move.CONTRACT_OUTSIDE
    if f_reflect >= f_worst:
        return Move.CONTRACT_INSIDE
    return Move.SHRINK


@dataclass
class NelderMeadResult:
    """Result of a Nelder-Mead run.

    Attributes:
        par: Best parameter vector found.
        value: Objective value at `par`, in the caller's sign convention.
        feval: Number of objective evaluations.
        iterations: Number of iterations of the main loop.
        restarts: Number of oriented restarts.
        convergence: 0 on convergence, 1 if the evaluation budget ran out,
            2 if the restart budget ran out.
        message: Description of the convergence code.
        function_values: Best value after initialisation and after each
            iteration, in the caller's sign convention.
    """

    par: np.ndarray
    value: float
    feval: int
    iterations: int
    restarts: int
    convergence: int
    message: str
    function_values: List[float] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.convergence == 0

    def to_scipy(self) -> OptimizeResult:
        """Returns the result as a scipy.optimize.OptimizeResult."""
        return OptimizeResult(
            x=self.par,
            fun=self.value,
            nfev=self.feval,
            nit=self.iterations,
            status=self.convergence,
            success=self.success,
            message=self.message,
            restarts=self.restarts,
        )


class NelderMead:
    """
    Nelder-Mead simplex optimiser with oriented restarts.

    Parameters:
        fn: Objective taking a 1D numpy array (followed by `args`) and
            returning a real number. NaN values are treated as +inf.
        control: A NelderMeadControl or a mapping of control options.
        args: Extra positional arguments passed to `fn`.
    """

    def __init__(
        self,
        fn: Callable[..., float],
        /,
        *,
        control: Union[None, NelderMeadControl, Mapping[str, Any]] = None,
        args: Tuple[Any, ...] = (),
    ) -> None:
        if not callable(fn):
            raise ValueError("fn must be callable")
        self._fn = fn
        self._args = tuple(args)
        self._control = resolve_control(control)

    @property
    def control(self) -> NelderMeadControl:
        return self._control

    def solve(
        self,
        x0: Any,
        /,
        *,
        callback: Optional[Callable[[Simplex], Any]] = None,
    ) -> NelderMeadResult:
        """
        Runs the optimiser from x0.

        Args:
            x0: Starting point with at least two components.
            callback: Called with the simplex after every iteration. The
                simplex must not be modified.

        Raises:
            InvalidDimensionError: If x0 has fewer than two components.
            DegenerateSimplexError: If the simplex collapses onto a
                lower-dimensional subspace.
        """
        return self._run(x0, callback, stacklevel=3)

    def _run(
        self,
        x0: Any,
        callback: Optional[Callable[[Simplex], Any]],
        *,
        stacklevel: int,
    ) -> NelderMeadResult:
        # stacklevel points the dimension warning at the frame calling the
        # public entry point.
        control = self._control
        x0 = np.atleast_1d(np.asarray(x0, dtype=float))
        if x0.ndim != 1:
            raise ValueError("x0 must be a vector")
        n = x0.size
        if n < 2:
            raise InvalidDimensionError(
                "Nelder-Mead requires at least two parameters; "
                "use a univariate method for one-dimensional problems"
            )
        if n > MAX_RECOMMENDED_DIM:
            warnings.warn(
                f"Nelder-Mead should not be used for high-dimensional "
                f"optimization (got {n} parameters)",
                HighDimensionWarning,
                stacklevel=stacklevel,
            )

        maxfeval = control.maxfeval_for(n)
        sign = -1.0 if control.maximize else 1.0
        objective = Objective(self._fn, args=self._args)
        if control.maximize:
            objective = -objective
        level = logging.INFO if control.trace else logging.DEBUG

        simplex = Simplex.from_point(x0, objective, regular=control.regsimp)
        sgrad = simplex_gradient(simplex)
        alpha = armijo_factor(simplex.diameters, sgrad)
        _log.debug(
            "initial simplex: n=%d, best=%g, spread=%g, size=%g",
            n,
            sign * simplex.best_value,
            simplex.spread,
            simplex.size,
        )

        iterations = 0
        restarts = 0
        function_values = [sign * simplex.best_value]

        while (
            objective.evaluations < maxfeval
            and restarts < control.restarts_max
            and simplex.spread > control.tol
            and simplex.size > SIZE_TOL
        ):
            iterations += 1
            mean_before = float(np.mean(simplex.values))
            candidate = _trial_step(simplex, objective)

            if candidate is not None:
                mean_after = float(
                    np.mean(np.append(simplex.values[:-1], candidate[1]))
                )
                if not sufficient_decrease(mean_before, mean_after, alpha, sgrad):
                    restarts += 1
                    _log.log(level, "trouble - restarting (restart %d)", restarts)
                    oriented_restart(simplex, sgrad)
                    candidate = None

            if candidate is not None:
                simplex.replace_worst(*candidate)
            elif restarts < control.restarts_max:
                simplex.shrink(objective, SIGMA)

            sgrad = simplex_gradient(simplex)
            function_values.append(sign * simplex.best_value)
            _log.log(
                level,
                "iter: %d, feval: %d, value: %g, par[0]: %g",
                iterations,
                objective.evaluations,
                sign * simplex.best_value,
                simplex.best_vertex[0],
            )
            if callback is not None:
                callback(simplex)

        if simplex.spread <= control.tol or simplex.size <= SIZE_TOL:
            convergence = 0
        elif objective.evaluations >= maxfeval:
            convergence = 1
        else:
            convergence = 2
        _log.debug(
            "terminated after %d iterations and %d evaluations: %s",
            iterations,
            objective.evaluations,
            MESSAGES[convergence],
        )

        return NelderMeadResult(
            par=simplex.best_vertex.copy(),
            value=sign * simplex.best_value,
            feval=objective.evaluations,
            iterations=iterations,
            restarts=restarts,
            convergence=convergence,
            message=MESSAGES[convergence],
            function_values=function_values,
        )


def _trial_step(
    simplex: Simplex, objective: Objective
) -> Optional[Tuple[np.ndarray, float]]:
    """
    Performs the reflection and, if needed, one expansion or contraction.

    Returns the accepted point and its value, or None if the step failed.
    """
    xbar = simplex.centroid
    worst = simplex.worst_vertex
    xr = (1 + RHO) * xbar - RHO * worst
    fr = objective(xr)

    move = choose_move(
        simplex.best_value, simplex.next_worst_value, simplex.worst_value, fr
    )
    if move is Move.REFLECT:
        return xr, fr
    if move is Move.EXPAND:
        xe = (1 + RHO * CHI) * xbar - RHO * CHI * worst
        fe = objective(xe)
        return (xe, fe) if fe < fr else (xr, fr)
    if move is Move.CONTRACT_OUTSIDE:
        xc = (1 + RHO * GAMMA) * xbar - RHO * GAMMA * worst
        fc = objective(xc)
        return (xc, fc) if fc <= fr else None
    if move is Move.CONTRACT_INSIDE:
        xc = (1 - GAMMA) * xbar + GAMMA * worst
        fc = objective(xc)
        return (xc, fc) if fc < simplex.worst_value else None
    return None


def nmk(
    fn: Callable[..., float],
    x0: Any,
    /,
    *,
    control: Union[None, NelderMeadControl, Mapping[str, Any]] = None,
    args: Tuple[Any, ...] = (),
) -> NelderMeadResult:
    """
    Minimises (or maximises) fn starting from x0.

    Args:
        fn: Objective function of a 1D numpy array.
        x0: Starting point with at least two components.
        control: A NelderMeadControl or a mapping with any of the keys
            `tol`, `maxfeval`, `regsimp`, `maximize`, `restarts.max`, `trace`.
        args: Extra positional arguments passed to `fn`.

    Returns:
        NelderMeadResult: The best point found and run statistics.
    """
    return NelderMead(fn, control=control, args=args)._run(x0, None, stacklevel=3)
