from dfoptim.errors import (
    InvalidDimensionError,
    DegenerateSimplexError,
    UnrecognizedOptionError,
    HighDimensionWarning,
)

from dfoptim.objective import Objective

from dfoptim.control import NelderMeadControl, resolve_control

from dfoptim.simplex import (
    Simplex,
    simplex_gradient,
    armijo_factor,
    armijo_threshold,
    sufficient_decrease,
    oriented_restart,
)

from dfoptim.nelder_mead import (
    Move,
    choose_move,
    NelderMead,
    NelderMeadResult,
    nmk,
)

from dfoptim.bounds import BoxTransform, nmkb

from dfoptim.scipy_interface import minimize_nmk
