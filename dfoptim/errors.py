"""
Exceptions and warnings raised by the simplex optimizers.

Budget exhaustion and stagnation are not errors: they are reported through
the `convergence` code of the result record.
"""

import numpy as np


class InvalidDimensionError(ValueError):
    """Raised when the parameter vector has fewer than two components."""


class DegenerateSimplexError(np.linalg.LinAlgError):
    """Raised when the edge vectors of the simplex are linearly dependent."""


class UnrecognizedOptionError(ValueError):
    """Raised when a control mapping contains unknown keys."""

    def __init__(self, names) -> None:
        self.names = tuple(names)
        super().__init__(
            "unrecognized option(s) in control: " + ", ".join(map(repr, self.names))
        )


class HighDimensionWarning(UserWarning):
    """Nelder-Mead is not reliable for high-dimensional problems."""
