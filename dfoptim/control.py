"""
Control parameters for the Nelder-Mead optimizers.

The user-facing entry points accept either a `NelderMeadControl` instance or
a plain mapping using the option names below. Mappings are resolved once, at
the boundary, so the optimizer itself only ever sees a validated instance.

    tol           Convergence tolerance on the spread of simplex values.
    maxfeval      Maximum number of objective evaluations. Defaults to
                  min(5000, max(1500, 20 * n**2)) for n parameters.
    regsimp       Start from a regular simplex (True) or an axis-aligned
                  one (False).
    maximize      Maximize the objective instead of minimizing it.
    restarts.max  Maximum number of oriented restarts before declaring
                  stagnation.
    trace         Log progress at INFO level.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Union

from .errors import UnrecognizedOptionError


# Option names as written by users, mapped onto dataclass fields.
_ALIASES = {"restarts.max": "restarts_max"}


def maxfeval_for(n: int) -> int:
    """Default evaluation budget for a problem with n parameters."""
    return min(5000, max(1500, 20 * n**2))


@dataclass(frozen=True)
class NelderMeadControl:
    """
    Validated control parameters.

    Attributes:
        tol: Convergence tolerance on max(f) - min(f) over the simplex.
        maxfeval: Evaluation budget, or None for the dimension default.
        regsimp: Whether the initial simplex is regular.
        maximize: Whether the objective is maximized.
        restarts_max: Maximum number of oriented restarts.
        trace: Whether progress is logged at INFO level.
    """

    tol: float = 1.0e-6
    maxfeval: Optional[int] = None
    regsimp: bool = True
    maximize: bool = False
    restarts_max: int = 3
    trace: bool = False

    def __post_init__(self) -> None:
        if not self.tol > 0:
            raise ValueError("tol must be positive")
        if self.maxfeval is not None:
            if isinstance(self.maxfeval, bool) or int(self.maxfeval) != self.maxfeval:
                raise ValueError("maxfeval must be an integer")
            if self.maxfeval <= 0:
                raise ValueError("maxfeval must be positive")
        if isinstance(self.restarts_max, bool) or int(self.restarts_max) != self.restarts_max:
            raise ValueError("restarts_max must be an integer")
        if self.restarts_max < 0:
            raise ValueError("restarts_max must be non-negative")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> NelderMeadControl:
        """
        Builds a control instance from user options.

        Args:
            mapping: Option names and values. `restarts.max` and
                `restarts_max` are both accepted.

        Raises:
            UnrecognizedOptionError: If any key is not a known option.
        """
        names = {f.name for f in fields(cls)}
        unknown = [
            key for key in mapping if _ALIASES.get(key, key) not in names
        ]
        if unknown:
            raise UnrecognizedOptionError(unknown)
        return cls(**{_ALIASES.get(key, key): value for key, value in mapping.items()})

    def maxfeval_for(self, n: int) -> int:
        """The evaluation budget for a problem with n parameters."""
        if self.maxfeval is None:
            return maxfeval_for(n)
        return int(self.maxfeval)


def resolve_control(
    control: Union[None, NelderMeadControl, Mapping[str, Any]],
) -> NelderMeadControl:
    """Returns a validated control instance for None, a mapping or an instance."""
    if control is None:
        return NelderMeadControl()
    if isinstance(control, NelderMeadControl):
        return control
    if isinstance(control, Mapping):
        return NelderMeadControl.from_mapping(control)
    raise TypeError("control must be a mapping or a NelderMeadControl")
