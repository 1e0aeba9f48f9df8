"""
The simplex used by the Nelder-Mead optimizer, and the geometric operations
applied to it.

A simplex in R^n is stored as an (n, n+1) array whose columns are the
vertices, together with the n+1 objective values at those vertices. The
columns are kept sorted by ascending value, so column 0 is always the best
vertex and column n the worst.

The module also provides the simplex gradient, a finite-difference estimate
of the gradient obtained from the edge vectors V[:, j] - V[:, 0] and the
value differences f[j] - f[0], and the Armijo-style test built on it. When an
accepted Nelder-Mead step fails that test the simplex is reshaped by an
oriented restart (Kelley, "Iterative Methods for Optimization", SIAM 1999).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .errors import DegenerateSimplexError, InvalidDimensionError

if TYPE_CHECKING:
    from .objective import Objective


class Simplex:
    """
    An ordered set of n+1 vertices in R^n and their objective values.
    """

    def __init__(self, vertices: np.ndarray, values: np.ndarray, /) -> None:
        """
        Args:
            vertices: Array of shape (n, n+1), one vertex per column.
            values: Objective values at the vertices, shape (n+1,).

        The vertices are sorted on construction.
        """
        vertices = np.array(vertices, dtype=float)
        values = np.array(values, dtype=float)
        if vertices.ndim != 2 or vertices.shape[1] != vertices.shape[0] + 1:
            raise ValueError("vertices must have shape (n, n+1)")
        if values.shape != (vertices.shape[1],):
            raise ValueError("values must have one entry per vertex")
        if vertices.shape[0] < 2:
            raise InvalidDimensionError(
                "Nelder-Mead requires at least two parameters; "
                "use a univariate method for one-dimensional problems"
            )
        self._vertices = vertices
        self._values = values
        self.sort()

    @classmethod
    def from_point(
        cls, x0: np.ndarray, objective: Objective, /, *, regular: bool = True
    ) -> Simplex:
        """
        Builds and evaluates the initial simplex around a starting point.

        Args:
            x0: The starting point, which becomes the first vertex.
            objective: The objective used to evaluate the n+1 vertices.
            regular: If True, all edges have one of two prescribed lengths
                (a regular simplex). Otherwise the other vertices are displaced
                from x0 along the coordinate axes.

        The size of the simplex is set by scale = max(1, ||x0||).
        """
        x0 = np.asarray(x0, dtype=float)
        n = x0.size
        if n < 2:
            raise InvalidDimensionError(
                "Nelder-Mead requires at least two parameters; "
                "use a univariate method for one-dimensional problems"
            )
        scale = max(1.0, np.linalg.norm(x0))

        vertices = np.empty((n, n + 1))
        vertices[:, 0] = x0
        if regular:
            root = np.sqrt(n + 1)
            a = scale / (n * np.sqrt(2)) * (root + n - 1)
            b = scale / (n * np.sqrt(2)) * (root - 1)
            vertices[:, 1:] = x0[:, np.newaxis] + b
            vertices[np.arange(n), np.arange(1, n + 1)] = x0 + a
        else:
            vertices[:, 1:] = x0[:, np.newaxis] + scale * np.eye(n)

        values = np.array([objective(vertices[:, j]) for j in range(n + 1)])
        return cls(vertices, values)

    @property
    def dim(self) -> int:
        """The dimension n of the parameter space."""
        return self._vertices.shape[0]

    @property
    def vertices(self) -> np.ndarray:
        """The vertices as columns of an (n, n+1) array."""
        return self._vertices

    @property
    def values(self) -> np.ndarray:
        """The objective values at the vertices, in ascending order."""
        return self._values

    @property
    def best_vertex(self) -> np.ndarray:
        return self._vertices[:, 0]

    @property
    def best_value(self) -> float:
        return float(self._values[0])

    @property
    def worst_vertex(self) -> np.ndarray:
        return self._vertices[:, -1]

    @property
    def worst_value(self) -> float:
        return float(self._values[-1])

    @property
    def next_worst_value(self) -> float:
        return float(self._values[-2])

    @property
    def centroid(self) -> np.ndarray:
        """The centroid of all vertices except the worst."""
        return self._vertices[:, :-1].mean(axis=1)

    @property
    def edges(self) -> np.ndarray:
        """The edge vectors V[:, j] - V[:, 0], j = 1..n, as columns."""
        return self._vertices[:, 1:] - self._vertices[:, [0]]

    @property
    def diameters(self) -> np.ndarray:
        """The Euclidean lengths of the edges from the best vertex."""
        return np.linalg.norm(self.edges, axis=0)

    @property
    def spread(self) -> float:
        """The difference between the worst and best values."""
        return float(self._values[-1] - self._values[0])

    @property
    def size(self) -> float:
        """Sum of absolute edge components relative to the best vertex's magnitude."""
        return float(
            np.sum(np.abs(self.edges)) / max(1.0, np.sum(np.abs(self.best_vertex)))
        )

    def sort(self) -> None:
        """Reorders the vertices by ascending value. Ties keep their order."""
        order = np.argsort(self._values, kind="stable")
        self._vertices = self._vertices[:, order]
        self._values = self._values[order]

    def replace_worst(self, x: np.ndarray, fx: float) -> None:
        """Replaces the worst vertex and restores the ordering."""
        self._vertices[:, -1] = x
        self._values[-1] = fx
        self.sort()

    def shrink(self, objective: Objective, sigma: float) -> None:
        """
        Shrinks the non-best vertices by a factor sigma about the best vertex
        and re-evaluates them.

        The shrunk vertex is V[0] - sigma * (V[j] - V[0]), which also turns
        the simplex through the best vertex.
        """
        best = self._vertices[:, [0]]
        self._vertices[:, 1:] = best - sigma * (self._vertices[:, 1:] - best)
        for j in range(1, self.dim + 1):
            self._values[j] = objective(self._vertices[:, j])
        self.sort()

    def copy(self) -> Simplex:
        return Simplex(self._vertices.copy(), self._values.copy())


def simplex_gradient(simplex: Simplex) -> np.ndarray:
    """
    Returns the simplex gradient g solving edges.T @ g = f[1:] - f[0].

    Raises:
        DegenerateSimplexError: If the edge vectors are linearly dependent.
    """
    delf = simplex.values[1:] - simplex.values[0]
    try:
        return np.linalg.solve(simplex.edges.T, delf)
    except np.linalg.LinAlgError as err:
        raise DegenerateSimplexError(
            "the simplex has collapsed: its edge vectors are linearly dependent"
        ) from err


def armijo_factor(diameters: np.ndarray, sgrad: np.ndarray) -> float:
    """
    Returns the sufficient-decrease factor 1e-4 * max(diameters) / ||sgrad||.

    It is computed once for the initial simplex and kept fixed.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(1.0e-4 * np.max(diameters) / np.linalg.norm(sgrad))


def armijo_threshold(alpha: float, sgrad: np.ndarray) -> float:
    """Returns alpha * ||sgrad||^2."""
    with np.errstate(invalid="ignore", over="ignore"):
        return float(alpha * np.sum(sgrad**2))


def sufficient_decrease(
    mean_before: float, mean_after: float, alpha: float, sgrad: np.ndarray
) -> bool:
    """
    Returns True if the mean simplex value dropped by at least
    alpha * ||sgrad||^2 / n.

    A NaN threshold never triggers a restart.
    """
    threshold = armijo_threshold(alpha, sgrad) / sgrad.size
    with np.errstate(invalid="ignore"):
        return not (mean_after - mean_before > -threshold)


def oriented_restart(simplex: Simplex, sgrad: np.ndarray) -> None:
    """
    Reshapes the simplex along the simplex gradient.

    Every non-best vertex j is moved to V[0] - d * sign(sgrad[j-1]) * e_{j-1},
    where d is the shortest current edge. The values are left untouched; the
    new vertices are evaluated by the shrink step that follows a restart.
    """
    n = simplex.dim
    shortest = np.min(simplex.diameters)
    vertices = simplex.vertices
    vertices[:, 1:] = vertices[:, [0]]
    vertices[np.arange(n), np.arange(1, n + 1)] -= shortest * np.sign(sgrad)
