"""
Tests for the box-constrained optimiser.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from dfoptim.benchmarks import sphere
from dfoptim.bounds import BoxTransform, nmkb
from dfoptim.errors import InvalidDimensionError
from dfoptim.nelder_mead import nmk


@pytest.fixture
def mixed_transform() -> BoxTransform:
    """One coordinate of each kind: boxed, lower only, upper only, free."""
    lower = np.array([-1.0, 2.0, -np.inf, -np.inf])
    upper = np.array([3.0, np.inf, 5.0, np.inf])
    return BoxTransform(lower, upper, 4)


class TestBoxTransform:
    """The monotone map between R^n and the box."""

    def test_inverse(self, mixed_transform):
        x = np.array([0.5, 4.0, -2.0, 7.0])
        y = mixed_transform.to_unconstrained(x)
        assert_allclose(mixed_transform.to_bounded(y), x)

    def test_known_values(self, mixed_transform):
        x = mixed_transform.to_bounded(np.zeros(4))
        # Midpoint of [-1, 3], l + 1, u - 1, identity.
        assert_allclose(x, [1.0, 3.0, 4.0, 0.0])

    def test_image_is_inside_box(self, mixed_transform):
        for y in (np.full(4, -15.0), np.full(4, 15.0)):
            x = mixed_transform.to_bounded(y)
            assert np.all(x >= mixed_transform.lower)
            assert np.all(x <= mixed_transform.upper)

    def test_scalar_bounds_broadcast(self):
        transform = BoxTransform(0.0, 1.0, 3)
        assert_allclose(transform.lower, np.zeros(3))
        assert_allclose(transform.upper, np.ones(3))
        assert not transform.is_unbounded
        assert BoxTransform(-np.inf, np.inf, 3).is_unbounded

    def test_contains(self):
        transform = BoxTransform(0.0, 1.0, 2)
        assert transform.contains([0.5, 0.5])
        assert not transform.contains([0.0, 0.5])
        assert not transform.contains([0.5, 1.5])

    def test_inconsistent_bounds(self):
        with pytest.raises(ValueError):
            BoxTransform([0.0, 1.0], [1.0, 1.0], 2)


class TestNmkb:
    """Box-constrained runs."""

    def test_active_upper_bound(self):
        def shifted(x):
            return float(np.sum((x - 3.0) ** 2))

        result = nmkb(shifted, [1.0, 1.0], lower=0.0, upper=2.0)
        assert np.all(result.par <= 2.0)
        assert np.all(result.par > 0.0)
        assert_allclose(result.par, [2.0, 2.0], atol=1e-2)
        assert result.value == pytest.approx(shifted(result.par))

    def test_interior_optimum(self):
        result = nmkb(sphere, [0.5, -0.5, 0.2], lower=-1.0, upper=[1.0, 1.0, 2.0])
        assert_allclose(result.par, np.zeros(3), atol=1e-2)

    def test_one_sided_bounds(self):
        def shifted(x):
            return float((x[0] + 1.0) ** 2 + (x[1] - 1.0) ** 2)

        result = nmkb(shifted, [1.0, -1.0], lower=[0.0, -np.inf], upper=[np.inf, 0.0])
        assert result.par[0] > 0.0
        assert result.par[1] < 0.0
        assert_allclose(result.par, [0.0, 0.0], atol=1e-2)

    def test_unbounded_delegates_to_nmk(self):
        bounded = nmkb(sphere, [1.0, 1.0])
        unbounded = nmk(sphere, [1.0, 1.0])
        assert_allclose(bounded.par, unbounded.par)
        assert bounded.feval == unbounded.feval

    def test_maximize_with_arguments(self):
        def bump(x, c):
            return -float(np.sum((x - c) ** 2))

        result = nmkb(
            bump,
            [0.5, 0.5],
            lower=0.0,
            upper=1.0,
            control={"maximize": True},
            args=(np.array([0.25, 0.75]),),
        )
        assert_allclose(result.par, [0.25, 0.75], atol=1e-2)
        assert result.value == pytest.approx(0.0, abs=1e-4)

    def test_infeasible_start(self):
        with pytest.raises(ValueError):
            nmkb(sphere, [0.0, 0.5], lower=0.0, upper=1.0)

    def test_one_dimensional_start_is_rejected(self):
        with pytest.raises(InvalidDimensionError):
            nmkb(sphere, [0.5], lower=0.0, upper=1.0)
