import numpy as np
import pytest

from diffevo.base import Bounds, interpolate, project
from diffevo.errors import ConfigurationError, DiffEvoError
from diffevo.rng import NumpyRandomSource


def test_project_clips():
    bounds = [(-1.0, 1.0)] * 3
    x = np.array([-2.0, 0.5, 5.0])
    y = project(x, bounds)
    assert np.allclose(y, np.array([-1.0, 0.5, 1.0]))


def test_clamp_inside_and_idempotent():
    b = Bounds([(-5.0, 5.0), (0.0, 1.0), (10.0, 20.0), (-1e-3, 1e-3)])
    gen = np.random.default_rng(3)
    for _ in range(200):
        x = gen.normal(0.0, 50.0, size=4)
        y = b.clamp(x)
        assert np.all(y >= b.lo) and np.all(y <= b.hi)
        assert np.array_equal(b.clamp(y), y)


def test_clamp_keeps_interior_points():
    b = Bounds([(-5.0, 5.0)] * 2)
    x = np.array([1.25, -4.5])
    assert np.array_equal(b.clamp(x), x)


def test_degenerate_dimension_is_allowed():
    b = Bounds([(2.0, 2.0), (-1.0, 1.0)])
    rng = NumpyRandomSource(0)
    for _ in range(20):
        assert b.sample(0, rng) == 2.0
    assert np.array_equal(b.clamp([7.0, 0.0]), [2.0, 0.0])


def test_sample_vector_within_bounds():
    b = Bounds([(-600.0, 600.0), (0.0, 1e-6), (3.0, 4.0)])
    rng = NumpyRandomSource(11)
    for _ in range(100):
        x = b.sample_vector(rng)
        assert x.shape == (3,)
        assert b.contains(x)


def test_min_greater_than_max_rejected():
    with pytest.raises(ConfigurationError):
        Bounds([(0.0, 1.0), (1.0, -1.0)])


def test_empty_bounds_rejected():
    with pytest.raises(ConfigurationError):
        Bounds([])


def test_non_finite_bounds_rejected():
    with pytest.raises(ConfigurationError):
        Bounds([(-np.inf, 1.0)])
    with pytest.raises(ConfigurationError):
        Bounds([(0.0, np.nan)])


def test_configuration_error_hierarchy():
    with pytest.raises(ValueError):
        Bounds([(1.0, 0.0)])
    with pytest.raises(DiffEvoError):
        Bounds([(1.0, 0.0)])


def test_bounds_are_read_only():
    b = Bounds([(-1.0, 1.0)])
    with pytest.raises(ValueError):
        b.lo[0] = 5.0


def test_clamp_wrong_length():
    b = Bounds([(-1.0, 1.0)] * 2)
    with pytest.raises(ValueError):
        b.clamp(np.zeros(3))


def test_coerce_and_equality():
    b = Bounds([(-1.0, 1.0), (0.0, 2.0)])
    assert Bounds.coerce(b) is b
    assert Bounds.coerce([(-1.0, 1.0), (0.0, 2.0)]) == b
    assert list(b) == [(-1.0, 1.0), (0.0, 2.0)]
    assert len(b) == 2


def test_clamp_maps_nan_into_bounds():
    b = Bounds([(-5.0, 5.0)] * 3)
    y = b.clamp(np.array([np.nan, np.inf, -np.inf]))
    assert np.array_equal(y, [-5.0, 5.0, -5.0])
    assert b.contains(y)


def test_sample_spreads_over_wide_finite_bounds():
    b = Bounds([(-1e308, 1e308)])
    rng = NumpyRandomSource(0)
    samples = [b.sample(0, rng) for _ in range(50)]
    assert all(np.isfinite(s) and -1e308 <= s <= 1e308 for s in samples)
    assert len(set(samples)) == 50
    assert min(samples) < 0.0 < max(samples)


def test_interpolate_endpoints():
    assert interpolate(-1e308, 1e308, 0.0) == -1e308
    assert interpolate(-1e308, 1e308, 0.5) == 0.0
    assert interpolate(2.0, 4.0, 0.25) == 2.5
    assert interpolate(3.0, 3.0, 0.7) == 3.0
