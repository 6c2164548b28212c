import numpy as np
import pytest

from benchmarks.functions import sphere
from diffevo.errors import ConfigurationError
from diffevo.rng import NumpyRandomSource
from diffevo.self_adaptive import SelfAdaptiveDE, self_adaptive_de


def test_defaults():
    opt = self_adaptive_de([(-10.0, 10.0)] * 5, sphere)
    assert opt.pop_size == 100
    assert opt.f_min_max == (0.1, 1.0)
    assert opt.cr_min_max == (0.0, 1.0)
    assert opt.f_change_probability == 0.1
    assert opt.cr_change_probability == 0.1


def test_sphere_5d_converges():
    opt = self_adaptive_de([(-5.0, 5.0)] * 5, sphere, seed=3)
    for _ in range(300):
        opt.advance()
    assert opt.best().f < 1e-4, f"jDE did not converge, f={opt.best().f}"


def test_control_parameters_stay_in_range():
    opt = SelfAdaptiveDE([(-5.0, 5.0)] * 3, sphere, rng=NumpyRandomSource(1),
                         options={"pop": 30, "f_min_max": (0.2, 0.6), "cr_min_max": (0.3, 0.4),
                                  "f_change_probability": 0.5, "cr_change_probability": 0.5})
    for _ in range(30):
        opt.advance()
        F, CR = opt.control_parameters()
        assert F.shape == (30,) and CR.shape == (30,)
        assert np.all((F >= 0.2) & (F <= 0.6))
        assert np.all((CR >= 0.3) & (CR <= 0.4))


def test_parameters_only_adopted_on_acceptance():
    opt = SelfAdaptiveDE([(-5.0, 5.0)] * 2, lambda x: 1.0, seed=2,
                         options={"pop": 10, "accept_ties": False,
                                  "f_change_probability": 1.0, "cr_change_probability": 1.0})
    F0, CR0 = opt.control_parameters()
    for _ in range(5):
        opt.advance()
    F1, CR1 = opt.control_parameters()
    assert np.array_equal(F0, F1)
    assert np.array_equal(CR0, CR1)


def test_parameters_change_when_trials_accepted():
    opt = SelfAdaptiveDE([(-5.0, 5.0)] * 2, lambda x: 1.0, seed=2,
                         options={"pop": 10, "f_change_probability": 1.0, "cr_change_probability": 1.0})
    F0, _ = opt.control_parameters()
    opt.advance()
    F1, _ = opt.control_parameters()
    assert not np.array_equal(F0, F1)


def test_invalid_ranges_rejected():
    with pytest.raises(ConfigurationError):
        SelfAdaptiveDE([(-1.0, 1.0)], sphere, options={"f_min_max": (1.0, 0.1)})
    with pytest.raises(ConfigurationError):
        SelfAdaptiveDE([(-1.0, 1.0)], sphere, options={"cr_min_max": (0.9, 0.1)})


def test_population_minimum_still_enforced():
    with pytest.raises(ConfigurationError):
        self_adaptive_de([(-1.0, 1.0)], sphere, pop=3)


def test_reproducible_with_seed():
    a = self_adaptive_de([(-5.0, 5.0)] * 3, sphere, seed=11, pop=20)
    b = self_adaptive_de([(-5.0, 5.0)] * 3, sphere, seed=11, pop=20)
    for _ in range(15):
        assert a.advance() == b.advance()
    assert np.array_equal(a.control_parameters()[0], b.control_parameters()[0])


def test_state_includes_parameter_means():
    opt = self_adaptive_de([(-5.0, 5.0)] * 2, sphere, pop=10)
    st = opt.state()
    assert 0.1 <= st["F_mean"] <= 1.0
    assert 0.0 <= st["CR_mean"] <= 1.0


def test_wide_parameter_range_has_no_overflow():
    opt = SelfAdaptiveDE([(-1.0, 1.0)], sphere, seed=4,
                         options={"pop": 10, "f_min_max": (-1e308, 1e308)})
    F, _ = opt.control_parameters()
    assert np.all(np.isfinite(F))
    assert len(set(F.tolist())) == 10
