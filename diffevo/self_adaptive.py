from __future__ import annotations
from typing import Dict, Optional, Tuple
import numpy as np

from .base import BoundsLike, interpolate
from .de import DifferentialEvolution, Objective
from .errors import ConfigurationError
from .rng import RandomSource


def _range_option(opt: Dict, key: str, default: Tuple[float, float]) -> Tuple[float, float]:
    lo, hi = opt.get(key, default)
    lo, hi = float(lo), float(hi)
    if lo > hi:
        raise ConfigurationError(f"{key} must be (min, max) with min <= max, got ({lo}, {hi})")
    return lo, hi


class SelfAdaptiveDE(DifferentialEvolution):
    """
    jDE: DE/rand/1/bin where every member carries its own F and CR.

    See Brest et al., "Self-Adapting Control Parameters in Differential
    Evolution: A Comparative Study on Numerical Benchmark Problems" (2006).

    Options (on top of DifferentialEvolution's, which keep their meaning
    except that F and CR are ignored):
    - pop: population size (default 100)
    - f_min_max: range new F values are drawn from (default (0.1, 1.0))
    - f_change_probability: chance a trial draws a fresh F (default 0.1)
    - cr_min_max: range new CR values are drawn from (default (0.0, 1.0))
    - cr_change_probability: chance a trial draws a fresh CR (default 0.1)

    A trial's F and CR are kept by its member only if selection accepts it.
    """
    def __init__(self, bounds: BoundsLike, objective: Objective, rng: Optional[RandomSource] = None,
                 seed: int = 0, options: Optional[Dict] = None, dim: Optional[int] = None):
        opt = dict(options or {})
        opt.setdefault("pop", 100)
        self.f_min_max = _range_option(opt, "f_min_max", (0.1, 1.0))
        self.cr_min_max = _range_option(opt, "cr_min_max", (0.0, 1.0))
        self.f_change_probability: float = float(opt.get("f_change_probability", 0.1))
        self.cr_change_probability: float = float(opt.get("cr_change_probability", 0.1))
        super().__init__(bounds, objective, rng=rng, seed=seed, options=opt, dim=dim)

    def _uniform(self, lo_hi: Tuple[float, float]) -> float:
        return interpolate(lo_hi[0], lo_hi[1], self.rng.uniform_real())

    def _init_control_parameters(self) -> None:
        self._F = np.array([self._uniform(self.f_min_max) for _ in range(self.pop_size)])
        self._CR = np.array([self._uniform(self.cr_min_max) for _ in range(self.pop_size)])
        self._trial_F = self._F.copy()
        self._trial_CR = self._CR.copy()

    def _control_parameters(self, i: int) -> Tuple[float, float]:
        if self.rng.uniform_real() < self.cr_change_probability:
            self._trial_CR[i] = self._uniform(self.cr_min_max)
        else:
            self._trial_CR[i] = self._CR[i]
        if self.rng.uniform_real() < self.f_change_probability:
            self._trial_F[i] = self._uniform(self.f_min_max)
        else:
            self._trial_F[i] = self._F[i]
        return float(self._trial_F[i]), float(self._trial_CR[i])

    def _on_accept(self, i: int) -> None:
        self._F[i] = self._trial_F[i]
        self._CR[i] = self._trial_CR[i]

    def control_parameters(self) -> Tuple[np.ndarray, np.ndarray]:
        """Copies of the per-member (F, CR) arrays."""
        return self._F.copy(), self._CR.copy()

    def state(self) -> Dict:
        st = super().state()
        st["F_mean"] = float(np.mean(self._F))
        st["CR_mean"] = float(np.mean(self._CR))
        return st


def self_adaptive_de(bounds: BoundsLike, objective: Objective, seed: int = 0,
                     rng: Optional[RandomSource] = None, **options) -> SelfAdaptiveDE:
    """SelfAdaptiveDE with the published default parameters (pop=100, F in [0.1, 1], CR in [0, 1])."""
    return SelfAdaptiveDE(bounds, objective, rng=rng, seed=seed, options=options)
