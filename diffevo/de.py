from __future__ import annotations
import logging
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple
import numpy as np

from .base import BoundsLike, Optimizer
from .errors import AskTellOrderError, ConfigurationError
from .population import Candidate, Population, no_worse, strictly_better
from .rng import RandomSource

logger = logging.getLogger(__name__)

Objective = Callable[[np.ndarray], float]

MIN_POP_SIZE = 4  # target + three distinct donors


_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


def _as_flag(value, name: str) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in _TRUE_STRINGS:
            return True
        if v in _FALSE_STRINGS:
            return False
    elif isinstance(value, (int, np.integer)) and value in (0, 1):
        return bool(value)
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


def sample_donors(i: int, n: int, rng: RandomSource) -> Tuple[int, int, int]:
    """Rejection-sample three indices, pairwise distinct and distinct from i."""
    a = i
    while a == i:
        a = rng.uniform_int(0, n - 1)
    b = i
    while b == i or b == a:
        b = rng.uniform_int(0, n - 1)
    c = i
    while c == i or c == a or c == b:
        c = rng.uniform_int(0, n - 1)
    return a, b, c


def binomial_crossover(target: np.ndarray, mutant: np.ndarray, CR: float, rng: RandomSource) -> np.ndarray:
    """
    Mix target and mutant dimension by dimension.

    One dimension (j_rand) always comes from the mutant, so the trial differs
    from the target even with CR = 0. Every other dimension draws one uniform
    value and takes the mutant's entry if it falls below CR.
    """
    trial = np.array(target, dtype=float)
    j_rand = rng.uniform_int(0, trial.size - 1)
    for d in range(trial.size):
        if d == j_rand or rng.uniform_real() < CR:
            trial[d] = mutant[d]
    return trial


class DifferentialEvolution(Optimizer):
    """
    DE/rand/1/bin over a box-bounded real vector space.

    Options:
    - pop: population size N, at least 4 (default 20)
    - F: mutation factor, amplitude of the difference vector (default 0.8)
    - CR: crossover probability (default 0.9)
    - accept_ties: a trial whose cost equals the target's replaces it (default True)

    F and CR are taken as given; values outside the usual ranges only change
    how the search behaves.

    The population is sampled and evaluated on construction. Each call to
    advance() runs one generation (exactly N objective evaluations); there is
    no built-in stopping rule. Hosts that want to evaluate trials themselves
    use ask()/tell() instead of advance().
    """
    def __init__(self, bounds: BoundsLike, objective: Objective, rng: Optional[RandomSource] = None,
                 seed: int = 0, options: Optional[Dict] = None, dim: Optional[int] = None):
        super().__init__(bounds, rng, seed, options)
        opt = self.options

        if dim is not None and int(dim) != self.D:
            raise ConfigurationError(f"dim={dim} does not match the {self.D} dimensions of the bounds")
        if not callable(objective):
            raise ConfigurationError(f"objective must be callable, got {type(objective).__name__}")

        self.pop_size: int = int(opt.get("pop", 20))
        self.F: float = float(opt.get("F", 0.8))
        self.CR: float = float(opt.get("CR", 0.9))
        self.accept_ties: bool = _as_flag(opt.get("accept_ties", True), "accept_ties")
        if self.pop_size < MIN_POP_SIZE:
            raise ConfigurationError(
                f"Population size must be at least {MIN_POP_SIZE} to draw three distinct donors, got {self.pop_size}"
            )

        self.objective = objective
        self.generation: int = 0
        self.evals_total: int = 0
        self._pending: Optional[List[np.ndarray]] = None

        members = []
        for _ in range(self.pop_size):
            x = self.bounds.sample_vector(self.rng)
            members.append(Candidate(x, self._evaluate(x)))
        self._pop = Population(members)
        self._init_control_parameters()

        logger.debug(
            "%s initialised: D=%d, pop=%d, best cost %.6e",
            type(self).__name__, self.D, self.pop_size, self._pop.best().f,
        )

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(D={self.D}, pop={self.pop_size}, F={self.F}, CR={self.CR}, "
                f"generation={self.generation})")

    # ---- hooks for variants with per-member control parameters ----

    def _init_control_parameters(self) -> None:
        pass

    def _control_parameters(self, i: int) -> Tuple[float, float]:
        return self.F, self.CR

    def _on_accept(self, i: int) -> None:
        pass

    # ---- generation steps ----

    def _evaluate(self, x: np.ndarray) -> float:
        # the objective gets its own copy so it cannot alias population state
        f = float(self.objective(np.array(x, dtype=float)))
        self.evals_total += 1
        return f

    def _make_trial(self, i: int, X: np.ndarray) -> np.ndarray:
        F, CR = self._control_parameters(i)
        a, b, c = sample_donors(i, self.pop_size, self.rng)
        mutant = X[a] + F * (X[b] - X[c])
        trial = binomial_crossover(X[i], mutant, CR, self.rng)
        return self.bounds.clamp(trial)

    def _build_trials(self) -> List[np.ndarray]:
        # every trial reads from the positions as they stood before the generation
        X = self._pop.positions()
        return [self._make_trial(i, X) for i in range(self.pop_size)]

    def _select(self, trials: Sequence[np.ndarray], costs: Sequence[float]) -> int:
        accept = no_worse if self.accept_ties else strictly_better
        n_accepted = 0
        for i, (x, f) in enumerate(zip(trials, costs)):
            if accept(f, self._pop[i].f):
                self._pop.replace(i, Candidate(x, f))
                self._on_accept(i)
                n_accepted += 1
        self.generation += 1
        logger.debug(
            "generation %d: %d/%d trials accepted, best cost %.6e",
            self.generation, n_accepted, self.pop_size, self._pop.best().f,
        )
        return n_accepted

    # ---- public interface ----

    def advance(self) -> float:
        """Run one generation and return the new best cost.

        An exception raised by the objective propagates unchanged and leaves
        the population as it was before the call.
        """
        if self._pending is not None:
            raise AskTellOrderError("Call tell() before advance()")
        trials = self._build_trials()
        costs = [self._evaluate(x) for x in trials]
        self._select(trials, costs)
        return self._pop.best().f

    def ask(self) -> List[np.ndarray]:
        """Trial vectors for the next generation, one per population member, in order."""
        if self._pending is not None:
            raise AskTellOrderError("Call tell() before ask()")
        self._pending = self._build_trials()
        return [x.copy() for x in self._pending]

    def tell(self, fitness: Sequence[float]) -> None:
        """Costs of the trials returned by the last ask(), in the same order."""
        if self._pending is None:
            raise AskTellOrderError("Call ask() before tell()")
        costs = [float(f) for f in fitness]
        if len(costs) != self.pop_size:
            raise ConfigurationError(f"Expected {self.pop_size} costs, got {len(costs)}")
        trials, self._pending = self._pending, None
        self.evals_total += len(costs)
        self._select(trials, costs)

    def generations(self, max_generations: Optional[int] = None) -> Iterator[float]:
        """Advance one generation per step and yield the best cost.

        Runs forever when max_generations is None; the caller decides when to stop.
        """
        n = 0
        while max_generations is None or n < max_generations:
            yield self.advance()
            n += 1

    def best(self) -> Candidate:
        """Lowest-cost member; non-finite costs lose to finite ones, ties go to the lowest index."""
        return self._pop.best()

    def population(self) -> Tuple[Candidate, ...]:
        return self._pop.snapshot()

    def state(self) -> Dict:
        costs = self._pop.costs()
        finite = costs[np.isfinite(costs)]
        best = self._pop.best()
        if finite.size:
            f_best, f_mean, f_std = float(np.min(finite)), float(np.mean(finite)), float(np.std(finite))
        else:
            f_best, f_mean, f_std = float(best.f), float(np.inf), 0.0
        return {
            "iter": self.generation,
            "evals_total": self.evals_total,
            "f_best": f_best,
            "f_mean": f_mean,
            "f_std": f_std,
            "gbest_f": float(best.f),
            "gbest_x": best.x.copy(),
        }
