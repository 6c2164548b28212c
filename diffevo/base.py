from __future__ import annotations
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union
import numpy as np

from .errors import ConfigurationError
from .rng import NumpyRandomSource, RandomSource

BoundsLike = Union["Bounds", Sequence[Tuple[float, float]]]


class Bounds:
    """
    Per-dimension inclusive [min, max] box. Immutable once built.

    Values outside the box are saturated to the nearest edge by clamp();
    they are never wrapped or rejected.
    """

    def __init__(self, pairs: Sequence[Tuple[float, float]]):
        pairs = [tuple(p) for p in pairs]
        if len(pairs) < 1:
            raise ConfigurationError("Bounds need at least one dimension")
        for d, p in enumerate(pairs):
            if len(p) != 2:
                raise ConfigurationError(f"Bounds entry {d} must be a (min, max) pair, got {p!r}")
        lo = np.array([p[0] for p in pairs], dtype=float)
        hi = np.array([p[1] for p in pairs], dtype=float)
        if not (np.all(np.isfinite(lo)) and np.all(np.isfinite(hi))):
            raise ConfigurationError("Bounds must be finite")
        bad = np.flatnonzero(lo > hi)
        if bad.size:
            d = int(bad[0])
            raise ConfigurationError(f"Bounds for dimension {d} have min > max: ({lo[d]}, {hi[d]})")
        lo.setflags(write=False)
        hi.setflags(write=False)
        self._lo = lo
        self._hi = hi

    @classmethod
    def coerce(cls, bounds: BoundsLike) -> "Bounds":
        if isinstance(bounds, Bounds):
            return bounds
        return cls(bounds)

    @property
    def dim(self) -> int:
        return int(self._lo.size)

    @property
    def lo(self) -> np.ndarray:
        return self._lo

    @property
    def hi(self) -> np.ndarray:
        return self._hi

    def __len__(self) -> int:
        return self.dim

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        return iter(self.pairs())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bounds):
            return NotImplemented
        return np.array_equal(self._lo, other._lo) and np.array_equal(self._hi, other._hi)

    def __repr__(self) -> str:
        return f"Bounds({self.pairs()!r})"

    def pairs(self) -> List[Tuple[float, float]]:
        return [(float(a), float(b)) for a, b in zip(self._lo, self._hi)]

    def clamp(self, x) -> np.ndarray:
        x = np.asarray(x, dtype=float)
        if x.shape != self._lo.shape:
            raise ValueError(f"Expected a vector of length {self.dim}, got shape {x.shape}")
        # NaN entries (e.g. inf * 0 in a mutant) go to the lower edge
        x = np.where(np.isnan(x), self._lo, x)
        return np.minimum(np.maximum(x, self._lo), self._hi)

    def contains(self, x) -> bool:
        x = np.asarray(x, dtype=float)
        return bool(np.all(x >= self._lo) and np.all(x <= self._hi))

    def sample(self, d: int, rng: RandomSource) -> float:
        """Uniform value within dimension d's range."""
        return interpolate(float(self._lo[d]), float(self._hi[d]), rng.uniform_real())

    def sample_vector(self, rng: RandomSource) -> np.ndarray:
        return np.array([self.sample(d, rng) for d in range(self.dim)], dtype=float)


def interpolate(lo: float, hi: float, u: float) -> float:
    """Point at fraction u of [lo, hi].

    Weighted form so that hi - lo never has to be representable; the result is
    kept inside [lo, hi] against rounding.
    """
    return min(max(lo * (1.0 - u) + hi * u, lo), hi)


def project(x: np.ndarray, bounds: BoundsLike) -> np.ndarray:
    return Bounds.coerce(bounds).clamp(x)


class Optimizer:
    """
    Solver-agnostic ask/tell interface: candidate proposal (ask) is kept
    apart from objective evaluation (tell), so a host can evaluate a batch
    of proposals however it likes.
    """
    def __init__(self, bounds: BoundsLike, rng: Optional[RandomSource] = None, seed: int = 0,
                 options: Optional[Dict] = None):
        self.bounds: Bounds = Bounds.coerce(bounds)
        self.D: int = self.bounds.dim
        self.rng: RandomSource = rng if rng is not None else NumpyRandomSource(seed)
        self.options: Dict = dict(options or {})

    def ask(self) -> List[np.ndarray]:
        raise NotImplementedError

    def tell(self, fitness: Sequence[float]) -> None:
        raise NotImplementedError

    def best(self):
        raise NotImplementedError

    def state(self) -> Dict:
        return {}
