from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple
import numpy as np


def cost_key(f: float) -> Tuple[int, float]:
    """
    Sort key for costs: a total order in which every finite cost beats every
    non-finite one (NaN, +inf, -inf), and non-finite costs are all equal.
    """
    if math.isfinite(f):
        return (0, f)
    return (1, 0.0)


def no_worse(f_new: float, f_old: float) -> bool:
    return cost_key(f_new) <= cost_key(f_old)


def strictly_better(f_new: float, f_old: float) -> bool:
    return cost_key(f_new) < cost_key(f_old)


@dataclass(frozen=True, eq=False)
class Candidate:
    """
    One point of the search space and its objective value.

    Frozen, and `x` is a read-only array: position and cost can only change
    together, by replacing the Candidate.
    """
    x: np.ndarray
    f: float

    def __post_init__(self):
        x = np.array(self.x, dtype=float)
        x.setflags(write=False)
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "f", float(self.f))

    @property
    def finite(self) -> bool:
        return math.isfinite(self.f)


class Population:
    """Fixed-size, index-addressed list of evaluated Candidates."""

    def __init__(self, members: Sequence[Candidate]):
        self._members: List[Candidate] = list(members)

    def __len__(self) -> int:
        return len(self._members)

    def __getitem__(self, i: int) -> Candidate:
        return self._members[i]

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._members)

    def replace(self, i: int, cand: Candidate) -> None:
        self._members[i] = cand

    def snapshot(self) -> Tuple[Candidate, ...]:
        # Candidates are immutable, so sharing them is safe
        return tuple(self._members)

    def positions(self) -> np.ndarray:
        """(N, D) copy of all positions."""
        return np.stack([c.x for c in self._members], axis=0)

    def costs(self) -> np.ndarray:
        return np.array([c.f for c in self._members], dtype=float)

    def best_index(self) -> int:
        # min() keeps the first of equal keys, so ties go to the lowest index
        return min(range(len(self._members)), key=lambda i: cost_key(self._members[i].f))

    def best(self) -> Candidate:
        return self._members[self.best_index()]
