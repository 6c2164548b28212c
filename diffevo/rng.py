from __future__ import annotations
import abc
import numpy as np


class RandomSource(abc.ABC):
    """
    Uniform random values for the optimizer.

    The engine only ever asks for these two primitives, so any generator
    (seeded for tests, entropy-backed, or whatever a sandboxed host can
    provide) plugs in without touching the optimizer.
    """

    @abc.abstractmethod
    def uniform_real(self) -> float:
        """Uniform float in [0, 1)."""

    @abc.abstractmethod
    def uniform_int(self, lo: int, hi: int) -> int:
        """Uniform integer in [lo, hi], both ends inclusive."""


class NumpyRandomSource(RandomSource):
    """RandomSource backed by numpy's default Generator (PCG64).

    The seed is explicit and defaults to 0: nothing here reads the clock or
    the OS entropy pool.
    """

    def __init__(self, seed: int = 0):
        self.seed = int(seed)
        self._gen = np.random.default_rng(self.seed)

    def uniform_real(self) -> float:
        return float(self._gen.random())

    def uniform_int(self, lo: int, hi: int) -> int:
        if hi < lo:
            raise ValueError(f"Empty integer range [{lo}, {hi}]")
        return int(self._gen.integers(lo, hi, endpoint=True))

    def __repr__(self) -> str:
        return f"NumpyRandomSource(seed={self.seed})"
