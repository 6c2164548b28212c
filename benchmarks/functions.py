from typing import Callable, Dict, Tuple
import numpy as np


def sphere(x: np.ndarray) -> float:
    """Sum of squares. Global minimum at x = 0, f = 0."""
    x = np.asarray(x, dtype=float)
    return float(np.sum(x * x))


def griewank(x: np.ndarray) -> float:
    """
    Griewank benchmark function.
    Global minimum at x = 0, f = 0. Bounds typically [-600, 600]^D.
    """
    x = np.asarray(x, dtype=float)
    s = np.sum(x * x) / 4000.0
    p = np.prod(np.cos(x / np.sqrt(np.arange(1, x.size + 1, dtype=float))))
    return float(1.0 + s - p)


def rastrigin(x: np.ndarray) -> float:
    """
    Rastrigin function: highly multimodal.
    Global minimum at x = 0, f = 0. Bounds typically [-5.12, 5.12]^D.
    """
    x = np.asarray(x, dtype=float)
    return float(10.0 * x.size + np.sum(x * x - 10.0 * np.cos(2.0 * np.pi * x)))


# name -> (function, per-dimension default bounds)
BENCHMARKS: Dict[str, Tuple[Callable[[np.ndarray], float], Tuple[float, float]]] = {
    "sphere": (sphere, (-5.0, 5.0)),
    "griewank": (griewank, (-600.0, 600.0)),
    "rastrigin": (rastrigin, (-5.12, 5.12)),
}
