from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Sequence


# Project root: the directory holding diffevo/, benchmarks/, utils/
PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_ROOT = PROJECT_ROOT / "data"
RESULTS_ROOT = DATA_ROOT / "results"

VARIANTS = {"de", "jde"}


@dataclass
class RunConfig:
    """Run configuration metadata stored with each run."""
    problem: str         # e.g. "sphere", "griewank"
    variant: str         # "de" or "jde"
    dim: int
    pop: int
    max_generations: int
    seed: int
    F: float
    CR: float


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def create_run_dir(problem: str, variant: str, root: Path | None = None) -> Path:
    """
    Create and return a unique directory for a single run.

    Structure:
        {root}/{variant}/{problem}/run_YYYYmmdd_HHMMSS_XXXX/

    root defaults to data/results under the project root.
    """
    if variant not in VARIANTS:
        raise ValueError(f"Unknown variant: {variant}")

    base = Path(root) if root is not None else RESULTS_ROOT
    base = base / variant / problem
    _ensure_dir(base)

    now = datetime.now()
    run_dir = base / f"run_{now.strftime('%Y%m%d_%H%M%S')}_{now.strftime('%f')[-4:]}"
    # two runs inside the same tick get a counter suffix
    n = 1
    candidate = run_dir
    while candidate.exists():
        candidate = run_dir.with_name(f"{run_dir.name}_{n}")
        n += 1
    _ensure_dir(candidate)
    return candidate


def save_convergence_csv(
    run_dir: Path,
    best_history: Sequence[float],
    mean_history: Sequence[float],
) -> Path:
    """
    Save convergence history to CSV:
        generation, f_best, f_mean
    """
    path = Path(run_dir) / "convergence.csv"
    with path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["generation", "f_best", "f_mean"])
        for i, (b, m) in enumerate(zip(best_history, mean_history)):
            writer.writerow([i, b, m])
    return path


def save_population_2d_csv(
    run_dir: Path,
    population_history: Sequence[Any],
) -> Path:
    """
    Save 2D population positions over time.

    population_history: list of arrays of shape (pop, 2)

    CSV columns:
        generation, member, x1, x2
    """
    path = Path(run_dir) / "population_2d.csv"
    with path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["generation", "member", "x1", "x2"])
        for gen, positions in enumerate(population_history):
            for mid, pos in enumerate(positions):
                writer.writerow([gen, mid, float(pos[0]), float(pos[1])])
    return path


def save_run_metadata(run_dir: Path, config: RunConfig, extra: Dict[str, Any] | None = None) -> Path:
    """
    Save run configuration and optional extra info to metadata.json.
    """
    meta: Dict[str, Any] = asdict(config)
    if extra:
        meta.update(extra)

    path = Path(run_dir) / "metadata.json"
    with path.open("w") as f:
        json.dump(meta, f, indent=2)
    return path
