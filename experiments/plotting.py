import os
from typing import List, Optional

import numpy as np
try:
    import pandas as pd
except ImportError:
    pd = None
try:
    import matplotlib.pyplot as plt
except ImportError:
    plt = None


def _ensure_dir(path: str):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)


def read_log(csv_path: str):
    """Read one run log written by experiments/run_opt.py and coerce columns."""
    if pd is None:
        raise ImportError("pandas is required for reading logs but is not installed.")
    df = pd.read_csv(csv_path)
    # written as formatted strings for readability
    for c in ["f_best", "f_mean", "f_std", "gbest_f"]:
        df[c] = pd.to_numeric(df[c], errors="coerce")
    return df


def plot_convergence(csv_path: str, outpath: Optional[str] = None, ykey: str = "gbest_f"):
    """
    Semilogy convergence curve for a single run, saved next to the log
    unless outpath is given.
    """
    if plt is None or pd is None:
        print("Skipping plot_convergence (matplotlib/pandas missing)")
        return None

    df = read_log(csv_path)
    fig = plt.figure()
    ax = plt.gca()
    vals = df[ykey]
    if (vals <= 0).any():
        ax.plot(df["iter"], vals)
    else:
        ax.semilogy(df["iter"], vals)
    ax.set_xlabel("Generation")
    ax.set_ylabel("Best objective value")
    ax.grid(True, which="both", linestyle=":")
    ax.set_title(f"Convergence ({os.path.basename(os.path.dirname(os.path.abspath(csv_path)))})")

    if outpath is None:
        base = os.path.splitext(csv_path)[0]
        outpath = f"{base}_{ykey}_conv.png"

    _ensure_dir(outpath)
    fig.savefig(outpath, dpi=300, bbox_inches="tight")
    plt.close(fig)
    return outpath


def plot_population_2d(positions_snapshots: List[np.ndarray], outpath: str, every: int = 1):
    """
    Population clouds of a 2-D run, one scatter per recorded generation,
    coloured from early (light) to late (dark).
    """
    if plt is None:
        return None
    if not positions_snapshots:
        return None

    snaps = positions_snapshots[::max(1, every)]
    fig = plt.figure()
    ax = plt.gca()
    cmap = plt.get_cmap("viridis")
    for k, pts in enumerate(snaps):
        pts = np.asarray(pts)
        ax.scatter(pts[:, 0], pts[:, 1], s=6, color=cmap(k / max(1, len(snaps) - 1)), alpha=0.6)
    last = np.asarray(snaps[-1])
    ax.scatter(last[:, 0], last[:, 1], s=14, color="red", label="final population")
    ax.set_xlabel("x1")
    ax.set_ylabel("x2")
    ax.grid(True, linestyle=":")
    ax.legend()
    ax.set_title("Population over generations")

    _ensure_dir(outpath)
    fig.savefig(outpath, dpi=300, bbox_inches="tight")
    plt.close(fig)
    return outpath
