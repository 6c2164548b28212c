# experiments/run_opt.py
import argparse
import csv
import os
import time
from typing import Dict, List, Optional

import numpy as np

from benchmarks.functions import BENCHMARKS
from diffevo.de import DifferentialEvolution
from diffevo.self_adaptive import SelfAdaptiveDE
from utils.recorder import RunConfig, create_run_dir, save_convergence_csv, save_population_2d_csv, save_run_metadata
from experiments.plotting import plot_convergence, plot_population_2d

LOG_FIELDS = ["iter", "evals", "f_best", "f_mean", "f_std", "gbest_f", "x_best"]


def format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    h, m = divmod(m, 60)
    if h > 0:
        return f"{h}h {m:02d}m {s:02d}s"
    return f"{m}m {s:02d}s"


def optimize(opt: DifferentialEvolution, max_generations: int, f_target: float = 1e-6, stagnation: int = 200,
             log_path: str = "run.csv", trace_2d: bool = False, verbose: bool = True) -> Dict:
    """
    Drive opt one generation at a time until one of the stopping rules fires:
    generation budget, best cost at or below f_target, or `stagnation`
    generations without a strict improvement of the best cost.

    Writes one CSV row per generation to log_path. Returns a dict with the
    best candidate, the stop reason and the per-generation histories.
    """
    best_seen = np.inf
    no_improve = 0
    best_history: List[float] = []
    mean_history: List[float] = []
    trace: List[np.ndarray] = []
    stop_reason = "budget"

    if trace_2d and opt.D == 2:
        trace.append(np.stack([c.x for c in opt.population()], axis=0))

    start_time = time.time()
    os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)

    with open(log_path, "w", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=LOG_FIELDS)
        writer.writeheader()

        try:
            while opt.generation < max_generations:
                opt.advance()

                st = opt.state()
                writer.writerow({
                    "iter": st["iter"],
                    "evals": st["evals_total"],
                    "f_best": f"{st['f_best']:.12e}",
                    "f_mean": f"{st['f_mean']:.12e}",
                    "f_std": f"{st['f_std']:.12e}",
                    "gbest_f": f"{st['gbest_f']:.12e}",
                    "x_best": str([float(v) for v in st["gbest_x"]]),
                })
                best_history.append(st["gbest_f"])
                mean_history.append(st["f_mean"])
                if trace_2d and opt.D == 2:
                    trace.append(np.stack([c.x for c in opt.population()], axis=0))

                if verbose:
                    elapsed_str = format_time(time.time() - start_time)
                    print(f"[Gen {st['iter']}] Evals: {st['evals_total']} | Best: {st['gbest_f']:.6e} "
                          f"| Mean: {st['f_mean']:.6e} | Elapsed: {elapsed_str}")

                # stopping logic
                if st["gbest_f"] < best_seen - 1e-16:
                    best_seen = st["gbest_f"]
                    no_improve = 0
                else:
                    no_improve += 1

                if st["gbest_f"] <= f_target:
                    stop_reason = "target"
                    break
                if no_improve >= stagnation:
                    stop_reason = "stagnation"
                    break

        except KeyboardInterrupt:
            stop_reason = "interrupted"
            print("\n!!! Interrupted by user. Stopping optimization early and saving current results... !!!")

    return {
        "best": opt.best(),
        "stop_reason": stop_reason,
        "generations": opt.generation,
        "best_history": best_history,
        "mean_history": mean_history,
        "trace": trace,
    }


def build_optimizer(problem: str, D: int, variant: str, pop: Optional[int], F: float, CR: float,
                    seed: int) -> DifferentialEvolution:
    f, (lo, hi) = BENCHMARKS[problem]
    bounds = [(lo, hi)] * D
    if variant == "jde":
        options = {} if pop is None else {"pop": pop}
        return SelfAdaptiveDE(bounds, f, seed=seed, options=options)
    options = {"F": F, "CR": CR}
    if pop is not None:
        options["pop"] = pop
    return DifferentialEvolution(bounds, f, seed=seed, options=options)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Run Differential Evolution on a benchmark function")
    parser.add_argument("--problem", type=str, default="sphere", choices=sorted(BENCHMARKS))
    parser.add_argument("--D", type=int, default=5, help="Problem dimension")
    parser.add_argument("--variant", type=str, default="de", choices=["de", "jde"])
    parser.add_argument("--pop", type=int, default=None, help="Population size (default: 20 for de, 100 for jde)")
    parser.add_argument("--F", type=float, default=0.8)
    parser.add_argument("--CR", type=float, default=0.9)
    parser.add_argument("--generations", type=int, default=1000, help="Generation budget")
    parser.add_argument("--target", type=float, default=1e-6, help="Stop once the best cost reaches this value")
    parser.add_argument("--stagnation", type=int, default=200)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--out", type=str, default=None, help="Results root (default: data/results)")
    parser.add_argument("--no-plot", action="store_true", help="Skip figure generation")
    parser.add_argument("--quiet", action="store_true")
    args = parser.parse_args(argv)

    opt = build_optimizer(args.problem, args.D, args.variant, args.pop, args.F, args.CR, args.seed)

    config = RunConfig(
        problem=args.problem, variant=args.variant, dim=args.D, pop=opt.pop_size,
        max_generations=args.generations, seed=args.seed, F=args.F, CR=args.CR,
    )
    run_dir = create_run_dir(args.problem, args.variant, root=args.out)
    save_run_metadata(run_dir, config)
    log_path = str(run_dir / "log.csv")

    result = optimize(opt, max_generations=args.generations, f_target=args.target, stagnation=args.stagnation,
                      log_path=log_path, trace_2d=(args.D == 2), verbose=not args.quiet)
    best = result["best"]
    save_convergence_csv(run_dir, result["best_history"], result["mean_history"])
    save_run_metadata(run_dir, config, extra={
        "stop_reason": result["stop_reason"],
        "generations": result["generations"],
        "evals_total": opt.evals_total,
        "best_f": best.f,
        "best_x": [float(v) for v in best.x],
    })
    print(f"Best: f={best.f:.6e} x={[float(v) for v in best.x]} ({result['stop_reason']})")

    if result["trace"]:
        save_population_2d_csv(run_dir, result["trace"])

    if not args.no_plot:
        conv_png = plot_convergence(log_path)
        if conv_png:
            print("Saved convergence plot:", conv_png)
        if result["trace"]:
            pop_png = plot_population_2d(result["trace"], outpath=str(run_dir / "population_2d.png"))
            if pop_png:
                print("Saved 2D population plot:", pop_png)

    return result


if __name__ == "__main__":
    main()
