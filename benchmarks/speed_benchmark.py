"""
Speed benchmark: serial (n_jobs=1) vs parallel (n_jobs=-1) cross-validation.

Measures wall-clock time of compute_tes() on the default 50 × 50
(σ, λ) grid across several cohort sizes.  Prints a summary table with
absolute times and speedup ratios.

Usage
-----
    python benchmarks/speed_benchmark.py
"""

from __future__ import annotations

import multiprocessing
import time
import warnings

import numpy as np
from tescore import TESWarning, compute_tes
from tescore.datasets import make_rcb_cohorts


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def time_call(fn, repeats: int = 3) -> float:
    """Return the median wall-clock time (seconds) over ``repeats`` calls."""
    times = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        times.append(time.perf_counter() - t0)
    return float(np.median(times))


def fmt(t: float) -> str:
    if t >= 1.0:
        return f"{t:6.2f}s"
    return f"{t * 1000:5.0f}ms"


def speedup(serial: float, parallel: float) -> str:
    if parallel == 0:
        return "  n/a "
    r = serial / parallel
    return f"{r:5.2f}×"


# ---------------------------------------------------------------------------
# Benchmark configurations
# ---------------------------------------------------------------------------

CONFIGS = [
    # (label,      n per arm,  repeats)
    ("small   ",   50,         3),
    ("medium  ",   200,        2),
    ("large   ",   500,        1),
]


def run_tes_bench(exp, ctrl, n_jobs: int, repeats: int) -> float:
    return time_call(
        lambda: compute_tes(exp, ctrl, n_jobs=n_jobs, random_state=0),
        repeats=repeats,
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def _warmup_pool():
    """Prime the joblib thread pool before any timed section."""
    from joblib import Parallel, delayed
    Parallel(n_jobs=-1, prefer='threads')(delayed(abs)(i) for i in range(8))


def main():
    warnings.simplefilter('ignore', TESWarning)
    n_cores = multiprocessing.cpu_count()
    print(f"\ntescore Speed Benchmark ({n_cores} logical CPU cores)")
    print("=" * 64)

    print("\nWarming up joblib thread pool (one-time cost, not benchmarked)...")
    _warmup_pool()
    print("Done.\n")

    header = f"  {'Cohorts':<10}  {'n':>6}  {'serial':>10}  {'parallel':>10}  {'speedup':>8}"
    print(header)
    print(f"  {'-'*10}  {'-'*6}  {'-'*10}  {'-'*10}  {'-'*8}")

    for label, n, reps in CONFIGS:
        exp, ctrl = make_rcb_cohorts(n_exp=n, n_ctrl=n, random_state=0)
        t1 = run_tes_bench(exp, ctrl, n_jobs=1, repeats=reps)
        tp = run_tes_bench(exp, ctrl, n_jobs=-1, repeats=reps)
        print(f"  {label}  {2 * n:>6,}  {fmt(t1):>10}  {fmt(tp):>10}  {speedup(t1, tp):>8}")

    print()


if __name__ == '__main__':
    main()
