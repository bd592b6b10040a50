"""Repeated-trial benchmarks that report mean, spread and percentiles."""

from __future__ import annotations

import argparse
import math
import platform
import sys
import time
from contextlib import contextmanager, suppress
from dataclasses import dataclass
from typing import Callable, ContextManager, Iterator, Sequence

import numpy as np

from .context import Context
from .errors import NotConvergedError

WARMUP_TRIALS = 3
MEASUREMENT_TRIALS = 30
MIN_BENCH_TIME_MS = 100.0
MAX_INNER_ITERS = 100
DEFAULT_SIZES = (1024, 4096, 16384, 65536)
_RULE = "=" * 65


@dataclass(frozen=True)
class Stats:
    """Summary statistics of a set of timings."""

    mean: float
    stddev: float
    min: float
    max: float
    median: float
    p5: float
    p95: float
    cv: float
    n: int


def compute_stats(values: Sequence[float]) -> Stats:
    """Summarise at least two samples; stddev is the sample standard deviation."""
    data = [float(v) for v in values]
    n = len(data)
    if n < 2:
        raise ValueError(f"need at least 2 samples, got {n}")
    ordered = sorted(data)
    mean = sum(data) / n
    stddev = math.sqrt(sum((v - mean) ** 2 for v in data) / (n - 1))
    if mean != 0.0:
        cv = stddev / mean
    else:
        cv = math.inf if stddev > 0.0 else math.nan
    return Stats(
        mean=mean,
        stddev=stddev,
        min=ordered[0],
        max=ordered[-1],
        median=ordered[n // 2],
        p5=ordered[int(n * 0.05)],
        p95=ordered[int(n * 0.95)],
        cv=cv,
        n=n,
    )


def stability_label(cv: float) -> str:
    """Classify a coefficient of variation as STABLE, MODERATE or NOISY."""
    if cv < 0.05:
        return "STABLE"
    if cv < 0.10:
        return "MODERATE"
    return "NOISY"


def measure(fn: Callable[[], object], trials: int = MEASUREMENT_TRIALS,
            warmup: int = WARMUP_TRIALS, min_time_ms: float = MIN_BENCH_TIME_MS,
            max_inner: int = MAX_INNER_ITERS) -> list[float]:
    """Return one per-call time in milliseconds for each trial.

    Within a trial the batch size doubles until the time since the trial
    started reaches ``min_time_ms`` or the batch size reaches ``max_inner``;
    that elapsed time divided by the last batch size is recorded.
    """
    if trials < 1:
        raise ValueError(f"trials must be at least 1, got {trials}")
    if warmup < 0:
        raise ValueError(f"warmup must be non-negative, got {warmup}")
    if max_inner < 1:
        raise ValueError(f"max_inner must be at least 1, got {max_inner}")
    for _ in range(warmup):
        fn()
    times: list[float] = []
    for _ in range(trials):
        inner = 1
        start = time.perf_counter()
        while True:
            for _ in range(inner):
                fn()
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            if elapsed_ms >= min_time_ms or inner >= max_inner:
                times.append(elapsed_ms / inner)
                break
            inner *= 2
    return times


def format_report(name: str, n: int, stats: Stats) -> str:
    """Render the statistics of one benchmark as a text block."""
    pct = stats.cv * 100.0
    label = stability_label(stats.cv)
    if label == "NOISY":
        verdict = f"  [NOISY] CV = {pct:.2f}% - consider more trials"
    else:
        verdict = f"  [{label}] CV = {pct:.2f}%"
    lines = [
        "",
        "%-20s N=%-6d" % (name, n),
        "%-20s %12s %12s %12s %12s %12s" % ("Metric", "Mean", "StdDev", "Min", "Max", "CV%"),
        "%-20s %12.6f %12.6f %12.6f %12.6f %12.2f"
        % ("Time (ms):", stats.mean, stats.stddev, stats.min, stats.max, pct),
        "%-20s %12.6f %12.6f %12s %12s %12s"
        % ("Percentiles (5/50/95):", stats.p5, stats.median, "", "", ""),
        "%-20s %12.6f" % ("P95:", stats.p95),
        verdict,
    ]
    return "\n".join(lines)


def _wave(n: int) -> np.ndarray:
    return np.sin(2.0 * math.pi * np.arange(n) / n)


@contextmanager
def _krr(n: int) -> Iterator[Callable[[], object]]:
    with Context(n, 0.7) as ctx:
        x = _wave(n) + 1.0
        w = 1.0 / (ctx.lam + 1e-3)
        yield lambda: ctx.apply(x, w)


@contextmanager
def _reparam(n: int) -> Iterator[Callable[[], object]]:
    with Context(n, 0.7) as ctx:
        x = np.ones(n)
        w = ctx.sqrt_lambda
        yield lambda: ctx.apply(x, w)


@contextmanager
def _sinkhorn(n: int) -> Iterator[Callable[[], object]]:
    with Context(n, 0.6) as ctx:
        a = np.full(n, 1.0 / n)
        b = a.copy()

        def run() -> None:
            with suppress(NotConvergedError):
                ctx.sinkhorn(a, b, 0.5, 50, 1e-15)

        yield run


@contextmanager
def _toeplitz(n: int) -> Iterator[Callable[[], object]]:
    with Context(n, 0.5) as ctx:
        t = np.zeros(n)
        t[0] = 4.0
        t[1] = -1.0
        x = _wave(n) + 1.0
        lam = ctx.toeplitz_eigenvalues(t)
        yield lambda: ctx.apply(x, lam)


_BENCHMARKS: tuple[tuple[str, Callable[[int], ContextManager[Callable[[], object]]]], ...] = (
    ("krr_solve", _krr),
    ("reparam", _reparam),
    ("sinkhorn_50", _sinkhorn),
    ("toeplitz_matvec", _toeplitz),
)


def _trial_count(text: str) -> int:
    value = int(text)
    if value < 2:
        raise argparse.ArgumentTypeError(f"trials must be at least 2, got {value}")
    return value


def _size(text: str) -> int:
    value = int(text)
    if value < 2:
        raise argparse.ArgumentTypeError(f"size must be at least 2, got {value}")
    return value


def main(argv: Sequence[str] | None = None) -> int:
    """Run the statistical benchmarks and print a report for each."""
    parser = argparse.ArgumentParser(description="Statistical spectral benchmarks.")
    parser.add_argument("--sizes", type=_size, nargs="+", default=list(DEFAULT_SIZES))
    parser.add_argument("--trials", type=_trial_count, default=MEASUREMENT_TRIALS)
    parser.add_argument("--warmup", type=int, default=WARMUP_TRIALS)
    parser.add_argument("--min-time-ms", type=float, default=MIN_BENCH_TIME_MS)
    args = parser.parse_args(argv)

    resolution = time.get_clock_info("perf_counter").resolution
    freq = 1.0 / resolution if resolution > 0 else 0.0
    print("=== CHEAP Statistical Benchmarks ===")
    print(f"Architecture: {platform.machine() or 'Generic'}")
    print(f"Timer frequency: {freq / 1e6:.3f} MHz")
    print(f"Trials per benchmark: {args.trials} (warmup: {args.warmup})")
    print()

    for n in args.sizes:
        print(f"\n{_RULE}")
        print(f"N = {n}")
        print(_RULE)
        for name, setup in _BENCHMARKS:
            print(f"  [{name} n={n}] Warmup + planning...", file=sys.stderr)
            with setup(n) as fn:
                print(f"  [{name} n={n}] Running {args.trials} trials...", file=sys.stderr)
                times = measure(fn, args.trials, args.warmup, args.min_time_ms)
            print(format_report(name, n, compute_stats(times)), flush=True)

    print("\n=== Benchmarks Complete ===")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())