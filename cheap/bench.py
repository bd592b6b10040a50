"""Micro-benchmarks for the spectral primitives, weight constructors and RFF maps."""

from __future__ import annotations

import argparse
import math
import sys
import time
from contextlib import suppress
from typing import Callable, Iterator, Sequence

import numpy as np

from . import weights as _weights
from .context import Context
from .errors import NotConvergedError
from .rff import RffContext

WARMUP_ITERS = 3
BENCH_ITERS = 10
DEFAULT_SIZES = (1024, 8192, 65536)

Result = tuple[str, int, float, int]


def run_bench(fn: Callable[[], object], warmup: int = WARMUP_ITERS,
              iters: int = BENCH_ITERS) -> tuple[float, int]:
    """Call ``fn`` ``warmup`` times, then time ``iters`` calls.

    Returns the mean wall time per call in milliseconds and the mean
    number of monotonic nanosecond ticks per call.
    """
    if warmup < 0:
        raise ValueError(f"warmup must be non-negative, got {warmup}")
    if iters < 1:
        raise ValueError(f"iters must be at least 1, got {iters}")
    for _ in range(warmup):
        fn()
    t0 = time.perf_counter()
    c0 = time.perf_counter_ns()
    for _ in range(iters):
        fn()
    c1 = time.perf_counter_ns()
    t1 = time.perf_counter()
    return (t1 - t0) * 1e3 / iters, (c1 - c0) // iters


def format_result(algo: str, n: int, wall_ms: float, ticks: int) -> str:
    """One result line: algorithm, size, wall milliseconds, ticks."""
    return "%-24s %6d   %10.6f   %12d" % (algo, n, wall_ms, ticks)


def format_header() -> str:
    """Column header, prefixed with '#' so it can be filtered out."""
    return "# %-22s %6s   %10s   %12s" % ("algo", "N", "wall_ms", "ticks")


def _timed(algo: str, n: int, fn: Callable[[], object]) -> Result:
    wall_ms, ticks = run_bench(fn)
    return algo, n, wall_ms, ticks


def _wave(n: int) -> np.ndarray:
    return np.sin(2.0 * math.pi * np.arange(n) / n)


def core_benchmarks(n: int) -> Iterator[Result]:
    """Time apply (KRR and reparametrisation weights), forward, inverse and Sinkhorn."""
    H = 0.7

    with Context(n, H) as ctx:
        x = _wave(n) + 1.0
        w = 1.0 / (ctx.lam + 1e-3)
        yield _timed("apply_krr", n, lambda: ctx.apply(x, w))

    with Context(n, H) as ctx:
        x = np.ones(n)
        w = ctx.sqrt_lambda
        yield _timed("apply_reparam", n, lambda: ctx.apply(x, w))

    with Context(n, H) as ctx:
        x = _wave(n)
        yield _timed("forward", n, lambda: ctx.forward(x))

    with Context(n, H) as ctx:
        ctx.forward(_wave(n))
        yield _timed("inverse", n, ctx.inverse)

    with Context(n, H) as ctx:
        a = np.full(n, 1.0 / n)
        b = a.copy()

        def sinkhorn() -> None:
            with suppress(NotConvergedError):
                ctx.sinkhorn(a, b, 0.5, 50, 1e-15)

        yield _timed("sinkhorn_50", n, sinkhorn)


def toeplitz_benchmarks(n: int) -> Iterator[Result]:
    """Time Toeplitz matvec and regularised solve with precomputed eigenvalues."""
    with Context(n, 0.5) as ctx:
        t = np.zeros(n)
        t[0] = 4.0
        t[1] = -1.0
        x = _wave(n) + 1.0
        lam = ctx.toeplitz_eigenvalues(t)
        yield _timed("toeplitz_matvec_pre", n, lambda: ctx.apply(x, lam))
        yield _timed("toeplitz_solve_pre", n,
                     lambda: ctx.toeplitz_solve_precomp(lam, x, 1e-3))


def rff_benchmarks() -> Iterator[Result]:
    """Time single and batched random Fourier feature maps."""
    for D in (64, 256, 1024):
        rff = RffContext(D, 1, 1.0, 42)
        x = np.array([0.5])
        yield _timed("rff_map", D, lambda: rff.map(x))

    for N in (1024, 8192):
        rff = RffContext(256, 1, 1.0, 42)
        X = np.arange(N, dtype=float) * 0.001
        yield _timed("rff_map_batch_256", N, lambda: rff.map_batch(X))


def weight_benchmarks(n: int) -> Iterator[Result]:
    """Time the spectral weight constructors."""
    yield _timed("wt_fractional", n, lambda: _weights.fractional(n, 0.4))
    yield _timed("wt_wiener", n, lambda: _weights.wiener(n, 1.0))
    yield _timed("wt_specnorm", n, lambda: _weights.specnorm(n, 1e-3))
    yield _timed("wt_mandelbrot", n, lambda: _weights.mandelbrot(n, 0.7))

    sc = math.sqrt(0.5)
    lp = (1.0 + sc) ** 2
    eigen = lp + 1.0 + 5.0 * np.arange(n) / n
    yield _timed("wt_rmt_shrink", n, lambda: _weights.rmt_shrink(eigen, 1.0, 0.5))


def apply_weight_benchmarks(n: int) -> Iterator[Result]:
    """Time weight construction followed by apply, end to end."""
    with Context(n, 0.7) as ctx:
        x = _wave(n) + 1.0

        def wiener_e2e() -> None:
            ctx.apply(x, _weights.wiener(n, 1.0))

        yield _timed("apply_wiener_e2e", n, wiener_e2e)


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 2:
        raise argparse.ArgumentTypeError(f"size must be at least 2, got {value}")
    return value


def main(argv: Sequence[str] | None = None) -> int:
    """Run every benchmark and print one line per result."""
    parser = argparse.ArgumentParser(description="Spectral primitive micro-benchmarks.")
    parser.add_argument("--sizes", type=_positive_int, nargs="+",
                        default=list(DEFAULT_SIZES),
                        help="problem sizes to benchmark")
    args = parser.parse_args(argv)
    sizes = args.sizes

    def emit(results: Iterator[Result]) -> None:
        for algo, n, wall_ms, ticks in results:
            print(format_result(algo, n, wall_ms, ticks), flush=True)

    def planning_note(n: int) -> None:
        if n >= 8192:
            print(f"  Planning FFT for n={n} ...", file=sys.stderr)

    print(format_header(), flush=True)
    for n in sizes:
        planning_note(n)
        emit(core_benchmarks(n))
    for n in sizes:
        planning_note(n)
        emit(toeplitz_benchmarks(n))
    emit(rff_benchmarks())
    for n in sizes:
        emit(weight_benchmarks(n))
    for n in sizes:
        emit(apply_weight_benchmarks(n))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())