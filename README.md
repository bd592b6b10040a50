# cheap

Spectral operators for problems that the discrete cosine transform
diagonalizes. A single primitive,

    output = iDCT( DCT(input) * weights ) / (2N)

drives kernel ridge regression, reparameterization of fractional Brownian
motion, Wiener denoising, fractional differentiation, Toeplitz solves and
more; you only choose the weight vector.

## Install

    pip install .

For the test suite:

    pip install ".[test]"
    pytest

## Usage

```python
import numpy as np
from cheap.context import Context
from cheap.errors import NotConvergedError
from cheap import weights

n = 1024
x = np.sin(2 * np.pi * np.arange(n) / n) + 1.0

with Context(n, 0.7) as ctx:
    # Kernel ridge regression solve with regularization 1e-3
    krr = 1.0 / (ctx.lam + 1e-3)
    y = ctx.apply(x, krr)

    # Wiener denoising with Laplacian eigenvalues
    smooth = ctx.apply(x, weights.wiener(n, 1.0))

    # Entropic optimal transport between two histograms
    a = b = np.full(n, 1.0 / n)
    try:
        f, g = ctx.sinkhorn(a, b, 0.5, 50, 1e-9)
    except NotConvergedError as err:
        f, g = err.f, err.g   # potentials after the last iteration

    # Symmetric Toeplitz system via precomputed DCT eigenvalues
    t = np.zeros(n)
    t[0], t[1] = 4.0, -1.0
    lam = ctx.toeplitz_eigenvalues(t)
    sol = ctx.toeplitz_solve_precomp(lam, x, 1e-3)
```

`Context(n, H)` needs `n >= 2` and `0 < H < 1`. It exposes the Flandrin
eigenvalues `lam` and their square roots `sqrt_lambda` (both read-only),
the current Gibbs kernel `gibbs`, and a `workspace` array. `forward(values)`
puts the DCT-II coefficients in the workspace (and returns a copy); you may
modify `workspace` in place and then call `inverse()` for the normalised
DCT-III. `recompute_gibbs(eps)` and `apply_hybrid_log(f)` are the building
blocks of `sinkhorn`. `weights_kpca_soft(K)` gives soft Kernel PCA weights.
After `close()` (or leaving the `with` block) the context raises on use.

Weight constructors in `cheap.weights` return NumPy arrays:
`laplacian`, `fractional`, `kpca_hard`, `wiener`, `wiener_ev`, `specnorm`,
`specnorm_ev`, `mandelbrot`, `rmt_hard` and `rmt_shrink`. `clgamma(z)` is
the complex log-Gamma function they use.

Random Fourier features approximate a Gaussian kernel:

```python
from cheap.rff import RffContext

rff = RffContext(256, 1, 1.0, 42)    # D, d_in, sigma, seed
z = rff.map([0.5])                   # shape (256,)
Z = rff.map_batch([[0.1], [0.2]])    # shape (2, 256)
```

The frequencies are drawn from `cheap.rng.Lcg`, a seeded 64-bit linear
congruential generator with `uniform()` and `normal()`; the same seed
always gives the same features. It is not meant for cryptography.

## Errors

Everything raised by the package derives from `cheap.errors.CheapError`:
`InvalidArgumentError` and `DomainError` (non-finite input) are also
`ValueError`s; `NotConvergedError` and `UninitializedError` are also
`RuntimeError`s. Each carries a `code` from `cheap.errors.ErrorCode`, and
`error_for(code)` returns the matching exception.

## Benchmarks

    cheap-bench [--sizes N ...]

prints one line per algorithm and size: mean wall milliseconds and
nanosecond ticks per call.

    cheap-bench-stats [--sizes N ...] [--trials T] [--warmup W] [--min-time-ms MS]

runs repeated trials and reports mean, standard deviation, min, max,
percentiles and a STABLE / MODERATE / NOISY verdict from the coefficient
of variation. Both are also callable as `cheap.bench.main()` and
`cheap.bench_stats.main()`.