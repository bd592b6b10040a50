"""DCT-diagonalised spectral context: apply, Sinkhorn transport and Toeplitz solves."""

from __future__ import annotations

import math

import numpy as np
from scipy import fft as _fft

from .errors import (
    DomainError,
    InvalidArgumentError,
    NotConvergedError,
    UninitializedError,
)

EPS_LOG = 1e-12
EPS_DIV = 1e-300
EPS_LAMBDA = 1e-15


def _dct2(x: np.ndarray) -> np.ndarray:
    return _fft.dct(x, type=2)


def _dct3(x: np.ndarray) -> np.ndarray:
    return _fft.dct(x, type=3)


class Context:
    """Holds the Flandrin spectrum of size ``n`` and a DCT workspace."""

    def __init__(self, n: int, H: float):
        if n < 2 or not (0.0 < H < 1.0):
            raise InvalidArgumentError(f"need n >= 2 and 0 < H < 1, got n={n}, H={H}")
        self.n = int(n)
        self.H = float(H)
        self.current_eps = -1.0

        pow_n_2h = math.pow(self.n, 2.0 * self.H)
        k = np.arange(self.n, dtype=float)
        s = np.maximum(np.sin(np.pi * k / (2.0 * self.n)), EPS_LOG)
        lam = pow_n_2h * np.power(s, -(2.0 * self.H + 1.0))
        lam[0] = EPS_LAMBDA * pow_n_2h
        lam.setflags(write=False)
        sqrt_lambda = np.sqrt(np.maximum(lam, EPS_LAMBDA))
        sqrt_lambda.setflags(write=False)

        self._lam: np.ndarray | None = lam
        self._sqrt_lambda: np.ndarray | None = sqrt_lambda
        self._gibbs: np.ndarray | None = np.zeros(self.n)
        self._workspace: np.ndarray | None = np.zeros(self.n)

    # -- lifecycle -------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._workspace is None

    def close(self) -> None:
        """Release the spectral arrays; later calls raise."""
        self._lam = None
        self._sqrt_lambda = None
        self._gibbs = None
        self._workspace = None

    def __enter__(self) -> "Context":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_open(self, error=UninitializedError) -> None:
        if self.closed:
            raise error()

    # -- views -----------------------------------------------------------

    @property
    def lam(self) -> np.ndarray:
        """Flandrin eigenvalues, decreasing in k (read-only)."""
        self._require_open()
        return self._lam

    @property
    def sqrt_lambda(self) -> np.ndarray:
        """Square roots of the eigenvalues (read-only)."""
        self._require_open()
        return self._sqrt_lambda

    @property
    def gibbs(self) -> np.ndarray:
        """Gibbs kernel exp(-lambda/eps) for the current eps (read-only copy)."""
        self._require_open()
        return self._gibbs.copy()

    @property
    def workspace(self) -> np.ndarray:
        """Spectral workspace; may be modified in place between forward and inverse."""
        self._require_open()
        return self._workspace

    # -- helpers ---------------------------------------------------------

    def _vector(self, values, name: str) -> np.ndarray:
        arr = np.asarray(values, dtype=float)
        if arr.shape != (self.n,):
            raise InvalidArgumentError(f"{name} must have length {self.n}")
        return arr

    def _finite_vector(self, values, name: str) -> np.ndarray:
        arr = self._vector(values, name)
        if not np.all(np.isfinite(arr)):
            raise DomainError()
        return arr

    def _normalised_inverse(self) -> np.ndarray:
        self._workspace[:] = _dct3(self._workspace)
        return self._workspace / (2.0 * self.n)

    # -- core primitives -------------------------------------------------

    def forward(self, values) -> np.ndarray:
        """DCT-II of ``values`` into the workspace; returns a copy of the coefficients."""
        self._require_open()
        arr = self._finite_vector(values, "values")
        self._workspace[:] = _dct2(arr)
        return self._workspace.copy()

    def inverse(self) -> np.ndarray:
        """DCT-III of the workspace with 1/(2n) normalisation."""
        self._require_open()
        return self._normalised_inverse()

    def apply(self, values, weights) -> np.ndarray:
        """Return iDCT(DCT(values) * weights) / (2n)."""
        self._require_open()
        arr = self._finite_vector(values, "values")
        w = self._vector(weights, "weights")
        self._workspace[:] = _dct2(arr) * w
        return self._normalised_inverse()

    # -- Sinkhorn --------------------------------------------------------

    def recompute_gibbs(self, eps: float) -> None:
        """Refresh the Gibbs kernel when ``eps`` differs from the cached one."""
        self._require_open()
        if eps <= 0.0:
            raise InvalidArgumentError("eps must be positive")
        if abs(eps - self.current_eps) > 1e-15 * max(abs(eps), 1.0):
            arg = -self._lam / eps
            self._gibbs = np.where(arg < -700.0, 0.0, np.exp(np.maximum(arg, -700.0)))
            self.current_eps = float(eps)

    def apply_hybrid_log(self, f) -> np.ndarray:
        """Return log(K exp(f)) computed with max-log stabilisation."""
        self._require_open()
        arr = self._vector(f, "f")
        max_f = float(np.max(arr))
        self._workspace[:] = _dct2(np.exp(arr - max_f)) * self._gibbs
        kv = self._normalised_inverse()
        return np.log(kv + EPS_DIV) + max_f

    def sinkhorn(self, a, b, eps: float, max_iter: int, tol: float):
        """Log-domain Sinkhorn iterations; returns the potentials ``(f, g)``.

        Raises NotConvergedError, carrying ``f`` and ``g``, when ``max_iter``
        iterations pass without the change in ``g`` dropping below ``tol``.
        """
        self._require_open(InvalidArgumentError)
        a_arr = self._vector(a, "a")
        b_arr = self._vector(b, "b")
        if eps <= 0.0:
            raise InvalidArgumentError("eps must be positive")
        self.recompute_gibbs(eps)
        if not (np.all(np.isfinite(a_arr)) and np.all(np.isfinite(b_arr))):
            raise DomainError()
        sum_a = float(np.sum(a_arr))
        sum_b = float(np.sum(b_arr))
        if abs(sum_a - sum_b) > 1e-8 * max(abs(sum_a), 1.0):
            raise InvalidArgumentError("a and b must have equal total mass")

        log_a = np.log(a_arr + EPS_DIV)
        log_b = np.log(b_arr + EPS_DIV)
        f = np.zeros(self.n)
        g = np.zeros(self.n)
        for _ in range(max(int(max_iter), 0)):
            prev_g = g
            f = log_a - self.apply_hybrid_log(g)
            g = log_b - self.apply_hybrid_log(f)
            if float(np.max(np.abs(g - prev_g))) < tol:
                return f, g
        err = NotConvergedError()
        err.f = f
        err.g = g
        raise err

    # -- Toeplitz --------------------------------------------------------

    def toeplitz_eigenvalues(self, t) -> np.ndarray:
        """DCT-II eigenvalues of the operator with first column ``t``."""
        self._require_open(InvalidArgumentError)
        arr = self._finite_vector(t, "t")
        self._workspace[:] = _dct2(arr)
        return self._workspace.copy()

    def toeplitz_solve_precomp(self, lambda_t, y, lambda_reg: float) -> np.ndarray:
        """Solve (T + lambda_reg I) x = y with precomputed eigenvalues of T."""
        self._require_open(InvalidArgumentError)
        lam_t = self._vector(lambda_t, "lambda_t")
        y_arr = self._vector(y, "y")
        if lambda_reg < 0.0:
            raise InvalidArgumentError("lambda_reg must be non-negative")
        if not np.all(np.isfinite(y_arr)):
            raise DomainError()
        denom = lam_t + lambda_reg
        small = np.abs(denom) < EPS_DIV
        denom = np.where(small, np.where(denom >= 0.0, EPS_DIV, -EPS_DIV), denom)
        self._workspace[:] = _dct2(y_arr) / denom
        return self._normalised_inverse()

    # -- weights ---------------------------------------------------------

    def weights_kpca_soft(self, K: int) -> np.ndarray:
        """Soft threshold max(0, 1 - lambda[K] / lambda[k]) on the Flandrin spectrum."""
        self._require_open()
        if K < 0 or K >= self.n:
            raise InvalidArgumentError(f"K must be in [0, {self.n - 1}], got {K}")
        lam = self._lam
        threshold = lam[K]
        safe = np.where(lam < EPS_LAMBDA, 1.0, lam)
        out = np.maximum(0.0, 1.0 - threshold / safe)
        return np.where(lam < EPS_LAMBDA, 0.0, out)


__all__ = ["Context"]