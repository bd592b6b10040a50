"""Spectral weight constructors for use with ``Context.apply``."""

from __future__ import annotations

import cmath
import math

import numpy as np

from .errors import DomainError, InvalidArgumentError

EPS_LOG = 1e-12
EPS_DIV = 1e-300

_LANCZOS_G = 7.0
_LANCZOS = (
    0.99999999999980993,
    676.5203681218851,
    -1259.1392167224028,
    771.32342877765313,
    -176.61502916214059,
    12.507343278686905,
    -0.13857109526572012,
    9.9843695780195716e-6,
    1.5056327351493116e-7,
)


def _check_n(n: int) -> int:
    if n < 2:
        raise InvalidArgumentError(f"n must be at least 2, got {n}")
    return int(n)


def _sin_grid(n: int) -> np.ndarray:
    return np.sin(np.pi * np.arange(n, dtype=float) / (2.0 * n))


def _eigenvalues(lam) -> np.ndarray:
    arr = np.asarray(lam, dtype=float)
    if arr.ndim != 1 or arr.size < 2:
        raise InvalidArgumentError("eigenvalues must be a 1-D sequence of length >= 2")
    return arr


def _require_finite(arr: np.ndarray) -> None:
    if not np.all(np.isfinite(arr)):
        raise DomainError()


def _cdiv(a: complex, b: complex) -> complex:
    d = max(b.real * b.real + b.imag * b.imag, EPS_DIV)
    return complex(
        (a.real * b.real + a.imag * b.imag) / d,
        (a.imag * b.real - a.real * b.imag) / d,
    )


def _clog(z: complex) -> complex:
    mag = max(abs(z), EPS_DIV)
    return complex(math.log(mag), math.atan2(z.imag, z.real))


def clgamma(z) -> complex:
    """Complex log-Gamma by the Lanczos approximation (g=7, 9 terms)."""
    z = complex(z)
    re, im = z.real, z.imag
    if re < 0.5:
        s = complex(
            math.sin(math.pi * re) * math.cosh(math.pi * im),
            math.cos(math.pi * re) * math.sinh(math.pi * im),
        )
        log_s = _clog(s)
        lg1 = clgamma(complex(1.0 - re, -im))
        return complex(
            math.log(math.pi) - log_s.real - lg1.real,
            -log_s.imag - lg1.imag,
        )

    re -= 1.0
    x = complex(_LANCZOS[0], 0.0)
    for i, coeff in enumerate(_LANCZOS[1:], start=1):
        x += _cdiv(complex(coeff, 0.0), complex(re + i, im))
    t = complex(re + _LANCZOS_G + 0.5, im)
    term1 = complex(re + 0.5, im) * _clog(t)
    log_x = _clog(x)
    return complex(
        0.5 * math.log(2.0 * math.pi) + term1.real - t.real + log_x.real,
        term1.imag - t.imag + log_x.imag,
    )


def laplacian(n: int) -> np.ndarray:
    """Eigenvalues 4*sin^2(pi*k/(2n)) of the Neumann discrete Laplacian."""
    n = _check_n(n)
    s = _sin_grid(n)
    out = 4.0 * s * s
    out[0] = 0.0
    return out


def fractional(n: int, d: float) -> np.ndarray:
    """Fractional differentiation (d > 0) or integration (d < 0) weights."""
    n = _check_n(n)
    if not math.isfinite(d):
        raise InvalidArgumentError("d must be finite")
    s = np.maximum(_sin_grid(n), EPS_LOG)
    return np.power(2.0 * s, d)


def kpca_hard(n: int, K: int) -> np.ndarray:
    """Keep the first K spectral components, zero the rest."""
    n = _check_n(n)
    if K < 0 or K > n:
        raise InvalidArgumentError(f"K must be in [0, {n}], got {K}")
    out = np.zeros(n)
    out[:K] = 1.0
    return out


def wiener(n: int, sigma_sq: float) -> np.ndarray:
    """Wiener filter weights over Laplacian eigenvalues."""
    n = _check_n(n)
    if sigma_sq <= 0.0:
        raise InvalidArgumentError("sigma_sq must be positive")
    lk = laplacian(n)
    return lk / (lk + sigma_sq)


def wiener_ev(lam, sigma_sq: float) -> np.ndarray:
    """Wiener filter weights over caller-supplied eigenvalues."""
    arr = _eigenvalues(lam)
    if sigma_sq <= 0.0:
        raise InvalidArgumentError("sigma_sq must be positive")
    _require_finite(arr)
    lk = np.maximum(arr, 0.0)
    return lk / (lk + sigma_sq)


def specnorm(n: int, eps: float) -> np.ndarray:
    """Whitening weights 1/sqrt(lambda_k + eps) over Laplacian eigenvalues."""
    n = _check_n(n)
    if eps <= 0.0:
        raise InvalidArgumentError("eps must be positive")
    return 1.0 / np.sqrt(laplacian(n) + eps)


def specnorm_ev(lam, eps: float) -> np.ndarray:
    """Whitening weights 1/sqrt(lambda_k + eps) over caller eigenvalues."""
    arr = _eigenvalues(lam)
    if eps <= 0.0:
        raise InvalidArgumentError("eps must be positive")
    _require_finite(arr)
    return 1.0 / np.sqrt(np.maximum(arr, 0.0) + eps)


def mandelbrot(n: int, H: float) -> np.ndarray:
    """Weights |Gamma(H + i*tau_k) / Gamma(1-H + i*tau_k)| with tau_k = pi*k/n."""
    n = _check_n(n)
    if H <= 0.0 or H >= 1.0:
        raise InvalidArgumentError("H must lie in (0, 1)")
    out = np.empty(n)
    out[0] = math.exp(math.lgamma(H) - math.lgamma(1.0 - H))
    for k in range(1, n):
        tau = math.pi * k / n
        num = clgamma(complex(H, tau))
        den = clgamma(complex(1.0 - H, tau))
        out[k] = math.exp(num.real - den.real)
    return out


def _mp_edges(sigma_sq: float, c: float) -> tuple[float, float]:
    if sigma_sq <= 0.0 or c <= 0.0:
        raise InvalidArgumentError("sigma_sq and c must be positive")
    sc = math.sqrt(c)
    return (1.0 + sc) ** 2, (1.0 - sc) ** 2


def rmt_hard(lam, sigma_sq: float, c: float) -> np.ndarray:
    """Keep eigenvalues above the Marchenko-Pastur edge, zero the rest."""
    arr = _eigenvalues(lam)
    lp, _ = _mp_edges(sigma_sq, c)
    _require_finite(arr)
    lambda_plus = sigma_sq * lp
    return np.where(arr > lambda_plus, arr, 0.0)


def rmt_shrink(lam, sigma_sq: float, c: float) -> np.ndarray:
    """Optimal nonlinear shrinkage of eigenvalues above the Marchenko-Pastur edge."""
    arr = _eigenvalues(lam)
    lp, lm = _mp_edges(sigma_sq, c)
    _require_finite(arr)
    lambda_plus = sigma_sq * lp
    out = np.zeros_like(arr)
    above = arr > lambda_plus
    l = arr[above] / sigma_sq
    factor = np.sqrt(np.maximum(0.0, (l - lp) * (l - lm)))
    out[above] = arr[above] * factor / l
    return out


__all__ = [
    "clgamma",
    "laplacian",
    "fractional",
    "kpca_hard",
    "wiener",
    "wiener_ev",
    "specnorm",
    "specnorm_ev",
    "mandelbrot",
    "rmt_hard",
    "rmt_shrink",
]

# keep cmath available for callers comparing phases
_ = cmath