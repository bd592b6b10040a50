"""Random Fourier features approximating a Gaussian kernel."""

from __future__ import annotations

import math

import numpy as np

from .errors import InvalidArgumentError
from .rng import Lcg


class RffContext:
    """Feature map z(x) with z(x) . z(y) ~ exp(-|x - y|^2 / (2 sigma^2))."""

    def __init__(self, D: int, d_in: int, sigma: float, seed: int):
        if D < 2 or D % 2 != 0 or d_in < 1 or not sigma > 0.0:
            raise InvalidArgumentError(
                f"need even D >= 2, d_in >= 1, sigma > 0; got D={D}, d_in={d_in}, sigma={sigma}"
            )
        self.D = int(D)
        self.d_in = int(d_in)
        self.sigma = float(sigma)
        self.scale = math.sqrt(2.0 / self.D)

        m = self.D // 2
        rng = Lcg(seed)
        inv_sigma = 1.0 / self.sigma
        omega = np.array([rng.normal() * inv_sigma for _ in range(m * self.d_in)])
        self.omega = omega.reshape(m, self.d_in)
        self.bias = np.array([rng.uniform() * 2.0 * math.pi for _ in range(m)])
        self.omega.setflags(write=False)
        self.bias.setflags(write=False)

    def _features(self, args: np.ndarray) -> np.ndarray:
        out = np.empty(args.shape[:-1] + (self.D,))
        out[..., 0::2] = self.scale * np.cos(args)
        out[..., 1::2] = self.scale * np.sin(args)
        return out

    def map(self, x) -> np.ndarray:
        """Map one input vector of length ``d_in`` to ``D`` features."""
        arr = np.asarray(x, dtype=float).reshape(-1)
        if arr.size != self.d_in:
            raise InvalidArgumentError(f"x must have length {self.d_in}")
        return self._features(self.omega @ arr + self.bias)

    def map_batch(self, X) -> np.ndarray:
        """Map N inputs (shape (N, d_in), or flat N*d_in) to an (N, D) array."""
        arr = np.asarray(X, dtype=float).reshape(-1)
        if arr.size < 1 or arr.size % self.d_in != 0:
            raise InvalidArgumentError(
                f"X must hold a positive multiple of {self.d_in} values"
            )
        rows = arr.reshape(-1, self.d_in)
        return self._features(rows @ self.omega.T + self.bias)


__all__ = ["RffContext"]