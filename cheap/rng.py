"""Deterministic 64-bit LCG with Box-Muller normal sampling."""

from __future__ import annotations

import math

_MASK64 = (1 << 64) - 1
_MULTIPLIER = 6364136223846793005
_INCREMENT = 1442695040888963407
_TWO_53 = float(1 << 53)


class Lcg:
    """Linear congruential generator; not suitable for cryptography."""

    def __init__(self, seed: int):
        self.state = int(seed) & _MASK64
        self._cached: float | None = None

    def uniform(self) -> float:
        """Return a uniform sample in the open interval (0, 1)."""
        self.state = (self.state * _MULTIPLIER + _INCREMENT) & _MASK64
        return ((self.state >> 11) + 0.5) / _TWO_53

    def normal(self) -> float:
        """Return a standard normal sample; samples are produced in pairs."""
        if self._cached is not None:
            value, self._cached = self._cached, None
            return value
        u1 = max(self.uniform(), 1e-300)
        u2 = self.uniform()
        r = math.sqrt(-2.0 * math.log(u1))
        theta = 2.0 * math.pi * u2
        self._cached = r * math.sin(theta)
        return r * math.cos(theta)