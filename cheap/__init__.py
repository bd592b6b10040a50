"""Spectral operators diagonalized by the DCT, with weight constructors, random Fourier features and benchmarks."""

__version__ = "0.1.0"

__all__ = ["errors", "rng", "weights", "context", "rff", "bench", "bench_stats"]