[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cheap"
version = "0.1.0"
description = "Spectral operators diagonalized by the DCT: apply, Sinkhorn transport, Toeplitz solves, spectral weights and random Fourier features"
requires-python = ">=3.10"
keywords = ["dct", "spectral", "sinkhorn", "optimal-transport", "toeplitz", "random-fourier-features", "fbm"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cheap-bench = "cheap.bench:main"
cheap-bench-stats = "cheap.bench_stats:main"

[tool.hatch.build.targets.wheel]
packages = ["cheap"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
