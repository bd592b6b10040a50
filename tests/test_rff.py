import math

import numpy as np
import pytest

from cheap.errors import InvalidArgumentError
from cheap.rff import RffContext
from cheap.rng import Lcg


@pytest.mark.parametrize(
    "D,d_in,sigma",
    [(0, 1, 1.0), (3, 1, 1.0), (7, 2, 1.0), (4, 0, 1.0), (4, 1, 0.0), (4, 1, -1.0)],
)
def test_init_rejects_bad_arguments(D, d_in, sigma):
    with pytest.raises(InvalidArgumentError):
        RffContext(D, d_in, sigma, 42)


def test_parameters_follow_generator():
    rff = RffContext(4, 1, 2.0, 42)
    rng = Lcg(42)
    expected_omega = [rng.normal() / 2.0, rng.normal() / 2.0]
    expected_bias = [rng.uniform() * 2.0 * math.pi, rng.uniform() * 2.0 * math.pi]
    assert rff.omega.shape == (2, 1)
    assert np.allclose(rff.omega[:, 0], expected_omega)
    assert np.allclose(rff.bias, expected_bias)
    assert rff.scale == pytest.approx(math.sqrt(2.0 / 4))


def test_map_is_deterministic_for_seed():
    a = RffContext(64, 2, 1.0, 7).map([0.3, -0.1])
    b = RffContext(64, 2, 1.0, 7).map([0.3, -0.1])
    c = RffContext(64, 2, 1.0, 8).map([0.3, -0.1])
    assert np.array_equal(a, b)
    assert not np.allclose(a, c)


def test_feature_norm_is_one():
    rff = RffContext(256, 3, 1.5, 42)
    z = rff.map([0.1, 0.2, 0.3])
    assert z.shape == (256,)
    assert float(z @ z) == pytest.approx(1.0)


def test_interleaved_cos_sin_pairs():
    rff = RffContext(8, 1, 1.0, 3)
    z = rff.map([0.5])
    pairs = z[0::2] ** 2 + z[1::2] ** 2
    assert np.allclose(pairs, rff.scale ** 2)


def test_kernel_approximation():
    rff = RffContext(8192, 1, 1.0, 42)
    x, y = rff.map([0.0]), rff.map([1.0])
    assert float(x @ y) == pytest.approx(math.exp(-0.5), abs=0.05)


def test_batch_matches_single_maps():
    rff = RffContext(16, 2, 1.0, 42)
    X = np.array([[0.0, 1.0], [0.5, -0.5], [2.0, 3.0]])
    Z = rff.map_batch(X)
    assert Z.shape == (3, 16)
    for row, z in zip(X, Z):
        assert np.allclose(rff.map(row), z)


def test_batch_accepts_flat_input():
    rff = RffContext(8, 1, 1.0, 42)
    X = np.arange(5) * 0.001
    Z = rff.map_batch(X)
    assert Z.shape == (5, 8)
    assert np.allclose(Z[2], rff.map([X[2]]))


def test_wrong_sizes_raise():
    rff = RffContext(8, 2, 1.0, 42)
    with pytest.raises(InvalidArgumentError):
        rff.map([1.0])
    with pytest.raises(InvalidArgumentError):
        rff.map_batch([])
    with pytest.raises(InvalidArgumentError):
        rff.map_batch([1.0, 2.0, 3.0])