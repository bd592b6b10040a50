import math

import numpy as np
import pytest

from cheap import weights
from cheap.errors import DomainError, InvalidArgumentError


def test_laplacian_small_case():
    out = weights.laplacian(2)
    assert out[0] == 0.0
    assert out[1] == pytest.approx(2.0)


def test_laplacian_shape_and_monotone():
    out = weights.laplacian(64)
    assert out.shape == (64,)
    assert out[0] == 0.0
    assert np.all(np.diff(out) > 0)
    assert np.all(out < 4.0)


def test_fractional_zero_is_identity():
    assert np.array_equal(weights.fractional(16, 0.0), np.ones(16))


def test_fractional_square_matches_laplacian():
    lap = weights.laplacian(32)
    frac = weights.fractional(32, 2.0)
    assert np.allclose(frac[1:], lap[1:], rtol=1e-12)
    assert frac[0] < 1e-20


def test_fractional_inverse_orders_cancel():
    a = weights.fractional(32, 0.4)
    b = weights.fractional(32, -0.4)
    assert np.allclose(a * b, 1.0)


def test_kpca_hard():
    assert weights.kpca_hard(5, 2).tolist() == [1.0, 1.0, 0.0, 0.0, 0.0]
    assert np.array_equal(weights.kpca_hard(4, 0), np.zeros(4))
    assert np.array_equal(weights.kpca_hard(4, 4), np.ones(4))


def test_wiener_relations():
    lap = weights.laplacian(50)
    w = weights.wiener(50, 1.0)
    assert w[0] == 0.0
    assert np.all(np.diff(w) >= 0)
    assert np.all((w >= 0) & (w < 1))
    assert np.allclose(weights.wiener_ev(lap, 1.0), w)


def test_wiener_ev_clamps_negative():
    out = weights.wiener_ev([-3.0, 1.0, 2.0], 1.0)
    assert out[0] == 0.0
    assert out[1] == pytest.approx(0.5)


def test_specnorm_relations():
    lap = weights.laplacian(40)
    w = weights.specnorm(40, 1e-3)
    assert w[0] == pytest.approx(1.0 / math.sqrt(1e-3))
    assert np.allclose(weights.specnorm_ev(lap, 1e-3), w)
    assert np.allclose(w * w * (lap + 1e-3), 1.0)


def test_clgamma_matches_real_lgamma():
    for x in (0.3, 0.7, 1.5, 5.0, 10.25):
        val = weights.clgamma(x)
        assert val.real == pytest.approx(math.lgamma(x), rel=1e-10, abs=1e-12)
        assert abs(val.imag) < 1e-10


def test_clgamma_recurrence_real_part():
    z = complex(0.8, 1.7)
    lhs = weights.clgamma(z + 1).real - weights.clgamma(z).real
    assert lhs == pytest.approx(math.log(abs(z)), rel=1e-10)


def test_clgamma_critical_line_modulus():
    t = 2.0
    val = weights.clgamma(complex(0.5, t))
    assert 2 * val.real == pytest.approx(math.log(math.pi / math.cosh(math.pi * t)), rel=1e-10)


def test_mandelbrot_half_is_ones():
    assert np.allclose(weights.mandelbrot(32, 0.5), 1.0)


def test_mandelbrot_reciprocal_symmetry():
    a = weights.mandelbrot(24, 0.7)
    b = weights.mandelbrot(24, 0.3)
    assert np.allclose(a * b, 1.0, rtol=1e-10)
    assert a[0] == pytest.approx(math.gamma(0.7) / math.gamma(0.3))


def test_rmt_hard():
    out = weights.rmt_hard([1.0, 2.0, 3.0, 10.0], 1.0, 0.25)
    assert out.tolist() == [0.0, 0.0, 3.0, 10.0]


def test_rmt_shrink_bounds():
    lam = np.linspace(0.5, 20.0, 40)
    out = weights.rmt_shrink(lam, 1.0, 0.5)
    assert out.shape == (40,)
    lambda_plus = (1 + math.sqrt(0.5)) ** 2
    below = lam <= lambda_plus
    n_below = int(np.count_nonzero(below))
    assert 0 < n_below < 40
    assert out[below].tolist() == [0.0] * n_below
    assert int(np.count_nonzero(out)) == 40 - n_below
    assert float(out[~below].min()) > 0.0
    assert bool(np.all(out[~below] < lam[~below])) is True


def test_rmt_shrink_at_edge_is_zero():
    edge = (1 + math.sqrt(0.25)) ** 2
    out = weights.rmt_shrink([edge, edge], 1.0, 0.25)
    assert out.tolist() == [0.0, 0.0]


@pytest.mark.parametrize(
    "call",
    [
        lambda: weights.laplacian(1),
        lambda: weights.fractional(8, float("nan")),
        lambda: weights.fractional(1, 1.0),
        lambda: weights.kpca_hard(4, -1),
        lambda: weights.kpca_hard(4, 5),
        lambda: weights.wiener(8, 0.0),
        lambda: weights.wiener_ev([1.0, 2.0], -1.0),
        lambda: weights.wiener_ev([1.0], 1.0),
        lambda: weights.specnorm(8, 0.0),
        lambda: weights.specnorm_ev([1.0, 2.0], 0.0),
        lambda: weights.mandelbrot(8, 0.0),
        lambda: weights.mandelbrot(8, 1.0),
        lambda: weights.rmt_hard([1.0, 2.0], 0.0, 1.0),
        lambda: weights.rmt_shrink([1.0, 2.0], 1.0, 0.0),
    ],
)
def test_invalid_arguments(call):
    with pytest.raises(InvalidArgumentError):
        call()


@pytest.mark.parametrize(
    "call",
    [
        lambda: weights.wiener_ev([1.0, float("nan")], 1.0),
        lambda: weights.specnorm_ev([float("inf"), 1.0], 1.0),
        lambda: weights.rmt_hard([1.0, float("nan")], 1.0, 1.0),
        lambda: weights.rmt_shrink([float("inf"), 1.0], 1.0, 1.0),
    ],
)
def test_non_finite_eigenvalues(call):
    with pytest.raises(DomainError):
        call()