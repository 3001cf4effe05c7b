import math
import typing

import mpmath
import numpy as np
import pytest

from dualnum import function as dnf
from dualnum.autodiff import Dual, Dual2


def test_real_domain():
    assert math.isnan(dnf.ln(-1.0))
    assert math.isnan(dnf.sqrt(-4.0))
    assert dnf.recip(0.0) == math.inf
    assert math.isnan(dnf.asin(2.0))
    assert dnf.ln(0.0) == -math.inf

    x = dnf.ln(Dual(-1.0, 1.0))
    assert math.isnan(x.re) and x.eps == -1.0


def test_plain_values():
    assert dnf.exp(0) == 1.0
    assert dnf.log(8.0, 2.0) == pytest.approx(3.0)
    assert dnf.log2(8.0) == pytest.approx(3.0)
    assert dnf.cbrt(-27.0) == pytest.approx(-3.0)
    assert dnf.pow(2.0, 3) == 8.0
    assert dnf.pow(4.0, 0.5) == 2.0
    assert dnf.atan2(1.0, -1.0) == pytest.approx(0.75 * math.pi)
    assert dnf.mul_add(2.0, 3.0, 1.0) == 7.0
    assert isinstance(dnf.sin(np.float64(0.5)), float)


def test_mpmath():
    with mpmath.workdps(40):
        x = mpmath.mpf(2)
        assert dnf.sqrt(x) == mpmath.sqrt(2)
        assert mpmath.almosteq(dnf.pow(x, 0.5), mpmath.sqrt(2), 1e-38)
        assert dnf.recip(x) == mpmath.mpf("0.5")
        assert dnf.sin_cos(x) == (mpmath.sin(x), mpmath.cos(x))
        assert isinstance(dnf.bessel_j0(x), mpmath.mpf)

        for n, fun in enumerate((dnf.bessel_j0, dnf.bessel_j1, dnf.bessel_j2)):
            for y in (mpmath.mpf(1), mpmath.mpf("7.25")):
                assert mpmath.almosteq(fun(y), mpmath.besselj(n, y), 1e-35, 1e-35)


def test_signatures():
    for fun in (dnf.exp, dnf.sqrt, dnf.sin_cos, dnf.bessel_j1):
        assert len(typing.get_overloads(fun)) == 3

    for fun in (dnf.pow, dnf.powf, dnf.log, dnf.atan2):
        assert len(typing.get_overloads(fun)) == 4


def test_unsupported():
    with pytest.raises(TypeError):
        dnf.exp("1.0")


@pytest.mark.parametrize("x", [1e-7, 0.8, 3.2, 5.0, 7.5, -7.5, 12.0, 40.0])
def test_bessel(x):
    assert dnf.bessel_j0(x) == pytest.approx(float(mpmath.besselj(0, x)), abs=1e-13)
    assert dnf.bessel_j1(x) == pytest.approx(float(mpmath.besselj(1, x)), abs=1e-13)
    assert dnf.bessel_j2(x) == pytest.approx(float(mpmath.besselj(2, x)), abs=1e-13)


def test_sph_bessel():
    assert dnf.sph_j0(0.0) == 1.0
    assert dnf.sph_j1(0.0) == 0.0
    assert dnf.sph_j2(0.0) == 0.0

    for x in (0.3, 2.0, 9.5):
        for n, fun in enumerate((dnf.sph_j0, dnf.sph_j1, dnf.sph_j2)):
            expected = mpmath.sqrt(mpmath.pi / (2 * x)) * mpmath.besselj(n + 0.5, x)
            assert fun(x) == pytest.approx(float(expected), rel=1e-10)


def test_helpers():
    x = Dual(Dual2(1.5, 1.0, 0.0), Dual2(1.0, 0.0, 0.0))
    assert dnf.real(x) == 1.5
    assert dnf.nderiv(x) == 3
    assert dnf.nderiv(1.5) == 0

    zero = dnf.zero_like(x)
    assert type(zero) is Dual and type(zero.re) is Dual2
    assert dnf.real(zero) == 0.0 and dnf.real(dnf.one_like(x)) == 1.0
    assert dnf.zero_like(2.5) == 0.0 and dnf.one_like(mpmath.mpf(3)) == 1
