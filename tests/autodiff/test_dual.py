import math

import mpmath
import pytest

from dualnum import function as dnf
from dualnum.autodiff import (
    Dual,
    Dual2,
    Dual2Vec,
    Dual3,
    DualVec,
    HyperDual,
    HyperDualVec,
    HyperHyperDual,
)
from dualnum.derivative import U1, Derivative

LN2 = math.log(2)
LN10 = math.log(10)


def _tan(x):
    t = math.tan(x)
    s = 1 + t * t
    return (t, s, 2 * t * s, s * (2 + 6 * t * t))


def _tanh(x):
    t = math.tanh(x)
    s = 1 - t * t
    return (t, s, -2 * t * s, s * (6 * t * t - 2))


# function, point, (f, f', f'', f''')
ELEMENTARY = [
    (dnf.recip, 0.6, lambda x: (1 / x, -(x**-2), 2 * x**-3, -6 * x**-4)),
    (
        dnf.sqrt,
        0.6,
        lambda x: (x**0.5, 0.5 * x**-0.5, -0.25 * x**-1.5, 0.375 * x**-2.5),
    ),
    (
        dnf.cbrt,
        0.6,
        lambda x: (
            x ** (1 / 3),
            x ** (-2 / 3) / 3,
            -2 / 9 * x ** (-5 / 3),
            10 / 27 * x ** (-8 / 3),
        ),
    ),
    (dnf.exp, 0.6, lambda x: (math.exp(x),) * 4),
    (
        dnf.exp2,
        0.6,
        lambda x: (2**x, LN2 * 2**x, LN2**2 * 2**x, LN2**3 * 2**x),
    ),
    (dnf.exp_m1, 0.6, lambda x: (math.expm1(x),) + (math.exp(x),) * 3),
    (dnf.ln, 0.6, lambda x: (math.log(x), 1 / x, -(x**-2), 2 * x**-3)),
    (
        dnf.log2,
        0.6,
        lambda x: (math.log2(x), 1 / (x * LN2), -1 / (x * x * LN2), 2 / (x**3 * LN2)),
    ),
    (
        dnf.log10,
        0.6,
        lambda x: (
            math.log10(x),
            1 / (x * LN10),
            -1 / (x * x * LN10),
            2 / (x**3 * LN10),
        ),
    ),
    (
        dnf.ln_1p,
        0.6,
        lambda x: (math.log1p(x), 1 / (1 + x), -((1 + x) ** -2), 2 * (1 + x) ** -3),
    ),
    (
        dnf.sin,
        0.6,
        lambda x: (math.sin(x), math.cos(x), -math.sin(x), -math.cos(x)),
    ),
    (
        dnf.cos,
        0.6,
        lambda x: (math.cos(x), -math.sin(x), -math.cos(x), math.sin(x)),
    ),
    (dnf.tan, 0.6, _tan),
    (
        dnf.asin,
        0.6,
        lambda x: (
            math.asin(x),
            (1 - x * x) ** -0.5,
            x * (1 - x * x) ** -1.5,
            (2 * x * x + 1) * (1 - x * x) ** -2.5,
        ),
    ),
    (
        dnf.acos,
        0.6,
        lambda x: (
            math.acos(x),
            -((1 - x * x) ** -0.5),
            -x * (1 - x * x) ** -1.5,
            -(2 * x * x + 1) * (1 - x * x) ** -2.5,
        ),
    ),
    (
        dnf.atan,
        0.6,
        lambda x: (
            math.atan(x),
            1 / (1 + x * x),
            -2 * x / (1 + x * x) ** 2,
            (6 * x * x - 2) / (1 + x * x) ** 3,
        ),
    ),
    (
        dnf.sinh,
        0.6,
        lambda x: (math.sinh(x), math.cosh(x), math.sinh(x), math.cosh(x)),
    ),
    (
        dnf.cosh,
        0.6,
        lambda x: (math.cosh(x), math.sinh(x), math.cosh(x), math.sinh(x)),
    ),
    (dnf.tanh, 0.6, _tanh),
    (
        dnf.asinh,
        0.6,
        lambda x: (
            math.asinh(x),
            (x * x + 1) ** -0.5,
            -x * (x * x + 1) ** -1.5,
            (2 * x * x - 1) * (x * x + 1) ** -2.5,
        ),
    ),
    (
        dnf.acosh,
        1.7,
        lambda x: (
            math.acosh(x),
            (x * x - 1) ** -0.5,
            -x * (x * x - 1) ** -1.5,
            (2 * x * x + 1) * (x * x - 1) ** -2.5,
        ),
    ),
    (
        dnf.atanh,
        0.6,
        lambda x: (
            math.atanh(x),
            1 / (1 - x * x),
            2 * x / (1 - x * x) ** 2,
            (6 * x * x + 2) / (1 - x * x) ** 3,
        ),
    ),
    (
        lambda x: dnf.powi(x, 3),
        0.6,
        lambda x: (x**3, 3 * x**2, 6 * x, 6.0),
    ),
    (
        lambda x: dnf.powi(x, -2),
        0.6,
        lambda x: (x**-2, -2 * x**-3, 6 * x**-4, -24 * x**-5),
    ),
    (
        lambda x: dnf.powf(x, 2.5),
        0.6,
        lambda x: (x**2.5, 2.5 * x**1.5, 3.75 * x**0.5, 1.875 * x**-0.5),
    ),
    (
        lambda x: dnf.powf(x, -1.5),
        0.6,
        lambda x: (x**-1.5, -1.5 * x**-2.5, 3.75 * x**-3.5, -13.125 * x**-4.5),
    ),
    (
        lambda x: dnf.log(x, 3.0),
        0.6,
        lambda x: (
            math.log(x, 3),
            1 / (x * math.log(3)),
            -1 / (x * x * math.log(3)),
            2 / (x**3 * math.log(3)),
        ),
    ),
]


def _dual(fun, x):
    y = fun(Dual.from_re(x).derivative())
    return (y.re, y.eps)


def _dual_vec(fun, x):
    y = fun(DualVec.from_re(x).derivative(0, U1))
    return (y.re, y.eps.value[0, 0])


def _dual2(fun, x):
    y = fun(Dual2.from_re(x).derivative())
    return (y.re, y.v1, y.v2)


def _dual2_vec(fun, x):
    y = fun(Dual2Vec.from_re(x).derivative(0, U1))
    return (y.re, y.v1.value[0, 0], y.v2.value[0, 0])


def _dual3(fun, x):
    y = fun(Dual3.from_re(x).derivative())
    return (y.re, y.v1, y.v2, y.v3)


def _hyperdual(fun, x):
    y = fun(HyperDual.from_re(x).derivative1().derivative2())
    return (y.re, y.eps1, y.eps1eps2)


def _hyperdual_vec(fun, x):
    y = fun(HyperDualVec.from_re(x).derivative1(0, U1).derivative2(0, U1))
    return (y.re, y.eps1.value[0, 0], y.eps1eps2.value[0, 0])


def _hyperhyperdual(fun, x):
    seeded = HyperHyperDual.from_re(x).derivative1().derivative2().derivative3()
    y = fun(seeded)
    return (y.re, y.eps1, y.eps1eps2, y.eps1eps2eps3)


SHAPES = [
    _dual,
    _dual_vec,
    _dual2,
    _dual2_vec,
    _dual3,
    _hyperdual,
    _hyperdual_vec,
    _hyperhyperdual,
]


@pytest.mark.parametrize("shape", SHAPES, ids=lambda f: f.__name__.strip("_"))
@pytest.mark.parametrize(
    "fun, x, expected", ELEMENTARY, ids=[str(i) for i in range(len(ELEMENTARY))]
)
def test_elementary(shape, fun, x, expected):
    actual = shape(fun, x)
    assert actual == pytest.approx(expected(x)[: len(actual)], rel=1e-12)


def _sph(n):
    return lambda t: mpmath.sqrt(mpmath.pi / (2 * t)) * mpmath.besselj(n + 0.5, t)


def _cyl(n):
    return lambda t: mpmath.besselj(n, t)


# function, reference, point, absolute tolerance
BESSEL = [
    (dnf.sph_j0, _sph(0), 1.3, 1e-12),
    (dnf.sph_j1, _sph(1), 1.3, 1e-12),
    (dnf.sph_j2, _sph(2), 1.3, 1e-12),
    (dnf.sph_j2, _sph(2), 6.0, 1e-12),
    (dnf.bessel_j0, _cyl(0), 3.2, 1e-8),
    (dnf.bessel_j1, _cyl(1), 3.2, 1e-8),
    (dnf.bessel_j2, _cyl(2), 3.2, 1e-8),
    (dnf.bessel_j0, _cyl(0), 7.5, 1e-8),
    (dnf.bessel_j1, _cyl(1), 7.5, 1e-8),
    (dnf.bessel_j2, _cyl(2), 7.5, 1e-8),
]


@pytest.mark.parametrize("shape", SHAPES, ids=lambda f: f.__name__.strip("_"))
@pytest.mark.parametrize(
    "fun, reference, x, tol", BESSEL, ids=[str(i) for i in range(len(BESSEL))]
)
def test_bessel_orders(shape, fun, reference, x, tol):
    actual = shape(fun, x)

    with mpmath.workdps(30):
        expected = [float(mpmath.diff(reference, x, k)) for k in range(len(actual))]

    assert actual == pytest.approx(tuple(expected), abs=tol)


@pytest.mark.parametrize("shape", SHAPES, ids=lambda f: f.__name__.strip("_"))
def test_product_rule(shape):
    a = shape(lambda x: dnf.sin(x) * dnf.exp(x), 0.6)
    s, c, e = math.sin(0.6), math.cos(0.6), math.exp(0.6)
    expected = (s * e, (s + c) * e, 2 * c * e, 2 * (c - s) * e)
    assert a == pytest.approx(expected[: len(a)], rel=1e-12)


@pytest.mark.parametrize("shape", SHAPES, ids=lambda f: f.__name__.strip("_"))
def test_division(shape):
    a = shape(lambda x: (dnf.exp(x) / dnf.atan(x)) * dnf.atan(x), 0.6)
    assert a == pytest.approx((math.exp(0.6),) * len(a), rel=1e-12)

    b = shape(lambda x: 1.0 / x, 0.6)
    assert b == pytest.approx(shape(dnf.recip, 0.6), rel=1e-12)


def test_atan2():
    x = Dual.from_re(0.6).derivative()
    y = dnf.atan2(x, -1.0)
    assert y.re == pytest.approx(math.atan2(0.6, -1.0))
    assert y.eps == pytest.approx(-1.0 / 1.36)

    y = dnf.atan2(1.0, x)
    assert y.re == pytest.approx(math.atan2(1.0, 0.6))
    assert y.eps == pytest.approx(-1.0 / 1.36)


def test_pow():
    x = Dual.from_re(1.5).derivative()
    y = Dual.from_re(2.5).derivative()
    z = x**y
    assert z.re == pytest.approx(1.5**2.5)
    assert z.eps == pytest.approx(1.5**2.5 * (2.5 / 1.5 + math.log(1.5)))

    z = 2.0**x
    assert z.re == pytest.approx(2.0**1.5)
    assert z.eps == pytest.approx(2.0**1.5 * LN2)

    assert (x**0).re == 1.0 and (x**0).eps == 0.0
    assert (x**1).eps == 1.0
    assert (x**2).eps == 3.0


def test_number_exponent_and_base():
    n = Dual.from_re(2.5).derivative()
    y = dnf.powf(2.0, n)
    assert y.re == pytest.approx(2.0**2.5)
    assert y.eps == pytest.approx(2.0**2.5 * LN2)

    x = Dual.from_re(1.5).derivative()
    y = dnf.powf(x, n)
    assert y.eps == pytest.approx(1.5**2.5 * (2.5 / 1.5 + math.log(1.5)))

    b = Dual.from_re(2.0).derivative()
    y = dnf.log(8.0, b)
    assert y.re == pytest.approx(3.0)
    assert y.eps == pytest.approx(-3.0 / (2.0 * LN2))

    with pytest.raises(TypeError):
        dnf.powi(2.0, n)


def test_bessel():
    for x in (0.8, 3.2, 7.5, -7.5, 12.0):
        y = dnf.bessel_j0(Dual.from_re(x).derivative())
        assert y.re == pytest.approx(float(mpmath.besselj(0, x)), abs=1e-13)
        assert y.eps == pytest.approx(-float(mpmath.besselj(1, x)), abs=1e-9)

        y = dnf.bessel_j1(Dual.from_re(x).derivative())
        j0, j1 = float(mpmath.besselj(0, x)), float(mpmath.besselj(1, x))
        assert y.re == pytest.approx(j1, abs=1e-13)
        assert y.eps == pytest.approx(j0 - j1 / x, abs=1e-9)

        y = dnf.bessel_j2(Dual.from_re(x).derivative())
        j2 = float(mpmath.besselj(2, x))
        assert y.re == pytest.approx(j2, abs=1e-12)
        assert y.eps == pytest.approx(j1 - 2 * j2 / x, abs=1e-9)


def test_sph_bessel():
    x = 1.3
    s, c = math.sin(x), math.cos(x)
    j0 = s / x
    j1 = s / x**2 - c / x
    j2 = (3 / x**2 - 1) * s / x - 3 * c / x**2

    y = dnf.sph_j0(Dual.from_re(x).derivative())
    assert (y.re, y.eps) == pytest.approx((j0, -j1), rel=1e-12)

    y = dnf.sph_j1(Dual.from_re(x).derivative())
    assert (y.re, y.eps) == pytest.approx((j1, j0 - 2 * j1 / x), rel=1e-12)

    y = dnf.sph_j2(Dual.from_re(x).derivative())
    assert (y.re, y.eps) == pytest.approx((j2, j1 - 3 * j2 / x), rel=1e-12)

    y = dnf.sph_j1(Dual.from_re(0.0).derivative())
    assert (y.re, y.eps) == pytest.approx((0.0, 1 / 3))


def test_nested():
    x = Dual(Dual(0.6, 1.0), Dual(1.0, 0.0))
    y = dnf.sin(x)
    assert y.re.re == pytest.approx(math.sin(0.6))
    assert y.eps.re == pytest.approx(math.cos(0.6))
    assert y.eps.eps == pytest.approx(-math.sin(0.6))
    assert x.priority == 1 and x.nderiv == 2
    assert dnf.real(y) == pytest.approx(math.sin(0.6))

    a = Dual(Dual2(1.0, 1.0, 0.0), Dual2(2.0, 0.0, 0.0))
    b = Dual2(3.0, 1.0, 1.0)
    c = a + b
    assert isinstance(c, Dual) and isinstance(c.re, Dual2)
    assert (c.re.re, c.re.v1, c.re.v2) == (4.0, 2.0, 1.0)
    assert (b * a).eps.re == 6.0

    with pytest.raises(TypeError):
        Dual(1.0, 1.0) + Dual2(1.0, 1.0, 0.0)


def test_mpmath():
    with mpmath.workdps(30):
        x = Dual.from_re(mpmath.mpf(2)).derivative()
        y = dnf.sqrt(x)
        assert isinstance(y.re, mpmath.mpf)
        assert mpmath.almosteq(y.re, mpmath.sqrt(2), 1e-28)
        assert mpmath.almosteq(y.eps, 1 / (2 * mpmath.sqrt(2)), 1e-28)


def test_comparison():
    a = Dual(1.0, 5.0)
    b = Dual(2.0, -1.0)
    assert a < b and a <= b and b > a and b >= a
    assert a == Dual(1.0, -3.0)
    assert a == 1.0 and 0.5 < a
    assert abs(Dual(-2.0, 1.0)).eps == -1.0
    assert float(Dual(Dual(2.5, 1.0), Dual(0.0, 0.0))) == 2.5


def test_str():
    x = Dual.from_re(5.0).derivative()
    assert str(x * x + 1) == "26.0 + 10.0ε"
    assert repr(Dual(1.0, 2.0)) == "Dual(re=1.0, eps=2.0)"

    x = HyperDual.from_re(3.0).derivative1()
    y = HyperDual.from_re(2.0).derivative2()
    assert str(x * x * y) == "18.0 + 12.0ε1 + 9.0ε2 + 6.0ε1ε2"

    x = DualVec(2.0, Derivative.some([1.0, 0.0]))
    assert str(x) == "2.0 + [1.0, 0.0]ε"
    assert str(DualVec.from_re(2.0)) == "2.0"


def test_serialization():
    values = [
        Dual2(1.5, 2.0, 3.0),
        Dual3(1.0, 2.0, 3.0, 4.0),
        HyperHyperDual(1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0),
        Dual(Dual(1.0, 2.0), Dual(3.0, 4.0)),
    ]

    for x in values:
        record = x.to_dict()
        y = type(x).from_dict(record)
        assert type(y) is type(x)
        assert y.to_dict() == record

    record = Dual(Dual(1.0, 2.0), Dual(3.0, 4.0)).to_dict()
    assert record == {"re": {"re": 1.0, "eps": 2.0}, "eps": {"re": 3.0, "eps": 4.0}}
    assert list(HyperDual(1.0, 2.0, 3.0, 4.0).to_dict()) == [
        "re",
        "eps1",
        "eps2",
        "eps1eps2",
    ]

    x = Dual2Vec(1.0, Derivative.some([[1.0, 2.0]]), Derivative.none())
    y = Dual2Vec.from_dict(x.to_dict())
    assert x.to_dict() == {"re": 1.0, "v1": [[1.0, 2.0]], "v2": None}
    assert y.v1 == x.v1 and y.v2.is_none


def test_serialization_vector():
    values = [
        DualVec(2.0, Derivative.some([1.0, 3.0])),
        DualVec(2.0, Derivative.none()),
        HyperDualVec(
            1.0,
            Derivative.some([1.0, 2.0]),
            Derivative.some([[3.0, 4.0, 5.0]]),
            Derivative.some([[6.0, 7.0, 8.0], [9.0, 10.0, 11.0]]),
        ),
        HyperDualVec(
            Dual(1.0, 2.0),
            Derivative.some([Dual(1.0, 0.0), Dual(0.0, 1.0)]),
            Derivative.none(),
            Derivative.none(),
        ),
    ]

    for x in values:
        record = x.to_dict()
        y = type(x).from_dict(record)
        assert type(y) is type(x)
        assert y.to_dict() == record

    assert values[0].to_dict() == {"re": 2.0, "eps": [[1.0], [3.0]]}

    y = HyperDualVec.from_dict(values[3].to_dict())
    assert type(y.re) is Dual and y.eps2.is_none
    assert y.eps1.shape == (2, 1)
    assert type(y.eps1.value[1, 0]) is Dual and y.eps1.value[1, 0].eps == 1.0


def test_sealed():
    with pytest.raises(RuntimeError):

        class Foo(Dual):
            pass
