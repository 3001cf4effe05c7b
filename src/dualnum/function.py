"""
################################################
Mathematical functions (:mod:`dualnum.function`)
################################################

.. currentmodule:: dualnum.function

This module provides mathematical functions that accept plain reals, :mod:`mpmath`
numbers, and every number of :mod:`dualnum.autodiff` alike. Functions written with
these and the arithmetic operators can therefore be evaluated unmodified at a real
point or at a number carrying derivatives.

Plain reals are evaluated with NumPy, so arguments outside the real domain produce
``nan`` or ``inf`` instead of raising.

Power, exponents, and logarithmic functions
===========================================

.. autosummary::
    :toctree: generated/

    recip
    pow
    powi
    powf
    sqrt
    cbrt
    exp
    exp2
    exp_m1
    ln
    log
    log2
    log10
    ln_1p

Trigonometric and hyperbolic functions
======================================

.. autosummary::
    :toctree: generated/

    sin
    cos
    tan
    sin_cos
    asin
    acos
    atan
    atan2
    sinh
    cosh
    tanh
    asinh
    acosh
    atanh

Special functions
=================

.. autosummary::
    :toctree: generated/

    sph_j0
    sph_j1
    sph_j2
    bessel_j0
    bessel_j1
    bessel_j2

Miscellaneous
=============

.. autosummary::
    :toctree: generated/

    mul_add
    real
    nderiv
    zero_like
    one_like

"""

import math
from typing import Any, overload

import mpmath
import mpmath.ctx_mp_python
import numpy as np

from dualnum import _bessel
from dualnum.typing import DualNum

_NOT_OVERLOADED: Any = object()


def _overloaded(fun, *args):
    candidates = [x for x in args if hasattr(type(x), "_dualnum_overload_")]

    for z in sorted(candidates, key=lambda z: z.priority, reverse=True):
        if (res := type(z)._dualnum_overload_(z, fun, *args)) is not NotImplemented:
            return res

    if candidates:
        raise TypeError

    return _NOT_OVERLOADED


def _unary(fun, x, real_fun, mp_fun, *args):
    if (res := _overloaded(fun, x, *args)) is not _NOT_OVERLOADED:
        return res

    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mp_fun(x, *args)

        case float() | int() | np.floating() | np.integer():
            return real_fun(x, *args)

        case _:
            raise TypeError


def _ufunc(ufunc):
    return lambda x, *args: float(ufunc(float(x), *args))


@overload
def recip[T: DualNum](x: T, /) -> T: ...


@overload
def recip(x: float | int, /) -> float: ...


@overload
def recip(x: Any, /) -> Any: ...


def recip(x, /):
    """Reciprocal.

    Examples
    --------
    >>> recip(4.0)
    0.25
    >>> recip(0.0)
    inf
    """
    return _unary(recip, x, _ufunc(np.reciprocal), lambda x: 1 / x)


@overload
def pow[T: DualNum](x: T | float | int, y: T, /) -> T: ...


@overload
def pow[T: DualNum](x: T, y: float | int, /) -> T: ...


@overload
def pow(x: float | int, y: float | int, /) -> float: ...


@overload
def pow(x: Any, y: Any, /) -> Any: ...


def pow(x, y, /):
    """`x` raised to the power `y`.

    Integer exponents use :func:`powi`, real exponents :func:`powf`, and exponents
    carrying derivatives are computed as ``exp(y * ln(x))``.

    Examples
    --------
    >>> print(format(pow(3.25, 1.25), ".6f"))
    4.363693
    """
    if (res := _overloaded(pow, x, y)) is not _NOT_OVERLOADED:
        return res

    mpnumeric = mpmath.ctx_mp_python.mpnumeric

    match x, y:
        case (mpnumeric(), _) | (_, mpnumeric()):
            return mpmath.power(x, y)

        case (_, int() | np.integer()):
            return powi(x, int(y))

        case _:
            return powf(x, y)


@overload
def powi[T: DualNum](x: T, n: int, /) -> T: ...


@overload
def powi(x: float | int, n: int, /) -> float: ...


@overload
def powi(x: Any, n: int, /) -> Any: ...


def powi(x, n: int, /):
    """`x` raised to the integer power `n`.

    Examples
    --------
    >>> powi(2.0, -2)
    0.25
    """
    return _unary(
        powi,
        x,
        lambda x, n: float(np.power(float(x), n)),
        lambda x, n: x**n,
        n,
    )


@overload
def powf[T: DualNum](x: T | float | int, n: T, /) -> T: ...


@overload
def powf[T: DualNum](x: T, n: float | int, /) -> T: ...


@overload
def powf(x: float | int, n: float | int, /) -> float: ...


@overload
def powf(x: Any, n: Any, /) -> Any: ...


def powf(x, n, /):
    """`x` raised to the real power `n`.

    Examples
    --------
    >>> powf(4.0, 1.5)
    8.0
    """
    return _unary(
        powf,
        x,
        lambda x, n: float(np.power(float(x), float(n))),
        mpmath.power,
        n,
    )


@overload
def sqrt[T: DualNum](x: T, /) -> T: ...


@overload
def sqrt(x: float | int, /) -> float: ...


@overload
def sqrt(x: Any, /) -> Any: ...


def sqrt(x, /):
    """Square root.

    Examples
    --------
    >>> print(format(sqrt(2.0), ".6f"))
    1.414214
    """
    return _unary(sqrt, x, _ufunc(np.sqrt), mpmath.sqrt)


@overload
def cbrt[T: DualNum](x: T, /) -> T: ...


@overload
def cbrt(x: float | int, /) -> float: ...


@overload
def cbrt(x: Any, /) -> Any: ...


def cbrt(x, /):
    """Cube root."""
    return _unary(cbrt, x, _ufunc(np.cbrt), mpmath.cbrt)


@overload
def exp[T: DualNum](x: T, /) -> T: ...


@overload
def exp(x: float | int, /) -> float: ...


@overload
def exp(x: Any, /) -> Any: ...


def exp(x, /):
    """Exponential.

    Examples
    --------
    >>> print(format(exp(2), ".6f"))
    7.389056
    """
    return _unary(exp, x, _ufunc(np.exp), mpmath.exp)


@overload
def exp2[T: DualNum](x: T, /) -> T: ...


@overload
def exp2(x: float | int, /) -> float: ...


@overload
def exp2(x: Any, /) -> Any: ...


def exp2(x, /):
    """2 raised to the power `x`."""
    return _unary(exp2, x, _ufunc(np.exp2), lambda x: mpmath.power(2, x))


@overload
def exp_m1[T: DualNum](x: T, /) -> T: ...


@overload
def exp_m1(x: float | int, /) -> float: ...


@overload
def exp_m1(x: Any, /) -> Any: ...


def exp_m1(x, /):
    """``exp(x) - 1`` computed accurately for small `x`."""
    return _unary(exp_m1, x, _ufunc(np.expm1), mpmath.expm1)


@overload
def ln[T: DualNum](x: T, /) -> T: ...


@overload
def ln(x: float | int, /) -> float: ...


@overload
def ln(x: Any, /) -> Any: ...


def ln(x, /):
    """Natural logarithm.

    Examples
    --------
    >>> print(format(ln(5), ".6f"))
    1.609438
    """
    return _unary(ln, x, _ufunc(np.log), mpmath.log)


@overload
def log[T: DualNum](x: T | float | int, base: T, /) -> T: ...


@overload
def log[T: DualNum](x: T, base: float | int, /) -> T: ...


@overload
def log(x: float | int, base: float | int, /) -> float: ...


@overload
def log(x: Any, base: Any, /) -> Any: ...


def log(x, base, /):
    """Logarithm to the given base."""
    return _unary(
        log,
        x,
        lambda x, base: float(np.log(float(x)) / np.log(float(base))),
        mpmath.log,
        base,
    )


@overload
def log2[T: DualNum](x: T, /) -> T: ...


@overload
def log2(x: float | int, /) -> float: ...


@overload
def log2(x: Any, /) -> Any: ...


def log2(x, /):
    """Base-2 logarithm."""
    return _unary(log2, x, _ufunc(np.log2), lambda x: mpmath.log(x, 2))


@overload
def log10[T: DualNum](x: T, /) -> T: ...


@overload
def log10(x: float | int, /) -> float: ...


@overload
def log10(x: Any, /) -> Any: ...


def log10(x, /):
    """Base-10 logarithm."""
    return _unary(log10, x, _ufunc(np.log10), mpmath.log10)


@overload
def ln_1p[T: DualNum](x: T, /) -> T: ...


@overload
def ln_1p(x: float | int, /) -> float: ...


@overload
def ln_1p(x: Any, /) -> Any: ...


def ln_1p(x, /):
    """``ln(1 + x)`` computed accurately for small `x`."""
    return _unary(ln_1p, x, _ufunc(np.log1p), mpmath.log1p)


@overload
def sin[T: DualNum](x: T, /) -> T: ...


@overload
def sin(x: float | int, /) -> float: ...


@overload
def sin(x: Any, /) -> Any: ...


def sin(x, /):
    """Sine."""
    return _unary(sin, x, _ufunc(np.sin), mpmath.sin)


@overload
def cos[T: DualNum](x: T, /) -> T: ...


@overload
def cos(x: float | int, /) -> float: ...


@overload
def cos(x: Any, /) -> Any: ...


def cos(x, /):
    """Cosine."""
    return _unary(cos, x, _ufunc(np.cos), mpmath.cos)


@overload
def tan[T: DualNum](x: T, /) -> T: ...


@overload
def tan(x: float | int, /) -> float: ...


@overload
def tan(x: Any, /) -> Any: ...


def tan(x, /):
    """Tangent."""
    return _unary(tan, x, _ufunc(np.tan), mpmath.tan)


@overload
def sin_cos[T: DualNum](x: T, /) -> tuple[T, T]: ...


@overload
def sin_cos(x: float | int, /) -> tuple[float, float]: ...


@overload
def sin_cos(x: Any, /) -> tuple[Any, Any]: ...


def sin_cos(x, /):
    """Return the sine and the cosine of `x` as a pair.

    Examples
    --------
    >>> sin_cos(0.0)
    (0.0, 1.0)
    """
    return _unary(
        sin_cos,
        x,
        lambda x: (float(np.sin(float(x))), float(np.cos(float(x)))),
        lambda x: (mpmath.sin(x), mpmath.cos(x)),
    )


@overload
def asin[T: DualNum](x: T, /) -> T: ...


@overload
def asin(x: float | int, /) -> float: ...


@overload
def asin(x: Any, /) -> Any: ...


def asin(x, /):
    """Inverse sine."""
    return _unary(asin, x, _ufunc(np.arcsin), mpmath.asin)


@overload
def acos[T: DualNum](x: T, /) -> T: ...


@overload
def acos(x: float | int, /) -> float: ...


@overload
def acos(x: Any, /) -> Any: ...


def acos(x, /):
    """Inverse cosine."""
    return _unary(acos, x, _ufunc(np.arccos), mpmath.acos)


@overload
def atan[T: DualNum](x: T, /) -> T: ...


@overload
def atan(x: float | int, /) -> float: ...


@overload
def atan(x: Any, /) -> Any: ...


def atan(x, /):
    """Inverse tangent."""
    return _unary(atan, x, _ufunc(np.arctan), mpmath.atan)


@overload
def atan2[T: DualNum](y: T | float | int, x: T, /) -> T: ...


@overload
def atan2[T: DualNum](y: T, x: float | int, /) -> T: ...


@overload
def atan2(y: float | int, x: float | int, /) -> float: ...


@overload
def atan2(y: Any, x: Any, /) -> Any: ...


def atan2(y, x, /):
    """Four-quadrant inverse tangent of ``y / x``."""
    if (res := _overloaded(atan2, y, x)) is not _NOT_OVERLOADED:
        return res

    mpnumeric = mpmath.ctx_mp_python.mpnumeric

    match y, x:
        case (mpnumeric(), _) | (_, mpnumeric()):
            return mpmath.atan2(y, x)

        case _:
            return float(np.arctan2(float(y), float(x)))


@overload
def sinh[T: DualNum](x: T, /) -> T: ...


@overload
def sinh(x: float | int, /) -> float: ...


@overload
def sinh(x: Any, /) -> Any: ...


def sinh(x, /):
    """Hyperbolic sine."""
    return _unary(sinh, x, _ufunc(np.sinh), mpmath.sinh)


@overload
def cosh[T: DualNum](x: T, /) -> T: ...


@overload
def cosh(x: float | int, /) -> float: ...


@overload
def cosh(x: Any, /) -> Any: ...


def cosh(x, /):
    """Hyperbolic cosine."""
    return _unary(cosh, x, _ufunc(np.cosh), mpmath.cosh)


@overload
def tanh[T: DualNum](x: T, /) -> T: ...


@overload
def tanh(x: float | int, /) -> float: ...


@overload
def tanh(x: Any, /) -> Any: ...


def tanh(x, /):
    """Hyperbolic tangent."""
    return _unary(tanh, x, _ufunc(np.tanh), mpmath.tanh)


@overload
def asinh[T: DualNum](x: T, /) -> T: ...


@overload
def asinh(x: float | int, /) -> float: ...


@overload
def asinh(x: Any, /) -> Any: ...


def asinh(x, /):
    """Inverse hyperbolic sine."""
    return _unary(asinh, x, _ufunc(np.arcsinh), mpmath.asinh)


@overload
def acosh[T: DualNum](x: T, /) -> T: ...


@overload
def acosh(x: float | int, /) -> float: ...


@overload
def acosh(x: Any, /) -> Any: ...


def acosh(x, /):
    """Inverse hyperbolic cosine."""
    return _unary(acosh, x, _ufunc(np.arccosh), mpmath.acosh)


@overload
def atanh[T: DualNum](x: T, /) -> T: ...


@overload
def atanh(x: float | int, /) -> float: ...


@overload
def atanh(x: Any, /) -> Any: ...


def atanh(x, /):
    """Inverse hyperbolic tangent."""
    return _unary(atanh, x, _ufunc(np.arctanh), mpmath.atanh)


@overload
def sph_j0[T: DualNum](x: T, /) -> T: ...


@overload
def sph_j0(x: float | int, /) -> float: ...


@overload
def sph_j0(x: Any, /) -> Any: ...


def sph_j0(x, /):
    r"""Spherical Bessel function of the first kind of order 0.

    Notes
    -----
    The function is :math:`\sin x/x`; near the origin the Taylor polynomial
    :math:`1-x^2/6` is used instead.
    """
    return _unary(sph_j0, x, _bessel.sph_j0, _bessel.sph_j0)


@overload
def sph_j1[T: DualNum](x: T, /) -> T: ...


@overload
def sph_j1(x: float | int, /) -> float: ...


@overload
def sph_j1(x: Any, /) -> Any: ...


def sph_j1(x, /):
    """Spherical Bessel function of the first kind of order 1."""
    return _unary(sph_j1, x, _bessel.sph_j1, _bessel.sph_j1)


@overload
def sph_j2[T: DualNum](x: T, /) -> T: ...


@overload
def sph_j2(x: float | int, /) -> float: ...


@overload
def sph_j2(x: Any, /) -> Any: ...


def sph_j2(x, /):
    """Spherical Bessel function of the first kind of order 2."""
    return _unary(sph_j2, x, _bessel.sph_j2, _bessel.sph_j2)


@overload
def bessel_j0[T: DualNum](x: T, /) -> T: ...


@overload
def bessel_j0(x: float | int, /) -> float: ...


@overload
def bessel_j0(x: Any, /) -> Any: ...


def bessel_j0(x, /):
    """Bessel function of the first kind of order 0.

    Examples
    --------
    >>> print(format(bessel_j0(1.0), ".6f"))
    0.765198
    """
    return _unary(bessel_j0, x, _bessel.bessel_j0, lambda x: mpmath.besselj(0, x))


@overload
def bessel_j1[T: DualNum](x: T, /) -> T: ...


@overload
def bessel_j1(x: float | int, /) -> float: ...


@overload
def bessel_j1(x: Any, /) -> Any: ...


def bessel_j1(x, /):
    """Bessel function of the first kind of order 1."""
    return _unary(bessel_j1, x, _bessel.bessel_j1, lambda x: mpmath.besselj(1, x))


@overload
def bessel_j2[T: DualNum](x: T, /) -> T: ...


@overload
def bessel_j2(x: float | int, /) -> float: ...


@overload
def bessel_j2(x: Any, /) -> Any: ...


def bessel_j2(x, /):
    """Bessel function of the first kind of order 2."""
    return _unary(bessel_j2, x, _bessel.bessel_j2, lambda x: mpmath.besselj(2, x))


def mul_add(x, a, b, /):
    """Fused multiply-add ``x * a + b``.

    Examples
    --------
    >>> mul_add(2.0, 3.0, 1.0)
    7.0
    """
    if (res := _overloaded(mul_add, x, a, b)) is not _NOT_OVERLOADED:
        return res

    match x, a, b:
        case (float() | int(), float() | int(), float() | int()):
            return math.fma(x, a, b)

        case _:
            return x * a + b


def real(x, /):
    """Return the primitive real value of `x`.

    For a number carrying derivatives, the real part is followed through every level
    of nesting. Plain reals are returned as they are.

    Examples
    --------
    >>> from dualnum.autodiff import Dual
    >>> real(Dual(Dual(2.0, 1.0), Dual(1.0, 0.0)))
    2.0
    """
    if (res := _overloaded(real, x)) is not _NOT_OVERLOADED:
        return res

    return x


def nderiv(x, /) -> int:
    """Return the total number of derivative orders carried by `x`.

    Plain reals carry none.
    """
    if (res := _overloaded(nderiv, x)) is not _NOT_OVERLOADED:
        return res

    return 0


def zero_like(x, /):
    """Return the additive identity of the type of `x`."""
    if (res := _overloaded(zero_like, x)) is not _NOT_OVERLOADED:
        return res

    return type(x)(0)


def one_like(x, /):
    """Return the multiplicative identity of the type of `x`."""
    if (res := _overloaded(one_like, x)) is not _NOT_OVERLOADED:
        return res

    return type(x)(1)
