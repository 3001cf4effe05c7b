from collections.abc import Callable, Sequence
from typing import Any

import numpy as np
import numpy.typing as npt

from dualnum.autodiff._base import DualNumber
from dualnum.autodiff.dual import (
    Dual,
    Dual2,
    Dual2Vec,
    Dual3,
    DualVec,
    HyperDual,
    HyperDualVec,
    HyperHyperDual,
)
from dualnum.derivative import U1, Dyn, asarray


def _lift[T: DualNumber](template: T, value: Any) -> T:
    # results that do not depend on the seeded variables are constants
    if isinstance(value, DualNumber) and value.priority >= template.priority:
        return value  # type: ignore

    return template.zero() + value


def _template[T: DualNumber](cls: type[T], args: npt.NDArray[np.object_]) -> T:
    return args[0] if len(args) else cls.from_re(0.0)


def _seed_vector(cls, x: Sequence[Any], seed) -> npt.NDArray[np.object_]:
    dim = Dyn(len(x))
    result = np.empty(dim.value, dtype=np.object_)

    for i, xi in enumerate(x):
        result[i] = seed(cls.from_re(xi), i, dim)

    return result


def first_derivative(g: Callable[[Any], Any], x: Any) -> tuple[Any, Any] | None:
    """Compute the value and the first derivative of a univariate function.

    Parameters
    ----------
    g : Callable
        Function to be differentiated.
    x
        Point at which `g` is differentiated.

    Returns
    -------
    f
        Value of `g` at `x`.
    df
        Derivative of `g` at `x`.

    Notes
    -----
    If `g` returns ``None``, so does this function. Exceptions raised by `g`
    propagate unchanged.

    Examples
    --------
    >>> from dualnum import function as dnf
    >>> f, df = first_derivative(lambda x: x**2 + dnf.sqrt(x + 3), 1.2)
    >>> print(format(f, ".6g"), format(df, ".6g"))
    3.48939 2.64398

    Nesting yields higher derivatives.

    >>> ddf = first_derivative(lambda x: first_derivative(dnf.exp, x)[1], 0.0)[1]
    >>> ddf
    1.0
    """
    x = Dual.from_re(x).derivative()

    if (res := g(x)) is None:
        return None

    res = _lift(x, res)
    return res.re, res.eps


def second_derivative(g: Callable[[Any], Any], x: Any) -> tuple[Any, Any, Any] | None:
    """Compute the value and the first two derivatives of a univariate function.

    Returns
    -------
    f, df, d2f
        Value, first, and second derivative of `g` at `x`.
    """
    x = Dual2.from_re(x).derivative()

    if (res := g(x)) is None:
        return None

    res = _lift(x, res)
    return res.re, res.v1, res.v2


def third_derivative(
    g: Callable[[Any], Any], x: Any
) -> tuple[Any, Any, Any, Any] | None:
    """Compute the value and the first three derivatives of a univariate function.

    Returns
    -------
    f, df, d2f, d3f
        Value, first, second, and third derivative of `g` at `x`.

    Examples
    --------
    >>> third_derivative(lambda x: x**3, 5.0)
    (125.0, 75.0, 30.0, 6.0)
    """
    x = Dual3.from_re(x).derivative()

    if (res := g(x)) is None:
        return None

    res = _lift(x, res)
    return res.re, res.v1, res.v2, res.v3


def gradient(
    g: Callable[[npt.NDArray[np.object_]], Any], x: Sequence[Any]
) -> tuple[Any, npt.NDArray] | None:
    """Compute the value and the gradient of a scalar-valued function.

    `g` is evaluated once at a vector of :class:`DualVec`, each seeded with its own
    basis direction.

    Parameters
    ----------
    g : Callable
        Function to be differentiated. It receives a one-dimensional object array.
    x : Sequence
        Point at which `g` is differentiated.

    Returns
    -------
    f
        Value of `g` at `x`.
    grad : ndarray
        Gradient of `g` at `x`.

    Examples
    --------
    >>> from dualnum import function as dnf
    >>> f, grad = gradient(lambda x: dnf.sqrt(x[0] * x[1] + 3), [0.5, 1.0])
    >>> print(format(grad[0], ".6g"), format(grad[1], ".6g"))
    0.267261 0.133631
    """
    args = _seed_vector(DualVec, x, lambda xi, i, dim: xi.derivative(i, dim))

    if (res := g(args)) is None:
        return None

    res = _lift(_template(DualVec, args), res)
    grad = res.eps.unwrap_generic(len(args), U1, like=res.re)[:, 0]
    return res.re, asarray(grad)


def jacobian(
    g: Callable[[npt.NDArray[np.object_]], Sequence[Any]], x: Sequence[Any]
) -> tuple[npt.NDArray, npt.NDArray] | None:
    """Compute the value and the Jacobian matrix of a vector-valued function.

    Parameters
    ----------
    g : Callable
        Function to be differentiated. It receives a one-dimensional object array
        and returns a sequence.
    x : Sequence
        Point at which `g` is differentiated.

    Returns
    -------
    f : ndarray
        Value of `g` at `x`.
    jac : ndarray
        Jacobian matrix; the `i`-th row is the gradient of the `i`-th component.

    Examples
    --------
    >>> f, jac = jacobian(lambda x: (x[0] * x[1], x[0] - x[1]), [2.0, 3.0])
    >>> f.tolist()
    [6.0, -1.0]
    >>> jac.tolist()
    [[3.0, 2.0], [1.0, -1.0]]
    """
    args = _seed_vector(DualVec, x, lambda xi, i, dim: xi.derivative(i, dim))

    if (res := g(args)) is None:
        return None

    template = _template(DualVec, args)
    res = [_lift(template, y) for y in res]
    values = [y.re for y in res]
    rows = [y.eps.unwrap_generic(len(args), U1, like=y.re)[:, 0] for y in res]
    return asarray(values), asarray(rows).reshape(len(res), len(args))


def hessian(
    g: Callable[[npt.NDArray[np.object_]], Any], x: Sequence[Any]
) -> tuple[Any, npt.NDArray, npt.NDArray] | None:
    """Compute the value, the gradient, and the Hessian matrix of a scalar-valued
    function.

    Returns
    -------
    f
        Value of `g` at `x`.
    grad : ndarray
        Gradient of `g` at `x`.
    hess : ndarray
        Hessian matrix of `g` at `x`.

    Examples
    --------
    >>> from dualnum import function as dnf
    >>> f, grad, hess = hessian(lambda x: dnf.sqrt(x[0] ** 2 + x[1] ** 2), [4.0, 3.0])
    >>> f
    5.0
    >>> hess.shape
    (2, 2)
    """
    args = _seed_vector(Dual2Vec, x, lambda xi, i, dim: xi.derivative(i, dim))

    if (res := g(args)) is None:
        return None

    n = len(args)
    res = _lift(_template(Dual2Vec, args), res)
    grad = res.v1.unwrap_generic(U1, n, like=res.re)[0, :]
    hess = res.v2.unwrap_generic(n, n, like=res.re)
    return res.re, asarray(grad), asarray(hess)


def second_partial_derivative(
    g: Callable[[Any, Any], Any], x: Any, y: Any
) -> tuple[Any, Any, Any, Any] | None:
    """Compute the value, the first partial derivatives, and the mixed second
    partial derivative of a bivariate function.

    Returns
    -------
    f, dfdx, dfdy, d2fdxdy
    """
    x = HyperDual.from_re(x).derivative1()
    y = HyperDual.from_re(y).derivative2()

    if (res := g(x, y)) is None:
        return None

    res = _lift(x, res)
    return res.re, res.eps1, res.eps2, res.eps1eps2


def partial_hessian(
    g: Callable[[npt.NDArray[np.object_], npt.NDArray[np.object_]], Any],
    x: Sequence[Any],
    y: Sequence[Any],
) -> tuple[Any, npt.NDArray, npt.NDArray, npt.NDArray] | None:
    """Compute the value, the gradients, and the mixed second partial derivatives of
    a function of two vectors.

    Parameters
    ----------
    g : Callable
        Function to be differentiated. It receives two one-dimensional object arrays.
    x, y : Sequence
        Point at which `g` is differentiated.

    Returns
    -------
    f
        Value of `g`.
    dfdx : ndarray
        Gradient with respect to `x`.
    dfdy : ndarray
        Gradient with respect to `y`.
    d2fdxdy : ndarray
        Matrix whose ``(i, j)`` entry is the derivative with respect to ``x[i]`` and
        ``y[j]``.
    """
    x = _seed_vector(HyperDualVec, x, lambda xi, i, dim: xi.derivative1(i, dim))
    y = _seed_vector(HyperDualVec, y, lambda yi, i, dim: yi.derivative2(i, dim))

    if (res := g(x, y)) is None:
        return None

    m, n = len(x), len(y)
    res = _lift(_template(HyperDualVec, x), res)
    dfdx = res.eps1.unwrap_generic(m, U1, like=res.re)[:, 0]
    dfdy = res.eps2.unwrap_generic(U1, n, like=res.re)[0, :]
    d2fdxdy = res.eps1eps2.unwrap_generic(m, n, like=res.re)
    return res.re, asarray(dfdx), asarray(dfdy), asarray(d2fdxdy)


def third_partial_derivative(
    g: Callable[[Any, Any, Any], Any], x: Any, y: Any, z: Any
) -> tuple[Any, ...] | None:
    """Compute every square-free partial derivative of a trivariate function up to
    third order.

    Returns
    -------
    tuple
        ``(f, dfdx, dfdy, dfdz, d2fdxdy, d2fdxdz, d2fdydz, d3fdxdydz)``.

    Examples
    --------
    >>> third_partial_derivative(lambda x, y, z: x * y * z, 1.0, 2.0, 3.0)
    (6.0, 6.0, 3.0, 2.0, 3.0, 2.0, 1.0, 1.0)
    """
    x = HyperHyperDual.from_re(x).derivative1()
    y = HyperHyperDual.from_re(y).derivative2()
    z = HyperHyperDual.from_re(z).derivative3()

    if (res := g(x, y, z)) is None:
        return None

    res = _lift(x, res)
    return (res.re, *res._perturbations())


def third_partial_derivative_vec(
    g: Callable[[npt.NDArray[np.object_]], Any],
    x: Sequence[Any],
    i: int,
    j: int,
    k: int,
) -> tuple[Any, ...] | None:
    """Compute the partial derivatives of a function of a vector with respect to
    its components `i`, `j`, and `k`.

    The indices may coincide, in which case the pure derivatives are obtained.

    Returns
    -------
    tuple
        Same layout as :func:`third_partial_derivative`.
    """
    args = np.empty(len(x), dtype=np.object_)

    for index, xi in enumerate(x):
        value = HyperHyperDual.from_re(xi)

        if index == i:
            value = value.derivative1()

        if index == j:
            value = value.derivative2()

        if index == k:
            value = value.derivative3()

        args[index] = value

    if (res := g(args)) is None:
        return None

    res = _lift(_template(HyperHyperDual, args), res)
    return (res.re, *res._perturbations())
