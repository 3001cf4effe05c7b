"""
#####################################################
Implicit differentiation (:mod:`dualnum.implicit`)
#####################################################

.. currentmodule:: dualnum.implicit

This module propagates derivatives through the roots of implicit equations
``g(x, args) = 0``. The root is found with real arithmetic by any external solver;
the functions below then lift it into the number type carried by `args` with a few
Newton steps.

Solvers
-------

.. autosummary::
    :toctree: generated/

    implicit_derivative
    implicit_derivative_binary
    implicit_derivative_vec
    implicit_derivative_sp

Helpers
-------

.. autosummary::
    :toctree: generated/

    ImplicitFunction
    ImplicitDerivative
    find_template
    real_tree

"""

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol

import numpy as np
import numpy.typing as npt

from dualnum import function as dnf
from dualnum.autodiff import DualNumber, first_derivative, hessian, jacobian
from dualnum.linalg import LU

logger = logging.getLogger(__name__)


def _leaves(tree: Any):
    match tree:
        case DualNumber():
            yield tree

        case Mapping():
            for value in tree.values():
                yield from _leaves(value)

        case np.ndarray() | list() | tuple():
            for value in tree:
                yield from _leaves(value)


def find_template(args: Any) -> DualNumber | None:
    """Return the number in `args` that carries the most derivative orders.

    `args` may be a single value or any nesting of mappings, sequences, and arrays.
    ``None`` is returned if no number carrying derivatives is found.
    """
    return max(_leaves(args), key=lambda x: x.nderiv, default=None)


def real_tree(args: Any) -> Any:
    """Replace every number in `args` by its primitive real value, keeping the
    structure of mappings, lists, tuples, and arrays."""
    match args:
        case DualNumber():
            return dnf.real(args)

        case Mapping():
            return {key: real_tree(value) for key, value in args.items()}

        case np.ndarray():
            return np.array([real_tree(x) for x in args.flat]).reshape(args.shape)

        case list():
            return [real_tree(x) for x in args]

        case tuple():
            return tuple(real_tree(x) for x in args)

        case _:
            return args


def _residual_norm(f: Any) -> float:
    return max((float(abs(dnf.real(x))) for x in np.ravel(f)), default=0.0)


def _newton_step(i: int, f: Any, tol: float | None) -> None:
    norm = _residual_norm(f)
    logger.debug("newton step %d: residual %g", i, norm)

    if i == 0 and tol is not None and not norm <= tol:
        raise ValueError(f"not a root: residual {norm:g} exceeds tolerance {tol:g}")


def implicit_derivative(
    g: Callable[[Any, Any], Any], x: Any, args: Any, *, tol: float | None = None
) -> Any:
    """Compute the derivatives of the root of a univariate implicit equation.

    Parameters
    ----------
    g : Callable
        Residual ``g(x, args)``.
    x
        Real root of ``g(x, real(args)) = 0``.
    args
        Parameters carrying derivatives.
    tol : float, optional
        If given, the real residual at `x` is checked against this tolerance before
        any derivative is propagated.

    Returns
    -------
    DualNumber
        Root with the derivatives of `args` propagated. If `args` carry no
        derivatives, `x` itself is returned.

    Raises
    ------
    ValueError
        If `tol` is given and `x` is not a root within it.

    Warnings
    --------
    Convergence of the Newton steps is not verified; `x` must be an accurate root.

    Examples
    --------
    >>> from dualnum.autodiff import Dual2
    >>> y = Dual2.from_re(25.0).derivative()
    >>> x = implicit_derivative(lambda x, y: x**2 - y, 5.0, y)
    >>> print(x.re, format(x.v1, ".6g"), format(x.v2, ".6g"))
    5.0 0.1 -0.002
    """
    if (template := find_template(args)) is None:
        return x

    x = template.zero() + x

    for i in range(template.nderiv):
        f, df = first_derivative(lambda x: g(x, args), x)
        _newton_step(i, f, tol)
        x = x - f / df

    return x


def implicit_derivative_binary(
    g: Callable[[Any, Any, Any], Sequence[Any]],
    x: Any,
    y: Any,
    args: Any,
    *,
    tol: float | None = None,
) -> tuple[Any, Any]:
    """Compute the derivatives of the roots of a bivariate implicit equation.

    Parameters
    ----------
    g : Callable
        Residual ``g(x, y, args)`` returning a pair.
    x, y
        Real root of ``g(x, y, real(args)) = 0``.
    args
        Parameters carrying derivatives.
    tol : float, optional
        If given, the real residual at `x` is checked against this tolerance before
        any derivative is propagated.

    Returns
    -------
    tuple

    Raises
    ------
    ValueError
        If `tol` is given and ``(x, y)`` is not a root within it.

    Examples
    --------
    >>> from dualnum.autodiff import Dual
    >>> a = Dual.from_re(4.0).derivative()
    >>> x, y = implicit_derivative_binary(
    ...     lambda x, y, a: (x * y - a, x + y - a - 1.0), 1.0, 4.0, a
    ... )
    >>> print(x, y, sep=", ")
    1.0 + 0.0ε, 4.0 + 1.0ε
    """
    if (template := find_template(args)) is None:
        return x, y

    x = template.zero() + x
    y = template.zero() + y

    for i in range(template.nderiv):
        f, jac = jacobian(lambda v: g(v[0], v[1], args), [x, y])
        _newton_step(i, f, tol)
        (j00, j01), (j10, j11) = jac
        det = dnf.recip(j00 * j11 - j01 * j10)
        x, y = (
            x - (j11 * f[0] - j01 * f[1]) * det,
            y - (j00 * f[1] - j10 * f[0]) * det,
        )

    return x, y


def implicit_derivative_vec(
    g: Callable[[npt.NDArray[np.object_], Any], Sequence[Any]],
    x: Sequence[Any],
    args: Any,
    *,
    tol: float | None = None,
) -> npt.NDArray:
    """Compute the derivatives of the roots of a multivariate implicit equation.

    Parameters
    ----------
    g : Callable
        Residual ``g(x, args)`` returning a sequence of the same length as `x`.
    x : Sequence
        Real root of ``g(x, real(args)) = 0``.
    args
        Parameters carrying derivatives.
    tol : float, optional
        If given, the real residual at `x` is checked against this tolerance before
        any derivative is propagated.

    Returns
    -------
    ndarray

    Raises
    ------
    LinAlgError
        If the Jacobian matrix of `g` is singular.
    ValueError
        If `tol` is given and `x` is not a root within it.
    """
    if (template := find_template(args)) is None:
        return np.asarray(x)

    x = np.array([template.zero() + xi for xi in x], dtype=np.object_)

    for i in range(template.nderiv):
        f, jac = jacobian(lambda v: g(v, args), x)
        _newton_step(i, f, tol)
        x = x - LU(jac).solve(f)

    return x


def implicit_derivative_sp(
    g: Callable[[npt.NDArray[np.object_], Any], Any],
    x: Sequence[Any],
    args: Any,
    *,
    tol: float | None = None,
) -> npt.NDArray:
    """Compute the derivatives of a stationary point of a scalar potential
    ``g(x, args)``.

    Parameters
    ----------
    g : Callable
        Potential.
    x : Sequence
        Real stationary point of ``g(x, real(args))``.
    args
        Parameters carrying derivatives.
    tol : float, optional
        If given, the real residual at `x` is checked against this tolerance before
        any derivative is propagated.

    Returns
    -------
    ndarray

    Raises
    ------
    LinAlgError
        If the Hessian matrix of `g` is singular.
    ValueError
        If `tol` is given and `x` is not a stationary point within it.
    """
    if (template := find_template(args)) is None:
        return np.asarray(x)

    x = np.array([template.zero() + xi for xi in x], dtype=np.object_)

    for i in range(template.nderiv):
        _, grad, hess = hessian(lambda v: g(v, args), x)
        _newton_step(i, grad, tol)
        x = x - LU(hess).solve(grad)

    return x


class ImplicitFunction(Protocol):
    """Implicit equation ``residual(x, parameters) = 0``.

    The variable `x` is a scalar, a pair, or a one-dimensional array; the residual
    has the same form.
    """

    def residual(self, x: Any, parameters: Any) -> Any:
        """Evaluate the residual. It must accept plain reals and numbers carrying
        derivatives alike."""
        ...


class ImplicitDerivative:
    """Parameters of an implicit equation kept in real and in derivative-carrying
    form.

    The real form serves external root finders through :meth:`residual`; the other
    form propagates derivatives to the root through :meth:`implicit_derivative`.

    Parameters
    ----------
    function : ImplicitFunction
        Implicit equation.
    parameters
        Parameters carrying derivatives.

    Examples
    --------
    >>> from dualnum.autodiff import Dual
    >>> class Square:
    ...     def residual(self, x, square):
    ...         return square - x * x
    >>> fun = ImplicitDerivative(Square(), Dual.from_re(25.0).derivative())
    >>> fun.residual(5.0)
    0.0
    >>> print(fun.implicit_derivative(5.0))
    5.0 + 0.1ε
    """

    __slots__ = ("_function", "_base", "_derivative")
    _function: ImplicitFunction
    _base: Any
    _derivative: Any

    def __init__(self, function: ImplicitFunction, parameters: Any):
        self._function = function
        self._base = real_tree(parameters)
        self._derivative = parameters

    @property
    def base(self) -> Any:
        """Parameters with every number replaced by its real value."""
        return self._base

    @property
    def parameters(self) -> Any:
        """Parameters carrying derivatives."""
        return self._derivative

    def residual(self, x: Any) -> Any:
        """Evaluate the real residual at `x`."""
        return self._function.residual(x, self._base)

    def implicit_derivative(
        self, x: Any, y: Any = None, *, tol: float | None = None
    ) -> Any:
        """Propagate the derivatives of the parameters to the real root `x`.

        If `y` is given, the equation is taken to be bivariate with root ``(x, y)``.
        If `x` is a sequence or an array, the multivariate solver is used.
        """
        residual = self._function.residual

        if y is not None:
            return implicit_derivative_binary(
                lambda x, y, args: residual((x, y), args),
                x,
                y,
                self._derivative,
                tol=tol,
            )

        if isinstance(x, np.ndarray | Sequence):
            return implicit_derivative_vec(residual, x, self._derivative, tol=tol)

        return implicit_derivative(residual, x, self._derivative, tol=tol)
