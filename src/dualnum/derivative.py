"""
############################################
Perturbations (:mod:`dualnum.derivative`)
############################################

.. currentmodule:: dualnum.derivative

This module provides the container holding vector- and matrix-shaped derivatives of
numbers such as :class:`~dualnum.autodiff.DualVec`.

.. autosummary::
    :toctree: generated/

    Derivative
    Dim
    Const
    Dyn
    asarray

"""

from abc import ABC
from collections.abc import Iterable
from typing import Any, ClassVar, Final, Self, final

import numpy as np
import numpy.typing as npt

from dualnum import function as dnf


class Dim(ABC):
    """Abstract base class for dimensions of derivatives.

    Parameters
    ----------
    value : int
        Number of entries along the dimension.

    See Also
    --------
    Const, Dyn
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int):
        if value < 0:
            raise ValueError("dimension must be non-negative")

        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dim):
            return NotImplemented

        return type(self) is type(other) and self._value == other._value

    def __hash__(self) -> int:
        return hash((type(self), self._value))


@final
class Const(Dim):
    """Dimension whose size is fixed when the shape of a number is designed.

    Instances are interned, so ``Const(n) is Const(n)`` holds.
    """

    __slots__ = ()
    _instances: ClassVar[dict[int, "Const"]] = {}

    def __new__(cls, value: int):
        if (self := cls._instances.get(value)) is None:
            self = super().__new__(cls)
            cls._instances[value] = self

        return self


@final
class Dyn(Dim):
    """Dimension whose size is determined at run time, e.g. by the length of an
    input vector."""

    __slots__ = ()


U1: Final = Const(1)
U2: Final = Const(2)


def _as_dim(dim: Dim | int) -> Dim:
    return dim if isinstance(dim, Dim) else Dyn(dim)


@final
class Derivative[T]:
    r"""Vector- or matrix-shaped derivative.

    A derivative is either the exact zero, which owns no array, or a dense
    two-dimensional array of coefficients. The zero state is kept through arithmetic,
    so derivatives that are never seeded cost nothing.

    Parameters
    ----------
    value : ndarray | None, default=None
        Coefficients, or ``None`` for the exact zero.

    Attributes
    ----------
    value : ndarray | None

    Examples
    --------
    >>> a = Derivative.none()
    >>> b = Derivative.some([[1.0], [2.0]])
    >>> (a + a).is_none
    True
    >>> (a - b).value.tolist()
    [[-1.0], [-2.0]]
    """

    __slots__ = ("value",)
    value: npt.NDArray[np.object_] | None

    def __init__(self, value: npt.NDArray[np.object_] | None = None):
        self.value = value

    @classmethod
    def none(cls) -> Self:
        """Return the exact zero."""
        return cls(None)

    @classmethod
    def some(cls, value: Any) -> Self:
        """Return a dense derivative holding a copy of `value`.

        One-dimensional input is taken as a column.
        """
        value = np.array(value, dtype=np.object_)

        if value.ndim == 1:
            value = value.reshape(-1, 1)

        if value.ndim != 2:
            raise ValueError("derivative must be two-dimensional")

        return cls(value)

    @classmethod
    def derivative_generic(
        cls, r: Dim | int, c: Dim | int, i: int, like: Any = 1.0
    ) -> Self:
        """Return the derivative whose only nonzero entry is one at flat index `i`.

        Parameters
        ----------
        r, c : Dim | int
            Number of rows and columns.
        i : int
            Flat index of the unit entry.
        like : optional
            Scalar whose type determines the zero and the one.
        """
        r, c = _as_dim(r), _as_dim(c)

        if not 0 <= i < r.value * c.value:
            raise IndexError("index out of range")

        value = np.full((r.value, c.value), dnf.zero_like(like), dtype=np.object_)
        value.flat[i] = dnf.one_like(like)
        return cls(value)

    @property
    def is_none(self) -> bool:
        """``True`` if the derivative is the exact zero."""
        return self.value is None

    @property
    def shape(self) -> tuple[int, int] | None:
        """Shape of the coefficients, or ``None`` for the exact zero."""
        return None if self.value is None else self.value.shape  # type: ignore

    def unwrap_generic(self, r: Dim | int, c: Dim | int, like: Any = 0.0) -> Any:
        """Return the coefficients as an array of shape ``(r, c)``.

        The exact zero is expanded into zeros of the type of `like`.

        Raises
        ------
        ValueError
            If the derivative has a different shape.
        """
        shape = (_as_dim(r).value, _as_dim(c).value)

        if self.value is None:
            return np.full(shape, dnf.zero_like(like), dtype=np.object_)

        if self.value.shape != shape:
            raise ValueError(f"expected shape {shape}, got {self.value.shape}")

        return self.value

    def tr_mul(self, other: Self) -> Self:
        """Return the product of the transpose of this derivative and `other`."""
        if self.value is None or other.value is None:
            return self.none()

        return self.__class__(self.value.T @ other.value)

    def map(self, fun) -> Self:
        """Apply `fun` to every coefficient."""
        if self.value is None:
            return self.none()

        return self.__class__(np.frompyfunc(fun, 1, 1)(self.value))

    def fmt(self, label: str) -> str:
        """Return the term ``" + [...]label"`` used in text renderings, or an empty
        string for the exact zero."""
        if self.value is None:
            return ""

        if self.value.shape[1] == 1:
            body = ", ".join(str(x) for x in self.value[:, 0])
        elif self.value.shape[0] == 1:
            body = ", ".join(str(x) for x in self.value[0, :])
        else:
            rows = ("[" + ", ".join(str(x) for x in row) + "]" for row in self.value)
            body = ", ".join(rows)

        return f" + [{body}]{label}"

    def to_list(self, encode=None) -> list[list[Any]] | None:
        """Return the coefficients as nested lists, or ``None`` for the exact zero."""
        if self.value is None:
            return None

        rows = self.value.tolist()
        return rows if encode is None else [[encode(x) for x in row] for row in rows]

    @classmethod
    def from_list(cls, data: Iterable[Iterable[Any]] | None, decode=None) -> Self:
        """Inverse of :meth:`to_list`."""
        if data is None:
            return cls.none()

        rows = [list(row) if decode is None else [decode(x) for x in row] for row in data]
        return cls.some(rows)

    def __repr__(self) -> str:
        if self.value is None:
            return f"{type(self).__name__}.none()"

        return f"{type(self).__name__}.some({self.value.tolist()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Derivative):
            return NotImplemented

        if self.value is None or other.value is None:
            return self.value is other.value

        return self.value.shape == other.value.shape and bool(
            np.all(self.value == other.value)
        )

    def __add__(self, rhs: Self) -> Self:
        if not isinstance(rhs, Derivative):
            return NotImplemented

        match self.value, rhs.value:
            case None, None:
                return self.none()

            case value, None:
                return self.__class__(value)

            case None, value:
                return self.__class__(value)

            case lhs, value:
                return self.__class__(lhs + value)

    def __sub__(self, rhs: Self) -> Self:
        if not isinstance(rhs, Derivative):
            return NotImplemented

        match self.value, rhs.value:
            case None, None:
                return self.none()

            case value, None:
                return self.__class__(value)

            case None, value:
                return self.__class__(-value)

            case lhs, value:
                return self.__class__(lhs - value)

    def __mul__(self, rhs: Any) -> Self:
        if isinstance(rhs, Derivative | np.ndarray):
            return NotImplemented

        if self.value is None:
            return self.none()

        return self.__class__(self.value * rhs)

    def __truediv__(self, rhs: Any) -> Self:
        if isinstance(rhs, Derivative | np.ndarray):
            return NotImplemented

        if self.value is None:
            return self.none()

        return self.__class__(self.value / rhs)

    def __matmul__(self, rhs: Self) -> Self:
        if not isinstance(rhs, Derivative):
            return NotImplemented

        if self.value is None or rhs.value is None:
            return self.none()

        return self.__class__(self.value @ rhs.value)

    def __neg__(self) -> Self:
        if self.value is None:
            return self.none()

        return self.__class__(-self.value)

    def __pos__(self) -> Self:
        return self

    def __rmul__(self, lhs: Any) -> Self:
        return self.__mul__(lhs)


def asarray(values: Any) -> npt.NDArray:
    """Convert `values` to an array.

    The result has dtype ``float64`` if every entry is a plain real number, and dtype
    ``object`` otherwise, e.g. for entries carrying derivatives or :mod:`mpmath`
    numbers.
    """
    result = np.array(values, dtype=np.object_)

    if all(isinstance(x, float | int | np.floating | np.integer) for x in result.flat):
        return result.astype(np.float64)

    return result
