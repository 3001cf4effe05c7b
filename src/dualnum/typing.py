"""
##############################
Typing (:mod:`dualnum.typing`)
##############################

This module provides type definitions commonly used between modules.

.. autoclass:: Scalar
    :show-inheritance:
    :no-members:

.. autoclass:: DualNum
    :show-inheritance:
    :no-members:

"""

from abc import abstractmethod
from typing import Any, Protocol, Self


class Scalar(Protocol):
    """Protocol that ensures scalar-like behavior.

    Objects implementing this protocol must have four arithmetic operations and power
    defined, and four arithmetic operations must be compatible with integers and
    floats.
    """

    __slots__ = ()

    @abstractmethod
    def __add__(self, rhs: Self | float | int) -> Self: ...

    @abstractmethod
    def __sub__(self, rhs: Self | float | int) -> Self: ...

    @abstractmethod
    def __mul__(self, rhs: Self | float | int) -> Self: ...

    @abstractmethod
    def __truediv__(self, rhs: Self | float | int) -> Self: ...

    @abstractmethod
    def __pow__(self, rhs: Any) -> Self: ...

    @abstractmethod
    def __radd__(self, lhs: Self | float | int) -> Self: ...

    @abstractmethod
    def __rsub__(self, lhs: Self | float | int) -> Self: ...

    @abstractmethod
    def __rmul__(self, lhs: Self | float | int) -> Self: ...

    @abstractmethod
    def __rtruediv__(self, lhs: Self | float | int) -> Self: ...

    @abstractmethod
    def __neg__(self) -> Self: ...

    @abstractmethod
    def __pos__(self) -> Self: ...


class DualNum(Scalar, Protocol):
    """Protocol for numbers that carry derivatives alongside their value.

    Besides the arithmetic of :class:`Scalar`, such numbers provide their additive
    and multiplicative identities, the elementary functions, and the total number of
    derivative orders they carry (:attr:`nderiv`). Generic code should call the
    functions in :mod:`dualnum.function`, which accept both these numbers and plain
    reals.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def nderiv(self) -> int: ...

    @abstractmethod
    def zero(self) -> Self: ...

    @abstractmethod
    def one(self) -> Self: ...

    @abstractmethod
    def recip(self) -> Self: ...

    @abstractmethod
    def powi(self, n: int) -> Self: ...

    @abstractmethod
    def powf(self, n: float) -> Self: ...

    @abstractmethod
    def powd(self, n: Self) -> Self: ...

    @abstractmethod
    def sqrt(self) -> Self: ...

    @abstractmethod
    def cbrt(self) -> Self: ...

    @abstractmethod
    def exp(self) -> Self: ...

    @abstractmethod
    def exp2(self) -> Self: ...

    @abstractmethod
    def exp_m1(self) -> Self: ...

    @abstractmethod
    def ln(self) -> Self: ...

    @abstractmethod
    def log(self, base: float) -> Self: ...

    @abstractmethod
    def log2(self) -> Self: ...

    @abstractmethod
    def log10(self) -> Self: ...

    @abstractmethod
    def ln_1p(self) -> Self: ...

    @abstractmethod
    def sin(self) -> Self: ...

    @abstractmethod
    def cos(self) -> Self: ...

    @abstractmethod
    def tan(self) -> Self: ...

    @abstractmethod
    def sin_cos(self) -> tuple[Self, Self]: ...

    @abstractmethod
    def asin(self) -> Self: ...

    @abstractmethod
    def acos(self) -> Self: ...

    @abstractmethod
    def atan(self) -> Self: ...

    @abstractmethod
    def atan2(self, other: Self | float) -> Self: ...

    @abstractmethod
    def sinh(self) -> Self: ...

    @abstractmethod
    def cosh(self) -> Self: ...

    @abstractmethod
    def tanh(self) -> Self: ...

    @abstractmethod
    def asinh(self) -> Self: ...

    @abstractmethod
    def acosh(self) -> Self: ...

    @abstractmethod
    def atanh(self) -> Self: ...

    @abstractmethod
    def sph_j0(self) -> Self: ...

    @abstractmethod
    def sph_j1(self) -> Self: ...

    @abstractmethod
    def sph_j2(self) -> Self: ...

    @abstractmethod
    def bessel_j0(self) -> Self: ...

    @abstractmethod
    def bessel_j1(self) -> Self: ...

    @abstractmethod
    def bessel_j2(self) -> Self: ...

    @abstractmethod
    def mul_add(self, a: Self | float, b: Self | float) -> Self: ...

    @abstractmethod
    def __abs__(self) -> Self: ...
