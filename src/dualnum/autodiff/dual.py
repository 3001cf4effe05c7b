from typing import Any, Self, final

from dualnum import function as dnf
from dualnum.autodiff._base import DualNumber
from dualnum.derivative import U1, Derivative, Dim
from dualnum.typing import Scalar

DualNumber._DualNumber__IS_SEALED = False  # type: ignore


@final
class Dual[T: Scalar, F = float](DualNumber[T, F]):
    r"""First-order dual number.

    Parameters
    ----------
    re : T
    eps : T

    Attributes
    ----------
    re : T
    eps : T

    Notes
    -----
    Instances of this class behave like elements of :math:`T[\varepsilon]/(\varepsilon^2)`.

    Examples
    --------
    >>> x = Dual.from_re(5.0).derivative()
    >>> x**3
    Dual(re=125.0, eps=75.0)
    >>> print(x * x + 1)
    26.0 + 10.0ε
    """

    __slots__ = ("eps",)
    ORDER = 1
    FIELDS = ("eps",)
    LABELS = ("ε",)
    eps: T

    def __init__(self, re: T, eps: T):
        super().__init__(re)
        self.eps = eps

    @classmethod
    def from_re(cls, re: T) -> Self:
        return cls(re, dnf.zero_like(re))

    def derivative(self) -> Self:
        """Return a copy seeded with a unit derivative."""
        return self.__class__(self.re, dnf.one_like(self.re))

    def _mul(self, rhs: Self) -> Self:
        eps = self.eps * rhs.re + self.re * rhs.eps
        return self.__class__(self.re * rhs.re, eps)

    def _chain_rule(self, f0: T, f1: T) -> Self:
        return self.__class__(f0, f1 * self.eps)


@final
class DualVec[T: Scalar, F = float](DualNumber[T, F]):
    """First-order dual number with a vector of derivatives.

    Seeding every component of a point with its own basis vector yields the whole
    gradient in a single evaluation.

    Parameters
    ----------
    re : T
    eps : Derivative[T]
        Column of partial derivatives.

    Attributes
    ----------
    re : T
    eps : Derivative[T]

    See Also
    --------
    dualnum.autodiff.gradient, dualnum.autodiff.jacobian
    """

    __slots__ = ("eps",)
    ORDER = 1
    FIELDS = ("eps",)
    LABELS = ("ε",)
    VECTOR = True
    eps: Derivative[T]

    def __init__(self, re: T, eps: Derivative[T]):
        super().__init__(re)
        self.eps = eps

    @classmethod
    def from_re(cls, re: T) -> Self:
        return cls(re, Derivative.none())

    def derivative(self, index: int, dim: Dim | int) -> Self:
        """Return a copy whose derivative is the `index`-th basis vector of length
        `dim`."""
        eps = Derivative.derivative_generic(dim, U1, index, like=self.re)
        return self.__class__(self.re, eps)

    def _mul(self, rhs: Self) -> Self:
        eps = rhs.eps * self.re + self.eps * rhs.re
        return self.__class__(self.re * rhs.re, eps)

    def _chain_rule(self, f0: T, f1: T) -> Self:
        return self.__class__(f0, self.eps * f1)


@final
class Dual2[T: Scalar, F = float](DualNumber[T, F]):
    """Second-order dual number in a single direction.

    Parameters
    ----------
    re : T
    v1 : T
        First derivative.
    v2 : T
        Second derivative, not divided by two.

    Attributes
    ----------
    re : T
    v1 : T
    v2 : T
    """

    __slots__ = ("v1", "v2")
    ORDER = 2
    FIELDS = ("v1", "v2")
    LABELS = ("ε", "ε²")
    v1: T
    v2: T

    def __init__(self, re: T, v1: T, v2: T):
        super().__init__(re)
        self.v1 = v1
        self.v2 = v2

    @classmethod
    def from_re(cls, re: T) -> Self:
        zero = dnf.zero_like(re)
        return cls(re, zero, zero)

    def derivative(self) -> Self:
        return self.__class__(self.re, dnf.one_like(self.re), self.v2)

    def _mul(self, rhs: Self) -> Self:
        v1 = self.v1 * rhs.re + self.re * rhs.v1
        v2 = self.v2 * rhs.re + self.v1 * rhs.v1 * 2 + self.re * rhs.v2
        return self.__class__(self.re * rhs.re, v1, v2)

    def _chain_rule(self, f0: T, f1: T, f2: T) -> Self:
        v2 = f2 * self.v1 * self.v1 + f1 * self.v2
        return self.__class__(f0, f1 * self.v1, v2)


@final
class Dual2Vec[T: Scalar, F = float](DualNumber[T, F]):
    """Second-order dual number with a gradient and a Hessian.

    Parameters
    ----------
    re : T
    v1 : Derivative[T]
        Gradient as a row.
    v2 : Derivative[T]
        Hessian.

    Attributes
    ----------
    re : T
    v1 : Derivative[T]
    v2 : Derivative[T]

    See Also
    --------
    dualnum.autodiff.hessian
    """

    __slots__ = ("v1", "v2")
    ORDER = 2
    FIELDS = ("v1", "v2")
    LABELS = ("ε1", "ε1²")
    VECTOR = True
    v1: Derivative[T]
    v2: Derivative[T]

    def __init__(self, re: T, v1: Derivative[T], v2: Derivative[T]):
        super().__init__(re)
        self.v1 = v1
        self.v2 = v2

    @classmethod
    def from_re(cls, re: T) -> Self:
        return cls(re, Derivative.none(), Derivative.none())

    def derivative(self, index: int, dim: Dim | int) -> Self:
        v1 = Derivative.derivative_generic(U1, dim, index, like=self.re)
        return self.__class__(self.re, v1, self.v2)

    def _mul(self, rhs: Self) -> Self:
        v1 = rhs.v1 * self.re + self.v1 * rhs.re
        v2 = (
            rhs.v2 * self.re
            + self.v1.tr_mul(rhs.v1)
            + rhs.v1.tr_mul(self.v1)
            + self.v2 * rhs.re
        )
        return self.__class__(self.re * rhs.re, v1, v2)

    def _chain_rule(self, f0: T, f1: T, f2: T) -> Self:
        v2 = self.v2 * f1 + self.v1.tr_mul(self.v1) * f2
        return self.__class__(f0, self.v1 * f1, v2)


@final
class Dual3[T: Scalar, F = float](DualNumber[T, F]):
    """Third-order dual number in a single direction.

    Parameters
    ----------
    re : T
    v1, v2, v3 : T
        First, second, and third derivatives.

    Attributes
    ----------
    re : T
    v1, v2, v3 : T

    Examples
    --------
    >>> x = Dual3.from_re(5.0).derivative()
    >>> print(x.powi(3))
    125.0 + 75.0ε + 30.0ε² + 6.0ε³
    """

    __slots__ = ("v1", "v2", "v3")
    ORDER = 3
    FIELDS = ("v1", "v2", "v3")
    LABELS = ("ε", "ε²", "ε³")
    v1: T
    v2: T
    v3: T

    def __init__(self, re: T, v1: T, v2: T, v3: T):
        super().__init__(re)
        self.v1 = v1
        self.v2 = v2
        self.v3 = v3

    @classmethod
    def from_re(cls, re: T) -> Self:
        zero = dnf.zero_like(re)
        return cls(re, zero, zero, zero)

    def derivative(self) -> Self:
        return self.__class__(self.re, dnf.one_like(self.re), self.v2, self.v3)

    def _mul(self, rhs: Self) -> Self:
        a0, a1, a2, a3 = self.re, self.v1, self.v2, self.v3
        b0, b1, b2, b3 = rhs.re, rhs.v1, rhs.v2, rhs.v3
        v1 = a1 * b0 + a0 * b1
        v2 = a2 * b0 + a1 * b1 * 2 + a0 * b2
        v3 = a3 * b0 + (a2 * b1 + a1 * b2) * 3 + a0 * b3
        return self.__class__(a0 * b0, v1, v2, v3)

    def _chain_rule(self, f0: T, f1: T, f2: T, f3: T) -> Self:
        v1, v2, v3 = self.v1, self.v2, self.v3
        return self.__class__(
            f0,
            f1 * v1,
            f2 * v1 * v1 + f1 * v2,
            f3 * v1 * v1 * v1 + f2 * v1 * v2 * 3 + f1 * v3,
        )


@final
class HyperDual[T: Scalar, F = float](DualNumber[T, F]):
    r"""Hyper-dual number in two directions.

    Only the first derivatives in each direction and the mixed second derivative are
    kept; the pure second derivatives are not.

    Parameters
    ----------
    re : T
    eps1, eps2 : T
        Derivatives in the first and second direction.
    eps1eps2 : T
        Mixed second derivative.

    Attributes
    ----------
    re : T
    eps1, eps2, eps1eps2 : T

    Notes
    -----
    Instances of this class behave like elements of
    :math:`T[\varepsilon_1,\varepsilon_2]/(\varepsilon_1^2,\varepsilon_2^2)`.

    Examples
    --------
    >>> x = HyperDual.from_re(3.0).derivative1()
    >>> y = HyperDual.from_re(2.0).derivative2()
    >>> print(x * x * y)
    18.0 + 12.0ε1 + 9.0ε2 + 6.0ε1ε2
    """

    __slots__ = ("eps1", "eps2", "eps1eps2")
    ORDER = 2
    FIELDS = ("eps1", "eps2", "eps1eps2")
    LABELS = ("ε1", "ε2", "ε1ε2")
    eps1: T
    eps2: T
    eps1eps2: T

    def __init__(self, re: T, eps1: T, eps2: T, eps1eps2: T):
        super().__init__(re)
        self.eps1 = eps1
        self.eps2 = eps2
        self.eps1eps2 = eps1eps2

    @classmethod
    def from_re(cls, re: T) -> Self:
        zero = dnf.zero_like(re)
        return cls(re, zero, zero, zero)

    def derivative1(self) -> Self:
        one = dnf.one_like(self.re)
        return self.__class__(self.re, one, self.eps2, self.eps1eps2)

    def derivative2(self) -> Self:
        one = dnf.one_like(self.re)
        return self.__class__(self.re, self.eps1, one, self.eps1eps2)

    def _mul(self, rhs: Self) -> Self:
        eps1eps2 = (
            self.eps1eps2 * rhs.re
            + self.eps1 * rhs.eps2
            + self.eps2 * rhs.eps1
            + self.re * rhs.eps1eps2
        )
        return self.__class__(
            self.re * rhs.re,
            self.eps1 * rhs.re + self.re * rhs.eps1,
            self.eps2 * rhs.re + self.re * rhs.eps2,
            eps1eps2,
        )

    def _chain_rule(self, f0: T, f1: T, f2: T) -> Self:
        eps1eps2 = f1 * self.eps1eps2 + f2 * self.eps1 * self.eps2
        return self.__class__(f0, f1 * self.eps1, f1 * self.eps2, eps1eps2)


@final
class HyperDualVec[T: Scalar, F = float](DualNumber[T, F]):
    """Hyper-dual number in two blocks of directions.

    The derivatives with respect to a first block of variables form a column, those
    with respect to a second block form a row, and the mixed second derivatives form
    a matrix. Second derivatives within a block are not kept.

    Parameters
    ----------
    re : T
    eps1 : Derivative[T]
        Column of derivatives with respect to the first block.
    eps2 : Derivative[T]
        Row of derivatives with respect to the second block.
    eps1eps2 : Derivative[T]
        Mixed second derivatives.

    Attributes
    ----------
    re : T
    eps1, eps2, eps1eps2 : Derivative[T]

    See Also
    --------
    dualnum.autodiff.partial_hessian
    """

    __slots__ = ("eps1", "eps2", "eps1eps2")
    ORDER = 2
    FIELDS = ("eps1", "eps2", "eps1eps2")
    LABELS = ("ε1", "ε2", "ε1ε2")
    VECTOR = True
    eps1: Derivative[T]
    eps2: Derivative[T]
    eps1eps2: Derivative[T]

    def __init__(
        self,
        re: T,
        eps1: Derivative[T],
        eps2: Derivative[T],
        eps1eps2: Derivative[T],
    ):
        super().__init__(re)
        self.eps1 = eps1
        self.eps2 = eps2
        self.eps1eps2 = eps1eps2

    @classmethod
    def from_re(cls, re: T) -> Self:
        return cls(re, Derivative.none(), Derivative.none(), Derivative.none())

    def derivative1(self, index: int, dim: Dim | int) -> Self:
        eps1 = Derivative.derivative_generic(dim, U1, index, like=self.re)
        return self.__class__(self.re, eps1, self.eps2, self.eps1eps2)

    def derivative2(self, index: int, dim: Dim | int) -> Self:
        eps2 = Derivative.derivative_generic(U1, dim, index, like=self.re)
        return self.__class__(self.re, self.eps1, eps2, self.eps1eps2)

    def _mul(self, rhs: Self) -> Self:
        eps1eps2 = (
            rhs.eps1eps2 * self.re
            + self.eps1 @ rhs.eps2
            + rhs.eps1 @ self.eps2
            + self.eps1eps2 * rhs.re
        )
        return self.__class__(
            self.re * rhs.re,
            rhs.eps1 * self.re + self.eps1 * rhs.re,
            rhs.eps2 * self.re + self.eps2 * rhs.re,
            eps1eps2,
        )

    def _chain_rule(self, f0: T, f1: T, f2: T) -> Self:
        eps1eps2 = self.eps1eps2 * f1 + (self.eps1 @ self.eps2) * f2
        return self.__class__(f0, self.eps1 * f1, self.eps2 * f1, eps1eps2)


@final
class HyperHyperDual[T: Scalar, F = float](DualNumber[T, F]):
    r"""Hyper-dual number in three directions.

    Every square-free product of the three directions is kept, which gives the
    first, mixed second, and mixed third derivatives.

    Parameters
    ----------
    re : T
    eps1, eps2, eps3 : T
    eps1eps2, eps1eps3, eps2eps3 : T
    eps1eps2eps3 : T

    Attributes
    ----------
    re : T
    eps1, eps2, eps3 : T
    eps1eps2, eps1eps3, eps2eps3 : T
    eps1eps2eps3 : T

    Notes
    -----
    Instances of this class behave like elements of
    :math:`T[\varepsilon_1,\varepsilon_2,\varepsilon_3]/(\varepsilon_1^2,\varepsilon_2^2,\varepsilon_3^2)`.
    """

    __slots__ = (
        "eps1",
        "eps2",
        "eps3",
        "eps1eps2",
        "eps1eps3",
        "eps2eps3",
        "eps1eps2eps3",
    )
    ORDER = 3
    FIELDS = (
        "eps1",
        "eps2",
        "eps3",
        "eps1eps2",
        "eps1eps3",
        "eps2eps3",
        "eps1eps2eps3",
    )
    LABELS = ("ε1", "ε2", "ε3", "ε1ε2", "ε1ε3", "ε2ε3", "ε1ε2ε3")
    eps1: T
    eps2: T
    eps3: T
    eps1eps2: T
    eps1eps3: T
    eps2eps3: T
    eps1eps2eps3: T

    def __init__(
        self,
        re: T,
        eps1: T,
        eps2: T,
        eps3: T,
        eps1eps2: T,
        eps1eps3: T,
        eps2eps3: T,
        eps1eps2eps3: T,
    ):
        super().__init__(re)
        self.eps1 = eps1
        self.eps2 = eps2
        self.eps3 = eps3
        self.eps1eps2 = eps1eps2
        self.eps1eps3 = eps1eps3
        self.eps2eps3 = eps2eps3
        self.eps1eps2eps3 = eps1eps2eps3

    @classmethod
    def from_re(cls, re: T) -> Self:
        zero = dnf.zero_like(re)
        return cls(re, zero, zero, zero, zero, zero, zero, zero)

    def derivative1(self) -> Self:
        return self._seed(eps1=dnf.one_like(self.re))

    def derivative2(self) -> Self:
        return self._seed(eps2=dnf.one_like(self.re))

    def derivative3(self) -> Self:
        return self._seed(eps3=dnf.one_like(self.re))

    def _seed(self, **kwargs: Any) -> Self:
        fields = (kwargs.get(x, getattr(self, x)) for x in self.FIELDS)
        return self.__class__(self.re, *fields)

    def _mul(self, rhs: Self) -> Self:
        a, b = self, rhs
        return self.__class__(
            a.re * b.re,
            a.eps1 * b.re + a.re * b.eps1,
            a.eps2 * b.re + a.re * b.eps2,
            a.eps3 * b.re + a.re * b.eps3,
            a.eps1eps2 * b.re + a.eps1 * b.eps2 + a.eps2 * b.eps1 + a.re * b.eps1eps2,
            a.eps1eps3 * b.re + a.eps1 * b.eps3 + a.eps3 * b.eps1 + a.re * b.eps1eps3,
            a.eps2eps3 * b.re + a.eps2 * b.eps3 + a.eps3 * b.eps2 + a.re * b.eps2eps3,
            a.eps1eps2eps3 * b.re
            + a.eps1eps2 * b.eps3
            + a.eps1eps3 * b.eps2
            + a.eps2eps3 * b.eps1
            + a.eps1 * b.eps2eps3
            + a.eps2 * b.eps1eps3
            + a.eps3 * b.eps1eps2
            + a.re * b.eps1eps2eps3,
        )

    def _chain_rule(self, f0: T, f1: T, f2: T, f3: T) -> Self:
        e1, e2, e3 = self.eps1, self.eps2, self.eps3
        e12, e13, e23 = self.eps1eps2, self.eps1eps3, self.eps2eps3
        e123 = (
            f1 * self.eps1eps2eps3
            + f2 * (e1 * e23 + e2 * e13 + e3 * e12)
            + f3 * e1 * e2 * e3
        )
        return self.__class__(
            f0,
            f1 * e1,
            f1 * e2,
            f1 * e3,
            f1 * e12 + f2 * e1 * e2,
            f1 * e13 + f2 * e1 * e3,
            f1 * e23 + f2 * e2 * e3,
            e123,
        )


DualNumber._DualNumber__IS_SEALED = True  # type: ignore
