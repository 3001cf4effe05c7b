import logging
from typing import Any

import numpy as np
import numpy.typing as npt

from dualnum import function as dnf
from dualnum.derivative import asarray

logger = logging.getLogger(__name__)


class LinAlgError(ValueError):
    """Error raised by :mod:`dualnum.linalg` functions."""


class SingularMatrixError(LinAlgError):
    """Error raised when a matrix appears to be singular."""


class LU:
    """LU decomposition with partial pivoting.

    The entries of the matrix may be of any scalar type, including numbers carrying
    derivatives. Pivots are chosen by the magnitude of the primitive real value of
    each entry.

    Parameters
    ----------
    a : array_like
        Square matrix to be decomposed. It is not modified.

    Raises
    ------
    LinAlgError
        If `a` is not square.
    SingularMatrixError
        If `a` appears to be singular.

    Examples
    --------
    >>> lu = LU([[4.0, 3.0], [6.0, 3.0]])
    >>> lu.determinant()
    -6.0
    >>> lu.solve([10.0, 12.0]).tolist()
    [1.0, 2.0]
    """

    __slots__ = ("_a", "_p", "_p_count")
    _a: npt.NDArray[np.object_]
    _p: list[int]
    _p_count: int

    def __init__(self, a: Any):
        a = np.array(a, dtype=np.object_)

        if a.ndim != 2 or a.shape[0] != a.shape[1]:
            raise LinAlgError("non-square matrix")

        n = a.shape[0]
        p = list(range(n))
        p_count = n

        for i in range(n):
            max_a = 0.0
            imax = i

            for k in range(i, n):
                if (abs_a := abs(dnf.real(a[k, i]))) > max_a:
                    max_a = abs_a
                    imax = k

            if max_a == 0:
                logger.debug("no nonzero pivot in column %d of %d", i, n)
                raise SingularMatrixError("the matrix appears to be singular")

            if imax != i:
                p[i], p[imax] = p[imax], p[i]
                a[[i, imax]] = a[[imax, i]]
                p_count += 1

            for j in range(i + 1, n):
                a[j, i] = a[j, i] / a[i, i]

                for k in range(i + 1, n):
                    a[j, k] = a[j, k] - a[j, i] * a[i, k]

        self._a = a
        self._p = p
        self._p_count = p_count

    @property
    def size(self) -> int:
        """Number of rows of the decomposed matrix."""
        return len(self._p)

    def solve(self, b: Any) -> npt.NDArray:
        """Solve ``a @ x = b``.

        Parameters
        ----------
        b : array_like
            Right-hand side of length :attr:`size`.

        Returns
        -------
        ndarray
        """
        b = np.asarray(b, dtype=np.object_)
        n = self.size

        if b.shape != (n,):
            raise ValueError(f"expected a vector of length {n}, got shape {b.shape}")

        a = self._a
        x = np.empty(n, dtype=np.object_)

        for i in range(n):
            x[i] = b[self._p[i]]

            for k in range(i):
                x[i] = x[i] - a[i, k] * x[k]

        for i in reversed(range(n)):
            for k in range(i + 1, n):
                x[i] = x[i] - a[i, k] * x[k]

            x[i] = x[i] / a[i, i]

        return asarray(x)

    def determinant(self) -> Any:
        """Return the determinant of the decomposed matrix."""
        n = self.size
        det = dnf.one_like(self._a[0, 0]) if n else 1.0

        for i in range(n):
            det = det * self._a[i, i]

        return det if (self._p_count - n) % 2 == 0 else -det

    def inverse(self) -> npt.NDArray:
        """Return the inverse of the decomposed matrix."""
        n = self.size
        a = self._a
        ia = np.empty((n, n), dtype=np.object_)

        for j in range(n):
            for i in range(n):
                like = a[0, 0]
                ia[i, j] = dnf.one_like(like) if self._p[i] == j else dnf.zero_like(like)

                for k in range(i):
                    ia[i, j] = ia[i, j] - a[i, k] * ia[k, j]

            for i in reversed(range(n)):
                for k in range(i + 1, n):
                    ia[i, j] = ia[i, j] - a[i, k] * ia[k, j]

                ia[i, j] = ia[i, j] / a[i, i]

        return asarray(ia)


def solve(a: Any, b: Any) -> npt.NDArray:
    """Solve a linear equation ``a @ x = b``.

    Parameters
    ----------
    a : array_like
        Coefficient matrix.
    b : array_like
        Right-hand side of the equation.

    Returns
    -------
    ndarray

    Raises
    ------
    LinAlgError
        If `a` is singular or not square.
    """
    return LU(a).solve(b)


def det(a: Any) -> Any:
    """Compute the determinant of a square matrix.

    Raises
    ------
    LinAlgError
        If `a` is singular or not square.
    """
    return LU(a).determinant()


def inv(a: Any) -> npt.NDArray:
    """Compute the inverse of a square matrix.

    Raises
    ------
    LinAlgError
        If `a` is singular or not square.
    """
    return LU(a).inverse()
