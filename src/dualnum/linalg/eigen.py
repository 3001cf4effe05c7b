import logging
from typing import Any

import numpy as np
import numpy.typing as npt

from dualnum import function as dnf
from dualnum.derivative import asarray
from dualnum.linalg.lu import LinAlgError

logger = logging.getLogger(__name__)


def _square(a: Any) -> npt.NDArray[np.object_]:
    a = np.array(a, dtype=np.object_)

    if a.ndim != 2 or a.shape[0] != a.shape[1] or a.shape[0] == 0:
        raise LinAlgError("non-square matrix")

    return a


def _rotate(g, h, s, tau):
    return g - s * (h + g * tau), h + s * (g - h * tau)


def norm(x: Any) -> Any:
    """Return the Euclidean norm of a vector.

    Examples
    --------
    >>> from dualnum.autodiff import Dual
    >>> print(norm([Dual(3.0, 1.0), Dual(4.0, 3.0)]))
    5.0 + 3.0ε
    """
    return dnf.sqrt(sum((xi * xi for xi in np.ravel(x)), start=0.0))


def jacobi_eigenvalue(
    a: Any, max_iter: int = 200
) -> tuple[npt.NDArray, npt.NDArray]:
    """Compute the eigenvalues and eigenvectors of a symmetric matrix by the cyclic
    Jacobi method.

    Rotations are applied with the arithmetic of the entries, so derivatives carried
    by `a` are propagated to the results. Thresholds and the ordering of the
    eigenvalues only look at the primitive real values.

    Parameters
    ----------
    a : array_like
        Symmetric matrix. Only the upper triangle is read.
    max_iter : int, default=200
        Maximum number of sweeps.

    Returns
    -------
    w : ndarray
        Eigenvalues in ascending order.
    v : ndarray
        Matrix whose `i`-th column is the eigenvector of ``w[i]``.

    Raises
    ------
    LinAlgError
        If `a` is not square.

    Examples
    --------
    >>> w, v = jacobi_eigenvalue([[2.0, 2.0], [2.0, 5.0]])
    >>> print(format(w[0], ".6f"), format(w[1], ".6f"))
    1.000000 6.000000
    """
    a = _square(a)
    n = a.shape[0]

    v = np.identity(n).astype(np.object_)
    d = np.array([a[i, i] for i in range(n)], dtype=np.object_)
    bw = d.copy()
    zw = np.zeros(n).astype(np.object_)

    for it in range(max_iter):
        thresh = sum(
            (dnf.real(a[i, j]) ** 2 for j in range(n) for i in range(j)), start=0.0
        )
        thresh = dnf.sqrt(thresh) / n

        if thresh == 0:
            logger.debug("jacobi method converged after %d sweeps", it)
            break

        for p in range(n):
            for q in range(p + 1, n):
                gapq = abs(a[p, q]) * 10
                termp = gapq + abs(d[p])
                termq = gapq + abs(d[q])

                if it > 4 and termp == abs(d[p]) and termq == abs(d[q]):
                    a[p, q] = 0.0
                    continue

                if abs(dnf.real(a[p, q])) < thresh:
                    continue

                h = d[q] - d[p]

                if abs(h) + gapq == abs(h):
                    t = a[p, q] / h
                else:
                    theta = h * 0.5 / a[p, q]
                    t = dnf.recip(abs(theta) + dnf.sqrt(theta * theta + 1))

                    if theta < 0:
                        t = -t

                c = dnf.recip(dnf.sqrt(t * t + 1))
                s = t * c
                tau = s / (c + 1)
                h = t * a[p, q]

                zw[p] = zw[p] - h
                zw[q] = zw[q] + h
                d[p] = d[p] - h
                d[q] = d[q] + h
                a[p, q] = 0.0

                for j in range(p):
                    a[j, p], a[j, q] = _rotate(a[j, p], a[j, q], s, tau)

                for j in range(p + 1, q):
                    a[p, j], a[j, q] = _rotate(a[p, j], a[j, q], s, tau)

                for j in range(q + 1, n):
                    a[p, j], a[q, j] = _rotate(a[p, j], a[q, j], s, tau)

                for j in range(n):
                    v[j, p], v[j, q] = _rotate(v[j, p], v[j, q], s, tau)

        bw = bw + zw
        d = bw.copy()
        zw = np.zeros(n).astype(np.object_)
    else:
        logger.debug("jacobi method stopped after %d sweeps", max_iter)

    for k in range(n - 1):
        m = min(range(k, n), key=lambda i: dnf.real(d[i]))

        if m != k:
            d[[k, m]] = d[[m, k]]
            v[:, [k, m]] = v[:, [m, k]]

    return asarray(d), asarray(v)


def smallest_ev(a: Any) -> tuple[Any, npt.NDArray]:
    """Return the smallest eigenvalue of a symmetric matrix and its eigenvector.

    Matrices of size 1 and 2 are handled in closed form; larger ones use
    :func:`jacobi_eigenvalue`.

    Raises
    ------
    LinAlgError
        If `a` is not square.

    Examples
    --------
    >>> w, u = smallest_ev([[2.0, 2.0], [2.0, 5.0]])
    >>> print(format(w, ".6f"), format(u[0], ".6f"), format(u[1], ".6f"))
    1.000000 0.894427 -0.447214
    """
    a = _square(a)

    match a.shape[0]:
        case 1:
            return a[0, 0], asarray([dnf.one_like(a[0, 0])])

        case 2:
            x, b, c = a[0, 0], a[0, 1], a[1, 1]
            w = (x + c - dnf.sqrt((x - c) * (x - c) + b * b * 4)) * 0.5
            u = np.array([b, w - x], dtype=np.object_)
            return w, asarray(u / dnf.sqrt(b * b + (w - x) * (w - x)))

        case _:
            w, v = jacobi_eigenvalue(a)
            return w[0], v[:, 0]
