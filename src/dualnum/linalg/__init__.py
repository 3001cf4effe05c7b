"""
################################################
Numerical linear algebra (:mod:`dualnum.linalg`)
################################################

.. currentmodule:: dualnum.linalg

This module provides linear algebra for matrices whose entries carry derivatives.

Decompositions
==============

.. autosummary::
    :toctree: generated/

    LU

Operations
==========

.. autosummary::
    :toctree: generated/

    det
    inv
    norm
    solve

Eigenvalue problems
===================

.. autosummary::
    :toctree: generated/

    jacobi_eigenvalue
    smallest_ev

Miscellaneous
=============

.. autosummary::
    :toctree: generated/

    LinAlgError
    SingularMatrixError

"""

from .eigen import jacobi_eigenvalue, norm, smallest_ev
from .lu import LU, LinAlgError, SingularMatrixError, det, inv, solve

__all__ = [
    "LU",
    "LinAlgError",
    "SingularMatrixError",
    "det",
    "inv",
    "jacobi_eigenvalue",
    "norm",
    "smallest_ev",
    "solve",
]
