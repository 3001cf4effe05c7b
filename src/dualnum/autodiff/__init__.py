"""
##################################################
Automatic differentiation (:mod:`dualnum.autodiff`)
##################################################

.. currentmodule:: dualnum.autodiff

This module provides forward-mode automatic differentiation with truncated Taylor
expansions.

Differential operators
----------------------

.. autosummary::
    :toctree: generated/

    first_derivative
    second_derivative
    third_derivative
    gradient
    jacobian
    hessian
    second_partial_derivative
    partial_hessian
    third_partial_derivative
    third_partial_derivative_vec

Number systems containing infinitesimals
----------------------------------------

.. autosummary::
    :toctree: generated/

    DualNumber
    Dual
    DualVec
    Dual2
    Dual2Vec
    Dual3
    HyperDual
    HyperDualVec
    HyperHyperDual

"""

from ._base import DualNumber
from .autodiff import (
    first_derivative,
    gradient,
    hessian,
    jacobian,
    partial_hessian,
    second_derivative,
    second_partial_derivative,
    third_derivative,
    third_partial_derivative,
    third_partial_derivative_vec,
)
from .dual import (
    Dual,
    Dual2,
    Dual2Vec,
    Dual3,
    DualVec,
    HyperDual,
    HyperDualVec,
    HyperHyperDual,
)

__all__ = [
    "first_derivative",
    "second_derivative",
    "third_derivative",
    "gradient",
    "jacobian",
    "hessian",
    "second_partial_derivative",
    "partial_hessian",
    "third_partial_derivative",
    "third_partial_derivative_vec",
    "DualNumber",
    "Dual",
    "DualVec",
    "Dual2",
    "Dual2Vec",
    "Dual3",
    "HyperDual",
    "HyperDualVec",
    "HyperHyperDual",
]
