from .autodiff import (
    Dual,
    Dual2,
    Dual2Vec,
    Dual3,
    DualVec,
    HyperDual,
    HyperDualVec,
    HyperHyperDual,
)
from .derivative import Derivative
from .function import exp, ln, pow, sqrt

__all__ = [
    "exp",
    "ln",
    "pow",
    "sqrt",
    "Derivative",
    "Dual",
    "Dual2",
    "Dual2Vec",
    "Dual3",
    "DualVec",
    "HyperDual",
    "HyperDualVec",
    "HyperHyperDual",
]
