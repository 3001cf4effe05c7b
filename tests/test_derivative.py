import mpmath
import numpy as np
import pytest

from dualnum.autodiff import Dual
from dualnum.derivative import U1, U2, Const, Derivative, Dyn, asarray


def test_dim():
    assert Const(3) is Const(3)
    assert U1 is Const(1) and U2.value == 2
    assert Dyn(3) == Dyn(3)
    assert Const(3) != Dyn(3)
    assert len({Dyn(2), Dyn(2), Const(2)}) == 2

    with pytest.raises(ValueError):
        Dyn(-1)


def test_none():
    a = Derivative.none()
    b = Derivative.some([[1.0], [2.0]])

    assert a.is_none and a.shape is None
    assert (a + a).is_none and (a * 3.0).is_none and (-a).is_none
    assert a.tr_mul(b).is_none and (b @ a).is_none
    assert (a + b) == b
    assert (b - a) == b
    assert (a - b).value.tolist() == [[-1.0], [-2.0]]


def test_arithmetic():
    a = Derivative.some([1.0, 2.0])
    b = Derivative.some([[3.0, 4.0]])

    assert a.shape == (2, 1) and b.shape == (1, 2)
    assert (a * 2.0).value.tolist() == [[2.0], [4.0]]
    assert (2.0 * a).value.tolist() == [[2.0], [4.0]]
    assert (a / 2.0).value.tolist() == [[0.5], [1.0]]
    assert (a @ b).value.tolist() == [[3.0, 4.0], [6.0, 8.0]]
    assert a.tr_mul(a).value.tolist() == [[5.0]]
    assert (a + a - a) == a
    assert a.map(lambda x: x * x).value.tolist() == [[1.0], [4.0]]

    x = Dual(2.0, 1.0)
    c = a * x
    assert c.value[1, 0].re == 4.0 and c.value[1, 0].eps == 2.0


def test_derivative_generic():
    d = Derivative.derivative_generic(Dyn(3), U1, 1)
    assert d.value.tolist() == [[0.0], [1.0], [0.0]]

    d = Derivative.derivative_generic(U1, 2, 0, like=mpmath.mpf(1))
    assert isinstance(d.value[0, 1], mpmath.mpf)
    assert d.value.tolist() == [[1, 0]]

    with pytest.raises(IndexError):
        Derivative.derivative_generic(2, U1, 2)


def test_unwrap_generic():
    zeros = Derivative.none().unwrap_generic(2, 3)
    assert zeros.shape == (2, 3) and np.all(zeros == 0.0)

    d = Derivative.some([1.0, 2.0])
    assert d.unwrap_generic(Dyn(2), U1) is d.value

    with pytest.raises(ValueError):
        d.unwrap_generic(U1, 2)


def test_fmt():
    assert Derivative.none().fmt("ε") == ""
    assert Derivative.some([1.0, 2.0]).fmt("ε") == " + [1.0, 2.0]ε"
    assert Derivative.some([[1.0, 2.0]]).fmt("ε") == " + [1.0, 2.0]ε"
    assert Derivative.some([[1.0, 2.0], [3.0, 4.0]]).fmt("ε") == (
        " + [[1.0, 2.0], [3.0, 4.0]]ε"
    )


def test_list():
    d = Derivative.some([[1.0, 2.0], [3.0, 4.0]])
    assert d.to_list() == [[1.0, 2.0], [3.0, 4.0]]
    assert Derivative.from_list(d.to_list()) == d
    assert Derivative.none().to_list() is None
    assert Derivative.from_list(None).is_none


def test_asarray():
    assert asarray([1.0, 2]).dtype == np.float64
    assert asarray([Dual(1.0, 0.0)]).dtype == np.object_
    assert asarray([mpmath.mpf(1)]).dtype == np.object_
