"""
Tensor graph: element-wise derivatives, shape algebra and the scalar bridges.

Gradients are read off a TBuffer placed in front of the input tensor and
compared against central finite differences.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent))

from aad_vi.aad import ADVar, Constant
from aad_vi.tensor import (
    NumpyBackend, GreaterThan, Condition, TConst,
    tensor, zeros, fill,
    plus, minus, times, div, pow, negate,
    sqrt, log, exp, logistic, softplus, digamma, lgamma,
    sum, broadcast, sum_all, at, count, argmax, cumsum,
)

backend = NumpyBackend()


def tensor_grad(f, x0):
    """Reverse-mode gradient of the scalar f(t) at data x0."""
    leaf = TConst(backend, np.array(x0, dtype=float)).buffer()
    y = f(leaf)
    y.dv(1.0)
    return leaf.accumulated


def tensor_numeric_grad(f, x0, eps=1e-6):
    x0 = np.array(x0, dtype=float)
    g = np.zeros_like(x0)
    for idx in np.ndindex(*x0.shape):
        xp = x0.copy(); xp[idx] += eps
        xm = x0.copy(); xm[idx] -= eps
        fp = f(TConst(backend, xp)).v
        fm = f(TConst(backend, xm)).v
        g[idx] = (fp - fm) / (2.0 * eps)
    return g


UNARY = [
    ("negate", negate, (-2.0, 2.0)),
    ("sqrt", sqrt, (0.5, 3.0)),
    ("log", log, (0.5, 3.0)),
    ("exp", exp, (-1.0, 1.0)),
    ("logistic", logistic, (-3.0, 3.0)),
    ("softplus", softplus, (-3.0, 3.0)),
    ("digamma", digamma, (0.5, 4.0)),
    ("lgamma", lgamma, (0.5, 4.0)),
]


@pytest.mark.parametrize("name,op,domain", UNARY, ids=[c[0] for c in UNARY])
def test_elementwise_unary_gradients(name, op, domain):
    np.random.seed(21)
    x0 = np.random.uniform(*domain, size=(2, 3))
    weights = TConst(backend, np.random.normal(size=(2, 3)))
    f = lambda t: sum_all(times(op(t), weights))
    assert np.allclose(tensor_grad(f, x0), tensor_numeric_grad(f, x0), rtol=1e-4, atol=1e-6), name


BINARY = [("plus", plus), ("minus", minus), ("times", times), ("div", div), ("pow", pow)]


@pytest.mark.parametrize("name,op", BINARY, ids=[c[0] for c in BINARY])
def test_elementwise_binary_gradients(name, op):
    np.random.seed(22)
    a0 = np.random.uniform(0.5, 2.0, size=(3, 2))
    b0 = np.random.uniform(0.5, 2.0, size=(3, 2))
    fa = lambda t: sum_all(op(t, TConst(backend, b0)))
    fb = lambda t: sum_all(op(TConst(backend, a0), t))
    assert np.allclose(tensor_grad(fa, a0), tensor_numeric_grad(fa, a0), rtol=1e-4, atol=1e-6)
    assert np.allclose(tensor_grad(fb, b0), tensor_numeric_grad(fb, b0), rtol=1e-4, atol=1e-6)


def test_shape_mismatch_raises():
    a = zeros(backend, (2, 3))
    b = zeros(backend, (3, 2))
    with pytest.raises(ValueError):
        plus(a, b)
    with pytest.raises(ValueError):
        a * b


def test_broadcast_then_sum_scales_by_size():
    np.random.seed(23)
    data = np.random.normal(size=(2, 4))
    t = tensor(backend, data)
    for dim in range(3):
        out = sum(broadcast(t, dim, 5), dim)
        assert out.shape == t.shape
        assert np.allclose(out.v, 5 * data)


def test_sum_then_broadcast_restores_rank():
    t = tensor(backend, np.arange(6.0).reshape(2, 3))
    s = sum(t, 1)
    assert s.shape == (2,)
    b = broadcast(s, 1, 3)
    assert b.shape == (2, 3)
    assert np.allclose(b.v, [[3.0] * 3, [12.0] * 3])


def test_sum_and_broadcast_gradients():
    np.random.seed(24)
    x0 = np.random.normal(size=(3, 4))
    w = TConst(backend, np.random.normal(size=(3, 2, 4)))
    f = lambda t: sum_all(times(broadcast(exp(sum(broadcast(t, 1, 2), 1) / 2.0), 1, 2), w))
    assert np.allclose(tensor_grad(f, x0), tensor_numeric_grad(f, x0), rtol=1e-4, atol=1e-6)


def test_axis_validation():
    t = zeros(backend, (2, 3))
    with pytest.raises(ValueError):
        sum(t, 2)
    with pytest.raises(ValueError):
        broadcast(t, 3, 4)
    with pytest.raises(ValueError):
        at(t, (2, 0))
    with pytest.raises(ValueError):
        cumsum(t, 5)


def test_at_and_sum_all_bridge_to_scalars():
    t = tensor(backend, [[1.0, 2.0], [3.0, 4.0]])
    assert at(t, (1, 0)).v == 3.0
    assert sum_all(t).v == 10.0

    leaf = TConst(backend, np.array([[1.0, 2.0], [3.0, 4.0]])).buffer()
    (at(leaf, (0, 1)) * 5.0).dv(1.0)
    assert np.allclose(leaf.accumulated, [[0.0, 5.0], [0.0, 0.0]])


def test_fill_sends_summed_gradient_to_scalar():
    x = ADVar(2.0)
    t = fill(x, (2, 3), backend)
    y = sum_all(t * tensor(backend, np.ones((2, 3)) * 0.5))
    assert np.isclose(y.v, 6.0)
    y.dv(1.0)
    assert np.isclose(x.adj, 3.0)


def test_mixed_operands_are_lifted():
    t = tensor(backend, [1.0, 2.0, 3.0])
    assert np.allclose((t * 2.0 + 1.0).v, [3.0, 5.0, 7.0])
    assert np.allclose((1.0 - t).v, [0.0, -1.0, -2.0])
    assert np.allclose((t * Constant(3.0)).v, [3.0, 6.0, 9.0])


def test_count_argmax_cumsum():
    t = tensor(backend, [[0.1, 0.7], [0.5, 0.2]])
    assert count(t, GreaterThan(0.3)) == 2
    assert argmax(t) == (0, 1)
    cs = cumsum(tensor(backend, [0.2, 0.3, 0.5]), 0)
    assert np.allclose(cs.v, [0.2, 0.5, 1.0])
    assert count(cs, GreaterThan(0.4)) == 2


def test_count_rejects_unknown_condition():
    class LessThan(Condition):
        pass

    with pytest.raises(ValueError):
        count(zeros(backend, (3,)), LessThan())


def test_tensor_buffer_accumulates_with_backend():
    leaf = TConst(backend, np.ones(3)).buffer()
    outer = leaf.buffer()
    assert outer is leaf
    y = sum_all(leaf * leaf) + sum_all(leaf)
    y.dv(1.0)
    assert np.allclose(leaf.accumulated, 3.0)


def test_collect_and_backward():
    t = tensor(backend, [1.0, 2.0, 3.0, 4.0], shape=(2, 2))
    assert t.collect() == [1.0, 2.0, 3.0, 4.0]
    leaf = TConst(backend, np.zeros((2, 2))).buffer()
    leaf.backward([1.0, 2.0, 3.0, 4.0])
    assert np.allclose(leaf.accumulated, [[1.0, 2.0], [3.0, 4.0]])


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
