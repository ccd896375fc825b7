"""
Tensor contraction: shape law, argument validation, and gradients of both
operands vs finite differences for several axis layouts.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent))

from aad_vi.tensor import NumpyBackend, TConst, tensor, tensordot, sum_all, times

backend = NumpyBackend()


# (a_shape, b_shape, pairs, a_to_out, b_to_out, expected output shape)
LAYOUTS = [
    # matrix product (i,j) x (j,k) -> (i,k)
    ((2, 3), (3, 4), [(1, 0)], {0: 0}, {1: 1}, (2, 4)),
    # transposed result (i,j) x (j,k) -> (k,i)
    ((2, 3), (3, 4), [(1, 0)], {0: 1}, {1: 0}, (4, 2)),
    # outer product (i) x (k) -> (k,i)
    ((3,), (2,), [], {0: 1}, {0: 0}, (2, 3)),
    # full contraction to a scalar-shaped tensor
    ((2, 3), (3, 2), [(0, 1), (1, 0)], {}, {}, ()),
    # interleaved free axes (i,j,l) x (m,j) -> (m,i,l)
    ((2, 3, 4), (5, 3), [(1, 1)], {0: 1, 2: 2}, {0: 0}, (5, 2, 4)),
    # batch-like layout with two contracted axes
    ((2, 3, 4), (4, 5, 3), [(1, 2), (2, 0)], {0: 1}, {1: 0}, (5, 2)),
]


def _reference(a, b, pairs, a_to_out, b_to_out):
    """Contraction via einsum with explicit subscripts."""
    letters = iter("abcdefghijklmnop")
    a_sub = [None] * a.ndim
    b_sub = [None] * b.ndim
    for i, j in pairs:
        a_sub[i] = b_sub[j] = next(letters)
    out_sub = {}
    for i, out in a_to_out.items():
        a_sub[i] = out_sub[out] = next(letters)
    for j, out in b_to_out.items():
        b_sub[j] = out_sub[out] = next(letters)
    subscripts = f"{''.join(a_sub)},{''.join(b_sub)}->{''.join(out_sub[k] for k in sorted(out_sub))}"
    return np.einsum(subscripts, a, b)


@pytest.mark.parametrize("layout", LAYOUTS)
def test_contraction_shape_and_values(layout):
    a_shape, b_shape, pairs, a_to_out, b_to_out, expected = layout
    np.random.seed(31)
    a = np.random.normal(size=a_shape)
    b = np.random.normal(size=b_shape)
    out = tensordot(tensor(backend, a), tensor(backend, b), pairs, a_to_out, b_to_out)
    assert out.shape == expected
    assert np.allclose(out.v, _reference(a, b, pairs, a_to_out, b_to_out))


def _numeric(f, x0, eps=1e-6):
    g = np.zeros_like(x0)
    for idx in np.ndindex(*x0.shape):
        xp = x0.copy(); xp[idx] += eps
        xm = x0.copy(); xm[idx] -= eps
        g[idx] = (f(xp) - f(xm)) / (2.0 * eps)
    return g


@pytest.mark.parametrize("layout", LAYOUTS)
def test_contraction_gradients(layout):
    a_shape, b_shape, pairs, a_to_out, b_to_out, expected = layout
    np.random.seed(32)
    a0 = np.random.normal(size=a_shape)
    b0 = np.random.normal(size=b_shape)
    w = TConst(backend, np.random.normal(size=expected))

    def loss(a_node, b_node):
        return sum_all(times(tensordot(a_node, b_node, pairs, a_to_out, b_to_out), w))

    a_leaf = TConst(backend, a0).buffer()
    b_leaf = TConst(backend, b0).buffer()
    loss(a_leaf, b_leaf).dv(1.0)

    fa = lambda x: loss(TConst(backend, x), TConst(backend, b0)).v
    fb = lambda x: loss(TConst(backend, a0), TConst(backend, x)).v
    assert np.allclose(a_leaf.accumulated, _numeric(fa, a0), rtol=1e-4, atol=1e-6)
    assert np.allclose(b_leaf.accumulated, _numeric(fb, b0), rtol=1e-4, atol=1e-6)


def test_mismatched_contraction_sizes_raise():
    a = tensor(backend, np.zeros((2, 3)))
    b = tensor(backend, np.zeros((4, 5)))
    with pytest.raises(ValueError):
        tensordot(a, b, [(1, 0)], {0: 0}, {1: 1})


def test_bad_axis_maps_raise():
    a = tensor(backend, np.zeros((2, 3)))
    b = tensor(backend, np.zeros((3, 4)))
    # output positions collide
    with pytest.raises(ValueError):
        tensordot(a, b, [(1, 0)], {0: 0}, {1: 0})
    # contracted axis listed as a free axis
    with pytest.raises(ValueError):
        tensordot(a, b, [(1, 0)], {0: 0, 1: 2}, {1: 1})
    # free axis missing from the map
    with pytest.raises(ValueError):
        tensordot(a, b, [(1, 0)], {}, {1: 0})
    # axis contracted twice
    with pytest.raises(ValueError):
        tensordot(a, b, [(1, 0), (1, 0)], {0: 0}, {1: 1})


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
