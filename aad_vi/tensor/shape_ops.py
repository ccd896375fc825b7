# tensor/shape_ops.py
"""
Shape-transforming tensor nodes and the bridges between tensors and scalar
Values.

- TSum(t, dim)          : drop axis `dim` by summation; backward broadcasts back.
- TBroadcast(t, dim, n) : insert axis `dim` of size n; backward sums it away.
- TensorDot(a, b, ...)  : contraction of axis pairs with caller-chosen output layout.
- TSumAll(t)            : scalar Value = sum of all elements.
- TAt(t, index)         : scalar Value = one element.
- TFill(value, shape)   : tensor filled with a scalar Value.
"""

from typing import Dict, List, Sequence, Tuple

from ..aad.core.value import Value
from .node import TensorNode


class TSum(TensorNode):
    """
    Sum along axis `dim`.

    Result shape = input shape with that axis dropped. The gradient is
    replicated back along the removed axis to its original size.
    """

    def __init__(self, upstream: TensorNode, dim: int):
        if not 0 <= dim < upstream.ndim:
            raise ValueError(f"sum: axis {dim} out of range for shape {upstream.shape}")
        shape = upstream.shape[:dim] + upstream.shape[dim + 1:]
        super().__init__(shape, upstream.backend)
        self.upstream = upstream
        self.dim = dim

    def _forward(self):
        return self.backend.reduce_sum(self.upstream.v, self.dim)

    def _backward(self, g):
        size = self.upstream.shape[self.dim]
        self.upstream.dv(self.backend.broadcast(g, self.dim, size))


class TBroadcast(TensorNode):
    """
    Insert axis `dim` of the given size by replication.

    Inverse of TSum: the gradient is summed over the inserted axis.
    """

    def __init__(self, upstream: TensorNode, dim: int, size: int):
        if not 0 <= dim <= upstream.ndim:
            raise ValueError(f"broadcast: axis {dim} out of range for shape {upstream.shape}")
        if size < 1:
            raise ValueError(f"broadcast: size must be >= 1, got {size}")
        shape = upstream.shape[:dim] + (int(size),) + upstream.shape[dim:]
        super().__init__(shape, upstream.backend)
        self.upstream = upstream
        self.dim = dim
        self.size = int(size)

    def _forward(self):
        return self.backend.broadcast(self.upstream.v, self.dim, self.size)

    def _backward(self, g):
        self.upstream.dv(self.backend.reduce_sum(g, self.dim))


class TensorDot(TensorNode):
    """
    Contraction of `a` and `b`.

    Args:
        pairs    : list of (a_axis, b_axis) pairs to contract; sizes must match.
        a_to_out : {a_axis: out_axis} for every uncontracted axis of a.
        b_to_out : {b_axis: out_axis} for every uncontracted axis of b.

    The output positions of all uncontracted axes must form a permutation of
    range(out_ndim). E.g. a matrix product (i,j)x(j,k) -> (i,k):
        TensorDot(a, b, [(1, 0)], {0: 0}, {1: 1})

    Backward:
        The gradient of `a` contracts the output gradient with `b` over b's
        uncontracted axes. The remaining gradient axes (a's uncontracted axes)
        go back to their a-positions, the remaining b axes (b's contracted
        axes) go to the a-axis they were paired with. Mirrored for `b`.
    """

    def __init__(self, a: TensorNode, b: TensorNode, pairs: List[Tuple[int, int]],
                 a_to_out: Dict[int, int], b_to_out: Dict[int, int]):
        self.pairs = [(int(i), int(j)) for i, j in pairs]
        self.a_to_out = {int(k): int(v) for k, v in a_to_out.items()}
        self.b_to_out = {int(k): int(v) for k, v in b_to_out.items()}
        shape = _contraction_shape(a.shape, b.shape, self.pairs, self.a_to_out, self.b_to_out)
        super().__init__(shape, a.backend)
        self.a = a
        self.b = b

    def _forward(self):
        return self.backend.tensordot(self.a.v, self.b.v, self.pairs, self.a_to_out, self.b_to_out)

    def _backward(self, g):
        ops = self.backend
        av, bv = self.a.v, self.b.v

        # dA = contract(g, b) over the output axes that came from b
        g_b_pairs = [(out, j) for j, out in sorted(self.b_to_out.items())]
        g_to_a = {out: i for i, out in self.a_to_out.items()}
        b_to_a = {j: i for i, j in self.pairs}
        grad_a = ops.tensordot(g, bv, g_b_pairs, g_to_a, b_to_a)

        # dB = contract(a, g) over the output axes that came from a
        a_g_pairs = [(i, out) for i, out in sorted(self.a_to_out.items())]
        a_to_b = {i: j for i, j in self.pairs}
        g_to_b = {out: j for j, out in self.b_to_out.items()}
        grad_b = ops.tensordot(av, g, a_g_pairs, a_to_b, g_to_b)

        self.a.dv(grad_a)
        self.b.dv(grad_b)


def _contraction_shape(a_shape: Sequence[int], b_shape: Sequence[int],
                       pairs: List[Tuple[int, int]],
                       a_to_out: Dict[int, int], b_to_out: Dict[int, int]) -> Tuple[int, ...]:
    a_contracted = [i for i, _ in pairs]
    b_contracted = [j for _, j in pairs]
    if len(set(a_contracted)) != len(a_contracted) or len(set(b_contracted)) != len(b_contracted):
        raise ValueError(f"tensordot: an axis is contracted more than once in {pairs}")
    for i, j in pairs:
        if not (0 <= i < len(a_shape) and 0 <= j < len(b_shape)):
            raise ValueError(f"tensordot: axis pair {(i, j)} out of range for {a_shape} x {b_shape}")
        if a_shape[i] != b_shape[j]:
            raise ValueError(
                f"tensordot: contracted axes differ in size: a[{i}]={a_shape[i]} vs b[{j}]={b_shape[j]}"
            )

    a_free = [i for i in range(len(a_shape)) if i not in a_contracted]
    b_free = [j for j in range(len(b_shape)) if j not in b_contracted]
    if sorted(a_to_out) != a_free:
        raise ValueError(f"tensordot: a_to_out must map exactly the uncontracted axes {a_free}")
    if sorted(b_to_out) != b_free:
        raise ValueError(f"tensordot: b_to_out must map exactly the uncontracted axes {b_free}")

    n_out = len(a_free) + len(b_free)
    targets = list(a_to_out.values()) + list(b_to_out.values())
    if sorted(targets) != list(range(n_out)):
        raise ValueError(f"tensordot: output positions {targets} are not a permutation of range({n_out})")

    shape = [0] * n_out
    for i, out in a_to_out.items():
        shape[out] = a_shape[i]
    for j, out in b_to_out.items():
        shape[out] = b_shape[j]
    return tuple(shape)


class TSumAll(Value):
    """Scalar sum of every element; backward fills the tensor's shape."""

    def __init__(self, upstream: TensorNode):
        super().__init__()
        self.upstream = upstream

    def _forward(self):
        return self.upstream.backend.sum_all(self.upstream.v)

    def _backward(self, g):
        up = self.upstream
        up.dv(up.backend.fill(float(g), up.shape))


class TAt(Value):
    """Scalar element at `index`; backward scatters into a zero tensor."""

    def __init__(self, upstream: TensorNode, index: Sequence[int]):
        if len(index) != upstream.ndim or any(
                not 0 <= i < s for i, s in zip(index, upstream.shape)):
            raise ValueError(f"at: index {tuple(index)} out of range for shape {upstream.shape}")
        super().__init__()
        self.upstream = upstream
        self.index = tuple(int(i) for i in index)

    def _forward(self):
        return self.upstream.backend.get(self.upstream.v, self.index)

    def _backward(self, g):
        up = self.upstream
        grad = up.backend.fill(0.0, up.shape)
        up.backend.put(grad, float(g), self.index)
        up.dv(grad)


class TFill(TensorNode):
    """Tensor of the given shape, every element equal to a scalar Value."""

    def __init__(self, value: Value, shape: Sequence[int], backend):
        super().__init__(shape, backend)
        self.value = value

    def _forward(self):
        return self.backend.fill(float(self.value.v), self.shape)

    def _backward(self, g):
        self.value.dv(self.backend.sum_all(g))
