# tensor/node.py
from __future__ import annotations
from typing import Optional, Sequence, Tuple

from ..aad.core.value import Value
from ..aad.core.buffer import Buffer
from .backend import TensorBackend


class TensorNode(Value):
    """
    Shape-indexed graph node over array data.

    Attributes
    ----------
    shape : Tuple[int, ...]
        Ordered dimension sizes.
    backend : TensorBackend
        Numeric capability used for every operation on `data`.
    data : backend array
        Forward value (alias of `v`), memoized until the node's next `dv`.
    """

    def __init__(self, shape: Sequence[int], backend: TensorBackend, name: Optional[str] = None):
        super().__init__(name=name)
        self.shape: Tuple[int, ...] = tuple(int(s) for s in shape)
        self.backend = backend

    @property
    def data(self):
        return self.v

    @property
    def ndim(self) -> int:
        return len(self.shape)

    def buffer(self) -> "TBuffer":
        return TBuffer(self)

    def const(self) -> "TConst":
        return TConst(self.backend, self.v, name=self.name)

    def collect(self):
        """Forward value as a flat list of floats."""
        return [float(x) for x in self.backend.from_values(self.v, (-1,))]

    def backward(self, gradient) -> None:
        """Seed this node with a gradient given as a flat or shaped sequence."""
        self.dv(self.backend.from_values(gradient, self.shape))

    def __repr__(self):
        return f"{type(self).__name__}(shape={self.shape}, name={self.name!r})"

    def _lift(self, other) -> "TensorNode":
        if isinstance(other, TensorNode):
            return other
        if isinstance(other, Value):
            from .shape_ops import TFill
            return TFill(other, self.shape, self.backend)
        return TConst(self.backend, self.backend.fill(float(other), self.shape))

    def __add__(self, other):
        return TPlus(self, self._lift(other))

    def __radd__(self, other):
        return TPlus(self._lift(other), self)

    def __sub__(self, other):
        return TMinus(self, self._lift(other))

    def __rsub__(self, other):
        return TMinus(self._lift(other), self)

    def __mul__(self, other):
        return TTimes(self, self._lift(other))

    def __rmul__(self, other):
        return TTimes(self._lift(other), self)

    def __truediv__(self, other):
        return TDiv(self, self._lift(other))

    def __rtruediv__(self, other):
        return TDiv(self._lift(other), self)

    def __neg__(self):
        return TNeg(self)

    def __pow__(self, other):
        return TPow(self, self._lift(other))

    def __rpow__(self, other):
        return TPow(self._lift(other), self)


class TConst(TensorNode):
    """Fixed tensor data; gradients sent to it are dropped."""

    def __init__(self, backend: TensorBackend, data, name: Optional[str] = None):
        super().__init__(backend.shape(data), backend, name=name)
        self._v = data

    @property
    def v(self):
        return self._v

    def dv(self, grad) -> None:
        pass

    def const(self) -> "TConst":
        return self


class TBuffer(TensorNode, Buffer):
    """Tensor gradient accumulator; sums contributions with `backend.plus`."""

    def __init__(self, upstream: TensorNode, name: Optional[str] = None):
        Buffer.__init__(self, upstream, name=name)
        self.shape = upstream.shape
        self.backend = upstream.backend

    def _accumulate(self, total, grad):
        return self.backend.plus(total, grad)

    def buffer(self) -> "TBuffer":
        return self

    def __repr__(self):
        return f"TBuffer({self.upstream!r})"


# ----------------------------- element-wise ops ----------------------------- #

class TUnary(TensorNode):

    def __init__(self, a: TensorNode):
        super().__init__(a.shape, a.backend)
        self.a = a


class TBinary(TensorNode):
    """Element-wise binary op; operands must have identical shapes."""

    def __init__(self, a: TensorNode, b: TensorNode):
        if a.shape != b.shape:
            raise ValueError(
                f"{type(self).__name__}: shape mismatch {a.shape} vs {b.shape}"
            )
        if a.backend is not b.backend and type(a.backend) is not type(b.backend):
            raise ValueError(f"{type(self).__name__}: operands use different backends")
        super().__init__(a.shape, a.backend)
        self.a = a
        self.b = b


class TPlus(TBinary):

    def _forward(self):
        return self.backend.plus(self.a.v, self.b.v)

    def _backward(self, g):
        self.a.dv(g)
        self.b.dv(g)


class TMinus(TBinary):

    def _forward(self):
        return self.backend.minus(self.a.v, self.b.v)

    def _backward(self, g):
        self.a.dv(g)
        self.b.dv(self.backend.negate(g))


class TTimes(TBinary):

    def _forward(self):
        return self.backend.times(self.a.v, self.b.v)

    def _backward(self, g):
        ops = self.backend
        av, bv = self.a.v, self.b.v
        self.a.dv(ops.times(g, bv))
        self.b.dv(ops.times(g, av))


class TDiv(TBinary):

    def _forward(self):
        return self.backend.div(self.a.v, self.b.v)

    def _backward(self, g):
        ops = self.backend
        nv, dv = self.a.v, self.b.v
        self.a.dv(ops.div(g, dv))
        self.b.dv(ops.div(ops.times(g, ops.negate(nv)), ops.times(dv, dv)))


class TPow(TBinary):

    def _forward(self):
        return self.backend.pow(self.a.v, self.b.v)

    def _backward(self, g):
        ops = self.backend
        bv, ev = self.a.v, self.b.v
        one = ops.fill(1.0, self.shape)
        self.a.dv(ops.times(ops.times(g, ev), ops.pow(bv, ops.minus(ev, one))))
        if not isinstance(self.b, TConst):
            self.b.dv(ops.times(ops.times(g, ops.pow(bv, ev)), ops.log(bv)))


class TNeg(TUnary):

    def _forward(self):
        return self.backend.negate(self.a.v)

    def _backward(self, g):
        self.a.dv(self.backend.negate(g))


class TSqrt(TUnary):

    def _forward(self):
        return self.backend.sqrt(self.a.v)

    def _backward(self, g):
        ops = self.backend
        two = ops.fill(2.0, self.shape)
        self.a.dv(ops.div(g, ops.times(two, ops.sqrt(self.a.v))))


class TLog(TUnary):

    def _forward(self):
        return self.backend.log(self.a.v)

    def _backward(self, g):
        self.a.dv(self.backend.div(g, self.a.v))


class TExp(TUnary):

    def _forward(self):
        return self.backend.exp(self.a.v)

    def _backward(self, g):
        self.a.dv(self.backend.times(g, self.backend.exp(self.a.v)))


class TLogistic(TUnary):

    def _forward(self):
        return self.backend.logistic(self.a.v)

    def _backward(self, g):
        ops = self.backend
        s = ops.logistic(self.a.v)
        one_minus_s = ops.minus(ops.fill(1.0, self.shape), s)
        self.a.dv(ops.times(g, ops.times(s, one_minus_s)))


class TSoftplus(TUnary):

    def _forward(self):
        return self.backend.softplus(self.a.v)

    def _backward(self, g):
        self.a.dv(self.backend.times(g, self.backend.logistic(self.a.v)))


class TDigamma(TUnary):

    def _forward(self):
        return self.backend.digamma(self.a.v)

    def _backward(self, g):
        self.a.dv(self.backend.times(g, self.backend.trigamma(self.a.v)))


class TLgamma(TUnary):

    def _forward(self):
        return self.backend.lgamma(self.a.v)

    def _backward(self, g):
        self.a.dv(self.backend.times(g, self.backend.digamma(self.a.v)))
