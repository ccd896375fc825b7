# aad/core/value.py
from __future__ import annotations
import numpy as np
from typing import Any, Optional


class Value:
    """
    Node of the reverse-mode computation graph.

    A node has exactly two capabilities:
      - compute its forward value from the values of its operands (`_forward`)
      - distribute an incoming gradient to its operands (`_backward`)

    Attributes
    ----------
    v : Any
        Forward (primal) value. Computed on first access and memoized until the
        next backward call on this node.
    name : Optional[str]
        Optional debug/pretty-print name.

    Notes
    -----
    `dv` is expected to be called at most once per backward pass. When a node
    feeds more than one consumer, wrap it in a Buffer (`value.buffer()`) so the
    contributions are summed before a single flush.
    """

    __array_priority__ = 1000  # keep numpy scalars from swallowing our operators

    def __init__(self, name: Optional[str] = None):
        self._v = None
        self.name = name

    @property
    def v(self):
        if self._v is None:
            self._v = self._forward()
        return self._v

    def dv(self, grad) -> None:
        self._backward(grad)
        self._v = None

    def _forward(self):
        raise NotImplementedError

    def _backward(self, grad) -> None:
        raise NotImplementedError

    def buffer(self):
        from .buffer import Buffer
        return Buffer(self)

    def const(self) -> "Constant":
        """Snapshot the current forward value as a detached Constant."""
        return Constant(self.v)

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r})"

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import plus
        return plus(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import plus
        return plus(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import minus
        return minus(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import minus
        return minus(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import times
        return times(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import times
        return times(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import negate
        return negate(self)

    def __pow__(self, other):
        from ..ops.arithmetic import pow
        return pow(self, other)

    def __rpow__(self, other):
        from ..ops.arithmetic import pow
        return pow(other, self)


class Constant(Value):
    """A fixed value; gradients sent to it are dropped."""

    def __init__(self, val: Any, name: Optional[str] = None):
        super().__init__(name=name)
        self._v = _as_numeric(val)

    @property
    def v(self):
        return self._v

    def dv(self, grad) -> None:
        pass

    def const(self) -> "Constant":
        return self

    def __repr__(self):
        return f"Constant({self._v!r}, name={self.name!r})"


class ADVar(Value):
    """
    Differentiable leaf. Every incoming gradient is added to `adj`.

    Attributes
    ----------
    val : float | np.ndarray
        Forward (primal) value of this variable.
    adj : float | np.ndarray
        Adjoint (gradient accumulator); same shape as val.
    """

    def __init__(self, val: Any, name: Optional[str] = None):
        super().__init__(name=name)
        self.val = _as_numeric(val)
        self.adj = np.zeros_like(self.val, dtype=float)

    @property
    def v(self):
        return self.val

    def dv(self, grad) -> None:
        self.adj = self.adj + grad

    def zero_grad(self) -> None:
        self.adj = np.zeros_like(self.val, dtype=float)

    def __repr__(self):
        return f"ADVar({self.val!r}, name={self.name!r})"


def _as_numeric(val: Any):
    # Type check: only allow numeric scalars, sequences, or numpy arrays
    if isinstance(val, (bool, np.bool_)):
        return float(val)
    if isinstance(val, (int, float, np.number)):
        return np.float64(val)
    if isinstance(val, (list, tuple, np.ndarray)):
        return np.asarray(val, dtype=np.float64)
    raise TypeError(
        f"Value only accepts numeric types (int, float, list, tuple, ndarray), "
        f"but got {type(val)}"
    )


def to_value(x: Any) -> Value:
    """Ensure x is a Value; otherwise wrap it as a Constant."""
    return x if isinstance(x, Value) else Constant(x)
