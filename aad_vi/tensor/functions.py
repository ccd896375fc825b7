# tensor/functions.py
from typing import Dict, List, Optional, Sequence, Tuple

from ..aad.core.value import Value
from .backend import Condition, TensorBackend
from .node import (
    TensorNode, TConst,
    TPlus, TMinus, TTimes, TDiv, TPow, TNeg,
    TSqrt, TLog, TExp, TLogistic, TSoftplus, TDigamma, TLgamma,
)
from .shape_ops import TSum, TBroadcast, TensorDot, TSumAll, TAt, TFill


# ----------------------------- construction ----------------------------- #
def tensor(backend: TensorBackend, values, shape: Optional[Sequence[int]] = None,
           name: Optional[str] = None) -> TConst:
    """Constant tensor from nested values (or flat values plus `shape`)."""
    if shape is None:
        data = backend.from_values(values, _nested_shape(values))
    else:
        data = backend.from_values(values, shape)
    return TConst(backend, data, name=name)


def zeros(backend: TensorBackend, shape: Sequence[int]) -> TConst:
    return TConst(backend, backend.fill(0.0, shape))


def random_normal(backend: TensorBackend, shape: Sequence[int]) -> TConst:
    return TConst(backend, backend.random_normal(shape))


def fill(value: Value, shape: Sequence[int], backend: TensorBackend) -> TFill:
    """Tensor of `shape` whose elements all equal the scalar `value` (differentiable)."""
    return TFill(value, shape, backend)


def _nested_shape(values) -> Tuple[int, ...]:
    shape = []
    while isinstance(values, (list, tuple)):
        shape.append(len(values))
        values = values[0] if values else None
    if hasattr(values, "shape"):
        shape.extend(values.shape)
    return tuple(shape)


# ----------------------------- element-wise ----------------------------- #
def plus(a: TensorNode, b: TensorNode) -> TensorNode: return TPlus(a, b)
def minus(a: TensorNode, b: TensorNode) -> TensorNode: return TMinus(a, b)
def times(a: TensorNode, b: TensorNode) -> TensorNode: return TTimes(a, b)
def div(a: TensorNode, b: TensorNode) -> TensorNode: return TDiv(a, b)
def pow(a: TensorNode, b: TensorNode) -> TensorNode: return TPow(a, b)
def negate(a: TensorNode) -> TensorNode: return TNeg(a)
def sqrt(a: TensorNode) -> TensorNode: return TSqrt(a)
def log(a: TensorNode) -> TensorNode: return TLog(a)
def exp(a: TensorNode) -> TensorNode: return TExp(a)
def logistic(a: TensorNode) -> TensorNode: return TLogistic(a)
def softplus(a: TensorNode) -> TensorNode: return TSoftplus(a)
def digamma(a: TensorNode) -> TensorNode: return TDigamma(a)
def lgamma(a: TensorNode) -> TensorNode: return TLgamma(a)


# ----------------------------- shape ops ----------------------------- #
def sum(a: TensorNode, dim: int) -> TensorNode:
    return TSum(a, dim)


def broadcast(a: TensorNode, dim: int, size: int) -> TensorNode:
    return TBroadcast(a, dim, size)


def tensordot(a: TensorNode, b: TensorNode, pairs: List[Tuple[int, int]],
              a_to_out: Dict[int, int], b_to_out: Dict[int, int]) -> TensorNode:
    return TensorDot(a, b, pairs, a_to_out, b_to_out)


def sum_all(a: TensorNode) -> Value:
    return TSumAll(a)


def at(a: TensorNode, index: Sequence[int]) -> Value:
    return TAt(a, index)


# ----------------------------- non-differentiable ----------------------------- #
def count(a: TensorNode, condition: Condition) -> int:
    """Number of elements of `a` satisfying `condition` (only GreaterThan)."""
    return a.backend.count(a.v, condition)


def argmax(a: TensorNode) -> Tuple[int, ...]:
    """Index tuple of the maximum element of `a`."""
    return a.backend.argmax_indices(a.v)


def cumsum(a: TensorNode, dim: int) -> TConst:
    """Cumulative sum along `dim`, detached from gradient flow."""
    if not 0 <= dim < a.ndim:
        raise ValueError(f"cumsum: axis {dim} out of range for shape {a.shape}")
    return TConst(a.backend, a.backend.cumsum(a.v, dim))
