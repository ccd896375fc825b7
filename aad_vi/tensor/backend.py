# tensor/backend.py
"""
Numeric backend capability for the tensor graph.

The tensor graph never touches array data directly: every node holds an
explicit backend object and routes element-wise, shape and contraction
operations through it. Any object implementing `TensorBackend` can back the
graph; `NumpyBackend` is the reference implementation on top of numpy and
scipy.special.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np
from scipy import special as sp


@dataclass(frozen=True)
class Condition:
    """Element-wise predicate used by `count`."""


@dataclass(frozen=True)
class GreaterThan(Condition):
    value: float


class TensorBackend(ABC):
    """Capability set consumed by the tensor graph."""

    # (de)constructing values

    @abstractmethod
    def fill(self, value: float, shape: Sequence[int]): ...

    @abstractmethod
    def random_normal(self, shape: Sequence[int]): ...

    @abstractmethod
    def from_values(self, values, shape: Sequence[int]): ...

    @abstractmethod
    def shape(self, a) -> Tuple[int, ...]: ...

    @abstractmethod
    def get(self, a, indices: Sequence[int]) -> float: ...

    @abstractmethod
    def put(self, a, value: float, indices: Sequence[int]) -> None: ...

    @abstractmethod
    def count(self, a, condition: Condition) -> int: ...

    @abstractmethod
    def argmax_indices(self, a) -> Tuple[int, ...]: ...

    # element-wise operations

    @abstractmethod
    def plus(self, a, b): ...

    @abstractmethod
    def minus(self, a, b): ...

    @abstractmethod
    def times(self, a, b): ...

    @abstractmethod
    def div(self, a, b): ...

    @abstractmethod
    def pow(self, a, b): ...

    @abstractmethod
    def negate(self, a): ...

    @abstractmethod
    def sqrt(self, a): ...

    @abstractmethod
    def log(self, a): ...

    @abstractmethod
    def exp(self, a): ...

    @abstractmethod
    def logistic(self, a): ...

    @abstractmethod
    def softplus(self, a): ...

    @abstractmethod
    def digamma(self, a): ...

    @abstractmethod
    def trigamma(self, a): ...

    @abstractmethod
    def lgamma(self, a): ...

    @abstractmethod
    def cumsum(self, a, dim: int): ...

    # shape-affecting operations

    @abstractmethod
    def reduce_sum(self, a, dim: int): ...

    @abstractmethod
    def broadcast(self, a, dim: int, size: int): ...

    @abstractmethod
    def sum_all(self, a) -> float: ...

    @abstractmethod
    def tensordot(self, a, b, pairs: List[Tuple[int, int]],
                  a_to_out: Dict[int, int], b_to_out: Dict[int, int]): ...


class NumpyBackend(TensorBackend):
    """float64 numpy arrays; special functions from scipy.special."""

    dtype = np.float64

    def fill(self, value, shape):
        return np.full(tuple(shape), value, dtype=self.dtype)

    def random_normal(self, shape):
        return np.random.standard_normal(tuple(shape))

    def from_values(self, values, shape):
        return np.asarray(values, dtype=self.dtype).reshape(tuple(shape))

    def shape(self, a):
        return tuple(np.shape(a))

    def get(self, a, indices):
        return float(a[tuple(indices)])

    def put(self, a, value, indices):
        a[tuple(indices)] = value

    def count(self, a, condition):
        if isinstance(condition, GreaterThan):
            return int(np.count_nonzero(a > condition.value))
        raise ValueError(f"Unsupported condition for count: {condition!r}")

    def argmax_indices(self, a):
        return tuple(int(i) for i in np.unravel_index(np.argmax(a), np.shape(a)))

    def plus(self, a, b):
        return a + b

    def minus(self, a, b):
        return a - b

    def times(self, a, b):
        return a * b

    def div(self, a, b):
        return a / b

    def pow(self, a, b):
        return np.power(a, b)

    def negate(self, a):
        return -a

    def sqrt(self, a):
        return np.sqrt(a)

    def log(self, a):
        return np.log(a)

    def exp(self, a):
        return np.exp(a)

    def logistic(self, a):
        return sp.expit(a)

    def softplus(self, a):
        return np.logaddexp(0.0, a)

    def digamma(self, a):
        return sp.digamma(a)

    def trigamma(self, a):
        return sp.polygamma(1, a)

    def lgamma(self, a):
        return sp.gammaln(a)

    def cumsum(self, a, dim):
        return np.cumsum(a, axis=dim)

    def reduce_sum(self, a, dim):
        return np.sum(a, axis=dim)

    def broadcast(self, a, dim, size):
        expanded = np.expand_dims(a, axis=dim)
        return np.repeat(expanded, size, axis=dim)

    def sum_all(self, a):
        return float(np.sum(a))

    def tensordot(self, a, b, pairs, a_to_out, b_to_out):
        """
        Contract `pairs` of (a_axis, b_axis), then permute so that every
        remaining axis lands at the output position given by the maps.

        np.tensordot lays out the remaining axes of `a` (in order) followed by
        the remaining axes of `b`; `free[k]` is the output position of that
        k-th axis, and the transpose pulls axis k to position free[k].
        """
        a_axes = [i for i, _ in pairs]
        b_axes = [j for _, j in pairs]
        out = np.tensordot(a, b, axes=(a_axes, b_axes))
        free = [a_to_out[i] for i in range(np.ndim(a)) if i not in a_axes] + \
               [b_to_out[j] for j in range(np.ndim(b)) if j not in b_axes]
        perm = sorted(range(len(free)), key=lambda k: free[k])
        return np.transpose(out, perm)
