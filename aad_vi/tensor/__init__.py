"""
Shape-indexed tensor graph.

Nodes follow the same protocol as the scalar graph (`v` memoized forward
value, `dv` backward, `TBuffer` accumulation) and route every numeric
operation through an explicit `TensorBackend`.
"""

from .backend import TensorBackend, NumpyBackend, Condition, GreaterThan
from .node import TensorNode, TConst, TBuffer
from .shape_ops import TSum, TBroadcast, TensorDot, TSumAll, TAt, TFill
from .functions import (
    tensor, zeros, random_normal, fill,
    plus, minus, times, div, pow, negate,
    sqrt, log, exp, logistic, softplus, digamma, lgamma,
    sum, broadcast, tensordot, sum_all, at,
    count, argmax, cumsum,
)

__all__ = [
    'TensorBackend', 'NumpyBackend', 'Condition', 'GreaterThan',
    'TensorNode', 'TConst', 'TBuffer',
    'TSum', 'TBroadcast', 'TensorDot', 'TSumAll', 'TAt', 'TFill',
    'tensor', 'zeros', 'random_normal', 'fill',
    'plus', 'minus', 'times', 'div', 'pow', 'negate',
    'sqrt', 'log', 'exp', 'logistic', 'softplus', 'digamma', 'lgamma',
    'sum', 'broadcast', 'tensordot', 'sum_all', 'at',
    'count', 'argmax', 'cumsum',
]
