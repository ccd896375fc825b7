# aad/__init__.py
# Reverse-mode differentiable value graph

from .core import (
    Value,
    Constant,
    ADVar,
    Buffer,
    Completeable,
    Tape,
    use_tape,
    backward,
    complete_all,
    grad,
    grads,
)
from .ops import (
    plus, minus, times, div, negate, pow,
    sqrt, log, exp,
    logistic, softplus, digamma, lgamma,
)

__all__ = [
    # Core
    'Value',
    'Constant',
    'ADVar',
    'Buffer',
    'Completeable',
    'Tape',
    'use_tape',
    'backward',
    'complete_all',
    'grad',
    'grads',
    # Ops
    'plus', 'minus', 'times', 'div', 'negate', 'pow',
    'sqrt', 'log', 'exp',
    'logistic', 'softplus', 'digamma', 'lgamma',
]
