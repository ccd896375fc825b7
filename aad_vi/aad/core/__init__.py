# aad/core/__init__.py

"""
Core public API for the autodiff graph.

Exports:
    Value         : Base graph node (lazy memoized forward value, `dv` backward).
    Constant      : Detached value; drops gradients.
    ADVar         : Differentiable leaf accumulating its adjoint in `adj`.
    Buffer        : Gradient accumulator flushed once by `complete()`.
    Completeable  : Interface of objects completed in reverse construction order.
    Tape          : Per-sample completion arena; `use_tape` activates one.
    backward      : Seed gradients at output(s).
    complete_all  : Complete items given in construction order, newest first.
    grad, grads   : Convenience: gradient of a scalar function at a point.
    value         : Convenience: extract the forward value of a Value.
"""

from .value import Value, Constant, ADVar, to_value
from .buffer import Buffer, Completeable
from .tape import Tape, use_tape, active_tape
from .engine import backward, complete_all, numeric_grad, check_grad
from .seeds import grad, grads, value

__all__ = [
    "Value", "Constant", "ADVar", "to_value",
    "Buffer", "Completeable",
    "Tape", "use_tape", "active_tape",
    "backward", "complete_all", "numeric_grad", "check_grad",
    "grad", "grads", "value",
]
