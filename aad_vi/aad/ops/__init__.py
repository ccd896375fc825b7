# aad/ops/__init__.py

# Convenience re-exports so users can do: from aad_vi.aad.ops import times, exp, ...
from .arithmetic import plus, minus, times, div, negate, pow
from .transcendental import sqrt, log, exp
from .special import logistic, softplus, digamma, lgamma

__all__ = [
    "plus", "minus", "times", "div", "negate", "pow",
    "sqrt", "log", "exp",
    "logistic", "softplus", "digamma", "lgamma",
]
