"""
Optimizers turning accumulated gradients into parameter updates.

Provides:
1. Optimizer: abstract contract (`param`, `tensor_param`)
2. SGD: diminishing-step stochastic gradient ascent
3. SGDMomentum: SGD on a moving average of the gradient
"""

from .base import Optimizer, ParamState, Param, TParam
from .sgd import SGD, SGDMomentum

__all__ = [
    'Optimizer',
    'ParamState',
    'Param',
    'TParam',
    'SGD',
    'SGDMomentum',
]
