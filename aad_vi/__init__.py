# aad_vi/__init__.py
"""
aad_vi: reverse-mode automatic differentiation with online variational inference.

Subpackages:
    aad        scalar Value graph, Buffers and the completion protocol
    tensor     shape-indexed tensor graph over an explicit numeric backend
    optim      optimizer parameters (SGD, SGDMomentum)
    inference  variables, distributions, BBVI and reparameterization guides
"""

__version__ = "0.1.0"

from .aad import Value, Constant, ADVar, Buffer, Tape, use_tape
from .optim import SGD, SGDMomentum
from .inference import (
    InferenceConfig, BBVIGuide, ReparamGuide,
    Bernoulli, Normal, Categorical,
    observe, sample, draw, infer,
)

__all__ = [
    'Value', 'Constant', 'ADVar', 'Buffer', 'Tape', 'use_tape',
    'SGD', 'SGDMomentum',
    'InferenceConfig', 'BBVIGuide', 'ReparamGuide',
    'Bernoulli', 'Normal', 'Categorical',
    'observe', 'sample', 'draw', 'infer',
]
