"""
Variational inference on the differentiable graph.

Provides:
1. Variable / Observation / Model: the stochastic layer and its completion protocol
2. Bernoulli, Normal, Categorical: sampling distributions
3. BBVIGuide: score-function estimator with a control variate
4. ReparamGuide: pathwise estimator
5. Trace / infer: explicit model construction
"""

from .config import InferenceConfig
from .variable import (
    Variable, ConstantVariable, Dependencies, Observation, observe,
    Model, sample, draw,
)
from .distributions import (
    Sample, Distribution, DDistribution,
    Bernoulli, Normal, Categorical, LocationScale,
)
from .bbvi import BBVIGuide, BBVIVariable
from .reparam import ReparamGuide, ReparamVariable
from .trace import Trace, TraceVariable, TracedModel, infer

__all__ = [
    'InferenceConfig',
    'Variable', 'ConstantVariable', 'Dependencies', 'Observation', 'observe',
    'Model', 'sample', 'draw',
    'Sample', 'Distribution', 'DDistribution',
    'Bernoulli', 'Normal', 'Categorical', 'LocationScale',
    'BBVIGuide', 'BBVIVariable',
    'ReparamGuide', 'ReparamVariable',
    'Trace', 'TraceVariable', 'TracedModel', 'infer',
]
