# inference/reparam.py
"""
Reparameterization (pathwise) guide.

The sample is a differentiable transform of fixed noise, so the ELBO
model_score - guide_score is differentiated directly through the sample
path. The guide score uses detached distribution parameters: only its
dependence on the sampled value is wanted.
"""

from typing import Optional

from ..aad.core.value import Value
from .config import InferenceConfig
from .distributions import DDistribution
from .variable import Variable


class ReparamGuide:

    def __init__(self, posterior: DDistribution, config: Optional[InferenceConfig] = None):
        self.posterior = posterior
        self.config = config if config is not None else InferenceConfig()

    def sample(self, prior: DDistribution) -> Variable:
        return ReparamVariable(self, prior)

    def __repr__(self):
        return f"ReparamGuide({self.posterior!r})"


class ReparamVariable(Variable):
    """
    One pathwise sample. `get` is a Buffer over the sample path; downstream
    scores built on it send their gradients there, so nothing needs to be
    registered on the variable itself.
    """

    def __init__(self, guide: ReparamGuide, prior: DDistribution):
        self.guide = guide
        self._sample = guide.posterior.sample(scale=guide.config.reparam_scale)
        self.get = self._sample.get
        self.model_score = prior.observe(self.get).buffer()
        self.guide_score = guide.posterior.reparam_score(self.get).buffer()
        if guide.config.verbose:
            print(f"  reparam sample: x={float(self.get.v):.6g}")

    def add_observation(self, score: Value) -> None:
        pass

    def add_variable(self, model_score: Value, guide_score: Value) -> None:
        pass

    def complete(self) -> None:
        self.model_score.dv(1.0)
        self.model_score.complete()
        self.guide_score.dv(-1.0)
        self.guide_score.complete()
        self._sample.complete()
