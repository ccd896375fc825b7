# inference/bbvi.py
"""
Black-box variational inference guide.

The guide's own score is trained with the score-function (REINFORCE)
estimator

    grad ELBO ~ (logp - logq - control) * grad logq

where logp / logq are the model / guide scores of the variable's Markov
blanket (Rao-Blackwellization) and `control` is an exponentially weighted
average of past deltas. A constant shift has zero expectation under the
guide, so subtracting it leaves the estimator unbiased.
"""

from typing import Optional

from ..aad.core.value import Value
from .config import InferenceConfig
from .distributions import Distribution
from .variable import Variable


class BBVIGuide:
    """
    Approximate posterior for one latent variable.

    Attributes:
        posterior (Distribution): the guide distribution, parameterized by
            optimizer parameters
        iteration (int): completed samples
        weight, offset (float): control-variate moving averages; the control
            is offset / weight
    """

    def __init__(self, posterior: Distribution, config: Optional[InferenceConfig] = None):
        self.posterior = posterior
        self.config = config if config is not None else InferenceConfig()
        self.iteration = 0
        self.weight = 0.0
        self.offset = 0.0

    def sample(self, prior: Distribution) -> Variable:
        """Draw from the guide; the prior scores the drawn value in the model."""
        return BBVIVariable(self, prior)

    def update(self, guide_score: Value, logp: float, logq: float) -> float:
        """Advance the control variate and seed `guide_score`; returns the seed."""
        self.iteration += 1
        rho = self.iteration ** -self.config.bbvi_decay
        delta = logp - logq

        self.weight = (1.0 - rho) * self.weight + rho
        self.offset = (1.0 - rho) * self.offset + rho * delta

        if self.weight < self.config.control_weight_floor:
            control = 0.0
        else:
            control = self.offset / self.weight

        if self.config.verbose:
            print(f"  BBVI {self.iteration}: delta={delta:.6g} control={control:.6g}")

        guide_score.dv(delta - control)
        return delta - control

    def __repr__(self):
        return f"BBVIGuide({self.posterior!r}, iteration={self.iteration})"


class BBVIVariable(Variable):
    """
    One sample of a BBVIGuide.

    Scores registered from the Markov blanket are captured by value when they
    are registered; their graphs may be flushed (and their parameters moved)
    before this variable completes.
    """

    def __init__(self, guide: BBVIGuide, prior: Distribution):
        self.guide = guide
        self._sample = guide.posterior.sample()
        self.get = self._sample.get
        self.model_score = prior.observe(self.get).buffer()
        self.guide_score = guide.posterior.observe(self.get).buffer()
        self.logp = float(self.model_score.v)
        self.logq = float(self.guide_score.v)

    def add_observation(self, score: Value) -> None:
        self.logp += float(score.v)

    def add_variable(self, model_score: Value, guide_score: Value) -> None:
        self.logp += float(model_score.v)
        self.logq += float(guide_score.v)

    def complete(self) -> None:
        # direct gradient of the model score
        self.model_score.dv(1.0)
        self.guide.update(self.guide_score, self.logp, self.logq)
        self.model_score.complete()
        self.guide_score.complete()
        # the sample path is left unflushed: this estimator has no pathwise term
