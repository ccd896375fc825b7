# inference/variable.py
"""
Stochastic layer: sampled variables and observations.

A Variable carries a sampled value together with its model (prior) score and
its guide (approximate posterior) score. Downstream scores that depend on the
variable are registered on it through `add_observation` / `add_variable`;
together they form the variable's local Markov blanket, which its gradient
estimator uses instead of the full trace.

Completion order is the caller's responsibility: every dependent registers
its scores before the variable's own `complete()` runs, so objects are
completed in reverse construction order.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, List
import warnings

from ..aad.core.value import Value, Constant
from ..aad.core.buffer import Buffer, Completeable


class Variable(Completeable):
    """
    Attributes:
        get: the sampled outcome
        model_score: log prior probability of `get` (Score)
        guide_score: log guide probability of `get` (Score)
    """

    get: Any
    model_score: Value
    guide_score: Value

    @abstractmethod
    def add_observation(self, score: Value) -> None:
        """Register the score of an observation that depends on this variable."""
        ...

    @abstractmethod
    def add_variable(self, model_score: Value, guide_score: Value) -> None:
        """Register the scores of a downstream sampled variable."""
        ...


class ConstantVariable(Variable):
    """A fixed value; nothing can be learned from scores registered on it."""

    def __init__(self, value):
        self.get = value
        self.model_score = Constant(0.0)
        self.guide_score = Constant(0.0)

    def add_observation(self, score: Value) -> None:
        warnings.warn("Adding observation to a constant variable", UserWarning)

    def add_variable(self, model_score: Value, guide_score: Value) -> None:
        warnings.warn("Adding dependent variable to a constant variable", UserWarning)

    def complete(self) -> None:
        pass

    def __repr__(self):
        return f"ConstantVariable({self.get!r})"


class Dependencies(Variable):
    """Fan-out of registrations to several upstream variables."""

    def __init__(self, *upstream: Variable):
        self.upstream: List[Variable] = list(upstream)
        self.model_score = Constant(0.0)
        self.guide_score = Constant(0.0)

    @property
    def get(self):
        raise TypeError("Dependencies has no sampled value")

    def add_observation(self, score: Value) -> None:
        for v in self.upstream:
            v.add_observation(score)

    def add_variable(self, model_score: Value, guide_score: Value) -> None:
        for v in self.upstream:
            v.add_variable(model_score, guide_score)

    def complete(self) -> None:
        pass


class Observation(Completeable):
    """
    Score of an observed value under a distribution.

    `complete()` seeds the score with gradient 1 and flushes it, so the
    log-likelihood gradient reaches the distribution's parameters.
    """

    def __init__(self, distribution, value):
        self.distribution = distribution
        self.value = value
        self.score: Buffer = distribution.observe(value).buffer()

    def complete(self) -> None:
        self.score.dv(1.0)
        self.score.complete()

    def __repr__(self):
        return f"Observation({self.distribution!r}, {self.value!r})"


def observe(distribution, value) -> Observation:
    return Observation(distribution, value)


class Model(ABC):
    """Something that produces a fresh Variable per sample."""

    @abstractmethod
    def sample(self) -> Variable:
        ...

    def with_deps(self, deps: Variable) -> "Model":
        """Model whose sampled scores are also registered on `deps`."""
        return self


def sample(model: Model):
    """
    Draw one value from `model` and update its guides.

    The variable is completed before returning, which flushes every gradient
    of this sample into the optimizer parameters.
    """
    variable = model.sample()
    value = variable.get
    variable.complete()
    return value


def draw(model: Model, n: int) -> list:
    """`n` consecutive calls of `sample(model)`."""
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    return [sample(model) for _ in range(n)]
