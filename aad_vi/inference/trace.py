# inference/trace.py
"""
Explicit model construction.

A Trace records the variables and observations of one model sample in
construction order, registers each new score on the variables it depends on,
and completes everything newest first. `infer(fn)` turns a function of a
Trace into a Model, so models are written as ordinary Python:

    rain_guide = BBVIGuide(Bernoulli(logistic(sgd.param(0.0, 10.0))))

    def sprinkler(trace):
        rain = trace.sample(rain_guide, Bernoulli(0.2))
        trace.observe(Bernoulli(0.9 if rain.get else 0.1), True, deps=[rain])
        return rain.get

    model = infer(sprinkler)
    value = sample(model)
"""

from __future__ import annotations
from typing import Callable, List, Optional, Sequence

from ..aad.core.value import Constant
from ..aad.core.buffer import Completeable
from .variable import Variable, Observation, Model, Dependencies


class Trace(Completeable):
    """
    Attributes:
        items (list): sampled variables and observations, in construction order
        deps (Variable | None): model-level dependencies every score is also
            registered on (see `Model.with_deps`)
    """

    def __init__(self, deps: Optional[Variable] = None):
        self.items: List[Completeable] = []
        self.variables: List[Variable] = []
        self.observations: List[Observation] = []
        self.deps = deps

    def sample(self, guide, prior, deps: Sequence[Variable] = ()) -> Variable:
        """Sample `guide` against `prior`; the new scores are registered on `deps`."""
        var = guide.sample(prior)
        for d in self._targets(deps):
            d.add_variable(var.model_score, var.guide_score)
        self.items.append(var)
        self.variables.append(var)
        return var

    def observe(self, distribution, value, deps: Sequence[Variable] = ()) -> Observation:
        """Observe `value` under `distribution`; the score is registered on `deps`."""
        obs = Observation(distribution, value)
        for d in self._targets(deps):
            d.add_observation(obs.score)
        self.items.append(obs)
        self.observations.append(obs)
        return obs

    def _targets(self, deps: Sequence[Variable]) -> List[Variable]:
        targets = list(deps)
        if self.deps is not None:
            targets.append(self.deps)
        return targets

    @property
    def model_score(self) -> float:
        """Joint model log-probability of this sample."""
        return (sum(float(v.model_score.v) for v in self.variables)
                + sum(float(o.score.v) for o in self.observations))

    @property
    def guide_score(self) -> float:
        """Joint guide log-probability of this sample."""
        return sum(float(v.guide_score.v) for v in self.variables)

    def complete(self) -> None:
        while self.items:
            self.items.pop().complete()


class TraceVariable(Variable):
    """Result of one run of a traced model; completing it completes the trace."""

    def __init__(self, trace: Trace, value):
        self.trace = trace
        self.get = value
        # evaluated before any flush
        self.model_score = Constant(trace.model_score)
        self.guide_score = Constant(trace.guide_score)
        self.upstream = Dependencies(*trace.variables)

    def add_observation(self, score) -> None:
        self.upstream.add_observation(score)

    def add_variable(self, model_score, guide_score) -> None:
        self.upstream.add_variable(model_score, guide_score)

    def complete(self) -> None:
        self.trace.complete()


class TracedModel(Model):
    """Model defined by a function `fn(trace) -> value`."""

    def __init__(self, fn: Callable[[Trace], object], deps: Optional[Variable] = None):
        self.fn = fn
        self.deps = deps

    def sample(self) -> Variable:
        trace = Trace(self.deps)
        value = self.fn(trace)
        return TraceVariable(trace, value)

    def with_deps(self, deps: Variable) -> "TracedModel":
        return TracedModel(self.fn, deps)


def infer(fn: Callable[[Trace], object]) -> TracedModel:
    return TracedModel(fn)
