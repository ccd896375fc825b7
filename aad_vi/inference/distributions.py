# inference/distributions.py
"""
Sampling distributions.

Each distribution offers `sample()` (a Sample: outcome, its score, and a
`complete()` hook) and `observe(value)` (the log-probability Score of a given
outcome, differentiable in the distribution's parameters). DDistribution adds
`reparam_score(x)`: the score with detached parameters, used by pathwise
guides where only the dependence on the sample path is wanted.

Randomness comes from the global `np.random` state.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..aad.core.value import Value, to_value
from ..aad.core.buffer import Completeable
from ..aad.ops import log
from ..tensor.backend import GreaterThan
from ..tensor.node import TensorNode
from ..tensor.functions import cumsum, count

LOG_2PI = float(np.log(2.0 * np.pi))


class Sample(Completeable):
    """One draw from a distribution."""

    def __init__(self, distribution: "Distribution", value):
        self.distribution = distribution
        self.get = value

    @property
    def score(self) -> Value:
        return self.distribution.observe(self.get)

    def complete(self) -> None:
        pass


class Distribution(ABC):

    @abstractmethod
    def sample(self) -> Sample:
        ...

    @abstractmethod
    def observe(self, value) -> Value:
        ...


class DDistribution(Distribution):
    """
    Distribution over differentiable values.

    `sample(scale)` may take the bound of a pathwise-gradient clamp; pathwise
    guides pass theirs through.
    """

    @abstractmethod
    def sample(self, scale: Optional[float] = None) -> Sample:
        ...

    @abstractmethod
    def reparam_score(self, x: Value) -> Value:
        ...


# ----------------------------- Bernoulli ----------------------------- #
class Bernoulli(Distribution):
    """Boolean outcome, True with probability `p`."""

    def __init__(self, p):
        self.p = to_value(p)

    def sample(self) -> Sample:
        return Sample(self, bool(np.random.random() < self.p.v))

    def observe(self, value: bool) -> Value:
        if value:
            return log(self.p)
        return log(1.0 - self.p)

    def __repr__(self):
        return f"Bernoulli({self.p!r})"


# ----------------------------- Normal ----------------------------- #
class LocationScale(Value):
    """
    Sample path x = mu + sigma * eps with eps drawn once.

    Backward bounds the incoming gradient d before passing it on:
        r = scale * tanh(d / (sigma * scale)) / sigma
        mu    <- r
        sigma <- eps * r / 2
    so a single update moves mu by at most `scale` standard deviations.
    """

    def __init__(self, mu: Value, sigma: Value, scale: float = 5.0):
        super().__init__()
        self.mu = mu
        self.sigma = sigma
        self.scale = scale
        self.eps = np.random.normal()

    def _forward(self):
        return self.mu.v + self.sigma.v * self.eps

    def _backward(self, d):
        s = self.sigma.v
        r = self.scale * np.tanh(d / (s * self.scale)) / s
        self.mu.dv(r)
        self.sigma.dv(self.eps * r / 2)


class NormalSample(Sample):
    """Reparameterized draw; `get` is a Buffer over the sample path."""

    def __init__(self, distribution: "Normal", scale: float):
        x = LocationScale(distribution.mu, distribution.sigma, scale)
        super().__init__(distribution, x.buffer())

    def complete(self) -> None:
        self.get.complete()


class Normal(DDistribution):
    """
    Gaussian with location `mu` and scale `sigma`.

    Scalar parameters give a scalar Normal. When the observed value or `mu`
    is a TensorNode the elements are independent Normals and `observe`
    returns the summed score.
    """

    def __init__(self, mu, sigma, scale: float = 5.0):
        self.mu = mu if isinstance(mu, TensorNode) else to_value(mu)
        self.sigma = to_value(sigma)
        self.scale = scale

    def sample(self, scale: Optional[float] = None) -> Sample:
        if isinstance(self.mu, TensorNode):
            raise ValueError("Normal.sample: only scalar parameters can be sampled")
        return NormalSample(self, self.scale if scale is None else scale)

    def observe(self, x) -> Value:
        return self._score(x, self.mu, self.sigma)

    def reparam_score(self, x: Value) -> Value:
        return self._score(x, self.mu.const(), self.sigma.const())

    @staticmethod
    def _score(x, mu, sigma) -> Value:
        if isinstance(x, TensorNode) or isinstance(mu, TensorNode):
            return TensorNormalLogProb(to_value(x), mu, sigma)
        return NormalLogProb(to_value(x), mu, sigma)

    def __repr__(self):
        return f"Normal({self.mu!r}, {self.sigma!r})"


class NormalLogProb(Value):
    """
    log N(x | mu, sigma) as one node.

    `sigma` enters the density twice; computing the partials here lets every
    operand receive a single `dv` per backward pass.
    """

    def __init__(self, x: Value, mu: Value, sigma: Value):
        super().__init__()
        self.x = x
        self.mu = mu
        self.sigma = sigma

    def _forward(self):
        s = self.sigma.v
        z = (self.x.v - self.mu.v) / s
        return -np.log(s) - z * z / 2.0 - 0.5 * LOG_2PI

    def _backward(self, g):
        s = self.sigma.v
        diff = self.x.v - self.mu.v
        dx = -g * diff / (s * s)
        dsigma = g * (diff * diff / (s * s) - 1.0) / s
        # partials are taken before any operand moves
        self.x.dv(dx)
        self.mu.dv(-dx)
        self.sigma.dv(dsigma)


class TensorNormalLogProb(Value):
    """
    Summed log-density of independent Normals over tensor elements.

    Either `x` or `mu` is a TensorNode; the other may be a scalar Value, in
    which case its gradient is the sum over elements. `sigma` is a scalar.
    """

    def __init__(self, x: Value, mu: Value, sigma: Value):
        super().__init__()
        if isinstance(x, TensorNode) and isinstance(mu, TensorNode) and x.shape != mu.shape:
            raise ValueError(f"Normal: shape mismatch {x.shape} vs {mu.shape}")
        shaped = x if isinstance(x, TensorNode) else mu
        self.backend = shaped.backend
        self.size = int(np.prod(shaped.shape))
        self.x = x
        self.mu = mu
        self.sigma = sigma

    def _forward(self):
        ops = self.backend
        s = self.sigma.v
        diff = ops.minus(self.x.v, self.mu.v)
        squares = ops.sum_all(ops.times(diff, diff))
        return -squares / (2.0 * s * s) - self.size * (np.log(s) + 0.5 * LOG_2PI)

    def _backward(self, g):
        ops = self.backend
        s = self.sigma.v
        diff = ops.minus(self.x.v, self.mu.v)
        squares = ops.sum_all(ops.times(diff, diff))
        dx = ops.times(diff, -g / (s * s))
        dsigma = g * (squares / (s * s) - self.size) / s
        self.x.dv(self._reduce(self.x, dx))
        self.mu.dv(self._reduce(self.mu, ops.negate(dx)))
        self.sigma.dv(dsigma)

    def _reduce(self, operand, grad):
        if isinstance(operand, TensorNode):
            return grad
        return self.backend.sum_all(grad)


# ----------------------------- Categorical ----------------------------- #
class CategoricalLogProb(Value):
    """log(p[index] / sum(p)) for an unnormalized weight vector p."""

    def __init__(self, p: TensorNode, index: int):
        super().__init__()
        self.p = p
        self.index = (int(index),)

    def _forward(self):
        ops = self.p.backend
        pv = self.p.v
        return np.log(ops.get(pv, self.index) / ops.sum_all(pv))

    def _backward(self, g):
        ops = self.p.backend
        pv = self.p.v
        total = ops.sum_all(pv)
        grad = ops.fill(-float(g) / total, self.p.shape)
        ops.put(grad, ops.get(grad, self.index) + float(g) / ops.get(pv, self.index), self.index)
        self.p.dv(grad)


class Categorical(Distribution):
    """
    Index in range(len(p)) drawn with probability proportional to `p`.

    Sampling is an inverse-CDF search over the cumulative sum of `p`.
    """

    def __init__(self, p: TensorNode):
        if p.ndim != 1:
            raise ValueError(f"Categorical expects a 1-d weight tensor, got shape {p.shape}")
        self.p = p
        self.size = p.shape[0]

    def sample(self) -> Sample:
        total = self.p.backend.sum_all(self.p.v)
        draw = np.random.random() * total
        above = count(cumsum(self.p, 0), GreaterThan(draw))
        # cumsum rounding can leave the last entry a hair below the total
        return Sample(self, min(self.size - above, self.size - 1))

    def observe(self, index: int) -> Value:
        if not 0 <= index < self.size:
            raise ValueError(f"Categorical.observe: index {index} out of range [0, {self.size})")
        return CategoricalLogProb(self.p, index)

    def __repr__(self):
        return f"Categorical(size={self.size})"
