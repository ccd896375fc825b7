# aad/ops/special.py
import numpy as np
from scipy import special as sp
from .arithmetic import Unary


class Logistic(Unary):
    """Sigmoid 1 / (1 + exp(-x)); d/dx = s * (1 - s)."""

    def _forward(self):
        return sp.expit(self.a.v)

    def _backward(self, g):
        s = sp.expit(self.a.v)
        self.a.dv(g * s * (1.0 - s))

    def __repr__(self):
        return f"logistic({self.a!r})"


class Softplus(Unary):
    """log(1 + exp(x)); d/dx = logistic(x)."""

    def _forward(self):
        return np.logaddexp(0.0, self.a.v)

    def _backward(self, g):
        self.a.dv(g * sp.expit(self.a.v))

    def __repr__(self):
        return f"softplus({self.a!r})"


class Digamma(Unary):
    """psi(x); d/dx = trigamma(x) = polygamma(1, x)."""

    def _forward(self):
        return sp.digamma(self.a.v)

    def _backward(self, g):
        self.a.dv(g * sp.polygamma(1, self.a.v))

    def __repr__(self):
        return f"digamma({self.a!r})"


class Lgamma(Unary):
    """log|Gamma(x)|; d/dx = digamma(x)."""

    def _forward(self):
        return sp.gammaln(self.a.v)

    def _backward(self, g):
        self.a.dv(g * sp.digamma(self.a.v))

    def __repr__(self):
        return f"lgamma({self.a!r})"


def logistic(x): return Logistic(x)
def softplus(x): return Softplus(x)
def digamma(x): return Digamma(x)
def lgamma(x): return Lgamma(x)
