# aad/ops/transcendental.py
import numpy as np
from .arithmetic import Unary


class Sqrt(Unary):

    def _forward(self):
        return np.sqrt(self.a.v)

    def _backward(self, g):
        self.a.dv(g * 0.5 / np.sqrt(self.a.v))

    def __repr__(self):
        return f"sqrt({self.a!r})"


class Log(Unary):

    def _forward(self):
        return np.log(self.a.v)

    def _backward(self, g):
        self.a.dv(g / self.a.v)

    def __repr__(self):
        return f"log({self.a!r})"


class Exp(Unary):

    def _forward(self):
        return np.exp(self.a.v)

    def _backward(self, g):
        self.a.dv(g * np.exp(self.a.v))

    def __repr__(self):
        return f"exp({self.a!r})"


def sqrt(x): return Sqrt(x)
def log(x): return Log(x)
def exp(x): return Exp(x)
