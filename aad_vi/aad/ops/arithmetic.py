# aad/ops/arithmetic.py
import numpy as np
from ..core.value import Value, Constant, to_value


class Unary(Value):
    """Node with a single operand `a`."""

    def __init__(self, a):
        super().__init__()
        self.a = to_value(a)


class Binary(Value):
    """Node with two operands `a` and `b`."""

    def __init__(self, a, b):
        super().__init__()
        self.a = to_value(a)
        self.b = to_value(b)


class Plus(Binary):

    def _forward(self):
        return self.a.v + self.b.v

    def _backward(self, g):
        self.a.dv(g)
        self.b.dv(g)

    def __repr__(self):
        return f"({self.a!r} + {self.b!r})"


class Minus(Binary):

    def _forward(self):
        return self.a.v - self.b.v

    def _backward(self, g):
        self.a.dv(g)
        self.b.dv(-g)

    def __repr__(self):
        return f"({self.a!r} - {self.b!r})"


class Times(Binary):

    def _forward(self):
        return self.a.v * self.b.v

    def _backward(self, g):
        av, bv = self.a.v, self.b.v
        self.a.dv(g * bv)
        self.b.dv(g * av)

    def __repr__(self):
        return f"({self.a!r} * {self.b!r})"


class Div(Binary):
    """n / d, with n = a (numerator) and d = b (denominator)."""

    def _forward(self):
        return self.a.v / self.b.v

    def _backward(self, g):
        nv, dv = self.a.v, self.b.v
        self.a.dv(g / dv)
        self.b.dv(g * (-nv) / (dv * dv))

    def __repr__(self):
        return f"({self.a!r} / {self.b!r})"


class Negate(Unary):

    def _forward(self):
        return -self.a.v

    def _backward(self, g):
        self.a.dv(-g)

    def __repr__(self):
        return f"-{self.a!r}"


class Pow(Binary):
    """
    base ** expo, with base = a and expo = b.

    Local partials:
      d/dbase = expo * base^(expo-1)
      d/dexpo = base^expo * log(base)   (requires base>0 for non-integer expo)

    The exponent partial is only evaluated when the exponent can receive a
    gradient, i.e. it is not a Constant.
    """

    def _forward(self):
        return np.power(self.a.v, self.b.v)

    def _backward(self, g):
        bv, ev = self.a.v, self.b.v
        self.a.dv(g * ev * np.power(bv, ev - 1.0))
        if not isinstance(self.b, Constant):
            self.b.dv(g * np.power(bv, ev) * np.log(bv))

    def __repr__(self):
        return f"({self.a!r} ^ {self.b!r})"


def plus(x, y): return Plus(x, y)
def minus(x, y): return Minus(x, y)
def times(x, y): return Times(x, y)
def div(x, y): return Div(x, y)
def negate(x): return Negate(x)
def pow(x, y): return Pow(x, y)
