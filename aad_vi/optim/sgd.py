# optim/sgd.py
"""
Diminishing-step stochastic gradient updates.

    SGD          : value += grad * lr / iteration
    SGDMomentum  : momentum = ((mass - 1) * momentum + grad) / mass
                   value   += momentum * lr / iteration
"""

from .base import Optimizer, ParamState


class SGD(Optimizer):
    """Plain SGD with a 1/iteration step schedule."""

    def update(self, state: ParamState, grad, lr) -> None:
        state.value = state.value + grad * lr / state.iteration


class SGDMomentum(Optimizer):
    """
    SGD on an exponential moving average of the gradient.

    Args:
        mass: averaging window; the moving average keeps (mass-1)/mass of
              the previous momentum on every step
        debug: print every update
    """

    def __init__(self, mass: int = 10, debug: bool = False):
        super().__init__(debug=debug)
        if mass < 1:
            raise ValueError(f"mass must be >= 1, got {mass}")
        self.mass = mass

    def update(self, state: ParamState, grad, lr) -> None:
        state.momentum = ((self.mass - 1) * state.momentum + grad) / self.mass
        state.value = state.value + state.momentum * lr / state.iteration
