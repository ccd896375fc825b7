# optim/base.py
"""
Optimizer contract.

An optimizer hands out parameters: graph leaves whose `v` is the current
parameter value and whose `dv(gradient)` applies an update step. Parameter
state (value, iteration counter, momentum) lives for the whole inference run,
unlike the per-sample graph nodes that reference it.

Updates ascend: inference maximizes the ELBO, so `dv` receives d(ELBO)/d(param).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
import warnings

import numpy as np

from ..aad.core.value import Value
from ..tensor.backend import TensorBackend
from ..tensor.node import TensorNode


@dataclass
class ParamState:
    """Long-lived state of one parameter."""
    value: Any
    iteration: int = 0
    momentum: Any = 0.0


class Optimizer(ABC):
    """
    Base class for update strategies.

    Attributes:
        debug (bool): print every update and warn on non-finite values
        params (dict): named parameters keyed by (initial, lr, name); a repeated
            call with the same key returns the same long-lived parameter.
            Unnamed parameters are never shared.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.params: Dict[Tuple, Value] = {}

    def param(self, initial, lr, name: Optional[str] = None) -> Value:
        """Scalar parameter starting at `initial` with learning rate `lr`."""
        key = (float(initial), lr, name)
        if name is not None and key in self.params:
            return self.params[key]
        p = Param(self, ParamState(np.float64(initial)), lr, name)
        if name is not None:
            self.params[key] = p
        return p

    def tensor_param(self, initial, lr, backend: TensorBackend,
                     name: Optional[str] = None) -> TensorNode:
        """Tensor parameter; `initial` is backend data."""
        # array data is unhashable; its flattened values and shape stand in
        key = (tuple(float(v) for v in backend.from_values(initial, (-1,))),
               backend.shape(initial), lr, name)
        if name is not None and key in self.params:
            return self.params[key]
        p = TParam(self, ParamState(initial), lr, backend, name)
        if name is not None:
            self.params[key] = p
        return p

    def step(self, state: ParamState, grad, lr, name: Optional[str] = None) -> None:
        state.iteration += 1
        old = state.value
        self.update(state, grad, lr)
        if self.debug:
            print(f"    {type(self).__name__} ({name or ''}) {state.iteration}: "
                  f"{old} -> {state.value} (dv: {grad})")
            if not np.all(np.isfinite(state.value)):
                warnings.warn(
                    f"Non-finite value for parameter {name or ''} at iteration "
                    f"{state.iteration}: {state.value}",
                    RuntimeWarning,
                )

    @abstractmethod
    def update(self, state: ParamState, grad, lr) -> None:
        """Apply one update to `state.value`; `state.iteration` is already incremented."""
        pass


class Param(Value):
    """Scalar parameter leaf backed by optimizer state."""

    def __init__(self, optimizer: Optimizer, state: ParamState, lr, name: Optional[str] = None):
        super().__init__(name=name)
        self.optimizer = optimizer
        self.state = state
        self.lr = lr

    @property
    def v(self):
        return self.state.value

    def dv(self, grad) -> None:
        self.optimizer.step(self.state, grad, self.lr, self.name)

    def __repr__(self):
        return f"Param({self.state.value!r}, name={self.name!r})"


class TParam(TensorNode):
    """Tensor parameter leaf backed by optimizer state."""

    def __init__(self, optimizer: Optimizer, state: ParamState, lr,
                 backend: TensorBackend, name: Optional[str] = None):
        super().__init__(backend.shape(state.value), backend, name=name)
        self.optimizer = optimizer
        self.state = state
        self.lr = lr

    @property
    def v(self):
        return self.state.value

    def dv(self, grad) -> None:
        self.optimizer.step(self.state, grad, self.lr, self.name)
