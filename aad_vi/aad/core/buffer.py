# aad/core/buffer.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional

from .value import Value
from . import tape as tape_mod  # Use module access for use_tape() compatibility


class Completeable(ABC):
    """
    Object that is torn down once the current sample is finished.

    Objects are completed in reverse (topological) construction order: by the
    time `complete()` runs, everything that depends on the object has already
    been completed. `complete()` is the last call the object receives.
    """

    @abstractmethod
    def complete(self) -> None:
        ...


class Buffer(Value, Completeable):
    """
    Gradient accumulator in front of a Value.

    Every `dv` call before `complete()` is summed into `accumulated`;
    `complete()` flushes the sum to the wrapped value exactly once. Completing a
    buffer that received no gradient does nothing.
    """

    def __init__(self, upstream: Value, name: Optional[str] = None):
        super().__init__(name=name if name is not None else upstream.name)
        self.upstream = upstream
        self.accumulated = None
        tape = tape_mod.active_tape()
        if tape is not None:
            tape.push(self)

    def _forward(self):
        return self.upstream.v

    def _accumulate(self, total, grad):
        return total + grad

    def dv(self, grad) -> None:
        if self.accumulated is None:
            self.accumulated = grad
        else:
            self.accumulated = self._accumulate(self.accumulated, grad)

    def complete(self) -> None:
        if self.accumulated is not None:
            grad, self.accumulated = self.accumulated, None
            self.upstream.dv(grad)
        self._v = None

    def buffer(self):
        return self

    def __repr__(self):
        return f"Buffer({self.upstream!r})"
