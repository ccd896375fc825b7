# aad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the graph into fresh ADVar leaves.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Union
import numpy as np

from .value import Value, ADVar, Constant
from .tape import use_tape


def value(x: Any) -> Any:
    """Return the numeric value of a Value; pass through plain numbers unchanged."""
    return x.v if isinstance(x, Value) else x


def _ensure_output(y: Any, fn_name: str) -> Value:
    if not isinstance(y, Value):
        y = Constant(y, name="y")
    if np.shape(y.v) != ():
        raise ValueError(f"{fn_name} expects scalar output.")
    return y


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Value], Value],
         x0: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Gradient of a scalar-output function y=f(x) at x0 (single input).
    Buffers created while building f are recorded on a fresh tape and
    completed after the seed, newest first.
    """
    with use_tape(complete=False) as tape:
        x = ADVar(x0, name="x")
        y = _ensure_output(f(x), "grad(f, x0)")
        y.dv(1.0)
        tape.complete()
    return x.adj


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Value]], Value],
          inputs: Dict[str, Union[float, np.ndarray]]) -> Dict[str, Union[float, np.ndarray]]:
    """
    Gradient of a scalar-output function y=f(vars) w.r.t. ALL inputs (dict form).
    Performs ONE backward pass to obtain all dy/dvar simultaneously.

    Example
    -------
    f = lambda xs: xs["a"] * xs["a"] + 3 * xs["b"]
    grads(f, {"a": 2.0, "b": 4.0}) -> {"a": 4.0, "b": 3.0}
    """
    with use_tape(complete=False) as tape:
        vars_ad: Dict[str, ADVar] = {k: ADVar(v, name=k) for k, v in inputs.items()}
        y = _ensure_output(f(vars_ad), "grads(f, inputs)")
        y.dv(1.0)
        tape.complete()
    return {k: vars_ad[k].adj for k in inputs.keys()}
