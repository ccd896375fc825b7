# aad/core/engine.py
from __future__ import annotations
import numpy as np
from typing import Callable, Iterable, Sequence, Union

from .value import Value, Constant


def backward(outputs: Union[Value, Sequence[Value]], seed=1.0):
    """
    Seed the backward pass at the given output(s).

    Args:
        outputs: a Value or a (list/tuple) of Values to seed.
        seed: gradient sent to `outputs`. If `outputs` is a sequence, each
              output is seeded with 1.0 (the `seed` arg is ignored in that case).

    Notes:
        - Seeding calls `dv` directly; gradients stop at Buffers until those
          are completed (see `complete_all`).
    """
    if isinstance(outputs, (list, tuple)):
        for y in outputs:
            y.dv(1.0)
    else:
        outputs.dv(seed)


def complete_all(items: Iterable):
    """
    Complete Buffers / Variables given in construction order.

    Completion runs newest first, so every consumer has flushed into a buffer
    before that buffer flushes into its own operands.
    """
    for item in reversed(list(items)):
        item.complete()


def numeric_grad(f: Callable[[Value], Value], x0, eps: float = 1e-6):
    """
    Central finite-difference gradient of a scalar-output f at x0.
    Works for scalar or array-valued x0; returns the same shape as x0.
    """
    x0 = np.asarray(x0, dtype=np.float64)
    g = np.zeros_like(x0)
    for idx in np.ndindex(*x0.shape):
        xp = x0.copy(); xp[idx] += eps
        xm = x0.copy(); xm[idx] -= eps
        fp = _scalar(f(Constant(xp if xp.shape else float(xp))).v)
        fm = _scalar(f(Constant(xm if xm.shape else float(xm))).v)
        g[idx] = (fp - fm) / (2.0 * eps)
    return g if g.shape else float(g)


def check_grad(f: Callable[[Value], Value], x0, rtol: float = 1e-4,
               atol: float = 1e-6, eps: float = 1e-6) -> bool:
    """Compare the reverse-mode gradient of f at x0 with central differences."""
    from .seeds import grad
    ad = np.asarray(grad(f, x0), dtype=np.float64)
    fd = np.asarray(numeric_grad(f, x0, eps=eps), dtype=np.float64)
    return bool(np.allclose(ad, fd, rtol=rtol, atol=atol))


def _scalar(x):
    x = np.asarray(x, dtype=np.float64)
    if x.shape != ():
        raise ValueError(f"expected scalar output, got shape {x.shape}")
    return float(x)
