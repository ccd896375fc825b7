# aad/core/tape.py
from __future__ import annotations
from typing import List, Optional
from contextlib import contextmanager


class Tape:
    """
    Per-sample completion arena: records Completeables (Buffers, Observations,
    Variables) in construction order so they can be completed in reverse.
    """
    def __init__(self):
        self.items: List = []

    def reset(self):
        self.items.clear()

    def push(self, item):
        self.items.append(item)
        return len(self.items) - 1

    def complete(self):
        """Complete every recorded item, newest first, then forget them."""
        while self.items:
            self.items.pop().complete()


# No tape is active outside of `use_tape()`; buffers are then completed explicitly.
global_tape: Optional[Tape] = None


def active_tape() -> Optional[Tape]:
    return global_tape


@contextmanager
def use_tape(tape: Optional[Tape] = None, complete: bool = False):
    """
    Context manager to record a sample's buffers on a fresh tape:
        with use_tape(complete=True):
            ... build graph, seed gradients ...
    With `complete=True` the tape is completed when the block exits normally.
    """
    global global_tape
    prev = global_tape
    global_tape = tape if tape is not None else Tape()
    try:
        yield global_tape
        if complete:
            global_tape.complete()
    finally:
        global_tape = prev
