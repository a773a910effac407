"""
Tape-based reverse-mode automatic differentiation.

- ``_tape``: `Tape` and `TapeEntry`, the per-session record of operations
- ``_tape_stack``: the per-thread stack of active tapes
- ``_gradient_collector``: per-tensor accumulation of gradient contributions
- ``_backprop``: the two-phase backward pass (`prepare_backprop`,
  `imperative_grad`)
- ``_api``: the user-facing transforms (`grad`, `multigrad`, ...)
"""

from ._tape import WATCHED_SOURCE, Tape, TapeEntry
from ._tape_stack import TapeStack, current_tape_stack
from ._gradient_collector import GradientCollector
from ._backprop import imperative_grad, prepare_backprop
from ._api import grad, grad_and_val, grad_params, multigrad, multigrad_and_val

__all__ = [
    "WATCHED_SOURCE",
    Tape.__name__,
    TapeEntry.__name__,
    TapeStack.__name__,
    current_tape_stack.__name__,
    GradientCollector.__name__,
    imperative_grad.__name__,
    prepare_backprop.__name__,
    grad.__name__,
    grad_and_val.__name__,
    grad_params.__name__,
    multigrad.__name__,
    multigrad_and_val.__name__,
]
