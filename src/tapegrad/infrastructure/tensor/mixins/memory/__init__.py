"""
Shape, layout and placement Tensor methods.

Includes transpose, reverse, reshape, slice, pad, cast and one_hot (all
recorded), plus the untracked helpers ``ones_like``, ``zeros_like``,
``copy``, ``to`` and ``cpu``.
"""

from ._base import TensorMixinMemory

__all__ = [
    TensorMixinMemory.__name__,
]
