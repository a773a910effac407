"""
Differentiable tensor layer.

This package defines the concrete `Tensor` class, conversion of host data
into tensors and the factory functions. Numeric work is delegated to the
operation layer (``tapegrad.infrastructure.ops``).
"""

from ._tensor import Tensor
from ._tensor_context import OpContext
from ._convert import convert
from ._factories import arange, eye, fill, linspace, ones, randn, tensor, zeros

__all__ = [
    Tensor.__name__,
    OpContext.__name__,
    convert.__name__,
    arange.__name__,
    eye.__name__,
    fill.__name__,
    linspace.__name__,
    ones.__name__,
    randn.__name__,
    tensor.__name__,
    zeros.__name__,
]
