"""
Reduction Tensor methods.

Sum, mean, max and log-sum-exp over optional axes, arg-reductions and the
last-axis (log-)softmax.
"""

from ._base import TensorMixinReduction

__all__ = [
    TensorMixinReduction.__name__,
]
