"""
Elementwise unary Tensor methods (exp, log, tanh, relu, ...).
"""

from ._base import TensorMixinUnary

__all__ = [
    TensorMixinUnary.__name__,
]
