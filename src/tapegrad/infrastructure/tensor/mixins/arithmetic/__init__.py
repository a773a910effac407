"""
Arithmetic Tensor methods.

This package provides the elementwise binary operators (``+ - * /``), their
reflected variants, negation and matrix multiplication (``@``).

Public API
----------
Only the mixin class is exported:

- ``TensorMixinArithmetic``
"""

from ._base import TensorMixinArithmetic

__all__ = [
    TensorMixinArithmetic.__name__,
]
