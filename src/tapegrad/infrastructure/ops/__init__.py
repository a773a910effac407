"""
Differentiable operations.

Importing this package registers one `Function` per `OpKind`:

- ``elementwise``: add, sub, mul, div (broadcasting)
- ``unary``: neg, exp, log, square, sinh, cosh, tanh, relu, relu_grad,
  sigmoid, abs, sign
- ``shape``: matmul, transpose, reverse, reshape, slice, pad, cast, one_hot,
  fill
- ``reduction``: reduce_sum, reduce_mean, reduce_max, reduce_log_sum_exp,
  argmax, argmin, softmax, log_softmax
- ``comparison``: equal, greater, greater_equal, less, less_equal, select

and then verifies that the registry is complete. Op modules are imported for
their registration side effects.
"""

from . import comparison, elementwise, reduction, shape, unary
from ._broadcast import bcast_gradient_args, broadcast_shape, sum_to_shape
from ._dispatch import apply_op
from ._registry import OpRegistry, op_registry, register_op

op_registry.check_complete()

__all__ = [
    OpRegistry.__name__,
    apply_op.__name__,
    bcast_gradient_args.__name__,
    broadcast_shape.__name__,
    "op_registry",
    register_op.__name__,
    sum_to_shape.__name__,
]
