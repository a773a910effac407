"""
Elementwise binary operations: add, sub, mul, div.

All four broadcast their operands with NumPy rules. Each backward function
computes the full-shape gradient, sums it over the axes `bcast_gradient_args`
reports for its operand and reshapes it back to that operand's shape.
"""

from ...domain._function import Function, OpKind
from ._broadcast import bcast_gradient_args
from ._registry import register_op


def _unbroadcast(g, sx, sy, which: int):
    shape = tuple(sx if which == 0 else sy)
    axes = bcast_gradient_args(sx, sy)[which]
    if axes:
        g = g.reduce_sum(axes)
    if g.shape != shape:
        g = g.reshape(shape)
    return g


# ----------------------------
# add
# ----------------------------
def _add_grad_x(g, sx, sy):
    return _unbroadcast(g, sx, sy, 0)


def _add_grad_y(g, sx, sy):
    return _unbroadcast(g, sx, sy, 1)


@register_op()
class AddFn(Function):
    """
    ``out = x + y``

    Backward: ``dx = g``, ``dy = g`` (each summed to its operand's shape).
    """

    kind = OpKind.ADD
    arity = 2
    backward_fns = (_add_grad_x, _add_grad_y)

    @staticmethod
    def forward(ctx, x, y):
        ctx.save_for_backward(x.shape, y.shape)
        return ctx.backend.add(x, y)


# ----------------------------
# sub
# ----------------------------
def _sub_grad_x(g, sx, sy):
    return _unbroadcast(g, sx, sy, 0)


def _sub_grad_y(g, sx, sy):
    return _unbroadcast(g.neg(), sx, sy, 1)


@register_op()
class SubFn(Function):
    """
    ``out = x - y``

    Backward: ``dx = g``, ``dy = -g``.
    """

    kind = OpKind.SUB
    arity = 2
    backward_fns = (_sub_grad_x, _sub_grad_y)

    @staticmethod
    def forward(ctx, x, y):
        ctx.save_for_backward(x.shape, y.shape)
        return ctx.backend.sub(x, y)


# ----------------------------
# mul
# ----------------------------
def _mul_grad_x(g, x, y):
    return _unbroadcast(g.mul(y), x.shape, y.shape, 0)


def _mul_grad_y(g, x, y):
    return _unbroadcast(g.mul(x), x.shape, y.shape, 1)


@register_op()
class MulFn(Function):
    """
    ``out = x * y``

    Backward: ``dx = g * y``, ``dy = g * x``.
    """

    kind = OpKind.MUL
    arity = 2
    backward_fns = (_mul_grad_x, _mul_grad_y)

    @staticmethod
    def forward(ctx, x, y):
        ctx.save_for_backward(x, y)
        return ctx.backend.mul(x, y)


# ----------------------------
# div
# ----------------------------
def _div_grad_x(g, x, y):
    return _unbroadcast(g.div(y), x.shape, y.shape, 0)


def _div_grad_y(g, x, y):
    return _unbroadcast(g.mul(x).div(y.square()).neg(), x.shape, y.shape, 1)


@register_op()
class DivFn(Function):
    """
    ``out = x / y``

    Backward:

    - ``dx = g / y``
    - ``dy = -g * x / y^2``
    """

    kind = OpKind.DIV
    arity = 2
    backward_fns = (_div_grad_x, _div_grad_y)

    @staticmethod
    def forward(ctx, x, y):
        ctx.save_for_backward(x, y)
        return ctx.backend.div(x, y)
