"""
Comparisons (non-differentiable) and selection.
"""

from ...domain._function import Function, OpKind
from ._broadcast import sum_to_shape
from ._registry import register_op


@register_op()
class EqualFn(Function):
    kind = OpKind.EQUAL
    arity = 2
    backward_fns = (None, None)

    @staticmethod
    def forward(ctx, x, y):
        return ctx.backend.equal(x, y)


@register_op()
class GreaterFn(Function):
    kind = OpKind.GREATER
    arity = 2
    backward_fns = (None, None)

    @staticmethod
    def forward(ctx, x, y):
        return ctx.backend.greater(x, y)


@register_op()
class GreaterEqualFn(Function):
    kind = OpKind.GREATER_EQUAL
    arity = 2
    backward_fns = (None, None)

    @staticmethod
    def forward(ctx, x, y):
        return ctx.backend.greater_equal(x, y)


@register_op()
class LessFn(Function):
    kind = OpKind.LESS
    arity = 2
    backward_fns = (None, None)

    @staticmethod
    def forward(ctx, x, y):
        return ctx.backend.less(x, y)


@register_op()
class LessEqualFn(Function):
    kind = OpKind.LESS_EQUAL
    arity = 2
    backward_fns = (None, None)

    @staticmethod
    def forward(ctx, x, y):
        return ctx.backend.less_equal(x, y)


def _select_grad_t(g, cond, st, sf):
    return sum_to_shape(g.mul(cond.cast(g.dtype)), st)


def _select_grad_f(g, cond, st, sf):
    return sum_to_shape(g.mul(cond.cast(g.dtype).neg().add(1)), sf)


@register_op()
class SelectFn(Function):
    """
    ``out = where(cond, t, f)``

    Backward: ``g * cond`` to `t`, ``g * (1 - cond)`` to `f`; the condition
    is not differentiable.
    """

    kind = OpKind.SELECT
    arity = 3
    backward_fns = (None, _select_grad_t, _select_grad_f)

    @staticmethod
    def forward(ctx, cond, t, f):
        ctx.save_for_backward(cond, t.shape, f.shape)
        return ctx.backend.select(cond, t, f)
