"""
Matrix, layout and construction operations.

Non-tensor inputs (flags, permutations, shapes, paddings, dtypes) occupy
their own positional slots with a ``None`` backward function.
"""

import numpy as np

from ...domain._function import Function, OpKind
from ._registry import register_op


# ----------------------------
# matmul
# ----------------------------
def _matmul_grad_a(g, a, b, transpose_a, transpose_b):
    if not transpose_a and not transpose_b:
        return g.matmul(b, False, True)
    if transpose_a and not transpose_b:
        return b.matmul(g, False, True)
    if not transpose_a and transpose_b:
        return g.matmul(b, False, False)
    return b.matmul(g, True, True)


def _matmul_grad_b(g, a, b, transpose_a, transpose_b):
    if not transpose_a and not transpose_b:
        return a.matmul(g, True, False)
    if transpose_a and not transpose_b:
        return a.matmul(g, False, False)
    if not transpose_a and transpose_b:
        return g.matmul(a, True, False)
    return g.matmul(a, True, True)


@register_op()
class MatMulFn(Function):
    """
    ``out = op(a) @ op(b)`` where ``op`` optionally transposes.

    Backward (for ``a @ b``): ``da = g @ b^T``, ``db = a^T @ g``. The other
    flag combinations are expressed with flagged matmuls as well, so the
    gradient graph never materializes a transpose.
    """

    kind = OpKind.MATMUL
    arity = 4
    backward_fns = (_matmul_grad_a, _matmul_grad_b, None, None)

    @staticmethod
    def forward(ctx, a, b, transpose_a, transpose_b):
        ctx.save_for_backward(a, b, transpose_a, transpose_b)
        return ctx.backend.matmul(a, b, transpose_a, transpose_b)


# ----------------------------
# transpose / reverse / reshape
# ----------------------------
def _transpose_grad(g, perm):
    if perm is None:
        return g.transpose()
    return g.transpose(tuple(int(i) for i in np.argsort(perm)))


@register_op()
class TransposeFn(Function):
    kind = OpKind.TRANSPOSE
    arity = 2
    backward_fns = (_transpose_grad, None)

    @staticmethod
    def forward(ctx, x, perm):
        ctx.save_for_backward(perm)
        return ctx.backend.transpose(x, perm)


def _reverse_grad(g, dims):
    return g.reverse(dims)


@register_op()
class ReverseFn(Function):
    kind = OpKind.REVERSE
    arity = 2
    backward_fns = (_reverse_grad, None)

    @staticmethod
    def forward(ctx, x, dims):
        ctx.save_for_backward(dims)
        return ctx.backend.reverse(x, dims)


def _reshape_grad(g, in_shape):
    return g.reshape(in_shape)


@register_op()
class ReshapeFn(Function):
    kind = OpKind.RESHAPE
    arity = 2
    backward_fns = (_reshape_grad, None)

    @staticmethod
    def forward(ctx, x, shape):
        ctx.save_for_backward(x.shape)
        return ctx.backend.reshape(x, shape)


# ----------------------------
# slice / pad
# ----------------------------
def _slice_grad(g, in_shape, begin, size):
    return g.pad([(b, d - b - s) for d, b, s in zip(in_shape, begin, size)])


@register_op()
class SliceFn(Function):
    """
    Contiguous block extraction.

    Backward: the gradient is zero-padded back to the input shape.
    """

    kind = OpKind.SLICE
    arity = 3
    backward_fns = (_slice_grad, None, None)

    @staticmethod
    def forward(ctx, x, begin, size):
        ctx.save_for_backward(x.shape, begin, size)
        return ctx.backend.slice(x, begin, size)


def _pad_grad(g, in_shape, paddings):
    return g.slice([before for before, _ in paddings], in_shape)


@register_op()
class PadFn(Function):
    kind = OpKind.PAD
    arity = 2
    backward_fns = (_pad_grad, None)

    @staticmethod
    def forward(ctx, x, paddings):
        ctx.save_for_backward(x.shape, paddings)
        return ctx.backend.pad(x, paddings)


# ----------------------------
# cast / one_hot / fill
# ----------------------------
def _cast_grad(g, src_dtype):
    # integer and boolean sources carry no gradient
    if np.dtype(src_dtype).kind != "f":
        return None
    return g.cast(src_dtype)


@register_op()
class CastFn(Function):
    kind = OpKind.CAST
    arity = 2
    backward_fns = (_cast_grad, None)

    @staticmethod
    def forward(ctx, x, dtype):
        ctx.save_for_backward(x.dtype)
        return ctx.backend.cast(x, dtype)


@register_op()
class OneHotFn(Function):
    kind = OpKind.ONE_HOT
    arity = 4
    backward_fns = (None, None, None, None)

    @staticmethod
    def forward(ctx, x, depth, on_value, off_value):
        return ctx.backend.one_hot(x, depth, on_value, off_value)


def _fill_grad(g, value_shape):
    return g.reduce_sum().reshape(value_shape)


@register_op()
class FillFn(Function):
    """
    ``out = full(shape, value)`` for a scalar tensor `value`.

    Backward: the sum of the output gradient.
    """

    kind = OpKind.FILL
    arity = 2
    backward_fns = (_fill_grad, None)

    @staticmethod
    def forward(ctx, value, shape):
        ctx.save_for_backward(value.shape)
        return ctx.backend.fill(value, shape)
