"""
Reductions and last-axis normalizations.

The reduction backward functions first reshape the output gradient to the
"kept" shape (reduced axes present with size 1) and then broadcast it
against the input shape.
"""

from typing import Optional

import numpy as np

from ...domain._function import Function, OpKind
from ..backend._registry import get_backend
from ..tensor._tensor import Tensor
from ._registry import register_op


def _kept_shape(in_shape: tuple[int, ...], axes: Optional[tuple[int, ...]]) -> tuple[int, ...]:
    return tuple(
        1 if axes is None or i in axes else d for i, d in enumerate(in_shape)
    )


def _ones(shape: tuple[int, ...], like: Tensor) -> Tensor:
    return Tensor(get_backend(like.device, "ones").ones(shape, like.dtype))


def _reduced_count(in_shape: tuple[int, ...], axes: Optional[tuple[int, ...]]) -> int:
    if axes is None:
        return int(np.prod(in_shape, dtype=np.int64))
    return int(np.prod([in_shape[a] for a in axes], dtype=np.int64))


# ----------------------------
# reduce_sum / reduce_mean
# ----------------------------
def _reduce_sum_grad(g, in_shape, axes, keep_dims):
    return g.reshape(_kept_shape(in_shape, axes)).mul(_ones(in_shape, g))


@register_op()
class ReduceSumFn(Function):
    kind = OpKind.REDUCE_SUM
    arity = 3
    backward_fns = (_reduce_sum_grad, None, None)

    @staticmethod
    def forward(ctx, x, axes, keep_dims):
        ctx.save_for_backward(x.shape, axes, keep_dims)
        return ctx.backend.reduce_sum(x, axes, keep_dims)


def _reduce_mean_grad(g, in_shape, axes, keep_dims):
    n = max(_reduced_count(in_shape, axes), 1)
    return _reduce_sum_grad(g, in_shape, axes, keep_dims).mul(1.0 / n)


@register_op()
class ReduceMeanFn(Function):
    kind = OpKind.REDUCE_MEAN
    arity = 3
    backward_fns = (_reduce_mean_grad, None, None)

    @staticmethod
    def forward(ctx, x, axes, keep_dims):
        ctx.save_for_backward(x.shape, axes, keep_dims)
        return ctx.backend.reduce_mean(x, axes, keep_dims)


# ----------------------------
# reduce_max
# ----------------------------
def _reduce_max_grad(g, x, out, axes, keep_dims):
    kept = _kept_shape(x.shape, axes)
    mask = x.equal(out.reshape(kept)).cast(g.dtype)
    ties = mask.reduce_sum(axes, keep_dims=True)
    return mask.div(ties).mul(g.reshape(kept))


@register_op()
class ReduceMaxFn(Function):
    """
    Maximum over axes.

    Backward: the gradient goes to the positions equal to the maximum,
    divided evenly among ties.
    """

    kind = OpKind.REDUCE_MAX
    arity = 3
    backward_fns = (_reduce_max_grad, None, None)

    @staticmethod
    def forward(ctx, x, axes, keep_dims):
        out = ctx.backend.reduce_max(x, axes, keep_dims)
        ctx.save_for_backward(x, out, axes, keep_dims)
        return out


# ----------------------------
# reduce_log_sum_exp
# ----------------------------
def _reduce_lse_grad(g, x, out, axes, keep_dims):
    kept = _kept_shape(x.shape, axes)
    return g.reshape(kept).mul(x.sub(out.reshape(kept)).exp())


@register_op()
class ReduceLogSumExpFn(Function):
    """
    ``out = log(sum(exp(x)))`` over axes, computed with the max shifted out
    for numerical stability.

    Backward: ``g * exp(x - out)``.
    """

    kind = OpKind.REDUCE_LOG_SUM_EXP
    arity = 3
    backward_fns = (_reduce_lse_grad, None, None)

    @staticmethod
    def forward(ctx, x, axes, keep_dims):
        b = ctx.backend
        m = b.reduce_max(x, axes, True)
        s = b.reduce_sum(b.exp(b.sub(x, m)), axes, True)
        out = b.add(b.log(s), m)
        if not keep_dims:
            out_shape = tuple(
                d for i, d in enumerate(x.shape) if axes is not None and i not in axes
            )
            out = b.reshape(out, out_shape)
        ctx.save_for_backward(x, out, axes, keep_dims)
        return out


# ----------------------------
# argmax / argmin
# ----------------------------
@register_op()
class ArgMaxFn(Function):
    kind = OpKind.ARGMAX
    arity = 2
    backward_fns = (None, None)

    @staticmethod
    def forward(ctx, x, axis):
        return ctx.backend.argmax(x, axis)


@register_op()
class ArgMinFn(Function):
    kind = OpKind.ARGMIN
    arity = 2
    backward_fns = (None, None)

    @staticmethod
    def forward(ctx, x, axis):
        return ctx.backend.argmin(x, axis)


# ----------------------------
# softmax / log_softmax
# ----------------------------
def _softmax_grad(g, out):
    return g.sub(g.mul(out).reduce_sum(-1, keep_dims=True)).mul(out)


@register_op()
class SoftmaxFn(Function):
    """
    Softmax over the last axis.

    Backward: ``(g - sum(g * out, -1)) * out``.
    """

    kind = OpKind.SOFTMAX
    arity = 1
    backward_fns = (_softmax_grad,)

    @staticmethod
    def forward(ctx, x):
        out = ctx.backend.softmax(x)
        ctx.save_for_backward(out)
        return out


def _log_softmax_grad(g, out):
    return g.sub(out.exp().mul(g.reduce_sum(-1, keep_dims=True)))


@register_op()
class LogSoftmaxFn(Function):
    kind = OpKind.LOG_SOFTMAX
    arity = 1
    backward_fns = (_log_softmax_grad,)

    @staticmethod
    def forward(ctx, x):
        out = ctx.backend.log_softmax(x)
        ctx.save_for_backward(out)
        return out
