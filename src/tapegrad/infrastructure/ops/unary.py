"""
Elementwise unary operations.

Where the derivative is cheapest to express through the forward result
(exp, tanh, sigmoid), the output is saved instead of the input.
"""

from ...domain._function import Function, OpKind
from ._registry import register_op


def _neg_grad(g):
    return g.neg()


@register_op()
class NegFn(Function):
    kind = OpKind.NEG
    arity = 1
    backward_fns = (_neg_grad,)

    @staticmethod
    def forward(ctx, x):
        return ctx.backend.neg(x)


def _exp_grad(g, out):
    return g.mul(out)


@register_op()
class ExpFn(Function):
    """
    ``out = exp(x)``

    Backward: ``g * out``. The output is saved to avoid recomputing exp.
    """

    kind = OpKind.EXP
    arity = 1
    backward_fns = (_exp_grad,)

    @staticmethod
    def forward(ctx, x):
        out = ctx.backend.exp(x)
        ctx.save_for_backward(out)
        return out


def _log_grad(g, x):
    return g.div(x)


@register_op()
class LogFn(Function):
    kind = OpKind.LOG
    arity = 1
    backward_fns = (_log_grad,)

    @staticmethod
    def forward(ctx, x):
        ctx.save_for_backward(x)
        return ctx.backend.log(x)


def _square_grad(g, x):
    return g.mul(x).mul(2)


@register_op()
class SquareFn(Function):
    kind = OpKind.SQUARE
    arity = 1
    backward_fns = (_square_grad,)

    @staticmethod
    def forward(ctx, x):
        ctx.save_for_backward(x)
        return ctx.backend.square(x)


def _sinh_grad(g, x):
    return g.mul(x.cosh())


@register_op()
class SinhFn(Function):
    kind = OpKind.SINH
    arity = 1
    backward_fns = (_sinh_grad,)

    @staticmethod
    def forward(ctx, x):
        ctx.save_for_backward(x)
        return ctx.backend.sinh(x)


def _cosh_grad(g, x):
    return g.mul(x.sinh())


@register_op()
class CoshFn(Function):
    kind = OpKind.COSH
    arity = 1
    backward_fns = (_cosh_grad,)

    @staticmethod
    def forward(ctx, x):
        ctx.save_for_backward(x)
        return ctx.backend.cosh(x)


def _tanh_grad(g, out):
    return g.mul(out.square().neg().add(1))


@register_op()
class TanhFn(Function):
    """
    ``out = tanh(x)``

    Backward: ``g * (1 - out^2)``.
    """

    kind = OpKind.TANH
    arity = 1
    backward_fns = (_tanh_grad,)

    @staticmethod
    def forward(ctx, x):
        out = ctx.backend.tanh(x)
        ctx.save_for_backward(out)
        return out


def _relu_grad(g, x):
    return g._apply(OpKind.RELU_GRAD, g, x)


@register_op()
class ReLUFn(Function):
    """
    ``out = max(x, 0)``

    Backward: the recorded ``relu_grad`` op, which passes `g` where ``x > 0``
    and zero elsewhere.
    """

    kind = OpKind.RELU
    arity = 1
    backward_fns = (_relu_grad,)

    @staticmethod
    def forward(ctx, x):
        ctx.save_for_backward(x)
        return ctx.backend.relu(x)


@register_op()
class ReLUGradFn(Function):
    """
    ``out = where(features > 0, grad, 0)``

    Linear in `grad`, so its own gradient w.r.t. `grad` is again
    ``relu_grad``. The features input is treated as non-differentiable
    (its derivative is zero almost everywhere).
    """

    kind = OpKind.RELU_GRAD
    arity = 2
    backward_fns = (_relu_grad, None)

    @staticmethod
    def forward(ctx, grad, features):
        ctx.save_for_backward(features)
        return ctx.backend.relu_grad(grad, features)


def _sigmoid_grad(g, out):
    return g.mul(out).mul(out.neg().add(1))


@register_op()
class SigmoidFn(Function):
    """
    ``out = 1 / (1 + exp(-x))``

    Backward: ``g * out * (1 - out)``.
    """

    kind = OpKind.SIGMOID
    arity = 1
    backward_fns = (_sigmoid_grad,)

    @staticmethod
    def forward(ctx, x):
        out = ctx.backend.sigmoid(x)
        ctx.save_for_backward(out)
        return out


def _abs_grad(g, x):
    return x.greater(0).select(g, g.neg())


@register_op()
class AbsFn(Function):
    kind = OpKind.ABS
    arity = 1
    backward_fns = (_abs_grad,)

    @staticmethod
    def forward(ctx, x):
        ctx.save_for_backward(x)
        return ctx.backend.abs(x)


@register_op()
class SignFn(Function):
    kind = OpKind.SIGN
    arity = 1
    backward_fns = (None,)

    @staticmethod
    def forward(ctx, x):
        return ctx.backend.sign(x)
