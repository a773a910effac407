from abc import ABC

from .....domain._function import OpKind
from .....domain._tensor import ITensor


class TensorMixinUnary(ABC):
    """
    Mixin providing elementwise unary functions.

    All methods preserve shape and dtype.
    """

    def exp(self: ITensor) -> ITensor:
        """Elementwise ``e^x``. Backward: ``g * exp(x)``."""
        return self._apply(OpKind.EXP, self)

    def log(self: ITensor) -> ITensor:
        """Elementwise natural logarithm. Backward: ``g / x``."""
        return self._apply(OpKind.LOG, self)

    def square(self: ITensor) -> ITensor:
        return self._apply(OpKind.SQUARE, self)

    def sinh(self: ITensor) -> ITensor:
        return self._apply(OpKind.SINH, self)

    def cosh(self: ITensor) -> ITensor:
        return self._apply(OpKind.COSH, self)

    def tanh(self: ITensor) -> ITensor:
        """
        Elementwise hyperbolic tangent.

        Notes
        -----
        Backward rule: ``g * (1 - tanh(x)^2)``, computed from the saved
        output.
        """
        return self._apply(OpKind.TANH, self)

    def relu(self: ITensor) -> ITensor:
        """
        Rectified linear unit, ``max(x, 0)``.

        Notes
        -----
        The backward pass routes through the recorded ``relu_grad`` operation
        so that second derivatives of networks using relu remain defined.
        """
        return self._apply(OpKind.RELU, self)

    def sigmoid(self: ITensor) -> ITensor:
        return self._apply(OpKind.SIGMOID, self)

    def abs(self: ITensor) -> ITensor:
        """
        Elementwise absolute value.

        The gradient at zero is taken as ``-g`` (the non-positive branch).
        """
        return self._apply(OpKind.ABS, self)

    def __abs__(self):
        return self.abs()

    def sign(self: ITensor) -> ITensor:
        """Elementwise sign. Not differentiable."""
        return self._apply(OpKind.SIGN, self)
