"""
Arithmetic mixin defining elementwise Tensor operators.

This module declares :class:`TensorMixinArithmetic`, the mixin that gives
`Tensor` its arithmetic surface. Methods only coerce operands; the forward
kernels and gradient rules live in ``tapegrad.infrastructure.ops``.

Binary operators follow NumPy broadcasting. Gradients flowing back to a
broadcast operand are summed over the broadcast axes and reshaped to the
operand's shape.
"""

from typing import Union
from abc import ABC

from .....domain._function import OpKind
from .....domain._tensor import ITensor

Number = Union[int, float]


class TensorMixinArithmetic(ABC):
    """
    Mixin providing elementwise arithmetic and matrix multiplication.

    Notes
    -----
    - Python numbers are lifted to 0-d tensors with the receiver's dtype and
      device before the operation is applied.
    - Tensor operands must live on the receiver's device.
    """

    # ----------------------------
    # Addition
    # ----------------------------
    def add(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        """
        Elementwise addition.

        Notes
        -----
        Backward rule: ``d(a + b)/da = 1``, ``d(a + b)/db = 1``.
        """
        return self._apply(OpKind.ADD, self, self._colocate(other))

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return self._apply(OpKind.ADD, self._colocate(other), self)

    # ----------------------------
    # Subtraction
    # ----------------------------
    def sub(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        """
        Elementwise subtraction.

        Notes
        -----
        Backward rule: ``d(a - b)/da = 1``, ``d(a - b)/db = -1``.
        """
        return self._apply(OpKind.SUB, self, self._colocate(other))

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return self._apply(OpKind.SUB, self._colocate(other), self)

    # ----------------------------
    # Multiplication
    # ----------------------------
    def mul(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        """
        Elementwise multiplication.

        Notes
        -----
        Backward rule: ``d(a * b)/da = b``, ``d(a * b)/db = a``.
        """
        return self._apply(OpKind.MUL, self, self._colocate(other))

    def __mul__(self, other):
        return self.mul(other)

    def __rmul__(self, other):
        return self._apply(OpKind.MUL, self._colocate(other), self)

    # ----------------------------
    # True division
    # ----------------------------
    def div(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        """
        Elementwise true division.

        Parameters
        ----------
        other : Union[ITensor, Number]
            Divisor. Numbers take this tensor's dtype.

        Returns
        -------
        ITensor
            ``self / other``.

        Notes
        -----
        Backward rule:
        - ``d(a / b)/da = 1 / b``
        - ``d(a / b)/db = -a / b^2``
        """
        return self._apply(OpKind.DIV, self, self._colocate(other))

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return self._apply(OpKind.DIV, self._colocate(other), self)

    # ----------------------------
    # Negation
    # ----------------------------
    def neg(self: ITensor) -> ITensor:
        return self._apply(OpKind.NEG, self)

    def __neg__(self):
        return self.neg()

    # ----------------------------
    # Matrix multiplication
    # ----------------------------
    def matmul(
        self: ITensor,
        other: ITensor,
        transpose_a: bool = False,
        transpose_b: bool = False,
    ) -> ITensor:
        """
        Matrix product of two rank-2 tensors.

        Parameters
        ----------
        other : ITensor
            Right-hand matrix.
        transpose_a : bool, optional
            Use the transpose of `self`. Defaults to False.
        transpose_b : bool, optional
            Use the transpose of `other`. Defaults to False.

        Returns
        -------
        ITensor
            ``op(self) @ op(other)`` where ``op`` applies the requested
            transposes.

        Raises
        ------
        ValueError
            If either operand is not rank 2 or the inner dimensions differ.

        Notes
        -----
        Backward rules are expressed with flagged matmuls so no explicit
        transpose is materialized (e.g. for ``a @ b``:
        ``da = g @ b^T``, ``db = a^T @ g``).
        """
        other = self._colocate(other)
        if self.rank != 2 or other.rank != 2:
            raise ValueError(
                f"matmul expects rank-2 operands, got {self.shape} and {other.shape}"
            )
        inner_a = self.shape[0] if transpose_a else self.shape[1]
        inner_b = other.shape[1] if transpose_b else other.shape[0]
        if inner_a != inner_b:
            raise ValueError(
                f"matmul inner dimensions differ: {self.shape} "
                f"(transpose_a={transpose_a}) vs {other.shape} "
                f"(transpose_b={transpose_b})"
            )
        return self._apply(
            OpKind.MATMUL, self, other, bool(transpose_a), bool(transpose_b)
        )

    def __matmul__(self, other):
        return self.matmul(other)

    def __rmatmul__(self, other):
        return self._colocate(other).matmul(self)
