"""
Reduction mixin defining the public Tensor reduction API.

Axis arguments accept ``None`` (reduce every axis), a single int or a
sequence of ints; negative values count from the end. They are normalized
before dispatch, so tape entries always carry sorted non-negative axes.
"""

from typing import Optional, Sequence, Union
from abc import ABC

from .....domain._function import OpKind
from .....domain._tensor import ITensor
from ..._axes import normalize_axes

AxesLike = Optional[Union[int, Sequence[int]]]


class TensorMixinReduction(ABC):
    """
    Mixin providing reductions over axes.

    Notes
    -----
    Gradients of the reductions are broadcast back to the input shape; the
    reduced axes are reinserted as size-1 dimensions when `keep_dims` is
    False.
    """

    def reduce_sum(self: ITensor, axes: AxesLike = None, keep_dims: bool = False) -> ITensor:
        """
        Sum over `axes`.

        Parameters
        ----------
        axes : AxesLike, optional
            Axes to reduce. ``None`` reduces every axis.
        keep_dims : bool, optional
            Retain reduced axes with size 1. Defaults to False.

        Returns
        -------
        ITensor
            Reduced tensor.
        """
        return self._apply(
            OpKind.REDUCE_SUM, self, normalize_axes(axes, self.rank), bool(keep_dims)
        )

    def reduce_mean(self: ITensor, axes: AxesLike = None, keep_dims: bool = False) -> ITensor:
        """Mean over `axes`. Backward spreads ``g / n`` over the reduced elements."""
        return self._apply(
            OpKind.REDUCE_MEAN, self, normalize_axes(axes, self.rank), bool(keep_dims)
        )

    def reduce_max(self: ITensor, axes: AxesLike = None, keep_dims: bool = False) -> ITensor:
        """
        Maximum over `axes`.

        Notes
        -----
        When several elements tie for the maximum, the gradient is split
        evenly between them.
        """
        return self._apply(
            OpKind.REDUCE_MAX, self, normalize_axes(axes, self.rank), bool(keep_dims)
        )

    def reduce_log_sum_exp(
        self: ITensor, axes: AxesLike = None, keep_dims: bool = False
    ) -> ITensor:
        """
        Numerically stable ``log(sum(exp(x)))`` over `axes`.

        Notes
        -----
        Backward rule: ``g * exp(x - lse(x))``.
        """
        return self._apply(
            OpKind.REDUCE_LOG_SUM_EXP,
            self,
            normalize_axes(axes, self.rank),
            bool(keep_dims),
        )

    def argmax(self: ITensor, axis: int = 0) -> ITensor:
        """Indices (int32) of the maximum along `axis`. Not differentiable."""
        (axis,) = normalize_axes(axis, self.rank)
        return self._apply(OpKind.ARGMAX, self, axis)

    def argmin(self: ITensor, axis: int = 0) -> ITensor:
        """Indices (int32) of the minimum along `axis`. Not differentiable."""
        (axis,) = normalize_axes(axis, self.rank)
        return self._apply(OpKind.ARGMIN, self, axis)

    def softmax(self: ITensor) -> ITensor:
        """Softmax over the last axis."""
        if self.rank == 0:
            raise ValueError("softmax requires a tensor of rank >= 1")
        return self._apply(OpKind.SOFTMAX, self)

    def log_softmax(self: ITensor) -> ITensor:
        """Log-softmax over the last axis."""
        if self.rank == 0:
            raise ValueError("log_softmax requires a tensor of rank >= 1")
        return self._apply(OpKind.LOG_SOFTMAX, self)
