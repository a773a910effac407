"""
Backend capability contract.

This module defines `IBackendOps`, the capability surface the autograd core
calls into for every numeric operation. A backend is bound to exactly one
device and operates on basic tensors living on that device.

The autograd core never implements kernels itself: it only requires from a
backend elementwise arithmetic, shape-changing and reduction primitives,
comparisons, matrix multiplication and construction helpers. The NumPy CPU
backend in `tapegrad.infrastructure.backend` is the reference implementation;
additional devices are supported by registering any object that satisfies
this protocol.

Notes
-----
- Backends must always return *new* basic tensors, even when an operation is
  a no-op (e.g., casting to the same dtype). Saved-for-backward resolution
  relies on basic-tensor identity.
- Axis arguments are either ``None`` (all axes) or tuples of ints.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from ._tensor import IBasicTensor, Shape
from .device._device_protocol import DeviceLike

Axes = Optional[tuple[int, ...]]


@runtime_checkable
class IBackendOps(Protocol):
    """
    Numeric backend contract for a single device.
    """

    @property
    def device(self) -> DeviceLike: ...

    # ----------------------------
    # Construction / readout
    # ----------------------------
    def from_array(self, arr: Any, dtype: Any = None) -> IBasicTensor: ...
    def to_numpy(self, x: IBasicTensor) -> Any: ...
    def zeros(self, shape: Shape, dtype: Any) -> IBasicTensor: ...
    def ones(self, shape: Shape, dtype: Any) -> IBasicTensor: ...
    def ones_like(self, x: IBasicTensor) -> IBasicTensor: ...
    def zeros_like(self, x: IBasicTensor) -> IBasicTensor: ...
    def fill(self, value: IBasicTensor, shape: Shape) -> IBasicTensor: ...
    def randn(self, shape: Shape, dtype: Any) -> IBasicTensor: ...

    # ----------------------------
    # Elementwise binary
    # ----------------------------
    def add(self, x: IBasicTensor, y: IBasicTensor) -> IBasicTensor: ...
    def sub(self, x: IBasicTensor, y: IBasicTensor) -> IBasicTensor: ...
    def mul(self, x: IBasicTensor, y: IBasicTensor) -> IBasicTensor: ...
    def div(self, x: IBasicTensor, y: IBasicTensor) -> IBasicTensor: ...

    # ----------------------------
    # Elementwise unary
    # ----------------------------
    def neg(self, x: IBasicTensor) -> IBasicTensor: ...
    def exp(self, x: IBasicTensor) -> IBasicTensor: ...
    def log(self, x: IBasicTensor) -> IBasicTensor: ...
    def square(self, x: IBasicTensor) -> IBasicTensor: ...
    def sinh(self, x: IBasicTensor) -> IBasicTensor: ...
    def cosh(self, x: IBasicTensor) -> IBasicTensor: ...
    def tanh(self, x: IBasicTensor) -> IBasicTensor: ...
    def relu(self, x: IBasicTensor) -> IBasicTensor: ...
    def relu_grad(self, grad: IBasicTensor, features: IBasicTensor) -> IBasicTensor: ...
    def sigmoid(self, x: IBasicTensor) -> IBasicTensor: ...
    def abs(self, x: IBasicTensor) -> IBasicTensor: ...
    def sign(self, x: IBasicTensor) -> IBasicTensor: ...

    # ----------------------------
    # Matrix / shape
    # ----------------------------
    def matmul(
        self, a: IBasicTensor, b: IBasicTensor, transpose_a: bool, transpose_b: bool
    ) -> IBasicTensor: ...
    def transpose(self, x: IBasicTensor, perm: Optional[Sequence[int]]) -> IBasicTensor: ...
    def reverse(self, x: IBasicTensor, dims: Axes) -> IBasicTensor: ...
    def reshape(self, x: IBasicTensor, shape: Shape) -> IBasicTensor: ...
    def slice(
        self, x: IBasicTensor, begin: Sequence[int], size: Sequence[int]
    ) -> IBasicTensor: ...
    def pad(
        self, x: IBasicTensor, paddings: Sequence[tuple[int, int]]
    ) -> IBasicTensor: ...
    def cast(self, x: IBasicTensor, dtype: Any) -> IBasicTensor: ...
    def one_hot(
        self, x: IBasicTensor, depth: int, on_value: float, off_value: float
    ) -> IBasicTensor: ...

    # ----------------------------
    # Reductions
    # ----------------------------
    def reduce_sum(self, x: IBasicTensor, axes: Axes, keep_dims: bool) -> IBasicTensor: ...
    def reduce_mean(self, x: IBasicTensor, axes: Axes, keep_dims: bool) -> IBasicTensor: ...
    def reduce_max(self, x: IBasicTensor, axes: Axes, keep_dims: bool) -> IBasicTensor: ...
    def argmax(self, x: IBasicTensor, axis: int) -> IBasicTensor: ...
    def argmin(self, x: IBasicTensor, axis: int) -> IBasicTensor: ...
    def softmax(self, x: IBasicTensor) -> IBasicTensor: ...
    def log_softmax(self, x: IBasicTensor) -> IBasicTensor: ...

    # ----------------------------
    # Comparison / selection
    # ----------------------------
    def equal(self, x: IBasicTensor, y: IBasicTensor) -> IBasicTensor: ...
    def greater(self, x: IBasicTensor, y: IBasicTensor) -> IBasicTensor: ...
    def greater_equal(self, x: IBasicTensor, y: IBasicTensor) -> IBasicTensor: ...
    def less(self, x: IBasicTensor, y: IBasicTensor) -> IBasicTensor: ...
    def less_equal(self, x: IBasicTensor, y: IBasicTensor) -> IBasicTensor: ...
    def select(
        self, cond: IBasicTensor, x: IBasicTensor, y: IBasicTensor
    ) -> IBasicTensor: ...
