"""
NumPy implementation of the backend capability surface.

`NumpyBackend` satisfies `IBackendOps` with plain NumPy kernels. It is the
reference backend registered for ``Device("cpu")``. The class is bound to a
device at construction, so the same kernels can also serve another device
descriptor (useful for exercising multi-device code paths on machines without
an accelerator).

Design notes
------------
- Every method returns a new `BasicTensor`, including no-op casts and
  reshapes, because saved-for-backward resolution matches basic tensors by
  identity.
- Floating results keep the dtype of their first operand; NumPy scalar
  promotion never widens float32 reductions to float64.
- Broadcasting follows NumPy rules for binary elementwise operations.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import numpy as np

from ...domain.device._device import Device
from ._basic_tensor import BasicTensor

Axes = Optional[tuple[int, ...]]


class NumpyBackend:
    """
    NumPy-backed kernels for a single device.

    Parameters
    ----------
    device : Device
        Device descriptor stamped on every basic tensor this backend creates.
    """

    def __init__(self, device: Device) -> None:
        self._device = device

    @property
    def device(self) -> Device:
        return self._device

    def __repr__(self) -> str:
        return f"NumpyBackend(device={self._device})"

    # ----------------------------
    # helpers
    # ----------------------------
    def _wrap(self, arr: Any) -> BasicTensor:
        return BasicTensor(np.asarray(arr), self._device)

    @staticmethod
    def _keep_float_dtype(res: Any, like: BasicTensor) -> np.ndarray:
        res = np.asarray(res)
        if like.dtype.kind == "f" and res.dtype != like.dtype:
            res = res.astype(like.dtype)
        return res

    # ----------------------------
    # Construction / readout
    # ----------------------------
    def from_array(self, arr: Any, dtype: Any = None) -> BasicTensor:
        """
        Copy array-like data into a new basic tensor on this device.
        """
        return self._wrap(np.array(arr, dtype=dtype, copy=True))

    def to_numpy(self, x: BasicTensor) -> np.ndarray:
        """
        Return a host copy of `x` as a NumPy array.
        """
        return np.array(x.storage, copy=True)

    def zeros(self, shape: tuple[int, ...], dtype: Any) -> BasicTensor:
        return self._wrap(np.zeros(shape, dtype=dtype))

    def ones(self, shape: tuple[int, ...], dtype: Any) -> BasicTensor:
        return self._wrap(np.ones(shape, dtype=dtype))

    def ones_like(self, x: BasicTensor) -> BasicTensor:
        return self._wrap(np.ones_like(x.storage))

    def zeros_like(self, x: BasicTensor) -> BasicTensor:
        return self._wrap(np.zeros_like(x.storage))

    def fill(self, value: BasicTensor, shape: tuple[int, ...]) -> BasicTensor:
        if value.shape != ():
            raise ValueError(f"fill value must be a scalar, got shape={value.shape}")
        return self._wrap(np.full(shape, value.storage, dtype=value.dtype))

    def randn(self, shape: tuple[int, ...], dtype: Any) -> BasicTensor:
        return self._wrap(np.random.standard_normal(shape).astype(dtype))

    # ----------------------------
    # Elementwise binary
    # ----------------------------
    def add(self, x: BasicTensor, y: BasicTensor) -> BasicTensor:
        return self._wrap(np.add(x.storage, y.storage))

    def sub(self, x: BasicTensor, y: BasicTensor) -> BasicTensor:
        return self._wrap(np.subtract(x.storage, y.storage))

    def mul(self, x: BasicTensor, y: BasicTensor) -> BasicTensor:
        return self._wrap(np.multiply(x.storage, y.storage))

    def div(self, x: BasicTensor, y: BasicTensor) -> BasicTensor:
        return self._wrap(
            self._keep_float_dtype(np.true_divide(x.storage, y.storage), x)
        )

    # ----------------------------
    # Elementwise unary
    # ----------------------------
    def neg(self, x: BasicTensor) -> BasicTensor:
        return self._wrap(np.negative(x.storage))

    def exp(self, x: BasicTensor) -> BasicTensor:
        return self._wrap(np.exp(x.storage))

    def log(self, x: BasicTensor) -> BasicTensor:
        return self._wrap(np.log(x.storage))

    def square(self, x: BasicTensor) -> BasicTensor:
        return self._wrap(np.square(x.storage))

    def sinh(self, x: BasicTensor) -> BasicTensor:
        return self._wrap(np.sinh(x.storage))

    def cosh(self, x: BasicTensor) -> BasicTensor:
        return self._wrap(np.cosh(x.storage))

    def tanh(self, x: BasicTensor) -> BasicTensor:
        return self._wrap(np.tanh(x.storage))

    def relu(self, x: BasicTensor) -> BasicTensor:
        a = x.storage
        return self._wrap(np.where(a > 0, a, np.zeros_like(a)))

    def relu_grad(self, grad: BasicTensor, features: BasicTensor) -> BasicTensor:
        g = grad.storage
        return self._wrap(np.where(features.storage > 0, g, np.zeros_like(g)))

    def sigmoid(self, x: BasicTensor) -> BasicTensor:
        a = x.storage
        one = np.ones((), dtype=a.dtype)
        return self._wrap(one / (one + np.exp(-a)))

    def abs(self, x: BasicTensor) -> BasicTensor:
        return self._wrap(np.abs(x.storage))

    def sign(self, x: BasicTensor) -> BasicTensor:
        return self._wrap(np.sign(x.storage))

    # ----------------------------
    # Matrix / shape
    # ----------------------------
    def matmul(
        self, a: BasicTensor, b: BasicTensor, transpose_a: bool, transpose_b: bool
    ) -> BasicTensor:
        x = a.storage
        y = b.storage
        if transpose_a:
            x = np.swapaxes(x, -1, -2)
        if transpose_b:
            y = np.swapaxes(y, -1, -2)
        return self._wrap(np.matmul(x, y))

    def transpose(self, x: BasicTensor, perm: Optional[Sequence[int]]) -> BasicTensor:
        return self._wrap(np.transpose(x.storage, perm).copy())

    def reverse(self, x: BasicTensor, dims: Axes) -> BasicTensor:
        return self._wrap(np.flip(x.storage, axis=dims).copy())

    def reshape(self, x: BasicTensor, shape: tuple[int, ...]) -> BasicTensor:
        return self._wrap(np.reshape(x.storage, shape).copy())

    def slice(
        self, x: BasicTensor, begin: Sequence[int], size: Sequence[int]
    ) -> BasicTensor:
        index = tuple(
            slice(b, None if s == -1 else b + s) for b, s in zip(begin, size)
        )
        return self._wrap(x.storage[index].copy())

    def pad(
        self, x: BasicTensor, paddings: Sequence[tuple[int, int]]
    ) -> BasicTensor:
        return self._wrap(np.pad(x.storage, [tuple(p) for p in paddings]))

    def cast(self, x: BasicTensor, dtype: Any) -> BasicTensor:
        return self._wrap(x.storage.astype(dtype, copy=True))

    def one_hot(
        self, x: BasicTensor, depth: int, on_value: float, off_value: float
    ) -> BasicTensor:
        hot = np.arange(depth) == np.asarray(x.storage)[..., None]
        return self._wrap(np.where(hot, on_value, off_value).astype(np.float32))

    # ----------------------------
    # Reductions
    # ----------------------------
    def reduce_sum(self, x: BasicTensor, axes: Axes, keep_dims: bool) -> BasicTensor:
        res = np.sum(x.storage, axis=axes, keepdims=keep_dims)
        return self._wrap(self._keep_float_dtype(res, x))

    def reduce_mean(self, x: BasicTensor, axes: Axes, keep_dims: bool) -> BasicTensor:
        res = np.mean(x.storage, axis=axes, keepdims=keep_dims)
        return self._wrap(self._keep_float_dtype(res, x))

    def reduce_max(self, x: BasicTensor, axes: Axes, keep_dims: bool) -> BasicTensor:
        res = np.max(x.storage, axis=axes, keepdims=keep_dims)
        return self._wrap(self._keep_float_dtype(res, x))

    def argmax(self, x: BasicTensor, axis: int) -> BasicTensor:
        return self._wrap(np.argmax(x.storage, axis=axis).astype(np.int32))

    def argmin(self, x: BasicTensor, axis: int) -> BasicTensor:
        return self._wrap(np.argmin(x.storage, axis=axis).astype(np.int32))

    def softmax(self, x: BasicTensor) -> BasicTensor:
        a = x.storage
        e = np.exp(a - np.max(a, axis=-1, keepdims=True))
        return self._wrap(
            self._keep_float_dtype(e / np.sum(e, axis=-1, keepdims=True), x)
        )

    def log_softmax(self, x: BasicTensor) -> BasicTensor:
        a = x.storage
        shifted = a - np.max(a, axis=-1, keepdims=True)
        res = shifted - np.log(np.sum(np.exp(shifted), axis=-1, keepdims=True))
        return self._wrap(self._keep_float_dtype(res, x))

    # ----------------------------
    # Comparison / selection
    # ----------------------------
    def equal(self, x: BasicTensor, y: BasicTensor) -> BasicTensor:
        return self._wrap(np.equal(x.storage, y.storage))

    def greater(self, x: BasicTensor, y: BasicTensor) -> BasicTensor:
        return self._wrap(np.greater(x.storage, y.storage))

    def greater_equal(self, x: BasicTensor, y: BasicTensor) -> BasicTensor:
        return self._wrap(np.greater_equal(x.storage, y.storage))

    def less(self, x: BasicTensor, y: BasicTensor) -> BasicTensor:
        return self._wrap(np.less(x.storage, y.storage))

    def less_equal(self, x: BasicTensor, y: BasicTensor) -> BasicTensor:
        return self._wrap(np.less_equal(x.storage, y.storage))

    def select(
        self, cond: BasicTensor, x: BasicTensor, y: BasicTensor
    ) -> BasicTensor:
        return self._wrap(np.where(cond.storage, x.storage, y.storage))
