"""
Tensor factory functions.

Factories create leaf tensors with no recorded history, except `fill`,
which is a recorded operation so gradients flow back to its scalar value.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

import numpy as np

from ..._config import DEFAULT_DTYPE
from ...domain._function import OpKind
from ...domain.device._device import Device, as_device
from ..backend._registry import get_backend
from ._axes import normalize_shape
from ._convert import convert
from ._tensor import Tensor

ShapeLike = Union[int, Sequence[int]]
DeviceArg = Optional[Union[str, Device]]


def _backend_for(device: DeviceArg, op: str):
    return get_backend(as_device(device) if device is not None else Device("cpu"), op)


def tensor(x: Any, dtype: Any = None, device: DeviceArg = None) -> Tensor:
    """
    Create a tensor from array-like data.

    See `convert` for the dtype inference rules.
    """
    return convert(x, dtype=dtype, device=device)


def zeros(shape: ShapeLike, dtype: Any = None, device: DeviceArg = None) -> Tensor:
    backend = _backend_for(device, "zeros")
    return Tensor(backend.zeros(normalize_shape(shape), np.dtype(dtype or DEFAULT_DTYPE)))


def ones(shape: ShapeLike, dtype: Any = None, device: DeviceArg = None) -> Tensor:
    backend = _backend_for(device, "ones")
    return Tensor(backend.ones(normalize_shape(shape), np.dtype(dtype or DEFAULT_DTYPE)))


def fill(value: Any, shape: ShapeLike) -> Tensor:
    """
    Broadcast a scalar into a tensor of `shape`.

    Parameters
    ----------
    value : Any
        Scalar tensor or Python number. A tensor keeps its dtype and device.
    shape : ShapeLike
        Output shape.

    Returns
    -------
    Tensor
        Tensor of `shape` with every element equal to `value`.

    Notes
    -----
    Recorded as the ``fill`` operation: the gradient of `value` is the sum of
    the output gradient.
    """
    from ..ops._dispatch import apply_op

    v = convert(value)
    if v.shape != ():
        raise ValueError(f"fill value must be a scalar, got shape={v.shape}")
    return apply_op(OpKind.FILL, v, normalize_shape(shape))


def linspace(
    start: float, stop: float, num: int, dtype: Any = None, device: DeviceArg = None
) -> Tensor:
    """`num` evenly spaced values over ``[start, stop]``."""
    backend = _backend_for(device, "linspace")
    arr = np.linspace(start, stop, int(num), dtype=np.dtype(dtype or DEFAULT_DTYPE))
    return Tensor(backend.from_array(arr))


def arange(
    start: float,
    stop: Optional[float] = None,
    step: float = 1,
    dtype: Any = None,
    device: DeviceArg = None,
) -> Tensor:
    """
    Values in ``[start, stop)`` spaced by `step`.

    With a single argument, counts from 0 to `start`. The dtype defaults to
    int32 when every argument is an integer, `DEFAULT_DTYPE` otherwise.
    """
    if stop is None:
        start, stop = 0, start
    if dtype is None:
        all_int = all(isinstance(v, (int, np.integer)) for v in (start, stop, step))
        dtype = np.int32 if all_int else DEFAULT_DTYPE
    backend = _backend_for(device, "arange")
    return Tensor(backend.from_array(np.arange(start, stop, step, dtype=np.dtype(dtype))))


def randn(shape: ShapeLike, dtype: Any = None, device: DeviceArg = None) -> Tensor:
    """Standard-normal samples drawn from NumPy's global generator."""
    backend = _backend_for(device, "randn")
    return Tensor(backend.randn(normalize_shape(shape), np.dtype(dtype or DEFAULT_DTYPE)))


def eye(n: int, dtype: Any = None, device: DeviceArg = None) -> Tensor:
    backend = _backend_for(device, "eye")
    return Tensor(backend.from_array(np.eye(int(n), dtype=np.dtype(dtype or DEFAULT_DTYPE))))
