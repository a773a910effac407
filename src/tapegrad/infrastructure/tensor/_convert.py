"""
Conversion of tensor-likes into differentiable tensors.

`convert` is the single entry point used by the public `tensor(...)` / `T`
constructors, by operand coercion inside the Tensor mixins and by the
gradient API when it wraps user arguments.

dtype inference
---------------
- Python numbers and (nested) lists of numbers use `DEFAULT_DTYPE`
  (``float32`` unless ``TAPEGRAD_DEFAULT_DTYPE`` says otherwise).
- Python booleans and lists of booleans stay ``bool``.
- NumPy arrays and NumPy scalars keep their own dtype.
- Existing tensors are returned unchanged unless `dtype` or `device` asks
  for something different.
"""

from __future__ import annotations

from typing import Any, Optional, Union

import numpy as np

from ..._config import DEFAULT_DTYPE
from ...domain.device._device import Device, as_device
from ..backend._basic_tensor import BasicTensor
from ..backend._registry import get_backend
from ._tensor import Tensor

TensorLike = Union[Tensor, BasicTensor, np.ndarray, int, float, bool, list, tuple]


def _infer_array(x: Any, dtype: Any) -> np.ndarray:
    if isinstance(x, (np.ndarray, np.generic)):
        return np.asarray(x) if dtype is None else np.asarray(x, dtype=dtype)
    arr = np.asarray(x)
    if arr.dtype == object:
        raise TypeError(f"Cannot convert {type(x).__name__} to a tensor")
    if dtype is not None:
        return arr.astype(dtype)
    if arr.dtype.kind in ("i", "u", "f"):
        return arr.astype(DEFAULT_DTYPE)
    return arr


def convert(
    x: TensorLike,
    dtype: Any = None,
    device: Optional[Union[str, Device]] = None,
) -> Tensor:
    """
    Convert `x` into a differentiable `Tensor`.

    Parameters
    ----------
    x : TensorLike
        Tensor, backend tensor, NumPy array, Python scalar or nested list.
    dtype : Any, optional
        Requested element dtype. Existing tensors with a different dtype are
        cast with a recorded ``cast`` operation.
    device : Union[str, Device], optional
        Target device. Defaults to the tensor's own device, or CPU for host
        data.

    Returns
    -------
    Tensor
        `x` itself when nothing needs to change, otherwise a new tensor.

    Raises
    ------
    DeviceNotSupportedError
        If no backend is registered for `device`.
    TypeError
        If `x` is not numeric data.
    """
    dev = as_device(device) if device is not None else None

    if isinstance(x, Tensor):
        out = x
        if dev is not None and out.device != dev:
            out = out.to(dev)
        if dtype is not None and out.dtype != np.dtype(dtype):
            out = out.cast(dtype)
        return out

    if isinstance(x, BasicTensor):
        out = Tensor(x)
        if dev is not None and out.device != dev:
            out = out.to(dev)
        if dtype is not None and out.dtype != np.dtype(dtype):
            out = out.cast(dtype)
        return out

    dev = dev if dev is not None else Device("cpu")
    backend = get_backend(dev, "convert")
    return Tensor(backend.from_array(_infer_array(x, dtype)))
