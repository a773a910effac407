"""
Concrete backend tensor value.

`BasicTensor` pairs backend-owned storage with the device it lives on. It is
the opaque value type flowing between the operation layer and the numeric
backends: operations on basic tensors are never traced.

For the NumPy CPU backend, `storage` is a `numpy.ndarray`. Other backends
may store any array-like object exposing `shape` and `dtype`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from ...domain.device._device import Device


@dataclass(frozen=True, eq=False)
class BasicTensor:
    """
    Immutable (storage, device) pair.

    Attributes
    ----------
    storage : Any
        Backend-owned array storage.
    device : Device
        Device on which the storage lives.

    Notes
    -----
    Equality is identity (``eq=False``): the operation layer matches saved
    basic tensors back to their differentiable wrappers with ``is``.
    """

    storage: Any
    device: Device

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(int(d) for d in self.storage.shape)

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.storage.dtype)

    def __repr__(self) -> str:
        return f"BasicTensor(shape={self.shape}, dtype={self.dtype}, device={self.device})"
