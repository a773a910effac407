"""
Tensor interface definitions.

This module defines the domain-level interfaces for the two tensor layers of
tapegrad using structural typing:

- `IBasicTensor`: an opaque backend value (storage + device). Operations on
  basic tensors are never traced.
- `ITensor`: the differentiable, identity-bearing wrapper around a basic
  tensor. Every operation on an `ITensor` is routed through the operation
  layer so it can be recorded on active tapes.

Notes
-----
The autograd core only ever compares tensor identifiers for equality and uses
them as map keys; no arithmetic is performed on them.
"""

from __future__ import annotations

from typing import Any, Protocol, Union, runtime_checkable

from .device._device_protocol import DeviceLike

Number = Union[int, float]
Shape = tuple[int, ...]
TensorId = int


@runtime_checkable
class IBasicTensor(Protocol):
    """
    Backend storage contract.

    A basic tensor pairs backend-owned storage with the device it lives on.
    Its `shape` and `dtype` are read from the storage.
    """

    @property
    def storage(self) -> Any: ...

    @property
    def device(self) -> DeviceLike: ...

    @property
    def shape(self) -> Shape: ...

    @property
    def dtype(self) -> Any: ...


@runtime_checkable
class ITensor(Protocol):
    """
    Differentiable tensor interface.

    Notes
    -----
    - `id` is assigned once at construction and never reused.
    - Tensors have value semantics: operations always produce new tensors.
    """

    @property
    def id(self) -> TensorId:
        """
        Return the identity token of this tensor.

        Returns
        -------
        int
            Opaque identifier, unique for the lifetime of the process.
        """
        ...

    @property
    def basic(self) -> IBasicTensor:
        """Return the wrapped backend tensor."""
        ...

    @property
    def shape(self) -> Shape:
        """Return the shape of the tensor."""
        ...

    @property
    def dtype(self) -> Any:
        """Return the element dtype of the tensor."""
        ...

    @property
    def device(self) -> DeviceLike:
        """Return the device on which this tensor resides."""
        ...

    @property
    def rank(self) -> int:
        """Return the number of dimensions."""
        ...
