"""
Concrete differentiable Tensor.

`Tensor` is a thin, identity-bearing wrapper around a backend `BasicTensor`.
It owns no numeric logic: every arithmetic, shape and reduction method it
exposes (declared in the mixins under ``tensor/mixins``) is routed through
`apply_op`, which runs exactly one operation's forward pass and broadcasts a
tape entry to every active tape.

Design notes
------------
- Each tensor receives a fresh identity token at construction. Tapes refer to
  tensors exclusively by this token.
- Tensors have value semantics. The single exception is `assign`, used by
  optimizers to update parameters in place between differentiation sessions.
- Operands are never moved across devices implicitly; combining tensors on
  different devices raises `DeviceMismatchError`.
"""

from __future__ import annotations

from typing import Any, Iterator, Union

import numpy as np

from ..._config import DEFAULT_DTYPE
from ...domain._errors import DeviceMismatchError
from ...domain._function import OpKind
from ...domain.device._device import Device
from ..backend._basic_tensor import BasicTensor
from ..backend._registry import get_backend
from ._identity import new_tensor_id, short_id
from .mixins.arithmetic import TensorMixinArithmetic
from .mixins.comparison import TensorMixinComparison
from .mixins.memory import TensorMixinMemory
from .mixins.reduction import TensorMixinReduction
from .mixins.unary import TensorMixinUnary

Number = Union[int, float]


class Tensor(
    TensorMixinArithmetic,
    TensorMixinUnary,
    TensorMixinReduction,
    TensorMixinComparison,
    TensorMixinMemory,
):
    """
    Differentiable tensor.

    Parameters
    ----------
    basic : BasicTensor
        Backend value to wrap.

    Raises
    ------
    TypeError
        If `basic` is not a `BasicTensor`.

    Notes
    -----
    Users normally obtain tensors from `tapegrad.tensor(...)` (or `T`) and
    from operations, not by calling this constructor.
    """

    def __init__(self, basic: BasicTensor) -> None:
        if not isinstance(basic, BasicTensor):
            raise TypeError(f"Tensor expects a BasicTensor, got {type(basic)!r}")
        self._basic = basic
        self._id = new_tensor_id()

    # ---------------------------------------------------------------------
    # Identity / metadata
    # ---------------------------------------------------------------------
    @property
    def id(self) -> int:
        """Identity token, assigned once and never reused."""
        return self._id

    @property
    def basic(self) -> BasicTensor:
        return self._basic

    @property
    def shape(self) -> tuple[int, ...]:
        return self._basic.shape

    @property
    def dtype(self) -> np.dtype:
        return self._basic.dtype

    @property
    def device(self) -> Device:
        return self._basic.device

    @property
    def rank(self) -> int:
        return len(self.shape)

    @property
    def size(self) -> int:
        return int(np.prod(self.shape, dtype=np.int64))

    def __repr__(self) -> str:
        return (
            f"Tensor({np.array2string(self.to_numpy(), separator=', ')}, "
            f"dtype={self.dtype}, device={self.device}, id={short_id(self._id)})"
        )

    # ---------------------------------------------------------------------
    # Readout
    # ---------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        """
        Return a host copy of this tensor's values.

        Returns
        -------
        np.ndarray
            Array with this tensor's shape and dtype. Mutating it does not
            affect the tensor.
        """
        return self._backend("to_numpy").to_numpy(self._basic)

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        arr = self.to_numpy()
        return arr if dtype is None else arr.astype(dtype)

    def item(self) -> Any:
        """
        Return the single value of a one-element tensor as a Python scalar.

        Raises
        ------
        ValueError
            If the tensor holds more than one element.
        """
        if self.size != 1:
            raise ValueError(
                f"item() requires a single-element tensor, got shape={self.shape}"
            )
        return self.to_numpy().reshape(()).item()

    def tolist(self) -> Any:
        return self.to_numpy().tolist()

    def __float__(self) -> float:
        return float(self.item())

    def __iter__(self) -> Iterator[Any]:
        """Iterate over the flattened values of the tensor."""
        return iter(self.to_numpy().reshape(-1).tolist())

    def __bool__(self) -> bool:
        if self.size != 1:
            raise ValueError(
                f"truth value of a tensor with shape={self.shape} is ambiguous"
            )
        return bool(self.item())

    def __len__(self) -> int:
        if self.rank == 0:
            raise TypeError("len() of a 0-d tensor")
        return self.shape[0]

    # ---------------------------------------------------------------------
    # In-place replacement
    # ---------------------------------------------------------------------
    def assign(self, other: "Tensor") -> None:
        """
        Replace this tensor's value with `other`'s, keeping this tensor's id.

        Parameters
        ----------
        other : Tensor
            Tensor with identical shape, dtype and device.

        Raises
        ------
        ValueError
            If shape or dtype differ.
        DeviceMismatchError
            If devices differ.

        Notes
        -----
        Intended for optimizers updating parameters between differentiation
        sessions; it is not recorded on any tape.
        """
        if other.shape != self.shape:
            raise ValueError(f"assign shape mismatch: {self.shape} vs {other.shape}")
        if other.dtype != self.dtype:
            raise ValueError(f"assign dtype mismatch: {self.dtype} vs {other.dtype}")
        if other.device != self.device:
            raise DeviceMismatchError(str(self.device), str(other.device))
        self._basic = other.basic

    # ---------------------------------------------------------------------
    # Dispatch helpers used by the mixins
    # ---------------------------------------------------------------------
    def _backend(self, op: str = "op"):
        return get_backend(self.device, op)

    def _apply(self, kind: OpKind, *args: Any) -> "Tensor":
        from ..ops._dispatch import apply_op

        return apply_op(kind, *args)

    def _colocate(self, x: Union["Tensor", Number, Any]) -> "Tensor":
        """
        Coerce `x` into a Tensor usable as an operand alongside `self`.

        Tensors must already live on `self.device`. Python numbers take this
        tensor's dtype when the value is representable in it (any number
        against a float tensor, an integral number against an integer
        tensor). Otherwise the number is converted with a promoted dtype and
        the backend upcasts the result, so ``int_tensor * 0.5`` is a float
        tensor. Other array-likes use the default dtype inference of
        `convert`.
        """
        if isinstance(x, Tensor):
            if x.device != self.device:
                raise DeviceMismatchError(str(self.device), str(x.device))
            return x

        from ._convert import convert

        if isinstance(x, (bool, int, float, np.number)) and not isinstance(
            x, np.bool_
        ):
            return convert(x, dtype=self._scalar_dtype(x), device=self.device)
        return convert(x, device=self.device)

    def _scalar_dtype(self, x: Union[Number, Any]) -> np.dtype:
        kind = self.dtype.kind
        if isinstance(x, bool) and kind == "b":
            return self.dtype
        integral = isinstance(x, (int, np.integer))
        if kind == "f" or (integral and kind in "iu"):
            return self.dtype
        if integral:
            return np.result_type(self.dtype, np.int64)
        return np.result_type(self.dtype, DEFAULT_DTYPE)
