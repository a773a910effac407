"""
Operation dispatch.

`apply_op` is the single path through which every differentiable tensor
method executes. For one call it:

1. looks up the `Function` registered for the operation kind and checks the
   number of positional inputs against its arity,
2. resolves the backend of the (shared) device of the tensor inputs,
3. runs `Function.forward` on the backend tensors,
4. when at least one tape is active, builds a `TapeEntry` (mapping saved
   backend tensors back to their differentiable tensors) and offers it to
   every tape on the calling thread's stack.
"""

from __future__ import annotations

from typing import Any, Optional

from ...domain._errors import (
    ArityMismatchError,
    DeviceMismatchError,
    MultipleOutputsError,
    SavedTensorError,
)
from ...domain._function import OpKind
from ...domain.device._device import Device
from ..autograd._tape import TapeEntry
from ..autograd._tape_stack import current_tape_stack
from ..backend._basic_tensor import BasicTensor
from ..backend._registry import get_backend
from ..tensor._identity import new_op_id
from ..tensor._tensor import Tensor
from ..tensor._tensor_context import OpContext
from ._registry import op_registry


def _common_device(args: tuple[Any, ...]) -> Device:
    device: Optional[Device] = None
    for a in args:
        if isinstance(a, Tensor):
            if device is None:
                device = a.device
            elif a.device != device:
                raise DeviceMismatchError(str(device), str(a.device))
    return device if device is not None else Device("cpu")


def _resolve_saved(
    name: str, saved: list[Any], args: tuple[Any, ...], out: Tensor
) -> tuple[Any, ...]:
    resolved = []
    for value in saved:
        if not isinstance(value, BasicTensor):
            resolved.append(value)
            continue
        if value is out.basic:
            resolved.append(out)
            continue
        for a in args:
            if isinstance(a, Tensor) and a.basic is value:
                resolved.append(a)
                break
        else:
            raise SavedTensorError(name)
    return tuple(resolved)


def apply_op(kind: OpKind, *args: Any) -> Tensor:
    """
    Execute one operation and record it on the active tapes.

    Parameters
    ----------
    kind : OpKind
        Operation to run.
    *args : Any
        Positional inputs: `Tensor` for tensor inputs, plain Python values
        otherwise.

    Returns
    -------
    Tensor
        The operation's output.

    Raises
    ------
    ArityMismatchError
        If ``len(args)`` differs from the registered function's arity.
    DeviceMismatchError
        If the tensor inputs live on different devices.
    DeviceNotSupportedError
        If no backend is registered for their device.
    MultipleOutputsError
        If the forward pass does not return a single backend tensor.
    SavedTensorError
        If a saved backend tensor is neither an input nor the output.
    """
    fn = op_registry.lookup(kind)
    name = kind.value
    if len(args) != fn.arity:
        raise ArityMismatchError(name, fn.arity, len(args))

    device = _common_device(args)
    ctx = OpContext(backend=get_backend(device, name), device=device)
    basic_args = tuple(a.basic if isinstance(a, Tensor) else a for a in args)

    out_basic = fn.forward(ctx, *basic_args)
    if isinstance(out_basic, (tuple, list)):
        raise MultipleOutputsError(name, len(out_basic))
    out = Tensor(out_basic)

    stack = current_tape_stack()
    if stack.active:
        entry = TapeEntry(
            name=name,
            kind=kind,
            oid=new_op_id(),
            input_ids=tuple(a.id if isinstance(a, Tensor) else None for a in args),
            output_ids=(out.id,),
            input_shape_dtypes=tuple(
                (a.shape, a.dtype, a.device) if isinstance(a, Tensor) else None
                for a in args
            ),
            saved_for_backward=_resolve_saved(name, ctx.saved, args, out),
        )
        stack.record_op(entry)
    return out
