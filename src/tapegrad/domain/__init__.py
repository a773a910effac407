from ._errors import (
    ArityMismatchError,
    DeviceMismatchError,
    DeviceNotSupportedError,
    MultipleOutputsError,
    OpRegistrationError,
    SavedTensorError,
    TapeStackError,
    TapeStackUnderflowError,
)
from ._function import BackwardFn, Function, OpKind
from ._backend import IBackendOps
from ._tensor import IBasicTensor, ITensor
from .device import Device, DeviceLike, DeviceType, as_device

__all__ = [
    ArityMismatchError.__name__,
    DeviceMismatchError.__name__,
    DeviceNotSupportedError.__name__,
    MultipleOutputsError.__name__,
    OpRegistrationError.__name__,
    SavedTensorError.__name__,
    TapeStackError.__name__,
    TapeStackUnderflowError.__name__,
    "BackwardFn",
    Function.__name__,
    OpKind.__name__,
    IBackendOps.__name__,
    IBasicTensor.__name__,
    ITensor.__name__,
    Device.__name__,
    DeviceLike.__name__,
    DeviceType.__name__,
    as_device.__name__,
]
