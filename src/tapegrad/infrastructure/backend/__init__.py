"""
Numeric backends for tapegrad.

This package holds the backend value type (`BasicTensor`), the NumPy kernel
implementation (`NumpyBackend`) and the device registry used by the
operation layer to find the backend for a tensor's device.
"""

from ._basic_tensor import BasicTensor
from ._numpy_backend import NumpyBackend
from ._registry import get_backend, list_devices, register_backend, unregister_backend

__all__ = [
    BasicTensor.__name__,
    NumpyBackend.__name__,
    get_backend.__name__,
    list_devices.__name__,
    register_backend.__name__,
    unregister_backend.__name__,
]
