"""
Device -> backend registry.

The registry maps each `Device` to the `IBackendOps` instance that executes
operations for tensors living on it. The NumPy backend is registered for
``Device("cpu")`` when this module is imported; further devices are added
with `register_backend`.

Looking up a device with no registered backend raises
`DeviceNotSupportedError`.
"""

from __future__ import annotations

import logging
from typing import Union

from ...domain._backend import IBackendOps
from ...domain._errors import DeviceNotSupportedError
from ...domain.device._device import Device, as_device
from ._numpy_backend import NumpyBackend

logger = logging.getLogger(__name__)

_BACKENDS: dict[Device, IBackendOps] = {}


def register_backend(device: Union[str, Device], ops: IBackendOps) -> None:
    """
    Register `ops` as the backend for `device`, replacing any previous one.

    Parameters
    ----------
    device : Union[str, Device]
        Target device.
    ops : IBackendOps
        Backend implementation. Its `device` must equal `device`.

    Raises
    ------
    TypeError
        If `ops` does not satisfy `IBackendOps`.
    ValueError
        If `ops.device` differs from `device`.
    """
    dev = as_device(device)
    if not isinstance(ops, IBackendOps):
        raise TypeError(f"{type(ops)!r} does not implement IBackendOps")
    if ops.device != dev:
        raise ValueError(
            f"Backend is bound to device '{ops.device}', cannot register it for '{dev}'"
        )
    _BACKENDS[dev] = ops
    logger.debug("registered backend %r for %s", ops, dev)


def unregister_backend(device: Union[str, Device]) -> None:
    """
    Remove the backend registered for `device`.

    Raises
    ------
    ValueError
        If `device` is the CPU (the CPU backend is always available).
    """
    dev = as_device(device)
    if dev.is_cpu():
        raise ValueError("The CPU backend cannot be unregistered")
    _BACKENDS.pop(dev, None)


def get_backend(device: Union[str, Device], op: str = "op") -> IBackendOps:
    """
    Return the backend registered for `device`.

    Raises
    ------
    DeviceNotSupportedError
        If no backend is registered for `device`.
    """
    dev = as_device(device)
    try:
        return _BACKENDS[dev]
    except KeyError:
        raise DeviceNotSupportedError(op, str(dev)) from None


def list_devices() -> list[str]:
    """
    Return the names of all devices with a registered backend, CPU first.
    """
    return sorted(
        (str(d) for d in _BACKENDS), key=lambda name: (name != "cpu", name)
    )


register_backend(Device("cpu"), NumpyBackend(Device("cpu")))
