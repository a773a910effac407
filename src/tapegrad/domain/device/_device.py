"""
Device descriptors.

A `Device` names where a tensor's storage lives. It is a key into the
backend registry (`tapegrad.infrastructure.backend`): ``"cpu"`` is always
served by the NumPy backend, while ``"cuda:<n>"`` names a slot that only
works once a backend has been registered for it.
"""

from __future__ import annotations

from enum import Enum
from typing import Union
import re


class DeviceType(Enum):
    CPU = "cpu"
    CUDA = "cuda"


class Device:
    """
    Parsed ``"cpu"`` / ``"cuda:<index>"`` descriptor.

    Two descriptors with the same type and index compare and hash equal, so
    ``Device("cuda:0")`` built anywhere finds the backend registered under
    another ``Device("cuda:0")``.

    Raises
    ------
    ValueError
        If `device` is not ``"cpu"`` or ``"cuda:<non-negative int>"``.
    """

    __slots__ = ("type", "index")

    _INDEXED = re.compile(r"^cuda:(\d+)$")

    def __init__(self, device: str):
        if device == "cpu":
            self.type = DeviceType.CPU
            self.index = None
            return
        m = self._INDEXED.match(device)
        if m is None:
            raise ValueError(
                f"Invalid device '{device}'. Expected 'cpu' or 'cuda:<index>'"
            )
        self.type = DeviceType.CUDA
        self.index = int(m.group(1))

    def __str__(self) -> str:
        if self.type is DeviceType.CPU:
            return "cpu"
        return f"cuda:{self.index}"

    def __repr__(self) -> str:
        return f"Device('{self}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Device):
            return NotImplemented
        return self.type is other.type and self.index == other.index

    def __hash__(self) -> int:
        return hash((self.type, self.index))

    def is_cpu(self) -> bool:
        return self.type is DeviceType.CPU

    def is_cuda(self) -> bool:
        return self.type is DeviceType.CUDA


def as_device(device: Union[str, Device]) -> Device:
    """
    Return `device` as a `Device`, parsing it when given a string.

    Raises
    ------
    TypeError
        If `device` is neither a string nor a `Device`.
    """
    if isinstance(device, Device):
        return device
    if isinstance(device, str):
        return Device(device)
    raise TypeError(f"device must be a str or Device, got {type(device)!r}")
