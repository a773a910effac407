"""
Structural device type used by the domain protocols.

`ITensor`, `IBasicTensor` and `IBackendOps` annotate their ``device``
members with `DeviceLike` so the domain layer never imports the concrete
`Device` class.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class DeviceLike(Protocol):
    """What the tape and the backends read from a device descriptor."""

    type: object
    index: Optional[int]

    def is_cpu(self) -> bool: ...
    def is_cuda(self) -> bool: ...
    def __str__(self) -> str: ...
