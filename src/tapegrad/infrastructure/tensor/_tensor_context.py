from typing import Any
from dataclasses import dataclass, field

from ...domain._backend import IBackendOps
from ...domain.device._device import Device


@dataclass
class OpContext:
    """
    Per-invocation context handed to `Function.forward`.

    An `OpContext` lives for exactly one forward call. It exposes the backend
    of the device the operation runs on and collects the values the backward
    functions will need.

    Attributes
    ----------
    backend : IBackendOps
        Backend executing the forward kernels.
    device : Device
        Device shared by every tensor input of the operation.
    saved : list[Any]
        Values saved with `save_for_backward`, in call order. Backend tensors
        are later mapped to the differentiable input/output tensor wrapping
        them; everything else (shapes, axes, flags) is passed through as-is.
    """

    backend: IBackendOps
    device: Device
    saved: list[Any] = field(default_factory=list)

    def save_for_backward(self, *values: Any) -> None:
        """
        Save values for use by the backward functions.

        Parameters
        ----------
        *values : Any
            Backend tensors (inputs or the output of this operation) and/or
            plain Python metadata.
        """
        self.saved.extend(values)
