"""
Memory / layout mixin for Tensor.

Two groups of methods live here:

- recorded layout operations: `transpose`, `reverse`, `reshape`, `slice`,
  `pad`, `cast` and `one_hot`. Their non-tensor arguments are normalized
  before dispatch (explicit begin/size for slices, resolved ``-1`` in
  reshapes) so the backward rules can rely on them.
- untracked helpers: `ones_like`, `zeros_like`, `copy`, `to` and `cpu`.
  They return tensors with no history; gradients never flow through them.
"""

from typing import Any, Optional, Sequence, Union
from abc import ABC

import numpy as np

from .....domain._function import OpKind
from .....domain._tensor import ITensor
from .....domain.device._device import Device, as_device
from ....backend._registry import get_backend
from ..._axes import AxesLike, normalize_axes, normalize_shape


def _resolve_reshape(shape: tuple[int, ...], new_shape: tuple[int, ...]) -> tuple[int, ...]:
    total = int(np.prod(shape, dtype=np.int64))
    unknown = [i for i, d in enumerate(new_shape) if d == -1]
    if len(unknown) > 1:
        raise ValueError(f"reshape accepts at most one -1, got {new_shape}")
    known = int(np.prod([d for d in new_shape if d != -1], dtype=np.int64))
    if unknown:
        if known == 0 or total % known != 0:
            raise ValueError(f"cannot reshape {shape} into {new_shape}")
        new_shape = tuple(total // known if d == -1 else d for d in new_shape)
    if int(np.prod(new_shape, dtype=np.int64)) != total or any(d < 0 for d in new_shape):
        raise ValueError(f"cannot reshape {shape} into {new_shape}")
    return new_shape


class TensorMixinMemory(ABC):
    """
    Mixin providing layout, conversion and placement methods.
    """

    # ----------------------------
    # Recorded layout ops
    # ----------------------------
    def transpose(self: ITensor, perm: Optional[Sequence[int]] = None) -> ITensor:
        """
        Permute axes.

        Parameters
        ----------
        perm : Sequence[int], optional
            Axis permutation. ``None`` reverses the axis order.

        Notes
        -----
        Backward rule: transpose the gradient with the inverse permutation.
        """
        if perm is not None:
            perm = tuple(int(p) for p in perm)
            if sorted(perm) != list(range(self.rank)):
                raise ValueError(f"invalid permutation {perm} for rank {self.rank}")
        return self._apply(OpKind.TRANSPOSE, self, perm)

    @property
    def T(self) -> ITensor:
        return self.transpose()

    def reverse(self: ITensor, dims: AxesLike = None) -> ITensor:
        """Reverse the order of elements along `dims` (all axes if ``None``)."""
        return self._apply(OpKind.REVERSE, self, normalize_axes(dims, self.rank))

    def reshape(self: ITensor, new_shape: Union[int, Sequence[int]]) -> ITensor:
        """
        Return a tensor with the same values and a new shape.

        At most one dimension may be ``-1``; it is inferred.
        """
        target = _resolve_reshape(self.shape, normalize_shape(new_shape))
        return self._apply(OpKind.RESHAPE, self, target)

    def slice(
        self: ITensor,
        begin: Union[int, Sequence[int]],
        size: Optional[Union[int, Sequence[int]]] = None,
    ) -> ITensor:
        """
        Extract a contiguous block.

        Parameters
        ----------
        begin : Union[int, Sequence[int]]
            Start index per leading axis. Missing trailing axes start at 0.
        size : Union[int, Sequence[int]], optional
            Extent per leading axis; ``-1`` (or a missing entry) takes the
            rest of the axis.

        Returns
        -------
        ITensor
            The selected block.

        Raises
        ------
        ValueError
            If the block does not fit inside the tensor.

        Notes
        -----
        Backward rule: zero-pad the gradient back to the input shape.
        """
        begin = list(normalize_shape(begin))
        size = [] if size is None else list(normalize_shape(size))
        if len(begin) > self.rank or len(size) > self.rank:
            raise ValueError(
                f"slice begin/size longer than rank {self.rank}: {begin}, {size}"
            )
        begin += [0] * (self.rank - len(begin))
        size += [-1] * (self.rank - len(size))
        resolved = []
        for d, b, s in zip(self.shape, begin, size):
            if s == -1:
                s = d - b
            if b < 0 or s < 0 or b + s > d:
                raise ValueError(
                    f"slice begin={tuple(begin)} size={tuple(size)} out of bounds "
                    f"for shape {self.shape}"
                )
            resolved.append(s)
        return self._apply(OpKind.SLICE, self, tuple(begin), tuple(resolved))

    def pad(self: ITensor, paddings: Sequence[Sequence[int]]) -> ITensor:
        """
        Zero-pad each axis with ``(before, after)`` elements.

        Notes
        -----
        Backward rule: slice the gradient back to the unpadded block.
        """
        pads = tuple((int(p[0]), int(p[1])) for p in paddings)
        if len(pads) != self.rank:
            raise ValueError(f"pad expects {self.rank} (before, after) pairs, got {len(pads)}")
        if any(b < 0 or a < 0 for b, a in pads):
            raise ValueError(f"paddings must be non-negative, got {pads}")
        return self._apply(OpKind.PAD, self, pads)

    def cast(self: ITensor, dtype: Any) -> ITensor:
        """
        Convert elements to `dtype`.

        Gradients are cast back to the source dtype.
        """
        return self._apply(OpKind.CAST, self, np.dtype(dtype))

    def one_hot(
        self: ITensor, depth: int, on_value: float = 1.0, off_value: float = 0.0
    ) -> ITensor:
        """
        One-hot encode integer labels into a float32 tensor of shape
        ``self.shape + (depth,)``. Not differentiable.
        """
        if self.dtype.kind not in ("i", "u"):
            raise TypeError(f"one_hot expects integer labels, got dtype={self.dtype}")
        return self._apply(
            OpKind.ONE_HOT, self, int(depth), float(on_value), float(off_value)
        )

    # ----------------------------
    # Untracked helpers
    # ----------------------------
    def ones_like(self: ITensor) -> ITensor:
        return type(self)(self._backend("ones_like").ones_like(self.basic))

    def zeros_like(self: ITensor) -> ITensor:
        return type(self)(self._backend("zeros_like").zeros_like(self.basic))

    def copy(self: ITensor, device: Optional[Union[str, Device]] = None) -> ITensor:
        """
        Return a value copy with a fresh id and no recorded history.

        The copy is placed on `device` when given, otherwise on this tensor's
        device.
        """
        backend = get_backend(as_device(device) if device is not None else self.device, "copy")
        return type(self)(backend.from_array(self.to_numpy()))

    def to(self: ITensor, device: Union[str, Device]) -> ITensor:
        """
        Return a copy of this tensor on `device`.

        The copy has no recorded history. When `device` is already this
        tensor's device, `self` is returned.

        Raises
        ------
        DeviceNotSupportedError
            If no backend is registered for `device`.
        """
        dev = as_device(device)
        if dev == self.device:
            return self
        target = get_backend(dev, "to")
        return type(self)(target.from_array(self.to_numpy()))

    def cpu(self: ITensor) -> ITensor:
        return self.to(Device("cpu"))
