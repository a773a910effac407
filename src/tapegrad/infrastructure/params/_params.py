"""
Named parameter collections.

`Params` maps names to tensors. It is the object loss functions receive in
`grad_params` and the state `OptimizerSGD` updates. Parameters are passed
explicitly: there is no global registry.

Initializers (`init`, `randn`, `zeros`) create a tensor only when the name is
not yet present, so a loss function can declare its parameters inline and be
called repeatedly. A parameter created while a tape is recording is watched
on every active tape, which gives lazily created parameters a gradient on
the very first `grad_params` call.
"""

from __future__ import annotations

import warnings
from typing import Any, Callable, Iterator, Optional, Sequence, Union

from ...domain.device._device import Device
from ..autograd._tape_stack import current_tape_stack
from ..tensor._axes import normalize_shape
from ..tensor._convert import convert
from ..tensor._factories import randn as _randn
from ..tensor._factories import zeros as _zeros
from ..tensor._tensor import Tensor

ShapeLike = Union[int, Sequence[int]]


class Params:
    """
    Ordered mapping of parameter names to tensors.

    Examples
    --------
    >>> params = Params()
    >>> w = params.randn("w", (3, 2))
    >>> params.randn("w", (3, 2)) is w
    True
    >>> sorted(params.keys())
    ['w']
    """

    def __init__(self) -> None:
        self._store: dict[str, Tensor] = {}

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}: {v.shape}" for k, v in self.items())
        return f"Params({{{inner}}})"

    # ----------------------------
    # Mapping protocol
    # ----------------------------
    def has(self, name: str) -> bool:
        return name in self._store

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def get(self, name: str) -> Tensor:
        """
        Return the tensor stored under `name`.

        Raises
        ------
        KeyError
            If no parameter has that name.
        """
        try:
            return self._store[name]
        except KeyError:
            raise KeyError(f"no parameter named {name!r}") from None

    def set(self, name: str, t: Any) -> Tensor:
        """Store `t` (converted to a tensor) under `name` and return it."""
        t = convert(t)
        self._store[name] = t
        return t

    def keys(self) -> list[str]:
        return list(self._store)

    def items(self) -> list[tuple[str, Tensor]]:
        return list(self._store.items())

    def __iter__(self) -> Iterator[tuple[str, Tensor]]:
        """Iterate over ``(name, tensor)`` pairs in insertion order."""
        return iter(self.items())

    def __len__(self) -> int:
        return len(self._store)

    # ----------------------------
    # Initializers
    # ----------------------------
    def init(self, name: str, init_fn: Callable[[], Any]) -> Tensor:
        """
        Return the parameter `name`, creating it with `init_fn()` if absent.
        """
        if self.has(name):
            return self.get(name)
        t = self.set(name, init_fn())
        stack = current_tape_stack()
        if stack.active:
            stack.watch(t)
        return t

    def _init_shaped(
        self, name: str, shape: ShapeLike, init_fn: Callable[[], Tensor]
    ) -> Tensor:
        shape = normalize_shape(shape)
        if self.has(name):
            existing = self.get(name)
            if existing.shape != shape:
                warnings.warn(
                    f"Parameter {name!r} already exists with shape {existing.shape}; "
                    f"ignoring requested shape {shape}.",
                    RuntimeWarning,
                    stacklevel=3,
                )
            return existing
        return self.init(name, init_fn)

    def randn(
        self,
        name: str,
        shape: ShapeLike,
        scale: float = 1.0,
        dtype: Any = None,
        device: Optional[Union[str, Device]] = None,
    ) -> Tensor:
        """
        Return parameter `name`, initializing it with ``scale * N(0, 1)``.

        If `name` exists with a different shape, the existing tensor is
        returned and a `RuntimeWarning` is issued.
        """

        def make() -> Tensor:
            t = _randn(shape, dtype=dtype, device=device)
            # a fresh tensor is untracked, so the scaling is never recorded
            return t if scale == 1.0 else t.mul(scale)

        return self._init_shaped(name, shape, make)

    def zeros(
        self,
        name: str,
        shape: ShapeLike,
        dtype: Any = None,
        device: Optional[Union[str, Device]] = None,
    ) -> Tensor:
        """Return parameter `name`, initializing it with zeros."""
        return self._init_shaped(
            name, shape, lambda: _zeros(shape, dtype=dtype, device=device)
        )

    # ----------------------------
    # Scoping
    # ----------------------------
    def scope(self, prefix: str) -> "ScopedParams":
        """View of this collection whose names are prefixed with ``prefix/``."""
        return ScopedParams(self, prefix)


class ScopedParams(Params):
    """
    Prefix view onto a parent `Params`.

    All reads and writes go to the parent under ``"<prefix>/<name>"``.
    """

    def __init__(self, parent: Params, prefix: str) -> None:
        self.parent = parent
        self.prefix = prefix

    def _resolve(self, name: str) -> str:
        return f"{self.prefix}/{name}"

    def has(self, name: str) -> bool:
        return self.parent.has(self._resolve(name))

    def get(self, name: str) -> Tensor:
        return self.parent.get(self._resolve(name))

    def set(self, name: str, t: Any) -> Tensor:
        return self.parent.set(self._resolve(name), t)

    def keys(self) -> list[str]:
        head = self.prefix + "/"
        return [k[len(head):] for k in self.parent.keys() if k.startswith(head)]

    def items(self) -> list[tuple[str, Tensor]]:
        return [(k, self.get(k)) for k in self.keys()]

    def __len__(self) -> int:
        return len(self.keys())

    def scope(self, prefix: str) -> "ScopedParams":
        return ScopedParams(self.parent, self._resolve(prefix))
