"""
Operation registry.

Maps each `OpKind` to the single `Function` subclass implementing it.
Classes register themselves with the `register_op()` decorator when their
module is imported; ``tapegrad.infrastructure.ops`` imports every op module
and then calls `OpRegistry.check_complete`, so a missing implementation is
reported at import time rather than at the first backward pass.
"""

from __future__ import annotations

import logging
from typing import Callable, Type

from ...domain._errors import ArityMismatchError, OpRegistrationError
from ...domain._function import Function, OpKind

logger = logging.getLogger(__name__)


class OpRegistry:
    """
    Registry of `Function` implementations keyed by `OpKind`.
    """

    def __init__(self) -> None:
        self._functions: dict[OpKind, Type[Function]] = {}

    def __contains__(self, kind: OpKind) -> bool:
        return kind in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def register(self, cls: Type[Function]) -> Type[Function]:
        """
        Register `cls` for its declared `kind`.

        Raises
        ------
        OpRegistrationError
            If `cls` is not a `Function`, declares no valid `kind`, or its kind
            is already registered.
        ArityMismatchError
            If ``len(cls.backward_fns) != cls.arity``.
        """
        if not (isinstance(cls, type) and issubclass(cls, Function)):
            raise OpRegistrationError(f"{cls!r} is not a Function subclass")
        kind = getattr(cls, "kind", None)
        if not isinstance(kind, OpKind):
            raise OpRegistrationError(f"{cls.__name__} does not declare an OpKind")
        if kind in self._functions:
            raise OpRegistrationError(
                f"{kind.value} is already implemented by "
                f"{self._functions[kind].__name__}; cannot register {cls.__name__}"
            )
        if len(cls.backward_fns) != cls.arity:
            raise ArityMismatchError(kind.value, cls.arity, len(cls.backward_fns))
        self._functions[kind] = cls
        logger.debug("registered %s -> %s", kind.value, cls.__name__)
        return cls

    def unregister(self, kind: OpKind) -> None:
        self._functions.pop(kind, None)

    def lookup(self, kind: OpKind) -> Type[Function]:
        """
        Return the `Function` registered for `kind`.

        Raises
        ------
        OpRegistrationError
            If no implementation is registered.
        """
        try:
            return self._functions[kind]
        except KeyError:
            raise OpRegistrationError(f"no Function registered for {kind!r}") from None

    def check_complete(self) -> None:
        """
        Raise `OpRegistrationError` unless every `OpKind` is registered.
        """
        missing = [k.value for k in OpKind if k not in self._functions]
        if missing:
            raise OpRegistrationError(
                f"operations without a registered Function: {', '.join(missing)}"
            )


op_registry = OpRegistry()


def register_op() -> Callable[[Type[Function]], Type[Function]]:
    """
    Decorator registering a `Function` subclass with the global registry.
    """

    def deco(cls: Type[Function]) -> Type[Function]:
        return op_registry.register(cls)

    return deco
