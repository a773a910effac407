"""
Stack of active gradient tapes.

Nested differentiation sessions (``grad(grad(f))``) each push a tape. Every
executed operation is offered to every tape on the stack, so an outer tape
records the operations an inner session performs while computing its
gradient; that is what makes higher-order derivatives work.

The stack is per thread: each thread obtains its own instance from
`current_tape_stack()`.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from ...domain._errors import TapeStackError, TapeStackUnderflowError
from ._tape import Tape, TapeEntry

logger = logging.getLogger(__name__)


class TapeStack:
    """
    Ordered collection of active tapes (innermost last).
    """

    def __init__(self) -> None:
        self._tapes: list[Tape] = []

    def __len__(self) -> int:
        return len(self._tapes)

    def __iter__(self) -> Iterator[Tape]:
        return iter(self._tapes)

    def __repr__(self) -> str:
        return f"TapeStack(depth={len(self._tapes)})"

    @property
    def active(self) -> bool:
        """True when at least one tape is on the stack."""
        return bool(self._tapes)

    def push(self) -> Tape:
        """Create a new empty tape, push it and return it."""
        tape = Tape()
        self._tapes.append(tape)
        logger.debug("push %r (depth=%d)", tape, len(self._tapes))
        return tape

    def pop(self) -> Tape:
        """
        Remove and return the innermost tape.

        Raises
        ------
        TapeStackUnderflowError
            If the stack is empty.
        """
        if not self._tapes:
            raise TapeStackUnderflowError()
        tape = self._tapes.pop()
        logger.debug("pop %r (depth=%d)", tape, len(self._tapes))
        return tape

    def watch(self, tensor) -> None:
        """Watch `tensor` on every active tape."""
        for tape in self._tapes:
            tape.watch(tensor)

    def record_op(self, entry: TapeEntry) -> None:
        """Offer `entry` to every active tape; each decides independently."""
        for tape in self._tapes:
            tape.record_op(entry)

    @contextmanager
    def recording(self) -> Iterator[Tape]:
        """
        Push a tape for the duration of the ``with`` block.

        The tape is popped on exit, including when the block raises.

        Raises
        ------
        TapeStackError
            If the innermost tape on exit is not the one pushed on entry.
        """
        tape = self.push()
        try:
            yield tape
        finally:
            popped = self.pop()
            if popped is not tape:
                raise TapeStackError(
                    "Tape stack out of order: exiting a recording session popped a "
                    "tape it did not push"
                )


_local = threading.local()


def current_tape_stack() -> TapeStack:
    """Return the calling thread's tape stack, creating it on first use."""
    stack = getattr(_local, "stack", None)
    if stack is None:
        stack = TapeStack()
        _local.stack = stack
    return stack
