"""
Gradient tape.

A `Tape` is the record of one differentiation session. It knows which
tensors are relevant to that session (the watched sources and everything
computed from them) and, for each of those tensors, the operation that
produced it.

Tapes refer to tensors only by identity token. The only object references a
tape holds are the saved-for-backward values inside its entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ...domain._function import OpKind
from ..tensor._identity import short_id

logger = logging.getLogger(__name__)

WATCHED_SOURCE = -1
"""Sentinel op id for tensors watched as sources, which have no producer."""

ShapeDType = tuple[tuple[int, ...], Any, Any]


@dataclass(frozen=True)
class TapeEntry:
    """
    Immutable record of one executed operation.

    Attributes
    ----------
    name : str
        Diagnostic name of the operation.
    kind : OpKind
        Operation kind; selects the backward functions.
    oid : int
        Opaque, unique id of this invocation.
    input_ids : tuple[Optional[int], ...]
        Identity token of each positional input, ``None`` for non-tensor
        inputs (axes, flags, shapes).
    output_ids : tuple[int, ...]
        Identity tokens of the outputs.
    input_shape_dtypes : tuple[Optional[ShapeDType], ...]
        ``(shape, dtype, device)`` of each tensor input, ``None`` otherwise.
        Used to synthesize zero gradients for non-differentiable inputs.
    saved_for_backward : tuple[Any, ...]
        Values handed to the backward functions after the output gradient.
    """

    name: str
    kind: OpKind
    oid: int
    input_ids: tuple[Optional[int], ...]
    output_ids: tuple[int, ...]
    input_shape_dtypes: tuple[Optional[ShapeDType], ...]
    saved_for_backward: tuple[Any, ...]

    def __str__(self) -> str:
        ins = ", ".join(short_id(i) for i in self.input_ids)
        outs = ", ".join(short_id(o) for o in self.output_ids)
        return f"{self.name}#{short_id(self.oid)}({ins}) -> ({outs})"


class Tape:
    """
    Record of the operations relevant to one differentiation session.

    Attributes
    ----------
    tensor_to_op : dict[int, int]
        Maps each tracked tensor id to the op id that produced it, or to
        `WATCHED_SOURCE` for watched sources.
    oid_lookup : dict[int, TapeEntry]
        Maps op ids to their entries.
    """

    def __init__(self) -> None:
        self.tensor_to_op: dict[int, int] = {}
        self.oid_lookup: dict[int, TapeEntry] = {}

    def __repr__(self) -> str:
        return f"Tape(tensors={len(self.tensor_to_op)}, ops={len(self.oid_lookup)})"

    def watch(self, tensor) -> None:
        """
        Mark `tensor` as a source. Idempotent.

        A tensor that is already tracked (watched, or produced by a recorded
        op) keeps its existing producer.
        """
        if tensor.id not in self.tensor_to_op:
            self.tensor_to_op[tensor.id] = WATCHED_SOURCE
            logger.debug("watch %s on %r", short_id(tensor.id), self)

    def is_tracked(self, tensor_id: Optional[int]) -> bool:
        return tensor_id is not None and tensor_id in self.tensor_to_op

    def should_record(self, input_ids: Iterable[Optional[int]]) -> bool:
        """
        Return True iff any non-``None`` id in `input_ids` is tracked.
        """
        return any(i is not None and i in self.tensor_to_op for i in input_ids)

    def record_op(self, entry: TapeEntry) -> None:
        """
        Record `entry` if it consumes a tracked tensor; otherwise do nothing.
        """
        if not self.should_record(entry.input_ids):
            return
        for out in entry.output_ids:
            self.tensor_to_op[out] = entry.oid
        self.oid_lookup[entry.oid] = entry
        logger.debug("record %s on %r", entry, self)
