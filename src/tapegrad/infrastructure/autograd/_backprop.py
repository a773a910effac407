"""
Reverse-mode gradient computation over a recorded tape.

The algorithm runs in two phases:

1. `prepare_backprop` walks backward from the target through the producing
   operations and counts, for every tensor, how many recorded consumers use
   it. Only the entries reachable from the target are kept.
2. `imperative_grad` executes backward functions in an order where an
   operation runs only after the gradient of its output is complete, i.e.
   every consumer of that output has already contributed.

Gradients are computed with ordinary recorded tensor operations, so an
enclosing tape records this computation as well (higher-order gradients).
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Sequence

from ...domain._errors import ArityMismatchError, MultipleOutputsError
from ..backend._registry import get_backend
from ..ops._registry import op_registry
from ..tensor._identity import short_id
from ..tensor._tensor import Tensor
from ._gradient_collector import GradientCollector
from ._tape import WATCHED_SOURCE, Tape, TapeEntry

logger = logging.getLogger(__name__)


def prepare_backprop(
    target: Tensor, tape: Tape, source_ids: set[int]
) -> tuple[Counter, Counter, dict[int, TapeEntry]]:
    """
    Compute consumer counts for the backward pass.

    Parameters
    ----------
    target : Tensor
        Tensor being differentiated.
    tape : Tape
        Tape recorded while computing `target`.
    source_ids : set[int]
        Ids of the tensors gradients are requested for. The walk does not
        descend past them.

    Returns
    -------
    usage_counts : Counter
        Tensor id -> number of reachable recorded consumers.
    op_missing_tensor : Counter
        Op id -> number of its used outputs whose gradient is still
        incomplete.
    oid_lookup : dict[int, TapeEntry]
        The entries reachable from `target`.
    """
    tensor_stack = [target.id]
    oid_lookup: dict[int, TapeEntry] = {}
    usage_counts: Counter = Counter()

    while tensor_stack:
        tid = tensor_stack.pop()
        oid = tape.tensor_to_op.get(tid)
        if oid is None or oid == WATCHED_SOURCE or oid in oid_lookup:
            continue

        entry = tape.oid_lookup[oid]
        oid_lookup[oid] = entry

        for input_id in entry.input_ids:
            if input_id is None:
                continue
            usage_counts[input_id] += 1
            # descend on first usage only, and never past a source
            if (
                usage_counts[input_id] == 1
                and input_id in tape.tensor_to_op
                and input_id not in source_ids
            ):
                tensor_stack.append(input_id)

    op_missing_tensor: Counter = Counter()
    for tid in usage_counts:
        oid = tape.tensor_to_op.get(tid)
        if oid is not None and oid != WATCHED_SOURCE:
            op_missing_tensor[oid] += 1

    logger.debug(
        "prepare_backprop: %d ops, usage_counts=%s, op_missing_tensor=%s",
        len(oid_lookup),
        {short_id(k): v for k, v in usage_counts.items()},
        {short_id(k): v for k, v in op_missing_tensor.items()},
    )
    return usage_counts, op_missing_tensor, oid_lookup


def _zeros_for(entry: TapeEntry, i: int):
    shape_dtype = entry.input_shape_dtypes[i]
    if shape_dtype is None:
        return None
    shape, dtype, device = shape_dtype
    return Tensor(get_backend(device, entry.name).zeros(shape, dtype))


def _input_grads(entry: TapeEntry, out_grad: Tensor) -> list:
    backward_fns = op_registry.lookup(entry.kind).backward_fns
    if len(backward_fns) != len(entry.input_ids):
        raise ArityMismatchError(entry.name, len(entry.input_ids), len(backward_fns))

    grads = []
    for i, fn in enumerate(backward_fns):
        if fn is not None:
            grads.append(fn(out_grad, *entry.saved_for_backward))
        else:
            grads.append(_zeros_for(entry, i))
    return grads


def imperative_grad(
    target: Tensor, sources: Sequence[Tensor], tape: Tape
) -> list[Tensor]:
    """
    Compute ``d target / d source`` for each source.

    Parameters
    ----------
    target : Tensor
        Tensor being differentiated. Its seed gradient is ``ones_like``, so a
        non-scalar target yields the gradient of its sum.
    sources : Sequence[Tensor]
        Tensors watched on `tape`.
    tape : Tape
        Tape recorded while computing `target`.

    Returns
    -------
    list[Tensor]
        One gradient per source, in order. A source with no path to the
        target receives zeros shaped like itself.

    Raises
    ------
    MultipleOutputsError
        If a recorded operation on the path has more than one output.
    ArityMismatchError
        If an operation's backward list does not match its recorded inputs.
    """
    source_ids = {s.id for s in sources}
    usage_counts, op_missing_tensor, oid_lookup = prepare_backprop(
        target, tape, source_ids
    )

    ready_ops: list[int] = []
    target_oid = tape.tensor_to_op.get(target.id)
    if target_oid is not None and target_oid != WATCHED_SOURCE:
        ready_ops.append(target_oid)

    gradients = GradientCollector()
    gradients.append(target.id, target.ones_like())

    while ready_ops:
        oid = ready_ops.pop()
        entry = oid_lookup[oid]

        if len(entry.output_ids) != 1:
            raise MultipleOutputsError(entry.name, len(entry.output_ids))
        if entry.output_ids[0] in gradients:
            out_grad = gradients.aggregate(entry.output_ids[0])
            logger.debug("backprop %s out_grad shape=%s", entry, out_grad.shape)
            in_grads = _input_grads(entry, out_grad)
        else:
            # every consumer was non-differentiable w.r.t. this output
            logger.debug("backprop %s skipped: no output gradient", entry)
            in_grads = [None] * len(entry.input_ids)

        for tid, in_grad in zip(entry.input_ids, in_grads):
            if tid is None:
                continue
            if in_grad is not None:
                gradients.append(tid, in_grad)

            if usage_counts[tid] > 0:
                usage_counts[tid] -= 1
                if (
                    usage_counts[tid] == 0
                    and tid in tape.tensor_to_op
                    and tid not in source_ids
                ):
                    in_oid = tape.tensor_to_op[tid]
                    if in_oid != WATCHED_SOURCE and op_missing_tensor[in_oid] > 0:
                        op_missing_tensor[in_oid] -= 1
                        if op_missing_tensor[in_oid] == 0:
                            ready_ops.append(in_oid)

    result = [gradients.aggregate(s.id, like=s) for s in sources]
    logger.debug(
        "imperative_grad: %s",
        [(short_id(s.id), g.shape) for s, g in zip(sources, result)],
    )
    return result
