"""
Operation interface definitions.

This module defines the closed set of differentiable operation kinds
(`OpKind`) and the abstract base class every operation implementation derives
from (`Function`).

Each concrete `Function` declares:

- `kind`: the `OpKind` member it implements (exactly one class per kind),
- `arity`: the number of positional inputs of its forward call,
- `forward(ctx, *inputs)`: the forward computation on backend tensors,
- `backward_fns`: one backward function per positional input, in forward
  order. A `None` entry marks that input as non-differentiable.

A backward function receives the gradient of the operation's output followed
by everything the forward pass saved with ``ctx.save_for_backward(...)``, and
returns the gradient contribution for its input position.

This design is inspired by function-level autograd systems (e.g., PyTorch's
`autograd.Function`) while replacing name-keyed registries with an explicit
enum that the registry checks for completeness.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, ClassVar, Optional

from ._tensor import IBasicTensor, ITensor

BackwardFn = Callable[..., ITensor]
"""Callable ``(grad_out, *saved_for_backward) -> input gradient``."""


class OpKind(Enum):
    """
    Closed enumeration of the differentiable operations of tapegrad.

    The enum value is the operation's diagnostic name, used in tape entries
    and log records.
    """

    # elementwise binary
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"

    # elementwise unary
    NEG = "neg"
    EXP = "exp"
    LOG = "log"
    SQUARE = "square"
    SINH = "sinh"
    COSH = "cosh"
    TANH = "tanh"
    RELU = "relu"
    RELU_GRAD = "relu_grad"
    SIGMOID = "sigmoid"
    ABS = "abs"
    SIGN = "sign"

    # matrix / shape
    MATMUL = "matmul"
    TRANSPOSE = "transpose"
    REVERSE = "reverse"
    RESHAPE = "reshape"
    SLICE = "slice"
    PAD = "pad"
    CAST = "cast"
    ONE_HOT = "one_hot"
    FILL = "fill"

    # reductions
    REDUCE_SUM = "reduce_sum"
    REDUCE_MEAN = "reduce_mean"
    REDUCE_MAX = "reduce_max"
    REDUCE_LOG_SUM_EXP = "reduce_log_sum_exp"
    ARGMAX = "argmax"
    ARGMIN = "argmin"
    SOFTMAX = "softmax"
    LOG_SOFTMAX = "log_softmax"

    # comparison / selection
    EQUAL = "equal"
    GREATER = "greater"
    GREATER_EQUAL = "greater_equal"
    LESS = "less"
    LESS_EQUAL = "less_equal"
    SELECT = "select"


class Function(ABC):
    """
    Abstract base class for differentiable operations.

    Subclasses implement `forward` as a static method operating purely on
    backend tensors; it must return exactly one backend tensor. Any values
    needed by the backward functions are stored on the per-invocation `ctx`
    with ``ctx.save_for_backward(...)``.

    Notes
    -----
    - Methods are static to avoid implicit state on the function class; all
      per-call state lives on `ctx` and, once recorded, on the tape entry.
    - `backward_fns` operate on differentiable tensors so that the backward
      pass itself is recorded by any enclosing tape (higher-order gradients).
    """

    kind: ClassVar[OpKind]
    arity: ClassVar[int]
    backward_fns: ClassVar[tuple[Optional[BackwardFn], ...]] = ()

    @staticmethod
    @abstractmethod
    def forward(ctx, *inputs: Any) -> IBasicTensor:
        """
        Perform the forward computation.

        Parameters
        ----------
        ctx : OpContext
            Per-invocation context exposing the device backend (`ctx.backend`)
            and `save_for_backward`.
        *inputs : Any
            Positional inputs: backend tensors for tensor arguments, plain
            Python values for everything else (axes, flags, shapes).

        Returns
        -------
        IBasicTensor
            The single output of the operation.
        """
        ...
