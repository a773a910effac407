"""
Public gradient transformations.

`grad`, `multigrad`, `grad_and_val` and `multigrad_and_val` turn a function
of tensors into a function returning its gradient (and optionally its
value). `grad_params` does the same for functions of a `Params` collection.

Each call of a returned function runs one differentiation session:

1. push a fresh tape on the calling thread's tape stack,
2. convert the arguments to tensors and watch the requested ones on every
   active tape (so enclosing sessions can differentiate through this one),
3. run the forward function, every operation recording itself,
4. pop the tape (also when the forward function raises),
5. run the backward pass over the popped tape.

Because the backward pass consists of recorded operations, the transforms
compose: ``grad(grad(f))`` is the second derivative of `f`.
"""

from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence, Union

from typing_extensions import ParamSpec

from ..tensor._convert import convert
from ..tensor._tensor import Tensor
from ._backprop import imperative_grad
from ._tape_stack import current_tape_stack

if TYPE_CHECKING:
    from ..params._params import Params

P = ParamSpec("P")

ArgNums = Optional[Union[int, Sequence[int]]]


def _normalize_argnums(argnums: ArgNums, n_args: int) -> Optional[tuple[int, ...]]:
    if argnums is None:
        return None
    if isinstance(argnums, int):
        argnums = (argnums,)
    out = []
    for i in argnums:
        if not -n_args <= i < n_args:
            raise ValueError(
                f"argnum {i} is out of range for a call with {n_args} positional argument(s)"
            )
        out.append(i % n_args)
    return tuple(out)


def multigrad_and_val(
    f: Callable[P, Any], argnums: ArgNums = None
) -> Callable[P, tuple[list[Tensor], Tensor]]:
    """
    Gradient of `f` w.r.t. several positional arguments, plus its value.

    Parameters
    ----------
    f : Callable
        Function of tensors returning a tensor (or a number). A non-scalar
        result is differentiated as the sum of its elements.
    argnums : Union[int, Sequence[int]], optional
        Positions of the arguments to differentiate with respect to. ``None``
        (the default) selects every positional argument.

    Returns
    -------
    Callable
        A function taking the same arguments as `f` and returning
        ``(grads, value)``, where ``grads[k]`` has the shape of the k-th
        selected argument. Arguments with no influence on the result get
        zeros.

    Notes
    -----
    Positional arguments are converted with `convert`; keyword arguments are
    passed through untouched and never differentiated.
    """

    @wraps(f)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> tuple[list[Tensor], Tensor]:
        stack = current_tape_stack()
        positions = _normalize_argnums(argnums, len(args))
        with stack.recording() as tape:
            targs = [convert(a) for a in args]
            sources = (
                targs if positions is None else [targs[i] for i in positions]
            )
            for t in sources:
                stack.watch(t)
            result = convert(f(*targs, **kwargs))
        return imperative_grad(result, sources, tape), result

    return wrapper


def multigrad(f: Callable[P, Any], argnums: ArgNums = None) -> Callable[P, list[Tensor]]:
    """
    Like `multigrad_and_val`, returning only the gradients.

    Examples
    --------
    >>> g = multigrad(lambda a, b: a * 2 + b * 3)
    >>> [float(t) for t in g(1.0, 1.0)]
    [2.0, 3.0]
    """
    g = multigrad_and_val(f, argnums)

    @wraps(f)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> list[Tensor]:
        return g(*args, **kwargs)[0]

    return wrapper


def grad_and_val(f: Callable[P, Any], argnum: int = 0) -> Callable[P, tuple[Tensor, Tensor]]:
    """Gradient of `f` w.r.t. argument `argnum`, plus the value of `f`."""
    g = multigrad_and_val(f, [argnum])

    @wraps(f)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> tuple[Tensor, Tensor]:
        grads, val = g(*args, **kwargs)
        return grads[0], val

    return wrapper


def grad(f: Callable[P, Any], argnum: int = 0) -> Callable[P, Tensor]:
    """
    Return a function computing the gradient of `f` w.r.t. one argument.

    If `f` maps R^n to R, the returned function maps R^n to R^n. Results keep
    the shape of the differentiated argument.

    Parameters
    ----------
    f : Callable
        Function to differentiate.
    argnum : int, optional
        Position of the argument to differentiate with respect to.

    Returns
    -------
    Callable
        Gradient function with the same positional signature as `f`.

    Examples
    --------
    >>> float(grad(lambda x: x * x)(3.0))
    6.0
    >>> float(grad(grad(lambda x: x * x * x))(2.0))
    12.0
    """
    g = multigrad_and_val(f, [argnum])

    @wraps(f)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Tensor:
        return g(*args, **kwargs)[0][0]

    return wrapper


def grad_params(
    f: Callable[["Params"], Any], names: Optional[Sequence[str]] = None
) -> Callable[["Params"], tuple[dict[str, Tensor], Tensor]]:
    """
    Gradient of a loss function w.r.t. the tensors of a `Params` collection.

    Parameters
    ----------
    f : Callable[[Params], Any]
        Loss function. It may lazily create parameters (e.g. with
        ``params.randn(...)``); those are included in the result.
    names : Sequence[str], optional
        Parameters to differentiate. ``None`` selects every parameter.

    Returns
    -------
    Callable[[Params], tuple[dict[str, Tensor], Tensor]]
        Function mapping a `Params` instance to ``(grads_by_name, loss)``.
    """

    def wrapper(params: "Params") -> tuple[dict[str, Tensor], Tensor]:
        stack = current_tape_stack()
        with stack.recording() as tape:
            selected = list(names) if names is not None else list(params.keys())
            for name in selected:
                stack.watch(params.get(name))
            result = convert(f(params))
            if names is None:
                selected = list(params.keys())
        sources = [params.get(name) for name in selected]
        grads = imperative_grad(result, sources, tape)
        return dict(zip(selected, grads)), result

    return wrapper
