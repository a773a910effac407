from __future__ import annotations

from typing import Sequence


def broadcast_shape(sx: Sequence[int], sy: Sequence[int]) -> tuple[int, ...]:
    """
    Return the NumPy broadcast shape of `sx` and `sy`.

    Raises
    ------
    ValueError
        If the shapes are not broadcast-compatible.
    """
    n = max(len(sx), len(sy))
    px = (1,) * (n - len(sx)) + tuple(sx)
    py = (1,) * (n - len(sy)) + tuple(sy)
    out = []
    for a, b in zip(px, py):
        if a != b and a != 1 and b != 1:
            raise ValueError(f"shapes {tuple(sx)} and {tuple(sy)} do not broadcast")
        out.append(b if a == 1 else a)
    return tuple(out)


def _reduction_axes(shape: Sequence[int], out: Sequence[int]) -> tuple[int, ...]:
    lead = len(out) - len(shape)
    axes = list(range(lead))
    for i, d in enumerate(shape):
        if d == 1 and out[lead + i] != 1:
            axes.append(lead + i)
    return tuple(axes)


def bcast_gradient_args(
    sx: Sequence[int], sy: Sequence[int]
) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """
    Axes to sum a broadcast result's gradient over, for each operand.

    Parameters
    ----------
    sx, sy : Sequence[int]
        Shapes of the two operands of a broadcasting binary operation.

    Returns
    -------
    tuple[tuple[int, ...], tuple[int, ...]]
        ``(rx, ry)``: summing the output gradient over ``rx`` and reshaping
        to ``sx`` yields the gradient of the first operand (likewise for the
        second).

    Examples
    --------
    >>> bcast_gradient_args((2, 3), (3,))
    ((), (0,))
    >>> bcast_gradient_args((2, 1), (1, 3))
    ((1,), (0,))
    """
    out = broadcast_shape(sx, sy)
    return _reduction_axes(sx, out), _reduction_axes(sy, out)


def sum_to_shape(grad, shape: Sequence[int]):
    """
    Reduce a gradient of a broadcast result back to an operand's `shape`.

    The reduction is recorded (``reduce_sum`` followed by ``reshape``) so it
    participates in higher-order differentiation. When no axis was
    broadcast, `grad` is returned as is.
    """
    shape = tuple(shape)
    if grad.shape == shape:
        return grad
    axes = _reduction_axes(shape, grad.shape)
    return grad.reduce_sum(axes).reshape(shape)
