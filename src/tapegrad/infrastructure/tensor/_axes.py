from typing import Optional, Sequence, Union

AxesLike = Optional[Union[int, Sequence[int]]]


def normalize_axes(axes: AxesLike, rank: int) -> Optional[tuple[int, ...]]:
    """
    Normalize an axis argument to a sorted tuple of non-negative axes.

    Parameters
    ----------
    axes : AxesLike
        ``None`` (meaning every axis), a single int, or a sequence of ints.
        Negative values count from the end.
    rank : int
        Rank of the tensor the axes refer to.

    Returns
    -------
    Optional[tuple[int, ...]]
        ``None`` if `axes` is ``None``, otherwise the normalized tuple.

    Raises
    ------
    ValueError
        If an axis is out of range or repeated.
    """
    if axes is None:
        return None
    if isinstance(axes, int):
        axes = (axes,)
    out = []
    for a in axes:
        a = int(a)
        if not -rank <= a < rank:
            raise ValueError(f"axis {a} is out of range for rank {rank}")
        out.append(a % rank)
    if len(set(out)) != len(out):
        raise ValueError(f"repeated axis in {tuple(axes)}")
    return tuple(sorted(out))


def normalize_shape(shape) -> tuple[int, ...]:
    """
    Accept ``(2, 3)``, ``[2, 3]`` or a bare int and return a tuple of ints.
    """
    if isinstance(shape, int):
        return (shape,)
    return tuple(int(d) for d in shape)
