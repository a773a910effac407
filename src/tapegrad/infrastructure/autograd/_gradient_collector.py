from __future__ import annotations

import logging
from functools import reduce
from typing import Optional

from ..tensor._convert import convert
from ..tensor._identity import short_id
from ..tensor._tensor import Tensor

logger = logging.getLogger(__name__)


class GradientCollector:
    """
    Accumulates gradient contributions per tensor id.

    Contributions are stored unsummed and added together only when a
    gradient is requested, using recorded `Tensor.add` so that the summation
    itself is visible to enclosing tapes.
    """

    def __init__(self) -> None:
        self._grads: dict[int, list[Tensor]] = {}

    def __contains__(self, tensor_id: int) -> bool:
        return tensor_id in self._grads

    def append(self, tensor_id: int, grad: Tensor) -> None:
        self._grads.setdefault(tensor_id, []).append(grad)

    def aggregate(self, tensor_id: int, like: Optional[Tensor] = None) -> Tensor:
        """
        Return the sum of the contributions for `tensor_id`.

        Parameters
        ----------
        tensor_id : int
            Tensor whose gradient is requested.
        like : Tensor, optional
            Used when there are no contributions: the result is then zeros
            with `like`'s shape, dtype and device. Without it, a scalar zero
            is returned.

        Returns
        -------
        Tensor
            The aggregated gradient.
        """
        grads = self._grads.get(tensor_id)
        if not grads:
            logger.debug("no gradient for %s, using zeros", short_id(tensor_id))
            return like.zeros_like() if like is not None else convert(0.0)
        return reduce(lambda a, b: a.add(b), grads)
