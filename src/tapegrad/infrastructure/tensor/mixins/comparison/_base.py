"""
Comparison mixin.

Comparisons produce boolean tensors and are not differentiable. `select`
uses the receiver as the condition and is differentiable in its two value
branches.

``__eq__`` is deliberately left as identity equality: tensors are used as
dictionary keys and in membership tests.
"""

from typing import Union
from abc import ABC

from .....domain._function import OpKind
from .....domain._tensor import ITensor

Number = Union[int, float]


class TensorMixinComparison(ABC):
    """
    Mixin providing elementwise comparisons and selection.
    """

    def equal(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        return self._apply(OpKind.EQUAL, self, self._colocate(other))

    def greater(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        return self._apply(OpKind.GREATER, self, self._colocate(other))

    def greater_equal(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        return self._apply(OpKind.GREATER_EQUAL, self, self._colocate(other))

    def less(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        return self._apply(OpKind.LESS, self, self._colocate(other))

    def less_equal(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        return self._apply(OpKind.LESS_EQUAL, self, self._colocate(other))

    def __gt__(self, other):
        return self.greater(other)

    def __ge__(self, other):
        return self.greater_equal(other)

    def __lt__(self, other):
        return self.less(other)

    def __le__(self, other):
        return self.less_equal(other)

    def select(
        self: ITensor,
        on_true: Union[ITensor, Number],
        on_false: Union[ITensor, Number],
    ) -> ITensor:
        """
        Elementwise choice between two tensors.

        Parameters
        ----------
        on_true : Union[ITensor, Number]
            Values taken where this (boolean) tensor is true.
        on_false : Union[ITensor, Number]
            Values taken elsewhere.

        Returns
        -------
        ITensor
            Tensor with the broadcast shape of the three operands.

        Notes
        -----
        Backward rule: ``g * cond`` flows to `on_true` and ``g * (1 - cond)``
        to `on_false`. The condition receives no gradient.
        """
        if isinstance(on_true, ITensor):
            t = self._colocate(on_true)
            f = t._colocate(on_false)
        elif isinstance(on_false, ITensor):
            f = self._colocate(on_false)
            t = f._colocate(on_true)
        else:
            # both branches are host values; the condition's bool dtype must
            # not leak into them
            from ..._convert import convert

            t = convert(on_true, device=self.device)
            f = t._colocate(on_false)
        return self._apply(OpKind.SELECT, self, t, f)
