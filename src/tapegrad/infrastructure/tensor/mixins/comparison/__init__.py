from ._base import TensorMixinComparison

__all__ = [
    TensorMixinComparison.__name__,
]
