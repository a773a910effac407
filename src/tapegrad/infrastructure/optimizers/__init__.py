"""
Gradient-based optimizers updating a `Params` collection in place.
"""

from ._sgd import OptimizerSGD

__all__ = [
    OptimizerSGD.__name__,
]
