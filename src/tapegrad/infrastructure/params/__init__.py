from ._params import Params, ScopedParams

__all__ = [
    Params.__name__,
    ScopedParams.__name__,
]
