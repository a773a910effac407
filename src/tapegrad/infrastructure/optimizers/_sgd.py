"""
Stochastic gradient descent with momentum.

Update rule
-----------
For each parameter ``p`` with gradient ``g`` and velocity ``v`` (initially
zero):

- ``v <- momentum * v - (1 - momentum) * g``
- ``p <- p + learning_rate * v``

With ``momentum == 0`` this is plain SGD, ``p <- p - learning_rate * g``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..autograd._api import grad_params
from ..params._params import Params

logger = logging.getLogger(__name__)

LossFn = Callable[[Params], Any]


class OptimizerSGD:
    """
    SGD optimizer over a `Params` collection.

    Parameters
    ----------
    params : Params, optional
        Parameters to optimize. A new empty collection is created when
        omitted; loss functions may then create parameters lazily.

    Attributes
    ----------
    params : Params
        The optimized parameters, updated in place by `step`.
    velocity : Params
        Per-parameter momentum buffers, keyed like `params`.
    steps : int
        Number of completed steps.
    """

    def __init__(self, params: Optional[Params] = None) -> None:
        self.params = params if params is not None else Params()
        self.velocity = Params()
        self.steps = 0

    def __repr__(self) -> str:
        return f"OptimizerSGD(params={len(self.params)}, steps={self.steps})"

    def step(self, learning_rate: float, momentum: float, loss_fn: LossFn) -> float:
        """
        Run one forward/backward pass of `loss_fn` and update the parameters.

        Parameters
        ----------
        learning_rate : float
            Step size. Must be > 0.
        momentum : float
            Momentum coefficient in ``[0, 1)``.
        loss_fn : Callable[[Params], Any]
            Function computing a scalar loss from the parameters.

        Returns
        -------
        float
            The loss evaluated before the update.

        Raises
        ------
        ValueError
            If `learning_rate` or `momentum` is out of range, or the loss is
            not a scalar.
        """
        if learning_rate <= 0.0:
            raise ValueError(f"learning_rate must be > 0, got {learning_rate}")
        if not 0.0 <= momentum < 1.0:
            raise ValueError(f"momentum must be in [0, 1), got {momentum}")

        grads, loss = grad_params(loss_fn)(self.params)
        if loss.size != 1:
            raise ValueError(f"loss must be a scalar, got shape={loss.shape}")

        for name, g in grads.items():
            p = self.params.get(name)
            v = self.velocity.zeros(name, p.shape, dtype=p.dtype, device=p.device)
            v_new = v.mul(momentum).sub(g.mul(1.0 - momentum))
            updated = p.add(v_new.mul(learning_rate))
            if updated.dtype != p.dtype:
                updated = updated.cast(p.dtype)
                v_new = v_new.cast(p.dtype)
            v.assign(v_new)
            p.assign(updated)

        self.steps += 1
        value = float(loss)
        logger.debug("sgd step %d loss=%g", self.steps, value)
        return value
