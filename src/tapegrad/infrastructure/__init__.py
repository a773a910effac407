"""
Concrete implementations behind the `tapegrad.domain` interfaces.

- ``backend``: basic tensors, the NumPy kernels and the device registry
- ``tensor``: the differentiable `Tensor`, conversion and factories
- ``ops``: one registered `Function` per operation kind, and `apply_op`
- ``autograd``: tapes, the backward pass and the gradient transforms
- ``params`` / ``optimizers``: named parameters and SGD
"""
