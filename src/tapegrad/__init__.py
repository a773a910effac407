"""
tapegrad: tape-based reverse-mode automatic differentiation over tensors.

Every operation on a `Tensor` records itself on the active gradient tapes,
so arbitrary Python control flow can be differentiated, and gradient
transforms nest for higher-order derivatives:

>>> import tapegrad as tg
>>> f = lambda x: x.tanh()
>>> round(float(tg.grad(f)(1.0)), 4)
0.42
>>> round(float(tg.grad(tg.grad(f))(1.0)), 4)
-0.6397
"""

from ._config import DEBUG, DEFAULT_DTYPE, configure_logging
from .domain import (
    ArityMismatchError,
    Device,
    DeviceMismatchError,
    DeviceNotSupportedError,
    MultipleOutputsError,
    OpKind,
    OpRegistrationError,
    SavedTensorError,
    TapeStackError,
    TapeStackUnderflowError,
)
from .infrastructure.backend import (
    BasicTensor,
    NumpyBackend,
    get_backend,
    list_devices,
    register_backend,
    unregister_backend,
)
from .infrastructure.tensor import (
    Tensor,
    arange,
    convert,
    eye,
    fill,
    linspace,
    ones,
    randn,
    tensor,
    zeros,
)
from .infrastructure.ops import apply_op
from .infrastructure.autograd import (
    grad,
    grad_and_val,
    grad_params,
    multigrad,
    multigrad_and_val,
)
from .infrastructure.params import Params
from .infrastructure.optimizers import OptimizerSGD

T = tensor

configure_logging(DEBUG)

__version__ = "0.1.0a0"

__all__ = [
    "DEFAULT_DTYPE",
    "T",
    ArityMismatchError.__name__,
    BasicTensor.__name__,
    Device.__name__,
    DeviceMismatchError.__name__,
    DeviceNotSupportedError.__name__,
    MultipleOutputsError.__name__,
    NumpyBackend.__name__,
    OpKind.__name__,
    OpRegistrationError.__name__,
    OptimizerSGD.__name__,
    Params.__name__,
    SavedTensorError.__name__,
    TapeStackError.__name__,
    TapeStackUnderflowError.__name__,
    Tensor.__name__,
    apply_op.__name__,
    arange.__name__,
    convert.__name__,
    eye.__name__,
    fill.__name__,
    get_backend.__name__,
    grad.__name__,
    grad_and_val.__name__,
    grad_params.__name__,
    linspace.__name__,
    list_devices.__name__,
    multigrad.__name__,
    multigrad_and_val.__name__,
    ones.__name__,
    randn.__name__,
    register_backend.__name__,
    tensor.__name__,
    unregister_backend.__name__,
    zeros.__name__,
]
