"""
Device-, dispatch- and tape-related exceptions for tapegrad.

This module defines the custom runtime errors raised by the autograd core.
Every error here signals a programming error (a mis-registered operation, a
broken push/pop pairing, an unsupported device) rather than a recoverable
condition, so none of them are caught anywhere inside the library.

Two situations are deliberately *not* errors:

- an input position without a backward function (the input is treated as
  non-differentiable and receives a zero gradient), and
- a requested source with no path to the target (it receives zeros shaped
  like the source).
"""


class DeviceNotSupportedError(RuntimeError):
    """
    Raised when an operation is requested on a device that has no registered
    backend.

    Attributes
    ----------
    op : str
        The name of the operation that was attempted (e.g., "add", "mul").
    device : str
        String representation of the device on which the operation
        was attempted.
    """

    def __init__(self, op: str, device: str) -> None:
        """
        Initialize the DeviceNotSupportedError.

        Parameters
        ----------
        op : str
            The operation name that is not supported on the given device.
        device : str
            The device identifier (e.g., "cuda:0").
        """
        super().__init__(f"{op} is not implemented for device '{device}'.")
        self.op = op
        self.device = device


class DeviceMismatchError(RuntimeError):
    """
    Raised when an operation is attempted between tensors on different devices.

    Tensors are never copied implicitly; callers must move operands with
    ``Tensor.to`` before combining them.
    """

    def __init__(self, device_a: str, device_b: str) -> None:
        """
        Initialize the DeviceMismatchError.

        Parameters
        ----------
        device_a : str
            Device identifier of the first operand.
        device_b : str
            Device identifier of the second operand.
        """
        super().__init__(f"Device mismatch: '{device_a}' vs '{device_b}'.")
        self.device_a = device_a
        self.device_b = device_b


class ArityMismatchError(RuntimeError):
    """
    Raised when an operation's backward-function list disagrees with the
    number of positional inputs of its forward call.

    This is raised both when a `Function` is registered with a backward list
    whose length differs from its declared arity, and when an operation is
    invoked with the wrong number of positional inputs.
    """

    def __init__(self, op: str, expected: int, got: int) -> None:
        super().__init__(
            f"{op}: expected {expected} positional input(s) / backward "
            f"function(s), got {got}."
        )
        self.op = op
        self.expected = expected
        self.got = got


class MultipleOutputsError(RuntimeError):
    """
    Raised when a recorded operation does not have exactly one output.

    The backward scheduler only supports single-output operations. Producing
    or replaying an entry with any other number of outputs fails immediately
    instead of computing a silently wrong gradient.
    """

    def __init__(self, op: str, n_outputs: int) -> None:
        super().__init__(
            f"{op} produced {n_outputs} outputs; only single-output "
            "operations can be differentiated."
        )
        self.op = op
        self.n_outputs = n_outputs


class OpRegistrationError(RuntimeError):
    """
    Raised when the operation registry is inconsistent: an operation kind has
    no implementation, or a kind is registered more than once.
    """


class SavedTensorError(RuntimeError):
    """
    Raised when a backend tensor saved for backward during a forward pass
    cannot be matched to any input or output tensor of that operation.
    """

    def __init__(self, op: str) -> None:
        super().__init__(
            f"{op} saved a backend tensor for backward that is neither an "
            "input nor the output of the operation."
        )
        self.op = op


class TapeStackError(RuntimeError):
    """
    Raised when tape push/pop calls are not strictly LIFO.

    A mismatched pop means an unrelated differentiation session would have
    consumed the wrong tape.
    """


class TapeStackUnderflowError(TapeStackError):
    """
    Raised when a tape is popped from an empty tape stack.
    """

    def __init__(self) -> None:
        super().__init__("Cannot pop a tape: the tape stack is empty.")
