"""
Tensor method mixins.

Each subpackage contributes one family of `Tensor` methods. Every method
coerces its operands and forwards to ``self._apply(OpKind.<KIND>, ...)``,
so all numeric work and tape recording happen in the operation layer.
"""
