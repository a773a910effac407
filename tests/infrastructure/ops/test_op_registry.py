import unittest

from tapegrad import OpKind, apply_op, tensor
from tapegrad.domain import ArityMismatchError, Function, MultipleOutputsError, OpRegistrationError
from tapegrad.infrastructure.ops import OpRegistry, op_registry


class TestOpRegistryCompleteness(unittest.TestCase):
    def test_every_kind_registered(self) -> None:
        op_registry.check_complete()
        self.assertEqual(len(op_registry), len(OpKind))
        for kind in OpKind:
            with self.subTest(kind=kind.value):
                fn = op_registry.lookup(kind)
                self.assertIs(fn.kind, kind)
                self.assertEqual(len(fn.backward_fns), fn.arity)

    def test_empty_registry_is_incomplete(self) -> None:
        with self.assertRaises(OpRegistrationError):
            OpRegistry().check_complete()

    def test_lookup_missing(self) -> None:
        with self.assertRaises(OpRegistrationError):
            OpRegistry().lookup(OpKind.ADD)


class TestOpRegistration(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = OpRegistry()

    def test_register_and_unregister(self) -> None:
        class Neg(Function):
            kind = OpKind.NEG
            arity = 1
            backward_fns = (None,)

            @staticmethod
            def forward(ctx, x):
                return ctx.backend.neg(x)

        self.registry.register(Neg)
        self.assertIn(OpKind.NEG, self.registry)
        self.assertIs(self.registry.lookup(OpKind.NEG), Neg)
        self.registry.unregister(OpKind.NEG)
        self.assertNotIn(OpKind.NEG, self.registry)

    def test_duplicate_kind_rejected(self) -> None:
        self.registry.register(op_registry.lookup(OpKind.ADD))
        with self.assertRaises(OpRegistrationError):
            self.registry.register(op_registry.lookup(OpKind.ADD))

    def test_wrong_backward_count_rejected(self) -> None:
        class BadAdd(Function):
            kind = OpKind.ADD
            arity = 2
            backward_fns = (None,)

            @staticmethod
            def forward(ctx, x, y):
                return ctx.backend.add(x, y)

        with self.assertRaises(ArityMismatchError) as cm:
            self.registry.register(BadAdd)
        self.assertEqual((cm.exception.expected, cm.exception.got), (2, 1))

    def test_non_function_rejected(self) -> None:
        class NotAFunction:
            kind = OpKind.ADD

        with self.assertRaises(OpRegistrationError):
            self.registry.register(NotAFunction)  # type: ignore[arg-type]

    def test_missing_kind_rejected(self) -> None:
        class NoKind(Function):
            arity = 0

            @staticmethod
            def forward(ctx):
                return None

        with self.assertRaises(OpRegistrationError):
            self.registry.register(NoKind)


class TestApplyOpContract(unittest.TestCase):
    def test_wrong_number_of_inputs(self) -> None:
        x = tensor([1.0])
        with self.assertRaises(ArityMismatchError) as cm:
            apply_op(OpKind.ADD, x)
        self.assertEqual(cm.exception.op, "add")
        self.assertEqual((cm.exception.expected, cm.exception.got), (2, 1))

    def test_multiple_outputs_rejected(self) -> None:
        original = op_registry.lookup(OpKind.NEG)

        class SplitNeg(Function):
            kind = OpKind.NEG
            arity = 1
            backward_fns = (None,)

            @staticmethod
            def forward(ctx, x):
                return ctx.backend.neg(x), ctx.backend.neg(x)

        op_registry.unregister(OpKind.NEG)
        op_registry.register(SplitNeg)
        try:
            with self.assertRaises(MultipleOutputsError) as cm:
                tensor([1.0]).neg()
            self.assertEqual(cm.exception.n_outputs, 2)
        finally:
            op_registry.unregister(OpKind.NEG)
            op_registry.register(original)
        self.assertIs(op_registry.lookup(OpKind.NEG), original)


if __name__ == "__main__":
    unittest.main()
