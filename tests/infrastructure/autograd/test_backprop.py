import unittest

import numpy as np
from numpy.testing import assert_allclose

from tapegrad import ArityMismatchError, MultipleOutputsError, OpKind, tensor
from tapegrad.infrastructure.autograd import (
    TapeEntry,
    current_tape_stack,
    imperative_grad,
    prepare_backprop,
)


def _fake_entry(oid, input_ids, output_ids, kind=OpKind.ADD):
    return TapeEntry(
        name=kind.value,
        kind=kind,
        oid=oid,
        input_ids=tuple(input_ids),
        output_ids=tuple(output_ids),
        input_shape_dtypes=tuple(None for _ in input_ids),
        saved_for_backward=(),
    )


class TestPrepareBackprop(unittest.TestCase):
    def test_diamond_counts(self) -> None:
        stack = current_tape_stack()
        with stack.recording() as tape:
            x = tensor(np.float64(0.5))
            stack.watch(x)
            y = x * 2.0
            z = y.exp() + y.square()

        usage, missing, lookup = prepare_backprop(z, tape, {x.id})
        self.assertEqual(len(lookup), 4)
        self.assertEqual(usage[y.id], 2)
        self.assertEqual(usage[x.id], 1)
        self.assertEqual(missing[tape.tensor_to_op[y.id]], 1)

    def test_walk_stops_at_sources(self) -> None:
        stack = current_tape_stack()
        with stack.recording() as tape:
            x = tensor(1.0)
            stack.watch(x)
            y = x.exp()
            stack.watch(y)
            z = y * 3.0

        usage, _, lookup = prepare_backprop(z, tape, {y.id})
        self.assertEqual(len(lookup), 1)
        self.assertNotIn(x.id, usage)

    def test_untracked_target(self) -> None:
        stack = current_tape_stack()
        with stack.recording() as tape:
            z = tensor(1.0) * 2.0
        usage, missing, lookup = prepare_backprop(z, tape, set())
        self.assertEqual((len(usage), len(missing), len(lookup)), (0, 0, 0))


class TestImperativeGrad(unittest.TestCase):
    def test_diamond_gradient(self) -> None:
        stack = current_tape_stack()
        with stack.recording() as tape:
            x = tensor(np.float64(0.5))
            stack.watch(x)
            y = x * 2.0
            z = y.exp() + y.square()
        (g,) = imperative_grad(z, [x], tape)
        assert_allclose(float(g), 2 * np.e + 4.0)

    def test_fan_in(self) -> None:
        stack = current_tape_stack()
        with stack.recording() as tape:
            x = tensor(np.float64(3.0))
            stack.watch(x)
            z = x + x + x * x
        (g,) = imperative_grad(z, [x], tape)
        self.assertAlmostEqual(float(g), 8.0)

    def test_target_is_source(self) -> None:
        stack = current_tape_stack()
        with stack.recording() as tape:
            x = tensor([1.0, 2.0])
            stack.watch(x)
        (g,) = imperative_grad(x, [x], tape)
        assert_allclose(g.to_numpy(), [1.0, 1.0])

    def test_multiple_outputs_rejected(self) -> None:
        stack = current_tape_stack()
        with stack.recording() as tape:
            x = tensor(1.0)
            stack.watch(x)
        target = tensor(2.0)
        tape.record_op(_fake_entry(1, [x.id, x.id], [target.id, 999]))
        with self.assertRaises(MultipleOutputsError):
            imperative_grad(target, [x], tape)

    def test_backward_arity_checked(self) -> None:
        stack = current_tape_stack()
        with stack.recording() as tape:
            x = tensor(1.0)
            stack.watch(x)
        target = tensor(2.0)
        tape.record_op(_fake_entry(1, [x.id, x.id, x.id], [target.id]))
        with self.assertRaises(ArityMismatchError) as cm:
            imperative_grad(target, [x], tape)
        self.assertEqual((cm.exception.expected, cm.exception.got), (3, 2))


if __name__ == "__main__":
    unittest.main()
