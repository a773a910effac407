import unittest

import numpy as np
from numpy.testing import assert_array_equal

from tapegrad import multigrad, tensor
from tapegrad.infrastructure.ops import bcast_gradient_args, broadcast_shape, sum_to_shape


class TestBroadcastShape(unittest.TestCase):
    def test_shapes(self) -> None:
        self.assertEqual(broadcast_shape((2, 3), (3,)), (2, 3))
        self.assertEqual(broadcast_shape((2, 1), (1, 3)), (2, 3))
        self.assertEqual(broadcast_shape((), (4, 5)), (4, 5))
        self.assertEqual(broadcast_shape((5, 1, 4), (3, 1)), (5, 3, 4))

    def test_incompatible(self) -> None:
        with self.assertRaises(ValueError):
            broadcast_shape((2, 3), (4,))


class TestBcastGradientArgs(unittest.TestCase):
    def test_same_shape_needs_no_reduction(self) -> None:
        self.assertEqual(bcast_gradient_args((2, 3), (2, 3)), ((), ()))

    def test_leading_and_unit_axes(self) -> None:
        self.assertEqual(bcast_gradient_args((2, 3), (3,)), ((), (0,)))
        self.assertEqual(bcast_gradient_args((2, 1), (1, 3)), ((1,), (0,)))
        self.assertEqual(bcast_gradient_args((), (2, 2)), ((0, 1), ()))
        self.assertEqual(bcast_gradient_args((4, 1, 5), (3, 1)), ((1,), (0, 2)))

    def test_binary_op_gradients_reduce_broadcast_axes(self) -> None:
        x = np.ones((2, 1))
        y = np.array([[1.0, 2.0, 3.0]])
        gx, gy = multigrad(lambda a, b: a * b)(x, y)
        self.assertEqual(gx.shape, (2, 1))
        self.assertEqual(gy.shape, (1, 3))
        assert_array_equal(gx.to_numpy(), [[6.0], [6.0]])
        assert_array_equal(gy.to_numpy(), [[2.0, 2.0, 2.0]])

        gs, gv = multigrad(lambda a, b: a - b)(np.float64(1.0), np.ones((2, 3)))
        self.assertEqual(gs.shape, ())
        self.assertEqual(float(gs), 6.0)
        assert_array_equal(gv.to_numpy(), -np.ones((2, 3)))


class TestSumToShape(unittest.TestCase):
    def test_identity_when_shapes_match(self) -> None:
        g = tensor([[1.0, 2.0]])
        self.assertIs(sum_to_shape(g, (1, 2)), g)

    def test_reduces_broadcast_axes(self) -> None:
        g = tensor([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        assert_array_equal(sum_to_shape(g, (3,)).to_numpy(), [5.0, 7.0, 9.0])
        assert_array_equal(sum_to_shape(g, (2, 1)).to_numpy(), [[6.0], [15.0]])
        self.assertEqual(sum_to_shape(g, ()).shape, ())
        self.assertEqual(float(sum_to_shape(g, ())), 21.0)


if __name__ == "__main__":
    unittest.main()
