import unittest

import numpy as np
from numpy.testing import assert_array_equal

from tapegrad import tensor
from tapegrad.infrastructure.autograd import GradientCollector


class TestGradientCollector(unittest.TestCase):
    def test_aggregate_sums_contributions(self) -> None:
        c = GradientCollector()
        c.append(1, tensor([1.0, 2.0]))
        c.append(1, tensor([10.0, 20.0]))
        c.append(1, tensor([100.0, 200.0]))
        self.assertIn(1, c)
        assert_array_equal(c.aggregate(1).to_numpy(), [111.0, 222.0])

    def test_single_contribution_is_returned_as_is(self) -> None:
        c = GradientCollector()
        g = tensor([1.0])
        c.append(7, g)
        self.assertIs(c.aggregate(7), g)

    def test_missing_uses_zeros_like(self) -> None:
        c = GradientCollector()
        like = tensor(np.ones((2, 3), dtype=np.float64))
        z = c.aggregate(42, like=like)
        self.assertNotIn(42, c)
        self.assertEqual(z.shape, (2, 3))
        self.assertEqual(z.dtype, np.float64)
        assert_array_equal(z.to_numpy(), np.zeros((2, 3)))

    def test_missing_without_like_is_scalar_zero(self) -> None:
        z = GradientCollector().aggregate(42)
        self.assertEqual(z.shape, ())
        self.assertEqual(float(z), 0.0)


if __name__ == "__main__":
    unittest.main()
