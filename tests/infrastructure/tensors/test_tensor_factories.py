import unittest

import numpy as np
from numpy.testing import assert_allclose, assert_array_equal

from tapegrad import DEFAULT_DTYPE, arange, eye, fill, linspace, ones, randn, tensor, zeros


class TestFactories(unittest.TestCase):
    def test_zeros_and_ones(self) -> None:
        z = zeros((2, 3))
        self.assertEqual(z.shape, (2, 3))
        self.assertEqual(z.dtype, DEFAULT_DTYPE)
        assert_array_equal(z.to_numpy(), np.zeros((2, 3)))
        o = ones(4, dtype=np.float64)
        self.assertEqual(o.dtype, np.float64)
        assert_array_equal(o.to_numpy(), np.ones(4))

    def test_randn_shape(self) -> None:
        r = randn((5, 2))
        self.assertEqual(r.shape, (5, 2))
        self.assertEqual(r.dtype, DEFAULT_DTYPE)

    def test_eye(self) -> None:
        assert_array_equal(eye(3).to_numpy(), np.eye(3))

    def test_linspace(self) -> None:
        assert_allclose(linspace(0.0, 1.0, 5).to_numpy(), [0, 0.25, 0.5, 0.75, 1.0])

    def test_arange_dtype(self) -> None:
        a = arange(4)
        self.assertEqual(a.dtype, np.int32)
        assert_array_equal(a.to_numpy(), [0, 1, 2, 3])
        b = arange(0.0, 1.0, 0.5)
        self.assertEqual(b.dtype, DEFAULT_DTYPE)
        assert_allclose(b.to_numpy(), [0.0, 0.5])

    def test_fill(self) -> None:
        f = fill(2.0, (2, 2))
        assert_array_equal(f.to_numpy(), np.full((2, 2), 2.0))
        self.assertEqual(f.dtype, DEFAULT_DTYPE)

    def test_fill_keeps_tensor_dtype(self) -> None:
        f = fill(tensor(np.float64(3.0)), 3)
        self.assertEqual(f.dtype, np.float64)

    def test_fill_rejects_non_scalar(self) -> None:
        with self.assertRaises(ValueError):
            fill([1.0, 2.0], (2,))


if __name__ == "__main__":
    unittest.main()
