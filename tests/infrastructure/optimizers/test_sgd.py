import unittest

import numpy as np
from numpy.testing import assert_allclose

from tapegrad import OptimizerSGD, Params, tensor


def _square_loss(p):
    return p.get("p").square().reduce_sum()


class TestOptimizerSGD(unittest.TestCase):
    def _optimizer(self, value=1.0) -> OptimizerSGD:
        params = Params()
        params.set("p", np.array([value]))
        return OptimizerSGD(params)

    def test_plain_sgd_step(self) -> None:
        opt = self._optimizer()
        p = opt.params.get("p")
        pid = p.id
        loss = opt.step(0.1, 0.0, _square_loss)
        self.assertAlmostEqual(loss, 1.0)
        assert_allclose(opt.params.get("p").to_numpy(), [0.8])
        self.assertEqual(opt.params.get("p").id, pid)
        self.assertEqual(opt.steps, 1)

    def test_momentum(self) -> None:
        opt = self._optimizer()
        opt.step(0.1, 0.5, _square_loss)
        assert_allclose(opt.params.get("p").to_numpy(), [0.9])
        assert_allclose(opt.velocity.get("p").to_numpy(), [-1.0])
        opt.step(0.1, 0.5, _square_loss)
        # v = 0.5 * -1.0 - 0.5 * 1.8 = -1.4
        assert_allclose(opt.velocity.get("p").to_numpy(), [-1.4])
        assert_allclose(opt.params.get("p").to_numpy(), [0.76])

    def test_argument_validation(self) -> None:
        opt = self._optimizer()
        with self.assertRaises(ValueError):
            opt.step(0.0, 0.0, _square_loss)
        with self.assertRaises(ValueError):
            opt.step(0.1, 1.0, _square_loss)
        with self.assertRaises(ValueError):
            opt.step(0.1, -0.1, _square_loss)

    def test_non_scalar_loss_rejected(self) -> None:
        opt = self._optimizer()
        opt.params.set("q", np.array([1.0, 2.0]))
        with self.assertRaises(ValueError):
            opt.step(0.1, 0.0, lambda p: p.get("q").square())

    def test_float32_params_stay_float32(self) -> None:
        params = Params()
        params.set("p", [1.0, -1.0])
        opt = OptimizerSGD(params)
        opt.step(0.1, 0.9, _square_loss)
        self.assertEqual(opt.params.get("p").dtype, np.float32)
        self.assertEqual(opt.velocity.get("p").dtype, np.float32)

    def test_linear_regression_converges(self) -> None:
        rng = np.random.default_rng(0)
        x = tensor(rng.standard_normal((64, 3)))
        true_w = np.array([[2.0], [-3.0], [0.5]])
        y = tensor(x.to_numpy() @ true_w + 1.0)

        def loss(p):
            w = p.zeros("w", (3, 1), dtype=np.float64)
            b = p.zeros("b", (1,), dtype=np.float64)
            err = x.matmul(w) + b - y
            return err.square().reduce_mean()

        opt = OptimizerSGD()
        first = opt.step(0.1, 0.5, loss)
        for _ in range(300):
            last = opt.step(0.1, 0.5, loss)
        self.assertLess(last, first * 1e-4)
        assert_allclose(opt.params.get("w").to_numpy(), true_w, atol=1e-2)
        assert_allclose(opt.params.get("b").to_numpy(), [1.0], atol=1e-2)

    def test_repr(self) -> None:
        self.assertEqual(repr(OptimizerSGD()), "OptimizerSGD(params=0, steps=0)")


if __name__ == "__main__":
    unittest.main()
