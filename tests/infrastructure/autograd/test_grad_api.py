import unittest

import numpy as np
from numpy.testing import assert_allclose

from tapegrad import (
    Params,
    grad,
    grad_and_val,
    grad_params,
    multigrad,
    multigrad_and_val,
    tensor,
)
from tapegrad.infrastructure.autograd import current_tape_stack


class TestGrad(unittest.TestCase):
    def test_basic_derivatives(self) -> None:
        self.assertAlmostEqual(float(grad(lambda x: x * x)(3.0)), 6.0)
        self.assertAlmostEqual(float(grad(lambda x: x + 1)(3.0)), 1.0)
        self.assertAlmostEqual(float(grad(lambda x: x.exp())(0.0)), 1.0)
        self.assertAlmostEqual(float(grad(lambda x: x.tanh())(1.0)), 0.4199743, places=5)

    def test_constant_function_gives_zero(self) -> None:
        g = grad(lambda x: tensor(5.0))(np.array([1.0, 2.0]))
        self.assertEqual(g.shape, (2,))
        assert_allclose(g.to_numpy(), [0.0, 0.0])

    def test_division(self) -> None:
        self.assertAlmostEqual(float(grad(lambda x: x / 2.0)(3.0)), 0.5)
        self.assertAlmostEqual(float(grad(lambda x: 2.0 / x)(4.0)), -0.125)
        self.assertAlmostEqual(float(grad(lambda x: x / x)(4.0)), 0.0)

    def test_gradient_keeps_argument_shape(self) -> None:
        g = grad(lambda x: x * x)(np.array([[1.0, 2.0], [3.0, 4.0]]))
        self.assertEqual(g.shape, (2, 2))
        assert_allclose(g.to_numpy(), [[2.0, 4.0], [6.0, 8.0]])

    def test_argnum_selects_argument(self) -> None:
        f = lambda a, b: a * b * b
        self.assertAlmostEqual(float(grad(f, argnum=1)(2.0, 3.0)), 12.0)
        self.assertAlmostEqual(float(grad(f, argnum=-2)(2.0, 3.0)), 9.0)

    def test_keyword_arguments_pass_through(self) -> None:
        f = lambda x, scale=1.0: x * scale
        self.assertAlmostEqual(float(grad(f)(1.0, scale=4.0)), 4.0)

    def test_unused_argument_gets_zeros_like(self) -> None:
        g = grad(lambda a, b: a * 2.0, argnum=1)(1.0, np.ones((2, 3)))
        self.assertEqual(g.shape, (2, 3))
        self.assertEqual(g.dtype, np.float64)
        assert_allclose(g.to_numpy(), np.zeros((2, 3)))

    def test_control_flow(self) -> None:
        def f(x):
            y = x
            for _ in range(3):
                y = y * x if float(y.reduce_sum()) < 100 else y
            return y

        self.assertAlmostEqual(float(grad(f)(2.0)), 32.0)

    def test_preserves_function_metadata(self) -> None:
        def my_loss(x):
            """Doc."""
            return x

        g = grad(my_loss)
        self.assertEqual(g.__name__, "my_loss")
        self.assertEqual(g.__doc__, "Doc.")

    def test_stack_is_empty_after_call(self) -> None:
        grad(lambda x: x * x)(1.0)
        self.assertFalse(current_tape_stack().active)

    def test_stack_is_empty_after_exception(self) -> None:
        def boom(x):
            raise ZeroDivisionError

        with self.assertRaises(ZeroDivisionError):
            grad(boom)(1.0)
        self.assertFalse(current_tape_stack().active)


class TestFiniteDifferences(unittest.TestCase):
    EPS = 0.01

    def test_scalar_functions(self) -> None:
        functions = {
            "cubic": lambda x: x * x * x - x * 2.0,
            "tanh_exp": lambda x: x.tanh() * x.exp(),
            "log1p_square": lambda x: (x.square() + 1.0).log(),
            "sigmoid_ratio": lambda x: x.sigmoid() / (x.square() + 1.0),
            "shifted_inverse": lambda x: 2.0 / (x + 3.0),
            "relu_mix": lambda x: (x * 3.0).relu() + x.cosh(),
        }
        for name, f in functions.items():
            for x in (-1.5, -0.7, 0.3, 1.2, 2.0):
                with self.subTest(f=name, x=x):
                    numeric = (
                        float(f(tensor(x + self.EPS))) - float(f(tensor(x - self.EPS)))
                    ) / (2 * self.EPS)
                    self.assertAlmostEqual(float(grad(f)(x)), numeric, delta=0.01)


class TestHigherOrder(unittest.TestCase):
    def test_second_derivative_of_tanh(self) -> None:
        x = np.array([0.0, 0.5, 1.0])
        g2 = grad(grad(lambda t: t.tanh()))(x)
        t = np.tanh(x)
        assert_allclose(g2.to_numpy(), -2 * t * (1 - t * t), rtol=1e-6)

    def test_third_derivative_of_cube(self) -> None:
        f = lambda x: x * x * x
        self.assertAlmostEqual(float(grad(grad(f))(2.0)), 12.0, places=4)
        self.assertAlmostEqual(float(grad(grad(grad(f)))(2.0)), 6.0, places=4)

    def test_second_derivative_of_sigmoid(self) -> None:
        x = np.array([0.3])
        s = 1 / (1 + np.exp(-x))
        g2 = grad(grad(lambda t: t.sigmoid()))(x)
        assert_allclose(g2.to_numpy(), s * (1 - s) * (1 - 2 * s), rtol=1e-6)

    def test_mixed_partial(self) -> None:
        f = lambda a, b: a * a * b
        d_da = lambda a, b: grad(f, argnum=0)(a, b)
        self.assertAlmostEqual(float(grad(d_da, argnum=1)(3.0, 5.0)), 6.0)


class TestMultigrad(unittest.TestCase):
    def test_linear_combination(self) -> None:
        ga, gb = multigrad(lambda a, b: a * 2 + b * 3)(1.0, 1.0)
        self.assertAlmostEqual(float(ga), 2.0)
        self.assertAlmostEqual(float(gb), 3.0)

    def test_argnums_order(self) -> None:
        grads = multigrad(lambda a, b, c: a + b * 2 + c * 3, argnums=[2, 0])(
            1.0, 1.0, 1.0
        )
        self.assertEqual([float(g) for g in grads], [3.0, 1.0])

    def test_argnums_out_of_range(self) -> None:
        with self.assertRaises(ValueError):
            multigrad(lambda a: a, argnums=[1])(1.0)
        with self.assertRaises(ValueError):
            grad(lambda a: a, argnum=-2)(1.0)

    def test_values_returned(self) -> None:
        grads, val = multigrad_and_val(lambda a, b: a * b)(2.0, 5.0)
        self.assertAlmostEqual(float(val), 10.0)
        self.assertEqual([float(g) for g in grads], [5.0, 2.0])

        g, v = grad_and_val(lambda x: x.square())(3.0)
        self.assertAlmostEqual(float(g), 6.0)
        self.assertAlmostEqual(float(v), 9.0)

    def test_non_scalar_target_uses_sum(self) -> None:
        g = grad(lambda x: x.reshape((2, 2)).matmul(tensor(np.eye(2))))(
            np.arange(4.0)
        )
        assert_allclose(g.to_numpy(), np.ones(4))


class TestGradParams(unittest.TestCase):
    def test_existing_params(self) -> None:
        params = Params()
        params.set("w", np.array([1.0, 2.0]))
        params.set("b", np.array(0.5))

        def loss(p):
            return (p.get("w") * 3.0).reduce_sum() + p.get("b").square()

        grads, value = grad_params(loss)(params)
        self.assertEqual(set(grads), {"w", "b"})
        assert_allclose(grads["w"].to_numpy(), [3.0, 3.0])
        self.assertAlmostEqual(float(grads["b"]), 1.0)
        self.assertAlmostEqual(float(value), 9.25)

    def test_lazily_created_params_receive_gradients(self) -> None:
        params = Params()

        def loss(p):
            w = p.zeros("w", (3,), dtype=np.float64)
            return (w - 1.0).square().reduce_sum()

        grads, value = grad_params(loss)(params)
        self.assertIn("w", params)
        assert_allclose(grads["w"].to_numpy(), [-2.0, -2.0, -2.0])
        self.assertAlmostEqual(float(value), 3.0)

    def test_names_restrict_sources(self) -> None:
        params = Params()
        params.set("a", np.array(2.0))
        params.set("b", np.array(3.0))
        grads, _ = grad_params(lambda p: p.get("a") * p.get("b"), names=["b"])(params)
        self.assertEqual(list(grads), ["b"])
        self.assertAlmostEqual(float(grads["b"]), 2.0)


if __name__ == "__main__":
    unittest.main()
