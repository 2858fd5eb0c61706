import math
import unittest

import numpy as np

from grapher import compile, evaluate_array, sample_curve, sample_derivative, sample_surface
from grapher.errors import InsufficientOperands, UnknownFunction


class TestSampleCurve(unittest.TestCase):

    def test_sin(self):
        xs, ys = sample_curve(compile("sin(x)"), (-math.pi, math.pi), 101)
        self.assertEqual(xs.shape, (101,))
        np.testing.assert_allclose(ys, np.sin(xs), atol=1e-12)

    def test_undefined_column_is_nan(self):
        xs, ys = sample_curve(compile("1/x"), (-1.0, 1.0), 5)
        self.assertEqual(xs[2], 0.0)
        self.assertTrue(np.isnan(ys[2]))
        self.assertEqual(int(np.isnan(ys).sum()), 1)
        self.assertEqual(ys[0], -1.0)

    def test_non_finite_is_nan(self):
        _, ys = sample_curve(compile("ln(x)"), (0.0, 1.0), 3)
        self.assertTrue(np.isnan(ys[0]))
        self.assertAlmostEqual(ys[2], 0.0)

    def test_vectorized_matches_scalar(self):
        expressions = [
            "x^3 - 2*x", "tan(x)", "1/(x-1)", "(1/(x-x))^0", "sqrt(x)*ln(x)", "floor(x)/ceil(x)",
            "exp(x^2)", "2^-x^2", "abs(x)^0.5 - asin(x/10)", "(-x)^(1/3)",
        ]
        for text in expressions:
            with self.subTest(text=text):
                program = compile(text)
                _, fast = sample_curve(program, (-10.0, 10.0), 401)
                _, slow = sample_curve(program, (-10.0, 10.0), 401, vectorized=False)
                np.testing.assert_allclose(fast, slow, rtol=1e-12, atol=1e-12, equal_nan=True)

    def test_structural_failure_is_all_nan(self):
        _, ys = sample_curve(compile("foo(x)"), (0.0, 1.0), 4)
        self.assertTrue(np.isnan(ys).all())

    def test_too_few_columns(self):
        with self.assertRaises(ValueError):
            sample_curve(compile("x"), (0.0, 1.0), 1)

    def test_needs_one_variable(self):
        with self.assertRaises(ValueError):
            sample_curve(compile("x+y", ("x", "y")))


class TestSampleSurface(unittest.TestCase):

    def test_paraboloid(self):
        x_grid, y_grid, z_grid = sample_surface(compile("x^2 + y^2", ("x", "y")), (-2, 2), (-1, 1), 5)
        self.assertEqual(z_grid.shape, (5, 5))
        np.testing.assert_allclose(z_grid, x_grid ** 2 + y_grid ** 2)
        # 'ij' indexing: first axis follows x
        self.assertEqual(x_grid[0, 0], -2.0)
        self.assertEqual(x_grid[4, 0], 2.0)
        self.assertEqual(y_grid[0, 4], 1.0)

    def test_one_variable_program_broadcasts(self):
        x_grid, _, z_grid = sample_surface(compile("x*2"), resolution=4)
        np.testing.assert_allclose(z_grid, x_grid * 2)

    def test_holes(self):
        _, _, z_grid = sample_surface(compile("1/(x*y)", ("x", "y")), (-1, 1), (-1, 1), 3)
        self.assertTrue(np.isnan(z_grid[1, :]).all())
        self.assertTrue(np.isnan(z_grid[:, 1]).all())
        self.assertEqual(z_grid[0, 0], 1.0)

    def test_custom_variable_names(self):
        u_grid, v_grid, z_grid = sample_surface(compile("u - 2*v", ("u", "v")), (0, 2), (0, 1), 3)
        np.testing.assert_allclose(z_grid, u_grid - 2 * v_grid)
        self.assertEqual(z_grid[2, 0], 2.0)
        self.assertEqual(z_grid[0, 2], -2.0)

    def test_needs_at_most_two_variables(self):
        with self.assertRaises(ValueError):
            sample_surface(compile("x+y+z", ("x", "y", "z")))


class TestSampleDerivative(unittest.TestCase):

    def test_cubic(self):
        xs, slopes = sample_derivative(compile("x^3"), (-3.0, 3.0), 61)
        np.testing.assert_allclose(slopes, 3 * xs ** 2, atol=1e-3)

    def test_nan_where_undefined(self):
        xs, slopes = sample_derivative(compile("sqrt(x)"), (-1.0, 1.0), 3)
        self.assertTrue(np.isnan(slopes[0]))
        self.assertTrue(np.isnan(slopes[1]))
        self.assertAlmostEqual(slopes[2], 0.5, delta=1e-4)


class TestEvaluateArray(unittest.TestCase):

    def test_constant_program(self):
        result = evaluate_array(compile("2+3", ()), {})
        self.assertEqual(result.shape, ())
        self.assertEqual(float(result), 5.0)

    def test_broadcast(self):
        result = evaluate_array(compile("x+y", ("x", "y")), {'x': np.arange(3.0)[:, None], 'y': np.arange(2.0)})
        self.assertEqual(result.shape, (3, 2))
        self.assertEqual(result[2, 1], 3.0)

    def test_structural_errors_raise(self):
        with self.assertRaises(UnknownFunction):
            evaluate_array(compile("bar(x)"), {'x': np.zeros(3)})
        with self.assertRaises(InsufficientOperands):
            evaluate_array(compile("x*"), {'x': np.zeros(3)})


if __name__ == '__main__':
    unittest.main()
