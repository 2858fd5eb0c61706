import math
import unittest

from grapher import DivisionByZero, Evaluator, UnknownFunction, compile, derivative


class TestDerivative(unittest.TestCase):

    def test_square(self):
        self.assertAlmostEqual(derivative(compile("x^2"), 3.0), 6.0, delta=1e-3)

    def test_sin_at_zero(self):
        self.assertAlmostEqual(derivative(compile("sin(x)"), 0.0), 1.0, delta=1e-6)

    def test_exp(self):
        self.assertAlmostEqual(derivative(compile("exp(x)"), 1.0), math.e, delta=1e-5)

    def test_custom_step(self):
        # Central difference is exact for quadratics, whatever the step
        self.assertAlmostEqual(derivative(compile("x^2 + 3*x"), 2.0, h=0.5), 7.0, places=12)

    def test_linear(self):
        self.assertAlmostEqual(derivative(compile("4*x - 2"), -10.0), 4.0, delta=1e-6)

    def test_failure_propagates(self):
        with self.assertRaises(DivisionByZero):
            derivative(compile("1/(x-x)"), 1.0)
        with self.assertRaises(UnknownFunction):
            derivative(compile("foo(x)"), 1.0)

    def test_one_sided_domain_gives_nan(self):
        # sqrt(-h) is NaN and no one-sided estimate is attempted
        self.assertTrue(math.isnan(derivative(compile("sqrt(x)"), 0.0)))

    def test_uses_given_evaluator(self):
        evaluator = Evaluator(capacity=1)
        self.assertAlmostEqual(derivative(compile("x*(x+1)"), 1.0, evaluator=evaluator), 3.0, delta=1e-6)
        self.assertEqual(evaluator.capacity, 3)

    def test_requires_one_variable(self):
        with self.assertRaises(ValueError):
            derivative(compile("x*y", ("x", "y")), 1.0)

    def test_zero_step(self):
        with self.assertRaises(ValueError):
            derivative(compile("x"), 1.0, h=0)


if __name__ == '__main__':
    unittest.main()
