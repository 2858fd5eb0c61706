import io
import unittest
from contextlib import redirect_stdout

import main


def run_cli(*argv):
    out = io.StringIO()
    with redirect_stdout(out):
        status = main.main(list(argv))
    return status, out.getvalue()


class TestCli(unittest.TestCase):

    def test_postfix_and_value(self):
        status, out = run_cli("2^3^x", "--at", "x=2")
        self.assertEqual(status, 0)
        self.assertIn("Postfix: 2 3 x ^ ^", out)
        self.assertIn("Value: 512", out)

    def test_derivative(self):
        status, out = run_cli("x^2", "--derivative", "3")
        self.assertEqual(status, 0)
        self.assertIn("Slope: 6", out)

    def test_compile_error(self):
        status, out = run_cli("(1+2")
        self.assertEqual(status, 2)
        self.assertIn("Error:", out)

    def test_undefined_value(self):
        status, out = run_cli("1/x", "--at", "x=0")
        self.assertEqual(status, 1)
        self.assertIn("Undefined", out)

    def test_surface_sample(self):
        status, out = run_cli("x*y", "--surface", "--sample", "--resolution", "4")
        self.assertEqual(status, 0)
        self.assertIn("Sampled 16 points, 16 defined.", out)

    def test_curve_sample_with_holes(self):
        status, out = run_cli("1/x", "--sample", "--columns", "5", "--x-range", "-1", "1")
        self.assertEqual(status, 0)
        self.assertIn("Sampled 5 points, 4 defined.", out)

    def test_help_lists_functions(self):
        text = main.build_parser().format_help()
        for name in ("sin", "sqrt", "floor", "pi", "e"):
            self.assertIn(name, text)


if __name__ == '__main__':
    unittest.main()
