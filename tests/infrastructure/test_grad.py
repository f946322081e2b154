from unittest import TestCase
import gc
import unittest

from lazygrad.domain import InvalidGraphError, Shape
from lazygrad.infrastructure import Array, CpuHardware, Graph, Node, grad


class TestGradBasics(TestCase):
    def setUp(self):
        self.hw = CpuHardware()
        self.g = Graph()

    def _scalar(self, value):
        return Node.from_scalar(self.hw, self.g, value)

    def test_empty_variable_list(self):
        y = self._scalar(1.0)
        self.assertEqual(grad(y, []), [])

    def test_self_and_unrelated(self):
        x = self._scalar(42.0)
        u = self._scalar(7.0)
        gx, gu = grad(x, [x, u])
        self.assertEqual(gx.to_scalar(), 1.0)
        self.assertEqual(gu.to_scalar(), 0.0)

    def test_grad_does_not_evaluate(self):
        x = self._scalar(2.0)
        y = x * x
        grad(y, [x])
        for i in range(self.g.num_steps()):
            self.assertFalse(self.g.get_step(i).is_cached())

    def test_grad_only_appends(self):
        x = self._scalar(2.0)
        y = x * x
        before = [self.g.get_step(i) for i in range(self.g.num_steps())]
        grad(y, [x])
        self.assertGreater(self.g.num_steps(), len(before))
        for i, step in enumerate(before):
            self.assertIs(self.g.get_step(i), step)

    def test_duplicate_variables(self):
        x = self._scalar(3.0)
        g1, g2 = grad(-x, [x, x])
        self.assertEqual(g1.to_scalar(), -1.0)
        self.assertEqual(g2.to_scalar(), -1.0)

    def test_different_graphs(self):
        x = self._scalar(1.0)
        other = Node.from_scalar(self.hw, Graph(), 1.0)
        with self.assertRaises(InvalidGraphError):
            grad(x, [other])


class TestGradRules(TestCase):
    def setUp(self):
        self.hw = CpuHardware()
        self.g = Graph()
        self.a = Node.from_scalar(self.hw, self.g, 3.0)
        self.b = Node.from_scalar(self.hw, self.g, 2.0)

    def _grads(self, y):
        return [n.to_scalar() for n in grad(y, [self.a, self.b])]

    def test_neg(self):
        (ga,) = grad(-self.a, [self.a])
        self.assertEqual(ga.to_scalar(), -1.0)

    def test_add(self):
        self.assertEqual(self._grads(self.a + self.b), [1.0, 1.0])

    def test_sub(self):
        self.assertEqual(self._grads(self.a - self.b), [1.0, -1.0])

    def test_mul(self):
        self.assertEqual(self._grads(self.a * self.b), [2.0, 3.0])

    def test_div(self):
        self.assertEqual(self._grads(self.a / self.b), [0.5, -0.75])

    def test_square_sums_both_paths(self):
        x = Node.from_scalar(self.hw, self.g, 123.0)
        (gx,) = grad(x * x, [x])
        self.assertEqual(gx.to_scalar(), 246.0)

    def test_diamond(self):
        x = Node.from_scalar(self.hw, self.g, 5.0)
        s = x + x
        (gx,) = grad(s * s, [x])
        # d/dx (2x)^2 = 8x
        self.assertEqual(gx.to_scalar(), 40.0)

    def test_composite(self):
        a = Node.from_scalar(self.hw, self.g, 1.0)
        b = Node.from_scalar(self.hw, self.g, 2.0)
        c = Node.from_scalar(self.hw, self.g, 3.0)
        y = a + (-b) * c
        self.assertEqual(y.to_scalar(), -5.0)
        ga, gb, gc = grad(y, [a, b, c])
        self.assertEqual(ga.to_scalar(), 1.0)
        self.assertEqual(gb.to_scalar(), -3.0)
        self.assertEqual(gc.to_scalar(), -2.0)

    def test_with_lifted_constants(self):
        x = Node.from_scalar(self.hw, self.g, 4.0)
        (gx,) = grad(3 * x - 1 / x, [x])
        self.assertEqual(gx.to_scalar(), 3.0625)


class TestHigherOrder(TestCase):
    def setUp(self):
        self.hw = CpuHardware()
        self.g = Graph()

    def test_cube(self):
        x = Node.from_scalar(self.hw, self.g, 5.0)
        y = x * x * x
        self.assertEqual(y.to_scalar(), 125.0)
        (g1,) = grad(y, [x])
        (g2,) = grad(g1, [x])
        (g3,) = grad(g2, [x])
        (g4,) = grad(g3, [x])
        self.assertEqual(g1.to_scalar(), 75.0)
        self.assertEqual(g2.to_scalar(), 30.0)
        self.assertEqual(g3.to_scalar(), 6.0)
        self.assertEqual(g4.to_scalar(), 0.0)

    def test_multivariate(self):
        a = Node.from_scalar(self.hw, self.g, 2.0)
        b = Node.from_scalar(self.hw, self.g, 3.0)
        y = a * a * b
        self.assertEqual(y.to_scalar(), 12.0)

        ga, gb = grad(y, [a, b])
        self.assertEqual(ga.to_scalar(), 12.0)  # 2ab
        self.assertEqual(gb.to_scalar(), 4.0)  # a^2

        gaa, gab = grad(ga, [a, b])
        gba, gbb = grad(gb, [a, b])
        self.assertEqual(gaa.to_scalar(), 6.0)  # 2b
        self.assertEqual(gab.to_scalar(), 4.0)  # 2a
        self.assertEqual(gba.to_scalar(), 4.0)  # 2a
        self.assertEqual(gbb.to_scalar(), 0.0)

        gaaa, gaab = grad(gaa, [a, b])
        self.assertEqual(gaaa.to_scalar(), 0.0)
        self.assertEqual(gaab.to_scalar(), 2.0)

    def test_div_second_derivative(self):
        x = Node.from_scalar(self.hw, self.g, 2.0)
        y = 1 / x
        (g1,) = grad(y, [x])
        (g2,) = grad(g1, [x])
        self.assertEqual(g1.to_scalar(), -0.25)  # -1/x^2
        self.assertEqual(g2.to_scalar(), 0.25)  # 2/x^3


class TestGradShapes(TestCase):
    def test_vector_gradient(self):
        hw = CpuHardware()
        g = Graph()
        a = Node.from_array(g, Array.from_values(hw, [3], [1.0, 2.0, 3.0]))
        b = Node.from_array(g, Array.from_values(hw, [3], [4.0, 5.0, 6.0]))
        ga, gb = grad(a * b, [a, b])
        self.assertEqual(ga.shape, Shape([3]))
        self.assertEqual(ga.calculate().get_values(), [4.0, 5.0, 6.0])
        self.assertEqual(gb.calculate().get_values(), [1.0, 2.0, 3.0])

    def test_unreached_gradient_matches_variable_shape(self):
        hw = CpuHardware()
        g = Graph()
        v = Node.fill(hw, g, [2], 1.0)
        y = Node.from_scalar(hw, g, 1.0)
        (gv,) = grad(y, [v])
        self.assertEqual(gv.shape, Shape([2]))
        self.assertEqual(gv.calculate().get_values(), [0.0, 0.0])


class TestGraphLifetime(TestCase):
    def test_full_lifecycle_releases_every_allocation(self):
        hw = CpuHardware()
        g = Graph()
        a = Node.from_array(g, Array.from_values(hw, [2], [2.0, 3.0]))
        b = Node.fill(hw, g, [2], 4.0)
        y = a * a * b - a / b
        ga, gb = grad(y, [a, b])
        (gaa,) = grad(ga, [a])
        values = [n.calculate() for n in (y, ga, gb, gaa)]
        self.assertEqual(values[3].get_values(), [8.0, 8.0])
        self.assertGreater(hw.num_allocations(), 0)

        del a, b, y, ga, gb, gaa, values, g
        gc.collect()
        self.assertEqual(hw.num_allocations(), 0)
        self.assertEqual(hw.allocated_bytes(), 0)


if __name__ == "__main__":
    unittest.main()
