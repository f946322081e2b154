from unittest import TestCase
import unittest

import numpy as np

from lazygrad.domain import Shape, ShapeMismatchError


class TestShape(TestCase):
    def test_scalar_shape(self):
        s = Shape([])
        self.assertEqual(s.rank, 0)
        self.assertTrue(s.is_scalar())
        self.assertEqual(s.num_elements(), 1)
        self.assertEqual(s, Shape.scalar())

    def test_num_elements_is_product(self):
        self.assertEqual(Shape([3]).num_elements(), 3)
        self.assertEqual(Shape([2, 3, 4]).num_elements(), 24)

    def test_zero_dimension_gives_zero_elements(self):
        s = Shape([0])
        self.assertEqual(s.rank, 1)
        self.assertEqual(s.num_elements(), 0)
        self.assertEqual(Shape([2, 0, 5]).num_elements(), 0)

    def test_accepts_numpy_integers(self):
        s = Shape([np.int64(2), np.int32(3)])
        self.assertEqual(s.dims, (2, 3))

    def test_negative_dimension_raises(self):
        with self.assertRaises(ShapeMismatchError):
            Shape([2, -1])

    def test_non_integer_dimension_raises(self):
        with self.assertRaises(ShapeMismatchError):
            Shape([2, 3.5])
        with self.assertRaises(ShapeMismatchError):
            Shape([True])

    def test_equality_and_hash(self):
        self.assertEqual(Shape([2, 3]), Shape((2, 3)))
        self.assertNotEqual(Shape([2, 3]), Shape([3, 2]))
        self.assertNotEqual(Shape([]), Shape([1]))
        self.assertEqual(len({Shape([1, 2]), Shape([1, 2])}), 1)

    def test_sequence_protocol(self):
        s = Shape([4, 5])
        self.assertEqual(len(s), 2)
        self.assertEqual(list(s), [4, 5])
        self.assertEqual(s[1], 5)

    def test_elementwise_equal_shapes(self):
        for dims in ([], [0], [3], [2, 3]):
            with self.subTest(dims=dims):
                self.assertEqual(Shape(dims).elementwise(Shape(dims)), Shape(dims))

    def test_elementwise_mismatch_raises(self):
        pairs = [([], [0]), ([], [3]), ([0], []), ([0], [3]), ([3], []), ([3], [0])]
        for lhs, rhs in pairs:
            with self.subTest(lhs=lhs, rhs=rhs):
                with self.assertRaises(ShapeMismatchError) as cm:
                    Shape(lhs).elementwise(Shape(rhs))
                self.assertEqual(cm.exception.shapes, (Shape(lhs), Shape(rhs)))

    def test_str_and_repr(self):
        self.assertEqual(str(Shape([])), "[]")
        self.assertEqual(str(Shape([2, 3])), "[2, 3]")
        self.assertEqual(repr(Shape([2, 3])), "Shape([2, 3])")


if __name__ == "__main__":
    unittest.main()
