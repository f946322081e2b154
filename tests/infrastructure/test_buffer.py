from unittest import TestCase
import gc
import unittest
from unittest.mock import patch

from lazygrad.infrastructure import Buffer, CpuHardware


class TestBuffer(TestCase):
    def setUp(self):
        self.hw = CpuHardware()

    def test_allocates_on_construction(self):
        buf = Buffer(self.hw, 16)
        self.assertIs(buf.hardware, self.hw)
        self.assertEqual(buf.size, 16)
        self.assertFalse(buf.released)
        self.assertEqual(self.hw.num_allocations(), 1)
        self.assertEqual(self.hw.allocated_bytes(), 16)

    def test_negative_size_raises(self):
        with self.assertRaises(ValueError):
            Buffer(self.hw, -1)
        self.assertEqual(self.hw.num_allocations(), 0)

    def test_release_deallocates_exactly_once(self):
        buf = Buffer(self.hw, 8)
        buf.release()
        self.assertTrue(buf.released)
        self.assertEqual(self.hw.num_allocations(), 0)
        buf.release()
        self.assertEqual(self.hw.num_allocations(), 0)

    def test_handle_after_release_raises(self):
        buf = Buffer(self.hw, 8)
        buf.handle
        buf.release()
        with self.assertRaises(RuntimeError):
            buf.handle

    def test_garbage_collection_deallocates(self):
        buf = Buffer(self.hw, 8)
        self.assertEqual(self.hw.num_allocations(), 1)
        del buf
        gc.collect()
        self.assertEqual(self.hw.num_allocations(), 0)

    def test_release_then_collect_does_not_deallocate_twice(self):
        # CpuHardware raises on a second deallocation of the same handle.
        buf = Buffer(self.hw, 4)
        buf.release()
        del buf
        gc.collect()
        self.assertEqual(self.hw.num_allocations(), 0)

    def test_collection_never_raises_from_finalizer(self):
        buf = Buffer(self.hw, 8)
        self.hw.deallocate(buf.handle, 8)
        with patch("sys.unraisablehook") as hook:
            del buf
            gc.collect()
        hook.assert_not_called()

    def test_explicit_release_propagates_hardware_errors(self):
        buf = Buffer(self.hw, 8)
        self.hw.deallocate(buf.handle, 8)
        with self.assertRaises(ValueError):
            buf.release()
        self.assertTrue(buf.released)
        buf.release()

    def test_colocated_uses_same_hardware(self):
        other_hw = CpuHardware()
        a = Buffer(other_hw, 4)
        b = Buffer.colocated(a, 12)
        self.assertIs(b.hardware, other_hw)
        self.assertEqual(b.size, 12)
        self.assertNotEqual(a.handle, b.handle)
        self.assertEqual(other_hw.num_allocations(), 2)
        self.assertEqual(self.hw.num_allocations(), 0)

    def test_repr_reports_state(self):
        buf = Buffer(self.hw, 4)
        self.assertIn("size=4", repr(buf))
        buf.release()
        self.assertIn("released", repr(buf))


if __name__ == "__main__":
    unittest.main()
