from unittest import TestCase
from unittest.mock import patch
import os
import unittest

from lazygrad.infrastructure._config import debug_enabled, warn_nonfinite_enabled


class TestConfigFlags(TestCase):
    def test_defaults(self):
        env = {
            k: v
            for k, v in os.environ.items()
            if k not in ("LAZYGRAD_DEBUG", "LAZYGRAD_WARN_NONFINITE")
        }
        with patch.dict(os.environ, env, clear=True):
            self.assertFalse(debug_enabled())
            self.assertTrue(warn_nonfinite_enabled())

    def test_falsy_values(self):
        for value in ("0", "", "false", "False", "FALSE"):
            with self.subTest(value=value):
                with patch.dict(
                    os.environ,
                    {"LAZYGRAD_DEBUG": value, "LAZYGRAD_WARN_NONFINITE": value},
                ):
                    self.assertFalse(debug_enabled())
                    self.assertFalse(warn_nonfinite_enabled())

    def test_truthy_values(self):
        for value in ("1", "true", "yes"):
            with self.subTest(value=value):
                with patch.dict(os.environ, {"LAZYGRAD_DEBUG": value}):
                    self.assertTrue(debug_enabled())

    def test_flags_are_read_on_every_call(self):
        with patch.dict(os.environ, {"LAZYGRAD_DEBUG": "1"}):
            self.assertTrue(debug_enabled())
        with patch.dict(os.environ, {"LAZYGRAD_DEBUG": "0"}):
            self.assertFalse(debug_enabled())


if __name__ == "__main__":
    unittest.main()
