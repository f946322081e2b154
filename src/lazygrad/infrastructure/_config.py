"""
Environment-driven runtime switches.

Values are read from the process environment on every query so that callers
(and tests) can change them without re-importing the package.

Variables
---------
LAZYGRAD_DEBUG
    Off by default. When on, the CPU backend poisons fresh allocations with
    NaN and the graph logs every evaluated step.
LAZYGRAD_WARN_NONFINITE
    On by default. When on, elementwise division warns if it produced
    non-finite values.
"""

from __future__ import annotations

import os

_FALSY = ("0", "", "false", "False", "FALSE")


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default) not in _FALSY


def debug_enabled() -> bool:
    """Return whether ``LAZYGRAD_DEBUG`` is set to a truthy value."""
    return _flag("LAZYGRAD_DEBUG", "0")


def warn_nonfinite_enabled() -> bool:
    """Return whether ``LAZYGRAD_WARN_NONFINITE`` is set to a truthy value."""
    return _flag("LAZYGRAD_WARN_NONFINITE", "1")
