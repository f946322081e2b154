"""
Concrete compute backends.
"""

from ._cpu import CpuHardware

__all__ = [
    CpuHardware.__name__,
]
