"""
Backend-agnostic contracts of the lazygrad engine.
"""

from ._errors import (
    LazyGradError,
    ShapeMismatchError,
    HardwareMismatchError,
    InvalidGraphError,
)
from ._shape import Shape
from ._hardware import IHardware, check_same_hardware
from ._operator import Operator

__all__ = [
    LazyGradError.__name__,
    ShapeMismatchError.__name__,
    HardwareMismatchError.__name__,
    InvalidGraphError.__name__,
    Shape.__name__,
    IHardware.__name__,
    check_same_hardware.__name__,
    Operator.__name__,
]
