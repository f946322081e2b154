"""
Constant operator: the leaf of every computation graph.
"""

from __future__ import annotations

from typing import List, Sequence

from ...domain._hardware import IHardware
from ...domain._operator import Operator
from ...domain._shape import Shape
from .._array import Array


class Constant(Operator):
    """
    Operator without inputs that yields a copy of a captured array.

    Parameters
    ----------
    value : Array
        Captured value. Ownership moves to the operator, which keeps it for
        the life of its step; the caller must not release it afterwards.
        `Node.from_array` passes a copy instead.

    Notes
    -----
    The hardware of a constant step is the hardware bound to the captured
    value, independent of any input.
    """

    def __init__(self, value: Array) -> None:
        if not isinstance(value, Array):
            raise TypeError(f"Constant expects an Array, got {type(value)!r}")
        self._value = value

    @property
    def value(self) -> Array:
        return self._value

    def name(self) -> str:
        return "Constant"

    def input_size(self) -> int:
        return 0

    def perform_shape(self, inputs: Sequence[Shape]) -> List[Shape]:
        return [self._value.shape]

    def perform_hardware(self, inputs: Sequence[IHardware]) -> IHardware:
        return self._value.hardware

    def perform(self, inputs: Sequence[Array]) -> List[Array]:
        return [self._value.clone()]

    def __repr__(self) -> str:
        return f"Constant({self._value!r})"
