"""
Elementwise negation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from ...domain._operator import Operator
from ...domain._shape import Shape
from .._array import Array

if TYPE_CHECKING:
    from .._node import Node


class Neg(Operator):
    """
    Unary negation; output shape equals the input shape.

    Backward: d(-a)/da = -1.
    """

    def name(self) -> str:
        return "Neg"

    def input_size(self) -> int:
        return 1

    def perform_shape(self, inputs: Sequence[Shape]) -> List[Shape]:
        return [inputs[0]]

    def perform(self, inputs: Sequence[Array]) -> List[Array]:
        return [inputs[0].elementwise_neg()]

    def gradient(
        self,
        x: Sequence["Node"],
        y: Sequence["Node"],
        gy: Sequence["Node"],
    ) -> List["Node"]:
        return [-gy[0]]
