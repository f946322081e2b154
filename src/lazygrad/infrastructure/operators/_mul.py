"""
Elementwise multiplication.

Backward rule::

    d(a * b)/da = b
    d(a * b)/db = a
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from .._array import Array
from ._base import ElementwiseBinaryOperator

if TYPE_CHECKING:
    from .._node import Node


class Mul(ElementwiseBinaryOperator):
    def name(self) -> str:
        return "Mul"

    def perform(self, inputs: Sequence[Array]) -> List[Array]:
        return [inputs[0].elementwise_mul(inputs[1])]

    def gradient(
        self,
        x: Sequence["Node"],
        y: Sequence["Node"],
        gy: Sequence["Node"],
    ) -> List["Node"]:
        return [gy[0] * x[1], gy[0] * x[0]]
