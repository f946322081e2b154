"""
Elementwise subtraction.

Backward rule::

    d(a - b)/da = 1
    d(a - b)/db = -1
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from .._array import Array
from ._base import ElementwiseBinaryOperator

if TYPE_CHECKING:
    from .._node import Node


class Sub(ElementwiseBinaryOperator):
    def name(self) -> str:
        return "Sub"

    def perform(self, inputs: Sequence[Array]) -> List[Array]:
        return [inputs[0].elementwise_sub(inputs[1])]

    def gradient(
        self,
        x: Sequence["Node"],
        y: Sequence["Node"],
        gy: Sequence["Node"],
    ) -> List["Node"]:
        return [gy[0], -gy[0]]
