"""
Elementwise division.

Backward rule, with y = a / b::

    d(a / b)/da = 1 / b
    d(a / b)/db = -a / b^2 = -y / b

The upstream term ``gy / b`` is built once and reused by both input
gradients.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from .._array import Array
from ._base import ElementwiseBinaryOperator

if TYPE_CHECKING:
    from .._node import Node


class Div(ElementwiseBinaryOperator):
    def name(self) -> str:
        return "Div"

    def perform(self, inputs: Sequence[Array]) -> List[Array]:
        return [inputs[0].elementwise_div(inputs[1])]

    def gradient(
        self,
        x: Sequence["Node"],
        y: Sequence["Node"],
        gy: Sequence["Node"],
    ) -> List["Node"]:
        gx0 = gy[0] / x[1]
        return [gx0, -y[0] * gx0]
