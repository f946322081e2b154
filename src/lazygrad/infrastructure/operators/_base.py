"""
Shared base for elementwise binary operators.

Binary arithmetic operators (Add, Sub, Mul, Div) share their arity, their
shape rule (structural equality, no broadcasting) and their hardware rule
(identical instance). Subclasses only provide the name, the kernel and the
symbolic gradient.
"""

from __future__ import annotations

from typing import List, Sequence

from ...domain._operator import Operator
from ...domain._shape import Shape


class ElementwiseBinaryOperator(Operator):
    """
    Operator with two inputs of identical shape and one output of that shape.
    """

    def input_size(self) -> int:
        return 2

    def perform_shape(self, inputs: Sequence[Shape]) -> List[Shape]:
        lhs, rhs = inputs
        return [lhs.elementwise(rhs)]
