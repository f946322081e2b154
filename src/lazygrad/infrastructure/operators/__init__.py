"""
Operator variants of the computation graph.

- ``Constant`` (leaf, no inputs)
- ``Add`` / ``Sub`` / ``Mul`` / ``Div`` (elementwise binary)
- ``Neg`` (elementwise unary)
"""

from ._base import ElementwiseBinaryOperator
from ._constant import Constant
from ._add import Add
from ._sub import Sub
from ._mul import Mul
from ._div import Div
from ._neg import Neg

__all__ = [
    ElementwiseBinaryOperator.__name__,
    Constant.__name__,
    Add.__name__,
    Sub.__name__,
    Mul.__name__,
    Div.__name__,
    Neg.__name__,
]
