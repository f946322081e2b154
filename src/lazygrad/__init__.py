"""
lazygrad: an append-only computation graph with lazy, memoized evaluation and
symbolic reverse-mode automatic differentiation.

Typical usage
-------------
    hw = CpuHardware()
    g = Graph()
    x = Node.from_scalar(hw, g, 5.0)
    y = x * x * x
    (dy,) = grad(y, [x])
    dy.to_scalar()  # 75.0
"""

import logging

from .domain import (
    LazyGradError,
    ShapeMismatchError,
    HardwareMismatchError,
    InvalidGraphError,
    IHardware,
    Operator,
    Shape,
)
from .infrastructure import (
    Array,
    Buffer,
    CpuHardware,
    Graph,
    Node,
    NodeAddress,
    Step,
    grad,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    LazyGradError.__name__,
    ShapeMismatchError.__name__,
    HardwareMismatchError.__name__,
    InvalidGraphError.__name__,
    IHardware.__name__,
    Operator.__name__,
    Shape.__name__,
    Array.__name__,
    Buffer.__name__,
    CpuHardware.__name__,
    Graph.__name__,
    Node.__name__,
    NodeAddress.__name__,
    Step.__name__,
    grad.__name__,
]
