"""
Concrete runtime of the lazygrad engine: buffers, arrays, the host backend,
operator variants, the graph, Nodes and the gradient engine.
"""

from ._buffer import Buffer
from ._array import Array
from ._graph import Graph, NodeAddress, Step
from ._node import Node
from ._grad import grad
from .hardware import CpuHardware
from .operators import Constant, Add, Sub, Mul, Div, Neg

__all__ = [
    Buffer.__name__,
    Array.__name__,
    Graph.__name__,
    NodeAddress.__name__,
    Step.__name__,
    Node.__name__,
    grad.__name__,
    CpuHardware.__name__,
    Constant.__name__,
    Add.__name__,
    Sub.__name__,
    Mul.__name__,
    Div.__name__,
    Neg.__name__,
]
