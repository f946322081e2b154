"""
User-facing handles to graph values.

A `Node` is a cheap, copyable pair of (graph, address). It owns no array:
the graph owns every step and every cached value. Arithmetic on Nodes
appends new steps to the shared graph and returns Nodes for their outputs;
nothing is evaluated until `calculate` is called.

Real numbers (Python or NumPy scalars) are accepted on either side of a
binary operator and are lifted to a constant of the Node's shape on the
Node's hardware.
"""

from __future__ import annotations

import numbers
from typing import Iterable, Union

from typing_extensions import Self

from ..domain._errors import InvalidGraphError
from ..domain._hardware import IHardware
from ..domain._operator import Operator
from ..domain._shape import Shape
from ._array import Array
from ._graph import Graph, NodeAddress
from .operators import Add, Constant, Div, Mul, Neg, Sub

Number = Union[int, float, numbers.Real]


class Node:
    """
    Handle to one value of a graph.

    Parameters
    ----------
    graph : Graph
        The graph holding the value.
    address : NodeAddress
        Address of the value in `graph`.

    Notes
    -----
    Two Nodes are equal iff they reference the same graph object and the
    same address.
    """

    __slots__ = ("_graph", "_address")

    def __init__(self, graph: Graph, address: NodeAddress) -> None:
        self._graph = graph
        self._address = address

    # ------------------------------------------------------------------
    # factories
    # ------------------------------------------------------------------
    @classmethod
    def from_array(cls, graph: Graph, value: Array) -> Self:
        """
        Append a `Constant` step holding a copy of `value` and return its Node.

        The graph owns the copy; the caller keeps ownership of `value` and may
        release it at any time.
        """
        return cls._from_owned(graph, value.clone())

    @classmethod
    def _from_owned(cls, graph: Graph, value: Array) -> Self:
        # `value` must not be referenced anywhere else.
        (address,) = graph.add_step(Constant(value), [])
        return cls(graph, address)

    @classmethod
    def from_scalar(cls, hardware: IHardware, graph: Graph, value: Number) -> Self:
        """Append a rank-0 constant holding `value`."""
        return cls._from_owned(graph, Array.scalar(hardware, value))

    @classmethod
    def fill(
        cls,
        hardware: IHardware,
        graph: Graph,
        shape: Union[Shape, Iterable[int]],
        value: Number,
    ) -> Self:
        """Append a constant of `shape` whose every element is `value`."""
        return cls._from_owned(graph, Array.constant(hardware, shape, value))

    # ------------------------------------------------------------------
    # accessors
    # ------------------------------------------------------------------
    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def address(self) -> NodeAddress:
        return self._address

    @property
    def shape(self) -> Shape:
        return self._graph.get_shape(self._address)

    @property
    def hardware(self) -> IHardware:
        return self._graph.get_hardware(self._address)

    def check_graph(self, *others: "Node") -> Graph:
        """
        Return the graph shared by this Node and every Node in `others`.

        Raises
        ------
        InvalidGraphError
            If any Node belongs to a different graph.
        """
        for other in others:
            if other._graph is not self._graph:
                raise InvalidGraphError(
                    "Attempted calculation between Nodes on different Graph."
                )
        return self._graph

    def calculate(self) -> Array:
        """Evaluate this Node; see `Graph.calculate`."""
        return self._graph.calculate(self._address)

    def to_scalar(self) -> float:
        """Evaluate this Node and read back its scalar value."""
        return self.calculate().to_scalar()

    # ------------------------------------------------------------------
    # arithmetic sugar
    # ------------------------------------------------------------------
    def _apply(self, operator: Operator, *operands: "Node") -> Self:
        graph = self.check_graph(*operands)
        (address,) = graph.add_step(
            operator, [self._address, *(o._address for o in operands)]
        )
        return type(self)(graph, address)

    def _lift(self, other: Union["Node", Number]) -> "Node":
        if isinstance(other, Node):
            return other
        if isinstance(other, numbers.Real) and not isinstance(other, bool):
            return Node.fill(self.hardware, self._graph, self.shape, other)
        raise TypeError(f"Unsupported operand type: {type(other)!r}")

    def __add__(self, other: Union["Node", Number]) -> Self:
        return self._apply(Add(), self._lift(other))

    def __radd__(self, other: Number) -> Self:
        return self._lift(other)._apply(Add(), self)

    def __sub__(self, other: Union["Node", Number]) -> Self:
        return self._apply(Sub(), self._lift(other))

    def __rsub__(self, other: Number) -> Self:
        return self._lift(other)._apply(Sub(), self)

    def __mul__(self, other: Union["Node", Number]) -> Self:
        return self._apply(Mul(), self._lift(other))

    def __rmul__(self, other: Number) -> Self:
        return self._lift(other)._apply(Mul(), self)

    def __truediv__(self, other: Union["Node", Number]) -> Self:
        return self._apply(Div(), self._lift(other))

    def __rtruediv__(self, other: Number) -> Self:
        return self._lift(other)._apply(Div(), self)

    def __neg__(self) -> Self:
        return self._apply(Neg())

    def __pos__(self) -> Self:
        return self

    # ------------------------------------------------------------------
    # identity
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self._graph is other._graph and self._address == other._address

    def __hash__(self) -> int:
        return hash((id(self._graph), self._address))

    def __repr__(self) -> str:
        return f"Node(0x{id(self._graph):016x}:{self._address})"
