"""
Operator interface definitions.

This module defines the abstract base class for the polymorphic computation
rules stored in graph steps. A concrete `Operator` describes, for one kind of
step:

- its arity (`input_size`) and number of outputs (`output_size`),
- shape inference (`perform_shape`) and hardware inference
  (`perform_hardware`),
- the numeric execution on already-validated input arrays (`perform`),
- the symbolic gradient rule (`gradient`), expressed as ordinary graph
  arithmetic on Nodes so that gradients can themselves be differentiated.

The interface is open: new operators are added by subclassing, without
modifying the graph or the gradient engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Sequence

from ._hardware import IHardware, check_same_hardware
from ._shape import Shape

if TYPE_CHECKING:
    from ..infrastructure._array import Array
    from ..infrastructure._node import Node


class Operator(ABC):
    """
    Abstract base class for graph operators.

    Notes
    -----
    - `perform` is only ever invoked by the graph with inputs that already
      passed `perform_hardware` and `perform_shape`.
    - `gradient` must return exactly `input_size()` Nodes, one per input, in
      input order.
    - Operators are owned by exactly one step and must not carry mutable
      per-evaluation state.
    """

    @abstractmethod
    def name(self) -> str:
        """Return the human-readable operator name (e.g. ``"Add"``)."""
        ...

    @abstractmethod
    def input_size(self) -> int:
        """Return the number of inputs the operator consumes."""
        ...

    def output_size(self) -> int:
        """Return the number of outputs the operator produces."""
        return 1

    @abstractmethod
    def perform_shape(self, inputs: Sequence[Shape]) -> List[Shape]:
        """
        Infer output shapes from input shapes.

        Parameters
        ----------
        inputs : Sequence[Shape]
            Shapes of the inputs, in input order.

        Returns
        -------
        list[Shape]
            One shape per output.

        Raises
        ------
        ShapeMismatchError
            If the input shapes are not acceptable for this operator.
        """
        ...

    def perform_hardware(self, inputs: Sequence[IHardware]) -> IHardware:
        """
        Infer the hardware the outputs are bound to.

        The default rule requires every input to reference the identical
        hardware instance and returns that instance.

        Raises
        ------
        HardwareMismatchError
            If the inputs reference different hardware instances.
        """
        return check_same_hardware(inputs)

    @abstractmethod
    def perform(self, inputs: Sequence["Array"]) -> List["Array"]:
        """
        Compute the outputs from already-validated input arrays.

        Returns
        -------
        list[Array]
            One newly allocated array per output.
        """
        ...

    def gradient(
        self,
        x: Sequence["Node"],
        y: Sequence["Node"],
        gy: Sequence["Node"],
    ) -> List["Node"]:
        """
        Build the symbolic gradient of this operator.

        Parameters
        ----------
        x : Sequence[Node]
            The operator's own input Nodes.
        y : Sequence[Node]
            The operator's own output Nodes.
        gy : Sequence[Node]
            Upstream gradients, one per output.

        Returns
        -------
        list[Node]
            Gradients with respect to each input, built from ordinary Node
            arithmetic.

        Raises
        ------
        NotImplementedError
            For operators without inputs, which never receive a gradient call.
        """
        raise NotImplementedError(f"{self.name()} does not define a gradient.")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
