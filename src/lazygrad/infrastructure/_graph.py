"""
Append-only computation graph with memoized lazy evaluation.

A `Graph` is an ordered list of `Step` records. Each step pairs an operator
with the addresses of its inputs and a cache slot for its outputs. Values
are addressed by `NodeAddress` = (step index, output index).

Invariants
----------
- Steps are only ever appended; nothing is removed or mutated except the
  cache slot, which is filled at most once.
- Every input address of step ``i`` refers to a step with index ``< i``.
  Descending step index is therefore a valid reverse-topological order.
- Output shapes and hardware of a step are inferred when the step is
  appended, so shape and hardware mismatches are reported eagerly.

Evaluation
----------
`calculate` walks the dependencies of the requested address in post-order,
evaluates each uncached step once, stores its outputs, and returns a clone
of the requested output. A failing step leaves no cache entry behind.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..domain._errors import InvalidGraphError
from ..domain._hardware import IHardware
from ..domain._operator import Operator
from ..domain._shape import Shape
from ._array import Array
from ._config import debug_enabled

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class NodeAddress:
    """
    Address of one value in a graph.

    Attributes
    ----------
    step : int
        Index of the producing step.
    output : int
        Index of the output within that step.
    """

    step: int
    output: int = 0

    def __str__(self) -> str:
        return f"{self.step}:{self.output}"


@dataclass
class Step:
    """
    One entry of a graph.

    Attributes
    ----------
    operator : Operator
        The operator owned by this step.
    inputs : tuple[NodeAddress, ...]
        Input addresses, in operator input order.
    output_shapes : tuple[Shape, ...]
        Output shapes inferred at append time.
    hardware : IHardware
        Hardware the outputs are bound to, inferred at append time.
    """

    operator: Operator
    inputs: Tuple[NodeAddress, ...]
    output_shapes: Tuple[Shape, ...]
    hardware: IHardware
    _cache: Optional[Tuple[Array, ...]] = field(default=None, repr=False)

    def is_cached(self) -> bool:
        return self._cache is not None


class Graph:
    """
    Append-only list of steps owning every cached array.

    Notes
    -----
    Each public call holds the graph lock for its own duration only. The
    lock is re-entrant so that operators may be appended from code running
    under another graph call on the same thread.
    """

    def __init__(self) -> None:
        self._steps: List[Step] = []
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Graph(num_steps={len(self._steps)}, id=0x{id(self):x})"

    # ------------------------------------------------------------------
    # introspection
    # ------------------------------------------------------------------
    def num_steps(self) -> int:
        with self._lock:
            return len(self._steps)

    def get_step(self, index: int) -> Step:
        """
        Return the step at `index`.

        Raises
        ------
        IndexError
            If no step exists at `index`.
        """
        with self._lock:
            if not 0 <= index < len(self._steps):
                raise IndexError(
                    f"Step index {index} out of range for graph with "
                    f"{len(self._steps)} steps."
                )
            return self._steps[index]

    def get_shape(self, address: NodeAddress) -> Shape:
        with self._lock:
            return self._resolve(address).output_shapes[address.output]

    def get_hardware(self, address: NodeAddress) -> IHardware:
        with self._lock:
            return self._resolve(address).hardware

    def _resolve(self, address: NodeAddress) -> Step:
        # Caller holds the lock.
        if not isinstance(address, NodeAddress):
            raise TypeError(f"Expected NodeAddress, got {type(address)!r}")
        if not 0 <= address.step < len(self._steps):
            raise InvalidGraphError(f"Address {address} does not exist in the graph.")
        step = self._steps[address.step]
        if not 0 <= address.output < len(step.output_shapes):
            raise InvalidGraphError(
                f"Address {address} refers to a missing output of "
                f"{step.operator.name()}."
            )
        return step

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------
    def add_step(
        self, operator: Operator, inputs: Sequence[NodeAddress]
    ) -> List[NodeAddress]:
        """
        Append a step without evaluating it.

        Parameters
        ----------
        operator : Operator
            Operator of the new step. Ownership moves to the graph.
        inputs : Sequence[NodeAddress]
            Input addresses; each must name an existing output.

        Returns
        -------
        list[NodeAddress]
            One address per operator output.

        Raises
        ------
        ValueError
            If the number of inputs differs from ``operator.input_size()``.
        InvalidGraphError
            If an input address does not exist in this graph.
        HardwareMismatchError
            If the inputs are bound to different hardware.
        ShapeMismatchError
            If the input shapes are rejected by the operator.
        """
        if not isinstance(operator, Operator):
            raise TypeError(f"Expected Operator, got {type(operator)!r}")
        inputs = tuple(inputs)
        if len(inputs) != operator.input_size():
            raise ValueError(
                f"{operator.name()} expects {operator.input_size()} inputs, "
                f"got {len(inputs)}."
            )

        with self._lock:
            in_steps = [self._resolve(a) for a in inputs]
            hardware = operator.perform_hardware([s.hardware for s in in_steps])
            shapes = operator.perform_shape(
                [s.output_shapes[a.output] for s, a in zip(in_steps, inputs)]
            )
            if len(shapes) != operator.output_size():
                raise ValueError(
                    f"{operator.name()} inferred {len(shapes)} output shapes, "
                    f"expected {operator.output_size()}."
                )

            index = len(self._steps)
            self._steps.append(
                Step(
                    operator=operator,
                    inputs=inputs,
                    output_shapes=tuple(shapes),
                    hardware=hardware,
                )
            )

        logger.debug(
            "appended step %d: %s(%s)",
            index,
            operator.name(),
            ", ".join(str(a) for a in inputs),
        )
        return [NodeAddress(index, i) for i in range(len(shapes))]

    # ------------------------------------------------------------------
    # evaluation
    # ------------------------------------------------------------------
    def calculate(self, address: NodeAddress) -> Array:
        """
        Evaluate the value at `address`.

        Every step the value depends on is computed at most once per graph
        lifetime; later calls reuse the cached outputs.

        Returns
        -------
        Array
            A clone of the cached output. The caller owns it.

        Raises
        ------
        InvalidGraphError
            If `address` does not exist.
        HardwareMismatchError, ShapeMismatchError
            If resolved inputs of a step are incompatible.
        """
        with self._lock:
            target = self._resolve(address)
            if target._cache is None:
                self._evaluate(address.step)
            return target._cache[address.output].clone()

    def _evaluate(self, index: int) -> None:
        # Iterative post-order over uncached dependencies. Caller holds the lock.
        trace = debug_enabled()
        stack: List[Tuple[int, bool]] = [(index, False)]
        while stack:
            i, expanded = stack.pop()
            step = self._steps[i]
            if step._cache is not None:
                continue
            if not expanded:
                stack.append((i, True))
                for a in reversed(step.inputs):
                    if self._steps[a.step]._cache is None:
                        stack.append((a.step, False))
                continue
            step._cache = self._perform(step)
            if trace:
                logger.debug("evaluated step %d: %s", i, step.operator.name())

    def _perform(self, step: Step) -> Tuple[Array, ...]:
        values = [self._steps[a.step]._cache[a.output] for a in step.inputs]
        op = step.operator
        if values:
            op.perform_hardware([v.hardware for v in values])
            op.perform_shape([v.shape for v in values])
        outputs = tuple(op.perform(values))
        if len(outputs) != len(step.output_shapes):
            raise ValueError(
                f"{op.name()} produced {len(outputs)} outputs, "
                f"expected {len(step.output_shapes)}."
            )
        return outputs
