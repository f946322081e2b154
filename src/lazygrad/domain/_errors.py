"""
Graph-, shape- and hardware-related exceptions for lazygrad.

This module defines the recoverable error kinds raised by the computation
graph engine. All of them are detected eagerly at the point of the offending
operation (appending a step, combining Nodes) and surface to the caller
unchanged; the engine never retries internally.

- `ShapeMismatchError`: operator inputs are not elementwise-compatible, or a
  requested shape is otherwise invalid.
- `HardwareMismatchError`: operator inputs resolve to different hardware
  instances.
- `InvalidGraphError`: an operation combines Nodes that belong to different
  graphs, or refers to an address the graph does not contain.
"""

from __future__ import annotations

from typing import Any, Sequence


class LazyGradError(RuntimeError):
    """
    Base class of every error raised by the lazygrad engine.
    """


class ShapeMismatchError(LazyGradError):
    """
    Raised when shapes are not compatible for the requested operation.

    Attributes
    ----------
    shapes : tuple
        The shapes involved in the failing operation (may be empty when the
        error concerns a single invalid shape description).
    """

    def __init__(self, message: str, shapes: Sequence[Any] = ()) -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        message : str
            Human-readable description of the failure.
        shapes : Sequence[Any], optional
            Shapes involved in the failing operation.
        """
        super().__init__(message)
        self.shapes = tuple(shapes)


class HardwareMismatchError(LazyGradError):
    """
    Raised when an operation combines values bound to different hardware.

    Hardware is compared by identity: two backends that behave identically are
    still different hardware.
    """

    def __init__(self, hardware_a: Any, hardware_b: Any) -> None:
        """
        Initialize the HardwareMismatchError.

        Parameters
        ----------
        hardware_a : Any
            Hardware of the first operand.
        hardware_b : Any
            Hardware of the conflicting operand.
        """
        super().__init__(f"Hardware mismatch: {hardware_a!r} vs {hardware_b!r}.")
        self.hardware_a = hardware_a
        self.hardware_b = hardware_b


class InvalidGraphError(LazyGradError):
    """
    Raised when Nodes from different graphs are combined, or when an address
    does not refer to a value that exists in the graph.
    """
