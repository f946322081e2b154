"""
Hardware capability contract for lazygrad.

This module defines a duck-typed `IHardware` protocol describing the only
boundary the graph engine requires from a compute backend: raw memory
management on the device and a small fixed set of elementwise kernels.

Design notes
------------
- Uses `typing.Protocol` and `@runtime_checkable` so any object providing
  these members can act as a backend without inheriting from a base class.
- Hardware is compared by *identity*. Two instances are never
  interchangeable, even if they behave identically; arrays and graph steps
  therefore keep a reference to the exact instance they are bound to.
- Every call is expected to be serialized by the implementation itself
  (one lock per device context, held for the duration of that call only).
- Handles are opaque to the engine. Sizes are expressed in bytes for memory
  management and in elements (32-bit floats) for kernels.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from ._errors import HardwareMismatchError


@runtime_checkable
class IHardware(Protocol):
    """
    Duck-typed compute backend contract.

    Notes
    -----
    `allocate` may raise `MemoryError` when the device is exhausted; callers
    treat that as fatal. `deallocate` must be called exactly once per handle.
    Kernels write into a preallocated destination handle and never allocate.
    """

    @property
    def name(self) -> str: ...

    def allocate(self, size: int) -> Any: ...
    def deallocate(self, handle: Any, size: int) -> None: ...

    def fill(self, handle: Any, num_elements: int, value: float) -> None: ...
    def copy_host_to_hardware(self, src: bytes, dst: Any, size: int) -> None: ...
    def copy_hardware_to_host(self, src: Any, size: int) -> bytes: ...
    def copy_hardware_to_hardware(self, src: Any, dst: Any, size: int) -> None: ...

    def add(self, lhs: Any, rhs: Any, dst: Any, num_elements: int) -> None: ...
    def sub(self, lhs: Any, rhs: Any, dst: Any, num_elements: int) -> None: ...
    def mul(self, lhs: Any, rhs: Any, dst: Any, num_elements: int) -> None: ...
    def div(self, lhs: Any, rhs: Any, dst: Any, num_elements: int) -> None: ...
    def neg(self, src: Any, dst: Any, num_elements: int) -> None: ...


def check_same_hardware(hardwares: Sequence[IHardware]) -> IHardware:
    """
    Return the hardware shared by every entry of `hardwares`.

    Parameters
    ----------
    hardwares : Sequence[IHardware]
        Hardware references of the operands. Must be non-empty.

    Returns
    -------
    IHardware
        The common hardware instance.

    Raises
    ------
    HardwareMismatchError
        If any entry is not the very same instance as the first one.
    ValueError
        If `hardwares` is empty.
    """
    if not hardwares:
        raise ValueError("At least one hardware reference is required.")
    first = hardwares[0]
    for hw in hardwares[1:]:
        if hw is not first:
            raise HardwareMismatchError(first, hw)
    return first
