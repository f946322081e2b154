"""
Host-memory compute backend (NumPy).

`CpuHardware` satisfies the `IHardware` contract using NumPy byte arrays as
device memory. Each allocation is a separate ``uint8`` block keyed by an
integer handle; kernels reinterpret blocks as contiguous ``float32`` views
and write into a preallocated destination block.

Thread safety
-------------
Every public call acquires the instance lock for the duration of that call
only, so buffers on the same hardware never block each other outside of an
actual allocate/deallocate/copy/kernel call.
"""

from __future__ import annotations

import itertools
import threading
import warnings
from typing import Dict

import numpy as np

from .._config import debug_enabled, warn_nonfinite_enabled

_F32 = np.dtype(np.float32)


class CpuHardware:
    """
    Hardware backed by host memory.

    Parameters
    ----------
    name : str, optional
        Label used in representations and log records. Defaults to ``"cpu"``.

    Notes
    -----
    - Handles are positive integers and are never reused by one instance.
    - `allocate` lets `MemoryError` propagate; exhaustion is not recoverable.
    - Deallocating an unknown handle, or with a size different from the one
      it was allocated with, raises `ValueError`.
    """

    def __init__(self, name: str = "cpu") -> None:
        self._name = str(name)
        self._lock = threading.Lock()
        self._memory: Dict[int, np.ndarray] = {}
        self._next_handle = itertools.count(1)

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"CpuHardware(name={self._name!r}, id=0x{id(self):x})"

    # ------------------------------------------------------------------
    # memory management
    # ------------------------------------------------------------------
    def allocate(self, size: int) -> int:
        """
        Allocate `size` bytes of uninitialized memory.

        Returns
        -------
        int
            Opaque handle of the new block.
        """
        size = int(size)
        if size < 0:
            raise ValueError(f"Allocation size must be non-negative, got {size}.")
        with self._lock:
            block = np.empty(size, dtype=np.uint8)
            if debug_enabled() and size % _F32.itemsize == 0:
                block.view(_F32)[...] = np.nan
            handle = next(self._next_handle)
            self._memory[handle] = block
            return handle

    def deallocate(self, handle: int, size: int) -> None:
        """
        Release a block previously returned by `allocate`.
        """
        with self._lock:
            block = self._memory.get(handle)
            if block is None:
                raise ValueError(f"Unknown or already released handle: {handle}.")
            if block.nbytes != int(size):
                raise ValueError(
                    f"Size mismatch on deallocate: handle {handle} has "
                    f"{block.nbytes} bytes, got {size}."
                )
            del self._memory[handle]

    def num_allocations(self) -> int:
        """Return the number of live allocations."""
        with self._lock:
            return len(self._memory)

    def allocated_bytes(self) -> int:
        """Return the total size in bytes of live allocations."""
        with self._lock:
            return sum(b.nbytes for b in self._memory.values())

    # ------------------------------------------------------------------
    # transfers
    # ------------------------------------------------------------------
    def fill(self, handle: int, num_elements: int, value: float) -> None:
        with self._lock:
            self._f32(handle, num_elements)[...] = np.float32(value)

    def copy_host_to_hardware(self, src: bytes, dst: int, size: int) -> None:
        with self._lock:
            self._memory[dst][:size] = np.frombuffer(src, dtype=np.uint8, count=size)

    def copy_hardware_to_host(self, src: int, size: int) -> bytes:
        with self._lock:
            return self._memory[src][:size].tobytes()

    def copy_hardware_to_hardware(self, src: int, dst: int, size: int) -> None:
        with self._lock:
            np.copyto(self._memory[dst][:size], self._memory[src][:size])

    # ------------------------------------------------------------------
    # elementwise kernels
    # ------------------------------------------------------------------
    def add(self, lhs: int, rhs: int, dst: int, num_elements: int) -> None:
        with self._lock:
            np.add(
                self._f32(lhs, num_elements),
                self._f32(rhs, num_elements),
                out=self._f32(dst, num_elements),
            )

    def sub(self, lhs: int, rhs: int, dst: int, num_elements: int) -> None:
        with self._lock:
            np.subtract(
                self._f32(lhs, num_elements),
                self._f32(rhs, num_elements),
                out=self._f32(dst, num_elements),
            )

    def mul(self, lhs: int, rhs: int, dst: int, num_elements: int) -> None:
        with self._lock:
            np.multiply(
                self._f32(lhs, num_elements),
                self._f32(rhs, num_elements),
                out=self._f32(dst, num_elements),
            )

    def div(self, lhs: int, rhs: int, dst: int, num_elements: int) -> None:
        """
        Elementwise division with IEEE semantics (x/0 gives +-inf or NaN).

        Emits a `RuntimeWarning` when the result contains non-finite values
        and ``LAZYGRAD_WARN_NONFINITE`` is on.
        """
        with self._lock:
            out = self._f32(dst, num_elements)
            with np.errstate(divide="ignore", invalid="ignore"):
                np.divide(
                    self._f32(lhs, num_elements),
                    self._f32(rhs, num_elements),
                    out=out,
                )
            nonfinite = not bool(np.all(np.isfinite(out)))
        if nonfinite and warn_nonfinite_enabled():
            warnings.warn(
                "Elementwise division produced non-finite values.",
                RuntimeWarning,
                stacklevel=2,
            )

    def neg(self, src: int, dst: int, num_elements: int) -> None:
        with self._lock:
            np.negative(self._f32(src, num_elements), out=self._f32(dst, num_elements))

    def _f32(self, handle: int, num_elements: int) -> np.ndarray:
        # Caller holds the lock.
        block = self._memory[handle]
        return block[: num_elements * _F32.itemsize].view(_F32)
