"""
Device memory ownership.

This module defines `Buffer`, the sole owner of one device allocation. A
buffer is bound to the hardware that allocated it for its entire life and
releases its handle through that same hardware exactly once, either on an
explicit `release()` or when the buffer is garbage-collected, whichever
comes first.

Design notes
------------
- Deallocation is registered with `weakref.finalize` rather than `__del__`:
  the finalizer runs at most once and captures only the hardware, handle
  and size (never the buffer itself). It never raises; an explicit
  `release()` detaches it and deallocates directly.
- Buffers are never implicitly duplicated. A copy is always a new allocation
  followed by a device-side transfer (see `Array.clone`).
- Locking is the hardware's concern: allocate/deallocate each take the
  hardware lock for the duration of that single call.
"""

from __future__ import annotations

import weakref
from typing import Any

from ..domain._hardware import IHardware


def _deallocate_quietly(hardware: IHardware, handle: Any, size: int) -> None:
    # Garbage-collection path; at interpreter shutdown modules may be None.
    try:
        hardware.deallocate(handle, size)
    except Exception:
        # Never raise in finalizers
        pass


class Buffer:
    """
    Exclusive owner of one device memory region.

    Parameters
    ----------
    hardware : IHardware
        Hardware that allocates and later deallocates the memory.
    size : int
        Size of the region in bytes.

    Notes
    -----
    Contents are uninitialized after construction; the creator must write
    them before the buffer is read.
    """

    __slots__ = ("_hardware", "_size", "_handle", "_finalizer", "__weakref__")

    def __init__(self, hardware: IHardware, size: int) -> None:
        size = int(size)
        if size < 0:
            raise ValueError(f"Buffer size must be non-negative, got {size}.")
        self._hardware = hardware
        self._size = size
        self._handle = hardware.allocate(size)
        self._finalizer = weakref.finalize(
            self, _deallocate_quietly, hardware, self._handle, size
        )

    @classmethod
    def colocated(cls, other: "Buffer", size: int) -> "Buffer":
        """
        Allocate a new buffer of `size` bytes on the hardware of `other`.
        """
        return cls(other._hardware, size)

    @property
    def hardware(self) -> IHardware:
        return self._hardware

    @property
    def size(self) -> int:
        return self._size

    @property
    def handle(self) -> Any:
        """
        Device handle owned by this buffer.

        Raises
        ------
        RuntimeError
            If the buffer was already released.
        """
        if not self._finalizer.alive:
            raise RuntimeError("Buffer has already been released.")
        return self._handle

    @property
    def released(self) -> bool:
        return not self._finalizer.alive

    def release(self) -> None:
        """
        Deallocate the device memory now.

        Calling this more than once is a no-op; the hardware sees exactly one
        deallocation per buffer. Unlike the garbage-collection path, errors
        raised by the hardware propagate to the caller.
        """
        if self._finalizer.detach() is not None:
            self._hardware.deallocate(self._handle, self._size)

    def __repr__(self) -> str:
        state = "released" if self.released else f"handle={self._handle!r}"
        return f"Buffer(hardware={self._hardware!r}, size={self._size}, {state})"
