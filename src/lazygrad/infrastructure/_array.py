"""
Materialized array values.

An `Array` is an immutable value object made of a `Shape`, a reference to the
hardware holding its data, and the `Buffer` owning that data. Elements are
32-bit floats laid out contiguously.

Arrays are produced by operators (and by the constant factories used to
build constant operators). Cloning always performs a real device-side copy
into a new buffer; an array never aliases another array's memory.

Host readback (`to_scalar`, `get_values`, `to_numpy`) is meant for the
boundary of the engine only, not for use inside graph evaluation.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Union

import numpy as np

from ..domain._errors import ShapeMismatchError
from ..domain._hardware import IHardware, check_same_hardware
from ..domain._shape import Shape
from ._buffer import Buffer

Number = Union[int, float]

ELEMENT_SIZE = np.dtype(np.float32).itemsize
"""Size in bytes of one array element (float32)."""


def _as_shape(shape: Union[Shape, Iterable[int]]) -> Shape:
    return shape if isinstance(shape, Shape) else Shape(shape)


class Array:
    """
    Immutable float32 array bound to one hardware instance.

    Parameters
    ----------
    shape : Shape
        Array shape.
    buffer : Buffer
        Buffer holding exactly ``shape.num_elements() * 4`` bytes. Ownership is
        transferred to the array.

    Notes
    -----
    Use the factories (`constant`, `scalar`, `from_values`) rather than the
    constructor; the constructor does not initialize memory.
    """

    __slots__ = ("_shape", "_buffer")

    def __init__(self, shape: Shape, buffer: Buffer) -> None:
        expected = shape.num_elements() * ELEMENT_SIZE
        if buffer.size != expected:
            raise ValueError(
                f"Buffer size {buffer.size} does not match shape {shape} "
                f"({expected} bytes)."
            )
        self._shape = shape
        self._buffer = buffer

    # ------------------------------------------------------------------
    # factories
    # ------------------------------------------------------------------
    @classmethod
    def _raw(cls, hardware: IHardware, shape: Shape) -> "Array":
        return cls(shape, Buffer(hardware, shape.num_elements() * ELEMENT_SIZE))

    @classmethod
    def constant(
        cls,
        hardware: IHardware,
        shape: Union[Shape, Iterable[int]],
        value: Number,
    ) -> "Array":
        """
        Create an array whose every element equals `value`.

        Parameters
        ----------
        hardware : IHardware
            Hardware to allocate on.
        shape : Shape or Iterable[int]
            Target shape. Zero-sized dimensions are allowed.
        value : Number
            Fill value.

        Returns
        -------
        Array
            A newly allocated array.
        """
        shape = _as_shape(shape)
        out = cls._raw(hardware, shape)
        hardware.fill(out._buffer.handle, shape.num_elements(), float(value))
        return out

    fill = constant

    @classmethod
    def scalar(cls, hardware: IHardware, value: Number) -> "Array":
        """Create a rank-0 array holding `value`."""
        return cls.constant(hardware, Shape.scalar(), value)

    @classmethod
    def from_values(
        cls,
        hardware: IHardware,
        shape: Union[Shape, Iterable[int]],
        values: Iterable[Number],
    ) -> "Array":
        """
        Create an array from host values in row-major order.

        Raises
        ------
        ShapeMismatchError
            If the number of values does not match the shape.
        """
        shape = _as_shape(shape)
        host = np.ascontiguousarray(np.asarray(values, dtype=np.float32).ravel())
        if host.size != shape.num_elements():
            raise ShapeMismatchError(
                f"Got {host.size} values for shape {shape} "
                f"({shape.num_elements()} elements).",
                (shape,),
            )
        out = cls._raw(hardware, shape)
        hardware.copy_host_to_hardware(
            host.tobytes(), out._buffer.handle, out._buffer.size
        )
        return out

    # ------------------------------------------------------------------
    # accessors
    # ------------------------------------------------------------------
    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def hardware(self) -> IHardware:
        """Hardware holding the data; compare with ``is``."""
        return self._buffer.hardware

    @property
    def buffer(self) -> Buffer:
        return self._buffer

    def clone(self) -> "Array":
        """
        Return a deep copy allocated on the same hardware.
        """
        dst = Buffer.colocated(self._buffer, self._buffer.size)
        self.hardware.copy_hardware_to_hardware(
            self._buffer.handle, dst.handle, self._buffer.size
        )
        return type(self)(self._shape, dst)

    def release(self) -> None:
        """Deallocate the underlying buffer now."""
        self._buffer.release()

    # ------------------------------------------------------------------
    # host readback
    # ------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        """
        Copy the contents to a new host ``float32`` ndarray of this shape.
        """
        raw = self.hardware.copy_hardware_to_host(
            self._buffer.handle, self._buffer.size
        )
        return np.frombuffer(raw, dtype=np.float32).reshape(self._shape.dims).copy()

    def get_values(self) -> List[float]:
        """Return every element as a flat list in row-major order."""
        return [float(v) for v in self.to_numpy().ravel()]

    def to_scalar(self) -> float:
        """
        Return the single value of a rank-0 array.

        Raises
        ------
        ShapeMismatchError
            If the array is not a scalar.
        """
        if not self._shape.is_scalar():
            raise ShapeMismatchError(
                f"Cannot read a scalar from an array of shape {self._shape}.",
                (self._shape,),
            )
        return float(self.to_numpy())

    # ------------------------------------------------------------------
    # elementwise arithmetic
    # ------------------------------------------------------------------
    def _binary(
        self,
        other: "Array",
        kernel: Callable[[IHardware], Callable[..., None]],
    ) -> "Array":
        hardware = check_same_hardware([self.hardware, other.hardware])
        shape = self._shape.elementwise(other._shape)
        out = Array(shape, Buffer.colocated(self._buffer, self._buffer.size))
        kernel(hardware)(
            self._buffer.handle,
            other._buffer.handle,
            out._buffer.handle,
            shape.num_elements(),
        )
        return out

    def elementwise_add(self, other: "Array") -> "Array":
        return self._binary(other, lambda hw: hw.add)

    def elementwise_sub(self, other: "Array") -> "Array":
        return self._binary(other, lambda hw: hw.sub)

    def elementwise_mul(self, other: "Array") -> "Array":
        return self._binary(other, lambda hw: hw.mul)

    def elementwise_div(self, other: "Array") -> "Array":
        return self._binary(other, lambda hw: hw.div)

    def elementwise_neg(self) -> "Array":
        out = Array(self._shape, Buffer.colocated(self._buffer, self._buffer.size))
        self.hardware.neg(
            self._buffer.handle, out._buffer.handle, self._shape.num_elements()
        )
        return out

    def __repr__(self) -> str:
        return f"Array(shape={self._shape}, hardware={self.hardware!r})"
