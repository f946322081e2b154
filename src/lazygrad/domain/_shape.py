"""
Shape descriptor for lazygrad arrays.

A `Shape` is an immutable ordered sequence of non-negative dimension sizes.
Rank 0 denotes a scalar. The only compatibility rule between two shapes is
structural equality (no broadcasting).
"""

from __future__ import annotations

import operator
from typing import Iterable, Iterator, Tuple

from ._errors import ShapeMismatchError


class Shape:
    """
    Immutable dimension descriptor.

    Parameters
    ----------
    dims : Iterable[int]
        Dimension sizes. Every entry must be a non-negative integer; zero is
        allowed and produces a zero-element shape.

    Raises
    ------
    ShapeMismatchError
        If any dimension is negative or not an integer.
    """

    __slots__ = ("_dims",)

    def __init__(self, dims: Iterable[int] = ()) -> None:
        normalized = []
        for d in dims:
            # bool is an int subclass but never a meaningful dimension
            if isinstance(d, bool) or not hasattr(d, "__index__"):
                raise ShapeMismatchError(
                    f"Shape dimensions must be integers, got {d!r}."
                )
            d = operator.index(d)
            if d < 0:
                raise ShapeMismatchError(
                    f"Shape dimensions must be non-negative, got {d}."
                )
            normalized.append(d)
        self._dims: Tuple[int, ...] = tuple(normalized)

    @classmethod
    def scalar(cls) -> "Shape":
        """Return the rank-0 shape."""
        return cls(())

    @property
    def dims(self) -> Tuple[int, ...]:
        """Dimension sizes as a tuple."""
        return self._dims

    @property
    def rank(self) -> int:
        """Number of dimensions."""
        return len(self._dims)

    def is_scalar(self) -> bool:
        return not self._dims

    def num_elements(self) -> int:
        """
        Return the number of elements described by this shape.

        The empty product is 1, so a scalar has exactly one element.
        """
        n = 1
        for d in self._dims:
            n *= d
        return n

    def elementwise(self, other: "Shape") -> "Shape":
        """
        Return the common shape for an elementwise operation with `other`.

        Parameters
        ----------
        other : Shape
            Shape of the other operand.

        Returns
        -------
        Shape
            `self` when both shapes are structurally equal.

        Raises
        ------
        ShapeMismatchError
            If the shapes are not equal.
        """
        if self != other:
            raise ShapeMismatchError(
                f"Shapes {self} and {other} are not elementwise-compatible.",
                (self, other),
            )
        return self

    def __len__(self) -> int:
        return len(self._dims)

    def __iter__(self) -> Iterator[int]:
        return iter(self._dims)

    def __getitem__(self, index: int) -> int:
        return self._dims[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self._dims == other._dims

    def __hash__(self) -> int:
        return hash(self._dims)

    def __str__(self) -> str:
        return "[" + ", ".join(str(d) for d in self._dims) + "]"

    def __repr__(self) -> str:
        return f"Shape({list(self._dims)})"
