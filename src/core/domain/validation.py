"""Shared invariant checks for the immutable domain objects.

All checks raise synchronously; nothing here logs or recovers.
"""

from __future__ import annotations

import operator
from dataclasses import FrozenInstanceError
from typing import Any, Iterable, TypeVar

T = TypeVar("T")

# Frozen dataclasses raise this on any attribute assignment or deletion.
UnsupportedMutationError = FrozenInstanceError


class InvalidArgumentError(ValueError):
    """Raised when a required input is absent or a count is not positive."""


class IndexOutOfRangeError(IndexError):
    """Raised when an element index falls outside [0, size)."""

    def __init__(self, index: int, size: int) -> None:
        self.index = index
        self.size = size
        super().__init__(f"Index {index} is out of range for size {size}")


def require_not_none(value: T | None, name: str) -> T:
    """Return value, raising InvalidArgumentError if it is None."""
    if value is None:
        raise InvalidArgumentError(f"'{name}' must not be None")
    return value


def require_not_blank(value: str | None, name: str) -> str:
    """Return value, raising InvalidArgumentError if it is None or blank."""
    require_not_none(value, name)
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"'{name}' must not be empty. Got: {value!r}")
    return value


def require_positive(value: int, name: str) -> int:
    """Return value, raising InvalidArgumentError unless it is a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"'{name}' must be an integer. Got: {value!r}")
    if value <= 0:
        raise InvalidArgumentError(f"'{name}' must be greater than zero. Got: {value}")
    return value


def check_index(index: int, size: int) -> int:
    """Validate a zero-based index against a size.

    Any integer type is accepted (e.g., numpy.int64). Negative indexes are
    rejected rather than counted from the end.

    Raises:
        IndexOutOfRangeError: If index is outside [0, size)
    """
    if isinstance(index, bool):
        raise TypeError("Index must be an integer. Got: bool")
    try:
        index = operator.index(index)
    except TypeError:
        raise TypeError(f"Index must be an integer. Got: {type(index).__name__}") from None
    if index < 0 or index >= size:
        raise IndexOutOfRangeError(index, size)
    return index


def freeze_sequence(values: Iterable[Any] | None, name: str) -> tuple[Any, ...]:
    """Copy an ordered sequence into a tuple.

    The copy detaches the result from the caller's (possibly mutable) object.

    Raises:
        InvalidArgumentError: If values is None or is a string/mapping
    """
    require_not_none(values, name)
    if isinstance(values, (str, bytes, dict)):
        raise InvalidArgumentError(
            f"'{name}' must be an ordered sequence. Got: {type(values).__name__}"
        )
    return tuple(values)
