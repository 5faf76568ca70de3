"""ValueType Domain Object - Semantic tag for the values on a curve/surface axis.

A surface stores plain floats; the value type says whether an axis holds year
fractions, strikes, implied volatilities, and so on.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from src.core.domain.validation import InvalidArgumentError, require_not_blank

NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class ValueType:
    """Type of value held on one axis of a curve or surface.

    Attributes:
        name: Tag name (e.g., "YearFraction", "Strike")

    Invariants:
        - name starts with a letter and contains only letters, digits and '_'
    """

    name: str

    _KNOWN: ClassVar[dict[str, "ValueType"]] = {}

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        require_not_blank(self.name, "name")
        if not NAME_PATTERN.match(self.name):
            raise InvalidArgumentError(
                f"ValueType name must match {NAME_PATTERN.pattern}. Got: '{self.name}'"
            )

    @classmethod
    def of(cls, name: "str | ValueType") -> "ValueType":
        """Return the predefined value type for name, or a new one.

        Raises:
            InvalidArgumentError: If name is neither a string nor a ValueType
        """
        if isinstance(name, ValueType):
            return name
        if not isinstance(name, str):
            raise InvalidArgumentError(
                f"ValueType must be given as a name. Got: {type(name).__name__}"
            )
        known = cls._KNOWN.get(name)
        if known is not None:
            return known
        return cls(name)

    @classmethod
    def _register(cls, name: str) -> "ValueType":
        value_type = cls(name)
        cls._KNOWN[name] = value_type
        return value_type

    def check_equals(self, other: "ValueType", message: str) -> None:
        """Raise InvalidArgumentError if other is a different value type.

        Args:
            other: Value type to compare with
            message: Prefix for the error message
        """
        if self != other:
            raise InvalidArgumentError(f"{message}: expected {self}, got {other}")

    def __str__(self) -> str:
        return self.name


UNKNOWN = ValueType._register("Unknown")
YEAR_FRACTION = ValueType._register("YearFraction")
MONTHS = ValueType._register("Months")
STRIKE = ValueType._register("Strike")
LOG_MONEYNESS = ValueType._register("LogMoneyness")
SIMPLE_MONEYNESS = ValueType._register("SimpleMoneyness")
BLACK_VOLATILITY = ValueType._register("BlackVolatility")
NORMAL_VOLATILITY = ValueType._register("NormalVolatility")
ZERO_RATE = ValueType._register("ZeroRate")
DISCOUNT_FACTOR = ValueType._register("DiscountFactor")
PRICE_INDEX = ValueType._register("PriceIndex")
SPECIFIC_TIME = ValueType._register("SpecificTime")
