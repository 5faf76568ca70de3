"""Currency Domain Object - ISO-4217 style currency codes."""

from __future__ import annotations

import re
from dataclasses import dataclass

from src.core.domain.validation import InvalidArgumentError, require_not_none

CODE_PATTERN = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True)
class Currency:
    """A currency identified by a three letter code.

    Attributes:
        code: Upper-case code (e.g., "USD"); lower-case input is normalised
    """

    code: str

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        require_not_none(self.code, "code")
        normalised = str(self.code).strip().upper()
        if not CODE_PATTERN.match(normalised):
            raise InvalidArgumentError(
                f"Currency code must be three letters. Got: '{self.code}'"
            )
        object.__setattr__(self, "code", normalised)

    @classmethod
    def of(cls, code: "str | Currency") -> "Currency":
        """Return code as a Currency."""
        if isinstance(code, Currency):
            return code
        return cls(code)

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True)
class CurrencyPair:
    """An ordered pair of currencies, quoted as base/counter."""

    base: Currency
    counter: Currency

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        object.__setattr__(self, "base", Currency.of(require_not_none(self.base, "base")))
        object.__setattr__(
            self, "counter", Currency.of(require_not_none(self.counter, "counter"))
        )

    @classmethod
    def parse(cls, text: str) -> "CurrencyPair":
        """Parse "EUR/USD" into a pair."""
        parts = text.strip().split("/")
        if len(parts) != 2:
            raise InvalidArgumentError(f"Currency pair must be 'AAA/BBB'. Got: '{text}'")
        return cls(Currency.of(parts[0]), Currency.of(parts[1]))

    def inverse(self) -> "CurrencyPair":
        """Return the pair with base and counter swapped."""
        return CurrencyPair(self.counter, self.base)

    def is_identity(self) -> bool:
        """Return True if base and counter are the same currency."""
        return self.base == self.counter

    def __str__(self) -> str:
        return f"{self.base}/{self.counter}"


USD = Currency("USD")
EUR = Currency("EUR")
GBP = Currency("GBP")
JPY = Currency("JPY")
CHF = Currency("CHF")
