"""FxRateProvider Protocol - Abstract interface for foreign exchange rates.

Currency conversion of sensitivities asks this port for one rate per
currency pair; the arithmetic itself stays in the domain objects.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from src.core.domain.currency import Currency


@runtime_checkable
class FxRateProvider(Protocol):
    """Abstract interface for FX rate lookup.

    Implementations:
    - FxRateTableAdapter: Rates from a pandas quote table
    - StubFxRateProvider: Test stub for unit testing
    """

    def fx_rate(self, base: "Currency", counter: "Currency") -> float:
        """Return the rate converting one unit of base into counter.

        Args:
            base: Currency to convert from
            counter: Currency to convert to

        Returns:
            Amount of counter per unit of base (1.0 when base == counter)

        Raises:
            FxRateNotFoundError: If no rate is available for the pair
        """
        ...


class FxRateNotFoundError(Exception):
    """Raised when no FX rate is available for a currency pair."""

    def __init__(self, base: "Currency", counter: "Currency") -> None:
        self.base = base
        self.counter = counter
        super().__init__(f"No FX rate available for {base}/{counter}")
