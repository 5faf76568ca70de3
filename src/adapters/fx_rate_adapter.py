"""FxRateTableAdapter - FxRateProvider backed by a pandas quote table.

Rates are looked up directly, through the inverse quote, or crossed through a
triangulation currency (USD by default).
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

import pandas as pd

from src.core.domain.currency import USD, Currency, CurrencyPair
from src.core.ports.fx_port import FxRateNotFoundError

QUOTE_COLUMNS = ["base", "counter", "rate"]


class FxRateTableAdapter:
    """FX rates from a table with columns base, counter, rate.

    Implements FxRateProvider. A row (EUR, USD, 1.10) means one EUR buys
    1.10 USD.
    """

    def __init__(
        self,
        quotes: pd.DataFrame,
        triangulation_currency: Currency = USD,
    ) -> None:
        """Initialize FxRateTableAdapter.

        Args:
            quotes: DataFrame with columns base, counter, rate
            triangulation_currency: Currency used to cross two quotes

        Raises:
            ValueError: If columns are missing or a rate is missing or not positive
        """
        missing = [c for c in QUOTE_COLUMNS if c not in quotes.columns]
        if missing:
            raise ValueError(f"FX quote table is missing columns: {missing}")

        rates = quotes[QUOTE_COLUMNS].copy()
        rates["rate"] = rates["rate"].astype(float)
        if rates["rate"].isna().any():
            raise ValueError("FX quote table has missing rates")
        if (rates["rate"] <= 0).any():
            raise ValueError("FX rates must be positive")

        self._rates: dict[CurrencyPair, float] = {
            CurrencyPair(Currency.of(row.base), Currency.of(row.counter)): row.rate
            for row in rates.itertuples(index=False)
        }
        self._triangulation = triangulation_currency

    @classmethod
    def from_mapping(
        cls,
        rates: Mapping[str, float],
        triangulation_currency: Currency = USD,
    ) -> "FxRateTableAdapter":
        """Create from {"EUR/USD": 1.10, ...}."""
        rows = []
        for pair_text, rate in rates.items():
            pair = CurrencyPair.parse(pair_text)
            rows.append({"base": pair.base.code, "counter": pair.counter.code, "rate": rate})
        return cls(pd.DataFrame(rows, columns=QUOTE_COLUMNS), triangulation_currency)

    @classmethod
    def from_csv(
        cls,
        path: str | Path,
        triangulation_currency: Currency = USD,
    ) -> "FxRateTableAdapter":
        """Load quotes from a CSV file with columns base, counter, rate."""
        return cls(pd.read_csv(path), triangulation_currency)

    @property
    def pairs(self) -> list[CurrencyPair]:
        """Return the quoted pairs."""
        return list(self._rates)

    def fx_rate(self, base: Currency, counter: Currency) -> float:
        """Return the amount of counter per unit of base.

        Raises:
            FxRateNotFoundError: If neither a direct, inverse nor crossed rate exists
        """
        base = Currency.of(base)
        counter = Currency.of(counter)
        if base == counter:
            return 1.0

        rate = self._direct_rate(base, counter)
        if rate is not None:
            return rate

        via = self._triangulation
        if via not in (base, counter):
            first = self._direct_rate(base, via)
            second = self._direct_rate(via, counter)
            if first is not None and second is not None:
                return first * second

        raise FxRateNotFoundError(base, counter)

    def _direct_rate(self, base: Currency, counter: Currency) -> float | None:
        pair = CurrencyPair(base, counter)
        if pair in self._rates:
            return self._rates[pair]
        inverse = pair.inverse()
        if inverse in self._rates:
            return 1.0 / self._rates[inverse]
        return None
