"""Unit tests for FxRateTableAdapter."""

from pathlib import Path

import pandas as pd
import pytest

from src.adapters.fx_rate_adapter import FxRateTableAdapter
from src.core.domain.currency import CHF, EUR, GBP, JPY, USD, Currency, CurrencyPair
from src.core.ports.fx_port import FxRateNotFoundError, FxRateProvider


@pytest.fixture
def adapter() -> FxRateTableAdapter:
    """EUR/USD, GBP/USD and USD/JPY quotes."""
    return FxRateTableAdapter.from_mapping(
        {"EUR/USD": 1.10, "GBP/USD": 1.25, "USD/JPY": 150.0}
    )


class TestFxRateTableAdapter:
    """Test rate lookup."""

    def test_satisfies_protocol(self, adapter: FxRateTableAdapter) -> None:
        """The adapter should satisfy FxRateProvider."""
        assert isinstance(adapter, FxRateProvider)

    def test_direct_rate(self, adapter: FxRateTableAdapter) -> None:
        """A quoted pair returns its rate."""
        assert adapter.fx_rate(EUR, USD) == pytest.approx(1.10)

    def test_inverse_rate(self, adapter: FxRateTableAdapter) -> None:
        """The reverse of a quoted pair returns the reciprocal."""
        assert adapter.fx_rate(USD, EUR) == pytest.approx(1 / 1.10)

    def test_same_currency(self, adapter: FxRateTableAdapter) -> None:
        """A currency converts to itself at one."""
        assert adapter.fx_rate(CHF, CHF) == 1.0

    def test_cross_rate(self, adapter: FxRateTableAdapter) -> None:
        """Two quotes against USD are crossed."""
        assert adapter.fx_rate(EUR, GBP) == pytest.approx(1.10 / 1.25)
        assert adapter.fx_rate(EUR, JPY) == pytest.approx(1.10 * 150.0)

    def test_accepts_codes(self, adapter: FxRateTableAdapter) -> None:
        """Plain currency codes are accepted."""
        assert adapter.fx_rate("gbp", "usd") == pytest.approx(1.25)

    def test_missing_rate_raises(self, adapter: FxRateTableAdapter) -> None:
        """A pair that cannot be reached raises FxRateNotFoundError."""
        with pytest.raises(FxRateNotFoundError, match="CHF/EUR") as exc_info:
            adapter.fx_rate(CHF, EUR)

        assert exc_info.value.base == CHF
        assert exc_info.value.counter == EUR

    def test_custom_triangulation_currency(self) -> None:
        """Crosses use the configured currency."""
        adapter = FxRateTableAdapter.from_mapping(
            {"EUR/CHF": 0.95, "GBP/EUR": 1.15}, triangulation_currency=EUR
        )

        assert adapter.fx_rate(GBP, CHF) == pytest.approx(1.15 * 0.95)

    def test_pairs(self, adapter: FxRateTableAdapter) -> None:
        """pairs lists the quoted pairs."""
        assert CurrencyPair(EUR, USD) in adapter.pairs
        assert len(adapter.pairs) == 3


class TestFxRateTableAdapterValidation:
    """Test quote table validation."""

    def test_missing_columns_raise(self) -> None:
        """The table needs base, counter and rate columns."""
        with pytest.raises(ValueError, match="missing columns"):
            FxRateTableAdapter(pd.DataFrame({"base": ["EUR"], "rate": [1.1]}))

    @pytest.mark.parametrize("rate", [0.0, -1.1])
    def test_non_positive_rate_raises(self, rate: float) -> None:
        """Rates must be positive."""
        quotes = pd.DataFrame({"base": ["EUR"], "counter": ["USD"], "rate": [rate]})

        with pytest.raises(ValueError, match="positive"):
            FxRateTableAdapter(quotes)

    def test_missing_rate_value_raises(self) -> None:
        """Empty or NaN rates are rejected."""
        quotes = pd.DataFrame(
            {"base": ["EUR", "GBP"], "counter": ["USD", "USD"], "rate": [1.1, float("nan")]}
        )

        with pytest.raises(ValueError, match="missing rates"):
            FxRateTableAdapter(quotes)

    def test_from_csv_blank_rate_raises(self, tmp_path: Path) -> None:
        """A blank rate cell in the CSV is rejected."""
        csv_path = tmp_path / "rates.csv"
        csv_path.write_text("base,counter,rate\nEUR,USD,\n")

        with pytest.raises(ValueError, match="missing rates"):
            FxRateTableAdapter.from_csv(csv_path)

    def test_from_csv(self, tmp_path: Path) -> None:
        """Quotes should load from CSV."""
        csv_path = tmp_path / "rates.csv"
        csv_path.write_text("base,counter,rate\nEUR,USD,1.08\nUSD,JPY,151.5\n")

        adapter = FxRateTableAdapter.from_csv(csv_path)

        assert adapter.fx_rate(Currency("EUR"), USD) == pytest.approx(1.08)
        assert adapter.fx_rate(JPY, EUR) == pytest.approx(1 / (1.08 * 151.5))
