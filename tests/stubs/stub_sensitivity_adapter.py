"""StubSensitivityAdapter - Test stub implementations of the valuation ports.

These stubs produce deterministic sensitivities and FX rates in memory so the
service can be tested without a pricing library.
"""

from __future__ import annotations

from src.core.domain.currency import EUR, USD, Currency
from src.core.domain.parameter_metadata import SurfaceParameterMetadata
from src.core.domain.sensitivity import (
    CurrencyParameterSensitivities,
    CurrencyParameterSensitivity,
)
from src.core.domain.value_type import STRIKE, YEAR_FRACTION
from src.core.ports.fx_port import FxRateNotFoundError
from src.core.ports.sensitivity_port import SensitivityCalculationError

SURFACE_NAME = "EUR-Vol"
CURVE_NAME = "USD-Disc"

SURFACE_NODES = [
    SurfaceParameterMetadata(1.0, 0.01, YEAR_FRACTION, STRIKE),
    SurfaceParameterMetadata(1.0, 0.02, YEAR_FRACTION, STRIKE),
    SurfaceParameterMetadata(2.0, 0.01, YEAR_FRACTION, STRIKE),
]


class StubSensitivityAdapter:
    """In-memory test stub for SensitivityPort.

    Scenario i has a EUR surface sensitivity of (i+1) * [1, 2, 3] and a USD
    curve sensitivity of [10, 20] shifted by i. Every call is recorded.
    """

    def __init__(self, failing_index: int | None = None) -> None:
        """Initialize stub.

        Args:
            failing_index: Scenario index that raises SensitivityCalculationError
        """
        self.calls: list[int] = []
        self._failing_index = failing_index

    def calculate_sensitivities(self, scenario_index: int) -> CurrencyParameterSensitivities:
        """Return deterministic sensitivities for a scenario."""
        self.calls.append(scenario_index)
        if scenario_index == self._failing_index:
            raise SensitivityCalculationError(scenario_index, "stub failure")

        factor = scenario_index + 1
        return CurrencyParameterSensitivities.of(
            [
                CurrencyParameterSensitivity.of(
                    SURFACE_NAME,
                    EUR,
                    [1.0 * factor, 2.0 * factor, 3.0 * factor],
                    SURFACE_NODES,
                ),
                CurrencyParameterSensitivity.of(
                    CURVE_NAME,
                    USD,
                    [10.0 + scenario_index, 20.0 + scenario_index],
                ),
            ]
        )


class StubFxRateProvider:
    """In-memory test stub for FxRateProvider."""

    def __init__(self, rates: dict[tuple[str, str], float]) -> None:
        """Initialize stub with {("EUR", "USD"): 1.1, ...}."""
        self._rates = rates
        self.calls: list[tuple[str, str]] = []

    def fx_rate(self, base: Currency, counter: Currency) -> float:
        """Return the direct or inverse rate for the pair."""
        self.calls.append((base.code, counter.code))
        if base == counter:
            return 1.0
        if (base.code, counter.code) in self._rates:
            return self._rates[(base.code, counter.code)]
        if (counter.code, base.code) in self._rates:
            return 1.0 / self._rates[(counter.code, base.code)]
        raise FxRateNotFoundError(base, counter)
