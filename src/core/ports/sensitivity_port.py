"""SensitivityPort Protocol - Abstract interface for scenario valuation.

The port computes the complete parameter sensitivity of a valuation under one
market scenario. The scenario sensitivity service calls it once per scenario,
in scenario order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from src.core.domain.sensitivity import CurrencyParameterSensitivities


@runtime_checkable
class SensitivityPort(Protocol):
    """Abstract interface for per-scenario sensitivity calculation.

    Implementations:
    - StubSensitivityAdapter: Test stub for unit testing
    """

    def calculate_sensitivities(
        self,
        scenario_index: int,
    ) -> "CurrencyParameterSensitivities":
        """Calculate the parameter sensitivities for one scenario.

        Args:
            scenario_index: Zero-based scenario position (0 is the base case)

        Returns:
            All sensitivities for the scenario

        Raises:
            SensitivityCalculationError: If the valuation fails

        Post-conditions:
            - Returned value is immutable
        """
        ...


class SensitivityCalculationError(Exception):
    """Raised when the sensitivities of a scenario cannot be calculated."""

    def __init__(self, scenario_index: int, message: str) -> None:
        self.scenario_index = scenario_index
        super().__init__(f"Sensitivity calculation failed for scenario {scenario_index}: {message}")
