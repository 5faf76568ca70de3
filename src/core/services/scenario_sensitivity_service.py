"""ScenarioSensitivityService - Domain service for per-scenario sensitivity runs.

This service coordinates:
1. Sensitivity calculation for each scenario, in scenario order
2. Conversion to a reporting currency (optional)
3. Consistency gates against surface metadata (optional)
4. Per-scenario summary table
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pandas as pd

from src.core.domain.currency import Currency
from src.core.domain.scenario_array import ScenarioSensitivityArray
from src.core.domain.validation import InvalidArgumentError, require_positive
from src.core.quality_gates import GateStatus, QualityGateReport, create_default_runner
from src.logging_config import get_logger

if TYPE_CHECKING:
    from src.core.domain.sensitivity import CurrencyParameterSensitivities
    from src.core.domain.surface_metadata import SurfaceMetadata
    from src.core.ports.fx_port import FxRateProvider
    from src.core.ports.sensitivity_port import SensitivityPort

logger = get_logger(__name__)

SUMMARY_COLUMNS = ["scenario", "market_data_name", "currency", "parameter_count", "total"]


@dataclass(frozen=True)
class ScenarioSensitivityRequest:
    """Request parameters for a scenario sensitivity run.

    Attributes:
        scenario_count: Number of scenarios to evaluate (must be positive)
        reporting_currency: Convert every bundle to this currency (optional)
        surface_metadata: Metadata to cross-check parameter counts (optional)
    """

    scenario_count: int
    reporting_currency: Currency | None = None
    surface_metadata: "SurfaceMetadata | None" = None

    def __post_init__(self) -> None:
        """Normalise a currency code to a Currency."""
        if self.reporting_currency is not None:
            object.__setattr__(self, "reporting_currency", Currency.of(self.reporting_currency))


@dataclass
class ScenarioSensitivityResponse:
    """Response from a scenario sensitivity run.

    Attributes:
        array: One sensitivity bundle per scenario
        summary_df: Total sensitivity per scenario, curve and currency
        gate_report: Consistency gate outcome
        warnings: Gate findings that did not pass
    """

    array: ScenarioSensitivityArray["CurrencyParameterSensitivities"]
    summary_df: pd.DataFrame
    gate_report: QualityGateReport
    warnings: list[str] = field(default_factory=list)


class ScenarioSensitivityService:
    """Builds the scenario sensitivity array from a valuation collaborator."""

    def __init__(
        self,
        sensitivity_port: "SensitivityPort",
        fx_port: "FxRateProvider | None" = None,
    ) -> None:
        """Initialize ScenarioSensitivityService.

        Args:
            sensitivity_port: Computes the sensitivities of one scenario
            fx_port: FX rates, required for currency conversion
        """
        self._sensitivity_port = sensitivity_port
        self._fx_port = fx_port

    def run(self, request: ScenarioSensitivityRequest) -> ScenarioSensitivityResponse:
        """Execute a scenario sensitivity run.

        Args:
            request: Run parameters

        Returns:
            ScenarioSensitivityResponse with the array, summary and gate report

        Raises:
            InvalidArgumentError: If scenario_count is not positive, or a
                reporting currency is requested without an FX port
            SensitivityCalculationError: Propagated from the sensitivity port
        """
        require_positive(request.scenario_count, "scenario_count")
        if request.reporting_currency is not None and self._fx_port is None:
            raise InvalidArgumentError(
                f"Conversion to {request.reporting_currency} requires an FX rate provider"
            )

        log = logger.bind(scenario_count=request.scenario_count)
        log.info("Scenario sensitivity run started")

        # Step 1: One calculation per scenario, strictly in index order
        array = ScenarioSensitivityArray.of_size(
            request.scenario_count,
            self._sensitivity_port.calculate_sensitivities,
        )

        # Step 2: Currency conversion (optional)
        if request.reporting_currency is not None:
            array = array.converted_to(request.reporting_currency, self._fx_port)
            log = log.bind(currency=request.reporting_currency.code)
            log.info("Sensitivities converted")

        # Step 3: Consistency gates
        runner = create_default_runner(
            array,
            surface_metadata=request.surface_metadata,
            expected_count=request.scenario_count,
            currency=request.reporting_currency,
        )
        gate_report = runner.run_all(metadata={"scenario_count": request.scenario_count})

        warnings: list[str] = []
        for gate in gate_report.gates:
            if gate.status in (GateStatus.PASS, GateStatus.SKIP):
                continue
            warnings.append(f"{gate.name}: {gate.message}")
            log.warning("Consistency gate did not pass", gate=gate.name, status=gate.status.value)

        summary_df = build_summary_df(array)

        log.info(
            "Scenario sensitivity run finished",
            gate_status=gate_report.overall_status.value,
            rows=len(summary_df),
        )
        return ScenarioSensitivityResponse(
            array=array,
            summary_df=summary_df,
            gate_report=gate_report,
            warnings=warnings,
        )


def build_summary_df(
    array: ScenarioSensitivityArray["CurrencyParameterSensitivities"],
) -> pd.DataFrame:
    """Return total sensitivity per scenario, market data name and currency."""
    rows = [
        {
            "scenario": index,
            "market_data_name": entry.market_data_name,
            "currency": entry.currency.code,
            "parameter_count": entry.parameter_count,
            "total": entry.total(),
        }
        for index, bundle in enumerate(array.stream())
        for entry in bundle
    ]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
