"""Consistency Gates - Cross-checks between surface metadata and scenario results.

Neither ``SurfaceMetadata`` nor ``ScenarioSensitivityArray`` knows about the
other. The gates here check by convention that they agree (parameter counts,
scenario counts, reporting currency) and collect the outcome in a
machine-readable report.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from src.core.domain.currency import Currency
    from src.core.domain.scenario_array import ScenarioSensitivityArray
    from src.core.domain.sensitivity import CurrencyParameterSensitivities
    from src.core.domain.surface_metadata import SurfaceMetadata


class GateStatus(Enum):
    """Status of a gate check."""

    PASS = "PASS"
    FAIL = "FAIL"
    WARN = "WARN"
    SKIP = "SKIP"
    ERROR = "ERROR"


@dataclass
class GateResult:
    """Result of a single gate check."""

    name: str
    status: GateStatus
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "details": self.details,
            "duration_ms": self.duration_ms,
        }


@dataclass
class QualityGateReport:
    """Complete gate run report."""

    timestamp: str
    overall_status: GateStatus
    gates: list[GateResult]
    summary: dict[str, int]
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "timestamp": self.timestamp,
            "overall_status": self.overall_status.value,
            "summary": self.summary,
            "gates": [g.to_dict() for g in self.gates],
            "metadata": self.metadata,
        }

    def save(self, path: str | Path) -> None:
        """Save report to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

    @property
    def failed(self) -> bool:
        """Return True if the overall status is FAIL."""
        return self.overall_status == GateStatus.FAIL


GateFunction = Callable[[], GateResult]


class QualityGateRunner:
    """Runner for executing gates and generating reports."""

    def __init__(self, artifacts_dir: str | Path = "artifacts") -> None:
        """Initialize gate runner.

        Args:
            artifacts_dir: Directory for output artifacts
        """
        self._artifacts_dir = Path(artifacts_dir)
        self._gates: list[tuple[str, GateFunction]] = []

    @property
    def gate_names(self) -> list[str]:
        """Return registered gate names in run order."""
        return [name for name, _ in self._gates]

    def register(self, name: str, gate_fn: GateFunction) -> None:
        """Register a gate.

        Args:
            name: Gate name (for display)
            gate_fn: Function that returns GateResult
        """
        self._gates.append((name, gate_fn))

    def run_all(self, metadata: dict[str, Any] | None = None) -> QualityGateReport:
        """Run all registered gates.

        A gate that raises is recorded with status ERROR.

        Args:
            metadata: Additional metadata to include in report

        Returns:
            Complete gate report
        """
        results: list[GateResult] = []
        summary = {
            "PASS": 0,
            "FAIL": 0,
            "WARN": 0,
            "SKIP": 0,
            "ERROR": 0,
        }

        for name, gate_fn in self._gates:
            start_time = datetime.now(timezone.utc)
            try:
                result = gate_fn()
                result.duration_ms = (
                    datetime.now(timezone.utc) - start_time
                ).total_seconds() * 1000
            except Exception as e:
                result = GateResult(
                    name=name,
                    status=GateStatus.ERROR,
                    message=f"Gate execution failed: {e}",
                    details={"exception": str(e)},
                )

            results.append(result)
            summary[result.status.value] += 1

        # Determine overall status
        if summary["FAIL"] > 0 or summary["ERROR"] > 0:
            overall = GateStatus.FAIL
        elif summary["WARN"] > 0:
            overall = GateStatus.WARN
        elif summary["PASS"] > 0:
            overall = GateStatus.PASS
        else:
            overall = GateStatus.SKIP

        return QualityGateReport(
            timestamp=datetime.now(timezone.utc).isoformat(),
            overall_status=overall,
            gates=results,
            summary=summary,
            metadata=metadata or {},
        )

    def run_and_save(
        self,
        output_file: str = "gates.json",
        metadata: dict[str, Any] | None = None,
    ) -> QualityGateReport:
        """Run all gates and save report to artifacts directory.

        Args:
            output_file: Output filename
            metadata: Additional metadata

        Returns:
            Gate report
        """
        report = self.run_all(metadata)
        report.save(self._artifacts_dir / output_file)
        return report


# =============================================================================
# Built-in Gates
# =============================================================================


def create_parameter_alignment_gate(
    surface_metadata: "SurfaceMetadata",
    array: "ScenarioSensitivityArray[CurrencyParameterSensitivities]",
) -> GateFunction:
    """Create a gate checking parameter metadata length against sensitivities.

    Every sensitivity entry named after the surface must have exactly one
    value per parameter descriptor.

    Args:
        surface_metadata: Metadata of the surface
        array: Scenario results to check

    Returns:
        Gate function
    """

    def check_alignment() -> GateResult:
        name = "Parameter Alignment"
        surface_name = str(surface_metadata.surface_name)
        params = surface_metadata.parameter_metadata

        if params is None:
            return GateResult(
                name=name,
                status=GateStatus.SKIP,
                message=f"Surface '{surface_name}' has no parameter metadata",
            )

        expected = len(params)
        matched = 0
        mismatches: list[dict[str, Any]] = []
        for index, bundle in enumerate(array.stream()):
            for entry in bundle:
                if entry.market_data_name != surface_name:
                    continue
                matched += 1
                if entry.parameter_count != expected:
                    mismatches.append(
                        {
                            "scenario": index,
                            "currency": entry.currency.code,
                            "parameter_count": entry.parameter_count,
                        }
                    )

        if matched == 0:
            return GateResult(
                name=name,
                status=GateStatus.WARN,
                message=f"No sensitivities found for surface '{surface_name}'",
                details={"expected_parameters": expected},
            )
        if mismatches:
            return GateResult(
                name=name,
                status=GateStatus.FAIL,
                message=(
                    f"{len(mismatches)} of {matched} sensitivities to '{surface_name}' "
                    f"do not have {expected} parameters"
                ),
                details={"expected_parameters": expected, "mismatches": mismatches[:20]},
            )
        return GateResult(
            name=name,
            status=GateStatus.PASS,
            message=f"{matched} sensitivities to '{surface_name}' have {expected} parameters",
            details={"expected_parameters": expected, "matched": matched},
        )

    return check_alignment


def create_scenario_count_gate(
    array: "ScenarioSensitivityArray[Any]",
    expected_count: int,
) -> GateFunction:
    """Create a gate checking the number of scenarios in an array.

    Returns:
        Gate function
    """

    def check_count() -> GateResult:
        actual = array.scenario_count
        if actual == expected_count:
            return GateResult(
                name="Scenario Count",
                status=GateStatus.PASS,
                message=f"{actual} scenarios",
            )
        return GateResult(
            name="Scenario Count",
            status=GateStatus.FAIL,
            message=f"Expected {expected_count} scenarios, found {actual}",
            details={"expected": expected_count, "actual": actual},
        )

    return check_count


def create_currency_gate(
    array: "ScenarioSensitivityArray[CurrencyParameterSensitivities]",
    currency: "Currency",
) -> GateFunction:
    """Create a gate checking every sensitivity is in the reporting currency.

    Returns:
        Gate function
    """

    def check_currency() -> GateResult:
        offending = sorted(
            {
                entry.currency.code
                for bundle in array.stream()
                for entry in bundle
                if entry.currency != currency
            }
        )
        if offending:
            return GateResult(
                name="Reporting Currency",
                status=GateStatus.FAIL,
                message=f"Sensitivities not in {currency}: {offending}",
                details={"currencies": offending},
            )
        return GateResult(
            name="Reporting Currency",
            status=GateStatus.PASS,
            message=f"All sensitivities in {currency}",
        )

    return check_currency


def create_default_runner(
    array: "ScenarioSensitivityArray[CurrencyParameterSensitivities]",
    surface_metadata: "SurfaceMetadata | None" = None,
    expected_count: int | None = None,
    currency: "Currency | None" = None,
    artifacts_dir: str | Path = "artifacts",
) -> QualityGateRunner:
    """Create a runner with the gates that apply to the given inputs.

    Returns:
        Configured QualityGateRunner
    """
    runner = QualityGateRunner(artifacts_dir)
    if surface_metadata is not None:
        runner.register("alignment", create_parameter_alignment_gate(surface_metadata, array))
    if expected_count is not None:
        runner.register("scenario_count", create_scenario_count_gate(array, expected_count))
    if currency is not None:
        runner.register("currency", create_currency_gate(array, currency))
    return runner
