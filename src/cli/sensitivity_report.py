#!/usr/bin/env python3
"""Sensitivity Report CLI - Summarise a saved scenario sensitivity array.

Usage:
    python -m src.cli.sensitivity_report --array results.yaml
    python -m src.cli.sensitivity_report --array results.json --metadata surface.yaml

Examples:
    # Per-scenario totals
    python -m src.cli.sensitivity_report --array results.yaml

    # Convert to EUR and cross-check against the surface metadata
    python -m src.cli.sensitivity_report --array results.yaml \\
        --metadata surface.yaml --currency EUR --fx-rates rates.csv

    # Take defaults from a config file
    python -m src.cli.sensitivity_report --array results.yaml --config report.yaml
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from src.adapters.filesystem_adapter import ConfigurationError, FileSystemAdapter
from src.adapters.fx_rate_adapter import FxRateTableAdapter
from src.core.domain.currency import Currency
from src.core.ports.fx_port import FxRateNotFoundError
from src.core.quality_gates import create_default_runner
from src.core.services.scenario_sensitivity_service import build_summary_df
from src.logging_config import configure_logging, get_logger

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_GATE_FAILED = 2


@dataclass(frozen=True)
class ReportConfig:
    """Report settings; CLI flags override values from the config file.

    Attributes:
        reporting_currency: Convert sensitivities to this currency (optional)
        fx_rates_path: CSV with columns base, counter, rate
        output_dir: Directory for summary.csv and gates.json
        log_level: Logging level
        json_logs: Emit JSON log lines
    """

    reporting_currency: str | None = None
    fx_rates_path: str | None = None
    output_dir: str = "artifacts/sensitivities"
    log_level: str = "INFO"
    json_logs: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReportConfig":
        """Create ReportConfig from the "report" section of a config file.

        Raises:
            ValueError: If the section has unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown report settings: {unknown}")
        return cls(**data)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="Summarise per-scenario parameter sensitivities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--array", "-a",
        type=str,
        required=True,
        help="Path to a saved sensitivity array (YAML or JSON)",
    )

    parser.add_argument(
        "--metadata", "-m",
        type=str,
        help="Path to surface metadata (YAML or JSON) to cross-check parameter counts",
    )

    parser.add_argument(
        "--currency", "-c",
        type=str,
        help="Reporting currency (e.g., USD)",
    )

    parser.add_argument(
        "--fx-rates",
        type=str,
        help="CSV of FX quotes (columns: base, counter, rate)",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="YAML config file with a 'report' section",
    )

    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        help="Output directory (default: artifacts/sensitivities)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines",
    )

    return parser


def load_config(parsed: argparse.Namespace, adapter: FileSystemAdapter) -> ReportConfig:
    """Merge the config file (if any) with command line overrides."""
    config = ReportConfig()
    if parsed.config:
        data = adapter.load_yaml(parsed.config)
        config = ReportConfig.from_dict(data.get("report", {}))

    overrides: dict[str, Any] = {}
    if parsed.currency:
        overrides["reporting_currency"] = parsed.currency
    if parsed.fx_rates:
        overrides["fx_rates_path"] = parsed.fx_rates
    if parsed.output_dir:
        overrides["output_dir"] = parsed.output_dir
    if parsed.log_level:
        overrides["log_level"] = parsed.log_level
    if parsed.json_logs:
        overrides["json_logs"] = True
    return replace(config, **overrides)


def main(args: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        args: Command line arguments

    Returns:
        Exit code (0 success, 1 input error, 2 gate failure)
    """
    parser = create_parser()
    parsed = parser.parse_args(args)
    adapter = FileSystemAdapter()

    try:
        config = load_config(parsed, adapter)
    except (FileNotFoundError, ConfigurationError, ValueError, TypeError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    configure_logging(config.log_level, format_json=config.json_logs)
    logger = get_logger(__name__)

    try:
        array = adapter.load_sensitivities_array(parsed.array)
        metadata = adapter.load_surface_metadata(parsed.metadata) if parsed.metadata else None
        currency = (
            Currency.of(config.reporting_currency) if config.reporting_currency else None
        )
        if currency is not None:
            if not config.fx_rates_path:
                raise ValueError(f"Conversion to {currency} requires --fx-rates")
            fx_adapter = FxRateTableAdapter.from_csv(config.fx_rates_path)
            array = array.converted_to(currency, fx_adapter)
    except (FileNotFoundError, ConfigurationError, FxRateNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    logger.info("Sensitivity array loaded", path=parsed.array, scenario_count=array.scenario_count)

    runner = create_default_runner(
        array,
        surface_metadata=metadata,
        currency=currency,
        artifacts_dir=config.output_dir,
    )
    report = runner.run_and_save(
        "gates.json",
        metadata={"array": parsed.array, "metadata": parsed.metadata},
    )

    summary_df = build_summary_df(array)
    output_dir = Path(config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    summary_path = output_dir / "summary.csv"
    summary_df.to_csv(summary_path, index=False)

    # Print per-scenario totals
    print("\n" + "=" * 60)
    print(f"SCENARIO SENSITIVITIES ({array.scenario_count} scenarios)")
    print("=" * 60)
    print(f"{'Scenario':>8}  {'Market data':<24} {'Ccy':<4} {'Total':>18}")
    print("-" * 60)
    for row in summary_df.itertuples(index=False):
        print(f"{row.scenario:>8}  {row.market_data_name:<24} {row.currency:<4} {row.total:>18,.4f}")

    print("\n" + "=" * 60)
    print(f"CONSISTENCY GATES: {report.overall_status.value}")
    print("=" * 60)
    for gate in report.gates:
        print(f"  [{gate.status.value}] {gate.name}: {gate.message}")

    print(f"\nSummary saved to: {summary_path}")

    if report.failed:
        logger.warning("Consistency gates failed", summary=report.summary)
        return EXIT_GATE_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
