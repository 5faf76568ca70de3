"""Port interfaces for the scenario sensitivity risk model.

Ports define abstract interfaces that adapters must implement.
Following hexagonal architecture, core depends only on ports.
"""

from src.core.ports.fx_port import FxRateNotFoundError, FxRateProvider
from src.core.ports.sensitivity_port import (
    SensitivityCalculationError,
    SensitivityPort,
)

__all__ = [
    # FxRateProvider
    "FxRateProvider",
    "FxRateNotFoundError",
    # SensitivityPort
    "SensitivityPort",
    "SensitivityCalculationError",
]
