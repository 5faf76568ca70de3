"""Domain objects for the scenario sensitivity risk model.

This module exports all domain objects representing core business entities.
These are pure domain objects with invariant validation - no I/O dependencies.
"""

from src.core.domain.currency import CHF, EUR, GBP, JPY, USD, Currency, CurrencyPair
from src.core.domain.day_count import DayCount
from src.core.domain.parameter_metadata import (
    ParameterMetadata,
    SurfaceParameterMetadata,
    parameter_metadata_from_dict,
)
from src.core.domain.scenario_array import (
    CurrencyParameterSensitivitiesScenarioArray,
    ScenarioSensitivityArray,
    sensitivities_array_from_dict,
    sensitivities_array_to_dict,
)
from src.core.domain.sensitivity import (
    CurrencyParameterSensitivities,
    CurrencyParameterSensitivity,
)
from src.core.domain.surface_metadata import (
    DefaultSurfaceMetadata,
    SurfaceMetadata,
    SurfaceName,
    surface_metadata_from_dict,
)
from src.core.domain.validation import (
    IndexOutOfRangeError,
    InvalidArgumentError,
    UnsupportedMutationError,
)
from src.core.domain.value_type import ValueType

__all__ = [
    # Errors
    "InvalidArgumentError",
    "IndexOutOfRangeError",
    "UnsupportedMutationError",
    # Value types and conventions
    "ValueType",
    "DayCount",
    "Currency",
    "CurrencyPair",
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "CHF",
    # Parameter metadata
    "ParameterMetadata",
    "SurfaceParameterMetadata",
    "parameter_metadata_from_dict",
    # SurfaceMetadata
    "SurfaceMetadata",
    "SurfaceName",
    "DefaultSurfaceMetadata",
    "surface_metadata_from_dict",
    # Sensitivities
    "CurrencyParameterSensitivity",
    "CurrencyParameterSensitivities",
    # ScenarioSensitivityArray
    "ScenarioSensitivityArray",
    "CurrencyParameterSensitivitiesScenarioArray",
    "sensitivities_array_to_dict",
    "sensitivities_array_from_dict",
]
