"""ScenarioSensitivityArray Domain Object - One sensitivity bundle per scenario.

A batch run evaluates a list of market scenarios and produces one sensitivity
bundle per scenario. The array keeps those bundles in scenario order
(index 0 is the first scenario, usually the base case) and is immutable once
built: a changed array is always a new instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, Iterable, Iterator, TypeVar

from src.core.domain.sensitivity import CurrencyParameterSensitivities
from src.core.domain.validation import (
    check_index,
    freeze_sequence,
    require_not_none,
    require_positive,
)

if TYPE_CHECKING:
    from src.core.domain.currency import Currency
    from src.core.ports.fx_port import FxRateProvider

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class ScenarioSensitivityArray(Generic[T]):
    """Ordered, fixed-length array of per-scenario sensitivity bundles.

    Attributes:
        sensitivities: One bundle per scenario, position = scenario index

    Invariants:
        - sensitivities is never None; it is copied into a tuple on construction
        - length is fixed at construction (scenario count)
        - equality and hashing are structural over the element sequence

    Elements are expected to be immutable values themselves.
    """

    sensitivities: tuple[T, ...]

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        object.__setattr__(
            self, "sensitivities", freeze_sequence(self.sensitivities, "sensitivities")
        )

    @classmethod
    def of(cls, sensitivities: Iterable[T]) -> "ScenarioSensitivityArray[T]":
        """Create an array from bundles in scenario order.

        Args:
            sensitivities: Ordered bundles, any length including zero

        Returns:
            New array holding a copy of the sequence

        Raises:
            InvalidArgumentError: If sensitivities is None
        """
        return cls(freeze_sequence(sensitivities, "sensitivities"))

    @classmethod
    def of_size(
        cls,
        size: int,
        value_function: Callable[[int], T],
    ) -> "ScenarioSensitivityArray[T]":
        """Create an array by calling a function for each scenario index.

        The function is called exactly once per index, from 0 to size - 1 in
        increasing order.

        Args:
            size: Number of scenarios, must be positive
            value_function: Maps a scenario index to its bundle

        Raises:
            InvalidArgumentError: If size is not positive or the function is None
        """
        require_positive(size, "size")
        require_not_none(value_function, "value_function")
        return cls.of([value_function(i) for i in range(size)])

    @classmethod
    def of_single_value(cls, size: int, value: T) -> "ScenarioSensitivityArray[T]":
        """Create an array holding the same bundle for every scenario.

        Raises:
            InvalidArgumentError: If size is not positive or value is None
        """
        require_positive(size, "size")
        require_not_none(value, "value")
        return cls.of([value] * size)

    @property
    def scenario_count(self) -> int:
        """Return the number of scenarios."""
        return len(self.sensitivities)

    def get(self, index: int) -> T:
        """Return the bundle for a scenario.

        Args:
            index: Zero-based scenario index

        Raises:
            IndexOutOfRangeError: If index is outside [0, scenario_count)
        """
        return self.sensitivities[check_index(index, self.scenario_count)]

    def stream(self) -> Iterator[T]:
        """Return a new lazy iterator over the bundles in scenario order."""
        return iter(self.sensitivities)

    def __iter__(self) -> Iterator[T]:
        return self.stream()

    def __len__(self) -> int:
        return self.scenario_count

    def map(self, function: Callable[[T], U]) -> "ScenarioSensitivityArray[U]":
        """Return a new array with function applied to each bundle in order."""
        return ScenarioSensitivityArray.of([function(value) for value in self.stream()])

    def converted_to(
        self,
        currency: "Currency | str",
        fx_provider: "FxRateProvider",
    ) -> "ScenarioSensitivityArray[T]":
        """Return a new array with every bundle converted to a currency.

        Each bundle must provide ``converted_to(currency, fx_provider)``.
        """
        return self.map(lambda value: value.converted_to(currency, fx_provider))

    def to_dict(self, encode: Callable[[T], Any]) -> dict[str, Any]:
        """Convert to dictionary for serialization.

        Args:
            encode: Converts one bundle to its serialized form
        """
        return {"sensitivities": [encode(value) for value in self.sensitivities]}

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        decode: Callable[[Any], T],
    ) -> "ScenarioSensitivityArray[T]":
        """Create an array from dictionary.

        Args:
            data: Dictionary produced by ``to_dict``
            decode: Rebuilds one bundle from its serialized form
        """
        return cls.of([decode(item) for item in data["sensitivities"]])


CurrencyParameterSensitivitiesScenarioArray = ScenarioSensitivityArray[
    CurrencyParameterSensitivities
]


def sensitivities_array_to_dict(
    array: ScenarioSensitivityArray[CurrencyParameterSensitivities],
) -> dict[str, Any]:
    """Serialize an array of CurrencyParameterSensitivities."""
    return array.to_dict(lambda bundle: bundle.to_dict())


def sensitivities_array_from_dict(
    data: dict[str, Any],
) -> ScenarioSensitivityArray[CurrencyParameterSensitivities]:
    """Decode an array of CurrencyParameterSensitivities."""
    return ScenarioSensitivityArray.from_dict(data, CurrencyParameterSensitivities.from_dict)
