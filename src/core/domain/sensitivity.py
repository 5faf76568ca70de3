"""Parameter sensitivities - Sensitivity of a valuation to curve/surface parameters.

A ``CurrencyParameterSensitivity`` holds, for one named curve or surface and
one currency, the sensitivity to each of its parameters.
``CurrencyParameterSensitivities`` bundles all such entries for one valuation;
a scenario run produces one bundle per scenario.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Sequence

import numpy as np
import pandas as pd

from src.core.domain.currency import Currency
from src.core.domain.parameter_metadata import (
    AnyParameterMetadata,
    ParameterMetadata,
    parameter_metadata_from_dict,
)
from src.core.domain.validation import (
    InvalidArgumentError,
    freeze_sequence,
    require_not_blank,
    require_not_none,
)

if TYPE_CHECKING:
    from src.core.ports.fx_port import FxRateProvider


def _freeze_values(values: Any) -> tuple[float, ...]:
    require_not_none(values, "sensitivity")
    array = np.asarray(values, dtype=float)
    if array.ndim != 1:
        raise InvalidArgumentError(
            f"Sensitivity values must be one-dimensional. Got shape {array.shape}"
        )
    return tuple(float(v) for v in array)


@dataclass(frozen=True)
class CurrencyParameterSensitivity:
    """Sensitivity to the parameters of one curve or surface, in one currency.

    Attributes:
        market_data_name: Name of the curve/surface (e.g., "USD-Disc")
        parameter_metadata: Descriptor per parameter
        currency: Currency of the sensitivity amounts
        sensitivity: One value per parameter

    Invariants:
        - parameter_metadata has the same length as sensitivity
    """

    market_data_name: str
    parameter_metadata: tuple[AnyParameterMetadata, ...]
    currency: Currency
    sensitivity: tuple[float, ...]

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        self._validate_invariants()

    def _validate_invariants(self) -> None:
        """Validate all domain invariants.

        Raises:
            InvalidArgumentError: If any invariant is violated
        """
        require_not_blank(self.market_data_name, "market_data_name")
        object.__setattr__(self, "currency", Currency.of(require_not_none(self.currency, "currency")))
        object.__setattr__(self, "sensitivity", _freeze_values(self.sensitivity))
        object.__setattr__(
            self,
            "parameter_metadata",
            freeze_sequence(self.parameter_metadata, "parameter_metadata"),
        )

        if len(self.parameter_metadata) != len(self.sensitivity):
            raise InvalidArgumentError(
                f"Sensitivity '{self.market_data_name}' has {len(self.sensitivity)} values "
                f"but {len(self.parameter_metadata)} parameter metadata entries"
            )

    @classmethod
    def of(
        cls,
        market_data_name: str,
        currency: "Currency | str",
        sensitivity: Sequence[float] | np.ndarray,
        parameter_metadata: Sequence[AnyParameterMetadata] | None = None,
    ) -> "CurrencyParameterSensitivity":
        """Create a sensitivity, using empty metadata when none is given."""
        values = _freeze_values(sensitivity)
        if parameter_metadata is None:
            parameter_metadata = [ParameterMetadata.empty()] * len(values)
        return cls(
            market_data_name=market_data_name,
            parameter_metadata=tuple(parameter_metadata),
            currency=Currency.of(currency),
            sensitivity=values,
        )

    @property
    def parameter_count(self) -> int:
        """Return the number of parameters."""
        return len(self.sensitivity)

    @property
    def values(self) -> np.ndarray:
        """Return the sensitivity values as a new numpy array."""
        return np.array(self.sensitivity, dtype=float)

    def total(self) -> float:
        """Return the sum of all parameter sensitivities."""
        return float(np.sum(self.values))

    def with_sensitivity(self, values: Sequence[float] | np.ndarray) -> "CurrencyParameterSensitivity":
        """Return a copy with the values replaced (same size required)."""
        frozen = _freeze_values(values)
        if len(frozen) != self.parameter_count:
            raise InvalidArgumentError(
                f"Sensitivity '{self.market_data_name}' expects {self.parameter_count} "
                f"values, got {len(frozen)}"
            )
        return replace(self, sensitivity=frozen)

    def multiplied_by(self, factor: float) -> "CurrencyParameterSensitivity":
        """Return a copy with every value multiplied by factor."""
        return self.with_sensitivity(self.values * factor)

    def plus(self, other: "CurrencyParameterSensitivity") -> "CurrencyParameterSensitivity":
        """Add the values of another sensitivity to the same curve and currency.

        Raises:
            InvalidArgumentError: If name, currency or size differ
        """
        if self.key != other.key:
            raise InvalidArgumentError(
                f"Cannot add sensitivity {other.key} to {self.key}: name or currency differs"
            )
        if other.parameter_count != self.parameter_count:
            raise InvalidArgumentError(
                f"Cannot add sensitivities of different size for '{self.market_data_name}': "
                f"{self.parameter_count} vs {other.parameter_count}"
            )
        return self.with_sensitivity(self.values + other.values)

    def converted_to(
        self,
        currency: "Currency | str",
        fx_provider: "FxRateProvider",
    ) -> "CurrencyParameterSensitivity":
        """Return the sensitivity expressed in another currency.

        Args:
            currency: Target currency
            fx_provider: Source of the conversion rate

        Returns:
            This instance when already in the target currency, else a new one
        """
        target = Currency.of(currency)
        if target == self.currency:
            return self
        rate = fx_provider.fx_rate(self.currency, target)
        return replace(self, currency=target, sensitivity=_freeze_values(self.values * rate))

    @property
    def key(self) -> tuple[str, Currency]:
        """Return the (market data name, currency) identity of this entry."""
        return (self.market_data_name, self.currency)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "market_data_name": self.market_data_name,
            "currency": self.currency.code,
            "sensitivity": list(self.sensitivity),
            "parameter_metadata": [p.to_dict() for p in self.parameter_metadata],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CurrencyParameterSensitivity":
        """Create CurrencyParameterSensitivity from dictionary."""
        params = data.get("parameter_metadata")
        return cls.of(
            market_data_name=data["market_data_name"],
            currency=data["currency"],
            sensitivity=data["sensitivity"],
            parameter_metadata=(
                [parameter_metadata_from_dict(p) for p in params] if params is not None else None
            ),
        )


@dataclass(frozen=True)
class CurrencyParameterSensitivities:
    """All parameter sensitivities of one valuation.

    Attributes:
        sensitivities: Entries sorted by market data name, then currency

    Invariants:
        - at most one entry per (market data name, currency)
        - entry order is canonical, so equality ignores construction order
    """

    sensitivities: tuple[CurrencyParameterSensitivity, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        entries = freeze_sequence(self.sensitivities, "sensitivities")
        keys = [s.key for s in entries]
        if len(set(keys)) != len(keys):
            raise InvalidArgumentError(
                "CurrencyParameterSensitivities must not contain duplicate "
                "(market data name, currency) entries; use of() to merge them"
            )
        object.__setattr__(
            self,
            "sensitivities",
            tuple(sorted(entries, key=lambda s: (s.market_data_name, s.currency.code))),
        )

    @classmethod
    def empty(cls) -> "CurrencyParameterSensitivities":
        """Return an instance with no entries."""
        return cls()

    @classmethod
    def of(
        cls,
        sensitivities: "Iterable[CurrencyParameterSensitivity] | CurrencyParameterSensitivity",
    ) -> "CurrencyParameterSensitivities":
        """Create an instance, adding together entries for the same curve and currency."""
        if isinstance(sensitivities, CurrencyParameterSensitivity):
            sensitivities = [sensitivities]
        merged: dict[tuple[str, Currency], CurrencyParameterSensitivity] = {}
        for entry in freeze_sequence(sensitivities, "sensitivities"):
            existing = merged.get(entry.key)
            merged[entry.key] = entry if existing is None else existing.plus(entry)
        return cls(tuple(merged.values()))

    @property
    def size(self) -> int:
        """Return the number of entries."""
        return len(self.sensitivities)

    @property
    def currencies(self) -> list[Currency]:
        """Return the distinct currencies, in entry order."""
        return list(dict.fromkeys(s.currency for s in self.sensitivities))

    def __iter__(self) -> Iterator[CurrencyParameterSensitivity]:
        return iter(self.sensitivities)

    def __len__(self) -> int:
        return len(self.sensitivities)

    def find(
        self,
        market_data_name: str,
        currency: "Currency | str",
    ) -> CurrencyParameterSensitivity | None:
        """Return the entry for a curve and currency, or None."""
        key = (market_data_name, Currency.of(currency))
        for entry in self.sensitivities:
            if entry.key == key:
                return entry
        return None

    def get(
        self,
        market_data_name: str,
        currency: "Currency | str",
    ) -> CurrencyParameterSensitivity:
        """Return the entry for a curve and currency.

        Raises:
            KeyError: If there is no such entry
        """
        entry = self.find(market_data_name, currency)
        if entry is None:
            raise KeyError(f"No sensitivity for '{market_data_name}' in {currency}")
        return entry

    def combined_with(
        self,
        other: "CurrencyParameterSensitivities | CurrencyParameterSensitivity",
    ) -> "CurrencyParameterSensitivities":
        """Return the sum of this and other, merging matching entries."""
        extra = [other] if isinstance(other, CurrencyParameterSensitivity) else list(other)
        return CurrencyParameterSensitivities.of(list(self.sensitivities) + extra)

    def multiplied_by(self, factor: float) -> "CurrencyParameterSensitivities":
        """Return a copy with every value multiplied by factor."""
        return CurrencyParameterSensitivities(
            tuple(s.multiplied_by(factor) for s in self.sensitivities)
        )

    def converted_to(
        self,
        currency: "Currency | str",
        fx_provider: "FxRateProvider",
    ) -> "CurrencyParameterSensitivities":
        """Return all entries expressed in one currency.

        Entries for the same curve that end up in the same currency are added.
        """
        return CurrencyParameterSensitivities.of(
            [s.converted_to(currency, fx_provider) for s in self.sensitivities]
        )

    def total(self) -> float:
        """Return the sum over all entries.

        Raises:
            InvalidArgumentError: If the entries are in more than one currency
        """
        if len(self.currencies) > 1:
            raise InvalidArgumentError(
                f"Cannot total sensitivities in several currencies: "
                f"{[c.code for c in self.currencies]}. Convert them first."
            )
        return float(sum(s.total() for s in self.sensitivities))

    def to_dataframe(self) -> pd.DataFrame:
        """Return one row per parameter.

        Columns: market_data_name, currency, label, sensitivity
        """
        rows = [
            {
                "market_data_name": entry.market_data_name,
                "currency": entry.currency.code,
                "label": meta.label,
                "sensitivity": value,
            }
            for entry in self.sensitivities
            for meta, value in zip(entry.parameter_metadata, entry.sensitivity)
        ]
        return pd.DataFrame(
            rows, columns=["market_data_name", "currency", "label", "sensitivity"]
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"sensitivities": [s.to_dict() for s in self.sensitivities]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CurrencyParameterSensitivities":
        """Create CurrencyParameterSensitivities from dictionary."""
        return cls.of(
            [CurrencyParameterSensitivity.from_dict(s) for s in data.get("sensitivities", [])]
        )
