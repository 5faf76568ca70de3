"""SurfaceMetadata - Meaning of a surface's axes and parameters.

A surface is a two-input numeric function whose parameters are calibrated to
market data. Its metadata names the surface, tags each axis with a value type,
optionally records the day count used to turn dates into year fractions, and
optionally describes every parameter.

Consumers program against the ``SurfaceMetadata`` protocol;
``DefaultSurfaceMetadata`` is the standard implementation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, Protocol, runtime_checkable

from src.core.domain.day_count import DayCount
from src.core.domain.parameter_metadata import (
    AnyParameterMetadata,
    parameter_metadata_from_dict,
)
from src.core.domain.validation import (
    InvalidArgumentError,
    freeze_sequence,
    require_not_blank,
    require_not_none,
)
from src.core.domain.value_type import UNKNOWN, YEAR_FRACTION, ValueType


@dataclass(frozen=True)
class SurfaceName:
    """Name of a surface (e.g., "EUR-SABR-Alpha")."""

    name: str

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        require_not_blank(self.name, "name")

    @classmethod
    def of(cls, name: "str | SurfaceName") -> "SurfaceName":
        """Return name as a SurfaceName."""
        if isinstance(name, SurfaceName):
            return name
        return cls(name)

    def __str__(self) -> str:
        return self.name


@runtime_checkable
class SurfaceMetadata(Protocol):
    """Metadata about a surface and its parameters.

    Implementations:
    - DefaultSurfaceMetadata: Standard immutable implementation

    Implementations are immutable with structural equality. The parameter
    metadata, when present, should have one entry per surface parameter; that
    length is checked by the surface, not here.
    """

    @property
    def surface_name(self) -> SurfaceName:
        """The surface name."""
        ...

    @property
    def x_value_type(self) -> ValueType:
        """Meaning of the x-values (e.g., YEAR_FRACTION)."""
        ...

    @property
    def y_value_type(self) -> ValueType:
        """Meaning of the y-values (e.g., STRIKE)."""
        ...

    @property
    def z_value_type(self) -> ValueType:
        """Meaning of the z-values (e.g., BLACK_VOLATILITY)."""
        ...

    @property
    def day_count(self) -> DayCount | None:
        """Day count defining the year fraction on a time axis, if any."""
        ...

    @property
    def parameter_metadata(self) -> tuple[AnyParameterMetadata, ...] | None:
        """Descriptor per parameter, or None when not supplied."""
        ...

    def with_parameter_metadata(
        self,
        parameter_metadata: Iterable[AnyParameterMetadata] | None,
    ) -> "SurfaceMetadata":
        """Return a copy with the parameter metadata replaced.

        Args:
            parameter_metadata: New descriptors, or None to clear them

        Returns:
            New metadata, all other fields unchanged
        """
        ...


@dataclass(frozen=True)
class DefaultSurfaceMetadata:
    """Default, immutable implementation of SurfaceMetadata.

    Attributes:
        surface_name: Surface name (a plain string is converted)
        x_value_type: Meaning of the x-values
        y_value_type: Meaning of the y-values
        z_value_type: Meaning of the z-values
        day_count: Day count for a time-based axis (optional)
        parameter_metadata: Descriptor per parameter (optional)

    Invariants:
        - surface_name and the three value types are never None
        - day_count is only set when the x or y axis is YEAR_FRACTION
        - parameter_metadata is None (absent) or a tuple, possibly empty
    """

    surface_name: SurfaceName
    x_value_type: ValueType = UNKNOWN
    y_value_type: ValueType = UNKNOWN
    z_value_type: ValueType = UNKNOWN
    day_count: DayCount | None = None
    parameter_metadata: tuple[AnyParameterMetadata, ...] | None = None

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        self._validate_invariants()

    def _validate_invariants(self) -> None:
        """Validate all domain invariants.

        Raises:
            InvalidArgumentError: If any invariant is violated
        """
        # Invariant 1: required fields present
        require_not_none(self.surface_name, "surface_name")
        object.__setattr__(self, "surface_name", SurfaceName.of(self.surface_name))
        for field_name in ("x_value_type", "y_value_type", "z_value_type"):
            value = require_not_none(getattr(self, field_name), field_name)
            object.__setattr__(self, field_name, ValueType.of(value))

        # Invariant 2: day count only applies to a time axis
        if self.day_count is not None and YEAR_FRACTION not in (
            self.x_value_type,
            self.y_value_type,
        ):
            raise InvalidArgumentError(
                f"SurfaceMetadata '{self.surface_name}' has day count {self.day_count} "
                f"but neither axis is {YEAR_FRACTION}"
            )

        # Invariant 3: parameter metadata frozen, absent stays absent
        if self.parameter_metadata is not None:
            object.__setattr__(
                self,
                "parameter_metadata",
                freeze_sequence(self.parameter_metadata, "parameter_metadata"),
            )

    @classmethod
    def of(cls, surface_name: "str | SurfaceName") -> "DefaultSurfaceMetadata":
        """Create metadata with only a name; every value type is UNKNOWN."""
        return cls(surface_name=SurfaceName.of(surface_name))

    @property
    def parameter_count(self) -> int | None:
        """Number of parameter descriptors, or None when absent."""
        if self.parameter_metadata is None:
            return None
        return len(self.parameter_metadata)

    def with_parameter_metadata(
        self,
        parameter_metadata: Iterable[AnyParameterMetadata] | None,
    ) -> "DefaultSurfaceMetadata":
        """Return a copy with the parameter metadata replaced.

        None clears the metadata. The length is not checked against any surface.
        """
        return replace(self, parameter_metadata=parameter_metadata)

    def with_day_count(self, day_count: DayCount | None) -> "DefaultSurfaceMetadata":
        """Return a copy with the day count replaced."""
        return replace(self, day_count=day_count)

    def with_value_types(
        self,
        x_value_type: ValueType,
        y_value_type: ValueType,
        z_value_type: ValueType,
    ) -> "DefaultSurfaceMetadata":
        """Return a copy with all three value types replaced."""
        return replace(
            self,
            x_value_type=x_value_type,
            y_value_type=y_value_type,
            z_value_type=z_value_type,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "surface_name": self.surface_name.name,
            "x_value_type": self.x_value_type.name,
            "y_value_type": self.y_value_type.name,
            "z_value_type": self.z_value_type.name,
            "day_count": self.day_count.value if self.day_count else None,
            "parameter_metadata": (
                [p.to_dict() for p in self.parameter_metadata]
                if self.parameter_metadata is not None
                else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DefaultSurfaceMetadata":
        """Create DefaultSurfaceMetadata from dictionary.

        Args:
            data: Dictionary with metadata fields (value types default to Unknown)

        Returns:
            DefaultSurfaceMetadata instance
        """
        params = data.get("parameter_metadata")
        day_count = data.get("day_count")
        return cls(
            surface_name=SurfaceName.of(data["surface_name"]),
            x_value_type=ValueType.of(data.get("x_value_type", UNKNOWN.name)),
            y_value_type=ValueType.of(data.get("y_value_type", UNKNOWN.name)),
            z_value_type=ValueType.of(data.get("z_value_type", UNKNOWN.name)),
            day_count=DayCount.of(day_count) if day_count else None,
            parameter_metadata=(
                [parameter_metadata_from_dict(p) for p in params]
                if params is not None
                else None
            ),
        )


def surface_metadata_from_dict(data: dict[str, Any]) -> SurfaceMetadata:
    """Decode serialized surface metadata."""
    return DefaultSurfaceMetadata.from_dict(data)
