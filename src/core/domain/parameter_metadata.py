"""Parameter metadata - Descriptors for individual curve/surface parameters.

Each calibrated parameter of a curve or surface can carry a descriptor
(label plus an identifier such as a tenor or an (x, y) node) so that
sensitivities to that parameter can be reported meaningfully.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from src.core.domain.validation import InvalidArgumentError, require_not_blank, require_not_none
from src.core.domain.value_type import UNKNOWN, ValueType

EMPTY_LABEL = "Empty"


@dataclass(frozen=True)
class ParameterMetadata:
    """Generic descriptor of one parameter.

    Attributes:
        label: Human readable label (e.g., "1Y", "USD-Libor-3M 5Y")
        identifier: Unique identifier within a curve, defaults to label
    """

    label: str
    identifier: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        require_not_blank(self.label, "label")
        if self.identifier is None:
            object.__setattr__(self, "identifier", self.label)

    @classmethod
    def empty(cls) -> "ParameterMetadata":
        """Placeholder used when a parameter has no descriptor."""
        return cls(label=EMPTY_LABEL)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": "generic",
            "label": self.label,
            "identifier": self.identifier,
        }


@dataclass(frozen=True)
class SurfaceParameterMetadata:
    """Descriptor for a node of a surface.

    Attributes:
        x_value: Node coordinate on the x-axis (e.g., year fraction)
        y_value: Node coordinate on the y-axis (e.g., strike)
        x_value_type: Meaning of x_value
        y_value_type: Meaning of y_value
        label: Defaults to "[x, y]"
    """

    x_value: float
    y_value: float
    x_value_type: ValueType = UNKNOWN
    y_value_type: ValueType = UNKNOWN
    label: str = ""

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        require_not_none(self.x_value, "x_value")
        require_not_none(self.y_value, "y_value")
        for field_name in ("x_value_type", "y_value_type"):
            value = require_not_none(getattr(self, field_name), field_name)
            object.__setattr__(self, field_name, ValueType.of(value))
        if not self.label:
            object.__setattr__(self, "label", f"[{self.x_value}, {self.y_value}]")

    @property
    def identifier(self) -> tuple[float, float]:
        """The (x, y) node."""
        return (self.x_value, self.y_value)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": "surface",
            "x_value": self.x_value,
            "y_value": self.y_value,
            "x_value_type": self.x_value_type.name,
            "y_value_type": self.y_value_type.name,
            "label": self.label,
        }


AnyParameterMetadata = Union[ParameterMetadata, SurfaceParameterMetadata]


def parameter_metadata_from_dict(data: dict[str, Any]) -> AnyParameterMetadata:
    """Create parameter metadata from its dictionary form.

    Args:
        data: Dictionary produced by ``to_dict``

    Raises:
        InvalidArgumentError: If the "type" discriminator is unknown
    """
    kind = data.get("type", "generic")
    if kind == "generic":
        return ParameterMetadata(label=data["label"], identifier=data.get("identifier"))
    if kind == "surface":
        return SurfaceParameterMetadata(
            x_value=float(data["x_value"]),
            y_value=float(data["y_value"]),
            x_value_type=ValueType.of(data.get("x_value_type", UNKNOWN.name)),
            y_value_type=ValueType.of(data.get("y_value_type", UNKNOWN.name)),
            label=data.get("label", ""),
        )
    raise InvalidArgumentError(f"Unknown parameter metadata type: '{kind}'")
