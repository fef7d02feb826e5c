"""Equipment options for the vehicle configurator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class EquipmentCategory(IntEnum):
    """Equipment grouping.  The integer value is the on-disk code."""

    COMFORT = 0
    SAFETY = 1
    MULTIMEDIA = 2
    EXTERIOR = 3
    PERFORMANCE = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class Equipment:
    """Immutable equipment option.

    Attributes:
        name: Unique option name (the lookup key).
        description: Short human-readable description.
        price: Option price (>= 0).
        category: Grouping used in listings and breakdowns.
    """

    name: str
    description: str
    price: float
    category: EquipmentCategory

    def __post_init__(self) -> None:
        """Validate equipment parameters."""
        if not self.name:
            raise ValueError("Equipment name must not be empty.")
        if self.price < 0.0:
            raise ValueError("Equipment price must be >= 0.")
        if not isinstance(self.category, EquipmentCategory):
            object.__setattr__(self, "category", EquipmentCategory(self.category))
