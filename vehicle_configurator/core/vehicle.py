"""Vehicle catalog records and the mutable configuration built on them.

A :class:`Vehicle` is an immutable catalog entry.  Its variant (car,
motorcycle or electric vehicle) is carried by the type of its
``details`` record, so the three kinds share one class and differ only
in their extra attributes.

A :class:`Configuration` is the per-session state layered on top of a
catalog vehicle: engine, equipment, color and discount.  Catalog
records are never mutated; choosing the same vehicle twice yields two
independent configurations over the same record.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from vehicle_configurator.core.engine import Engine
from vehicle_configurator.core.equipment import Equipment

DEFAULT_COLOR: str = "White"
DEFAULT_YEAR: str = "2023"

# ---------------------------------------------------------------------------
# Variant records
# ---------------------------------------------------------------------------


class VehicleKind(Enum):
    """Closed set of vehicle variants."""

    CAR = "Cars"
    MOTORCYCLE = "Motorcycles"
    ELECTRIC = "Electric Vehicles"


@dataclass(frozen=True)
class CarDetails:
    """Passenger-car attributes.

    Attributes:
        doors: Number of doors.
        body_type: Body style, e.g. "Sedan", "Hatchback", "SUV".
        trunk_capacity: Trunk volume in litres (0 when unknown).
    """

    doors: int
    body_type: str
    trunk_capacity: int = 0

    def __post_init__(self) -> None:
        if self.doors <= 0:
            raise ValueError("doors must be > 0.")
        if self.trunk_capacity < 0:
            raise ValueError("trunk_capacity must be >= 0.")


@dataclass(frozen=True)
class MotorcycleDetails:
    """Motorcycle attributes.

    Attributes:
        type: Riding style, e.g. "Sport", "Cruiser", "Naked".
        displacement: Engine displacement in cc (0 when unknown).
    """

    type: str
    displacement: int = 0

    def __post_init__(self) -> None:
        if self.displacement < 0:
            raise ValueError("displacement must be >= 0.")


@dataclass(frozen=True)
class ElectricDetails:
    """Electric-vehicle attributes.

    Attributes:
        battery_capacity: Battery size in kWh.
        range: Rated range in km.
        charging_time: Fast-charge time in minutes.
    """

    battery_capacity: int
    range: int
    charging_time: int

    def __post_init__(self) -> None:
        if self.battery_capacity < 0:
            raise ValueError("battery_capacity must be >= 0.")
        if self.range < 0:
            raise ValueError("range must be >= 0.")
        if self.charging_time < 0:
            raise ValueError("charging_time must be >= 0.")


VehicleDetails = Union[CarDetails, MotorcycleDetails, ElectricDetails]


@dataclass(frozen=True)
class Vehicle:
    """Immutable catalog vehicle.

    Attributes:
        brand: Manufacturer name.
        model: Model name.  ``brand`` + ``model`` identify the vehicle.
        base_price: Price before engine, equipment and discount.
        details: Variant-specific record.
        year: Model year, kept as text.
    """

    brand: str
    model: str
    base_price: float
    details: VehicleDetails
    year: str = DEFAULT_YEAR

    def __post_init__(self) -> None:
        """Validate vehicle parameters."""
        if not self.brand:
            raise ValueError("brand must not be empty.")
        if not self.model:
            raise ValueError("model must not be empty.")
        if self.base_price < 0.0:
            raise ValueError("base_price must be >= 0.")
        if not isinstance(self.details, (CarDetails, MotorcycleDetails, ElectricDetails)):
            raise ValueError(
                f"Unsupported vehicle details {type(self.details).__name__}."
            )

    @property
    def kind(self) -> VehicleKind:
        if isinstance(self.details, CarDetails):
            return VehicleKind.CAR
        if isinstance(self.details, MotorcycleDetails):
            return VehicleKind.MOTORCYCLE
        return VehicleKind.ELECTRIC

    @property
    def identity(self) -> str:
        return f"{self.brand} {self.model}"

    def details_dict(self) -> dict[str, Any]:
        """Return the variant-specific attributes keyed by field name."""
        details = self.details
        if isinstance(details, CarDetails):
            return {
                "body_type": details.body_type,
                "doors": details.doors,
                "trunk_capacity": details.trunk_capacity,
            }
        if isinstance(details, MotorcycleDetails):
            return {"type": details.type, "displacement": details.displacement}
        return {
            "battery_capacity": details.battery_capacity,
            "range": details.range,
            "charging_time": details.charging_time,
        }


# ---------------------------------------------------------------------------
# Configuration state
# ---------------------------------------------------------------------------


class EquipmentChange(Enum):
    """Outcome of an equipment add or remove.  None of these are errors."""

    ADDED = "added"
    ALREADY_PRESENT = "already present"
    REMOVED = "removed"
    NOT_FOUND = "not found"


class Configuration:
    """A vehicle selection plus its customisations.

    Attributes:
        vehicle: Catalog vehicle being configured.
        engine: Selected catalog engine, or ``None``.
        equipment: Selected options in insertion order, unique by name.
        color: Paint color.
        discount: Discount percentage.  No range is enforced here; the
            service layer applies the selling policy.
    """

    __slots__ = ("vehicle", "engine", "equipment", "color", "discount")

    def __init__(
        self,
        vehicle: Vehicle,
        engine: Engine | None = None,
        equipment: list[Equipment] | None = None,
        color: str = DEFAULT_COLOR,
        discount: float = 0.0,
    ) -> None:
        self.vehicle: Vehicle = vehicle
        self.engine: Engine | None = engine
        self.equipment: list[Equipment] = []
        self.color: str = color
        self.discount: float = discount
        for item in equipment or ():
            self.add_equipment(item)

    def __repr__(self) -> str:
        names = ", ".join(e.name for e in self.equipment)
        engine = self.engine.name if self.engine is not None else None
        return (
            f"Configuration(vehicle={self.vehicle.identity!r}, engine={engine!r}, "
            f"equipment=[{names}], color={self.color!r}, discount={self.discount})"
        )

    # -- Equipment -----------------------------------------------------------

    def has_equipment(self, name: str) -> bool:
        return any(e.name == name for e in self.equipment)

    def add_equipment(self, item: Equipment) -> EquipmentChange:
        """Append *item* unless an option with the same name is present."""
        if self.has_equipment(item.name):
            return EquipmentChange.ALREADY_PRESENT
        self.equipment.append(item)
        return EquipmentChange.ADDED

    def remove_equipment(self, name: str) -> EquipmentChange:
        """Remove the option called *name* if it is present."""
        for idx, item in enumerate(self.equipment):
            if item.name == name:
                del self.equipment[idx]
                return EquipmentChange.REMOVED
        return EquipmentChange.NOT_FOUND

    # -- Plain setters -------------------------------------------------------

    def set_engine(self, engine: Engine | None) -> None:
        self.engine = engine

    def set_color(self, color: str) -> None:
        self.color = color

    def set_discount(self, percent: float) -> None:
        self.discount = percent

    # -- Pricing -------------------------------------------------------------

    def undiscounted_price(self) -> float:
        """Base price plus engine plus every equipment option."""
        total = self.vehicle.base_price
        if self.engine is not None:
            total += self.engine.price
        for item in self.equipment:
            total += item.price
        return total

    def total_price(self) -> float:
        """Grand total with the discount applied to the whole sum.

        Always recomputed from the current components.
        """
        total = self.undiscounted_price()
        if self.discount > 0:
            total = total * (1.0 - self.discount / 100.0)
        return total

    def discount_amount(self) -> float:
        if self.discount <= 0:
            return 0.0
        return self.undiscounted_price() * (self.discount / 100.0)

    # -- Snapshots -----------------------------------------------------------

    def snapshot(self) -> Configuration:
        """Return an independent copy of the mutable state.

        Catalog records are immutable and shared; only the equipment
        list needs copying.
        """
        return Configuration(
            vehicle=self.vehicle,
            engine=self.engine,
            equipment=list(self.equipment),
            color=self.color,
            discount=self.discount,
        )

    def describe(self) -> dict[str, Any]:
        """Structured, read-only view of every field and the total price."""
        vehicle = self.vehicle
        engine = self.engine
        return {
            "kind": vehicle.kind.value,
            "brand": vehicle.brand,
            "model": vehicle.model,
            "year": vehicle.year,
            "base_price": vehicle.base_price,
            "color": self.color,
            "discount": self.discount,
            "discount_amount": self.discount_amount(),
            "engine": None
            if engine is None
            else {
                "name": engine.name,
                "capacity": engine.capacity,
                "horse_power": engine.horse_power,
                "fuel_type": engine.fuel_type,
                "price": engine.price,
                "co2_emissions": engine.co2_emissions,
                "fuel_consumption": engine.fuel_consumption,
            },
            "equipment": [
                {
                    "name": item.name,
                    "description": item.description,
                    "price": item.price,
                    "category": item.category.label,
                }
                for item in self.equipment
            ],
            "details": vehicle.details_dict(),
            "total_price": self.total_price(),
        }
