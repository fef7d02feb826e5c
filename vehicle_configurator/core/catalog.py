"""Read-only inventory of selectable vehicles, engines, equipment and colors.

Catalogs are small, so lookups are plain linear scans.  Menu positions
are 1-based and follow the order the entries were loaded in.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from typing import TypeVar

from vehicle_configurator.core.engine import Engine
from vehicle_configurator.core.equipment import Equipment, EquipmentCategory
from vehicle_configurator.core.errors import InvalidSelection
from vehicle_configurator.core.vehicle import Vehicle, VehicleKind

_T = TypeVar("_T")


def _pick(items: tuple[_T, ...], index: int, what: str) -> _T:
    if not 1 <= index <= len(items):
        raise InvalidSelection(
            f"Invalid {what} selection {index}; choose 1-{len(items)}."
        )
    return items[index - 1]


class Catalog:
    """Fixed inventory built once at startup.

    Attributes:
        vehicles: Catalog vehicles in menu order.
        engines: Catalog engines in menu order.
        equipment: Equipment options in menu order.
        colors: Paint colors in menu order.
    """

    __slots__ = ("vehicles", "engines", "equipment", "colors")

    def __init__(
        self,
        vehicles: Sequence[Vehicle],
        engines: Sequence[Engine],
        equipment: Sequence[Equipment],
        colors: Sequence[str],
    ) -> None:
        identities = [(v.brand, v.model) for v in vehicles]
        if len(set(identities)) != len(identities):
            raise ValueError("Catalog vehicles must have unique brand and model.")
        engine_names = [e.name for e in engines]
        if len(set(engine_names)) != len(engine_names):
            raise ValueError("Catalog engine names must be unique.")
        equipment_names = [e.name for e in equipment]
        if len(set(equipment_names)) != len(equipment_names):
            raise ValueError("Catalog equipment names must be unique.")
        if not colors:
            raise ValueError("Catalog must offer at least one color.")

        self.vehicles: tuple[Vehicle, ...] = tuple(vehicles)
        self.engines: tuple[Engine, ...] = tuple(engines)
        self.equipment: tuple[Equipment, ...] = tuple(equipment)
        self.colors: tuple[str, ...] = tuple(colors)

    def __repr__(self) -> str:
        return (
            f"Catalog(vehicles={len(self.vehicles)}, engines={len(self.engines)}, "
            f"equipment={len(self.equipment)}, colors={len(self.colors)})"
        )

    # -- Lookup by key -------------------------------------------------------

    def find_vehicle(self, brand: str, model: str) -> Vehicle | None:
        for vehicle in self.vehicles:
            if vehicle.brand == brand and vehicle.model == model:
                return vehicle
        return None

    def find_engine(self, name: str) -> Engine | None:
        for engine in self.engines:
            if engine.name == name:
                return engine
        return None

    def find_equipment(self, name: str) -> Equipment | None:
        for item in self.equipment:
            if item.name == name:
                return item
        return None

    # -- Lookup by 1-based menu position ---------------------------------------

    def vehicle_at(self, index: int) -> Vehicle:
        return _pick(self.vehicles, index, "vehicle")

    def engine_at(self, index: int) -> Engine:
        return _pick(self.engines, index, "engine")

    def equipment_at(self, index: int) -> Equipment:
        return _pick(self.equipment, index, "equipment")

    def color_at(self, index: int) -> str:
        return _pick(self.colors, index, "color")

    # -- Grouped listings ------------------------------------------------------

    def vehicles_by_kind(self) -> dict[VehicleKind, list[tuple[int, Vehicle]]]:
        """Group vehicles by variant, keeping each one's menu position."""
        groups: dict[VehicleKind, list[tuple[int, Vehicle]]] = {}
        for kind in VehicleKind:
            members = [
                (i, v) for i, v in enumerate(self.vehicles, start=1) if v.kind is kind
            ]
            if members:
                groups[kind] = members
        return groups

    def engines_by_fuel_type(self) -> dict[str, list[tuple[int, Engine]]]:
        groups: dict[str, list[tuple[int, Engine]]] = defaultdict(list)
        for i, engine in enumerate(self.engines, start=1):
            groups[engine.fuel_type].append((i, engine))
        return dict(sorted(groups.items()))

    def equipment_by_category(
        self,
    ) -> dict[EquipmentCategory, list[tuple[int, Equipment]]]:
        groups: dict[EquipmentCategory, list[tuple[int, Equipment]]] = defaultdict(
            list
        )
        for i, item in enumerate(self.equipment, start=1):
            groups[item.category].append((i, item))
        return dict(sorted(groups.items()))
