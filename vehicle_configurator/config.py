"""Configuration loader for the vehicle configurator.

Provides the bundled catalog location, the YAML catalog loader and the
console logging setup.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import coloredlogs
import yaml

from vehicle_configurator.core.catalog import Catalog
from vehicle_configurator.core.engine import Engine
from vehicle_configurator.core.equipment import Equipment, EquipmentCategory
from vehicle_configurator.core.vehicle import (
    DEFAULT_YEAR,
    CarDetails,
    ElectricDetails,
    MotorcycleDetails,
    Vehicle,
)

module_logger = logging.getLogger(__name__)

DATA_DIR: Path = Path(__file__).resolve().parent / "data"
CATALOG_PATH: Path = DATA_DIR / "catalog.yaml"
DEFAULT_LOG_LEVEL: str = "WARNING"

_ENGINE_FIELDS: tuple[str, ...] = (
    "name",
    "capacity",
    "horse_power",
    "fuel_type",
    "price",
)
_EQUIPMENT_FIELDS: tuple[str, ...] = ("name", "description", "price", "category")
_VEHICLE_FIELDS: tuple[str, ...] = ("kind", "brand", "model", "base_price")
_KIND_FIELDS: dict[str, tuple[str, ...]] = {
    "car": ("doors", "body_type"),
    "motorcycle": ("type",),
    "electric": ("battery_capacity", "range", "charging_time"),
}


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logger() -> logging.Logger:
    """Install coloured console logging on the root logger.

    The level comes from the ``LOG_LEVEL`` environment variable and
    defaults to ``WARNING`` so that the interactive menu is not drowned
    in INFO chatter.
    """
    root_logger = logging.getLogger()
    log_level_str = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    log_level_int = getattr(logging, log_level_str, None)
    if not isinstance(log_level_int, int):
        module_logger.warning(
            "Invalid LOG_LEVEL %r. Defaulting to %s.", log_level_str, DEFAULT_LOG_LEVEL
        )
        log_level_int = getattr(logging, DEFAULT_LOG_LEVEL)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    coloredlogs.install(
        level=log_level_int,
        fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
        logger=root_logger,
        reconfigure=True,
    )
    return root_logger


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


def _check_fields(section: str, idx: int, entry: Any, fields: tuple[str, ...]) -> None:
    if not isinstance(entry, dict):
        raise ValueError(f"{section} entry {idx} must be a mapping.")
    for field in fields:
        if field not in entry:
            raise ValueError(
                f"{section} entry {idx} ({entry.get('name', entry.get('model', '<unknown>'))}) "
                f"is missing required field '{field}'"
            )


def _parse_category(value: Any) -> EquipmentCategory:
    if isinstance(value, int):
        return EquipmentCategory(value)
    try:
        return EquipmentCategory[str(value).upper()]
    except KeyError:
        raise ValueError(f"Unknown equipment category '{value}'") from None


def _build_vehicle(idx: int, entry: dict[str, Any]) -> Vehicle:
    kind = str(entry["kind"]).lower()
    if kind not in _KIND_FIELDS:
        raise ValueError(f"vehicles entry {idx}: unknown kind '{entry['kind']}'")
    _check_fields("vehicles", idx, entry, _KIND_FIELDS[kind])

    details: CarDetails | MotorcycleDetails | ElectricDetails
    if kind == "car":
        details = CarDetails(
            doors=int(entry["doors"]),
            body_type=str(entry["body_type"]),
            trunk_capacity=int(entry.get("trunk_capacity", 0)),
        )
    elif kind == "motorcycle":
        details = MotorcycleDetails(
            type=str(entry["type"]),
            displacement=int(entry.get("displacement", 0)),
        )
    else:
        details = ElectricDetails(
            battery_capacity=int(entry["battery_capacity"]),
            range=int(entry["range"]),
            charging_time=int(entry["charging_time"]),
        )

    return Vehicle(
        brand=str(entry["brand"]),
        model=str(entry["model"]),
        base_price=float(entry["base_price"]),
        details=details,
        year=str(entry.get("year", DEFAULT_YEAR)),
    )


def load_catalog(path: Path | None = None) -> Catalog:
    """Load the vehicle catalog from a YAML file.

    Args:
        path: Optional override for the catalog file path.

    Returns:
        A :class:`Catalog` in file order.

    Raises:
        FileNotFoundError: If the catalog file does not exist.
        ValueError: If an entry is missing fields or holds invalid values.
    """
    catalog_path = path or CATALOG_PATH
    if not catalog_path.exists():
        raise FileNotFoundError(f"Catalog file not found: {catalog_path}")

    with open(catalog_path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    for section in ("colors", "engines", "equipment", "vehicles"):
        if section not in data:
            raise ValueError(f"Catalog is missing the '{section}' section")

    engines: list[Engine] = []
    for idx, entry in enumerate(data["engines"]):
        _check_fields("engines", idx, entry, _ENGINE_FIELDS)
        engines.append(
            Engine(
                name=str(entry["name"]),
                capacity=float(entry["capacity"]),
                horse_power=int(entry["horse_power"]),
                fuel_type=str(entry["fuel_type"]),
                price=float(entry["price"]),
                co2_emissions=int(entry.get("co2_emissions", 0)),
                fuel_consumption=float(entry.get("fuel_consumption", 0.0)),
            )
        )

    equipment: list[Equipment] = []
    for idx, entry in enumerate(data["equipment"]):
        _check_fields("equipment", idx, entry, _EQUIPMENT_FIELDS)
        equipment.append(
            Equipment(
                name=str(entry["name"]),
                description=str(entry["description"]),
                price=float(entry["price"]),
                category=_parse_category(entry["category"]),
            )
        )

    vehicles: list[Vehicle] = []
    for idx, entry in enumerate(data["vehicles"]):
        _check_fields("vehicles", idx, entry, _VEHICLE_FIELDS)
        vehicles.append(_build_vehicle(idx, entry))

    colors = [str(c) for c in data["colors"]]
    module_logger.debug(
        "Loaded catalog from %s: %d vehicles, %d engines, %d equipment, %d colors",
        catalog_path,
        len(vehicles),
        len(engines),
        len(equipment),
        len(colors),
    )
    return Catalog(vehicles=vehicles, engines=engines, equipment=equipment, colors=colors)
