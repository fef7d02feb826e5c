"""Core modules of the vehicle configurator."""

from vehicle_configurator.core.catalog import Catalog
from vehicle_configurator.core.comparison import (
    ConfigurationComparison,
    ConfigurationSummary,
    compare,
    equipment_breakdown,
)
from vehicle_configurator.core.engine import Engine
from vehicle_configurator.core.equipment import Equipment, EquipmentCategory
from vehicle_configurator.core.errors import (
    CatalogMismatch,
    ConfigFileNotFound,
    ConfigFileUnreadable,
    ConfigFileUnwritable,
    ConfiguratorError,
    InvalidSelection,
    MalformedRecord,
    PreconditionUnmet,
    UnserializableValue,
)
from vehicle_configurator.core.serialization import (
    ConfigurationRecord,
    dump_configuration,
    parse_configuration,
    read_configuration,
    write_configuration,
)
from vehicle_configurator.core.service import (
    MAX_DISCOUNT,
    LoadResult,
    Session,
    add_equipment,
    apply_discount,
    compare_configurations,
    load_configuration,
    remove_equipment_by_choice,
    resolve_config_path,
    save_configuration,
    save_for_comparison,
    select_color,
    select_engine,
    select_vehicle,
)
from vehicle_configurator.core.vehicle import (
    CarDetails,
    Configuration,
    ElectricDetails,
    EquipmentChange,
    MotorcycleDetails,
    Vehicle,
    VehicleKind,
)

__all__ = [
    "MAX_DISCOUNT",
    "CarDetails",
    "Catalog",
    "CatalogMismatch",
    "ConfigFileNotFound",
    "ConfigFileUnreadable",
    "ConfigFileUnwritable",
    "Configuration",
    "ConfigurationComparison",
    "ConfigurationRecord",
    "ConfigurationSummary",
    "ConfiguratorError",
    "ElectricDetails",
    "Engine",
    "Equipment",
    "EquipmentCategory",
    "EquipmentChange",
    "InvalidSelection",
    "LoadResult",
    "MalformedRecord",
    "MotorcycleDetails",
    "PreconditionUnmet",
    "Session",
    "UnserializableValue",
    "Vehicle",
    "VehicleKind",
    "add_equipment",
    "apply_discount",
    "compare",
    "compare_configurations",
    "dump_configuration",
    "equipment_breakdown",
    "load_configuration",
    "parse_configuration",
    "read_configuration",
    "remove_equipment_by_choice",
    "resolve_config_path",
    "save_configuration",
    "save_for_comparison",
    "select_color",
    "select_engine",
    "select_vehicle",
    "write_configuration",
]
