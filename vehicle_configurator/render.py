"""Console rendering for the vehicle configurator.

Everything here turns core objects into text.  Nothing reads input or
mutates state, so the menu loop in :mod:`vehicle_configurator.cli` only
has to print what these helpers return.
"""

from __future__ import annotations

import pandas as pd

from vehicle_configurator.core.catalog import Catalog
from vehicle_configurator.core.comparison import (
    CURRENT_COLUMN,
    SAVED_COLUMN,
    ConfigurationComparison,
    equipment_breakdown,
)
from vehicle_configurator.core.vehicle import (
    CarDetails,
    Configuration,
    MotorcycleDetails,
    Vehicle,
)

# ---------------------------------------------------------------------------
# ANSI styling
# ---------------------------------------------------------------------------

RESET = "\033[0m"
BOLD = "\033[1m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
CYAN = "\033[36m"
WHITE = "\033[37m"

_PAINT_CODES: dict[str, str] = {
    "Red": RED,
    "Blue": BLUE,
    "Green": GREEN,
    "Yellow": YELLOW,
    "Black": BOLD,
}


def paint(color: str) -> str:
    """ANSI code used to draw a vehicle of the given paint color."""
    return _PAINT_CODES.get(color, WHITE)


def success(text: str) -> str:
    return f"{GREEN}✓ {text}{RESET}"


def warning(text: str) -> str:
    return f"{YELLOW}! {text}{RESET}"


def failure(text: str) -> str:
    return f"{RED}✗ {text}{RESET}"


def header(text: str) -> str:
    width = 58
    return "\n".join(
        [
            f"{BOLD}{BLUE}╔{'═' * width}╗{RESET}",
            f"{BOLD}{BLUE}║ {text:<{width - 2}} ║{RESET}",
            f"{BOLD}{BLUE}╚{'═' * width}╝{RESET}",
        ]
    )


def menu_item(number: int, text: str) -> str:
    return f"{CYAN} [{number}] {RESET}{text}"


# ---------------------------------------------------------------------------
# Number formatting
# ---------------------------------------------------------------------------


def format_price(value: float) -> str:
    """Format *value* with thousands separators and two decimals."""
    return f"{value:,.2f} USD"


def format_signed_price(value: float) -> str:
    sign = "+" if value >= 0 else ""
    return f"{sign}{format_price(value)}"


# ---------------------------------------------------------------------------
# Catalog listings
# ---------------------------------------------------------------------------


def render_vehicle_list(catalog: Catalog) -> str:
    lines = [header("Available Vehicles")]
    for kind, members in catalog.vehicles_by_kind().items():
        lines.append(f"{YELLOW}\n{kind.value}:{RESET}")
        for index, vehicle in members:
            lines.append(
                menu_item(
                    index,
                    f"{vehicle.identity} ({vehicle.year}) - "
                    f"{format_price(vehicle.base_price)}",
                )
            )
    return "\n".join(lines)


def render_engine_list(catalog: Catalog) -> str:
    lines = [header("Available Engines")]
    for fuel_type, members in catalog.engines_by_fuel_type().items():
        lines.append(f"{YELLOW}\n{fuel_type} engines:{RESET}")
        for index, engine in members:
            text = (
                f"{engine.name} ({engine.capacity:g}L, {engine.horse_power} HP) - "
                f"{format_price(engine.price)}"
            )
            if engine.co2_emissions > 0:
                text += f" - {engine.co2_emissions} g/km CO2"
            if engine.fuel_consumption > 0:
                text += f" - {engine.fuel_consumption:g} l/100km"
            lines.append(menu_item(index, text))
    return "\n".join(lines)


def render_equipment_list(catalog: Catalog) -> str:
    lines = [header("Available Equipment by Category")]
    for category, members in catalog.equipment_by_category().items():
        lines.append(f"{YELLOW}\n{category.label}:{RESET}")
        for index, item in members:
            lines.append(
                menu_item(
                    index,
                    f"{item.name} - {item.description} - {format_price(item.price)}",
                )
            )
    return "\n".join(lines)


def render_color_list(catalog: Catalog) -> str:
    lines = [header("Available Colors")]
    for index, color in enumerate(catalog.colors, start=1):
        lines.append(menu_item(index, f"{paint(color)}■ {color}{RESET}"))
    return "\n".join(lines)


def render_selected_equipment(configuration: Configuration) -> str:
    lines = [header("Remove Equipment")]
    for index, item in enumerate(configuration.equipment, start=1):
        lines.append(menu_item(index, f"{item.name} - {format_price(item.price)}"))
    lines.append(menu_item(0, "Cancel"))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Configuration views
# ---------------------------------------------------------------------------


def _variant_lines(vehicle: Vehicle) -> list[str]:
    details = vehicle.details
    if isinstance(details, CarDetails):
        lines = [
            f"{BOLD}\nCar details:{RESET}",
            f"  ├─ Body type: {details.body_type}",
            f"  ├─ Number of doors: {details.doors}",
        ]
        if details.trunk_capacity > 0:
            lines.append(f"  └─ Trunk capacity: {details.trunk_capacity} liters")
        return lines
    if isinstance(details, MotorcycleDetails):
        lines = [f"{BOLD}\nMotorcycle details:{RESET}", f"  ├─ Type: {details.type}"]
        if details.displacement > 0:
            lines.append(f"  └─ Engine displacement: {details.displacement} cc")
        return lines
    return [
        f"{BOLD}\nElectric vehicle details:{RESET}",
        f"  ├─ Battery capacity: {details.battery_capacity} kWh",
        f"  ├─ Range: {details.range} km",
        f"  └─ Fast charging time: {details.charging_time} minutes",
    ]


def render_configuration(configuration: Configuration) -> str:
    """Full multi-line description of *configuration*."""
    info = configuration.describe()
    lines = [
        header(f"{info['brand']} {info['model']} ({info['year']})"),
        f"{BOLD}Color: {RESET}{info['color']}",
        f"{BOLD}Base price: {RESET}{format_price(info['base_price'])}",
    ]

    engine = info["engine"]
    if engine is not None:
        lines += [
            f"{BOLD}\nEngine: {RESET}{engine['name']}",
            f"  ├─ Capacity: {engine['capacity']:g}L",
            f"  ├─ Power: {engine['horse_power']} HP",
            f"  ├─ Fuel type: {engine['fuel_type']}",
        ]
        if engine["co2_emissions"] > 0:
            lines.append(f"  ├─ CO2 emissions: {engine['co2_emissions']} g/km")
        if engine["fuel_consumption"] > 0:
            lines.append(f"  ├─ Fuel consumption: {engine['fuel_consumption']:g} l/100km")
        lines.append(f"  └─ Price: {format_price(engine['price'])}")

    if configuration.equipment:
        lines.append(f"{BOLD}\nSelected equipment:{RESET}")
        lines.append(render_breakdown(configuration))

    if info["discount"] > 0:
        lines.append(
            f"{BOLD}\nDiscount: {RESET}{info['discount']:g}% "
            f"({format_price(info['discount_amount'])})"
        )

    lines.append(f"{BOLD}{GREEN}\nTotal price: {format_price(info['total_price'])}{RESET}")
    lines += _variant_lines(configuration.vehicle)
    return "\n".join(lines)


def render_breakdown(configuration: Configuration) -> str:
    """Selected equipment grouped by category with totals and shares."""
    breakdown = equipment_breakdown(configuration)
    if breakdown.empty:
        return warning("No equipment added yet.")

    lines: list[str] = []
    for label, row in breakdown.iterrows():
        lines.append(f"{YELLOW}  {label}:{RESET}")
        for item in configuration.equipment:
            if item.category.label == label:
                lines.append(f"    ├─ {item.name}: {format_price(item.price)}")
                lines.append(f"    │  {item.description}")
        lines.append(
            f"    └─ {BOLD}Category total: {format_price(row['total'])} "
            f"({row['share']:.1f}% of equipment cost){RESET}"
        )
    lines.append(
        f"{BOLD}  Total equipment cost: {format_price(breakdown['total'].sum())}{RESET}"
    )
    return "\n".join(lines)


def render_comparison(comparison: ConfigurationComparison) -> str:
    frame = comparison.to_frame()
    display = pd.DataFrame(index=frame.index, columns=frame.columns, dtype=object)
    for feature, row in frame.iterrows():
        for column in (CURRENT_COLUMN, SAVED_COLUMN):
            value = row[column]
            if feature == "Price Difference":
                text = format_signed_price(value) if column == CURRENT_COLUMN else ""
            elif feature == "Engine":
                text = "Engine selected" if value else "No engine selected"
            elif feature in ("Base Price", "Total Price"):
                text = format_price(value)
            else:
                text = str(value)
            display.loc[feature, column] = text
    return "\n".join([header("Configuration Comparison"), display.to_string()])


# ---------------------------------------------------------------------------
# Visualisation
# ---------------------------------------------------------------------------

_SEDAN_ART = [
    "          ______--------___",
    "         /|             / |",
    "        / |  ___      /   |",
    "       /__|_/   \\____/    |",
    "      |            |     _|",
    "      |____________|____/",
    "      |            |",
    "      \\____________/",
    "       O        O",
]
_HATCHBACK_ART = [
    "         __---~~~~--__",
    "       /|             \\",
    "      / |  ___        |",
    "     /__|_/   \\____   |",
    "    |            |   _|",
    "    |____________|__/",
    "    |            |",
    "    \\____________/",
    "     O        O",
]
_SUV_ART = [
    "         __---~~~~--__",
    "       /|             \\",
    "      / |  ___        |",
    "     /__|_/   \\____   |",
    "    |            |    |",
    "    |            |    |",
    "    |____________|____|",
    "    |            |",
    "    \\____________/",
    "     O        O",
]
_CAR_ART = [
    "    ____",
    " __/  |_\\_",
    "|  _     _`-.",
    "'-(_)---(_)--'",
]
_MOTORCYCLE_ART = [
    "        __o",
    "      _ \\<_",
    "     (_)/(_)",
]
_CRUISER_ART = [
    "         ___",
    "   __o  /   \\",
    " _ \\<_ /_____\\",
    "(_)/(_)    (_)",
]
_ELECTRIC_ART = [
    "      ____________",
    "     /  ⚡        \\",
    "  __/______________\\__",
    " |  _            _    |",
    " '-(_)----------(_)--'",
]


def ascii_art(vehicle: Vehicle) -> list[str]:
    details = vehicle.details
    if isinstance(details, CarDetails):
        return {
            "Sedan": _SEDAN_ART,
            "Hatchback": _HATCHBACK_ART,
            "SUV": _SUV_ART,
        }.get(details.body_type, _CAR_ART)
    if isinstance(details, MotorcycleDetails):
        return _CRUISER_ART if details.type == "Cruiser" else _MOTORCYCLE_ART
    return _ELECTRIC_ART


def render_visualization(configuration: Configuration) -> str:
    vehicle = configuration.vehicle
    code = paint(configuration.color)
    lines = [
        header(f"Visualization of {vehicle.identity} in {configuration.color} color")
    ]
    lines += [f"{code}{line}{RESET}" for line in ascii_art(vehicle)]
    return "\n".join(lines)


def report_filename(configuration: Configuration) -> str:
    """Name of the (simulated) PDF report for *configuration*."""
    vehicle = configuration.vehicle
    return f"{vehicle.brand}_{vehicle.model}_report.pdf"
