"""Flat-file persistence for vehicle configurations.

The on-disk layout is a short header followed by ``[SECTION]`` blocks of
``KEY=VALUE`` lines::

    VEHICLE_CONFIGURATION
    VERSION 2.0
    DATE 2024-05-01 12:00:00

    [VEHICLE]
    BRAND=Volkswagen
    ...

    [SUMMARY]
    TOTAL_PRICE=87300

The writer always emits sections and keys in the fixed order above.  The
reader tokenizes by section instead of by line position: blank lines and
``;``/``#`` comments are skipped, key order inside a section is free,
and every missing key or bad number surfaces as :class:`MalformedRecord`
with the line it came from.

Reading only produces plain records.  Matching them against a catalog
is the service layer's job.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from vehicle_configurator.core.equipment import EquipmentCategory
from vehicle_configurator.core.errors import (
    ConfigFileNotFound,
    ConfigFileUnreadable,
    ConfigFileUnwritable,
    MalformedRecord,
    UnserializableValue,
)
from vehicle_configurator.core.vehicle import Configuration

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAGIC: str = "VEHICLE_CONFIGURATION"
FORMAT_VERSION: str = "2.0"
DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
_SUPPORTED_MAJOR_VERSIONS: frozenset[int] = frozenset({1, 2})

_ITEM_PREFIX: str = "EQUIPMENT_ITEM_"
_FIXED_SECTIONS: frozenset[str] = frozenset({"VEHICLE", "ENGINE", "EQUIPMENT", "SUMMARY"})

# ---------------------------------------------------------------------------
# Parsed records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VehicleRecord:
    brand: str
    model: str
    year: str
    base_price: float
    color: str
    discount: float


@dataclass(frozen=True)
class EngineRecord:
    name: str
    capacity: float
    horse_power: int
    fuel_type: str
    price: float
    co2_emissions: int
    fuel_consumption: float


@dataclass(frozen=True)
class EquipmentRecord:
    name: str
    description: str
    price: float
    category: EquipmentCategory


@dataclass(frozen=True)
class ConfigurationRecord:
    """Everything a saved configuration file states, unresolved.

    Attributes:
        version: Format version from the header.
        date: Timestamp text from the header (may be empty).
        vehicle: Contents of ``[VEHICLE]``.
        engine: Contents of ``[ENGINE]``, or ``None`` when absent.
        equipment: Contents of the ``[EQUIPMENT_ITEM_n]`` blocks in order.
        total_price: ``[SUMMARY]`` total as written, or ``None``.
    """

    version: str
    date: str
    vehicle: VehicleRecord
    engine: EngineRecord | None = None
    equipment: tuple[EquipmentRecord, ...] = field(default_factory=tuple)
    total_price: float | None = None


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def format_decimal(value: float) -> str:
    """Render a number without a trailing ``.0`` and without losing precision."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _text(value: str) -> str:
    if "\n" in value or "\r" in value:
        raise UnserializableValue(f"Value {value!r} cannot span multiple lines.")
    return value


def dump_configuration(
    configuration: Configuration, now: datetime | None = None
) -> str:
    """Serialise *configuration* to the flat text format."""
    stamp = (now or datetime.now()).strftime(DATE_FORMAT)
    vehicle = configuration.vehicle
    lines: list[str] = [
        MAGIC,
        f"VERSION {FORMAT_VERSION}",
        f"DATE {stamp}",
        "",
        "[VEHICLE]",
        f"BRAND={_text(vehicle.brand)}",
        f"MODEL={_text(vehicle.model)}",
        f"YEAR={_text(vehicle.year)}",
        f"BASE_PRICE={format_decimal(vehicle.base_price)}",
        f"COLOR={_text(configuration.color)}",
        f"DISCOUNT={format_decimal(configuration.discount)}",
        "",
    ]

    engine = configuration.engine
    if engine is not None:
        lines += [
            "[ENGINE]",
            f"NAME={_text(engine.name)}",
            f"CAPACITY={format_decimal(engine.capacity)}",
            f"HORSEPOWER={engine.horse_power}",
            f"FUEL_TYPE={_text(engine.fuel_type)}",
            f"PRICE={format_decimal(engine.price)}",
            f"CO2_EMISSIONS={engine.co2_emissions}",
            f"FUEL_CONSUMPTION={format_decimal(engine.fuel_consumption)}",
            "",
        ]

    lines += [
        "[EQUIPMENT]",
        f"COUNT={len(configuration.equipment)}",
        "",
    ]
    for number, item in enumerate(configuration.equipment, start=1):
        lines += [
            f"[{_ITEM_PREFIX}{number}]",
            f"NAME={_text(item.name)}",
            f"DESCRIPTION={_text(item.description)}",
            f"PRICE={format_decimal(item.price)}",
            f"CATEGORY={int(item.category)}",
            "",
        ]

    lines += [
        "[SUMMARY]",
        f"TOTAL_PRICE={format_decimal(configuration.total_price())}",
    ]
    return "\n".join(lines) + "\n"


def write_configuration(
    configuration: Configuration, path: Path, now: datetime | None = None
) -> Path:
    """Write *configuration* to *path*, creating the parent directory.

    The text is built before the file is opened, so a value that cannot
    be serialised leaves an existing file untouched.

    Raises:
        UnserializableValue: If a value cannot be stored in this format.
        ConfigFileUnwritable: If the directory or file cannot be written.
    """
    text = dump_configuration(configuration, now=now)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as exc:
        raise ConfigFileUnwritable(f"Cannot write configuration file {path}: {exc}") from exc
    return path


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class _Section:
    """Key/value pairs of one ``[NAME]`` block with their line numbers."""

    __slots__ = ("name", "line_number", "values")

    def __init__(self, name: str, line_number: int) -> None:
        self.name = name
        self.line_number = line_number
        self.values: dict[str, tuple[str, int]] = {}

    def text(self, key: str) -> str:
        if key not in self.values:
            raise MalformedRecord(
                f"[{self.name}] is missing required key {key}", self.line_number
            )
        return self.values[key][0]

    def number(self, key: str) -> float:
        raw = self.text(key)
        line_number = self.values[key][1]
        try:
            value = float(raw)
        except ValueError:
            raise MalformedRecord(
                f"[{self.name}] {key} must be a number, got {raw!r}", line_number
            ) from None
        if not math.isfinite(value):
            raise MalformedRecord(
                f"[{self.name}] {key} must be finite, got {raw!r}", line_number
            )
        return value

    def integer(self, key: str) -> int:
        raw = self.text(key)
        line_number = self.values[key][1]
        try:
            return int(raw.strip())
        except ValueError:
            raise MalformedRecord(
                f"[{self.name}] {key} must be an integer, got {raw!r}", line_number
            ) from None


def _tokenize(text: str) -> tuple[dict[str, tuple[str, int]], dict[str, _Section]]:
    """Split *text* into header fields and named sections."""
    header: dict[str, tuple[str, int]] = {}
    sections: dict[str, _Section] = {}
    current: _Section | None = None
    seen_magic = False

    for line_number, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped or stripped[0] in ";#":
            continue

        if not seen_magic:
            if stripped != MAGIC:
                raise MalformedRecord(
                    f"expected {MAGIC} header, got {stripped!r}", line_number
                )
            seen_magic = True
            continue

        if stripped.startswith("[") and stripped.endswith("]"):
            name = stripped[1:-1].strip()
            if name in sections:
                raise MalformedRecord(f"duplicate section [{name}]", line_number)
            if name not in _FIXED_SECTIONS and not name.startswith(_ITEM_PREFIX):
                raise MalformedRecord(f"unknown section [{name}]", line_number)
            current = _Section(name, line_number)
            sections[name] = current
            continue

        if current is None:
            key, _, value = stripped.partition(" ")
            if key not in ("VERSION", "DATE"):
                raise MalformedRecord(f"unexpected header line {stripped!r}", line_number)
            header[key] = (value.strip(), line_number)
            continue

        if "=" not in raw:
            raise MalformedRecord(
                f"expected KEY=VALUE in [{current.name}], got {stripped!r}", line_number
            )
        key, _, value = raw.partition("=")
        key = key.strip()
        if key in current.values:
            raise MalformedRecord(
                f"duplicate key {key} in [{current.name}]", line_number
            )
        current.values[key] = (value, line_number)

    if not seen_magic:
        raise MalformedRecord("file is empty")
    return header, sections


def _check_version(header: dict[str, tuple[str, int]]) -> str:
    if "VERSION" not in header:
        raise MalformedRecord("header is missing VERSION")
    version, line_number = header["VERSION"]
    major, _, _ = version.partition(".")
    try:
        major_number = int(major)
    except ValueError:
        raise MalformedRecord(f"bad VERSION {version!r}", line_number) from None
    if major_number not in _SUPPORTED_MAJOR_VERSIONS:
        raise MalformedRecord(f"unsupported VERSION {version!r}", line_number)
    return version


def parse_configuration(text: str) -> ConfigurationRecord:
    """Parse the flat text format into a :class:`ConfigurationRecord`.

    Raises:
        MalformedRecord: On any structural problem, missing key, bad
            number or unknown equipment category.
    """
    header, sections = _tokenize(text)
    version = _check_version(header)
    date = header.get("DATE", ("", 0))[0]

    if "VEHICLE" not in sections:
        raise MalformedRecord("missing [VEHICLE] section")
    vsec = sections["VEHICLE"]
    vehicle = VehicleRecord(
        brand=vsec.text("BRAND"),
        model=vsec.text("MODEL"),
        year=vsec.text("YEAR"),
        base_price=vsec.number("BASE_PRICE"),
        color=vsec.text("COLOR"),
        discount=vsec.number("DISCOUNT"),
    )

    engine: EngineRecord | None = None
    if "ENGINE" in sections:
        esec = sections["ENGINE"]
        engine = EngineRecord(
            name=esec.text("NAME"),
            capacity=esec.number("CAPACITY"),
            horse_power=esec.integer("HORSEPOWER"),
            fuel_type=esec.text("FUEL_TYPE"),
            price=esec.number("PRICE"),
            co2_emissions=esec.integer("CO2_EMISSIONS"),
            fuel_consumption=esec.number("FUEL_CONSUMPTION"),
        )

    if "EQUIPMENT" not in sections:
        raise MalformedRecord("missing [EQUIPMENT] section")
    count_section = sections["EQUIPMENT"]
    count = count_section.integer("COUNT")
    if count < 0:
        raise MalformedRecord(
            f"COUNT must be >= 0, got {count}", count_section.values["COUNT"][1]
        )

    item_names = [name for name in sections if name.startswith(_ITEM_PREFIX)]
    if len(item_names) != count:
        raise MalformedRecord(
            f"COUNT={count} but found {len(item_names)} equipment item section(s)",
            count_section.values["COUNT"][1],
        )
    # Section names are unique, so this leaves exactly 1..COUNT.
    for name in item_names:
        suffix = name[len(_ITEM_PREFIX) :]
        if (
            not suffix.isdecimal()
            or str(int(suffix)) != suffix
            or not 1 <= int(suffix) <= count
        ):
            raise MalformedRecord(
                f"unexpected section [{name}] for COUNT={count}",
                sections[name].line_number,
            )

    equipment: list[EquipmentRecord] = []
    for number in range(1, count + 1):
        isec = sections[f"{_ITEM_PREFIX}{number}"]
        code = isec.integer("CATEGORY")
        try:
            category = EquipmentCategory(code)
        except ValueError:
            raise MalformedRecord(
                f"[{isec.name}] unknown CATEGORY {code}", isec.values["CATEGORY"][1]
            ) from None
        equipment.append(
            EquipmentRecord(
                name=isec.text("NAME"),
                description=isec.text("DESCRIPTION"),
                price=isec.number("PRICE"),
                category=category,
            )
        )

    total_price: float | None = None
    if "SUMMARY" in sections:
        total_price = sections["SUMMARY"].number("TOTAL_PRICE")

    return ConfigurationRecord(
        version=version,
        date=date,
        vehicle=vehicle,
        engine=engine,
        equipment=tuple(equipment),
        total_price=total_price,
    )


def read_configuration(path: Path) -> ConfigurationRecord:
    """Read and parse the configuration file at *path*.

    Raises:
        ConfigFileNotFound: If *path* does not exist.
        ConfigFileUnreadable: If the file cannot be opened or decoded.
        MalformedRecord: If the contents do not parse.
    """
    if not path.is_file():
        raise ConfigFileNotFound(f"Configuration file not found: {path}")
    try:
        with open(path, encoding="utf-8") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigFileUnreadable(f"Cannot read configuration file {path}: {exc}") from exc
    return parse_configuration(text)
