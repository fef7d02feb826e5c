"""Configuration service: the operations behind every menu entry.

Session state is an explicit :class:`Session` object that callers pass
into each operation along with the :class:`Catalog`.  Operations either
succeed or raise a :class:`ConfiguratorError`; a failed operation never
leaves the session half-changed.

State machine: a session starts with no vehicle.  :func:`select_vehicle`
moves it to "vehicle selected" (discarding any earlier customisation)
and nothing moves it back.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from vehicle_configurator.core.catalog import Catalog
from vehicle_configurator.core.comparison import (
    ConfigurationComparison,
    compare,
)
from vehicle_configurator.core.errors import (
    CatalogMismatch,
    InvalidSelection,
    MalformedRecord,
    PreconditionUnmet,
)
from vehicle_configurator.core.serialization import (
    read_configuration,
    write_configuration,
)
from vehicle_configurator.core.vehicle import Configuration, EquipmentChange

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAX_DISCOUNT: float = 30.0  # selling policy; the data model itself allows up to 100
DEFAULT_CONFIGS_DIR: str = "configs"
CONFIG_SUFFIX: str = ".txt"

# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


@dataclass
class Session:
    """Mutable state of one interactive session.

    Attributes:
        current: The configuration being edited, or ``None`` before the
            first vehicle is selected.
        comparison: Independent snapshot stored by
            :func:`save_for_comparison`, or ``None``.
    """

    current: Configuration | None = None
    comparison: Configuration | None = None

    @property
    def has_vehicle(self) -> bool:
        return self.current is not None


@dataclass(frozen=True)
class LoadResult:
    """Outcome of :func:`load_configuration`.

    Attributes:
        configuration: The configuration now held by the session.
        path: File that was read.
        skipped: Engine or equipment names from the file that are not in
            the catalog and were left out.
    """

    configuration: Configuration
    path: Path
    skipped: tuple[str, ...] = ()


def _require_vehicle(session: Session) -> Configuration:
    if session.current is None:
        raise PreconditionUnmet("No vehicle selected yet. Please select a vehicle first.")
    return session.current


# ---------------------------------------------------------------------------
# Selection operations
# ---------------------------------------------------------------------------


def select_vehicle(session: Session, catalog: Catalog, index: int) -> Configuration:
    """Start a fresh configuration for catalog vehicle *index* (1-based)."""
    vehicle = catalog.vehicle_at(index)
    session.current = Configuration(vehicle)
    logger.info("Selected vehicle %s", vehicle.identity)
    return session.current


def select_engine(session: Session, catalog: Catalog, index: int) -> Configuration:
    configuration = _require_vehicle(session)
    engine = catalog.engine_at(index)
    configuration.set_engine(engine)
    logger.info("Installed engine %s", engine.name)
    return configuration


def add_equipment(session: Session, catalog: Catalog, index: int) -> EquipmentChange:
    """Add catalog equipment *index*; a duplicate is reported, not raised."""
    configuration = _require_vehicle(session)
    item = catalog.equipment_at(index)
    change = configuration.add_equipment(item)
    logger.info("Equipment %s: %s", item.name, change.value)
    return change


def remove_equipment_by_choice(session: Session, index: int) -> EquipmentChange:
    """Remove the *index*-th (1-based) option of the current configuration."""
    configuration = _require_vehicle(session)
    if not configuration.equipment:
        raise PreconditionUnmet("No equipment to remove.")
    if not 1 <= index <= len(configuration.equipment):
        raise InvalidSelection(
            f"Invalid equipment selection {index}; "
            f"choose 1-{len(configuration.equipment)}."
        )
    name = configuration.equipment[index - 1].name
    change = configuration.remove_equipment(name)
    logger.info("Equipment %s: %s", name, change.value)
    return change


def select_color(session: Session, catalog: Catalog, index: int) -> Configuration:
    configuration = _require_vehicle(session)
    color = catalog.color_at(index)
    configuration.set_color(color)
    logger.info("Applied color %s", color)
    return configuration


def apply_discount(session: Session, percent: float) -> Configuration:
    """Set the discount if it lies within ``[0, MAX_DISCOUNT]``."""
    configuration = _require_vehicle(session)
    if math.isnan(percent) or not 0.0 <= percent <= MAX_DISCOUNT:
        raise InvalidSelection(
            f"Invalid discount {percent}. Maximum allowed discount is "
            f"{MAX_DISCOUNT:g}%."
        )
    configuration.set_discount(percent)
    logger.info("Applied %s%% discount", percent)
    return configuration


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


def resolve_config_path(name: str, configs_dir: str | Path = DEFAULT_CONFIGS_DIR) -> Path:
    """Normalise a user-supplied configuration name into a file path.

    The configs directory is prefixed unless the name already starts
    with it, and ``.txt`` is appended unless already present.
    """
    name = name.strip()
    if not name:
        raise InvalidSelection("Configuration name must not be empty.")

    base = Path(configs_dir)
    path = Path(name)
    if path.is_absolute() or (
        len(path.parts) > len(base.parts)
        and path.parts[: len(base.parts)] == base.parts
    ):
        pass
    elif len(path.parts) > 1 and path.parts[0] == base.name:
        path = base.joinpath(*path.parts[1:])
    else:
        path = base / path

    if path.suffix != CONFIG_SUFFIX:
        path = path.with_name(path.name + CONFIG_SUFFIX)
    return path


def save_configuration(
    session: Session,
    name: str,
    configs_dir: str | Path = DEFAULT_CONFIGS_DIR,
    now: datetime | None = None,
) -> Path:
    """Write the current configuration and return the file path."""
    configuration = _require_vehicle(session)
    path = resolve_config_path(name, configs_dir)
    write_configuration(configuration, path, now=now)
    logger.info("Saved configuration to %s", path)
    return path


def load_configuration(
    session: Session,
    catalog: Catalog,
    name: str,
    configs_dir: str | Path = DEFAULT_CONFIGS_DIR,
) -> LoadResult:
    """Replace the current configuration with the one stored in *name*.

    An unknown vehicle aborts the load; unknown engines and equipment
    are skipped with a warning.  The session is only modified once the
    whole file has been read and resolved.

    Raises:
        ConfigFileNotFound: If the file does not exist.
        ConfigFileUnreadable: If the file cannot be read.
        MalformedRecord: If the contents are invalid.
        CatalogMismatch: If the saved vehicle is not in *catalog*.
    """
    path = resolve_config_path(name, configs_dir)
    record = read_configuration(path)

    saved = record.vehicle
    vehicle = catalog.find_vehicle(saved.brand, saved.model)
    if vehicle is None:
        raise CatalogMismatch(
            f"No matching vehicle found in catalog: {saved.brand} {saved.model}"
        )
    if not 0.0 <= saved.discount <= 100.0:
        raise MalformedRecord(f"DISCOUNT must be within [0, 100], got {saved.discount:g}")

    configuration = Configuration(vehicle, color=saved.color, discount=saved.discount)
    skipped: list[str] = []

    if record.engine is not None:
        engine = catalog.find_engine(record.engine.name)
        if engine is None:
            logger.warning(
                "No matching engine found: %s. Engine will not be configured.",
                record.engine.name,
            )
            skipped.append(record.engine.name)
        else:
            configuration.set_engine(engine)

    for item in record.equipment:
        equipment = catalog.find_equipment(item.name)
        if equipment is None:
            logger.warning("No matching equipment found: %s", item.name)
            skipped.append(item.name)
            continue
        configuration.add_equipment(equipment)

    if record.total_price is not None and not math.isclose(
        record.total_price, configuration.total_price(), rel_tol=1e-9, abs_tol=1e-6
    ):
        logger.debug(
            "Saved total %s differs from recomputed total %s",
            record.total_price,
            configuration.total_price(),
        )

    session.current = configuration
    logger.info("Loaded configuration from %s", path)
    return LoadResult(configuration=configuration, path=path, skipped=tuple(skipped))


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


def save_for_comparison(session: Session) -> Configuration:
    """Store an independent snapshot of the current configuration."""
    configuration = _require_vehicle(session)
    session.comparison = configuration.snapshot()
    logger.info("Saved %s for comparison", configuration.vehicle.identity)
    return session.comparison


def compare_configurations(session: Session) -> ConfigurationComparison:
    if session.current is None:
        raise PreconditionUnmet("No current vehicle selected for comparison.")
    if session.comparison is None:
        raise PreconditionUnmet("No vehicle saved for comparison.")
    return compare(session.current, session.comparison)
