"""Tests for the configuration service: selection, discount policy,
save/load and the comparison snapshot."""

from datetime import datetime
from pathlib import Path

import pytest

from vehicle_configurator.config import load_catalog
from vehicle_configurator.core import service
from vehicle_configurator.core.catalog import Catalog
from vehicle_configurator.core.errors import (
    CatalogMismatch,
    ConfigFileNotFound,
    ConfigFileUnwritable,
    InvalidSelection,
    MalformedRecord,
    PreconditionUnmet,
)
from vehicle_configurator.core.service import Session
from vehicle_configurator.core.vehicle import EquipmentChange

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def catalog() -> Catalog:
    return load_catalog()


@pytest.fixture
def configs_dir(tmp_path: Path) -> Path:
    return tmp_path / "configs"


def _configured_session(catalog: Catalog) -> Session:
    """Golf + 1.4 TSI + leather + navigation, red, 10% off."""
    session = Session()
    service.select_vehicle(session, catalog, 1)
    service.select_engine(session, catalog, 1)
    service.add_equipment(session, catalog, 1)
    service.add_equipment(session, catalog, 2)
    service.select_color(session, catalog, 3)
    service.apply_discount(session, 10)
    return session


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def test_price_scenario(catalog: Catalog) -> None:
    """(80000 + 12000 + 5000) * 0.9 = 87300."""
    session = Session()
    service.select_vehicle(session, catalog, 1)
    service.select_engine(session, catalog, 1)
    service.add_equipment(session, catalog, 1)
    service.apply_discount(session, 10)

    assert session.current.vehicle.base_price == 80000.0
    assert session.current.engine.price == 12000.0
    assert session.current.equipment[0].price == 5000.0
    assert session.current.total_price() == pytest.approx(87300.0)


@pytest.mark.parametrize("index", [0, 12, -3])
def test_select_vehicle_out_of_range_leaves_state(catalog: Catalog, index: int) -> None:
    session = Session()
    with pytest.raises(InvalidSelection):
        service.select_vehicle(session, catalog, index)
    assert session.current is None


def test_select_vehicle_discards_previous_customisation(catalog: Catalog) -> None:
    session = _configured_session(catalog)
    service.select_vehicle(session, catalog, 1)

    assert session.current.engine is None
    assert session.current.equipment == []
    assert session.current.color == "White"
    assert session.current.discount == 0.0


def test_same_catalog_vehicle_twice(catalog: Catalog) -> None:
    """Both selections reference the same immutable catalog record."""
    session = Session()
    first = service.select_vehicle(session, catalog, 3)
    second = service.select_vehicle(session, catalog, 3)
    assert first.vehicle is second.vehicle is catalog.vehicles[2]
    assert first is not second


@pytest.mark.parametrize(
    "operation",
    [
        lambda s, c: service.select_engine(s, c, 1),
        lambda s, c: service.add_equipment(s, c, 1),
        lambda s, c: service.remove_equipment_by_choice(s, 1),
        lambda s, c: service.select_color(s, c, 1),
        lambda s, c: service.apply_discount(s, 5),
        lambda s, c: service.save_configuration(s, "x"),
        lambda s, c: service.save_for_comparison(s),
    ],
)
def test_operations_require_vehicle(catalog: Catalog, operation) -> None:
    with pytest.raises(PreconditionUnmet):
        operation(Session(), catalog)


def test_select_engine_out_of_range(catalog: Catalog) -> None:
    session = Session()
    service.select_vehicle(session, catalog, 1)
    with pytest.raises(InvalidSelection):
        service.select_engine(session, catalog, 9)
    assert session.current.engine is None


def test_add_equipment_twice_reports_duplicate(catalog: Catalog) -> None:
    session = Session()
    service.select_vehicle(session, catalog, 2)
    assert service.add_equipment(session, catalog, 4) is EquipmentChange.ADDED
    assert service.add_equipment(session, catalog, 4) is EquipmentChange.ALREADY_PRESENT
    assert len(session.current.equipment) == 1


def test_remove_equipment_by_choice(catalog: Catalog) -> None:
    session = _configured_session(catalog)
    assert service.remove_equipment_by_choice(session, 1) is EquipmentChange.REMOVED
    assert [e.name for e in session.current.equipment] == ["Navigation system"]

    with pytest.raises(InvalidSelection):
        service.remove_equipment_by_choice(session, 2)
    assert len(session.current.equipment) == 1


def test_remove_equipment_when_none_selected(catalog: Catalog) -> None:
    session = Session()
    service.select_vehicle(session, catalog, 1)
    with pytest.raises(PreconditionUnmet, match="No equipment"):
        service.remove_equipment_by_choice(session, 1)


def test_select_color(catalog: Catalog) -> None:
    session = Session()
    service.select_vehicle(session, catalog, 1)
    service.select_color(session, catalog, 4)
    assert session.current.color == "Blue"
    with pytest.raises(InvalidSelection):
        service.select_color(session, catalog, 11)
    assert session.current.color == "Blue"


# ---------------------------------------------------------------------------
# Discount policy
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("percent", [0, 30, 0.5, 29.99])
def test_discount_accepted(catalog: Catalog, percent: float) -> None:
    session = Session()
    service.select_vehicle(session, catalog, 1)
    service.apply_discount(session, percent)
    assert session.current.discount == percent


@pytest.mark.parametrize("percent", [31, -1, 30.01, float("nan")])
def test_discount_rejected_without_mutation(catalog: Catalog, percent: float) -> None:
    session = Session()
    service.select_vehicle(session, catalog, 1)
    service.apply_discount(session, 5)
    with pytest.raises(InvalidSelection, match="Maximum allowed discount is 30%"):
        service.apply_discount(session, percent)
    assert session.current.discount == 5


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "name, expected",
    [
        ("myconfig", Path("configs/myconfig.txt")),
        ("configs/myconfig", Path("configs/myconfig.txt")),
        ("myconfig.txt", Path("configs/myconfig.txt")),
        ("configs/myconfig.txt", Path("configs/myconfig.txt")),
        ("  spaced  ", Path("configs/spaced.txt")),
        ("configs", Path("configs/configs.txt")),
        ("configs.txt", Path("configs/configs.txt")),
    ],
)
def test_resolve_config_path(name: str, expected: Path) -> None:
    assert service.resolve_config_path(name) == expected


def test_resolve_config_path_with_custom_directory(configs_dir: Path) -> None:
    assert (
        service.resolve_config_path("configs/golf", configs_dir)
        == configs_dir / "golf.txt"
    )
    assert service.resolve_config_path("golf", configs_dir) == configs_dir / "golf.txt"


def test_resolve_config_path_rejects_empty_name() -> None:
    with pytest.raises(InvalidSelection):
        service.resolve_config_path("   ")


# ---------------------------------------------------------------------------
# Save / load
# ---------------------------------------------------------------------------


def test_save_creates_configs_file(catalog: Catalog, configs_dir: Path) -> None:
    """Saving two options yields COUNT=2 and two item blocks."""
    session = _configured_session(catalog)
    path = service.save_configuration(
        session, "myconfig", configs_dir, now=datetime(2024, 1, 2, 3, 4, 5)
    )

    assert path == configs_dir / "myconfig.txt"
    text = path.read_text(encoding="utf-8")
    assert "COUNT=2" in text
    assert "[EQUIPMENT_ITEM_1]" in text
    assert "[EQUIPMENT_ITEM_2]" in text
    assert "[EQUIPMENT_ITEM_3]" not in text
    assert "DATE 2024-01-02 03:04:05" in text


def test_save_into_blocked_directory(catalog: Catalog, configs_dir: Path) -> None:
    configs_dir.parent.mkdir(parents=True, exist_ok=True)
    configs_dir.write_text("", encoding="utf-8")
    session = _configured_session(catalog)
    with pytest.raises(ConfigFileUnwritable):
        service.save_configuration(session, "myconfig", configs_dir)
    assert session.current.vehicle.identity == "Volkswagen Golf"


def test_save_uses_relative_configs_directory(
    catalog: Catalog, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    session = _configured_session(catalog)
    path = service.save_configuration(session, "myconfig")
    assert path == Path("configs/myconfig.txt")
    assert (tmp_path / "configs" / "myconfig.txt").is_file()


def test_round_trip_into_fresh_session(catalog: Catalog, configs_dir: Path) -> None:
    original = _configured_session(catalog)
    service.save_configuration(original, "myconfig", configs_dir)

    fresh = Session()
    result = service.load_configuration(fresh, catalog, "myconfig", configs_dir)
    loaded = fresh.current

    assert result.configuration is loaded
    assert result.skipped == ()
    assert loaded.vehicle is original.current.vehicle
    assert loaded.engine is original.current.engine
    assert loaded.color == "Red"
    assert loaded.discount == 10.0
    assert {e.name for e in loaded.equipment} == {
        e.name for e in original.current.equipment
    }
    assert loaded.total_price() == pytest.approx(original.current.total_price())


def test_round_trip_without_engine(catalog: Catalog, configs_dir: Path) -> None:
    session = Session()
    service.select_vehicle(session, catalog, 10)
    service.save_configuration(session, "tesla", configs_dir)

    fresh = Session()
    service.load_configuration(fresh, catalog, "tesla", configs_dir)
    assert fresh.current.vehicle.identity == "Tesla Model 3"
    assert fresh.current.engine is None
    assert fresh.current.equipment == []


def test_load_replaces_rather_than_merges(catalog: Catalog, configs_dir: Path) -> None:
    saved = Session()
    service.select_vehicle(saved, catalog, 1)
    service.add_equipment(saved, catalog, 3)
    service.save_configuration(saved, "roof", configs_dir)

    session = _configured_session(catalog)
    service.load_configuration(session, catalog, "roof", configs_dir)
    assert [e.name for e in session.current.equipment] == ["Panoramic roof"]


def test_load_missing_file(catalog: Catalog, configs_dir: Path) -> None:
    session = _configured_session(catalog)
    before = session.current
    with pytest.raises(ConfigFileNotFound):
        service.load_configuration(session, catalog, "ghost", configs_dir)
    assert session.current is before


def _write(configs_dir: Path, name: str, text: str) -> None:
    configs_dir.mkdir(parents=True, exist_ok=True)
    (configs_dir / f"{name}.txt").write_text(text, encoding="utf-8")


_UNKNOWN_VEHICLE = """VEHICLE_CONFIGURATION
VERSION 2.0
DATE 2024-01-01 00:00:00

[VEHICLE]
BRAND=Lada
MODEL=Niva
YEAR=1977
BASE_PRICE=10000
COLOR=Green
DISCOUNT=0

[EQUIPMENT]
COUNT=0

[SUMMARY]
TOTAL_PRICE=10000
"""


def test_load_unknown_vehicle_aborts(catalog: Catalog, configs_dir: Path) -> None:
    """A vehicle missing from the catalog fails the load and keeps state."""
    _write(configs_dir, "lada", _UNKNOWN_VEHICLE)
    session = _configured_session(catalog)
    before = session.current
    before_total = before.total_price()

    with pytest.raises(CatalogMismatch, match="Lada Niva"):
        service.load_configuration(session, catalog, "lada", configs_dir)

    assert session.current is before
    assert session.current.total_price() == before_total
    assert session.current.color == "Red"


def test_load_skips_unknown_engine_and_equipment(
    catalog: Catalog, configs_dir: Path, caplog: pytest.LogCaptureFixture
) -> None:
    text = (
        _UNKNOWN_VEHICLE.replace("BRAND=Lada", "BRAND=Audi")
        .replace("MODEL=Niva", "MODEL=A4")
        .replace(
            "[EQUIPMENT]\nCOUNT=0\n",
            "[ENGINE]\nNAME=W16\nCAPACITY=8\nHORSEPOWER=1500\nFUEL_TYPE=Gasoline\n"
            "PRICE=1\nCO2_EMISSIONS=500\nFUEL_CONSUMPTION=25\n\n"
            "[EQUIPMENT]\nCOUNT=2\n\n"
            "[EQUIPMENT_ITEM_1]\nNAME=Jet pack\nDESCRIPTION=x\nPRICE=1\nCATEGORY=4\n\n"
            "[EQUIPMENT_ITEM_2]\nNAME=Heated seats\nDESCRIPTION=Heated front seats\n"
            "PRICE=2000\nCATEGORY=0\n",
        )
    )
    _write(configs_dir, "audi", text)

    session = Session()
    with caplog.at_level("WARNING"):
        result = service.load_configuration(session, catalog, "audi", configs_dir)

    assert result.skipped == ("W16", "Jet pack")
    assert session.current.vehicle.identity == "Audi A4"
    assert session.current.engine is None
    assert [e.name for e in session.current.equipment] == ["Heated seats"]
    assert session.current.color == "Green"
    assert "W16" in caplog.text
    assert "Jet pack" in caplog.text


def test_load_malformed_number_is_recoverable(catalog: Catalog, configs_dir: Path) -> None:
    _write(configs_dir, "bad", _UNKNOWN_VEHICLE.replace("DISCOUNT=0", "DISCOUNT=ten"))
    session = _configured_session(catalog)
    before = session.current
    with pytest.raises(MalformedRecord):
        service.load_configuration(session, catalog, "bad", configs_dir)
    assert session.current is before


def test_load_rejects_out_of_range_discount(catalog: Catalog, configs_dir: Path) -> None:
    text = (
        _UNKNOWN_VEHICLE.replace("BRAND=Lada", "BRAND=Audi")
        .replace("MODEL=Niva", "MODEL=A4")
        .replace("DISCOUNT=0", "DISCOUNT=150")
    )
    _write(configs_dir, "greedy", text)
    with pytest.raises(MalformedRecord, match="DISCOUNT"):
        service.load_configuration(Session(), catalog, "greedy", configs_dir)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


def test_compare_requires_both_sides(catalog: Catalog) -> None:
    session = Session()
    with pytest.raises(PreconditionUnmet, match="No current vehicle"):
        service.compare_configurations(session)

    service.select_vehicle(session, catalog, 1)
    with pytest.raises(PreconditionUnmet, match="No vehicle saved"):
        service.compare_configurations(session)


def test_comparison_snapshot_is_not_aliased(catalog: Catalog) -> None:
    """Editing after save-for-comparison must not change the saved side."""
    session = Session()
    service.select_vehicle(session, catalog, 1)
    service.save_for_comparison(session)

    service.select_engine(session, catalog, 1)
    service.add_equipment(session, catalog, 1)
    service.select_color(session, catalog, 2)

    result = service.compare_configurations(session)
    assert session.comparison is not session.current
    assert result.saved.total_price == 80000.0
    assert result.saved.color == "White"
    assert result.saved.engine_installed is False
    assert result.current.total_price == 97000.0
    assert result.current.engine_installed is True
    assert result.price_difference == 17000.0
