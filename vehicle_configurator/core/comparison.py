"""Tabular views of configurations: side-by-side comparison and
per-category equipment cost breakdown."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from vehicle_configurator.core.vehicle import Configuration

CURRENT_COLUMN: str = "Current Configuration"
SAVED_COLUMN: str = "Saved Configuration"


@dataclass(frozen=True)
class ConfigurationSummary:
    """The fields shown for one side of a comparison."""

    vehicle: str
    color: str
    base_price: float
    engine_installed: bool
    total_price: float

    @classmethod
    def of(cls, configuration: Configuration) -> ConfigurationSummary:
        return cls(
            vehicle=configuration.vehicle.identity,
            color=configuration.color,
            base_price=configuration.vehicle.base_price,
            engine_installed=configuration.engine is not None,
            total_price=configuration.total_price(),
        )


@dataclass(frozen=True)
class ConfigurationComparison:
    """Result of comparing the live configuration with a saved snapshot.

    Attributes:
        current: Summary of the live configuration.
        saved: Summary of the snapshot.
        price_difference: ``current.total_price - saved.total_price``;
            positive when the live configuration is more expensive.
    """

    current: ConfigurationSummary
    saved: ConfigurationSummary
    price_difference: float

    def to_frame(self) -> pd.DataFrame:
        """Return the comparison as a Feature-indexed two-column table."""
        rows = {
            "Vehicle": (self.current.vehicle, self.saved.vehicle),
            "Color": (self.current.color, self.saved.color),
            "Base Price": (self.current.base_price, self.saved.base_price),
            "Engine": (self.current.engine_installed, self.saved.engine_installed),
            "Total Price": (self.current.total_price, self.saved.total_price),
            "Price Difference": (self.price_difference, None),
        }
        frame = pd.DataFrame.from_dict(
            rows, orient="index", columns=[CURRENT_COLUMN, SAVED_COLUMN]
        )
        frame.index.name = "Feature"
        return frame


def compare(current: Configuration, saved: Configuration) -> ConfigurationComparison:
    current_summary = ConfigurationSummary.of(current)
    saved_summary = ConfigurationSummary.of(saved)
    return ConfigurationComparison(
        current=current_summary,
        saved=saved_summary,
        price_difference=current_summary.total_price - saved_summary.total_price,
    )


def equipment_breakdown(configuration: Configuration) -> pd.DataFrame:
    """Group the selected equipment by category.

    Returns:
        DataFrame indexed by category label (in category-code order) with
        columns ``items`` (option count), ``total`` (summed price) and
        ``share`` (percent of the whole equipment cost).  Empty when no
        equipment is selected.
    """
    if not configuration.equipment:
        empty = pd.DataFrame(columns=["items", "total", "share"])
        empty.index.name = "category"
        return empty

    frame = pd.DataFrame(
        [
            {
                "code": int(item.category),
                "category": item.category.label,
                "price": item.price,
            }
            for item in configuration.equipment
        ]
    )
    grouped = frame.groupby(["code", "category"], sort=True)["price"].agg(
        items="count", total="sum"
    )
    grouped = grouped.reset_index(level="code", drop=True)
    grouped["share"] = (grouped["total"] / grouped["total"].sum() * 100.0).fillna(0.0)
    return grouped
