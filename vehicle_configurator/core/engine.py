"""Engine model for the vehicle configurator."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Engine:
    """Immutable catalog engine.

    Attributes:
        name: Unique engine name (the lookup key).
        capacity: Displacement in litres (0.0 for electric motors).
        horse_power: Rated power in HP.
        fuel_type: Fuel label, e.g. "Gasoline" or "Electric".
        price: Engine price added to the vehicle total.
        co2_emissions: CO2 emissions in g/km (0 when not applicable).
        fuel_consumption: Consumption in l/100km (0.0 when not applicable).
    """

    name: str
    capacity: float
    horse_power: int
    fuel_type: str
    price: float
    co2_emissions: int = 0
    fuel_consumption: float = 0.0

    def __post_init__(self) -> None:
        """Validate engine parameters."""
        if not self.name:
            raise ValueError("Engine name must not be empty.")
        if self.capacity < 0.0:
            raise ValueError("capacity must be >= 0.")
        if self.horse_power < 0:
            raise ValueError("horse_power must be >= 0.")
        if self.price < 0.0:
            raise ValueError("price must be >= 0.")
        if self.co2_emissions < 0:
            raise ValueError("co2_emissions must be >= 0.")
        if self.fuel_consumption < 0.0:
            raise ValueError("fuel_consumption must be >= 0.")
