"""Interactive numbered menu for the vehicle configurator.

Each menu entry maps to one handler.  Handlers call into
:mod:`vehicle_configurator.core.service` and print the rendered result;
any :class:`ConfiguratorError` is reported and the loop carries on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from vehicle_configurator import __version__
from vehicle_configurator.config import configure_logger, load_catalog
from vehicle_configurator.core import service
from vehicle_configurator.core.catalog import Catalog
from vehicle_configurator.core.errors import ConfiguratorError
from vehicle_configurator.core.service import DEFAULT_CONFIGS_DIR, Session
from vehicle_configurator.core.vehicle import EquipmentChange
from vehicle_configurator.render import (
    BOLD,
    RESET,
    YELLOW,
    failure,
    header,
    menu_item,
    render_color_list,
    render_comparison,
    render_configuration,
    render_engine_list,
    render_equipment_list,
    render_selected_equipment,
    render_vehicle_list,
    render_visualization,
    report_filename,
    success,
    warning,
)

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]

MENU: tuple[tuple[int, str], ...] = (
    (1, "Select vehicle"),
    (2, "Select engine"),
    (3, "Add equipment"),
    (4, "Remove equipment"),
    (5, "Select color"),
    (6, "Apply discount"),
    (7, "Display current configuration"),
    (8, "Visualize vehicle"),
    (9, "Save configuration"),
    (10, "Load configuration"),
    (11, "Save for comparison"),
    (12, "Compare configurations"),
    (13, "Generate PDF report"),
    (0, "Exit"),
)

BANNER = f"""{BOLD}Vehicle Configurator v{__version__}{RESET}
{YELLOW}Welcome to the Vehicle Configurator!{RESET}
This application allows you to configure your dream vehicle with various options.
"""


class ConfiguratorMenu:
    """State and handlers for one interactive session.

    Attributes:
        catalog: Inventory offered to the user.
        session: Explicit session state threaded into every operation.
        configs_dir: Directory used for save and load.
    """

    def __init__(
        self,
        catalog: Catalog,
        session: Session | None = None,
        input_fn: InputFn = input,
        configs_dir: str | Path = DEFAULT_CONFIGS_DIR,
    ) -> None:
        self.catalog = catalog
        self.session = session if session is not None else Session()
        self.configs_dir = configs_dir
        self._input = input_fn
        self._handlers: dict[int, Callable[[], None]] = {
            1: self.select_vehicle,
            2: self.select_engine,
            3: self.add_equipment,
            4: self.remove_equipment,
            5: self.select_color,
            6: self.apply_discount,
            7: self.display,
            8: self.visualize,
            9: self.save,
            10: self.load,
            11: self.save_for_comparison,
            12: self.compare,
            13: self.generate_report,
        }

    # -- Input helpers -------------------------------------------------------

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def _ask_int(self, prompt: str) -> int | None:
        raw = self._ask(prompt)
        try:
            return int(raw)
        except ValueError:
            print(failure(f"'{raw}' is not a number."))
            return None

    def _ask_float(self, prompt: str) -> float | None:
        raw = self._ask(prompt)
        try:
            return float(raw)
        except ValueError:
            print(failure(f"'{raw}' is not a number."))
            return None

    def _need_vehicle(self) -> bool:
        if not self.session.has_vehicle:
            print(warning("Please select a vehicle first."))
            return False
        return True

    # -- Menu handlers -------------------------------------------------------

    def select_vehicle(self) -> None:
        print(render_vehicle_list(self.catalog))
        index = self._ask_int("\nSelect vehicle number (0 to cancel): ")
        if not index:
            return
        configuration = service.select_vehicle(self.session, self.catalog, index)
        print(success(f"You've selected: {configuration.vehicle.identity}"))

    def select_engine(self) -> None:
        if not self._need_vehicle():
            return
        print(render_engine_list(self.catalog))
        index = self._ask_int("\nSelect engine number (0 to cancel): ")
        if not index:
            return
        configuration = service.select_engine(self.session, self.catalog, index)
        print(success(f"Engine selected: {configuration.engine.name}"))

    def add_equipment(self) -> None:
        if not self._need_vehicle():
            return
        print(render_equipment_list(self.catalog))
        prompt = "\nSelect equipment number (0 to finish): "
        while True:
            index = self._ask_int(prompt)
            prompt = "Select next equipment (0 to finish): "
            if index is None:
                continue
            if index == 0:
                return
            try:
                change = service.add_equipment(self.session, self.catalog, index)
            except ConfiguratorError as exc:
                print(failure(str(exc)))
                continue
            name = self.catalog.equipment_at(index).name
            if change is EquipmentChange.ADDED:
                print(success(f"{name} added to configuration."))
            else:
                print(warning(f"{name} is already in your configuration."))

    def remove_equipment(self) -> None:
        if not self._need_vehicle():
            return
        configuration = self.session.current
        if not configuration.equipment:
            print(warning("No equipment to remove."))
            return
        print(render_selected_equipment(configuration))
        index = self._ask_int("\nSelect equipment to remove: ")
        if not index:
            return
        name = (
            configuration.equipment[index - 1].name
            if 1 <= index <= len(configuration.equipment)
            else None
        )
        change = service.remove_equipment_by_choice(self.session, index)
        if change is EquipmentChange.REMOVED:
            print(success(f"{name} removed from configuration."))
        else:
            print(warning(f"{name} is not in your configuration."))

    def select_color(self) -> None:
        if not self._need_vehicle():
            return
        print(render_color_list(self.catalog))
        index = self._ask_int("\nSelect color number (0 to cancel): ")
        if not index:
            return
        configuration = service.select_color(self.session, self.catalog, index)
        print(success(f"Color selected: {configuration.color}"))

    def apply_discount(self) -> None:
        if not self._need_vehicle():
            return
        print(header("Apply Discount"))
        percent = self._ask_float(
            f"Enter discount percentage (0-{service.MAX_DISCOUNT:g}): "
        )
        if percent is None:
            return
        service.apply_discount(self.session, percent)
        print(success(f"{percent:g}% discount applied!"))

    def display(self) -> None:
        if self.session.current is None:
            print(warning("No vehicle selected yet."))
            return
        print(render_configuration(self.session.current))

    def visualize(self) -> None:
        if self.session.current is None:
            print(warning("No vehicle selected yet."))
            return
        print(render_visualization(self.session.current))

    def save(self) -> None:
        if not self._need_vehicle():
            return
        print(header("Save Configuration"))
        name = self._ask("Enter filename (without extension): ")
        path = service.save_configuration(self.session, name, self.configs_dir)
        print(success(f"Configuration saved to {path}"))

    def load(self) -> None:
        print(header("Load Configuration"))
        name = self._ask("Enter filename (without extension): ")
        result = service.load_configuration(
            self.session, self.catalog, name, self.configs_dir
        )
        for skipped in result.skipped:
            print(warning(f"No matching catalog entry found: {skipped}"))
        print(success(f"Configuration has been loaded from file: {result.path}"))

    def save_for_comparison(self) -> None:
        service.save_for_comparison(self.session)
        print(success("Current configuration saved for comparison."))

    def compare(self) -> None:
        comparison = service.compare_configurations(self.session)
        print(render_comparison(comparison))

    def generate_report(self) -> None:
        if self.session.current is None:
            print(warning("No vehicle selected yet."))
            return
        print(success(f"Report has been generated: {report_filename(self.session.current)}"))
        print("  (This is a simulation - no actual PDF was created)")

    # -- Main loop -----------------------------------------------------------

    def run(self) -> None:
        """Show the menu until the user exits or input runs out."""
        print(BANNER)
        while True:
            print(header("Main Menu"))
            for number, text in MENU:
                print(menu_item(number, text))
            try:
                choice = self._ask_int(f"\n{BOLD}Your choice: {RESET}")
                if choice is None:
                    continue
                if choice == 0:
                    print(f"{YELLOW}Thank you for using Vehicle Configurator!{RESET}")
                    return
                handler = self._handlers.get(choice)
                if handler is None:
                    print(failure("Invalid option. Please try again."))
                    continue
                handler()
            except ConfiguratorError as exc:
                logger.debug("Menu option failed: %s", exc)
                print(failure(str(exc)))
            except EOFError:
                print()
                return


def main() -> None:
    """Entry point for the ``vehicle-configurator`` command."""
    configure_logger()
    ConfiguratorMenu(load_catalog()).run()
