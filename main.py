"""CLI entrypoint for the Vehicle Configurator."""

from __future__ import annotations

import sys

from vehicle_configurator.cli import main

if __name__ == "__main__":
    sys.exit(main() or 0)
