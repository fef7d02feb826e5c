"""Text-menu vehicle configurator."""

__version__ = "2.0.0"
