"""vessel: simple package management for Motoko."""

__version__ = "0.8.0"
