"""Shift engine: schema models, SQL type mapping and additive migration planning."""

__version__ = "0.1.0"
