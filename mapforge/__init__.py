"""Mapforge - procedural battlemap engine."""

__version__ = "0.1.0"
