"""Inventory and catalog service for a coffee roastery."""

__version__ = "0.1.0"
