"""Teensy firmware upload control on top of teensy_loader_cli."""

__version__ = "0.1.0"
