"""Milling simulation: G-code I/O, height-map cutting, surface patches and tool-path generation."""

__version__ = "0.1.0"