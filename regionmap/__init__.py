"""Spatial interaction engine for browsing regions and drawing custom zones."""

__version__ = "0.1.0"
