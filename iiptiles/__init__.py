"""Tile data, viewport calculation, pixel transforms and IIP/Zoomify response formats."""

__version__ = "1.1.0"