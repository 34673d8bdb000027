"""Geometry engine for turning a photographed track into a 2D coordinate model."""

__version__ = "0.3.0"
