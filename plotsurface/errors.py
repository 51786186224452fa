from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when series or point input cannot be plotted."""


class PlotGeometryError(ValueError):
    """Raised for zero-size or non-finite data and pixel rectangles."""
