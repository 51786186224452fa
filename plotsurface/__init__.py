from plotsurface.axis import PlotAxis, TickFormat, TickSet, plan_ticks
from plotsurface.errors import PlotDataError, PlotGeometryError
from plotsurface.labels import LabelPlacer, Placement
from plotsurface.mask import OcclusionMask
from plotsurface.scales import CoordinateMapper, DataRect, PixelRect, Rect
from plotsurface.series import PlotPoint, PlotSeries, PlotType, PointStyle, SeriesStyle
from plotsurface.surface import AxisSide, PlotSurface, SurfaceStyle

__all__ = [
    "AxisSide",
    "CoordinateMapper",
    "DataRect",
    "LabelPlacer",
    "OcclusionMask",
    "PixelRect",
    "Placement",
    "PlotAxis",
    "PlotDataError",
    "PlotGeometryError",
    "PlotPoint",
    "PlotSeries",
    "PlotSurface",
    "PlotType",
    "PointStyle",
    "Rect",
    "SeriesStyle",
    "SurfaceStyle",
    "TickFormat",
    "TickSet",
    "plan_ticks",
]
