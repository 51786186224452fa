from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path

import numpy as np

from plotsurface import AxisSide, PlotSeries, PlotSurface, PlotType, PointStyle, SeriesStyle


PLOTS = (
    "points",
    "lines",
    "bars",
    "points-labels",
    "points-lines-bars",
    "points-lines-bars-labels",
)


def build_plot(name: str, *, width: int = 400, height: int = 400) -> PlotSurface:
    surface = PlotSurface(width, height)
    surface.reset_plot()

    if name == "points":
        surface.set_limits(-6.0, 11.0, -10.0, 110.0)
        squares = PlotSeries(SeriesStyle(color=(255, 255, 255, 255), size=4, point_style=PointStyle.ASTERISK))
        falling = PlotSeries(SeriesStyle(color=(0, 255, 0, 255), size=4, point_style=PointStyle.TRIANGLE))
        xs = np.arange(-5.0, 11.0, 1.0)
        squares.add_points(xs, xs * xs)
        falling.add_points(xs, 50.0 - 5.0 * xs)
        surface.add_series_many([squares, falling])
    elif name == "lines":
        surface.set_limits(-0.1, 6.38, -1.1, 1.1)
        surface.set_secondary_limits(-5.73, 365.55, -1.1, 1.1)
        surface.axis(AxisSide.TOP).tick_labels_shown = True
        surface.axis(AxisSide.BOTTOM).label = "Angle [radians]"
        surface.axis(AxisSide.TOP).label = "Angle [degrees]"
        t = np.arange(0.0, 6.28, 0.04)
        sine = PlotSeries(SeriesStyle(color=(255, 0, 0, 255), line_width=2), PlotType.LINES)
        cosine = PlotSeries(SeriesStyle(color=(0, 255, 255, 255), line_width=2), PlotType.LINES)
        sine.add_points(t, np.sin(t))
        cosine.add_points(t, np.cos(t))
        surface.add_series_many([sine, cosine])
    elif name == "bars":
        surface.set_limits(-7.0, 7.0, -5.0, 105.0)
        gauss = PlotSeries(SeriesStyle(color=(255, 255, 255, 255), bar_color=(0, 160, 0, 160)), PlotType.BARS)
        for x in np.arange(-6.5, 6.75, 0.5).tolist():
            gauss.add_point(x, 100.0 * math.exp(-0.5 * x * x), "", 0.5)
        surface.add_series(gauss)
    elif name == "points-labels":
        surface.set_limits(-1.1, 1.1, -1.1, 1.1)
        compass = PlotSeries(
            SeriesStyle(color=(255, 255, 0, 255), size=10, point_style=PointStyle.STAR, label_color=(0, 255, 0, 255))
        )
        for label, x, y in (
            ("North", 0.0, 0.8),
            ("Northeast", 0.57, 0.57),
            ("East", 0.8, 0.0),
            ("Southeast", 0.57, -0.57),
            ("South", 0.0, -0.8),
            ("Southwest", -0.57, -0.57),
            ("West", -0.8, 0.0),
            ("Northwest", -0.57, 0.57),
        ):
            compass.add_point(x, y, label)
        surface.add_series(compass)
    elif name in ("points-lines-bars", "points-lines-bars-labels"):
        surface.set_limits(-2.1, 2.1, -0.1, 4.1)
        mixed = PlotSeries(
            SeriesStyle(
                color=(255, 255, 255, 255),
                size=10,
                point_style=PointStyle.PENTAGON,
                line_color=(255, 0, 0, 255),
                line_width=3,
                bar_color=(0, 0, 255, 128),
                label_color=(170, 136, 0, 255),
            ),
            PlotType.POINTS | PlotType.LINES | PlotType.BARS,
        )
        with_labels = name.endswith("labels")
        for label, x, y in zip("ABCDEFGH", (-1.75, -1.25, -0.75, -0.25, 0.25, 0.75, 1.25, 1.75), (0.5, 1.0, 1.25, 1.5, 2.5, 3.0, 1.5, 1.75)):
            mixed.add_point(x, y, label if with_labels else "")
        surface.add_series(mixed)
    else:
        raise ValueError(f"unknown plot: {name}")
    return surface


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Render the demo plots to PNG files.")
    parser.add_argument("--out-dir", type=Path, default=Path("testplot_out"))
    parser.add_argument("--plot", choices=PLOTS, action="append")
    parser.add_argument("--grid", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    for name in args.plot or PLOTS:
        surface = build_plot(name).set_show_grid(args.grid)
        canvas = surface.render()
        path = canvas.save_png(args.out_dir / f"{name}.png")
        print(f"wrote {path}")


if __name__ == "__main__":
    main()
