from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math


LOGGER = logging.getLogger(__name__)

TICK_LABEL_STYLES = frozenset("eEfgGt")
CLOCK_STYLE = "t"
DEFAULT_PRECISION = 6

# (upper bound on the normalised length, step multiplier, minor subdivisions).
# The normalised length lies in [3, 30), which keeps 2-7 majors on the axis.
_STEP_TABLE: tuple[tuple[float, int, int], ...] = (
    (6.0, 1, 5),
    (10.0, 2, 4),
    (20.0, 4, 4),
    (math.inf, 5, 5),
)
_EDGE_TOLERANCE = 1e-9


@dataclass(frozen=True)
class TickSet:
    majors: tuple[float, ...] = ()
    minors: tuple[float, ...] = ()
    step: float = 0.0
    subdivisions: int = 0

    @classmethod
    def empty(cls) -> "TickSet":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.majors and not self.minors


@dataclass(frozen=True)
class TickFormat:
    style: str = "g"
    field_width: int = 0
    precision: int = -1

    def __post_init__(self) -> None:
        if self.style not in TICK_LABEL_STYLES:
            raise ValueError(f"unsupported tick label style: {self.style!r}")

    def render(self, value: float) -> str:
        if self.style == CLOCK_STYLE:
            return _format_clock(value)
        precision = DEFAULT_PRECISION if self.precision < 0 else self.precision
        align = "<" if self.field_width < 0 else ">"
        width = abs(self.field_width) or ""
        return f"{value:{align}{width}.{precision}{self.style}}"


def plan_ticks(origin: float, length: float) -> TickSet:
    """Choose major and minor tick positions covering ``[origin, origin + length]``.

    Majors sit on global multiples of a round step (1, 2, 4 or 5 times a power
    of ten), so they do not depend on where the interval starts. Minors divide
    each major interval into a constant number of parts and only appear between
    the first and last major.
    """
    if not (math.isfinite(origin) and math.isfinite(length)) or length <= 0:
        return TickSet.empty()

    exponent = math.floor(math.log10(length))
    # Round away float noise such as 2.9999999999999996 before comparing.
    mantissa = round(length / 10.0**exponent, 9)
    if mantissa >= 10.0:
        mantissa /= 10.0
        exponent += 1
    if mantissa < 3.0:
        mantissa *= 10.0
        exponent -= 1

    for bound, multiplier, subdivisions in _STEP_TABLE:
        if mantissa < bound:
            break

    step = _scaled(multiplier, 1, exponent)
    end = origin + length
    first = math.ceil(origin / step - _EDGE_TOLERANCE)
    last = math.floor(end / step + _EDGE_TOLERANCE)
    if last < first:
        return TickSet(step=step, subdivisions=subdivisions)

    majors = tuple(_scaled(k * multiplier, 1, exponent) for k in range(first, last + 1))
    minors = tuple(
        _scaled(j * multiplier, subdivisions, exponent)
        for j in range(first * subdivisions + 1, last * subdivisions)
        if j % subdivisions != 0
    )
    return TickSet(majors=majors, minors=minors, step=step, subdivisions=subdivisions)


def _scaled(numerator: int, denominator: int, exponent: int) -> float:
    # Exact integer arithmetic with one final division keeps values like 0.15 exact.
    if exponent >= 0:
        value = (numerator * 10**exponent) / denominator
    else:
        value = numerator / (denominator * 10 ** (-exponent))
    return value + 0.0


def _format_clock(value: float) -> str:
    hours = value % 24.0
    h = int(hours)
    m = int(60.0 * (hours - h))
    return f"{h:02d}:{m:02d}"


@dataclass
class PlotAxis:
    label: str = ""
    visible: bool = True
    tick_labels_shown: bool = False
    tick_format: TickFormat = field(default_factory=TickFormat)
    _ticks: TickSet = field(default_factory=TickSet.empty)

    @property
    def ticks(self) -> TickSet:
        return self._ticks

    def set_tick_marks(self, origin: float, length: float) -> TickSet:
        self._ticks = plan_ticks(origin, length)
        LOGGER.debug(
            "axis %r ticks for [%g, %g]: %d majors, %d minors",
            self.label,
            origin,
            origin + length,
            len(self._ticks.majors),
            len(self._ticks.minors),
        )
        return self._ticks

    def major_tick_marks(self) -> list[float]:
        return list(self._ticks.majors)

    def minor_tick_marks(self) -> list[float]:
        return list(self._ticks.minors)

    def set_tick_label_format(self, style: str = "g", field_width: int = 0, precision: int = -1) -> "PlotAxis":
        self.tick_format = TickFormat(style=style, field_width=field_width, precision=precision)
        return self

    def tick_label(self, value: float) -> str:
        return self.tick_format.render(value)

    def tick_labels(self) -> list[str]:
        return [self.tick_label(v) for v in self._ticks.majors]
