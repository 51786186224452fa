from __future__ import annotations

from dataclasses import dataclass
import math

from plotsurface.mask import OcclusionMask
from plotsurface.scales import Point, Rect


# Unit offsets of the label centre relative to the anchor, in preference order.
CANDIDATE_DIRECTIONS: tuple[tuple[str, int, int], ...] = (
    ("above", 0, -1),
    ("below", 0, 1),
    ("right", 1, 0),
    ("left", -1, 0),
    ("above_right", 1, -1),
    ("above_left", -1, -1),
    ("below_right", 1, 1),
    ("below_left", -1, 1),
)


@dataclass(frozen=True)
class Placement:
    rect: Rect
    candidate: str
    cost: float
    leader: tuple[Point, Point] | None = None


class LabelPlacer:
    """Greedy label placement against an :class:`OcclusionMask`.

    Each label is tried at eight positions around its anchor, first close to it
    and then on a farther ring. The cheapest candidate wins, earlier candidates
    win ties, and the winner is stamped into the mask so later labels avoid it.
    """

    def __init__(
        self,
        *,
        standoff_px: float = 4.0,
        off_canvas_penalty: float = 1000.0,
        far_penalty: float = 0.5,
        label_weight: float = 2.0,
        leader_weight: float = 1.0,
        leader_min_px: float = 10.0,
    ) -> None:
        if standoff_px < 0:
            raise ValueError("standoff_px must be >= 0")
        self.standoff_px = float(standoff_px)
        self.off_canvas_penalty = float(off_canvas_penalty)
        self.far_penalty = float(far_penalty)
        self.label_weight = float(label_weight)
        self.leader_weight = float(leader_weight)
        self.leader_min_px = float(leader_min_px)

    def candidates(self, anchor: Point, size: tuple[float, float]) -> list[tuple[str, Rect, bool]]:
        w, h = size
        ax, ay = anchor
        near_gap = self.standoff_px
        far_gap = 3.0 * self.standoff_px + 0.5 * max(w, h)
        out: list[tuple[str, Rect, bool]] = []
        for far, gap in ((False, near_gap), (True, far_gap)):
            for name, ux, uy in CANDIDATE_DIRECTIONS:
                cx = ax + ux * (gap + 0.5 * w)
                cy = ay + uy * (gap + 0.5 * h)
                out.append((f"far_{name}" if far else name, Rect.from_center(cx, cy, w, h), far))
        return out

    def score(self, rect: Rect, mask: OcclusionMask, *, far: bool = False) -> float:
        cost = mask.query_cost(rect)
        if not mask.pixel_rect.contains_rect(rect):
            cost += self.off_canvas_penalty
        if far:
            cost += self.far_penalty
        return cost

    def place(self, anchor: Point, size: tuple[float, float], mask: OcclusionMask) -> Placement:
        best: tuple[str, Rect, float] | None = None
        for name, rect, far in self.candidates(anchor, size):
            cost = self.score(rect, mask, far=far)
            if best is None or cost < best[2]:
                best = (name, rect, cost)
        assert best is not None
        name, rect, cost = best

        mask.stamp_rect(rect, self.label_weight)
        leader = self._leader_for(anchor, rect, mask)
        if leader is not None:
            mask.stamp_line(leader[0], leader[1], self.leader_weight)
        return Placement(rect=rect, candidate=name, cost=cost, leader=leader)

    def _leader_for(self, anchor: Point, rect: Rect, mask: OcclusionMask) -> tuple[Point, Point] | None:
        end = rect.nearest_point(anchor)
        if math.hypot(end[0] - anchor[0], end[1] - anchor[1]) <= self.leader_min_px:
            return None
        if not mask.pixel_rect.contains_point(rect.center):
            return None
        return (anchor, end)
