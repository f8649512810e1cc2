"""
Stroke geometry
- Resampling and distance helpers for polylines
- ShortStraw corner finding for learner strokes
- Corner reduction for reference medians
"""
import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from strokecoach.config import RecognitionSettings, settings
from strokecoach.models.session_models import Point

logger = logging.getLogger(__name__)


# ===============================
# Geometry Utils
# ===============================

def dist(a, b) -> float:
    """Euclidean distance between two points."""
    return float(math.hypot(a[0] - b[0], a[1] - b[1]))


def polyline_length(pts) -> float:
    """Total length of a polyline."""
    if len(pts) < 2:
        return 0.0
    return sum(dist(pts[i - 1], pts[i]) for i in range(1, len(pts)))


def resample_polyline(pts, n: int = 64) -> List[Point]:
    """Resample polyline to exactly n points spaced by arc-length."""
    if len(pts) == 0:
        return [(0.0, 0.0)] * n
    pts = [(float(x), float(y)) for x, y in pts]
    if len(pts) == 1:
        return [pts[0]] * n

    dists = [0.0]
    for i in range(1, len(pts)):
        dists.append(dists[-1] + dist(pts[i - 1], pts[i]))
    if dists[-1] < 1e-6:
        return [pts[0]] * n

    targets = np.linspace(0.0, dists[-1], n)
    out = []
    j = 0
    for t in targets:
        while j < len(dists) - 2 and dists[j + 1] < t:
            j += 1
        d0, d1 = dists[j], dists[j + 1]
        p0, p1 = np.array(pts[j]), np.array(pts[j + 1])
        if abs(d1 - d0) < 1e-9:
            out.append((float(p0[0]), float(p0[1])))
        else:
            alpha = (t - d0) / (d1 - d0)
            p = p0 + alpha * (p1 - p0)
            out.append((float(p[0]), float(p[1])))
    return out


def bounds(pts) -> tuple:
    """Bounding box of a polyline as ((min_x, min_y), (max_x, max_y))."""
    arr = np.asarray(pts, dtype=np.float64)
    lo = arr.min(axis=0)
    hi = arr.max(axis=0)
    return (float(lo[0]), float(lo[1])), (float(hi[0]), float(hi[1]))


def turning_angle(a, b, c) -> float:
    """Angle in degrees between segments a->b and b->c (0 = straight on)."""
    v1 = (b[0] - a[0], b[1] - a[1])
    v2 = (c[0] - b[0], c[1] - b[1])
    n1 = math.hypot(*v1)
    n2 = math.hypot(*v2)
    if n1 < 1e-9 or n2 < 1e-9:
        return 0.0
    cos = (v1[0] * v2[0] + v1[1] * v2[1]) / (n1 * n2)
    return math.degrees(math.acos(max(-1.0, min(1.0, cos))))


# ===============================
# Learner strokes
# ===============================

class ShortStraw:
    """ShortStraw corner finder (Wolin, Eoff and Hammond).

    The stroke is resampled at a fixed spacing; a point whose "straw" (the
    chord between its neighbours ``window`` samples away) is much shorter
    than the median straw sits on a corner.
    """

    def __init__(self, window: int = 3, straw_ratio: float = 0.95, line_ratio: float = 0.95,
                 spacing_divisor: float = 40.0):
        self.window = window
        self.straw_ratio = straw_ratio
        self.line_ratio = line_ratio
        self.spacing_divisor = spacing_divisor

    def simplify(self, points: Sequence[Point]) -> List[Point]:
        """Reduce a raw stroke to its corners, endpoints included."""
        if len(points) < 3:
            return [(float(x), float(y)) for x, y in points]

        (lo_x, lo_y), (hi_x, hi_y) = bounds(points)
        spacing = math.hypot(hi_x - lo_x, hi_y - lo_y) / self.spacing_divisor
        length = polyline_length(points)
        if spacing < 1e-6 or length < 1e-6:
            return [tuple(map(float, points[0])), tuple(map(float, points[-1]))]

        resampled = resample_polyline(points, max(2, int(length / spacing) + 1))
        corners = self._find_corners(resampled)
        return [resampled[i] for i in corners]

    def _find_corners(self, pts: List[Point]) -> List[int]:
        w = self.window
        n = len(pts)
        if n < 2 * w + 1:
            return [0, n - 1]

        straws = {i: dist(pts[i - w], pts[i + w]) for i in range(w, n - w)}
        threshold = float(np.median(list(straws.values()))) * self.straw_ratio

        corners = [0]
        i = w
        while i < n - w:
            if straws[i] < threshold:
                # Take the shortest straw of this run of short straws
                best = i
                while i < n - w and straws[i] < threshold:
                    if straws[i] < straws[best]:
                        best = i
                    i += 1
                corners.append(best)
            i += 1
        corners.append(n - 1)

        # Drop corners that sit on a straight line between their neighbours
        changed = True
        while changed and len(corners) > 2:
            changed = False
            for k in range(1, len(corners) - 1):
                if self._is_line(pts, corners[k - 1], corners[k + 1]):
                    del corners[k]
                    changed = True
                    break
        return corners

    def _is_line(self, pts: List[Point], a: int, b: int) -> bool:
        path = polyline_length(pts[a:b + 1])
        if path < 1e-9:
            return True
        return dist(pts[a], pts[b]) / path > self.line_ratio


# ===============================
# Reference medians
# ===============================

class CornerExtractor:
    """Reduces a reference median to its endpoints and sharp turns."""

    def __init__(self, recognition: Optional[RecognitionSettings] = None, min_spacing: float = 1.0):
        recognition = recognition or settings.recognition
        self.corner_angle = recognition.corner_angle
        self.min_spacing = min_spacing

    def extract(self, median: Sequence[Point]) -> List[Point]:
        pts = [(float(x), float(y)) for x, y in median]
        # Collapse repeated points
        deduped = pts[:1]
        for p in pts[1:]:
            if dist(deduped[-1], p) >= self.min_spacing:
                deduped.append(p)
        if len(deduped) < 3:
            if len(deduped) == 1 and len(pts) > 1:
                return [deduped[0], pts[-1]]
            return deduped

        corners = [deduped[0]]
        for i in range(1, len(deduped) - 1):
            if turning_angle(corners[-1], deduped[i], deduped[i + 1]) > self.corner_angle:
                corners.append(deduped[i])
        corners.append(deduped[-1])
        return corners
