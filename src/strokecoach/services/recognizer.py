"""
Stroke Recognition
- Scores a learner stroke against one reference median
- DTW distance over resampled polylines in drawing-frame units
- Detects strokes drawn in the wrong direction
"""
import logging
import math
from typing import Optional, Sequence

import numpy as np

from strokecoach.config import RecognitionSettings, settings
from strokecoach.models.session_models import Point, ScoreResult
from strokecoach.services.stroke_geometry import bounds, resample_polyline

logger = logging.getLogger(__name__)

BACKWARD_WARNING = "Stroke backward."


def dtw_distance(a, b) -> float:
    """DTW distance between two sequences of 2D points."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    n, m = len(a), len(b)
    if n == 0 or m == 0:
        return math.inf
    cost = np.linalg.norm(a[:, None, :] - b[None, :, :], axis=2)
    dp = np.full((n + 1, m + 1), np.inf)
    dp[0, 0] = 0.0
    for i in range(1, n + 1):
        for j in range(1, m + 1):
            dp[i, j] = cost[i - 1, j - 1] + min(dp[i - 1, j], dp[i, j - 1], dp[i - 1, j - 1])
    return float(dp[n, m] / (n + m))


def stroke_angle(pts) -> float:
    """Primary direction of a stroke in degrees (0-360)."""
    if len(pts) < 2:
        return 0.0
    dx = pts[-1][0] - pts[0][0]
    dy = pts[-1][1] - pts[0][1]
    return math.degrees(math.atan2(dy, dx)) % 360.0


def angle_difference(a: float, b: float) -> float:
    """Absolute difference between two directions, 0-180 degrees."""
    diff = abs(a - b) % 360.0
    return 360.0 - diff if diff > 180.0 else diff


class StrokeScorer:
    """Default scorer: higher is better, ``-inf`` means no match.

    Both strokes are resampled to the same number of points and compared
    with DTW in units of the drawing frame, so position and size matter as
    much as shape. The offset hint makes strokes far from the expected one
    slightly less attractive, which breaks near-ties in favour of stroke
    order.
    """

    def __init__(self, recognition: Optional[RecognitionSettings] = None):
        self.recognition = recognition or settings.recognition

    def score(self, candidate: Sequence[Point], median: Sequence[Point], offset: int) -> ScoreResult:
        if len(candidate) < 2 or len(median) < 2:
            return ScoreResult(score=-math.inf)

        n = self.recognition.resample_points
        frame = self.recognition.frame_size
        user = np.asarray(resample_polyline(candidate, n)) / frame
        template = np.asarray(resample_polyline(median, n)) / frame

        forward = dtw_distance(user, template)
        backward = dtw_distance(user[::-1], template)
        warning = None
        if backward < forward:
            distance = backward
            oriented = user[::-1]
            warning = BACKWARD_WARNING
        else:
            distance = forward
            oriented = user

        angle_penalty = angle_difference(stroke_angle(oriented), stroke_angle(template)) / 180.0
        distance += self.recognition.angle_weight * angle_penalty
        if distance > self.recognition.match_threshold:
            return ScoreResult(score=-math.inf)

        score = -(distance + self.recognition.offset_penalty * abs(offset))
        return ScoreResult(
            score=score,
            source_transform=bounds(candidate),
            target_transform=bounds(median),
            warning=warning,
        )
