"""Tests for stroke geometry helpers."""
import pytest

from strokecoach.config import RecognitionSettings
from strokecoach.services.stroke_geometry import (
    CornerExtractor,
    ShortStraw,
    bounds,
    dist,
    polyline_length,
    resample_polyline,
    turning_angle,
)


def dense_polyline(corners, step: float = 1.0):
    """Sample a polyline through ``corners`` every ``step`` units."""
    points = [corners[0]]
    for (x0, y0), (x1, y1) in zip(corners, corners[1:]):
        length = dist((x0, y0), (x1, y1))
        count = max(1, int(length / step))
        for k in range(1, count + 1):
            t = k / count
            points.append((x0 + t * (x1 - x0), y0 + t * (y1 - y0)))
    return points


def test_resample_polyline() -> None:
    """Test arc-length resampling."""
    out = resample_polyline([(0, 0), (10, 0)], n=11)
    assert len(out) == 11
    assert out[0] == (0.0, 0.0)
    assert out[-1] == pytest.approx((10.0, 0.0))
    assert out[5] == pytest.approx((5.0, 0.0))


def test_resample_degenerate() -> None:
    """Test resampling of empty and single-point strokes."""
    assert resample_polyline([], n=3) == [(0.0, 0.0)] * 3
    assert resample_polyline([(2, 3)], n=2) == [(2.0, 3.0)] * 2


def test_length_bounds_and_angles() -> None:
    """Test the small geometry helpers."""
    assert polyline_length([(0, 0), (3, 4), (3, 10)]) == pytest.approx(11.0)
    assert bounds([(5, 1), (2, 8), (4, 4)]) == ((2.0, 1.0), (5.0, 8.0))
    assert turning_angle((0, 0), (1, 0), (2, 0)) == pytest.approx(0.0)
    assert turning_angle((0, 0), (1, 0), (1, 1)) == pytest.approx(90.0)


def test_short_straw_straight_line() -> None:
    """Test that a straight stroke reduces to its endpoints."""
    points = dense_polyline([(100, 100), (600, 100)])
    simplified = ShortStraw().simplify(points)

    assert len(simplified) == 2
    assert simplified[0] == pytest.approx((100.0, 100.0))
    assert simplified[-1] == pytest.approx((600.0, 100.0))


def test_short_straw_finds_corner() -> None:
    """Test that an L-shaped stroke keeps its elbow."""
    points = dense_polyline([(0, 0), (100, 0), (100, 100)])
    simplified = ShortStraw().simplify(points)

    assert len(simplified) == 3
    assert dist(simplified[1], (100, 0)) < 10


def test_short_straw_short_input() -> None:
    """Test that tiny strokes pass through."""
    assert ShortStraw().simplify([(1, 2), (3, 4)]) == [(1.0, 2.0), (3.0, 4.0)]


def test_corner_extractor() -> None:
    """Test corner reduction of reference medians."""
    extractor = CornerExtractor(RecognitionSettings(corner_angle=30))

    assert extractor.extract([(0, 0), (50, 0), (100, 0), (100, 100)]) == [
        (0.0, 0.0), (100.0, 0.0), (100.0, 100.0)
    ]
    assert extractor.extract([(0, 0), (50, 2), (100, 0)]) == [(0.0, 0.0), (100.0, 0.0)]
    assert extractor.extract([(0, 0), (0, 0), (10, 10)]) == [(0.0, 0.0), (10.0, 10.0)]


if __name__ == "__main__":
    pytest.main([__file__])
