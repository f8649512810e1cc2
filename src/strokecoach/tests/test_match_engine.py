"""Tests for the match engine."""
import copy
import math

import pytest

from strokecoach.models.session_models import MatchResult, ScoreResult, Session
from strokecoach.services.match_engine import MatchEngine


class TableScorer:
    """Scores each median from a fixed table and records every call."""

    def __init__(self, scores, warnings=None):
        self.scores = scores
        self.warnings = warnings or {}
        self.calls = []

    def score(self, candidate, median, offset):
        self.calls.append((tuple(median), offset))
        return ScoreResult(
            score=self.scores[tuple(median)],
            source_transform=("source", tuple(median)),
            target_transform=("target", tuple(median)),
            warning=self.warnings.get(tuple(median)),
        )


def medians(session: Session):
    return [step.reference.median for step in session.steps]


def test_picks_highest_score(session: Session) -> None:
    """Test that the best-scoring step wins."""
    m = medians(session)
    scorer = TableScorer({m[0]: -3.0, m[1]: -1.0, m[2]: -2.0}, warnings={m[1]: "Stroke backward."})
    result = MatchEngine(scorer).match_stroke([(0, 0), (1, 1)], session.steps, 0)

    assert result.best_index == 1
    assert result.score == -1.0
    assert result.warning == "Stroke backward."
    assert result.source_transform == ("source", m[1])
    assert result.target_transform == ("target", m[1])


def test_passes_signed_offsets(session: Session) -> None:
    """Test that every step gets its distance from the expected step."""
    m = medians(session)
    session.steps[0].mark_done()
    scorer = TableScorer({m[0]: -1.0, m[1]: -1.0, m[2]: -1.0})
    MatchEngine(scorer).match_stroke([(0, 0), (1, 1)], session.steps, 1)

    assert [offset for _, offset in scorer.calls] == [-1, 0, 1]


def test_tie_keeps_lowest_index(session: Session) -> None:
    """Test that equal scores keep the first step encountered."""
    m = medians(session)
    scorer = TableScorer({m[0]: -2.0, m[1]: -1.0, m[2]: -1.0})
    result = MatchEngine(scorer).match_stroke([(0, 0), (1, 1)], session.steps, 0)
    assert result.best_index == 1


def test_no_match_returns_empty(session: Session) -> None:
    """Test that a stroke rejected by every step matches nothing."""
    m = medians(session)
    scorer = TableScorer({m[0]: -math.inf, m[1]: -math.inf, m[2]: -math.inf})
    result = MatchEngine(scorer).match_stroke([(0, 0), (1, 1)], session.steps, 0)

    assert result == MatchResult.empty()
    assert result.best_index is None


def test_done_steps_are_scored(session: Session) -> None:
    """Test that a finished step can still be the best match."""
    m = medians(session)
    session.steps[0].mark_done()
    scorer = TableScorer({m[0]: 0.0, m[1]: -5.0, m[2]: -5.0})
    result = MatchEngine(scorer).match_stroke([(0, 0), (1, 1)], session.steps, 1)
    assert result.best_index == 0


def test_all_done_returns_empty_without_scoring(session: Session) -> None:
    """Test the empty result when nothing is left to draw."""
    for step in session.steps:
        step.mark_done()
    scorer = TableScorer({})
    result = MatchEngine(scorer).match_stroke([(0, 0), (1, 1)], session.steps, 0)

    assert result.best_index is None
    assert scorer.calls == []


def test_match_is_pure(session: Session) -> None:
    """Test that matching twice gives the same result and mutates nothing."""
    m = medians(session)
    scorer = TableScorer({m[0]: -2.0, m[1]: -0.5, m[2]: -1.0})
    engine = MatchEngine(scorer)
    candidate = [(0.0, 0.0), (10.0, 10.0)]
    steps_before = copy.deepcopy(session.steps)
    candidate_before = list(candidate)

    first = engine.match_stroke(candidate, session.steps, 0)
    second = engine.match_stroke(candidate, session.steps, 0)

    assert first == second
    assert session.steps == steps_before
    assert candidate == candidate_before


if __name__ == "__main__":
    pytest.main([__file__])
