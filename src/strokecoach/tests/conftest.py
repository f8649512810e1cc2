"""Test configuration."""
import math
import os
import tempfile

import pytest

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="strokecoach-test-"))

# Import after environment setup
from strokecoach.config import GradingSettings, ensure_directories
from strokecoach.models.session_models import (
    Card,
    Character,
    CharacterData,
    ReferenceStroke,
    ScoreResult,
    Session,
)
from strokecoach.services.display import RecordingDisplay


class IdentitySimplifier:
    """Passes strokes through untouched."""

    def simplify(self, points):
        return [tuple(p) for p in points]


class ExactScorer:
    """Matches a candidate only when it is exactly the reference median."""

    def __init__(self, warning=None):
        self.warning = warning

    def score(self, candidate, median, offset):
        if [tuple(p) for p in candidate] == [tuple(p) for p in median]:
            return ScoreResult(score=0.0, source_transform="source", target_transform="target",
                               warning=self.warning)
        return ScoreResult(score=-math.inf)


# Medians that survive corner extraction unchanged
MEDIANS = [
    [(100.0, 100.0), (900.0, 100.0)],
    [(100.0, 300.0), (500.0, 300.0), (500.0, 700.0)],
    [(100.0, 900.0), (900.0, 900.0)],
]


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Set up test environment before each test."""
    ensure_directories()
    yield


@pytest.fixture
def grading() -> GradingSettings:
    """Default penalty weights, independent of the environment."""
    return GradingSettings(
        max_mistakes=3,
        max_penalties=4,
        duplicate_penalty=1,
        out_of_order_weight=2,
        warning_penalty=0,
    )


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture
def simplifier() -> IdentitySimplifier:
    return IdentitySimplifier()


@pytest.fixture
def exact_scorer() -> ExactScorer:
    return ExactScorer()


@pytest.fixture
def scorer_factory():
    """Build exact scorers that attach a warning to every match."""
    return ExactScorer


@pytest.fixture
def character_data() -> CharacterData:
    """Lookup payload for a three-stroke character."""
    return CharacterData(
        word="子",
        definition="child",
        pinyin="zǐ",
        strokes=["s0", "s1", "s2"],
        medians=[list(m) for m in MEDIANS],
    )


def build_session(stroke_count: int = 3, word: str = "子") -> Session:
    """Session over the first ``stroke_count`` reference medians."""
    strokes = tuple(
        ReferenceStroke(median=tuple(MEDIANS[i]), display_form=f"s{i}")
        for i in range(stroke_count)
    )
    return Session.start(Card(word=word), Character(word=word, strokes=strokes))


@pytest.fixture
def session() -> Session:
    """A fresh three-stroke session."""
    return build_session(3)


@pytest.fixture
def two_stroke_session() -> Session:
    """A fresh two-stroke session."""
    return build_session(2, word="二")
