"""Tests for the application wiring."""
import json
from unittest.mock import Mock

import pytest

from strokecoach.__main__ import run
from strokecoach.app import StrokeCoach
from strokecoach.models.base import SessionLocal
from strokecoach.models.models import CharacterEntry
from strokecoach.services.display import RecordingDisplay

DICTIONARY = [
    {
        "word": "二",
        "definition": "two",
        "pinyin": "èr",
        "strokes": ["M 200 300 L 800 300", "M 100 700 L 900 700"],
        "medians": [[[200, 300], [800, 300]], [[100, 700], [900, 700]]],
    },
]


def line(x0: float, y0: float, x1: float, y1: float, count: int = 50):
    """A densely sampled straight stroke."""
    return [[x0 + (x1 - x0) * k / count, y0 + (y1 - y0) * k / count] for k in range(count + 1)]


@pytest.fixture
def coach() -> StrokeCoach:
    """Create a started application with a recording display."""
    coach = StrokeCoach(display=RecordingDisplay())
    coach.start(words=["二"])
    coach.import_dictionary(DICTIONARY)
    yield coach
    coach.db.query(CharacterEntry).delete()
    coach.db.commit()
    coach.stop()


@pytest.mark.asyncio
async def test_replay_clean_attempt(coach: StrokeCoach) -> None:
    """Test grading a character drawn cleanly and in order."""
    attempts = [{"word": "二", "events": [line(200, 300, 800, 300), line(100, 700, 900, 700)]}]

    results = await coach.replay(attempts)

    assert results == [("二", 1)]
    assert coach.lifecycle.session is None
    assert coach.scheduler.queue[0].review_stage == 1
    assert "glow" in coach.display.names()


@pytest.mark.asyncio
async def test_replay_with_hint(coach: StrokeCoach) -> None:
    """Test that asking for a hint costs the best grade."""
    attempts = [{"word": "二", "events": [
        "reveal_one",
        line(200, 300, 800, 300),
        "reveal_all",
        line(100, 700, 900, 700),
    ]}]

    results = await coach.replay(attempts)

    assert results == [("二", 3)]
    assert coach.scheduler.queue[0].review_stage == 0


@pytest.mark.asyncio
async def test_replay_skips_unknown_commands(coach: StrokeCoach) -> None:
    """Test that an unknown command does not abort the replay."""
    attempts = [{"word": "二", "events": [
        line(200, 300, 800, 300),
        "erase_everything",
        line(100, 700, 900, 700),
    ]}]

    results = await coach.replay(attempts)

    assert results == [("二", 1)]


@pytest.mark.asyncio
async def test_replay_unfinished_attempt(coach: StrokeCoach) -> None:
    """Test an attempt that stops halfway."""
    attempts = [{"word": "二", "events": [line(200, 300, 800, 300)]}]

    results = await coach.replay(attempts)

    assert results == [("二", None)]
    assert coach.lifecycle.session is None


def test_command_line(tmp_path, capsys, monkeypatch) -> None:
    """Test the command line entry point end to end."""
    dictionary = tmp_path / "dictionary.json"
    attempts = tmp_path / "attempts.json"
    dictionary.write_text(json.dumps(DICTIONARY, ensure_ascii=False), encoding="utf-8")
    attempts.write_text(json.dumps([
        {"word": "二", "events": [line(200, 300, 800, 300), line(100, 700, 900, 700)]},
    ], ensure_ascii=False), encoding="utf-8")

    monkeypatch.setattr("strokecoach.__main__.setup_logging", Mock())

    assert run([str(dictionary), str(attempts), "--log-level", "WARNING"]) == 0
    assert "二\t1" in capsys.readouterr().out

    db = SessionLocal()
    try:
        db.query(CharacterEntry).delete()
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    pytest.main([__file__])
