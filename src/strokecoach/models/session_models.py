"""Models for practice-session data structures."""
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, UTC
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class UserCommand(Enum):
    """Explicit commands a learner can issue during practice."""
    REVEAL_ONE = "reveal_one"  # Show the next expected stroke, with a penalty
    REVEAL_ALL = "reveal_all"  # Peek at the whole character, no penalty


class Transition(Enum):
    """What a progress tracker call did to the session."""
    NO_MATCH = "no_match"
    FORCED_REVEAL = "forced_reveal"  # No match that exhausted the mistakes
    DUPLICATE = "duplicate"
    IN_ORDER = "in_order"
    OUT_OF_ORDER = "out_of_order"
    COMPLETED = "completed"  # Last stroke matched, grade is set
    HINT = "hint"  # reveal_one
    PEEK = "peek"  # reveal_all
    FINALIZE = "finalize"  # Input after completion, session should be reported


@dataclass(eq=False)
class Card:
    """A scheduled review item. Compared by identity."""
    word: str
    review_stage: int = 0
    next_review: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class CharacterData:
    """Lookup payload for a dictionary word."""
    word: str
    definition: str
    pinyin: str
    strokes: List[Any]  # opaque display forms
    medians: List[List[Point]]


@dataclass(frozen=True)
class ReferenceStroke:
    """One canonical stroke: its corner-reduced median and how to draw it."""
    median: Tuple[Point, ...]
    display_form: Any


@dataclass(frozen=True)
class Character:
    """A character as an ordered sequence of reference strokes."""
    word: str
    strokes: Tuple[ReferenceStroke, ...]
    definition: str = ""
    pinyin: str = ""


@dataclass
class StepProgress:
    """Progress of one reference stroke within a session."""
    reference: ReferenceStroke
    done: bool = False

    def mark_done(self) -> None:
        """Mark the step as drawn. There is no way back within a session."""
        self.done = True


@dataclass(frozen=True)
class ScoreResult:
    """Result of comparing one candidate stroke to one reference median."""
    score: float
    source_transform: Any = None
    target_transform: Any = None
    warning: Optional[str] = None

    @property
    def is_match(self) -> bool:
        return self.score > -math.inf


@dataclass(frozen=True)
class MatchResult:
    """Best reference stroke for a candidate, if any."""
    best_index: Optional[int]
    score: float
    source_transform: Any = None
    target_transform: Any = None
    warning: Optional[str] = None

    @classmethod
    def empty(cls) -> 'MatchResult':
        """The result for a stroke that matches nothing."""
        return cls(best_index=None, score=-math.inf)


@dataclass
class Session:
    """The single active practice attempt for one character."""
    card: Card
    character: Character
    steps: List[StepProgress]
    mistake_count: int = 0
    penalty_count: int = 0
    final_grade: Optional[int] = None

    @classmethod
    def start(cls, card: Card, character: Character) -> 'Session':
        """Create a fresh session with every step pending."""
        steps = [StepProgress(reference=stroke) for stroke in character.strokes]
        logger.debug(f"Starting session for {character.word!r} with {len(steps)} steps")
        return cls(card=card, character=character, steps=steps)

    @property
    def missing(self) -> List[int]:
        """Indices of steps not drawn yet, in stroke order."""
        return [i for i, step in enumerate(self.steps) if not step.done]

    @property
    def expected_index(self) -> Optional[int]:
        """The earliest pending step, or None once every step is done."""
        missing = self.missing
        return missing[0] if missing else None

    @property
    def is_complete(self) -> bool:
        return all(step.done for step in self.steps)

    def display_forms(self) -> List[Any]:
        return [step.reference.display_form for step in self.steps]

    def add_penalty(self, amount: int) -> None:
        """Accrue penalty points. The total never decreases."""
        assert amount >= 0, f"negative penalty {amount}"
        self.penalty_count += amount

    def set_final_grade(self, grade: int) -> None:
        assert self.final_grade is None, "final grade is already set"
        assert self.is_complete, "cannot grade an unfinished character"
        self.final_grade = grade


def as_points(points: Sequence[Sequence[float]]) -> List[Point]:
    """Coerce a JSON-style list of pairs to a list of float tuples."""
    return [(float(p[0]), float(p[1])) for p in points]
