"""Collaborator interfaces used by the grading core."""
from typing import List, Optional, Protocol, Sequence

from strokecoach.models.session_models import Card, CharacterData, Point, ScoreResult


class Scorer(Protocol):
    """Compares a candidate stroke with one reference median.

    A strictly higher score is a better match. There is no fixed range;
    ``-inf`` means the candidate cannot be this stroke.
    """

    def score(self, candidate: Sequence[Point], median: Sequence[Point], offset: int) -> ScoreResult:
        ...


class StrokeSimplifier(Protocol):
    def simplify(self, points: Sequence[Point]) -> List[Point]:
        ...


class CornerExtractor(Protocol):
    def extract(self, median: Sequence[Point]) -> List[Point]:
        ...


class Scheduler(Protocol):
    """Decides which character comes next and receives the grades."""

    def get_next_scheduled(self) -> Optional[Card]:
        ...

    def complete_card(self, card: Card, grade: int) -> None:
        ...

    def request_retry(self) -> None:
        ...


class Lookup(Protocol):
    async def by_word(self, word: str) -> CharacterData:
        """Resolve a word. Raises LookupFailure when it cannot."""
        ...
