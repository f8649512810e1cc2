"""In-memory spaced-repetition queue of characters to review."""
import logging
from datetime import datetime, timedelta, UTC
from typing import Callable, Iterable, List, Optional

from strokecoach.config import settings
from strokecoach.models.session_models import Card
from strokecoach.services.grading import BEST_GRADE, WORST_GRADE

logger = logging.getLogger(__name__)


class ReviewScheduler:
    """Queue of review cards ordered by when they were last touched.

    The next card is the first due card in queue order. Grading a card moves
    it to the back with a new review date.
    """

    def __init__(
        self,
        words: Iterable[str] = (),
        repetition_intervals: Optional[List[int]] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.repetition_intervals = repetition_intervals or settings.learning.repetition_intervals
        self.clock = clock
        self.queue: List[Card] = []
        for word in words:
            self.add_word(word)

    def add_word(self, word: str) -> Card:
        """Add a new word, due immediately."""
        card = Card(word=word, next_review=self.clock())
        self.queue.append(card)
        return card

    def due_cards(self) -> List[Card]:
        now = self.clock()
        return [card for card in self.queue if card.next_review <= now]

    def get_next_scheduled(self) -> Optional[Card]:
        """Get the card to practice next, or None if nothing is due."""
        due = self.due_cards()
        return due[0] if due else None

    def complete_card(self, card: Card, grade: int) -> None:
        """Record a grade and reschedule the card."""
        if not BEST_GRADE <= grade <= WORST_GRADE:
            raise ValueError(f"Grade must be between {BEST_GRADE} and {WORST_GRADE}: {grade}")
        if card not in self.queue:
            raise ValueError(f"Card {card.word!r} is not scheduled")

        if grade == BEST_GRADE:
            card.review_stage += 1
        elif grade == WORST_GRADE:
            card.review_stage = 0
        card.next_review = self._calculate_next_review(card.review_stage)

        self.queue.remove(card)
        self.queue.append(card)
        logger.info(
            f"Completed {card.word!r} with grade {grade}, "
            f"stage {card.review_stage}, next review {card.next_review.isoformat()}"
        )

    def request_retry(self) -> None:
        """Move the current card behind the other due cards."""
        card = self.get_next_scheduled()
        if card is None:
            return
        self.queue.remove(card)
        self.queue.append(card)
        logger.info(f"Retrying later: {card.word!r}")

    def _calculate_next_review(self, review_stage: int) -> datetime:
        """Calculate the next review date based on the review stage."""
        if review_stage >= len(self.repetition_intervals):
            review_stage = len(self.repetition_intervals) - 1
        days = self.repetition_intervals[review_stage]
        return self.clock() + timedelta(days=days)
