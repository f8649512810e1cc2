"""Loading, resetting and reporting practice sessions."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Set

from strokecoach import monitoring
from strokecoach.config import LookupSettings, settings
from strokecoach.models.session_models import (
    Card,
    Character,
    CharacterData,
    Point,
    ReferenceStroke,
    Session,
    Transition,
    UserCommand,
)
from strokecoach.services.display import DisplaySink
from strokecoach.services.interfaces import CornerExtractor, Lookup, Scheduler
from strokecoach.services.lookup import LookupFailure
from strokecoach.services.progress_tracker import ProgressTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CharacterMetadata:
    """What the learner is shown next to the drawing area."""
    word: str
    definition: str
    pinyin: str


@dataclass(frozen=True)
class LookupRequest:
    """A lookup in flight, tagged with the card it was made for."""
    card: Card
    word: str


class SessionLifecycle:
    """Owns the live session and moves it from character to character."""

    def __init__(
        self,
        scheduler: Scheduler,
        lookup: Lookup,
        corner_extractor: CornerExtractor,
        tracker: ProgressTracker,
        display: DisplaySink,
        lookup_settings: Optional[LookupSettings] = None,
    ):
        self.scheduler = scheduler
        self.lookup = lookup
        self.corner_extractor = corner_extractor
        self.tracker = tracker
        self.display = display
        self.lookup_settings = lookup_settings or settings.lookup
        self.session: Optional[Session] = None
        self.metadata: Optional[CharacterMetadata] = None
        self._lookup_lock = asyncio.Lock()
        self._retry_tasks: Set[asyncio.Task] = set()

    async def load_character(self) -> bool:
        """Load the scheduler's next character into a fresh session.

        Returns True if the session was replaced.
        """
        card = self.scheduler.get_next_scheduled()
        if card is None:
            logger.info("No characters scheduled")
            return False

        request = LookupRequest(card=card, word=card.word)
        async with self._lookup_lock:
            logger.debug(f"Looking up {request.word!r}")
            try:
                data = await self.lookup.by_word(request.word)
                self._check_payload(data)
            except LookupFailure as e:
                logger.error(str(e))
                monitoring.lookup_failures.inc()
                self._schedule_retry()
                return False

        if not self._is_current(request, data):
            logger.info(f"Discarding stale lookup for {request.word!r}")
            monitoring.stale_loads.inc()
            return False

        self._start_session(card, data)
        return True

    def handle_stroke(self, points: Sequence[Point]) -> Optional[Transition]:
        """Input handler for a finished stroke."""
        if self.session is None:
            logger.warning("Stroke received with no character loaded")
            return None
        transition = self.tracker.submit_stroke(self.session, points)
        return self._after(transition)

    def handle_command(self, command: UserCommand) -> Optional[Transition]:
        """Input handler for an explicit command."""
        if self.session is None:
            logger.warning(f"Command {command.value} received with no character loaded")
            return None
        transition = self.tracker.handle_command(self.session, command)
        return self._after(transition)

    def finalize(self) -> None:
        """Report the finished session to the scheduler and release it."""
        session = self.session
        assert session is not None and session.final_grade is not None, "nothing to finalize"
        self.display.clear()
        self.scheduler.complete_card(session.card, session.final_grade)
        monitoring.sessions_completed.labels(grade=str(session.final_grade)).inc()
        logger.info(
            f"Finished {session.character.word!r}: grade {session.final_grade}, "
            f"{session.penalty_count} penalty points"
        )
        self.session = None

    def abandon(self) -> None:
        """Drop an unfinished session without grading it."""
        if self.session is None:
            return
        logger.info(f"Abandoned {self.session.character.word!r}")
        self.display.clear()
        self.session = None
        self.scheduler.request_retry()

    async def wait_for_retries(self) -> None:
        """Wait until every scheduled retry request has been delivered."""
        if self._retry_tasks:
            await asyncio.gather(*self._retry_tasks)

    def _after(self, transition: Transition) -> Transition:
        if transition == Transition.FINALIZE:
            self.finalize()
        return transition

    @staticmethod
    def _check_payload(data: CharacterData) -> None:
        """Reject stroke data that cannot give one step per stroke."""
        if not data.strokes:
            raise LookupFailure(data.word, "no stroke data")
        if len(data.strokes) != len(data.medians):
            raise LookupFailure(
                data.word,
                f"{len(data.strokes)} strokes but {len(data.medians)} medians",
            )

    def _is_current(self, request: LookupRequest, data: CharacterData) -> bool:
        current = self.scheduler.get_next_scheduled()
        return current is request.card and data.word == current.word

    def _start_session(self, card: Card, data: CharacterData) -> None:
        strokes = tuple(
            ReferenceStroke(median=tuple(self.corner_extractor.extract(median)), display_form=stroke)
            for stroke, median in zip(data.strokes, data.medians)
        )
        character = Character(
            word=data.word,
            strokes=strokes,
            definition=data.definition,
            pinyin=data.pinyin,
        )
        self.display.clear()
        self.session = Session.start(card, character)
        self.metadata = CharacterMetadata(word=data.word, definition=data.definition, pinyin=data.pinyin)
        logger.info(f"Loaded {data.word!r} ({data.pinyin}): {len(strokes)} strokes")

    def _schedule_retry(self) -> None:
        task = asyncio.create_task(self._retry_after_delay())
        self._retry_tasks.add(task)
        task.add_done_callback(self._retry_tasks.discard)

    async def _retry_after_delay(self) -> None:
        await asyncio.sleep(self.lookup_settings.retry_delay)
        self.scheduler.request_retry()
