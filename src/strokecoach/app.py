"""Application wiring for the stroke coach."""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from strokecoach.config import settings
from strokecoach.models.base import SessionLocal, init_db
from strokecoach.models.session_models import UserCommand, as_points
from strokecoach.monitoring import start_monitoring
from strokecoach.services.display import DisplaySink, LoggingDisplay
from strokecoach.services.lookup import DictionaryLookup
from strokecoach.services.match_engine import MatchEngine
from strokecoach.services.progress_tracker import ProgressTracker
from strokecoach.services.recognizer import StrokeScorer
from strokecoach.services.scheduler import ReviewScheduler
from strokecoach.services.session_lifecycle import SessionLifecycle
from strokecoach.services.stroke_geometry import CornerExtractor, ShortStraw


class StrokeCoach:
    """Main application class."""

    def __init__(self, display: Optional[DisplaySink] = None):
        """Initialize the application."""
        self.display = display or LoggingDisplay()
        self.db = None
        self.lookup: Optional[DictionaryLookup] = None
        self.scheduler: Optional[ReviewScheduler] = None
        self.lifecycle: Optional[SessionLifecycle] = None
        self.running = False
        self.logger = logging.getLogger(__name__)

    def start(self, words: Iterable[str] = ()) -> None:
        """Open the dictionary and build the grading services."""
        if self.running:
            return

        init_db()
        self.db = SessionLocal()
        self.logger.info("Database initialized")

        if settings.monitoring.port:
            start_monitoring(settings.monitoring.port)
            self.logger.info(f"Metrics served on port {settings.monitoring.port}")

        self.lookup = DictionaryLookup(self.db)
        self.scheduler = ReviewScheduler(words)
        tracker = ProgressTracker(
            match_engine=MatchEngine(StrokeScorer()),
            simplifier=ShortStraw(),
            display=self.display,
        )
        self.lifecycle = SessionLifecycle(
            scheduler=self.scheduler,
            lookup=self.lookup,
            corner_extractor=CornerExtractor(),
            tracker=tracker,
            display=self.display,
        )
        self.running = True

    def stop(self) -> None:
        """Close the database session."""
        if not self.running:
            return
        if self.db:
            self.db.close()
            self.logger.info("Database session closed")
        self.running = False

    def import_dictionary(self, records: Iterable[Dict[str, Any]]) -> int:
        """Load dictionary entries into the database."""
        return len(self.lookup.import_characters(records))

    async def replay(self, attempts: List[Dict[str, Any]]) -> List[Tuple[str, Optional[int]]]:
        """Feed recorded attempts through the lifecycle, one character each.

        Every attempt is ``{"word": ..., "events": [...]}`` where an event is
        a list of points or the name of a command. Returns the grade given to
        each word, or None when the attempt did not finish the character.
        """
        results = []
        for attempt in attempts:
            if not await self.lifecycle.load_character():
                self.logger.warning(f"Could not load a character for {attempt['word']!r}")
                await self.lifecycle.wait_for_retries()
                results.append((attempt["word"], None))
                continue

            session = self.lifecycle.session
            if session.character.word != attempt["word"]:
                self.logger.warning(
                    f"Attempt for {attempt['word']!r} does not match scheduled {session.character.word!r}"
                )

            for event in attempt.get("events", []):
                if isinstance(event, str):
                    try:
                        command = UserCommand(event)
                    except ValueError:
                        self.logger.warning(f"Skipping unknown command {event!r}")
                        continue
                    self.lifecycle.handle_command(command)
                else:
                    self.lifecycle.handle_stroke(as_points(event))
                if self.lifecycle.session is None:
                    break

            grade = session.final_grade
            if self.lifecycle.session is not None:
                if session.is_complete:
                    self.lifecycle.finalize()
                else:
                    self.logger.warning(f"{session.character.word!r} left unfinished")
                    self.lifecycle.abandon()
            results.append((session.character.word, grade))
        return results
