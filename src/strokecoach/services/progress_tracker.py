"""Per-character state machine applying the stroke grading policy."""
import logging
from typing import Optional, Sequence

from strokecoach import monitoring
from strokecoach.config import GradingSettings, settings
from strokecoach.models.session_models import (
    MatchResult,
    Point,
    Session,
    Transition,
    UserCommand,
)
from strokecoach.services.display import DisplaySink
from strokecoach.services.grading import WarningPolicy, get_warning_policy, grade
from strokecoach.services.interfaces import StrokeSimplifier
from strokecoach.services.match_engine import MatchEngine

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Applies match outcomes and learner commands to a session.

    The tracker owns no session state of its own: the caller passes the live
    session into every call, and every mutation of that session happens
    here, one call at a time.
    """

    def __init__(
        self,
        match_engine: MatchEngine,
        simplifier: StrokeSimplifier,
        display: DisplaySink,
        grading: Optional[GradingSettings] = None,
        warning_policy: Optional[WarningPolicy] = None,
    ):
        self.match_engine = match_engine
        self.simplifier = simplifier
        self.display = display
        self.grading = grading or settings.grading
        self.warning_policy = warning_policy or get_warning_policy()

    def submit_stroke(self, session: Session, points: Sequence[Point]) -> Transition:
        """Grade one freshly drawn stroke."""
        if session.is_complete:
            return Transition.FINALIZE

        missing = session.missing
        expected = missing[0]
        candidate = self.simplifier.simplify(points)
        result = self.match_engine.match_stroke(candidate, session.steps, expected)
        index = result.best_index

        if index is None:
            transition = self._on_no_match(session, expected)
        elif session.steps[index].done:
            transition = self._on_duplicate(session, index)
        else:
            assert index >= expected, f"matched step {index} before expected step {expected}"
            transition = self._on_new_match(session, result, expected)

        monitoring.strokes_submitted.labels(outcome=transition.value).inc()
        logger.debug(
            f"{session.character.word!r}: {transition.value} "
            f"(mistakes={session.mistake_count}, penalties={session.penalty_count})"
        )
        return transition

    def handle_command(self, session: Session, command: UserCommand) -> Transition:
        """Apply an explicit learner command."""
        if command == UserCommand.REVEAL_ONE:
            return self.reveal_one(session)
        if command == UserCommand.REVEAL_ALL:
            return self.reveal_all(session)
        raise ValueError(f"Unknown command: {command}")

    def reveal_one(self, session: Session) -> Transition:
        """Show the expected stroke as an on-demand hint, at a penalty."""
        if session.is_complete:
            return Transition.FINALIZE
        expected = session.expected_index
        self._penalize(session, self.grading.max_penalties)
        monitoring.forced_reveals.labels(reason="hint").inc()
        self.display.flash(session.steps[expected].reference.display_form)
        return Transition.HINT

    def reveal_all(self, session: Session) -> Transition:
        """Show the whole character without touching the session."""
        if session.is_complete:
            return Transition.FINALIZE
        expected = session.expected_index
        self.display.reveal(session.display_forms())
        self.display.highlight(session.steps[expected].reference.display_form)
        return Transition.PEEK

    def _on_no_match(self, session: Session, expected: int) -> Transition:
        session.mistake_count += 1
        self.display.fade()
        if session.mistake_count < self.grading.max_mistakes:
            return Transition.NO_MATCH
        # The mistake count stays where it is, so every further miss reveals again
        self._penalize(session, self.grading.max_penalties)
        monitoring.forced_reveals.labels(reason="mistakes").inc()
        self.display.flash(session.steps[expected].reference.display_form)
        return Transition.FORCED_REVEAL

    def _on_duplicate(self, session: Session, index: int) -> Transition:
        self._penalize(session, self.grading.duplicate_penalty)
        self.display.undo()
        self.display.flash(session.steps[index].reference.display_form)
        return Transition.DUPLICATE

    def _on_new_match(self, session: Session, result: MatchResult, expected: int) -> Transition:
        index = result.best_index
        step = session.steps[index]
        step.mark_done()
        rotate = len(step.reference.median) == 2
        self.display.commit(
            step.reference.display_form, rotate, result.source_transform, result.target_transform
        )
        if result.warning:
            self._penalize(session, self.warning_policy(result.warning))
            self.display.warn(result.warning)

        missing = session.missing
        if not missing:
            final_grade = grade(session.penalty_count, self.grading.max_penalties)
            session.set_final_grade(final_grade)
            self.display.glow(final_grade)
            self.display.highlight(None)
            return Transition.COMPLETED

        if index > expected:
            self._penalize(session, self.grading.out_of_order_weight * (index - expected))
            self.display.flash(session.steps[expected].reference.display_form)
            return Transition.OUT_OF_ORDER

        session.mistake_count = 0
        self.display.highlight(session.steps[missing[0]].reference.display_form)
        return Transition.IN_ORDER

    def _penalize(self, session: Session, amount: int) -> None:
        if amount:
            session.add_penalty(amount)
            monitoring.penalties_accrued.inc(amount)
