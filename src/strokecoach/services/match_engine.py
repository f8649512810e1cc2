"""Selection of the reference stroke that best matches a candidate."""
import logging
from typing import Sequence

from strokecoach.models.session_models import MatchResult, Point, StepProgress
from strokecoach.services.interfaces import Scorer

logger = logging.getLogger(__name__)


class MatchEngine:
    """Finds the best-matching step for a simplified candidate stroke."""

    def __init__(self, scorer: Scorer):
        """Initialize the engine with a stroke scorer."""
        self.scorer = scorer

    def match_stroke(
        self,
        candidate: Sequence[Point],
        steps: Sequence[StepProgress],
        expected_index: int,
    ) -> MatchResult:
        """Score the candidate against every step and keep the best one.

        Steps that are already done take part too, so that a stroke drawn
        over a finished step comes back as a duplicate. Each step gets its
        signed distance from ``expected_index`` as an offset hint. Only a
        strictly higher score replaces the current best, so ties go to the
        lowest index and ``-inf`` never wins.
        """
        if all(step.done for step in steps):
            return MatchResult.empty()

        best = MatchResult.empty()
        for i, step in enumerate(steps):
            offset = i - expected_index
            result = self.scorer.score(candidate, step.reference.median, offset)
            logger.debug(f"Step {i} (offset {offset}) scored {result.score}")
            if result.is_match and result.score > best.score:
                best = MatchResult(
                    best_index=i,
                    score=result.score,
                    source_transform=result.source_transform,
                    target_transform=result.target_transform,
                    warning=result.warning,
                )
        return best
