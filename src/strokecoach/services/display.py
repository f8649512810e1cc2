"""Display sinks that receive the grading core's drawing intents."""
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

logger = logging.getLogger(__name__)


class DisplaySink(ABC):
    """Capability set any renderer must provide.

    Intents are fire-and-forget and are always emitted after the session
    state they describe has been updated.
    """

    @abstractmethod
    def flash(self, stroke: Any) -> None:
        """Briefly show a reference stroke as a hint."""

    @abstractmethod
    def fade(self) -> None:
        """Fade out the learner's last stroke."""

    @abstractmethod
    def undo(self) -> None:
        """Remove the learner's last stroke."""

    @abstractmethod
    def reveal(self, strokes: List[Any]) -> None:
        """Show every reference stroke."""

    @abstractmethod
    def highlight(self, stroke: Optional[Any] = None) -> None:
        """Highlight the stroke to draw next, or nothing."""

    @abstractmethod
    def warn(self, message: str) -> None:
        ...

    @abstractmethod
    def glow(self, grade: int) -> None:
        """Celebrate a finished character with its grade."""

    @abstractmethod
    def commit(self, stroke: Any, rotate: bool, source: Any, target: Any) -> None:
        """Replace the learner's stroke with the matched reference stroke."""

    @abstractmethod
    def clear(self) -> None:
        ...


class RecordingDisplay(DisplaySink):
    """Keeps every intent in order. Used by tests and replays."""

    def __init__(self):
        self.intents: List[Tuple[str, tuple]] = []

    def names(self) -> List[str]:
        return [name for name, _ in self.intents]

    def flash(self, stroke: Any) -> None:
        self.intents.append(("flash", (stroke,)))

    def fade(self) -> None:
        self.intents.append(("fade", ()))

    def undo(self) -> None:
        self.intents.append(("undo", ()))

    def reveal(self, strokes: List[Any]) -> None:
        self.intents.append(("reveal", (list(strokes),)))

    def highlight(self, stroke: Optional[Any] = None) -> None:
        self.intents.append(("highlight", (stroke,)))

    def warn(self, message: str) -> None:
        self.intents.append(("warn", (message,)))

    def glow(self, grade: int) -> None:
        self.intents.append(("glow", (grade,)))

    def commit(self, stroke: Any, rotate: bool, source: Any, target: Any) -> None:
        self.intents.append(("commit", (stroke, rotate, source, target)))

    def clear(self) -> None:
        self.intents.append(("clear", ()))


class LoggingDisplay(RecordingDisplay):
    """Writes intents to the log instead of drawing them."""

    def __init__(self, level: int = logging.INFO):
        super().__init__()
        self.level = level

    def _log(self, message: str, *args: Any) -> None:
        logger.log(self.level, message, *args)

    def flash(self, stroke: Any) -> None:
        super().flash(stroke)
        self._log("flash %s", stroke)

    def fade(self) -> None:
        super().fade()
        self._log("fade")

    def undo(self) -> None:
        super().undo()
        self._log("undo")

    def reveal(self, strokes: List[Any]) -> None:
        super().reveal(strokes)
        self._log("reveal %d strokes", len(strokes))

    def highlight(self, stroke: Optional[Any] = None) -> None:
        super().highlight(stroke)
        self._log("highlight %s", stroke)

    def warn(self, message: str) -> None:
        super().warn(message)
        self._log("warn: %s", message)

    def glow(self, grade: int) -> None:
        super().glow(grade)
        self._log("glow grade=%d", grade)

    def commit(self, stroke: Any, rotate: bool, source: Any, target: Any) -> None:
        super().commit(stroke, rotate, source, target)
        self._log("commit %s (rotate=%s)", stroke, rotate)

    def clear(self) -> None:
        super().clear()
        self._log("clear")
