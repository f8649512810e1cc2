"""Database models for the character dictionary."""
from sqlalchemy import JSON, Column, Integer, String

from strokecoach.models.base import Base, TimestampMixin


class CharacterEntry(Base, TimestampMixin):
    """Reference data for one dictionary word."""

    __tablename__ = "characters"

    id = Column(Integer, primary_key=True, index=True)
    word = Column(String, unique=True, nullable=False, index=True)
    definition = Column(String, nullable=False, default="")
    pinyin = Column(String, nullable=False, default="")
    strokes = Column(JSON, nullable=False)  # display forms, e.g. SVG path data
    medians = Column(JSON, nullable=False)  # raw centerline points per stroke

    def __repr__(self) -> str:
        return f"<CharacterEntry {self.word!r} strokes={len(self.strokes or [])}>"
