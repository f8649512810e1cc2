"""Service for resolving dictionary words into stroke data."""
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from strokecoach import monitoring
from strokecoach.models.models import CharacterEntry
from strokecoach.models.session_models import CharacterData, as_points

logger = logging.getLogger(__name__)


class LookupFailure(Exception):
    """Stroke data for a word could not be obtained."""

    def __init__(self, word: Optional[str], reason: str):
        super().__init__(f"Lookup failed for {word!r}: {reason}")
        self.word = word
        self.reason = reason


class DictionaryLookup:
    """Character dictionary stored in the database."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def get_entry(self, word: str) -> Optional[CharacterEntry]:
        """Get a dictionary entry by its word."""
        return self.db.query(CharacterEntry).filter(CharacterEntry.word == word).first()

    async def by_word(self, word: Optional[str]) -> CharacterData:
        """Resolve a word into its definition and stroke data."""
        if not word:
            raise LookupFailure(word, "no word requested")

        with monitoring.lookup_duration.time():
            try:
                entry = self.get_entry(word)
            except SQLAlchemyError as e:
                self.db.rollback()
                raise LookupFailure(word, str(e)) from e

        if entry is None:
            raise LookupFailure(word, "word not in dictionary")
        if not entry.strokes:
            raise LookupFailure(word, "no stroke data")

        return CharacterData(
            word=entry.word,
            definition=entry.definition,
            pinyin=entry.pinyin,
            strokes=list(entry.strokes),
            medians=[as_points(median) for median in entry.medians],
        )

    def import_characters(self, records: Iterable[Dict[str, Any]]) -> List[CharacterEntry]:
        """Insert or update dictionary entries.

        Each record needs ``word``, ``strokes`` and ``medians`` (one median per
        stroke); ``definition`` and ``pinyin`` are optional.
        """
        entries = []
        for record in records:
            word = record["word"]
            strokes = list(record["strokes"])
            medians = [[list(point) for point in median] for median in record["medians"]]
            if len(strokes) != len(medians):
                raise ValueError(
                    f"Word {word!r} has {len(strokes)} strokes but {len(medians)} medians"
                )

            entry = self.get_entry(word)
            if entry is None:
                entry = CharacterEntry(word=word)
                self.db.add(entry)
            entry.definition = record.get("definition", "")
            entry.pinyin = record.get("pinyin", "")
            entry.strokes = strokes
            entry.medians = medians
            entries.append(entry)

        self.db.commit()
        logger.info(f"Imported {len(entries)} dictionary entries")
        return entries
