"""Flashcard store: write-once rows, bulk insert and bulk clear only."""
import logging
from typing import Iterable, List

import aiosqlite

from fiszki_bot.core.database import Database, init_database
from fiszki_bot.exceptions import StorageUnavailable
from fiszki_bot.quiz.models import Flashcard, flashcard_from_row

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = "id, lesson_id, question, answer, decoy1, decoy2, decoy3"


class FlashcardStore:
    """Query and bulk-write access to the `flashcards` table."""

    def __init__(self, db: Database):
        self.db = db
        # Bumped by clear_all() so callers can drop flashcards loaded before it
        self.generation = 0

    async def fetch_by_lesson(self, lesson_id: int) -> List[Flashcard]:
        """
        Get all flashcards of a lesson.

        Args:
            lesson_id: Lesson identifier

        Returns:
            Flashcards ordered by id, empty list if the lesson has none

        Raises:
            StorageUnavailable: If the database cannot be read
        """
        query = f"SELECT {_SELECT_COLUMNS} FROM flashcards WHERE lesson_id = ? ORDER BY id"
        try:
            rows = await self.db.fetchall(query, (lesson_id,))
        except aiosqlite.Error as e:
            raise StorageUnavailable(f"Cannot read lesson {lesson_id}: {e}") from e

        return [flashcard_from_row(row) for row in rows]

    async def insert_many(self, flashcards: Iterable[Flashcard]) -> List[Flashcard]:
        """
        Insert flashcards in a single transaction.

        Returns:
            Copies of the inserted flashcards carrying their new ids
        """
        query = """
            INSERT INTO flashcards (lesson_id, question, answer, decoy1, decoy2, decoy3)
            VALUES (?, ?, ?, ?, ?, ?)
        """

        inserted = []
        try:
            async with self.db.transaction() as conn:
                for card in flashcards:
                    cursor = await conn.execute(query, (
                        card.lesson_id, card.question, card.answer,
                        card.decoy1, card.decoy2, card.decoy3,
                    ))
                    inserted.append(card.with_id(cursor.lastrowid))
        except aiosqlite.Error as e:
            raise StorageUnavailable(f"Cannot insert flashcards: {e}") from e

        logger.debug("Inserted %d flashcards", len(inserted))
        return inserted

    async def count(self) -> int:
        """Total number of flashcards across all lessons."""
        try:
            row = await self.db.fetchone("SELECT COUNT(*) FROM flashcards")
        except aiosqlite.Error as e:
            raise StorageUnavailable(f"Cannot count flashcards: {e}") from e

        return row[0] if row else 0

    async def clear_all(self) -> int:
        """Delete every flashcard. Returns the number of rows removed."""
        try:
            removed = await self.db.execute("DELETE FROM flashcards")
        except aiosqlite.Error as e:
            raise StorageUnavailable(f"Cannot clear flashcards: {e}") from e

        self.generation += 1
        logger.warning("Removed all flashcards (%d rows)", removed)
        return removed


async def open_store(db_path: str) -> FlashcardStore:
    """
    Open the flashcard store at db_path.

    A database that cannot be initialized is not fatal: the store is still
    returned and its queries raise StorageUnavailable, which lesson sessions
    turn into an empty lesson.
    """
    try:
        db = await init_database(db_path)
    except StorageUnavailable as e:
        logger.error("Database unavailable, lessons will load empty: %s", e)
        db = Database(db_path)

    return FlashcardStore(db)
